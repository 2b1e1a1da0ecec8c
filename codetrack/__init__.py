import logging
import os

from logging.handlers import RotatingFileHandler

from dotenv import load_dotenv
from flask import Flask, jsonify

from codetrack.config import config_map
from codetrack.extensions import db, migrate

__version__ = '0.3.0'


def create_app(config_name=None):
    """Application factory for creating the Flask app instance.

    Args:
        config_name: Configuration name ('development', 'production' or
                     'testing'). Defaults to FLASK_ENV environment variable
                     or 'development'.

    Returns:
        Configured Flask application instance.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # Load environment variables from the appropriate .env file
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    env_file = os.path.join(project_root, f'.env.{env}')
    if os.path.exists(env_file):
        load_dotenv(env_file)

    # A local .env overrides the environment-specific one
    dotenv_path = os.path.join(project_root, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path, override=True)

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)

    config_class = config_map.get(config_name, config_map['development'])
    app.config.from_object(config_class)

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)

    _register_blueprints(app)

    @app.route('/')
    def index():
        return jsonify({'name': 'codetrack', 'version': __version__})

    if app.config.get('SCHEDULER_ENABLED'):
        _init_scheduler(app)

    # Create database tables if they don't exist
    with app.app_context():
        from codetrack import models  # noqa: F401  (register tables)
        db.create_all()

    return app


def _configure_logging(app):
    """Set up RotatingFileHandler on the root logger."""
    max_bytes = app.config.get('LOG_FILE_MAX_BYTES', 0)
    if not max_bytes:
        return

    log_dir = os.path.join(app.instance_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, 'app.log')
    handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=app.config.get('LOG_FILE_BACKUP_COUNT', 3),
    )
    handler.setFormatter(logging.Formatter(
        app.config.get('LOG_FORMAT', '%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    ))
    handler.setLevel(logging.DEBUG)

    root = logging.getLogger()
    root.addHandler(handler)
    if root.level == logging.WARNING:
        root.setLevel(logging.INFO)


def _register_blueprints(app):
    """Register all application blueprints."""
    from codetrack.views.api import api_bp
    from codetrack.views.profiles import profiles_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(profiles_bp)


def _init_scheduler(app):
    """Initialize and start APScheduler for background refresh sweeps."""
    from codetrack.tasks.scheduler import init_scheduler
    init_scheduler(app)
