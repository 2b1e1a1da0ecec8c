import os


class BaseConfig:
    """Base configuration shared across all environments."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-change-me')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///dev.db'
    )

    # Refresh policy
    STALENESS_HOURS = float(os.environ.get('STALENESS_HOURS', '24'))
    REFRESH_MAX_WORKERS = int(os.environ.get('REFRESH_MAX_WORKERS', '4'))

    # Stats provider settings
    SCRAPER_RATE_LIMIT = float(os.environ.get('SCRAPER_RATE_LIMIT', '0.5'))
    PROVIDER_TIMEOUT = float(os.environ.get('PROVIDER_TIMEOUT', '20'))

    # Scheduler
    SCHEDULER_ENABLED = os.environ.get(
        'SCHEDULER_ENABLED', 'false'
    ).lower() in ('true', '1', 'yes')
    REFRESH_CHECK_MINUTES = int(os.environ.get('REFRESH_CHECK_MINUTES', '60'))

    # File logging (disabled when max bytes is 0)
    LOG_FILE_MAX_BYTES = int(os.environ.get('LOG_FILE_MAX_BYTES', '0'))
    LOG_FILE_BACKUP_COUNT = int(os.environ.get('LOG_FILE_BACKUP_COUNT', '3'))


class DevelopmentConfig(BaseConfig):
    """Development environment configuration."""

    DEBUG = True
    SCHEDULER_ENABLED = False


class ProductionConfig(BaseConfig):
    """Production environment configuration."""

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///prod.db'
    )
    SCHEDULER_ENABLED = os.environ.get(
        'SCHEDULER_ENABLED', 'true'
    ).lower() in ('true', '1', 'yes')
    LOG_FILE_MAX_BYTES = int(
        os.environ.get('LOG_FILE_MAX_BYTES', str(5 * 1024 * 1024))
    )


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    SCHEDULER_ENABLED = False
    SCRAPER_RATE_LIMIT = 0.0
    REFRESH_MAX_WORKERS = 2
    LOG_FILE_MAX_BYTES = 0
    SERVER_NAME = 'localhost'


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}
