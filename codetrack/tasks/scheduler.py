import logging
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)
scheduler = BackgroundScheduler()


def init_scheduler(app):
    """Initialize and start the scheduler with app context."""
    if not app.config.get('SCHEDULER_ENABLED', False):
        logger.info("Scheduler disabled by config")
        return
    if scheduler.running:
        return

    interval = app.config.get('REFRESH_CHECK_MINUTES', 60)

    # Periodic sweep over stale coding profiles
    @scheduler.scheduled_job('interval', minutes=interval, id='refresh_stale',
                             max_instances=1, coalesce=True)
    def refresh_stale_job():
        with app.app_context():
            from codetrack.extensions import db
            from codetrack.services.refresh_service import RefreshService

            try:
                result = RefreshService().run_sweep()
                logger.info(
                    f"Scheduled refresh completed: "
                    f"refreshed={result['refreshed']}/{result['total']}"
                )
            except Exception as e:
                db.session.rollback()
                logger.error(f"Scheduled refresh failed: {e}")
            finally:
                db.session.remove()

    try:
        scheduler.start()
        logger.info(f"Scheduler started: refresh check every {interval} min")
    except Exception as e:
        logger.error(f"Scheduler failed to start: {e}")
