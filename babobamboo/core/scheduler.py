# ===================================
# babobamboo/core/scheduler.py
# ===================================
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.executors.pool import ThreadPoolExecutor
import logging

from babobamboo.core.config import settings

logger = logging.getLogger(__name__)

scheduler = None


def init_scheduler():
    """Initialiser APScheduler"""
    global scheduler

    if not settings.scheduler_enabled or scheduler is not None:
        return

    jobstores = {
        'default': SQLAlchemyJobStore(url=settings.database_url)
    }

    executors = {
        'default': ThreadPoolExecutor(4),
    }

    # Un seul balayage à la fois, les exécutions manquées sont fusionnées
    job_defaults = {
        'coalesce': True,
        'max_instances': 1
    }

    scheduler = BackgroundScheduler(
        jobstores=jobstores,
        executors=executors,
        job_defaults=job_defaults,
        timezone='UTC'
    )

    add_periodic_jobs()

    scheduler.start()
    logger.info("✓ APScheduler démarré")


def add_periodic_jobs():
    """Ajouter les tâches périodiques"""
    # Emails de notation dus (tous les jours, minuit UTC par défaut)
    scheduler.add_job(
        func=send_rating_emails_job,
        trigger='cron',
        hour=settings.rating_email_hour,
        minute=settings.rating_email_minute,
        id='send_rating_emails',
        replace_existing=True
    )


def send_rating_emails_job():
    """Job d'envoi des emails de notation"""
    try:
        from babobamboo.core.database import SessionLocal
        from babobamboo.services.email_service import EmailService
        from babobamboo.services.rating_service import RatingEmailSweep

        with SessionLocal() as db:
            sweep = RatingEmailSweep(
                db,
                EmailService(),
                frontend_url=settings.frontend_url,
                retry_days=settings.rating_email_retry_days,
            )
            result = sweep.run()
            logger.info("Emails de notation: %d tentés, %d envoyés, %d échecs",
                        result.attempted, result.sent, result.failed)
    except Exception as e:
        logger.error("Erreur envoi emails de notation: %s", e, exc_info=True)


def shutdown_scheduler():
    """Arrêter le scheduler"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("✓ APScheduler arrêté")
