"""
Planificateur APScheduler pour la supervision des terminaux de scan.

Le job s'exécute toutes les DEVICE_CHECK_INTERVAL_MINUTES et signale dans les
logs les terminaux sans scan réussi depuis plus de DEVICE_STALE_MINUTES.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from campus_attendance.config import settings
from campus_attendance.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _report_stale_devices() -> None:
    """
    Tâche planifiée : liste les terminaux silencieux et les journalise.
    Import local pour éviter les imports circulaires.
    """
    from campus_attendance.services.device_service import find_stale_devices

    db = SessionLocal()
    try:
        stale = find_stale_devices(db)
        for device in stale:
            logger.warning(
                "Terminal %s silencieux (dernier scan : %s)",
                device.device_code, device.last_seen or "jamais",
            )
        logger.info("Supervision terminaux : %d hors ligne", len(stale))
    except Exception as exc:
        logger.error("Erreur lors de la supervision des terminaux : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler désactivé (SCHEDULER_ENABLED=false).")
        return
    scheduler.add_job(
        _report_stale_devices,
        trigger="interval",
        minutes=settings.DEVICE_CHECK_INTERVAL_MINUTES,
        id="stale_devices_check",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré : supervision des terminaux toutes les %d minutes.",
        settings.DEVICE_CHECK_INTERVAL_MINUTES,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
