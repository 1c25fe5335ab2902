from celery import Celery
from celery.schedules import crontab

from app.config import settings

celery_app = Celery(
    "appliance_support",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.telemetry"],
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_serializer="json",
    accept_content=["json"],
    # Telemetry is at-most-once: ack on receipt, never redeliver.
    task_acks_late=False,
    task_reject_on_worker_lost=False,
    task_ignore_result=True,
    task_always_eager=settings.celery_always_eager,
    beat_schedule={
        "cleanup-app-logs": {
            "task": "app.tasks.telemetry.cleanup_app_logs",
            "schedule": crontab(hour=3, minute=15),
        },
    },
)
