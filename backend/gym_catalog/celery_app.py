"""
Celery application for off-request route maintenance.

Broker and result backend default to REDIS_URL and can be split with
CELERY_BROKER_URL / CELERY_RESULT_BACKEND.
"""
import logging

from celery import Celery
from celery.schedules import crontab

from gym_catalog.config import settings

# Workers log at INFO; keep query and pool chatter out of the task logs
for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

celery_app = Celery(
    "gym_catalog",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["gym_catalog.tasks.route_maintenance"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Batch outcomes are read back by the back-office for a day
    result_expires=86400,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Mount/dismount batches and cache warming on separate queues
    task_routes={
        "gym_catalog.tasks.route_maintenance.dismount_routes_task": {"queue": "lifecycle"},
        "gym_catalog.tasks.route_maintenance.mount_routes_task": {"queue": "lifecycle"},
        "gym_catalog.tasks.route_maintenance.warm_route_summaries": {"queue": "cache"},
    },
)

celery_app.conf.beat_schedule = {
    # Rebuild cached summaries of mounted routes (3am UTC)
    "warm-route-summaries": {
        "task": "gym_catalog.tasks.route_maintenance.warm_route_summaries",
        "schedule": crontab(minute=0, hour=3),
        "options": {"expires": 3600},
    },
}
