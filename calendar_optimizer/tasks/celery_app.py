# calendar_optimizer/tasks/celery_app.py
"""
Celery application configuration.

Sets up the Celery app with Redis as the broker, JSON serialization, and the
beat schedule for the suggestion expiry sweep.
"""

import os

from celery import Celery
from celery.schedules import crontab

from ..core.config import settings


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Celery: Configured Celery application instance
    """
    # Priority: CELERY_BROKER_URL -> settings.redis_url
    broker_url = os.getenv("CELERY_BROKER_URL") or settings.redis_url
    result_backend = os.getenv("CELERY_RESULT_BACKEND") or broker_url

    celery_app = Celery(
        "calendar_optimizer",
        broker=broker_url,
        backend=result_backend,
        include=["calendar_optimizer.tasks.optimization_tasks"],
    )

    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=4,
        beat_schedule={
            "expire-optimization-suggestions": {
                "task": "expire_optimization_suggestions",
                "schedule": crontab(minute=0),  # hourly
            },
        },
    )

    return celery_app


celery_app = create_celery_app()
