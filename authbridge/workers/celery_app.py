from __future__ import annotations

from celery import Celery

from authbridge.core.config import settings


def _create_celery() -> Celery:
    celery = Celery(
        "authbridge",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
    )
    celery.conf.update(
        task_default_queue="default",
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_always_eager=settings.ENV.lower() in {"test"},
        # Certificate jobs are consumed by an external worker; fail fast when the broker is gone
        broker_connection_retry_on_startup=False,
        broker_transport_options={"max_retries": 1},
    )
    return celery


celery_app = _create_celery()
