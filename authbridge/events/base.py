"""Base class for queue events.

An event is a small message describing work for an asynchronous worker.
It is filled in through chained setters and handed to Celery by task name,
so the worker implementing it may live in a different codebase.
"""
from __future__ import annotations

import logging
from typing import Any

from kombu.exceptions import OperationalError

from authbridge import metrics
from authbridge.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


class Event:
    def __init__(self, queue: str, class_name: str):
        """
        Args:
            queue: Celery queue the worker listens on
            class_name: Registered task name on the worker side
        """
        self.queue = queue
        self.class_name = class_name
        self.project: str | None = None

    def get_queue(self) -> str:
        return self.queue

    def get_class(self) -> str:
        return self.class_name

    def set_project(self, project: str) -> Event:
        self.project = project
        return self

    def get_project(self) -> str | None:
        return self.project

    def build_payload(self) -> dict[str, Any]:
        """Task kwargs; subclasses extend this with their own fields."""
        if not self.project:
            raise ValueError(f"{type(self).__name__} requires a project before it can be triggered")
        return {"project": self.project}

    def trigger(self) -> str | bool:
        """
        Send the event to its worker queue.

        Returns:
            Celery task id, or False if the broker could not be reached

        Raises:
            ValueError: If the event is missing required fields
        """
        payload = self.build_payload()
        try:
            result = celery_app.send_task(self.class_name, kwargs=payload, queue=self.queue)
        except OperationalError as exc:
            metrics.queue_event(self.queue, "broker_error")
            logger.error("Failed to enqueue %s on %s: %s", self.class_name, self.queue, exc)
            return False
        metrics.queue_event(self.queue, "queued")
        logger.info("Enqueued %s on %s | task_id=%s", self.class_name, self.queue, result.id)
        return result.id

    def reset(self) -> Event:
        self.project = None
        return self
