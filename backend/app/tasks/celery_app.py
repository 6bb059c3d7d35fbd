# backend/app/tasks/celery_app.py
"""
Celery application for Courtside background jobs.

The only periodic job is the daily booking reminder run. Redis is both
broker and result backend; under tests tasks execute eagerly in-process.
"""

import logging
from typing import Any

from celery import Celery, Task
from celery.signals import setup_logging

from app.core.config import settings
from app.tasks.beat_schedule import get_beat_schedule

logger = logging.getLogger(__name__)

TASK_MODULES = ("app.tasks.session_tasks",)


def _task_queue() -> str:
    # Production runs a dedicated notifications worker
    return "notifications" if settings.environment == "production" else "celery"


def create_celery_app() -> Celery:
    """Build the Celery app from settings and attach the beat schedule."""
    app = Celery(
        "courtside",
        broker=settings.broker_url,
        backend=settings.broker_url,
        task_cls=BaseTask,
    )
    app.conf.update(
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        worker_hijack_root_logger=False,
        task_acks_late=True,
        task_time_limit=300,
        task_always_eager=settings.is_testing,
        imports=TASK_MODULES,
        task_routes={"sessions.*": {"queue": _task_queue()}},
        beat_schedule=get_beat_schedule(settings.environment),
    )
    return app


@setup_logging.connect  # type: ignore[misc]
def config_loggers(*args: Any, **kwargs: Any) -> None:
    """Keep worker logs in the same format as the API process."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


class BaseTask(Task):  # type: ignore[misc]
    """Logs failed and retried task runs."""

    def on_failure(self, exc: Exception, task_id: str, args: Any, kwargs: Any, einfo: Any) -> None:
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}", exc_info=True)
        super().on_failure(exc, task_id, args, kwargs, einfo)

    def on_retry(self, exc: Exception, task_id: str, args: Any, kwargs: Any, einfo: Any) -> None:
        logger.warning(f"Task {self.name}[{task_id}] retry {self.request.retries}: {exc}")
        super().on_retry(exc, task_id, args, kwargs, einfo)


celery_app = create_celery_app()
