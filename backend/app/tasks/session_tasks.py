# backend/app/tasks/session_tasks.py
"""
Celery tasks for coaching sessions.

``sessions.send_booking_reminders`` notifies clients of tomorrow's (UTC)
scheduled or confirmed sessions.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from celery.utils.log import get_task_logger
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.session_service import SessionService
from app.tasks.celery_app import celery_app

logger = get_task_logger(__name__)


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Provide transactional scope for use in tasks."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@celery_app.task(name="sessions.send_booking_reminders", max_retries=0)
def send_booking_reminders() -> int:
    with _session_scope() as db:
        sent = SessionService(db).send_reminders()
    logger.info(f"Booking reminder run finished: {sent} sent")
    return sent
