# backend/app/tasks/__init__.py
"""
Celery tasks package for Courtside.

This package contains the asynchronous tasks, currently the daily
booking reminder run.
"""

from app.tasks.celery_app import BaseTask, celery_app
from app.tasks.session_tasks import send_booking_reminders

__all__ = [
    "celery_app",
    "BaseTask",
    "send_booking_reminders",
]

# This allows running celery with: celery -A app.tasks worker
