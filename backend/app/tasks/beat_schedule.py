# backend/app/tasks/beat_schedule.py
"""
Celery Beat schedule configuration for Courtside.

Tasks are scheduled using crontab expressions for precise timing control.
"""

from typing import Any, Dict

from celery.schedules import crontab

CELERYBEAT_SCHEDULE: Dict[str, Dict[str, Any]] = {
    # Reminders cover the whole of tomorrow (UTC), so one run per day
    "send-booking-reminders": {
        "task": "sessions.send_booking_reminders",
        "schedule": crontab(minute=0, hour=9),  # Daily at 09:00 UTC
        # For testing: uncomment the line below to run every minute
        # "schedule": crontab(minute="*/1"),
        "options": {"queue": "notifications", "priority": 5},
    },
}


def get_beat_schedule(environment: str = "production") -> Dict[str, Dict[str, Any]]:
    """Return the beat schedule; queues collapse onto the default queue outside production."""
    if environment == "production":
        return CELERYBEAT_SCHEDULE
    return {
        name: {**entry, "options": {**entry["options"], "queue": "celery"}}
        for name, entry in CELERYBEAT_SCHEDULE.items()
    }
