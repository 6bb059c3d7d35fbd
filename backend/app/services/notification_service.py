# backend/app/services/notification_service.py
"""
Notification service for Courtside.

Persists in-app notifications and, for booking confirmations and reminders,
also sends an email rendered from a Jinja2 template. Delivery side effects
never fail the operation that triggered them: callers use the ``notify_*``
helpers, which log and swallow provider errors.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jinja2 import TemplateError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_NOTIFICATION_PAGE_SIZE
from ..core.enums import NotificationChannel, NotificationPriority, NotificationType, Role
from ..core.exceptions import (
    DomainException,
    ForbiddenException,
    NotFoundException,
)
from ..models.account import Account
from ..models.coaching_session import CoachingSession
from ..models.notification import Notification
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .email import EmailSender, get_email_sender
from .template_service import TemplateService

logger = logging.getLogger(__name__)

BOOKING_CONFIRMATION_SUBJECT = "Booking Confirmation - Tennis Coaching Session"
BOOKING_REMINDER_SUBJECT = "Reminder: Your Tennis Coaching Session Is Tomorrow"


class NotificationService(BaseService):
    """In-app inbox plus templated email delivery."""

    def __init__(
        self,
        db: Session,
        email_sender: Optional[EmailSender] = None,
        template_service: Optional[TemplateService] = None,
    ):
        super().__init__(db)
        self.repository = RepositoryFactory.create_notification_repository(db)
        self.account_repository = RepositoryFactory.create_account_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.email_sender = email_sender or get_email_sender(db)
        self.template_service = template_service or TemplateService()

    # Inbox

    @BaseService.measure_operation("create_notification")
    def create_notification(
        self,
        recipient_id: str,
        notification_type: NotificationType,
        title: str,
        message: str,
        sender_id: Optional[str] = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        data: Optional[Dict[str, Any]] = None,
        channels: Optional[List[NotificationChannel]] = None,
    ) -> Notification:
        channel_values = [c.value for c in (channels or [NotificationChannel.IN_APP])]
        with self.transaction():
            notification = self.repository.create(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=notification_type.value,
                title=title,
                message=message,
                priority=priority.value,
                data=data,
                channels=channel_values,
                sent_at=datetime.now(timezone.utc),
            )
        self.logger.info(
            f"Notification {notification.id} ({notification_type.value}) created for {recipient_id}"
        )
        return notification

    def list_notifications(
        self,
        recipient_id: str,
        limit: int = DEFAULT_NOTIFICATION_PAGE_SIZE,
        offset: int = 0,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
    ) -> Tuple[List[Notification], int]:
        return self.repository.list_for_recipient(
            recipient_id, limit, offset, unread_only, notification_type
        )

    def get_unread_count(self, recipient_id: str) -> int:
        return self.repository.count_unread(recipient_id)

    def mark_as_read(self, notification_id: str, recipient_id: str) -> Notification:
        notification = self._get_owned(notification_id, recipient_id)
        with self.transaction():
            if not notification.is_read:
                notification.mark_read()
        return notification

    def mark_all_as_read(self, recipient_id: str) -> int:
        with self.transaction():
            return self.repository.mark_all_read(recipient_id)

    def delete_notification(self, notification_id: str, recipient_id: str) -> None:
        notification = self._get_owned(notification_id, recipient_id)
        with self.transaction():
            self.db.delete(notification)

    def _get_owned(self, notification_id: str, recipient_id: str) -> Notification:
        notification = self.repository.get_for_recipient(notification_id, recipient_id)
        if notification is None:
            raise NotFoundException("Notification not found")
        return notification

    @BaseService.measure_operation("send_system_announcement")
    def send_system_announcement(
        self,
        title: str,
        message: str,
        target_roles: Optional[Iterable[Role]] = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        sender_id: Optional[str] = None,
    ) -> int:
        """Fan an announcement out to active accounts in ``target_roles`` (default: all)."""
        roles = {role.value for role in (target_roles or list(Role))}
        recipients = [
            account
            for account in self.account_repository.find_by(is_active=True)
            if account.role in roles
        ]
        with self.transaction():
            for account in recipients:
                self.repository.create(
                    recipient_id=account.id,
                    sender_id=sender_id,
                    type=NotificationType.SYSTEM_ANNOUNCEMENT.value,
                    title=title,
                    message=message,
                    priority=priority.value,
                    channels=[NotificationChannel.IN_APP.value],
                    sent_at=datetime.now(timezone.utc),
                )
        self.logger.info(f"System announcement '{title}' sent to {len(recipients)} accounts")
        return len(recipients)

    # Email

    @BaseService.measure_operation("send_email")
    def send_email(
        self, to_email: str, subject: str, html: str, text: Optional[str] = None
    ) -> Dict[str, Any]:
        """Send an ad-hoc email through the configured provider."""
        response = self.email_sender.send_email(
            to_email=to_email, subject=subject, html_content=html, text_content=text
        )
        return {"success": True, "message_id": response.get("id")}

    @BaseService.measure_operation("send_booking_confirmation")
    def send_booking_confirmation(self, session: CoachingSession) -> Notification:
        """In-app confirmation for the client plus the confirmation email."""
        booking_type_name = session.booking_type.name if session.booking_type else "Session"
        notification = self.create_notification(
            recipient_id=session.user_id,
            notification_type=NotificationType.BOOKING_CONFIRMATION,
            title="Booking confirmed",
            message=(
                f"Your {booking_type_name} session with {session.coach.name} on "
                f"{session.starts_at:%Y-%m-%d %H:%M} UTC is booked."
            ),
            sender_id=session.coach_id,
            priority=NotificationPriority.HIGH,
            data={"session_id": session.id},
            channels=[NotificationChannel.IN_APP, NotificationChannel.EMAIL],
        )
        html = self.template_service.render_template(
            "email/booking_confirmation.html", context=self._session_context(session)
        )
        self.email_sender.send_email(
            to_email=session.user.email,
            subject=BOOKING_CONFIRMATION_SUBJECT,
            html_content=html,
        )
        return notification

    @BaseService.measure_operation("send_booking_reminder")
    def send_booking_reminder(self, session: CoachingSession) -> Notification:
        notification = self.create_notification(
            recipient_id=session.user_id,
            notification_type=NotificationType.BOOKING_REMINDER,
            title="Session tomorrow",
            message=(
                f"Reminder: your session with {session.coach.name} starts "
                f"{session.starts_at:%Y-%m-%d %H:%M} UTC."
            ),
            sender_id=session.coach_id,
            priority=NotificationPriority.HIGH,
            data={"session_id": session.id},
            channels=[NotificationChannel.IN_APP, NotificationChannel.EMAIL],
        )
        html = self.template_service.render_template(
            "email/booking_reminder.html", context=self._session_context(session)
        )
        self.email_sender.send_email(
            to_email=session.user.email, subject=BOOKING_REMINDER_SUBJECT, html_content=html
        )
        return notification

    def confirm_booking(self, session_id: str, account: Account) -> Notification:
        """Re-send a booking confirmation for a session the caller can see."""
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found")
        if not (account.is_admin or session.is_participant(account.id)):
            raise ForbiddenException("You do not have access to this session")
        return self.send_booking_confirmation(session)

    @staticmethod
    def _session_context(session: CoachingSession) -> Dict[str, Any]:
        return {
            "session_id": session.id,
            "user_name": session.user.name,
            "coach_name": session.coach.name,
            "booking_type_name": session.booking_type.name if session.booking_type else "Session",
            "date_time": session.starts_at,
            "duration_min": session.duration_min,
            "price": session.price,
            "is_paid": session.is_paid,
        }

    # Best-effort helpers used by other services

    def notify_booking_confirmation(self, session: CoachingSession) -> bool:
        return self._best_effort("booking confirmation", self.send_booking_confirmation, session)

    def notify_booking_reminder(self, session: CoachingSession) -> bool:
        return self._best_effort("booking reminder", self.send_booking_reminder, session)

    def notify_role_change(self, account: Account, old_role: str, changed_by: str) -> bool:
        return self._best_effort(
            "role change",
            self.create_notification,
            recipient_id=account.id,
            notification_type=NotificationType.ROLE_CHANGE,
            title="Your role has changed",
            message=f"Your account role changed from {old_role} to {account.role}.",
            sender_id=changed_by,
            priority=NotificationPriority.HIGH,
            data={"old_role": old_role, "new_role": account.role},
        )

    def notify_message_received(self, sender: Account, receiver_id: str, message_id: str) -> bool:
        return self._best_effort(
            "message received",
            self.create_notification,
            recipient_id=receiver_id,
            notification_type=NotificationType.MESSAGE_RECEIVED,
            title="New message",
            message=f"You have a new message from {sender.name}.",
            sender_id=sender.id,
            priority=NotificationPriority.LOW,
            data={"message_id": message_id},
        )

    def notify_custom_service(
        self, service_id: str, service_name: str, coach: Account, recipient_id: str
    ) -> bool:
        return self._best_effort(
            "custom service",
            self.create_notification,
            recipient_id=recipient_id,
            notification_type=NotificationType.CUSTOM_SERVICE,
            title="New custom service",
            message=f"{coach.name} shared a custom service with you: {service_name}",
            sender_id=coach.id,
            data={"custom_service_id": service_id},
        )

    def _best_effort(self, label: str, func, *args, **kwargs) -> bool:
        try:
            func(*args, **kwargs)
            return True
        except (DomainException, TemplateError) as e:
            self.logger.error(f"Failed to send {label} notification: {str(e)}")
            return False
