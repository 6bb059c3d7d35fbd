# backend/app/services/custom_service_service.py
"""
Custom service service for Courtside.

Coaches author ad-hoc offerings and share them with a client through chat.
Visibility: admins see everything, coaches see their own plus public ones,
clients see public ones plus those that were sent to them.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import CUSTOM_SERVICE_SHARE_TEMPLATE
from ..core.enums import MessageType
from ..core.exceptions import (
    DomainException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.account import Account
from ..models.custom_service import CustomService
from ..models.message import Message
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .message_service import MessageService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class CustomServiceService(BaseService):
    def __init__(
        self,
        db: Session,
        message_service: Optional[MessageService] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db)
        self.repository = RepositoryFactory.create_custom_service_repository(db)
        self.booking_type_repository = RepositoryFactory.create_booking_type_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)
        self.message_repository = RepositoryFactory.create_message_repository(db)
        self.notification_service = notification_service or NotificationService(db)
        self.message_service = message_service or MessageService(
            db, notification_service=self.notification_service
        )

    @BaseService.measure_operation("create_custom_service")
    def create_custom_service(self, coach: Account, data: Dict[str, Any]) -> CustomService:
        self._check_prefilled(coach.id, data)
        with self.transaction():
            service = self.repository.create(coach_id=coach.id, **data)
        self.log_operation("create_custom_service", custom_service_id=service.id)
        return service

    def list_custom_services(
        self,
        account: Account,
        is_template: Optional[bool] = None,
        is_public: Optional[bool] = None,
    ) -> List[CustomService]:
        if account.is_admin:
            return self.repository.list_all(is_template, is_public)
        if account.is_coach:
            return self.repository.list_for_coach(account.id, is_template, is_public)
        received = self.message_repository.custom_service_ids_sent_to(account.id)
        return self.repository.list_for_client(received, is_template, is_public)

    def get_custom_service(self, service_id: str, account: Account) -> CustomService:
        service = self._get(service_id)
        if not self._can_view(service, account):
            raise ForbiddenException("You do not have access to this custom service")
        return service

    @BaseService.measure_operation("update_custom_service")
    def update_custom_service(
        self, service_id: str, account: Account, data: Dict[str, Any]
    ) -> CustomService:
        service = self._owned(service_id, account)
        self._check_prefilled(service.coach_id, data)
        with self.transaction():
            self.repository.update_entity(service, **data)
        return service

    @BaseService.measure_operation("delete_custom_service")
    def delete_custom_service(self, service_id: str, account: Account) -> None:
        service = self._owned(service_id, account)
        with self.transaction():
            self.repository.delete(service.id)
        self.log_operation("delete_custom_service", custom_service_id=service_id)

    def save_as_template(self, service_id: str, account: Account) -> CustomService:
        service = self._owned(service_id, account)
        with self.transaction():
            service.is_template = True
        return service

    @BaseService.measure_operation("send_custom_service")
    def send_to_user(
        self,
        service_id: str,
        account: Account,
        user_id: str,
        message: Optional[str] = None,
    ) -> Optional[Message]:
        """
        Share a service with a client through chat.

        The chat message and the notification are best effort; the usage
        counter is always incremented.

        Returns:
            The chat message, or None when it could not be sent
        """
        service = self._owned(service_id, account)
        chat_message = None
        try:
            chat_message = self.message_service.send_message(
                account,
                user_id,
                message or CUSTOM_SERVICE_SHARE_TEMPLATE.format(name=service.name),
                message_type=MessageType.CUSTOM_SERVICE,
                custom_service_id=service.id,
            )
        except DomainException as e:
            self.logger.error(
                f"Failed to create custom service message for {service.id} to {user_id}: {e}"
            )

        with self.transaction():
            service.usage_count = (service.usage_count or 0) + 1

        self.notification_service.notify_custom_service(service.id, service.name, account, user_id)
        return chat_message

    def _get(self, service_id: str) -> CustomService:
        service = self.repository.get_by_id(service_id)
        if service is None:
            raise NotFoundException("Custom service not found", code="CUSTOM_SERVICE_NOT_FOUND")
        return service

    def _owned(self, service_id: str, account: Account) -> CustomService:
        service = self._get(service_id)
        if not (account.is_admin or service.coach_id == account.id):
            raise ForbiddenException("You can only manage your own custom services")
        return service

    def _can_view(self, service: CustomService, account: Account) -> bool:
        if account.is_admin or service.is_public or service.coach_id == account.id:
            return True
        if account.is_coach:
            return False
        return service.id in self.message_repository.custom_service_ids_sent_to(account.id)

    def _check_prefilled(self, coach_id: str, data: Dict[str, Any]) -> None:
        booking_type_id = data.get("prefilled_booking_type_id")
        if booking_type_id:
            booking_type = self.booking_type_repository.get_by_id(booking_type_id)
            if booking_type is None or booking_type.coach_id != coach_id:
                raise ValidationException(
                    "Prefilled booking type must belong to the coach",
                    code="INVALID_PREFILLED_BOOKING_TYPE",
                )
        time_slot_id = data.get("prefilled_time_slot_id")
        if time_slot_id:
            slot = self.time_slot_repository.get_by_id(time_slot_id)
            if slot is None or slot.coach_id != coach_id:
                raise ValidationException(
                    "Prefilled time slot must belong to the coach",
                    code="INVALID_PREFILLED_TIME_SLOT",
                )
