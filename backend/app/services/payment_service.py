# backend/app/services/payment_service.py
"""
PayPal payment service for Courtside.

Creates a PayPal checkout order for an unpaid session and, once the client
approved it, captures the order and marks the session paid.
"""

import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import PAYMENT_CANCEL_PATH, PAYMENT_SUCCESS_PATH
from ..core.enums import SessionStatus
from ..core.exceptions import (
    BadGatewayException,
    ForbiddenException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from ..integrations.paypal_client import PayPalClient, PayPalError
from ..models.account import Account
from ..models.coaching_session import CoachingSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

CAPTURE_COMPLETED = "COMPLETED"


def build_paypal_client() -> PayPalClient:
    if not settings.paypal_client_id or settings.paypal_client_secret is None:
        raise ServiceException("PayPal is not configured", code="PAYPAL_NOT_CONFIGURED")
    return PayPalClient(
        client_id=settings.paypal_client_id,
        client_secret=settings.paypal_client_secret,
        base_url=settings.paypal_base_url,
        timeout=settings.paypal_timeout_seconds,
    )


class PaymentService(BaseService):
    def __init__(self, db: Session, paypal_client: Optional[PayPalClient] = None):
        super().__init__(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self._paypal_client = paypal_client

    @property
    def paypal(self) -> PayPalClient:
        if self._paypal_client is None:
            self._paypal_client = build_paypal_client()
        return self._paypal_client

    def _own_session(self, session_id: str, user: Account) -> CoachingSession:
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if session.user_id != user.id:
            raise ForbiddenException("You can only pay for your own sessions")
        return session

    @staticmethod
    def _ensure_payable(session: CoachingSession) -> None:
        if session.status == SessionStatus.CANCELLED.value:
            raise ValidationException(
                "Cannot pay for a cancelled session", code="SESSION_CANCELLED"
            )
        if session.is_paid:
            raise ValidationException("Session already paid", code="SESSION_ALREADY_PAID")

    def _paypal_call(self, operation: str, call: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        try:
            return call()
        except PayPalError as exc:
            prometheus_metrics.inc_payment(operation, "error")
            raise BadGatewayException(
                "PayPal request failed",
                code="PAYPAL_ERROR",
                details={"status_code": exc.status_code},
            ) from exc

    @BaseService.measure_operation("create_order")
    def create_order(self, session_id: str, user: Account) -> Dict[str, Any]:
        """
        Raises:
            NotFoundException: Session does not exist
            ForbiddenException: Caller did not book the session
            ValidationException: Session already paid or cancelled
            BadGatewayException: PayPal rejected or could not be reached
        """
        session = self._own_session(session_id, user)
        self._ensure_payable(session)

        booking_type_name = session.booking_type.name if session.booking_type else "Session"
        order = self._paypal_call(
            "create_order",
            lambda: self.paypal.create_order(
                amount=session.price,
                currency=settings.payment_currency,
                description=f"{booking_type_name} - {session.user.name}",
                return_url=f"{settings.frontend_url}{PAYMENT_SUCCESS_PATH}",
                cancel_url=f"{settings.frontend_url}{PAYMENT_CANCEL_PATH}",
                reference_id=session.id,
            ),
        )

        prometheus_metrics.inc_payment("create_order", "success")
        self.log_operation("create_order", session_id=session.id, order_id=order.get("id"))
        return {"order_id": order["id"], "approval_url": PayPalClient.approval_url(order)}

    @BaseService.measure_operation("capture_order")
    def capture_order(self, order_id: str, session_id: str, user: Account) -> Dict[str, Any]:
        """
        Capture an approved order for one of the caller's unpaid, live sessions.

        The order is looked up first so an order created for another session
        is never captured against this one.

        Raises:
            ValidationException: Session paid, cancelled, order mismatch or declined
            BadGatewayException: PayPal rejected or could not be reached
        """
        session = self._own_session(session_id, user)
        self._ensure_payable(session)

        order = self._paypal_call("capture_order", lambda: self.paypal.get_order(order_id))
        references = PayPalClient.reference_ids(order)
        if references and session.id not in references:
            prometheus_metrics.inc_payment("capture_order", "mismatch")
            raise ValidationException(
                "Order does not belong to this session",
                code="PAYMENT_ORDER_MISMATCH",
                details={"order_id": order_id},
            )

        capture = self._paypal_call("capture_order", lambda: self.paypal.capture_order(order_id))

        if capture.get("status") != CAPTURE_COMPLETED:
            prometheus_metrics.inc_payment("capture_order", "declined")
            raise ValidationException(
                "Payment capture failed",
                code="PAYMENT_CAPTURE_FAILED",
                details={"status": capture.get("status")},
            )

        with self.transaction():
            session.mark_paid(order_id)
            if session.time_slot is not None:
                session.time_slot.is_available = False

        prometheus_metrics.inc_payment("capture_order", "success")
        self.log_operation("capture_order", session_id=session.id, order_id=order_id)
        return {
            "success": True,
            "payment_id": order_id,
            "capture_id": PayPalClient.capture_id(capture),
        }
