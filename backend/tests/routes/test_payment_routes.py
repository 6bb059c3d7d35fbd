"""Tests for /api/v1/payments with PayPal served by an in-process transport."""

import httpx
import pytest
from sqlalchemy.orm import Session

from app.api.dependencies import get_payment_service
from app.core.enums import SessionStatus
from app.integrations.paypal_client import PayPalClient
from app.main import app
from app.services.payment_service import PaymentService


class FakePayPal:
    """Records orders and answers the OAuth and Orders endpoints."""

    def __init__(self):
        self.capture_status = "COMPLETED"
        self.fail_with = None
        self.reference_id = None
        self.orders = []
        self.captures = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "token"})
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"name": "INTERNAL_SERVER_ERROR"})
        if path == "/v2/checkout/orders":
            self.orders.append(request.content)
            return httpx.Response(
                201,
                json={
                    "id": "ORDER-1",
                    "links": [{"rel": "approve", "href": "https://paypal.test/checkout/ORDER-1"}],
                },
            )
        if request.method == "GET":
            unit = {"reference_id": self.reference_id} if self.reference_id else {}
            return httpx.Response(
                200, json={"id": path.rsplit("/", 1)[-1], "purchase_units": [unit]}
            )
        self.captures.append(path)
        return httpx.Response(
            201,
            json={
                "status": self.capture_status,
                "purchase_units": [{"payments": {"captures": [{"id": "CAP-1"}]}}],
            },
        )


@pytest.fixture
def paypal(client, db: Session):
    fake = FakePayPal()
    paypal_client = PayPalClient(
        client_id="id",
        client_secret="secret",
        base_url="https://paypal.test",
        transport=httpx.MockTransport(fake),
    )
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(db, paypal_client)
    return fake


class TestCreateOrder:
    def test_returns_approval_url(self, client, paypal, auth_headers_user, test_session):
        response = client.post(
            "/api/v1/payments/create-order",
            headers=auth_headers_user,
            json={"session_id": test_session.id},
        )

        assert response.status_code == 200
        assert response.json() == {
            "order_id": "ORDER-1",
            "approval_url": "https://paypal.test/checkout/ORDER-1",
        }
        assert len(paypal.orders) == 1

    def test_only_the_booking_client(self, client, paypal, auth_headers_user_2, test_session):
        response = client.post(
            "/api/v1/payments/create-order",
            headers=auth_headers_user_2,
            json={"session_id": test_session.id},
        )
        assert response.status_code == 403

    def test_already_paid(self, client, paypal, auth_headers_user, make_session):
        session = make_session(is_paid=True, status=SessionStatus.CONFIRMED)
        response = client.post(
            "/api/v1/payments/create-order",
            headers=auth_headers_user,
            json={"session_id": session.id},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Session already paid"

    def test_unknown_session(self, client, paypal, auth_headers_user):
        response = client.post(
            "/api/v1/payments/create-order",
            headers=auth_headers_user,
            json={"session_id": "01ARZ3NDEKTSV4RRFFQ69G5FAV"},
        )
        assert response.status_code == 404

    def test_paypal_failure(self, client, paypal, auth_headers_user, test_session):
        paypal.fail_with = 500
        response = client.post(
            "/api/v1/payments/create-order",
            headers=auth_headers_user,
            json={"session_id": test_session.id},
        )
        assert response.status_code == 502


class TestCaptureOrder:
    def test_marks_session_paid(
        self, client, db: Session, paypal, auth_headers_user, test_session
    ):
        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": test_session.id},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "payment_id": "ORDER-1", "capture_id": "CAP-1"}
        db.refresh(test_session)
        assert test_session.is_paid is True
        assert test_session.payment_id == "ORDER-1"
        assert test_session.status == SessionStatus.CONFIRMED.value

    def test_declined_capture(
        self, client, db: Session, paypal, auth_headers_user, test_session
    ):
        paypal.capture_status = "DECLINED"

        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": test_session.id},
        )

        assert response.status_code == 400
        db.refresh(test_session)
        assert test_session.is_paid is False

    def test_cancelled_session_is_not_captured(
        self, client, db: Session, paypal, auth_headers_user, test_session
    ):
        cancel = client.put(
            f"/api/v1/sessions/{test_session.id}/cancel", headers=auth_headers_user
        )
        assert cancel.status_code == 200

        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": test_session.id},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot pay for a cancelled session"
        assert paypal.captures == []
        db.refresh(test_session)
        assert test_session.is_paid is False
        assert test_session.status == SessionStatus.CANCELLED.value
        assert test_session.time_slot.is_available is True

    def test_paid_session_is_not_captured_again(
        self, client, db: Session, paypal, auth_headers_user, make_session
    ):
        session = make_session(
            is_paid=True, status=SessionStatus.CONFIRMED, payment_id="ORDER-0"
        )

        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": session.id},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Session already paid"
        assert paypal.captures == []
        db.refresh(session)
        assert session.payment_id == "ORDER-0"

    def test_order_for_another_session(
        self, client, db: Session, paypal, auth_headers_user, test_session
    ):
        paypal.reference_id = "01ARZ3NDEKTSV4RRFFQ69G5FAV"

        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": test_session.id},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Order does not belong to this session"
        assert paypal.captures == []

    def test_order_with_matching_reference(
        self, client, paypal, auth_headers_user, test_session
    ):
        paypal.reference_id = test_session.id

        response = client.post(
            "/api/v1/payments/capture-order",
            headers=auth_headers_user,
            json={"order_id": "ORDER-1", "session_id": test_session.id},
        )

        assert response.status_code == 200
        assert paypal.captures == ["/v2/checkout/orders/ORDER-1/capture"]


def test_requires_authentication(client, test_session):
    response = client.post("/api/v1/payments/create-order", json={"session_id": test_session.id})
    assert response.status_code == 401
