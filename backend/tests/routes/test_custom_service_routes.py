"""Tests for /api/v1/custom-services."""

import pytest
from sqlalchemy.orm import Session

from app.core.enums import NotificationType
from app.models import CustomService, Message, Notification


@pytest.fixture
def make_custom_service(db: Session, test_coach):
    def _make(name="Match analysis", coach=None, **extra) -> CustomService:
        service = CustomService(
            name=name,
            base_price=extra.pop("base_price", 80),
            duration=extra.pop("duration", 90),
            coach_id=(coach or test_coach).id,
            **extra,
        )
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make


class TestCreate:
    def test_coach_creates(self, client, auth_headers_coach, test_coach, test_booking_type):
        response = client.post(
            "/api/v1/custom-services",
            headers=auth_headers_coach,
            json={
                "name": "Serve clinic",
                "base_price": 70,
                "duration": 45,
                "prefilled_booking_type_id": test_booking_type.id,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["coach_id"] == test_coach.id
        assert data["usage_count"] == 0
        assert data["is_template"] is False

    def test_prefilled_booking_type_must_be_own(
        self, client, auth_headers_coach_2, test_booking_type
    ):
        response = client.post(
            "/api/v1/custom-services",
            headers=auth_headers_coach_2,
            json={
                "name": "Serve clinic",
                "base_price": 70,
                "prefilled_booking_type_id": test_booking_type.id,
            },
        )
        assert response.status_code == 400

    def test_negative_price(self, client, auth_headers_coach):
        response = client.post(
            "/api/v1/custom-services",
            headers=auth_headers_coach,
            json={"name": "Broken", "base_price": -1},
        )
        assert response.status_code == 422

    def test_client_forbidden(self, client, auth_headers_user):
        response = client.post(
            "/api/v1/custom-services",
            headers=auth_headers_user,
            json={"name": "Nope", "base_price": 10},
        )
        assert response.status_code == 403


class TestVisibility:
    def test_coach_sees_own_and_public(
        self, client, auth_headers_coach, make_custom_service, test_coach_2
    ):
        own = make_custom_service("Own")
        public = make_custom_service("Public", coach=test_coach_2, is_public=True)
        make_custom_service("Private", coach=test_coach_2)

        response = client.get("/api/v1/custom-services", headers=auth_headers_coach)

        assert {s["id"] for s in response.json()} == {own.id, public.id}

    def test_client_sees_public_and_received(
        self,
        client,
        auth_headers_user,
        auth_headers_coach,
        make_custom_service,
        test_user,
    ):
        public = make_custom_service("Public", is_public=True)
        sent = make_custom_service("Sent")
        hidden = make_custom_service("Hidden")
        client.post(
            f"/api/v1/custom-services/{sent.id}/send-to-user",
            headers=auth_headers_coach,
            json={"user_id": test_user.id},
        )

        response = client.get("/api/v1/custom-services", headers=auth_headers_user)

        assert {s["id"] for s in response.json()} == {public.id, sent.id}
        denied = client.get(f"/api/v1/custom-services/{hidden.id}", headers=auth_headers_user)
        assert denied.status_code == 403

    def test_template_filter(self, client, auth_headers_admin, make_custom_service):
        template = make_custom_service("Template", is_template=True)
        make_custom_service("One-off")

        response = client.get(
            "/api/v1/custom-services", headers=auth_headers_admin, params={"is_template": True}
        )

        assert [s["id"] for s in response.json()] == [template.id]


class TestManage:
    def test_update_and_save_as_template(self, client, auth_headers_coach, make_custom_service):
        service = make_custom_service()

        updated = client.patch(
            f"/api/v1/custom-services/{service.id}",
            headers=auth_headers_coach,
            json={"base_price": 95},
        )
        template = client.post(
            f"/api/v1/custom-services/{service.id}/save-as-template", headers=auth_headers_coach
        )

        assert updated.json()["base_price"] == 95.0
        assert template.json()["is_template"] is True

    def test_other_coach_cannot_edit(self, client, auth_headers_coach_2, make_custom_service):
        service = make_custom_service()
        response = client.patch(
            f"/api/v1/custom-services/{service.id}",
            headers=auth_headers_coach_2,
            json={"name": "Mine now"},
        )
        assert response.status_code == 403

    def test_delete(self, client, auth_headers_coach, make_custom_service):
        service = make_custom_service()

        response = client.delete(
            f"/api/v1/custom-services/{service.id}", headers=auth_headers_coach
        )

        assert response.status_code == 204
        missing = client.get(f"/api/v1/custom-services/{service.id}", headers=auth_headers_coach)
        assert missing.status_code == 404


class TestSendToUser:
    def test_sends_message_and_notification(
        self, client, db: Session, auth_headers_coach, make_custom_service, test_user
    ):
        service = make_custom_service("Match analysis")

        response = client.post(
            f"/api/v1/custom-services/{service.id}/send-to-user",
            headers=auth_headers_coach,
            json={"user_id": test_user.id},
        )

        assert response.status_code == 200
        assert response.json() == {"message": f"Custom service sent to user {test_user.id}"}
        message = db.query(Message).filter_by(custom_service_id=service.id).one()
        assert message.message_type == "CUSTOM_SERVICE"
        assert message.content == "I've shared a custom service with you: Match analysis"
        assert (
            db.query(Notification)
            .filter_by(recipient_id=test_user.id, type=NotificationType.CUSTOM_SERVICE.value)
            .count()
            == 1
        )
        db.refresh(service)
        assert service.usage_count == 1

    def test_usage_counted_even_when_chat_fails(
        self, client, db: Session, auth_headers_coach, make_custom_service
    ):
        service = make_custom_service()

        response = client.post(
            f"/api/v1/custom-services/{service.id}/send-to-user",
            headers=auth_headers_coach,
            json={"user_id": "01ARZ3NDEKTSV4RRFFQ69G5FAV"},
        )

        assert response.status_code == 200
        db.refresh(service)
        assert service.usage_count == 1
        assert db.query(Message).count() == 0
