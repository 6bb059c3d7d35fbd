"""Tests for /api/v1/notifications."""

import pytest
from sqlalchemy.orm import Session

from app.core.enums import NotificationType
from app.models import Notification


@pytest.fixture
def make_notification(db: Session, test_user):
    def _make(notification_type=NotificationType.MESSAGE_RECEIVED, recipient=None, **extra):
        notification = Notification(
            type=notification_type.value,
            title=extra.pop("title", "Heads up"),
            message=extra.pop("message", "Something happened"),
            recipient_id=(recipient or test_user).id,
            **extra,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    return _make


class TestInbox:
    def test_lists_own_notifications(
        self, client, auth_headers_user, make_notification, test_user_2
    ):
        mine = make_notification()
        make_notification(recipient=test_user_2)

        response = client.get("/api/v1/notifications", headers=auth_headers_user)

        data = response.json()
        assert data["total"] == 1
        assert data["limit"] == 50
        assert data["offset"] == 0
        assert [n["id"] for n in data["notifications"]] == [mine.id]

    def test_filters(self, client, auth_headers_user, make_notification):
        make_notification(NotificationType.MESSAGE_RECEIVED, is_read=True)
        unread_role = make_notification(NotificationType.ROLE_CHANGE)

        unread = client.get(
            "/api/v1/notifications", headers=auth_headers_user, params={"unread_only": True}
        ).json()
        by_type = client.get(
            "/api/v1/notifications", headers=auth_headers_user, params={"type": "ROLE_CHANGE"}
        ).json()

        assert [n["id"] for n in unread["notifications"]] == [unread_role.id]
        assert [n["id"] for n in by_type["notifications"]] == [unread_role.id]

    def test_pagination_bounds(self, client, auth_headers_user):
        response = client.get(
            "/api/v1/notifications", headers=auth_headers_user, params={"limit": 101}
        )
        assert response.status_code == 422

    def test_unread_count_and_mark_all(self, client, auth_headers_user, make_notification):
        make_notification()
        make_notification()
        make_notification(is_read=True)

        count = client.get("/api/v1/notifications/unread-count", headers=auth_headers_user)
        marked = client.patch("/api/v1/notifications/mark-all-read", headers=auth_headers_user)
        after = client.get("/api/v1/notifications/unread-count", headers=auth_headers_user)

        assert count.json() == {"count": 2}
        assert marked.json() == {"marked_count": 2}
        assert after.json() == {"count": 0}

    def test_mark_one_read(self, client, auth_headers_user, make_notification):
        notification = make_notification()

        response = client.patch(
            f"/api/v1/notifications/{notification.id}/read", headers=auth_headers_user
        )

        assert response.status_code == 200
        assert response.json()["is_read"] is True
        assert response.json()["read_at"] is not None

    def test_cannot_touch_others_notifications(
        self, client, auth_headers_user_2, make_notification
    ):
        notification = make_notification()

        read = client.patch(
            f"/api/v1/notifications/{notification.id}/read", headers=auth_headers_user_2
        )
        delete = client.delete(
            f"/api/v1/notifications/{notification.id}", headers=auth_headers_user_2
        )

        assert read.status_code == 404
        assert delete.status_code == 404

    def test_delete(self, client, db: Session, auth_headers_user, make_notification):
        notification = make_notification()

        response = client.delete(
            f"/api/v1/notifications/{notification.id}", headers=auth_headers_user
        )

        assert response.status_code == 204
        assert db.query(Notification).count() == 0


class TestAnnouncement:
    def test_fans_out_to_target_roles(
        self, client, db: Session, auth_headers_admin, test_user, test_user_2, test_coach
    ):
        response = client.post(
            "/api/v1/notifications/announcement",
            headers=auth_headers_admin,
            json={
                "title": "Courts closed",
                "message": "Courts are closed on Monday",
                "target_roles": ["USER"],
                "priority": "HIGH",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Announcement sent", "recipients": 2}
        recipients = {
            n.recipient_id
            for n in db.query(Notification).filter_by(
                type=NotificationType.SYSTEM_ANNOUNCEMENT.value
            )
        }
        assert recipients == {test_user.id, test_user_2.id}

    def test_defaults_to_every_role(
        self, client, auth_headers_admin, test_user, test_coach, test_admin
    ):
        response = client.post(
            "/api/v1/notifications/announcement",
            headers=auth_headers_admin,
            json={"title": "Hello", "message": "Welcome to the new season"},
        )
        assert response.json()["recipients"] == 3

    def test_admin_only(self, client, auth_headers_coach):
        response = client.post(
            "/api/v1/notifications/announcement",
            headers=auth_headers_coach,
            json={"title": "Hello", "message": "Hi"},
        )
        assert response.status_code == 403


class TestEmail:
    def test_admin_sends_through_console_provider(self, client, auth_headers_admin):
        response = client.post(
            "/api/v1/notifications/email",
            headers=auth_headers_admin,
            json={"to": "player@example.com", "subject": "Hi", "html": "<p>Hi</p>"},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["message_id"].startswith("console-")

    def test_invalid_address(self, client, auth_headers_admin):
        response = client.post(
            "/api/v1/notifications/email",
            headers=auth_headers_admin,
            json={"to": "not-an-email", "subject": "Hi", "html": "<p>Hi</p>"},
        )
        assert response.status_code == 422


class TestConfirmBooking:
    def test_resends_confirmation(self, client, auth_headers_user, test_session, test_user):
        response = client.post(
            "/api/v1/notifications/confirm",
            headers=auth_headers_user,
            json={"session_id": test_session.id},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "BOOKING_CONFIRMATION"
        assert data["recipient_id"] == test_user.id
        assert data["data"] == {"session_id": test_session.id}

    def test_outsider(self, client, auth_headers_user_2, test_session):
        response = client.post(
            "/api/v1/notifications/confirm",
            headers=auth_headers_user_2,
            json={"session_id": test_session.id},
        )
        assert response.status_code == 403
