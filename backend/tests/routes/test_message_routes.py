"""Tests for /api/v1/messages."""

from sqlalchemy.orm import Session

from app.api.dependencies import get_notification_service
from app.auth import create_access_token
from app.core.enums import NotificationType
from app.core.exceptions import ServiceException
from app.main import app
from app.models import Conversation, Message, Notification
from app.services.notification_service import NotificationService


class BrokenNotificationService(NotificationService):
    def create_notification(self, *args, **kwargs):
        raise ServiceException("Notification store unavailable")


def send(client, headers, receiver_id, content="Hello coach", **extra):
    return client.post(
        "/api/v1/messages",
        headers=headers,
        json={"receiver_id": receiver_id, "content": content, **extra},
    )


class TestSendMessage:
    def test_creates_conversation_and_notifies(
        self, client, db: Session, auth_headers_user, test_user, test_coach
    ):
        response = send(client, auth_headers_user, test_coach.id)

        assert response.status_code == 201
        data = response.json()
        assert data["sender_id"] == test_user.id
        assert data["sender_type"] == "USER"
        assert data["receiver_type"] == "COACH"
        assert data["message_type"] == "TEXT"
        assert data["is_read"] is False

        conversation = db.query(Conversation).one()
        assert conversation.id == data["conversation_id"]
        assert sorted(conversation.participants) == sorted([test_user.id, test_coach.id])
        assert conversation.last_message_id == data["id"]

        notification = db.query(Notification).filter_by(recipient_id=test_coach.id).one()
        assert notification.type == NotificationType.MESSAGE_RECEIVED.value

    def test_reuses_conversation_for_pair(
        self, client, db: Session, auth_headers_user, auth_headers_coach, test_user, test_coach
    ):
        first = send(client, auth_headers_user, test_coach.id).json()
        reply = send(client, auth_headers_coach, test_user.id, "Hi!").json()

        assert reply["conversation_id"] == first["conversation_id"]
        assert db.query(Conversation).count() == 1

    def test_unknown_receiver(self, client, auth_headers_user):
        response = send(client, auth_headers_user, "01ARZ3NDEKTSV4RRFFQ69G5FAV")
        assert response.status_code == 404

    def test_message_to_self(self, client, auth_headers_user, test_user):
        response = send(client, auth_headers_user, test_user.id)
        assert response.status_code == 400

    def test_unknown_session(self, client, auth_headers_user, test_coach):
        response = send(
            client, auth_headers_user, test_coach.id, session_id="01ARZ3NDEKTSV4RRFFQ69G5FAV"
        )
        assert response.status_code == 404

    def test_session_of_another_pair(
        self, client, db: Session, auth_headers_user_2, test_coach, test_session
    ):
        response = send(client, auth_headers_user_2, test_coach.id, session_id=test_session.id)

        assert response.status_code == 403
        assert db.query(Message).count() == 0

    def test_notification_failure_keeps_message(
        self, client, db: Session, auth_headers_user, test_coach
    ):
        app.dependency_overrides[get_notification_service] = lambda: BrokenNotificationService(db)

        response = send(client, auth_headers_user, test_coach.id)

        assert response.status_code == 201
        assert db.query(Message).filter_by(id=response.json()["id"]).count() == 1
        assert db.query(Notification).count() == 0

    def test_empty_content(self, client, auth_headers_user, test_coach):
        response = send(client, auth_headers_user, test_coach.id, content="")
        assert response.status_code == 422


class TestBookingRequest:
    def test_default_text(self, client, auth_headers_user, test_coach, test_booking_type):
        response = client.post(
            "/api/v1/messages/booking-request",
            headers=auth_headers_user,
            json={"coach_id": test_coach.id, "booking_type_id": test_booking_type.id},
        )

        assert response.status_code == 201
        assert response.json()["message_type"] == "BOOKING_REQUEST"
        assert response.json()["content"] == "I'd like to book a Private lesson session."

    def test_booking_type_of_another_coach(
        self, client, auth_headers_user, test_coach_2, test_booking_type
    ):
        response = client.post(
            "/api/v1/messages/booking-request",
            headers=auth_headers_user,
            json={"coach_id": test_coach_2.id, "booking_type_id": test_booking_type.id},
        )
        assert response.status_code == 400


class TestReadingMessages:
    def test_inbox_and_unread_count(
        self, client, auth_headers_user, auth_headers_coach, test_coach
    ):
        send(client, auth_headers_user, test_coach.id, "one")
        send(client, auth_headers_user, test_coach.id, "two")

        inbox = client.get("/api/v1/messages", headers=auth_headers_coach).json()
        assert sorted(m["content"] for m in inbox) == ["one", "two"]
        count = client.get("/api/v1/messages/unread-count", headers=auth_headers_coach).json()
        assert count == {"count": 2}
        mine = client.get("/api/v1/messages/unread-count", headers=auth_headers_user).json()
        assert mine == {"count": 0}

    def test_conversation_with_user(
        self, client, auth_headers_user, auth_headers_coach, test_user, test_coach, test_coach_2
    ):
        send(client, auth_headers_user, test_coach.id, "first")
        send(client, auth_headers_coach, test_user.id, "second")
        send(client, auth_headers_user, test_coach_2.id, "elsewhere")

        response = client.get(
            f"/api/v1/messages/conversation/{test_coach.id}", headers=auth_headers_user
        )

        assert [m["content"] for m in response.json()] == ["first", "second"]

    def test_session_messages_paginated(
        self, client, auth_headers_user, auth_headers_user_2, test_coach, test_session
    ):
        for n in range(3):
            send(client, auth_headers_user, test_coach.id, f"msg {n}", session_id=test_session.id)

        response = client.get(
            f"/api/v1/messages/session/{test_session.id}",
            headers=auth_headers_user,
            params={"page": 2, "limit": 2},
        )

        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 2
        assert data["limit"] == 2
        assert len(data["messages"]) == 1

        outsider = client.get(
            f"/api/v1/messages/session/{test_session.id}", headers=auth_headers_user_2
        )
        assert outsider.status_code == 403

    def test_get_message_access(
        self, client, auth_headers_user, auth_headers_user_2, test_coach
    ):
        message = send(client, auth_headers_user, test_coach.id).json()

        own = client.get(f"/api/v1/messages/{message['id']}", headers=auth_headers_user)
        other = client.get(f"/api/v1/messages/{message['id']}", headers=auth_headers_user_2)

        assert own.status_code == 200
        assert other.status_code == 403

    def test_only_receiver_marks_read(
        self, client, auth_headers_user, auth_headers_coach, test_coach
    ):
        message = send(client, auth_headers_user, test_coach.id).json()

        by_sender = client.put(f"/api/v1/messages/{message['id']}/read", headers=auth_headers_user)
        by_receiver = client.put(
            f"/api/v1/messages/{message['id']}/read", headers=auth_headers_coach
        )

        assert by_sender.status_code == 403
        assert by_receiver.status_code == 200
        assert by_receiver.json()["is_read"] is True
        assert by_receiver.json()["read_at"] is not None


class TestLiveMessages:
    def test_send_publishes_to_participants(
        self, client, monkeypatch, auth_headers_user, test_coach, test_session
    ):
        published = []

        async def fake_publish(message, broadcast=None):
            published.append(message)
            return 3

        monkeypatch.setattr("app.services.message_stream.publish_message", fake_publish)

        response = send(client, auth_headers_user, test_coach.id, session_id=test_session.id)

        assert response.status_code == 201
        assert [m["id"] for m in published] == [response.json()["id"]]
        assert published[0]["session_id"] == test_session.id

    def test_stream_requires_authentication(self, client):
        assert client.get("/api/v1/messages/stream").status_code == 401
        assert client.get("/api/v1/messages/stream", params={"token": "bad"}).status_code == 401

    def test_inactive_account_cannot_stream(self, client, db: Session, test_user):
        test_user.is_active = False
        db.commit()
        token = create_access_token(data={"sub": test_user.id})

        response = client.get("/api/v1/messages/stream", params={"token": token})

        assert response.status_code == 400

    def test_session_stream_for_outsider(self, client, auth_headers_user_2, test_session):
        response = client.get(
            f"/api/v1/messages/session/{test_session.id}/stream", headers=auth_headers_user_2
        )
        assert response.status_code == 403

    def test_session_stream_for_unknown_session(self, client, auth_headers_user):
        response = client.get(
            "/api/v1/messages/session/01ARZ3NDEKTSV4RRFFQ69G5FAV/stream",
            headers=auth_headers_user,
        )
        assert response.status_code == 404
