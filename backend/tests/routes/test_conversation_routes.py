"""Tests for /api/v1/conversations."""

import pytest


@pytest.fixture
def conversation(client, auth_headers_user, test_coach):
    """A user/coach conversation with two unread messages for the coach."""
    for content in ("Hi", "Are you free on Friday?"):
        response = client.post(
            "/api/v1/messages",
            headers=auth_headers_user,
            json={"receiver_id": test_coach.id, "content": content},
        )
    return response.json()["conversation_id"]


class TestListing:
    def test_summary_for_each_participant(
        self, client, conversation, auth_headers_user, auth_headers_coach, test_user, test_coach
    ):
        coach_view = client.get("/api/v1/conversations", headers=auth_headers_coach).json()
        user_view = client.get("/api/v1/conversations", headers=auth_headers_user).json()

        assert [c["id"] for c in coach_view] == [conversation]
        assert coach_view[0]["other_participant"]["id"] == test_user.id
        assert coach_view[0]["unread_count"] == 2
        assert coach_view[0]["last_message"]["content"] == "Are you free on Friday?"
        assert user_view[0]["other_participant"]["id"] == test_coach.id
        assert user_view[0]["unread_count"] == 0

    def test_outsider_sees_nothing(self, client, conversation, auth_headers_user_2):
        assert client.get("/api/v1/conversations", headers=auth_headers_user_2).json() == []
        response = client.get(
            f"/api/v1/conversations/{conversation}", headers=auth_headers_user_2
        )
        assert response.status_code == 403

    def test_admin_can_open(self, client, conversation, auth_headers_admin):
        response = client.get(f"/api/v1/conversations/{conversation}", headers=auth_headers_admin)
        assert response.status_code == 200

    def test_missing(self, client, auth_headers_user):
        response = client.get(
            "/api/v1/conversations/01ARZ3NDEKTSV4RRFFQ69G5FAV", headers=auth_headers_user
        )
        assert response.status_code == 404


class TestPinning:
    def test_coach_pins_and_unpins(self, client, conversation, auth_headers_coach, test_coach):
        pinned = client.put(
            f"/api/v1/conversations/{conversation}/pin", headers=auth_headers_coach
        ).json()
        assert pinned["is_pinned"] is True
        assert pinned["pinned_by"] == test_coach.id

        only_pinned = client.get(
            "/api/v1/conversations", headers=auth_headers_coach, params={"is_pinned": True}
        ).json()
        assert [c["id"] for c in only_pinned] == [conversation]

        unpinned = client.put(
            f"/api/v1/conversations/{conversation}/unpin", headers=auth_headers_coach
        ).json()
        assert unpinned["is_pinned"] is False
        assert unpinned["pinned_at"] is None

    def test_client_cannot_pin(self, client, conversation, auth_headers_user):
        response = client.put(
            f"/api/v1/conversations/{conversation}/pin", headers=auth_headers_user
        )
        assert response.status_code == 403


class TestConversationMessages:
    def test_messages_oldest_first(self, client, conversation, auth_headers_coach):
        response = client.get(
            f"/api/v1/conversations/{conversation}/messages", headers=auth_headers_coach
        )

        data = response.json()
        assert data["total"] == 2
        assert [m["content"] for m in data["messages"]] == ["Hi", "Are you free on Friday?"]

    def test_mark_read_counts_only_received(
        self, client, conversation, auth_headers_user, auth_headers_coach
    ):
        by_sender = client.put(
            f"/api/v1/conversations/{conversation}/read", headers=auth_headers_user
        )
        assert by_sender.json() == {"updated_count": 0}

        by_receiver = client.put(
            f"/api/v1/conversations/{conversation}/read", headers=auth_headers_coach
        )
        assert by_receiver.json() == {"updated_count": 2}

        summary = client.get(
            f"/api/v1/conversations/{conversation}", headers=auth_headers_coach
        ).json()
        assert summary["unread_count"] == 0
