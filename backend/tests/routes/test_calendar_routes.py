"""Tests for /api/v1/calendar."""

from sqlalchemy.orm import Session


class TestCreateEvent:
    def test_creates_event_for_participant(
        self, client, db: Session, auth_headers_user, test_session, test_user, test_coach
    ):
        response = client.post(
            "/api/v1/calendar/events",
            headers=auth_headers_user,
            json={"session_id": test_session.id},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["event_id"].startswith("event_")
        assert data["summary"] == "Tennis coaching: Private lesson"
        assert data["attendees"] == [test_user.email, test_coach.email]
        db.refresh(test_session)
        assert test_session.calendar_event_id == data["event_id"]

    def test_is_idempotent(self, client, auth_headers_user, auth_headers_coach, test_session):
        first = client.post(
            "/api/v1/calendar/events",
            headers=auth_headers_user,
            json={"session_id": test_session.id},
        ).json()
        second = client.post(
            "/api/v1/calendar/events",
            headers=auth_headers_coach,
            json={"session_id": test_session.id},
        ).json()

        assert first["event_id"] == second["event_id"]

    def test_outsider(self, client, auth_headers_user_2, test_session):
        response = client.post(
            "/api/v1/calendar/events",
            headers=auth_headers_user_2,
            json={"session_id": test_session.id},
        )
        assert response.status_code == 403


class TestDeleteEvent:
    def test_clears_event(self, client, db: Session, auth_headers_coach, test_session):
        event_id = client.post(
            "/api/v1/calendar/events",
            headers=auth_headers_coach,
            json={"session_id": test_session.id},
        ).json()["event_id"]

        response = client.delete(f"/api/v1/calendar/events/{event_id}", headers=auth_headers_coach)

        assert response.status_code == 204
        db.refresh(test_session)
        assert test_session.calendar_event_id is None

    def test_unknown_event(self, client, auth_headers_coach):
        response = client.delete(
            f"/api/v1/calendar/events/event_{'0' * 26}", headers=auth_headers_coach
        )
        assert response.status_code == 404

    def test_malformed_event_id(self, client, auth_headers_coach):
        response = client.delete("/api/v1/calendar/events/not-an-event", headers=auth_headers_coach)
        assert response.status_code == 422
