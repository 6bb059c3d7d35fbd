"""Tests for /api/v1/time-slots."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.enums import SessionStatus


def _future(days: float = 3, hour: int = 10) -> datetime:
    day = datetime.now(timezone.utc) + timedelta(days=days)
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


class TestTimeSlotReads:
    def test_lists_available_future_slots(self, client, make_time_slot):
        upcoming = make_time_slot(days_ahead=1)
        later = make_time_slot(days_ahead=5)
        make_time_slot(days_ahead=3, is_available=False)
        make_time_slot(days_ahead=-1)

        response = client.get("/api/v1/time-slots")

        assert response.status_code == 200
        assert [slot["id"] for slot in response.json()] == [upcoming.id, later.id]

    def test_end_date_and_coach_filters(self, client, make_time_slot, test_coach_2):
        soon = make_time_slot(days_ahead=1)
        make_time_slot(days_ahead=10)
        make_time_slot(days_ahead=1.5, coach=test_coach_2)

        response = client.get(
            "/api/v1/time-slots",
            params={
                "end_date": (datetime.now(timezone.utc) + timedelta(days=4)).isoformat(),
                "coach_id": soon.coach_id,
            },
        )
        assert [slot["id"] for slot in response.json()] == [soon.id]

    def test_get_missing(self, client):
        response = client.get("/api/v1/time-slots/01ARZ3NDEKTSV4RRFFQ69G5FAV")
        assert response.status_code == 404


class TestTimeSlotCreation:
    def test_coach_creates_slot(self, client, auth_headers_coach, test_coach):
        response = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": _future().isoformat(), "duration_min": 90},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["coach_id"] == test_coach.id
        assert data["duration_min"] == 90
        assert data["is_available"] is True

    def test_duration_below_minimum(self, client, auth_headers_coach):
        response = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": _future().isoformat(), "duration_min": 10},
        )
        assert response.status_code == 422

    def test_slot_in_the_past(self, client, auth_headers_coach):
        response = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": (datetime.now(timezone.utc) - timedelta(hours=2)).isoformat()},
        )
        assert response.status_code == 400

    def test_overlap_conflicts(self, client, auth_headers_coach):
        first = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": _future(hour=10).isoformat(), "duration_min": 60},
        )
        assert first.status_code == 201

        overlapping = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": _future(hour=10).replace(minute=30).isoformat()},
        )
        assert overlapping.status_code == 409

        adjacent = client.post(
            "/api/v1/time-slots",
            headers=auth_headers_coach,
            json={"date_time": _future(hour=11).isoformat()},
        )
        assert adjacent.status_code == 201

    def test_other_coach_may_overlap(self, client, auth_headers_coach, auth_headers_coach_2):
        payload = {"date_time": _future(hour=14).isoformat()}
        for headers in (auth_headers_coach, auth_headers_coach_2):
            response = client.post("/api/v1/time-slots", headers=headers, json=payload)
            assert response.status_code == 201


class TestTimeSlotChanges:
    def test_owner_toggles_availability(self, client, auth_headers_coach, test_time_slot):
        response = client.patch(
            f"/api/v1/time-slots/{test_time_slot.id}",
            headers=auth_headers_coach,
            json={"is_available": False},
        )
        assert response.status_code == 200
        assert response.json()["is_available"] is False

    def test_booked_slot_cannot_be_reopened(
        self, client, db: Session, auth_headers_coach, test_session
    ):
        response = client.patch(
            f"/api/v1/time-slots/{test_session.time_slot_id}",
            headers=auth_headers_coach,
            json={"is_available": True},
        )

        assert response.status_code == 409
        db.refresh(test_session.time_slot)
        assert test_session.time_slot.is_available is False

    def test_slot_reopens_after_cancellation(
        self, client, auth_headers_coach, make_session
    ):
        session = make_session(status=SessionStatus.CANCELLED)

        response = client.patch(
            f"/api/v1/time-slots/{session.time_slot_id}",
            headers=auth_headers_coach,
            json={"is_available": True},
        )

        assert response.status_code == 200
        assert response.json()["is_available"] is True

    def test_non_owner_forbidden(
self, client, auth_headers_coach_2, test_time_slot):
        response = client.delete(
            f"/api/v1/time-slots/{test_time_slot.id}", headers=auth_headers_coach_2
        )
        assert response.status_code == 403

    def test_delete_free_slot(self, client, auth_headers_coach, test_time_slot):
        response = client.delete(
            f"/api/v1/time-slots/{test_time_slot.id}", headers=auth_headers_coach
        )
        assert response.status_code == 204
        assert client.get(f"/api/v1/time-slots/{test_time_slot.id}").status_code == 404

    def test_delete_slot_with_active_session(self, client, auth_headers_coach, test_session):
        response = client.delete(
            f"/api/v1/time-slots/{test_session.time_slot_id}", headers=auth_headers_coach
        )
        assert response.status_code == 409

    def test_delete_slot_with_cancelled_session(self, client, auth_headers_coach, make_session):
        session = make_session(status=SessionStatus.CANCELLED)
        response = client.delete(
            f"/api/v1/time-slots/{session.time_slot_id}", headers=auth_headers_coach
        )
        assert response.status_code == 409
