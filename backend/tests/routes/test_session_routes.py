"""Tests for /api/v1/sessions: booking rules, access and cancellation."""

from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session

from app.api.dependencies.services import get_email_service
from app.core.enums import NotificationType, SessionStatus
from app.core.exceptions import ServiceException
from app.main import app
from app.models import CoachingSession, Notification
from app.services.email_console import ConsoleEmailService


def _book(client, headers, booking_type, slot, **extra):
    payload = {"booking_type_id": booking_type.id, "time_slot_id": slot.id, **extra}
    return client.post("/api/v1/sessions", headers=headers, json=payload)


def _live_sessions_on(db: Session, slot) -> int:
    return (
        db.query(CoachingSession)
        .filter(
            CoachingSession.time_slot_id == slot.id,
            CoachingSession.status != SessionStatus.CANCELLED.value,
        )
        .count()
    )


class BrokenEmailService(ConsoleEmailService):
    def send_email(self, *args, **kwargs):
        raise ServiceException("Email provider unavailable")


class TestBooking:
    def test_books_slot(
        self, client, db: Session, auth_headers_user, test_user, test_booking_type, test_time_slot
    ):
        response = _book(
            client, auth_headers_user, test_booking_type, test_time_slot, notes="Backhand"
        )

        assert response.status_code == 201
        data = response.json()
        assert data["price"] == 50.0
        assert data["status"] == "SCHEDULED"
        assert data["is_paid"] is False
        assert data["user_id"] == test_user.id
        assert data["coach_id"] == test_booking_type.coach_id
        assert data["booking_type"]["name"] == test_booking_type.name
        db.refresh(test_time_slot)
        assert test_time_slot.is_available is False

    def test_booking_sends_confirmation(
        self, client, db: Session, auth_headers_user, test_user, test_booking_type, test_time_slot
    ):
        _book(client, auth_headers_user, test_booking_type, test_time_slot)

        notification = db.query(Notification).filter_by(recipient_id=test_user.id).one()
        assert notification.type == NotificationType.BOOKING_CONFIRMATION.value

    def test_discount_lowers_price_and_is_consumed(
        self,
        client,
        db: Session,
        auth_headers_user,
        test_booking_type,
        test_time_slot,
        make_discount,
    ):
        discount = make_discount(code="TEN", amount="10.00")

        response = _book(
            client, auth_headers_user, test_booking_type, test_time_slot, discount_code="TEN"
        )

        assert response.status_code == 201
        assert response.json()["price"] == 40.0
        assert response.json()["discount_code"] == "TEN"
        db.refresh(discount)
        assert discount.use_count == 1

    def test_full_discount_confirms_free_session(
        self, client, auth_headers_user, test_booking_type, test_time_slot, make_discount
    ):
        make_discount(code="FREEBIE", amount="80.00")

        response = _book(
            client, auth_headers_user, test_booking_type, test_time_slot, discount_code="FREEBIE"
        )

        data = response.json()
        assert data["price"] == 0.0
        assert data["is_paid"] is True
        assert data["status"] == "CONFIRMED"

    def test_unusable_discount_is_ignored(
        self,
        client,
        auth_headers_user,
        test_booking_type,
        test_time_slot,
        make_discount,
        test_coach_2,
    ):
        make_discount(code="OTHERCOACH", amount="10.00", coach_id=test_coach_2.id)

        response = _book(
            client,
            auth_headers_user,
            test_booking_type,
            test_time_slot,
            discount_code="OTHERCOACH",
        )

        assert response.status_code == 201
        assert response.json()["price"] == 50.0
        assert response.json()["discount_code"] is None

    def test_pending_limit(
        self, client, auth_headers_user, test_booking_type, test_time_slot, make_session
    ):
        for _ in range(3):
            make_session()

        response = _book(client, auth_headers_user, test_booking_type, test_time_slot)

        assert response.status_code == 400
        assert response.json()["detail"] == "Maximum of 3 pending bookings allowed"

    def test_paid_sessions_do_not_count_as_pending(
        self, client, auth_headers_user, test_booking_type, test_time_slot, make_session
    ):
        for _ in range(3):
            make_session(is_paid=True, status=SessionStatus.CONFIRMED)

        response = _book(client, auth_headers_user, test_booking_type, test_time_slot)
        assert response.status_code == 201

    def test_inactive_booking_type(
        self, client, db: Session, auth_headers_user, test_booking_type, test_time_slot
    ):
        test_booking_type.is_active = False
        db.commit()

        response = _book(client, auth_headers_user, test_booking_type, test_time_slot)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid booking type"

    def test_email_failure_does_not_fail_booking(
        self, client, db: Session, auth_headers_user, test_user, test_booking_type, test_time_slot
    ):
        app.dependency_overrides[get_email_service] = BrokenEmailService

        response = _book(client, auth_headers_user, test_booking_type, test_time_slot)

        assert response.status_code == 201
        assert _live_sessions_on(db, test_time_slot) == 1
        notification = db.query(Notification).filter_by(recipient_id=test_user.id).one()
        assert notification.type == NotificationType.BOOKING_CONFIRMATION.value

    def test_stale_availability_cannot_double_book(
        self,
        client,
        db: Session,
        auth_headers_user,
        auth_headers_user_2,
        test_booking_type,
        test_time_slot,
    ):
        first = _book(client, auth_headers_user, test_booking_type, test_time_slot)
        assert first.status_code == 201
        # A reader that saw the slot before it was taken
        test_time_slot.is_available = True
        db.commit()

        response = _book(client, auth_headers_user_2, test_booking_type, test_time_slot)

        assert response.status_code == 400
        assert response.json()["detail"] == "Time slot not available"
        assert _live_sessions_on(db, test_time_slot) == 1

    def test_slot_already_taken(
self, client, auth_headers_user, test_booking_type, make_time_slot):
        slot = make_time_slot(is_available=False)

        response = _book(client, auth_headers_user, test_booking_type, slot)

        assert response.status_code == 400
        assert response.json()["detail"] == "Time slot not available"

    def test_slot_of_another_coach(
        self, client, auth_headers_user, test_booking_type, make_time_slot, test_coach_2
    ):
        slot = make_time_slot(coach=test_coach_2)

        response = _book(client, auth_headers_user, test_booking_type, slot)
        assert response.status_code == 400

    def test_pending_limit_checked_before_booking_type(
        self, client, auth_headers_user, make_session, test_time_slot
    ):
        for _ in range(3):
            make_session()

        response = client.post(
            "/api/v1/sessions",
            headers=auth_headers_user,
            json={
                "booking_type_id": "01ARZ3NDEKTSV4RRFFQ69G5FAV",
                "time_slot_id": test_time_slot.id,
            },
        )
        assert response.json()["detail"] == "Maximum of 3 pending bookings allowed"


class TestSessionAccess:
    def test_client_and_coach_views(
        self, client, auth_headers_user, auth_headers_coach, auth_headers_user_2, test_session
    ):
        client_view = client.get("/api/v1/sessions", headers=auth_headers_user).json()
        assert [s["id"] for s in client_view] == [test_session.id]
        coach_view = client.get("/api/v1/sessions", headers=auth_headers_coach).json()
        assert [s["id"] for s in coach_view] == [test_session.id]
        assert client.get("/api/v1/sessions", headers=auth_headers_user_2).json() == []

    def test_status_filter(self, client, auth_headers_user, make_session):
        cancelled = make_session(status=SessionStatus.CANCELLED)
        make_session()

        response = client.get(
            "/api/v1/sessions", headers=auth_headers_user, params={"status": "CANCELLED"}
        )
        assert [s["id"] for s in response.json()] == [cancelled.id]

    def test_get_by_participant(self, client, auth_headers_coach, test_session):
        response = client.get(f"/api/v1/sessions/{test_session.id}", headers=auth_headers_coach)
        assert response.status_code == 200
        assert response.json()["user"]["id"] == test_session.user_id

    def test_get_by_stranger(self, client, auth_headers_user_2, test_session):
        response = client.get(f"/api/v1/sessions/{test_session.id}", headers=auth_headers_user_2)
        assert response.status_code == 403

    def test_admin_may_view(self, client, auth_headers_admin, test_session):
        response = client.get(f"/api/v1/sessions/{test_session.id}", headers=auth_headers_admin)
        assert response.status_code == 200

    def test_get_missing(self, client, auth_headers_user):
        response = client.get(
            "/api/v1/sessions/01ARZ3NDEKTSV4RRFFQ69G5FAV", headers=auth_headers_user
        )
        assert response.status_code == 404

    def test_update_notes_and_status(self, client, auth_headers_coach, test_session):
        response = client.patch(
            f"/api/v1/sessions/{test_session.id}",
            headers=auth_headers_coach,
            json={"notes": "Bring water", "status": "COMPLETED"},
        )
        assert response.status_code == 200
        assert response.json()["notes"] == "Bring water"
        assert response.json()["status"] == "COMPLETED"


    def test_patch_to_cancelled_releases_slot(
        self, client, db: Session, auth_headers_coach, test_session
    ):
        response = client.patch(
            f"/api/v1/sessions/{test_session.id}",
            headers=auth_headers_coach,
            json={"status": "CANCELLED"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        db.refresh(test_session)
        assert test_session.time_slot.is_available is True

    def test_cancelled_session_cannot_be_reopened(
        self,
        client,
        db: Session,
        auth_headers_user,
        auth_headers_user_2,
        test_booking_type,
        test_time_slot,
    ):
        booked = _book(client, auth_headers_user, test_booking_type, test_time_slot)
        session_id = booked.json()["id"]
        client.put(f"/api/v1/sessions/{session_id}/cancel", headers=auth_headers_user)
        rebook = _book(client, auth_headers_user_2, test_booking_type, test_time_slot)
        assert rebook.status_code == 201

        response = client.patch(
            f"/api/v1/sessions/{session_id}",
            headers=auth_headers_user,
            json={"status": "SCHEDULED"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Cancelled sessions cannot be reopened"
        assert _live_sessions_on(db, test_time_slot) == 1

    def test_notes_on_cancelled_session(self, client, auth_headers_user, make_session):
        session = make_session(status=SessionStatus.CANCELLED)

        response = client.patch(
            f"/api/v1/sessions/{session.id}",
            headers=auth_headers_user,
            json={"notes": "Rain", "status": "CANCELLED"},
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Rain"


class TestCancellation:
    def test_cancel_releases_slot(self, client, db: Session, auth_headers_user, test_session):
        response = client.put(
            f"/api/v1/sessions/{test_session.id}/cancel", headers=auth_headers_user
        )

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        db.refresh(test_session)
        assert test_session.time_slot.is_available is True

    def test_cancel_twice(self, client, auth_headers_user, make_session):
        session = make_session(status=SessionStatus.CANCELLED)
        response = client.put(f"/api/v1/sessions/{session.id}/cancel", headers=auth_headers_user)
        assert response.status_code == 400
        assert response.json()["detail"] == "Session already cancelled"

    def test_cannot_cancel_past_session(self, client, auth_headers_user, make_session):
        session = make_session(days_ahead=-1)
        response = client.put(f"/api/v1/sessions/{session.id}/cancel", headers=auth_headers_user)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot cancel past sessions"

    def test_stranger_cannot_cancel(self, client, auth_headers_user_2, test_session):
        response = client.put(
            f"/api/v1/sessions/{test_session.id}/cancel", headers=auth_headers_user_2
        )
        assert response.status_code == 403


class TestReminders:
    def test_admin_sends_reminders_for_tomorrow(
        self, client, db: Session, auth_headers_admin, make_session, test_user
    ):
        tomorrow_noon = (datetime.now(timezone.utc) + timedelta(days=1)).replace(
            hour=12, minute=0, second=0, microsecond=0
        )
        due = make_session()
        due.date_time = tomorrow_noon
        make_session(days_ahead=5)
        cancelled = make_session(status=SessionStatus.CANCELLED)
        cancelled.date_time = tomorrow_noon
        db.commit()

        response = client.post("/api/v1/sessions/send-reminders", headers=auth_headers_admin)

        assert response.status_code == 200
        assert response.json() == {"sent": 1}
        reminders = (
            db.query(Notification)
            .filter_by(recipient_id=test_user.id, type=NotificationType.BOOKING_REMINDER.value)
            .all()
        )
        assert len(reminders) == 1

    def test_only_admin(self, client, auth_headers_coach):
        response = client.post("/api/v1/sessions/send-reminders", headers=auth_headers_coach)
        assert response.status_code == 403
