"""Tests for /api/v1/booking-types."""

from sqlalchemy.orm import Session


class TestBookingTypeReads:
    def test_public_list(self, client, test_booking_type):
        response = client.get("/api/v1/booking-types")

        assert response.status_code == 200
        assert [bt["id"] for bt in response.json()] == [test_booking_type.id]

    def test_inactive_types_are_hidden(self, client, db: Session, test_booking_type):
        test_booking_type.is_active = False
        db.commit()

        assert client.get("/api/v1/booking-types").json() == []

    def test_by_coach(self, client, test_booking_type, test_coach, test_coach_2):
        own = client.get(f"/api/v1/booking-types/coach/{test_coach.id}").json()
        other = client.get(f"/api/v1/booking-types/coach/{test_coach_2.id}").json()

        assert [bt["id"] for bt in own] == [test_booking_type.id]
        assert other == []

    def test_get_missing(self, client):
        response = client.get("/api/v1/booking-types/01ARZ3NDEKTSV4RRFFQ69G5FAV")
        assert response.status_code == 404


class TestBookingTypeWrites:
    def test_coach_creates(self, client, auth_headers_coach, test_coach):
        response = client.post(
            "/api/v1/booking-types",
            headers=auth_headers_coach,
            json={"name": "Group clinic", "base_price": 25},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["coach_id"] == test_coach.id
        assert data["base_price"] == 25.0
        assert data["is_active"] is True

    def test_user_cannot_create(self, client, auth_headers_user):
        response = client.post(
            "/api/v1/booking-types",
            headers=auth_headers_user,
            json={"name": "Nope", "base_price": 10},
        )
        assert response.status_code == 403

    def test_owner_updates(self, client, auth_headers_coach, test_booking_type):
        response = client.patch(
            f"/api/v1/booking-types/{test_booking_type.id}",
            headers=auth_headers_coach,
            json={"base_price": 65.5},
        )
        assert response.status_code == 200
        assert response.json()["base_price"] == 65.5

    def test_other_coach_cannot_update(self, client, auth_headers_coach_2, test_booking_type):
        response = client.patch(
            f"/api/v1/booking-types/{test_booking_type.id}",
            headers=auth_headers_coach_2,
            json={"name": "Hijacked"},
        )
        assert response.status_code == 403

    def test_delete_is_soft(self, client, db: Session, auth_headers_coach, test_booking_type):
        response = client.delete(
            f"/api/v1/booking-types/{test_booking_type.id}", headers=auth_headers_coach
        )

        assert response.status_code == 204
        db.refresh(test_booking_type)
        assert test_booking_type.is_active is False
