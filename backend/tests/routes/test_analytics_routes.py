"""Tests for /api/v1/analytics."""

import csv
import io

from app.core.enums import SessionStatus


class TestDashboard:
    def test_coach_dashboard_is_scoped(
        self, client, auth_headers_coach, auth_headers_coach_2, make_session
    ):
        make_session(status=SessionStatus.COMPLETED)
        make_session()

        own = client.get("/api/v1/analytics/dashboard", headers=auth_headers_coach).json()
        other = client.get("/api/v1/analytics/dashboard", headers=auth_headers_coach_2).json()

        assert own["user_statistics"]["total_users"] == 1
        assert own["financial_analytics"]["total_revenue"] == 50.0
        assert own["financial_analytics"]["pending_sessions"] == 1
        assert own["session_metrics"]["total_sessions"] == 2
        assert own["session_metrics"]["sessions_by_status"]["completed"] == 1
        assert "system_metrics" not in own
        assert "platform_growth" not in own
        assert other["user_statistics"]["total_users"] == 0
        assert other["financial_analytics"]["total_revenue"] == 0.0

    def test_admin_dashboard_includes_platform_sections(
        self, client, auth_headers_admin, test_coach, test_coach_2
    ):
        response = client.get("/api/v1/analytics/dashboard", headers=auth_headers_admin)

        data = response.json()
        assert data["system_metrics"]["total_coaches"] == 2
        assert set(data["platform_growth"]) == {
            "user_growth_rate",
            "revenue_growth_rate",
            "session_growth_rate",
        }

    def test_discount_reduces_revenue(
        self, client, auth_headers_coach, make_session, make_discount
    ):
        discount = make_discount(code="TEN", amount="10.00")
        make_session(status=SessionStatus.COMPLETED, discount_id=discount.id)

        response = client.get("/api/v1/analytics/revenue", headers=auth_headers_coach)

        assert response.json()["total_revenue"] == 40.0
        assert response.json()["top_booking_types"][0]["name"] == "Private lesson"

    def test_clients_are_forbidden(self, client, auth_headers_user):
        response = client.get("/api/v1/analytics/dashboard", headers=auth_headers_user)
        assert response.status_code == 403


class TestPeriods:
    def test_custom_range_needs_dates(self, client, auth_headers_admin):
        response = client.get(
            "/api/v1/analytics/users",
            headers=auth_headers_admin,
            params={"time_range": "custom"},
        )
        assert response.status_code == 400

    def test_custom_range(self, client, auth_headers_admin):
        response = client.get(
            "/api/v1/analytics/sessions",
            headers=auth_headers_admin,
            params={
                "time_range": "custom",
                "start_date": "2026-01-01T00:00:00Z",
                "end_date": "2026-02-01T00:00:00Z",
            },
        )
        assert response.status_code == 200
        assert response.json()["total_sessions"] == 0

    def test_unknown_preset(self, client, auth_headers_admin):
        response = client.get(
            "/api/v1/analytics/users",
            headers=auth_headers_admin,
            params={"time_range": "last_century"},
        )
        assert response.status_code == 422


class TestAdminOnly:
    def test_system_and_growth(self, client, auth_headers_admin, auth_headers_coach):
        assert client.get("/api/v1/analytics/system", headers=auth_headers_admin).status_code == 200
        assert client.get("/api/v1/analytics/growth", headers=auth_headers_admin).status_code == 200
        assert client.get("/api/v1/analytics/system", headers=auth_headers_coach).status_code == 403
        assert client.get("/api/v1/analytics/growth", headers=auth_headers_coach).status_code == 403

    def test_custom_service_stats(self, client, auth_headers_coach):
        response = client.get("/api/v1/analytics/custom-services", headers=auth_headers_coach)
        assert response.json() == {
            "total_custom_services": 0,
            "templates_created": 0,
            "public_services": 0,
            "total_usage": 0,
        }


class TestExport:
    def test_json_download(self, client, auth_headers_coach):
        response = client.get("/api/v1/analytics/export", headers=auth_headers_coach)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="analytics-coach-')
        assert disposition.endswith('.json"')
        assert "user_statistics" in response.json()

    def test_csv_download(self, client, auth_headers_admin):
        response = client.get(
            "/api/v1/analytics/export", headers=auth_headers_admin, params={"format": "csv"}
        )

        assert response.headers["content-type"].startswith("text/csv")
        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0] == ["section", "metric", "value"]
        assert {row[0] for row in rows[1:]} >= {"user_statistics", "system_metrics"}

    def test_unsupported_format(self, client, auth_headers_admin):
        response = client.get(
            "/api/v1/analytics/export", headers=auth_headers_admin, params={"format": "xlsx"}
        )
        assert response.status_code == 400
