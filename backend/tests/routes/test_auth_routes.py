"""Tests for /api/v1/auth."""

from sqlalchemy.orm import Session

from app.models import Account, RefreshToken


class TestSignup:
    def test_signup_returns_tokens_and_marks_online(self, client, db: Session):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "New.Player@example.com", "password": "Secret123!", "name": "New"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"] and data["refresh_token"]
        assert data["account"]["role"] == "USER"
        assert data["account"]["email"] == "new.player@example.com"
        account = db.query(Account).filter_by(email="new.player@example.com").one()
        assert account.is_online is True
        assert "password_hash" not in data["account"]

    def test_signup_as_coach(self, client):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "c@example.com", "password": "Secret123!", "name": "C", "role": "COACH"},
        )
        assert response.status_code == 201
        assert response.json()["account"]["role"] == "COACH"

    def test_signup_as_admin_is_rejected(self, client):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": "a@example.com", "password": "Secret123!", "name": "A", "role": "ADMIN"},
        )
        assert response.status_code == 400

    def test_duplicate_email_conflicts(self, client, test_user):
        response = client.post(
            "/api/v1/auth/signup",
            json={"email": test_user.email, "password": "Secret123!", "name": "Dup"},
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"


class TestLogin:
    def test_login_success(self, client, db: Session, test_user, test_password):
        response = client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": test_password}
        )

        assert response.status_code == 200
        assert response.json()["account"]["id"] == test_user.id
        db.refresh(test_user)
        assert test_user.is_online is True

    def test_wrong_password(self, client, test_user):
        response = client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": "nope-nope"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/login", json={"email": "ghost@example.com", "password": "whatever"}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_inactive_account(self, client, db: Session, test_user, test_password):
        test_user.is_active = False
        db.commit()

        response = client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": test_password}
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Account is inactive"


class TestRefreshAndLogout:
    def _login(self, client, account, password):
        response = client.post(
            "/api/v1/auth/login", json={"email": account.email, "password": password}
        )
        return response.json()

    def test_refresh_rotates_token(self, client, test_user, test_password):
        tokens = self._login(client, test_user, test_password)

        response = client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["refresh_token"] != tokens["refresh_token"]

        # The old refresh token was revoked
        replay = client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert replay.status_code == 401

    def test_refresh_with_garbage_token(self, client):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"})
        assert response.status_code == 401

    def test_access_token_cannot_refresh(self, client, test_user, test_password):
        tokens = self._login(client, test_user, test_password)
        response = client.post(
            "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        assert response.status_code == 401

    def test_logout_revokes_and_marks_offline(self, client, db: Session, test_user, test_password):
        tokens = self._login(client, test_user, test_password)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = client.post("/api/v1/auth/logout", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        db.refresh(test_user)
        assert test_user.is_online is False
        assert db.query(RefreshToken).filter_by(account_id=test_user.id).count() == 0

    def test_logout_requires_auth(self, client):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 401
