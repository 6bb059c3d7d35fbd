# backend/tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database shared with the app
through ``dependency_overrides[get_db]``; emails go to the console backend.
"""

import os

# Set testing mode BEFORE any app imports
os.environ["is_testing"] = "true"
os.environ["email_provider"] = "console"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, get_password_hash
from app.core.config import settings
from app.core.enums import Role, SessionStatus
from app.database import Base, get_db
from app.main import app
from app.models import Account, BookingType, CoachingSession, Discount, TimeSlot

settings.is_testing = True

TEST_PASSWORD = "TestPassword123!"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


def _create_account(db: Session, email: str, name: str, role: Role, **extra) -> Account:
    account = Account(
        email=email,
        name=name,
        password_hash=get_password_hash(TEST_PASSWORD),
        role=role.value,
        **extra,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def _auth_headers(account: Account) -> dict:
    token = create_access_token(data={"sub": account.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def test_user(db: Session) -> Account:
    return _create_account(db, "player@example.com", "Pat Player", Role.USER, country="ES")


@pytest.fixture
def test_user_2(db: Session) -> Account:
    return _create_account(db, "second.player@example.com", "Sam Second", Role.USER)


@pytest.fixture
def test_coach(db: Session) -> Account:
    return _create_account(
        db,
        "coach@example.com",
        "Casey Coach",
        Role.COACH,
        country="ES",
        bio="Former ATP player",
    )


@pytest.fixture
def test_coach_2(db: Session) -> Account:
    return _create_account(db, "coach2@example.com", "Robin Rival", Role.COACH, country="FR")


@pytest.fixture
def test_admin(db: Session) -> Account:
    return _create_account(db, "admin@example.com", "Alex Admin", Role.ADMIN)


@pytest.fixture
def auth_headers_user(test_user: Account) -> dict:
    return _auth_headers(test_user)


@pytest.fixture
def auth_headers_user_2(test_user_2: Account) -> dict:
    return _auth_headers(test_user_2)


@pytest.fixture
def auth_headers_coach(test_coach: Account) -> dict:
    return _auth_headers(test_coach)


@pytest.fixture
def auth_headers_coach_2(test_coach_2: Account) -> dict:
    return _auth_headers(test_coach_2)


@pytest.fixture
def auth_headers_admin(test_admin: Account) -> dict:
    return _auth_headers(test_admin)


@pytest.fixture
def test_booking_type(db: Session, test_coach: Account) -> BookingType:
    booking_type = BookingType(
        name="Private lesson",
        description="One hour on court",
        base_price=Decimal("50.00"),
        coach_id=test_coach.id,
    )
    db.add(booking_type)
    db.commit()
    db.refresh(booking_type)
    return booking_type


@pytest.fixture
def make_time_slot(db: Session, test_coach: Account):
    """Factory for slots of ``test_coach`` starting ``days_ahead`` days from now."""

    def _make(days_ahead: float = 2, coach: Account = None, **extra) -> TimeSlot:
        slot = TimeSlot(
            date_time=datetime.now(timezone.utc) + timedelta(days=days_ahead),
            duration_min=extra.pop("duration_min", 60),
            coach_id=(coach or test_coach).id,
            **extra,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def test_time_slot(make_time_slot) -> TimeSlot:
    return make_time_slot()


@pytest.fixture
def make_discount(db: Session, test_coach: Account):
    def _make(code: str = "SPRING10", amount: str = "10.00", **extra) -> Discount:
        discount = Discount(
            code=code,
            amount=Decimal(amount),
            expiry=extra.pop("expiry", datetime.now(timezone.utc) + timedelta(days=30)),
            max_usage=extra.pop("max_usage", 5),
            coach_id=extra.pop("coach_id", test_coach.id),
            **extra,
        )
        db.add(discount)
        db.commit()
        db.refresh(discount)
        return discount

    return _make


@pytest.fixture
def make_session(db: Session, test_user: Account, test_coach: Account, test_booking_type):
    """Factory for sessions between ``test_user`` and ``test_coach`` on a fresh slot."""

    def _make(
        days_ahead: float = 2,
        status: SessionStatus = SessionStatus.SCHEDULED,
        is_paid: bool = False,
        price: str = "50.00",
        **extra,
    ) -> CoachingSession:
        starts_at = datetime.now(timezone.utc) + timedelta(days=days_ahead)
        slot = TimeSlot(
            date_time=starts_at, duration_min=60, is_available=False, coach_id=test_coach.id
        )
        db.add(slot)
        db.flush()
        session = CoachingSession(
            date_time=starts_at,
            duration_min=60,
            price=Decimal(price),
            is_paid=is_paid,
            status=status.value,
            user_id=extra.pop("user_id", test_user.id),
            coach_id=test_coach.id,
            booking_type_id=test_booking_type.id,
            time_slot_id=slot.id,
            **extra,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    return _make


@pytest.fixture
def test_session(make_session) -> CoachingSession:
    return make_session()
