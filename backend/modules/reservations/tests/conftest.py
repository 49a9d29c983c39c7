import itertools
import pytest
from datetime import date, time, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from core.database import Base, get_db
from app.main import app
from modules.reservations.config import ReservationConfig
from modules.reservations.models import Reservation, ReservationStatus
from modules.reservations.services.slot_locks import SlotLockRegistry
from modules.reservations.services.table_inventory import (
    TableInventory,
    default_inventory,
    get_table_inventory,
)

SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def next_weekday(weekday: int) -> date:
    """First date after today falling on ``weekday`` (Monday is 0)."""
    day = date.today() + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


@pytest.fixture
def add_confirmed(db_session):
    """Insert a confirmed reservation directly, bypassing the resolver."""
    counter = itertools.count(1)

    def _add(unit_id, table_ids, party_size, reservation_date, reservation_time, email=None):
        n = next(counter)
        reservation = Reservation(
            confirmation_code=f"TEST-{n:04d}",
            cancellation_token=f"token-{n:04d}",
            guest_name="Fixture",
            guest_email=email or f"guest{n}@example.com",
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            party_size=party_size,
            status=ReservationStatus.CONFIRMED,
            unit_id=unit_id,
            table_ids=list(table_ids),
        )
        db_session.add(reservation)
        db_session.commit()
        db_session.refresh(reservation)
        return reservation

    return _add


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def inventory() -> TableInventory:
    return default_inventory()


@pytest.fixture
def pair_inventory() -> TableInventory:
    """Two 2-tops that join into a 4-top"""
    return TableInventory.from_dict(
        {
            "tables": [
                {"id": "m1", "capacity": 2},
                {"id": "m2", "capacity": 2},
            ],
            "combinations": [{"id": "c1", "components": ["m1", "m2"], "capacity": 4}],
        }
    )


@pytest.fixture
def config() -> ReservationConfig:
    return ReservationConfig()


@pytest.fixture
def locks() -> SlotLockRegistry:
    return SlotLockRegistry()


@pytest.fixture
def weekday_date() -> date:
    """Next Tuesday: both services open"""
    return next_weekday(1)


@pytest.fixture
def sunday() -> date:
    return next_weekday(6)


@pytest.fixture
def guest():
    """Factory for valid create payloads"""

    def _guest(reservation_date, reservation_time=time(14, 0), party_size=2, **overrides):
        data = {
            "guest_name": "Lucía",
            "guest_surname": "Pérez",
            "guest_email": "lucia@example.com",
            "guest_phone": "600123123",
            "reservation_date": reservation_date,
            "reservation_time": reservation_time,
            "party_size": party_size,
        }
        data.update(overrides)
        return data

    return _guest


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_table_inventory] = default_inventory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
