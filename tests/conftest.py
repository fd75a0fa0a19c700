"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all SmartAid tests.
Fixtures include database sessions, test clients, sample data, in-memory
fakes for the reminder engines' collaborators, and a mock push transport.
"""

import os
import sys
from datetime import datetime
from typing import Generator, Dict, List
from unittest.mock import MagicMock

# Keep the app's lifespan off the real database and out of the scheduler
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, build_engine, get_db
from models import User, Medication, UserRole
from actions.state import MedicationRecord, PushSubscriptionInfo, StoredSubscription, UserRecord
from actions.subscription_registry import SubscriptionRegistry
from actions.reminder_dedup import ReminderDedupTracker
from services.storage_service import StorageService
from services.reminder_service import ReminderService, get_reminder_service
from tools.notification_service import NotificationDispatcher
from app import app


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session"""
    session = session_factory()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def storage(session_factory) -> StorageService:
    """Storage service bound to the test database"""
    return StorageService(session_factory=session_factory)


# ==================== PUSH FIXTURES ====================

@pytest.fixture
def push_transport() -> MagicMock:
    """Stand-in for pywebpush.webpush; succeeds unless told otherwise"""
    return MagicMock(return_value=MagicMock(status_code=201))


@pytest.fixture
def sample_subscription() -> PushSubscriptionInfo:
    return PushSubscriptionInfo(
        endpoint="https://push.example.com/send/abc123",
        p256dh="BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM",
        auth="tBHItJI5svbpez7KI4CCXg"
    )


@pytest.fixture
def registry() -> SubscriptionRegistry:
    return SubscriptionRegistry()


@pytest.fixture
def dispatcher(registry, push_transport) -> NotificationDispatcher:
    """Configured dispatcher whose transport is a mock"""
    return NotificationDispatcher(
        registry,
        vapid_public_key="test-public-key",
        vapid_private_key="test-private-key",
        vapid_claims_sub="mailto:test@example.com",
        transport=push_transport
    )


@pytest.fixture
def tracker() -> ReminderDedupTracker:
    return ReminderDedupTracker()


# ==================== IN-MEMORY STORE ====================

class FakeReminderStore:
    """Dict-backed store satisfying the reminder engines' read contract"""

    def __init__(self):
        self.users: Dict[int, UserRecord] = {}
        self.medications: Dict[int, List[MedicationRecord]] = {}
        self.subscriptions: List[StoredSubscription] = []
        self.failing_users: set = set()
        self.medication_calls: List[int] = []

    def add_user(self, user_id: int, role: str = "patient") -> UserRecord:
        user = UserRecord(id=user_id, email=f"user{user_id}@example.com", role=role)
        self.users[user_id] = user
        self.medications.setdefault(user_id, [])
        return user

    def add_medication(self, user_id: int, medication_id: int, name: str, times: List[str],
                       pills_remaining: int = 30, refill_threshold: int = 7) -> MedicationRecord:
        medication = MedicationRecord(
            id=medication_id,
            user_id=user_id,
            name=name,
            dosage="10mg",
            times=times,
            pills_remaining=pills_remaining,
            refill_threshold=refill_threshold
        )
        self.medications.setdefault(user_id, []).append(medication)
        return medication

    def list_all_users(self) -> List[UserRecord]:
        return list(self.users.values())

    def list_medications(self, user_id: int) -> List[MedicationRecord]:
        self.medication_calls.append(user_id)
        if user_id in self.failing_users:
            raise RuntimeError("database unavailable")
        return list(self.medications.get(user_id, []))

    def list_all_subscriptions(self) -> List[StoredSubscription]:
        return list(self.subscriptions)


@pytest.fixture
def fake_store() -> FakeReminderStore:
    return FakeReminderStore()


@pytest.fixture
def lisinopril_household(fake_store, registry, sample_subscription) -> FakeReminderStore:
    """User 1 takes Lisinopril at 08:00 and 20:00, 5 pills left, threshold 7, subscribed"""
    fake_store.add_user(1)
    fake_store.add_medication(1, 101, "Lisinopril", ["08:00", "20:00"],
                              pills_remaining=5, refill_threshold=7)
    registry.add(1, sample_subscription)
    return fake_store


@pytest.fixture
def june_first():
    """Build datetimes on 2024-06-01"""
    def _at(hour: int, minute: int, second: int = 0) -> datetime:
        return datetime(2024, 6, 1, hour, minute, second)
    return _at


# ==================== API FIXTURES ====================

@pytest.fixture
def reminder_service(storage, registry, dispatcher, tracker) -> ReminderService:
    return ReminderService(
        storage=storage,
        dispatcher=dispatcher,
        registry=registry,
        tracker=tracker
    )


@pytest.fixture(scope="function")
def client(db_session: Session, reminder_service: ReminderService) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database and reminder overrides"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reminder_service] = lambda: reminder_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session: Session) -> User:
    user = User(
        email="pat@example.com",
        first_name="Pat",
        last_name="Doe",
        role=UserRole.PATIENT
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_medication(db_session: Session, test_user: User) -> Medication:
    medication = Medication(
        user_id=test_user.id,
        name="Lisinopril",
        dosage="10mg",
        pill_type="white-round",
        times=["08:00", "20:00"],
        pills_remaining=5,
        refill_threshold=7
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "scheduler: mark test as exercising a reminder engine")
