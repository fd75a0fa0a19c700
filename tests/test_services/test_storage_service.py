"""
Tests for Storage Service
"""

import pytest

from models import UserRole
from actions.state import MedicationRecord, PushSubscriptionInfo
from actions.subscription_registry import SubscriptionRegistry


@pytest.mark.integration
class TestUsers:

    def test_create_and_list_users(self, storage, db_session):
        storage.create_user("a@example.com", role=UserRole.PATIENT, db=db_session)
        storage.create_user("b@example.com", role=UserRole.CAREGIVER, db=db_session)

        users = storage.list_all_users()

        assert [u.email for u in users] == ["a@example.com", "b@example.com"]
        assert users[1].role == "caregiver"

    def test_duplicate_email(self, storage, db_session):
        storage.create_user("a@example.com", db=db_session)

        with pytest.raises(ValueError):
            storage.create_user("a@example.com", db=db_session)


@pytest.mark.integration
class TestMedicationReadModel:

    def test_list_medications_returns_records(self, storage, test_user, test_medication):
        medications = storage.list_medications(test_user.id)

        assert medications == [MedicationRecord(
            id=test_medication.id,
            user_id=test_user.id,
            name="Lisinopril",
            dosage="10mg",
            times=["08:00", "20:00"],
            pills_remaining=5,
            refill_threshold=7
        )]

    def test_list_medications_for_unknown_user(self, storage):
        assert storage.list_medications(12345) == []


@pytest.mark.integration
class TestSubscriptions:

    def test_upsert_creates_then_replaces(self, storage, test_user, sample_subscription):
        storage.upsert_subscription(test_user.id, sample_subscription)
        replacement = PushSubscriptionInfo(
            endpoint="https://push.example.com/send/new",
            p256dh="new-key",
            auth="new-auth",
            expiration_time=1717228800000
        )
        storage.upsert_subscription(test_user.id, replacement)

        stored = storage.list_all_subscriptions()

        assert len(stored) == 1
        assert stored[0].user_id == test_user.id
        assert stored[0].subscription == replacement

    def test_delete_subscription(self, storage, test_user, sample_subscription):
        storage.upsert_subscription(test_user.id, sample_subscription)

        assert storage.delete_subscription(test_user.id) is True
        assert storage.get_subscription(test_user.id) is None
        assert storage.delete_subscription(test_user.id) is False

    def test_registry_hydrates_from_storage(self, storage, test_user, sample_subscription):
        storage.upsert_subscription(test_user.id, sample_subscription)

        registry = SubscriptionRegistry(storage)

        assert registry.load() == 1
        assert registry.get(test_user.id) == sample_subscription
