"""
Tests for Reminder Dedup Tracker
"""

import pytest

from actions.reminder_dedup import ReminderDedupTracker


@pytest.mark.unit
class TestShouldSend:
    """Tests for checking whether a dose was already reminded today"""

    def test_unseen_key_can_be_sent(self, tracker):
        assert tracker.should_send("2024-06-01", 1, 101, "08:00") is True

    def test_should_send_does_not_mark(self, tracker):
        tracker.should_send("2024-06-01", 1, 101, "08:00")

        assert tracker.should_send("2024-06-01", 1, 101, "08:00") is True
        assert tracker.sent_count() == 0

    def test_marked_key_is_blocked_for_the_day(self, tracker):
        tracker.mark_sent("2024-06-01", 1, 101, "08:00")

        assert tracker.should_send("2024-06-01", 1, 101, "08:00") is False

    def test_key_covers_every_component(self, tracker):
        tracker.mark_sent("2024-06-01", 1, 101, "08:00")

        assert tracker.should_send("2024-06-01", 2, 101, "08:00") is True
        assert tracker.should_send("2024-06-01", 1, 102, "08:00") is True
        assert tracker.should_send("2024-06-01", 1, 101, "20:00") is True


@pytest.mark.unit
class TestMarkSent:
    """Tests for recording sent reminders"""

    def test_first_mark_records_key(self, tracker):
        assert tracker.mark_sent("2024-06-01", 1, 101, "08:00") is True
        assert tracker.sent_count() == 1

    def test_repeated_mark_is_idempotent(self, tracker):
        tracker.mark_sent("2024-06-01", 1, 101, "08:00")

        assert tracker.mark_sent("2024-06-01", 1, 101, "08:00") is False
        assert tracker.sent_count() == 1


@pytest.mark.unit
class TestDayRollover:
    """Tests for the lazy per-day reset"""

    def test_key_sendable_again_next_day(self, tracker):
        tracker.mark_sent("2024-06-01", 1, 101, "08:00")

        assert tracker.should_send("2024-06-02", 1, 101, "08:00") is True

    def test_rollover_clears_previous_day(self, tracker):
        tracker.mark_sent("2024-06-01", 1, 101, "08:00")
        tracker.mark_sent("2024-06-01", 1, 101, "20:00")

        tracker.should_send("2024-06-02", 1, 101, "08:00")

        assert tracker.last_reset_date == "2024-06-02"
        assert tracker.sent_count() == 0

    def test_last_reset_date_starts_empty(self):
        assert ReminderDedupTracker().last_reset_date is None

    def test_first_lookup_sets_reset_date(self, tracker):
        tracker.should_send("2024-06-01", 1, 101, "08:00")

        assert tracker.last_reset_date == "2024-06-01"
