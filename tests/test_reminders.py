"""Reminder service and status tests."""

from datetime import datetime, timedelta
from itertools import count

import pytest

from src.errors import ValidationError
from src.models.business import AppState, Reminder, ReminderStatus
from src.services.reminders import ReminderService, reminder_status, summarize_reminders
from src.store import AppStore

NOW = datetime(2024, 6, 15, 12, 0)


def _reminder(due, completed=False, rid="r1"):
    return Reminder(
        id=rid, title="Restock", description="", recipient_name="Raj",
        recipient_phone="", due_date=due, is_completed=completed,
    )


def _create_service():
    store = AppStore(AppState())
    ids = count(1)
    service = ReminderService(store, clock=lambda: NOW, id_factory=lambda: f"r{next(ids)}")
    return service, store


class TestStatus:

    def test_completed_wins(self):
        assert reminder_status(_reminder(NOW - timedelta(days=3), completed=True), NOW) == ReminderStatus.COMPLETED

    def test_overdue(self):
        assert reminder_status(_reminder(NOW - timedelta(hours=1)), NOW) == ReminderStatus.OVERDUE

    def test_due_later_today(self):
        assert reminder_status(_reminder(NOW + timedelta(hours=6)), NOW) == ReminderStatus.TODAY

    def test_upcoming(self):
        assert reminder_status(_reminder(NOW + timedelta(days=1)), NOW) == ReminderStatus.UPCOMING

    def test_summary(self):
        reminders = [
            _reminder(NOW - timedelta(hours=1), rid="a"),
            _reminder(NOW + timedelta(hours=1), rid="b"),
            _reminder(NOW + timedelta(days=2), rid="c"),
            _reminder(NOW, completed=True, rid="d"),
        ]
        summary = summarize_reminders(reminders, NOW)
        assert (summary.pending, summary.overdue, summary.due_today, summary.completed) == (3, 1, 1, 1)


class TestReminderService:

    def test_add(self):
        service, store = _create_service()
        reminder = service.add_reminder("Milk Delivery", "Sunita Devi", NOW + timedelta(hours=18))
        assert reminder.is_completed is False
        assert reminder.created_at == NOW
        assert store.state.reminders == (reminder,)

    @pytest.mark.parametrize("title, recipient, due", [
        ("", "Raj", NOW),
        ("Call", " ", NOW),
        ("Call", "Raj", "tomorrow"),
    ])
    def test_invalid_form(self, title, recipient, due):
        service, store = _create_service()
        with pytest.raises(ValidationError):
            service.add_reminder(title, recipient, due)
        assert store.state.reminders == ()

    def test_toggle_complete(self):
        service, _ = _create_service()
        reminder = service.add_reminder("Call", "Raj", NOW)
        assert service.toggle_complete(reminder.id).is_completed is True
        assert service.toggle_complete(reminder.id).is_completed is False

    def test_toggle_missing(self):
        service, _ = _create_service()
        with pytest.raises(ValidationError):
            service.toggle_complete("missing")

    def test_update(self):
        service, _ = _create_service()
        reminder = service.add_reminder("Call", "Raj", NOW)
        updated = service.update_reminder(reminder.id, title="Call about invoice")
        assert service.get_reminder(reminder.id) == updated
        assert updated.created_at == reminder.created_at

    def test_update_unknown_field(self):
        service, store = _create_service()
        reminder = service.add_reminder("Call", "Raj", NOW)
        with pytest.raises(ValidationError, match="Unknown fields: id"):
            service.update_reminder(reminder.id, id="r9")
        assert store.state.reminders == (reminder,)

    def test_filters(self):
        service, _ = _create_service()
        done = service.add_reminder("Pay supplier", "Raj", NOW)
        service.add_reminder("Restock tomatoes", "Amit", NOW)
        service.toggle_complete(done.id)

        assert len(service.list_reminders()) == 2
        assert [r.title for r in service.list_reminders("pending")] == ["Restock tomatoes"]
        assert [r.title for r in service.list_reminders("completed")] == ["Pay supplier"]
        assert [r.title for r in service.list_reminders(search="amit")] == ["Restock tomatoes"]

    def test_unknown_filter(self):
        service, _ = _create_service()
        with pytest.raises(ValueError):
            service.list_reminders("overdue")

    def test_delete_and_summary(self):
        service, _ = _create_service()
        first = service.add_reminder("Call", "Raj", NOW - timedelta(days=1))
        service.add_reminder("Visit", "Priya", NOW + timedelta(days=1))
        assert service.status_of(first) == ReminderStatus.OVERDUE
        service.delete_reminder(first.id)
        assert service.summary().pending == 1
        assert service.summary().overdue == 0
