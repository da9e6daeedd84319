"""Follow-up reminders for suppliers and customers.

Status is derived at read time, never stored:
completed -> overdue (due date passed) -> today -> upcoming.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from src.errors import ValidationError
from src.models.business import Reminder, ReminderStatus
from src.services.validator import validate_reminder_form
from src.store import Action, ActionType, AppStore
from src.utils.calculations import generate_id

logger = logging.getLogger(__name__)

FILTERS = ("all", "pending", "completed")

_EDITABLE_FIELDS = {"title", "description", "recipient_name", "recipient_phone", "due_date", "is_completed"}


def reminder_status(reminder: Reminder, now: Optional[datetime] = None) -> ReminderStatus:
    now = now or datetime.now()
    if reminder.is_completed:
        return ReminderStatus.COMPLETED
    if reminder.due_date < now:
        return ReminderStatus.OVERDUE
    if reminder.due_date.date() == now.date():
        return ReminderStatus.TODAY
    return ReminderStatus.UPCOMING


@dataclass
class ReminderSummary:
    pending: int
    overdue: int
    due_today: int
    completed: int


def summarize_reminders(reminders: Iterable[Reminder], now: Optional[datetime] = None) -> ReminderSummary:
    now = now or datetime.now()
    statuses = [reminder_status(r, now) for r in reminders]
    return ReminderSummary(
        pending=sum(1 for s in statuses if s != ReminderStatus.COMPLETED),
        overdue=statuses.count(ReminderStatus.OVERDUE),
        due_today=statuses.count(ReminderStatus.TODAY),
        completed=statuses.count(ReminderStatus.COMPLETED),
    )


class ReminderService:
    def __init__(
        self,
        store: AppStore,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._store = store
        self._clock = clock
        self._id_factory = id_factory

    def add_reminder(
        self,
        title: str,
        recipient_name: str,
        due_date: datetime,
        description: str = "",
        recipient_phone: str = "",
    ) -> Reminder:
        result = validate_reminder_form(title, recipient_name, due_date)
        if not result.is_valid:
            raise ValidationError(result.message)

        reminder = Reminder(
            id=self._id_factory(),
            title=title.strip(),
            description=description,
            recipient_name=recipient_name.strip(),
            recipient_phone=recipient_phone,
            due_date=due_date,
            is_completed=False,
            created_at=self._clock(),
        )
        self._store.dispatch(Action(ActionType.ADD_REMINDER, reminder))
        logger.info("Reminder added: %s (due %s)", reminder.title, reminder.due_date.isoformat())
        return reminder

    def update_reminder(self, reminder_id: str, **changes: Any) -> Reminder:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        with self._store.transaction():
            current = self.get_reminder(reminder_id)
            if current is None:
                raise ValidationError(f"Reminder not found: {reminder_id}")

            updated = replace(current, **changes)
            result = validate_reminder_form(updated.title, updated.recipient_name, updated.due_date)
            if not result.is_valid:
                raise ValidationError(result.message)

            self._store.dispatch(Action(ActionType.UPDATE_REMINDER, updated))
        return updated

    def toggle_complete(self, reminder_id: str) -> Reminder:
        with self._store.transaction():
            current = self.get_reminder(reminder_id)
            if current is None:
                raise ValidationError(f"Reminder not found: {reminder_id}")
            return self.update_reminder(reminder_id, is_completed=not current.is_completed)

    def delete_reminder(self, reminder_id: str) -> None:
        self._store.dispatch(Action(ActionType.DELETE_REMINDER, reminder_id))

    def get_reminder(self, reminder_id: str) -> Optional[Reminder]:
        for reminder in self._store.state.reminders:
            if reminder.id == reminder_id:
                return reminder
        return None

    def list_reminders(self, status_filter: str = "all", search: Optional[str] = None) -> list[Reminder]:
        if status_filter not in FILTERS:
            raise ValueError(f"Unknown filter: {status_filter}")

        reminders = list(self._store.state.reminders)
        if status_filter == "pending":
            reminders = [r for r in reminders if not r.is_completed]
        elif status_filter == "completed":
            reminders = [r for r in reminders if r.is_completed]
        if search:
            needle = search.lower()
            reminders = [
                r for r in reminders
                if needle in r.title.lower() or needle in r.recipient_name.lower()
            ]
        return reminders

    def status_of(self, reminder: Reminder) -> ReminderStatus:
        return reminder_status(reminder, self._clock())

    def summary(self) -> ReminderSummary:
        return summarize_reminders(self._store.state.reminders, self._clock())
