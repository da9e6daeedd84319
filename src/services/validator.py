"""Record validation and the stock audit log.

- Sale preconditions (item exists, positive quantity, enough stock)
- Negative stock invariant check
- Form checks for inventory items, contacts and reminders
- Audit log of every stock change
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from src.models.business import ContactType, InventoryItem

logger = logging.getLogger(__name__)


@dataclass
class AuditLogEntry:
    entry_id: str
    operation_type: str
    item_id: str
    quantity_before: int
    quantity_after: int
    change_amount: int
    triggered_by: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    sale_id: Optional[str] = None
    details: Optional[dict] = None


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return self.errors[0] if self.errors else ""


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class StockValidator:
    """Stock consistency checks and audit trail."""

    def __init__(self) -> None:
        self._audit_log: list[AuditLogEntry] = []

    # --- Sale preconditions ---

    def validate_sale(self, item: Optional[InventoryItem], quantity: Any) -> ValidationResult:
        errors = []

        if item is None:
            errors.append("Item not found")
        if not _is_int(quantity) or quantity <= 0:
            errors.append(f"Quantity must be a positive integer: {quantity}")
        elif item is not None and quantity > item.quantity:
            errors.append(
                f"Insufficient stock: {item.name} available={item.quantity}, requested={quantity}"
            )

        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    def check_no_negative_stock(self, inventory: Iterable[InventoryItem]) -> ValidationResult:
        """All stock levels must be zero or more."""
        errors = [
            f"Negative stock detected: {item.id} = {item.quantity}"
            for item in inventory
            if item.quantity < 0
        ]
        return ValidationResult(is_valid=len(errors) == 0, errors=errors)

    # --- Audit log ---

    def log_stock_change(
        self,
        operation_type: str,
        item_id: str,
        quantity_before: int,
        quantity_after: int,
        triggered_by: str,
        sale_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            entry_id=str(uuid.uuid4()),
            operation_type=operation_type,
            item_id=item_id,
            quantity_before=quantity_before,
            quantity_after=quantity_after,
            change_amount=quantity_after - quantity_before,
            triggered_by=triggered_by,
            sale_id=sale_id,
            details=details,
        )
        self._audit_log.append(entry)
        logger.debug("Stock change logged: %s %s %+d", operation_type, item_id, entry.change_amount)
        return entry

    def get_audit_log(
        self,
        item_id: Optional[str] = None,
        operation_type: Optional[str] = None,
    ) -> list[AuditLogEntry]:
        entries = self._audit_log
        if item_id:
            entries = [e for e in entries if e.item_id == item_id]
        if operation_type:
            entries = [e for e in entries if e.operation_type == operation_type]
        return list(entries)


# --- Form checks ---

def validate_inventory_form(
    name: Any, quantity: Any, cost_price: Any, selling_price: Any
) -> ValidationResult:
    errors = []
    warnings = []

    if not isinstance(name, str) or not name.strip():
        errors.append("Item name is required")
    if not _is_int(quantity) or quantity < 0:
        errors.append("Quantity must be a whole number of zero or more")
    if not _is_number(cost_price) or cost_price < 0:
        errors.append("Cost price must be zero or more")
    if not _is_number(selling_price) or selling_price < 0:
        errors.append("Selling price must be zero or more")

    if not errors and selling_price < cost_price:
        warnings.append("Selling price is below cost price")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)


def validate_contact_form(name: Any, phone: Any, contact_type: Any) -> ValidationResult:
    errors = []
    if not isinstance(name, str) or not name.strip():
        errors.append("Contact name is required")
    if not isinstance(phone, str) or not phone.strip():
        errors.append("Phone number is required")
    valid_types = {t.value for t in ContactType}
    type_value = contact_type.value if isinstance(contact_type, ContactType) else contact_type
    if type_value not in valid_types:
        errors.append(f"Contact type must be one of: {', '.join(sorted(valid_types))}")
    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


def validate_reminder_form(title: Any, recipient_name: Any, due_date: Any) -> ValidationResult:
    errors = []
    if not isinstance(title, str) or not title.strip():
        errors.append("Reminder title is required")
    if not isinstance(recipient_name, str) or not recipient_name.strip():
        errors.append("Recipient name is required")
    if not isinstance(due_date, datetime):
        errors.append("Due date is required")
    return ValidationResult(is_valid=len(errors) == 0, errors=errors)
