"""Inventory records - add, edit and remove items, and watch stock levels.

- Builds InventoryItem records (generated id, timestamps) from form input
- Keeps per-item low stock thresholds
- Raises alerts for items below their threshold
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

from src.errors import ItemNotFoundError, ValidationError
from src.models.business import AlertSeverity, InventoryItem, StockAlert
from src.services.validator import StockValidator, validate_inventory_form
from src.store import Action, ActionType, AppStore
from src.utils.calculations import generate_id

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "quantity", "cost_price", "selling_price", "category"}


class InventoryService:
    """Inventory CRUD on top of the store, plus low stock detection."""

    def __init__(
        self,
        store: AppStore,
        validator: Optional[StockValidator] = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_id,
        low_stock_threshold: int = 10,
    ):
        self._store = store
        self._validator = validator or StockValidator()
        self._clock = clock
        self._id_factory = id_factory
        self._default_threshold = low_stock_threshold
        # Per-item thresholds: {item_id: threshold}
        self._thresholds: dict[str, int] = {}

    # --- Records ---

    def add_item(
        self,
        name: str,
        quantity: int,
        cost_price: float,
        selling_price: float,
        category: Optional[str] = None,
    ) -> InventoryItem:
        result = validate_inventory_form(name, quantity, cost_price, selling_price)
        if not result.is_valid:
            raise ValidationError(result.message)
        for warning in result.warnings:
            logger.warning("Inventory item %r: %s", name, warning)

        now = self._clock()
        item = InventoryItem(
            id=self._id_factory(),
            name=name.strip(),
            quantity=quantity,
            cost_price=cost_price,
            selling_price=selling_price,
            category=category or None,
            created_at=now,
            updated_at=now,
        )
        self._store.dispatch(Action(ActionType.ADD_INVENTORY_ITEM, item))
        logger.info("Inventory item added: %s (qty=%d)", item.name, item.quantity)
        return item

    def update_item(self, item_id: str, **changes: Any) -> InventoryItem:
        """Replaces an item with the given field changes applied."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        now = self._clock()
        with self._store.transaction():
            current = self.get_item(item_id)
            if current is None:
                raise ItemNotFoundError(f"Item not found: {item_id}")

            updated = replace(current, **changes, updated_at=now)
            result = validate_inventory_form(
                updated.name, updated.quantity, updated.cost_price, updated.selling_price
            )
            if not result.is_valid:
                raise ValidationError(result.message)

            self._store.dispatch(Action(ActionType.UPDATE_INVENTORY_ITEM, updated))

        if updated.quantity != current.quantity:
            self._validator.log_stock_change(
                operation_type="adjustment",
                item_id=item_id,
                quantity_before=current.quantity,
                quantity_after=updated.quantity,
                triggered_by="InventoryService",
            )
        return updated

    def delete_item(self, item_id: str) -> None:
        """Removes an item. Past sales keep their own snapshot of it."""
        self._store.dispatch(Action(ActionType.DELETE_INVENTORY_ITEM, item_id))
        self._thresholds.pop(item_id, None)

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        return self._store.state.find_item(item_id)

    def list_items(self, category: Optional[str] = None, search: Optional[str] = None) -> list[InventoryItem]:
        items = list(self._store.state.inventory)
        if category:
            items = [i for i in items if (i.category or "").lower() == category.lower()]
        if search:
            needle = search.lower()
            items = [i for i in items if needle in i.name.lower()]
        return items

    def total_units(self) -> int:
        return sum(item.quantity for item in self._store.state.inventory)

    # --- Low stock thresholds ---

    def set_threshold(self, item_id: str, threshold: int) -> None:
        if threshold < 0:
            raise ValueError("Threshold cannot be negative")
        self._thresholds[item_id] = threshold

    def get_threshold(self, item_id: str) -> int:
        return self._thresholds.get(item_id, self._default_threshold)

    def detect_low_stock(self) -> list[StockAlert]:
        """Alerts for every item whose stock is below its threshold."""
        alerts: list[StockAlert] = []

        for item in self._store.state.inventory:
            threshold = self.get_threshold(item.id)
            if item.quantity < threshold:
                alerts.append(
                    StockAlert(
                        item_id=item.id,
                        item_name=item.name,
                        current_quantity=item.quantity,
                        threshold=threshold,
                        severity=self._calculate_severity(item.quantity, threshold),
                    )
                )

        if alerts:
            logger.info("%d item(s) below low stock threshold", len(alerts))
        return alerts

    def _calculate_severity(self, quantity: int, threshold: int) -> AlertSeverity:
        if quantity <= 0:
            return AlertSeverity.CRITICAL
        ratio = quantity / threshold
        if ratio < 0.25:
            return AlertSeverity.HIGH
        if ratio < 0.5:
            return AlertSeverity.MEDIUM
        return AlertSeverity.LOW
