"""Closed set of store actions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ActionType(str, Enum):
    ADD_INVENTORY_ITEM = "ADD_INVENTORY_ITEM"
    UPDATE_INVENTORY_ITEM = "UPDATE_INVENTORY_ITEM"
    DELETE_INVENTORY_ITEM = "DELETE_INVENTORY_ITEM"
    ADD_SALE = "ADD_SALE"
    UPDATE_INVENTORY_AFTER_SALE = "UPDATE_INVENTORY_AFTER_SALE"
    ADD_CONTACT = "ADD_CONTACT"
    UPDATE_CONTACT = "UPDATE_CONTACT"
    DELETE_CONTACT = "DELETE_CONTACT"
    ADD_REMINDER = "ADD_REMINDER"
    UPDATE_REMINDER = "UPDATE_REMINDER"
    DELETE_REMINDER = "DELETE_REMINDER"
    UPGRADE_TO_PRO = "UPGRADE_TO_PRO"
    DOWNGRADE_TO_FREE = "DOWNGRADE_TO_FREE"


@dataclass(frozen=True)
class StockDecrement:
    item_id: str
    quantity_sold: int


@dataclass(frozen=True)
class Action:
    """A command for the store.

    payload is the full record for ADD/UPDATE, the id for DELETE, a
    StockDecrement for UPDATE_INVENTORY_AFTER_SALE and None for tier changes.
    """

    type: ActionType
    payload: Optional[Any] = None
