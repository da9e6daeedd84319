"""Business records held by the dashboard store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class UserTier(str, Enum):
    FREE = "free"
    PRO = "pro"


class ContactType(str, Enum):
    SUPPLIER = "supplier"
    CUSTOMER = "customer"


class ReminderStatus(str, Enum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class InventoryItem:
    id: str
    name: str
    quantity: int
    cost_price: float
    selling_price: float
    category: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Sale:
    """A recorded sale.

    item_name and unit_price are copied from the item when the sale is made,
    so later edits or deletion of the item do not change the history.
    """

    id: str
    item_id: str
    item_name: str
    quantity_sold: int
    unit_price: float
    total_amount: float
    profit: float
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    phone: str
    type: ContactType
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Reminder:
    id: str
    title: str
    description: str
    recipient_name: str
    recipient_phone: str
    due_date: datetime
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class User:
    id: str
    email: str
    business_name: str
    owner_name: str
    phone: str
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class AppState:
    inventory: tuple[InventoryItem, ...] = ()
    sales: tuple[Sale, ...] = ()
    contacts: tuple[Contact, ...] = ()
    reminders: tuple[Reminder, ...] = ()
    user_tier: UserTier = UserTier.FREE

    def find_item(self, item_id: str) -> Optional[InventoryItem]:
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None


class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class StockAlert:
    item_id: str
    item_name: str
    current_quantity: int
    threshold: int
    severity: AlertSeverity
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
