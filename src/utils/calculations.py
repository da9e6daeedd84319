"""Pure helpers for profit, filtering and display formatting."""

from __future__ import annotations

import math
import random
import string
import time
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from src.models.business import InventoryItem, Sale

_BASE36 = string.digits + string.ascii_lowercase


def calculate_profit(cost_price: float, selling_price: float, quantity: int) -> float:
    return (selling_price - cost_price) * quantity


def calculate_profit_margin(cost_price: float, selling_price: float) -> float:
    """Markup over cost, in percent."""
    if cost_price == 0:
        if selling_price == 0:
            return 0.0
        return math.inf if selling_price > 0 else -math.inf
    return (selling_price - cost_price) / cost_price * 100


def get_todays_sales(sales: Iterable[Sale], now: Optional[datetime] = None) -> list[Sale]:
    today = (now or datetime.now()).date()
    return [sale for sale in sales if sale.created_at.date() == today]


def get_total_revenue(sales: Iterable[Sale]) -> float:
    return sum((sale.total_amount for sale in sales), 0.0)


def get_total_profit(sales: Iterable[Sale]) -> float:
    return sum((sale.profit for sale in sales), 0.0)


def get_low_stock_items(inventory: Iterable[InventoryItem], threshold: int = 10) -> list[InventoryItem]:
    return [item for item in inventory if item.quantity < threshold]


def units_sold_by_item(sales: Iterable[Sale]) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for sale in sales:
        totals[sale.item_id] += sale.quantity_sold
    return dict(totals)


def get_top_selling_items(
    inventory: Iterable[InventoryItem], sales: Iterable[Sale], limit: int = 5
) -> list[tuple[InventoryItem, int]]:
    """Current items paired with units sold, best sellers first.

    Sales of deleted items are ignored; items without sales count as 0.
    """
    sold = units_sold_by_item(sales)
    ranked = [(item, sold.get(item.id, 0)) for item in inventory]
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked[:limit]


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def random_base36(length: int, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "".join(rng.choice(_BASE36) for _ in range(length))


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix, both base 36. Not a UUID."""
    return _to_base36(int(time.time() * 1000)) + random_base36(11)


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Format an amount the en-IN way: ``format_currency(1234.5) == "₹1,234.50"``."""
    if not math.isfinite(amount):
        return f"{symbol}{amount}"
    text = f"{abs(amount):.2f}"
    rupees, paise = text.split(".")
    sign = "-" if amount < 0 and text != "0.00" else ""
    return f"{sign}{symbol}{_group_indian(rupees)}.{paise}"


def format_date(value: datetime) -> str:
    return value.strftime("%d %b %Y, %I:%M %p")
