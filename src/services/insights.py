"""Business insights - free daily figures and pro analytics.

- basic_insights: today's revenue and sales, units in stock, top item today
- pro_insights: 30 day totals, 7 day profit trend, profit by item,
  low stock and low margin items, category distribution
- dashboard_summary: the headline numbers shown on the dashboard
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from src.models.business import AppState, InventoryItem
from src.services.reminders import summarize_reminders
from src.services.tier_gate import PREMIUM_ANALYTICS, FeatureGate, Paywall
from src.store import AppStore
from src.utils.calculations import (
    calculate_profit_margin,
    get_low_stock_items,
    get_todays_sales,
    get_top_selling_items,
    get_total_profit,
    get_total_revenue,
    units_sold_by_item,
)

logger = logging.getLogger(__name__)

MONTH_WINDOW_DAYS = 30
TREND_DAYS = 7
PROFIT_BY_ITEM_LIMIT = 8
SHORT_NAME_LENGTH = 15


@dataclass
class BasicInsights:
    today_revenue: float
    today_sales_count: int
    total_inventory_count: int
    top_item: Optional[InventoryItem] = None
    top_item_sold: int = 0


@dataclass
class TrendPoint:
    date: str
    profit: float
    sales: int


@dataclass
class ItemProfit:
    name: str
    full_name: str
    profit: float
    sold: int
    margin: float
    stock: int


@dataclass
class ProInsights:
    monthly_revenue: float
    monthly_profit: float
    avg_sale_value: float
    total_transactions: int
    profit_trend: list[TrendPoint] = field(default_factory=list)
    top_selling_items: list[tuple[InventoryItem, int]] = field(default_factory=list)
    profit_by_item: list[ItemProfit] = field(default_factory=list)
    low_stock_items: list[InventoryItem] = field(default_factory=list)
    low_margin_items: list[InventoryItem] = field(default_factory=list)
    category_distribution: dict[str, int] = field(default_factory=dict)


@dataclass
class DashboardSummary:
    total_revenue: float
    total_profit: float
    total_sales: int
    todays_revenue: float
    todays_profit: float
    todays_sales_count: int
    avg_sale_value_today: float
    low_stock_count: int
    total_items: int
    completed_reminders: int
    pending_reminders: int


def basic_insights(state: AppState, now: datetime) -> BasicInsights:
    todays = get_todays_sales(state.sales, now)
    result = BasicInsights(
        today_revenue=get_total_revenue(todays),
        today_sales_count=len(todays),
        total_inventory_count=sum(item.quantity for item in state.inventory),
    )

    sold_today = units_sold_by_item(todays)
    if sold_today:
        top_id = max(sold_today, key=sold_today.get)
        item = state.find_item(top_id)
        # Top seller of the day may have been deleted since
        if item is not None:
            result.top_item = item
            result.top_item_sold = sold_today[top_id]
    return result


def _short_name(name: str) -> str:
    if len(name) > SHORT_NAME_LENGTH:
        return name[:SHORT_NAME_LENGTH] + "..."
    return name


def pro_insights(
    state: AppState,
    now: datetime,
    low_stock_threshold: int = 10,
    low_margin_percent: float = 15.0,
) -> ProInsights:
    window_start = now - timedelta(days=MONTH_WINDOW_DAYS)
    monthly = [s for s in state.sales if s.created_at >= window_start]
    monthly_revenue = get_total_revenue(monthly)

    trend = []
    for days_back in range(TREND_DAYS - 1, -1, -1):
        day = (now - timedelta(days=days_back)).date()
        day_sales = [s for s in state.sales if s.created_at.date() == day]
        trend.append(
            TrendPoint(
                date=f"{day.day} {day.strftime('%b')}",
                profit=get_total_profit(day_sales),
                sales=len(day_sales),
            )
        )

    profit_by_item = []
    for item in state.inventory:
        item_sales = [s for s in state.sales if s.item_id == item.id]
        profit_by_item.append(
            ItemProfit(
                name=_short_name(item.name),
                full_name=item.name,
                profit=get_total_profit(item_sales),
                sold=sum(s.quantity_sold for s in item_sales),
                margin=calculate_profit_margin(item.cost_price, item.selling_price),
                stock=item.quantity,
            )
        )
    profit_by_item.sort(key=lambda p: p.profit, reverse=True)

    categories: dict[str, int] = defaultdict(int)
    for item in state.inventory:
        categories[item.category or "Others"] += item.quantity

    return ProInsights(
        monthly_revenue=monthly_revenue,
        monthly_profit=get_total_profit(monthly),
        avg_sale_value=monthly_revenue / len(monthly) if monthly else 0.0,
        total_transactions=len(monthly),
        profit_trend=trend,
        top_selling_items=get_top_selling_items(state.inventory, state.sales),
        profit_by_item=profit_by_item[:PROFIT_BY_ITEM_LIMIT],
        low_stock_items=get_low_stock_items(state.inventory, low_stock_threshold),
        low_margin_items=[
            item for item in state.inventory
            if calculate_profit_margin(item.cost_price, item.selling_price) < low_margin_percent
        ],
        category_distribution=dict(categories),
    )


def dashboard_summary(state: AppState, now: datetime, low_stock_threshold: int = 10) -> DashboardSummary:
    todays = get_todays_sales(state.sales, now)
    todays_revenue = get_total_revenue(todays)
    reminders = summarize_reminders(state.reminders, now)
    return DashboardSummary(
        total_revenue=get_total_revenue(state.sales),
        total_profit=get_total_profit(state.sales),
        total_sales=len(state.sales),
        todays_revenue=todays_revenue,
        todays_profit=get_total_profit(todays),
        todays_sales_count=len(todays),
        avg_sale_value_today=todays_revenue / len(todays) if todays else 0.0,
        low_stock_count=len(get_low_stock_items(state.inventory, low_stock_threshold)),
        total_items=len(state.inventory),
        completed_reminders=reminders.completed,
        pending_reminders=reminders.pending,
    )


class InsightsService:
    """Reads insights off the store; pro analytics go through the feature gate."""

    def __init__(
        self,
        store: AppStore,
        gate: FeatureGate,
        clock: Callable[[], datetime] = datetime.now,
        low_stock_threshold: int = 10,
        low_margin_percent: float = 15.0,
    ):
        self._store = store
        self._gate = gate
        self._clock = clock
        self._low_stock_threshold = low_stock_threshold
        self._low_margin_percent = low_margin_percent

    def basic(self) -> BasicInsights:
        return basic_insights(self._store.state, self._clock())

    def pro(self) -> Union[ProInsights, Paywall]:
        return self._gate.run(
            PREMIUM_ANALYTICS,
            pro_insights,
            self._store.state,
            self._clock(),
            low_stock_threshold=self._low_stock_threshold,
            low_margin_percent=self._low_margin_percent,
        )

    def summary(self) -> DashboardSummary:
        return dashboard_summary(self._store.state, self._clock(), self._low_stock_threshold)
