"""Report exports: CSV sales report, HTML business report, HTML receipts."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.errors import ValidationError
from src.models.business import Sale
from src.services.insights import InsightsService, ProInsights
from src.services.tier_gate import ADVANCED_PDF_REPORTS, FeatureGate, Paywall
from src.store import AppStore
from src.utils.calculations import format_currency, format_date

if TYPE_CHECKING:
    from src.services.auth import AuthService

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Item", "Quantity", "Revenue", "Profit"]
DEFAULT_CSV_ROWS = 10
RECEIPT_NO_LENGTH = 6

env = Environment(
    loader=FileSystemLoader(str(Path(__file__).resolve().parent / "templates")),
    autoescape=select_autoescape(["html", "xml"]),
)
env.filters["currency"] = format_currency
env.filters["datetime"] = format_date


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def sales_csv(sales: Iterable[Sale], limit: int = DEFAULT_CSV_ROWS) -> str:
    """Most recent ``limit`` sales as CSV. Item names with commas are quoted."""
    recent = sorted(sales, key=lambda s: s.created_at, reverse=True)[:limit]
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for sale in recent:
        writer.writerow([
            sale.created_at.strftime("%d/%m/%Y"),
            sale.item_name,
            sale.quantity_sold,
            _number(sale.total_amount),
            _number(sale.profit),
        ])
    return buffer.getvalue()


def csv_filename(now: datetime) -> str:
    return f"basic-report-{now.strftime('%Y-%m-%d')}.csv"


def receipt_number(sale: Sale) -> str:
    return sale.id[-RECEIPT_NO_LENGTH:]


def render_receipt(sale: Sale, business_name: str = "Your Business Store") -> str:
    template = env.get_template("receipt.html")
    return template.render(sale=sale, business_name=business_name, receipt_no=receipt_number(sale))


def render_business_report(
    insights: ProInsights,
    business_name: str,
    owner_name: str,
    generated_at: datetime,
    top_items_limit: int = 5,
) -> str:
    template = env.get_template("business_report.html")
    return template.render(
        insights=insights,
        top_items=insights.top_selling_items[:top_items_limit],
        business_name=business_name,
        owner_name=owner_name,
        report_date=f"{generated_at.day} {generated_at.strftime('%B %Y')}",
        generated_at=generated_at,
    )


class ReportService:
    """Builds downloadable reports from the current store state."""

    def __init__(
        self,
        store: AppStore,
        gate: FeatureGate,
        insights: InsightsService,
        auth: Optional["AuthService"] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._gate = gate
        self._insights = insights
        self._auth = auth
        self._clock = clock

    def _business_names(self) -> tuple[str, str]:
        user = self._auth.current_user if self._auth is not None else None
        if user is None:
            return "Your Business", "Business Owner"
        return user.business_name, user.owner_name

    def basic_csv(self, limit: int = DEFAULT_CSV_ROWS) -> tuple[str, str]:
        """Returns (filename, csv content)."""
        now = self._clock()
        return csv_filename(now), sales_csv(self._store.state.sales, limit)

    def advanced_report(self) -> Union[str, Paywall]:
        """Self-contained HTML report; pro only."""
        if not self._gate.check(ADVANCED_PDF_REPORTS):
            return Paywall(feature=ADVANCED_PDF_REPORTS)

        insights = self._insights.pro()
        if isinstance(insights, Paywall):
            return insights

        business_name, owner_name = self._business_names()
        html = render_business_report(insights, business_name, owner_name, self._clock())
        logger.info("Business report generated for %s", business_name)
        return html

    def receipt(self, sale_id: str) -> str:
        for sale in self._store.state.sales:
            if sale.id == sale_id:
                business_name, _ = self._business_names()
                return render_receipt(sale, business_name)
        raise ValidationError(f"Sale not found: {sale_id}")
