"""
Business dashboard walkthrough.

Seeds the sample store, records a sale, shows the free insights, hits the
pro paywall, pays through the sandbox gateway and renders the reports.

Usage:
    python demo.py
"""

import asyncio
import logging
import random
import sys

import env_loader

from src.app import build_dashboard
from src.config import Settings
from src.errors import AuthError, ValidationError
from src.services.payment import SandboxPaymentGateway, TEST_CARDS
from src.services.tier_gate import Paywall
from src.utils.calculations import format_currency


async def _no_wait(_seconds):
    return None


def step_signup(dashboard):
    print("\n--- Signup ---")
    try:
        user = dashboard.auth.signup(
            email="owner@example.com",
            password="secret123",
            business_name="Sharma General Store",
            owner_name="Ravi Sharma",
            phone="+91-9000000000",
        )
    except AuthError as e:
        print(f"   Signup skipped: {e}")
        try:
            user = dashboard.auth.login("owner@example.com", "secret123")
        except AuthError as e:
            print(f"❌ Login failed: {e}")
            return False
    print(f"✅ Signed in as {user.owner_name} ({user.business_name})")
    return True


def step_record_sale(dashboard):
    print("\n--- Record Sale ---")
    item = dashboard.sales.sellable_items()[0]
    try:
        sale = dashboard.sales.record_sale(item.id, 2)
    except ValidationError as e:
        print(f"❌ Sale rejected: {e}")
        return None
    remaining = dashboard.inventory.get_item(item.id).quantity
    print(f"✅ Sold {sale.quantity_sold} x {sale.item_name} for {format_currency(sale.total_amount)}")
    print(f"   Profit: {format_currency(sale.profit)}, stock left: {remaining}")

    try:
        dashboard.sales.record_sale(item.id, remaining + 1)
    except ValidationError as e:
        print(f"✅ Oversell rejected: {e}")
    return sale


def step_basic_insights(dashboard):
    print("\n--- Today ---")
    basic = dashboard.insights.basic()
    print(f"   Revenue: {format_currency(basic.today_revenue)} from {basic.today_sales_count} sale(s)")
    print(f"   Units in stock: {basic.total_inventory_count}")
    if basic.top_item:
        print(f"   Top item: {basic.top_item.name} ({basic.top_item_sold} sold)")

    alerts = dashboard.inventory.detect_low_stock()
    for alert in alerts:
        print(f"   ⚠️  {alert.item_name}: {alert.current_quantity} left [{alert.severity.value}]")


async def step_upgrade(dashboard):
    print("\n--- Pro Analytics ---")
    result = dashboard.insights.pro()
    if isinstance(result, Paywall):
        print(f"🔒 {result.feature} requires the pro plan")

    card = TEST_CARDS["success"][0]
    payment = None
    for attempt in range(1, 4):
        payment = await dashboard.upgrade.purchase_pro("card", {
            "card_number": card["number"],
            "expiry_date": card["expiry"],
            "cvv": card["cvv"],
            "cardholder_name": "Ravi Sharma",
        })
        if payment.success:
            print(f"✅ Payment {payment.payment_id} succeeded (attempt {attempt})")
            break
        print(f"❌ Payment declined: {payment.error}")
    if payment is None or not payment.success:
        return False

    pro = dashboard.insights.pro()
    print(f"   30 day revenue: {format_currency(pro.monthly_revenue)}, profit: {format_currency(pro.monthly_profit)}")
    for point in pro.profit_trend:
        print(f"   {point.date:>7}  {format_currency(point.profit):>12}  ({point.sales} sales)")
    return True


def step_reports(dashboard, sale):
    print("\n--- Reports ---")
    filename, content = dashboard.reports.basic_csv()
    print(f"✅ {filename}: {len(content.splitlines()) - 1} row(s)")
    html = dashboard.reports.advanced_report()
    if isinstance(html, Paywall):
        print(f"🔒 {html.feature} requires the pro plan")
    else:
        print(f"✅ Business report: {len(html)} characters of HTML")
    if sale is not None:
        receipt = dashboard.reports.receipt(sale.id)
        print(f"✅ Receipt for {sale.id}: {len(receipt)} characters of HTML")


def main():
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    gateway = SandboxPaymentGateway(
        success_rate=settings.payment_success_rate,
        rng=random.Random(),
        sleep=_no_wait,
    )
    dashboard = build_dashboard(settings, gateway=gateway)

    if not step_signup(dashboard):
        sys.exit(1)
    sale = step_record_sale(dashboard)
    step_basic_insights(dashboard)
    asyncio.run(step_upgrade(dashboard))
    step_reports(dashboard, sale)
    print("\nDone.")


if __name__ == "__main__":
    main()
