"""
Dashboard MCP Server

Exposes the business dashboard (inventory, sales, insights, pro upgrade,
reports) as MCP tools over stdio. State lives in this process's store.
"""

import json
import logging
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
import env_loader

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional
from mcp.server import Server
from mcp.types import Tool, TextContent

from src.app import Dashboard, build_dashboard
from src.config import Settings
from src.errors import PaymentInProgressError, ValidationError
from src.services.tier_gate import Paywall

settings = Settings.from_env()
logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("dashboard_server")

app = Server("dashboard")

_dashboard: Optional[Dashboard] = None


def get_dashboard() -> Dashboard:
    global _dashboard
    if _dashboard is None:
        _dashboard = build_dashboard(settings)
    return _dashboard


def _to_json(obj):
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, list):
        return [_to_json(i) for i in obj]
    return obj

def _result(data):
    return [TextContent(type="text", text=json.dumps(_to_json(data), indent=2, ensure_ascii=False, default=str))]


@app.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name="list_inventory", description="List inventory items, optionally filtered by category or name",
             inputSchema={"type": "object", "properties": {
                 "category": {"type": "string"}, "search": {"type": "string"}
             }}),
        Tool(name="add_inventory_item", description="Add a new inventory item",
             inputSchema={"type": "object", "properties": {
                 "name": {"type": "string"}, "quantity": {"type": "integer", "minimum": 0},
                 "cost_price": {"type": "number", "minimum": 0}, "selling_price": {"type": "number", "minimum": 0},
                 "category": {"type": "string"}
             }, "required": ["name", "quantity", "cost_price", "selling_price"]}),
        Tool(name="record_sale", description="Sell a quantity of an inventory item; stock is decremented atomically",
             inputSchema={"type": "object", "properties": {
                 "item_id": {"type": "string"}, "quantity": {"type": "integer", "minimum": 1}
             }, "required": ["item_id", "quantity"]}),
        Tool(name="low_stock_alerts", description="Items below their low stock threshold, with severity",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="dashboard_summary", description="Headline totals: revenue, profit, today's sales, low stock, reminders",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="basic_insights", description="Today's revenue, sale count, units in stock and top item of the day",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="pro_insights", description="30 day analytics and profit trend (pro tier only)",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="upgrade_to_pro", description="Pay for the pro tier through the simulated payment gateway",
             inputSchema={"type": "object", "properties": {
                 "method": {"type": "string", "enum": ["card", "upi", "netbanking"]},
                 "details": {"type": "object", "description": "card_number/expiry_date/cvv/cardholder_name, upi_id or bank_code"}
             }, "required": ["method", "details"]}),
        Tool(name="sales_csv_report", description="Most recent sales as CSV",
             inputSchema={"type": "object", "properties": {"limit": {"type": "integer", "default": 10}}}),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    if name == "upgrade_to_pro":
        return _result(await upgrade_to_pro(arguments["method"], arguments.get("details", {})))

    handlers = {
        "list_inventory": lambda a: list_inventory(a.get("category"), a.get("search")),
        "add_inventory_item": lambda a: add_inventory_item(a["name"], a["quantity"], a["cost_price"], a["selling_price"], a.get("category")),
        "record_sale": lambda a: record_sale(a["item_id"], a["quantity"]),
        "low_stock_alerts": lambda a: get_dashboard().inventory.detect_low_stock(),
        "dashboard_summary": lambda a: get_dashboard().insights.summary(),
        "basic_insights": lambda a: get_dashboard().insights.basic(),
        "pro_insights": lambda a: pro_insights(),
        "sales_csv_report": lambda a: sales_csv_report(a.get("limit", 10)),
    }
    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")
    return _result(handler(arguments))


# --- Implementation ---

def list_inventory(category: Optional[str] = None, search: Optional[str] = None) -> Dict:
    items = get_dashboard().inventory.list_items(category=category, search=search)
    return {"count": len(items), "items": [asdict(i) for i in items]}


def add_inventory_item(name: str, quantity: int, cost_price: float, selling_price: float, category: Optional[str] = None) -> Dict:
    try:
        item = get_dashboard().inventory.add_item(name, quantity, cost_price, selling_price, category)
        return {"success": True, "item": asdict(item)}
    except ValidationError as e:
        return {"success": False, "error": str(e)}


def record_sale(item_id: str, quantity: int) -> Dict:
    try:
        sale = get_dashboard().sales.record_sale(item_id, quantity)
        return {"success": True, "sale": asdict(sale)}
    except ValidationError as e:
        return {"success": False, "error": str(e)}


def pro_insights() -> Dict:
    result = get_dashboard().insights.pro()
    if isinstance(result, Paywall):
        return {"success": False, "paywall": True, "feature": result.feature}
    return {"success": True, "insights": asdict(result)}


async def upgrade_to_pro(method: str, details: Dict[str, Any]) -> Dict:
    try:
        result = await get_dashboard().upgrade.purchase_pro(method, details)
    except PaymentInProgressError as e:
        return {"success": False, "error": str(e)}
    return {
        "success": result.success,
        "status": result.status.value,
        "payment_id": result.payment_id,
        "order_id": result.order_id,
        "error": result.error,
        "tier": get_dashboard().store.state.user_tier.value,
    }


def sales_csv_report(limit: int = 10) -> Dict:
    filename, content = get_dashboard().reports.basic_csv(limit)
    return {"filename": filename, "content": content}


if __name__ == "__main__":
    import asyncio
    from mcp.server.stdio import stdio_server

    async def run():
        async with stdio_server() as (read, write):
            await app.run(read, write, app.create_initialization_options())

    asyncio.run(run())
