"""Sample data for a new dashboard.

12 grocery items, 30 days of sales history (2-9 sales a day, 1-3 units
each), a handful of suppliers/customers and open reminders. Sample sales
do not touch the seeded stock levels.
"""
from datetime import datetime, timedelta
import random
from typing import List, Optional

from src.models.business import (
    AppState,
    Contact,
    ContactType,
    InventoryItem,
    Reminder,
    Sale,
)
from src.utils.calculations import calculate_profit


# --- CONSTANTS ---

# (id, name, quantity, cost, selling, category, created)
ITEMS = [
    ("1", "Basmati Rice (5kg)", 45, 220, 280, "Grains", "2024-01-01"),
    ("2", "Sunflower Oil (1L)", 32, 120, 145, "Oils", "2024-01-01"),
    ("3", "Sugar (1kg)", 8, 40, 50, "Sweeteners", "2024-01-01"),
    ("4", "Wheat Flour (10kg)", 25, 350, 420, "Grains", "2024-01-02"),
    ("5", "Toor Dal (1kg)", 18, 85, 110, "Pulses", "2024-01-02"),
    ("6", "Tea Powder (250g)", 40, 180, 220, "Beverages", "2024-01-03"),
    ("7", "Milk (1L)", 6, 45, 55, "Dairy", "2024-01-03"),
    ("8", "Onions (1kg)", 50, 25, 35, "Vegetables", "2024-01-04"),
    ("9", "Potatoes (1kg)", 35, 20, 30, "Vegetables", "2024-01-04"),
    ("10", "Tomatoes (1kg)", 4, 30, 45, "Vegetables", "2024-01-05"),
    ("11", "Biscuits Pack", 60, 15, 20, "Snacks", "2024-01-05"),
    ("12", "Soap Bar", 25, 25, 35, "Personal Care", "2024-01-06"),
]

CONTACTS = [
    ("1", "Raj Wholesale Market", "+91-9876543210", ContactType.SUPPLIER, "raj@wholesale.com", "Mandi Road, Delhi"),
    ("2", "Priya Sharma", "+91-8765432109", ContactType.CUSTOMER, None, "Sector 15, Gurgaon"),
    ("3", "Amit Traders", "+91-7654321098", ContactType.SUPPLIER, "amit@traders.in", "Karol Bagh, Delhi"),
    ("4", "Sunita Devi", "+91-6543210987", ContactType.CUSTOMER, None, "Lajpat Nagar, Delhi"),
    ("5", "Gupta Enterprises", "+91-5432109876", ContactType.SUPPLIER, "gupta@enterprises.co.in", "Azadpur Mandi, Delhi"),
]

# (id, title, description, recipient contact id, due in hours)
REMINDERS = [
    ("1", "Sugar Stock Running Low", "Sugar quantity is low. Contact supplier.", "1", 24),
    ("2", "Restock Tomatoes", "Tomato stock is very low. Order immediately.", "3", 12),
    ("3", "Milk Delivery", "Tomorrow morning milk delivery time.", "4", 18),
]

HISTORY_DAYS = 30


def generate_inventory() -> List[InventoryItem]:
    items = []
    for item_id, name, qty, cost, selling, category, created in ITEMS:
        created_at = datetime.fromisoformat(created)
        items.append(InventoryItem(
            id=item_id,
            name=name,
            quantity=qty,
            cost_price=cost,
            selling_price=selling,
            category=category,
            created_at=created_at,
            updated_at=created_at,
        ))
    return items


def generate_sales(inventory: List[InventoryItem], now: datetime, rng: random.Random) -> List[Sale]:
    """Newest day first; within a day, sales are spread an hour apart."""
    sales = []
    for day in range(HISTORY_DAYS):
        sale_day = now - timedelta(days=day)
        for n in range(rng.randint(2, 9)):
            item = rng.choice(inventory)
            qty = rng.randint(1, 3)
            sales.append(Sale(
                id=f"sale-{day}-{n}",
                item_id=item.id,
                item_name=item.name,
                quantity_sold=qty,
                unit_price=item.selling_price,
                total_amount=item.selling_price * qty,
                profit=calculate_profit(item.cost_price, item.selling_price, qty),
                created_at=sale_day - timedelta(hours=n),
            ))
    return sales


def generate_contacts() -> List[Contact]:
    return [
        Contact(
            id=cid, name=name, phone=phone, type=ctype, email=email, address=address,
            created_at=datetime(2024, 1, int(cid)),
        )
        for cid, name, phone, ctype, email, address in CONTACTS
    ]


def generate_reminders(contacts: List[Contact], now: datetime) -> List[Reminder]:
    by_id = {c.id: c for c in contacts}
    reminders = []
    for rid, title, description, contact_id, hours in REMINDERS:
        contact = by_id[contact_id]
        reminders.append(Reminder(
            id=rid,
            title=title,
            description=description,
            recipient_name=contact.name,
            recipient_phone=contact.phone,
            due_date=now + timedelta(hours=hours),
            is_completed=False,
            created_at=now,
        ))
    return reminders


def generate_sample_state(now: Optional[datetime] = None, seed: Optional[int] = None) -> AppState:
    now = now or datetime.now()
    rng = random.Random(seed)
    inventory = generate_inventory()
    contacts = generate_contacts()
    return AppState(
        inventory=tuple(inventory),
        sales=tuple(generate_sales(inventory, now, rng)),
        contacts=tuple(contacts),
        reminders=tuple(generate_reminders(contacts, now)),
    )
