from src.services.auth import AuthService
from src.services.contacts import ContactService
from src.services.insights import InsightsService
from src.services.inventory import InventoryService
from src.services.reminders import ReminderService
from src.services.reports import ReportService
from src.services.sales import SaleService
from src.services.tier_gate import FeatureGate, Paywall
from src.services.upgrade import UpgradeService

__all__ = [
    "AuthService",
    "ContactService",
    "FeatureGate",
    "InsightsService",
    "InventoryService",
    "Paywall",
    "ReminderService",
    "ReportService",
    "SaleService",
    "UpgradeService",
]
