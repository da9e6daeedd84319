"""Composition root - builds the store and wires every service to it."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from src.config import Settings
from src.data.sample import generate_sample_state
from src.models.business import AppState
from src.services.auth import AuthService, SessionRepository
from src.services.contacts import ContactService
from src.services.insights import InsightsService
from src.services.inventory import InventoryService
from src.services.payment import PaymentGateway, SandboxPaymentGateway
from src.services.reminders import ReminderService
from src.services.reports import ReportService
from src.services.sales import SaleService
from src.services.tier_gate import FeatureGate
from src.services.upgrade import UpgradeService
from src.services.validator import StockValidator
from src.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore, S3KeyValueStore
from src.store import AppStore

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    settings: Settings
    store: AppStore
    auth: AuthService
    inventory: InventoryService
    sales: SaleService
    contacts: ContactService
    reminders: ReminderService
    gate: FeatureGate
    upgrade: UpgradeService
    insights: InsightsService
    reports: ReportService


def build_storage(settings: Settings) -> KeyValueStore:
    if settings.storage_backend == "file":
        return JsonFileKeyValueStore(settings.storage_dir)
    if settings.storage_backend == "s3":
        return S3KeyValueStore(settings.s3_bucket, settings.s3_prefix, settings.region_name)
    return MemoryKeyValueStore()


def build_dashboard(
    settings: Optional[Settings] = None,
    initial_state: Optional[AppState] = None,
    storage: Optional[KeyValueStore] = None,
    gateway: Optional[PaymentGateway] = None,
) -> Dashboard:
    settings = settings or Settings.from_env()

    if initial_state is None:
        initial_state = generate_sample_state() if settings.seed_sample_data else AppState()
    store = AppStore(initial_state)

    auth = AuthService(SessionRepository(storage or build_storage(settings)))
    auth.bootstrap()

    validator = StockValidator()
    gate = FeatureGate(store)
    gateway = gateway or SandboxPaymentGateway(
        success_rate=settings.payment_success_rate, rng=random.Random()
    )
    insights = InsightsService(
        store,
        gate,
        low_stock_threshold=settings.low_stock_threshold,
        low_margin_percent=settings.low_margin_percent,
    )

    dashboard = Dashboard(
        settings=settings,
        store=store,
        auth=auth,
        inventory=InventoryService(store, validator, low_stock_threshold=settings.low_stock_threshold),
        sales=SaleService(store, validator),
        contacts=ContactService(store),
        reminders=ReminderService(store),
        gate=gate,
        upgrade=UpgradeService(store, gateway, auth=auth, price=settings.pro_price),
        insights=insights,
        reports=ReportService(store, gate, insights, auth=auth),
    )
    logger.info(
        "Dashboard ready: %d items, %d sales, tier=%s, storage=%s",
        len(store.state.inventory),
        len(store.state.sales),
        store.state.user_tier.value,
        settings.storage_backend,
    )
    return dashboard
