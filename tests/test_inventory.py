"""Inventory service tests."""

import logging
from datetime import datetime, timedelta
from itertools import count

import pytest

from src.errors import ItemNotFoundError, ValidationError
from src.models.business import AlertSeverity, AppState
from src.services.inventory import InventoryService
from src.services.sales import SaleService
from src.store import AppStore


class _Clock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now


def _create_service(threshold=10):
    store = AppStore(AppState())
    ids = count(1)
    clock = _Clock(datetime(2024, 1, 1, 9, 0))
    service = InventoryService(
        store,
        clock=clock,
        id_factory=lambda: f"item{next(ids)}",
        low_stock_threshold=threshold,
    )
    return service, store, clock


class TestAddItem:

    def test_add(self):
        service, store, clock = _create_service()
        item = service.add_item("  Sugar (1kg) ", 8, 40, 50, "Sweeteners")
        assert item.id == "item1"
        assert item.name == "Sugar (1kg)"
        assert item.created_at == item.updated_at == clock.now
        assert store.state.inventory == (item,)

    def test_empty_category_stored_as_none(self):
        service, _, _ = _create_service()
        assert service.add_item("Soap", 1, 10, 12, "").category is None

    @pytest.mark.parametrize("name, quantity, cost, price", [
        ("", 1, 10, 12),
        ("Soap", -1, 10, 12),
        ("Soap", 1.5, 10, 12),
        ("Soap", 1, -10, 12),
        ("Soap", 1, 10, -1),
        ("Soap", 1, "10", 12),
        ("Soap", 1, float("inf"), 12),
        ("Soap", 1, 10, float("nan")),
    ])
    def test_invalid_form(self, name, quantity, cost, price):
        service, store, _ = _create_service()
        with pytest.raises(ValidationError):
            service.add_item(name, quantity, cost, price)
        assert store.state.inventory == ()

    def test_selling_below_cost_is_a_warning(self, caplog):
        service, store, _ = _create_service()
        with caplog.at_level(logging.WARNING):
            service.add_item("Tomatoes", 4, 30, 20)
        assert len(store.state.inventory) == 1
        assert "below cost" in caplog.text


class TestUpdateItem:

    def test_update_keeps_created_at(self):
        service, _, clock = _create_service()
        item = service.add_item("Milk", 6, 45, 55)
        clock.now = clock.now + timedelta(hours=2)
        updated = service.update_item(item.id, selling_price=60)
        assert updated.selling_price == 60
        assert updated.created_at == item.created_at
        assert updated.updated_at == clock.now
        assert service.get_item(item.id) == updated

    def test_quantity_change_is_audited(self):
        service, _, _ = _create_service()
        item = service.add_item("Milk", 6, 45, 55)
        service.update_item(item.id, quantity=20)
        entries = service._validator.get_audit_log(item.id, "adjustment")
        assert len(entries) == 1
        assert entries[0].change_amount == 14

    def test_unknown_item(self):
        service, _, _ = _create_service()
        with pytest.raises(ItemNotFoundError):
            service.update_item("missing", quantity=1)

    def test_unknown_field(self):
        service, _, _ = _create_service()
        item = service.add_item("Milk", 6, 45, 55)
        with pytest.raises(ValidationError):
            service.update_item(item.id, id="other")

    def test_invalid_value_rejected(self):
        service, _, _ = _create_service()
        item = service.add_item("Milk", 6, 45, 55)
        with pytest.raises(ValidationError):
            service.update_item(item.id, quantity=-3)
        assert service.get_item(item.id).quantity == 6

    def test_sale_during_update_is_kept(self):
        service, store, clock = _create_service()
        item = service.add_item("Milk", 10, 45, 55)
        sales = SaleService(store)
        recorded = []

        def clock_with_sale():
            if not recorded:
                recorded.append(sales.record_sale(item.id, 4))
            return clock.now

        service._clock = clock_with_sale
        updated = service.update_item(item.id, name="Milk (1L)")
        assert updated.quantity == 6
        assert service.get_item(item.id).name == "Milk (1L)"
        assert store.state.sales == (recorded[0],)


class TestDeleteAndList:

    def test_delete_keeps_sales(self):
        service, store, _ = _create_service()
        item = service.add_item("Milk", 6, 45, 55)
        sale = SaleService(store).record_sale(item.id, 2)
        service.delete_item(item.id)
        assert service.get_item(item.id) is None
        assert store.state.sales == (sale,)

    def test_list_filters(self):
        service, _, _ = _create_service()
        service.add_item("Onions (1kg)", 50, 25, 35, "Vegetables")
        service.add_item("Potatoes (1kg)", 35, 20, 30, "Vegetables")
        service.add_item("Soap Bar", 25, 25, 35, "Personal Care")
        assert len(service.list_items(category="vegetables")) == 2
        assert [i.name for i in service.list_items(search="soap")] == ["Soap Bar"]
        assert service.total_units() == 110


class TestLowStock:

    def test_thresholds(self):
        service, _, _ = _create_service(threshold=10)
        assert service.get_threshold("x") == 10
        service.set_threshold("x", 3)
        assert service.get_threshold("x") == 3
        with pytest.raises(ValueError):
            service.set_threshold("x", -1)

    def test_severity(self):
        service, _, _ = _create_service(threshold=10)
        for name, qty in [("zero", 0), ("two", 2), ("four", 4), ("eight", 8), ("ten", 10)]:
            service.add_item(name, qty, 1, 2)

        alerts = {a.item_name: a.severity for a in service.detect_low_stock()}
        assert alerts == {
            "zero": AlertSeverity.CRITICAL,
            "two": AlertSeverity.HIGH,
            "four": AlertSeverity.MEDIUM,
            "eight": AlertSeverity.LOW,
        }

    def test_per_item_threshold(self):
        service, _, _ = _create_service(threshold=10)
        item = service.add_item("Rice", 45, 220, 280)
        service.set_threshold(item.id, 50)
        alerts = service.detect_low_stock()
        assert [a.item_id for a in alerts] == [item.id]
        assert alerts[0].threshold == 50
