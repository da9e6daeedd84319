"""Sale recording tests."""

import threading
from datetime import datetime
from itertools import count

import pytest

from src.errors import InsufficientStockError, ItemNotFoundError, ValidationError
from src.models.business import AppState, InventoryItem
from src.services.sales import SaleService
from src.services.validator import StockValidator
from src.store import Action, ActionType, AppStore

NOW = datetime(2024, 1, 15, 10, 0)


def _create_service(*items):
    store = AppStore(AppState(inventory=tuple(items)))
    ids = count(1)
    service = SaleService(
        store,
        StockValidator(),
        clock=lambda: NOW,
        id_factory=lambda: f"sale{next(ids)}",
    )
    return service, store


def _item(item_id="1", quantity=10, cost=50, price=80, name="Basmati Rice"):
    return InventoryItem(id=item_id, name=name, quantity=quantity, cost_price=cost, selling_price=price)


class TestRecordSale:

    def test_sale_snapshot_and_stock_decrement(self):
        service, store = _create_service(_item())
        sale = service.record_sale("1", 3)

        assert store.state.find_item("1").quantity == 7
        assert sale.quantity_sold == 3
        assert sale.unit_price == 80
        assert sale.total_amount == 240
        assert sale.profit == 90
        assert sale.item_name == "Basmati Rice"
        assert sale.created_at == NOW
        assert store.state.sales == (sale,)

    def test_selling_entire_stock(self):
        service, store = _create_service(_item(quantity=4))
        service.record_sale("1", 4)
        assert store.state.find_item("1").quantity == 0

    def test_loss_making_sale_has_negative_profit(self):
        service, _ = _create_service(_item(cost=100, price=90))
        assert service.record_sale("1", 2).profit == -20

    def test_sale_survives_item_deletion_and_edit(self):
        service, store = _create_service(_item())
        sale = service.record_sale("1", 1)
        store.dispatch(Action(ActionType.UPDATE_INVENTORY_ITEM, _item(price=999, name="Renamed")))
        store.dispatch(Action(ActionType.DELETE_INVENTORY_ITEM, "1"))
        assert store.state.sales[0] == sale
        assert store.state.sales[0].unit_price == 80

    def test_audit_log_entry(self):
        service, _ = _create_service(_item())
        sale = service.record_sale("1", 3)
        entries = service.validator.get_audit_log(item_id="1")
        assert len(entries) == 1
        assert entries[0].operation_type == "sale"
        assert entries[0].quantity_before == 10
        assert entries[0].quantity_after == 7
        assert entries[0].change_amount == -3
        assert entries[0].sale_id == sale.id


class TestRejections:

    def test_oversell_rejected_without_change(self):
        service, store = _create_service(_item(quantity=2))
        before = store.state
        with pytest.raises(InsufficientStockError):
            service.record_sale("1", 3)
        assert store.state is before

    def test_unknown_item(self):
        service, store = _create_service(_item())
        with pytest.raises(ItemNotFoundError):
            service.record_sale("nope", 1)
        assert store.state.sales == ()

    @pytest.mark.parametrize("quantity", [0, -1, 2.5, "3", True, None])
    def test_bad_quantity(self, quantity):
        service, store = _create_service(_item())
        with pytest.raises(ValidationError) as excinfo:
            service.record_sale("1", quantity)
        assert excinfo.type is ValidationError
        assert store.state.find_item("1").quantity == 10
        assert store.state.sales == ()

    def test_rejection_writes_no_audit_entry(self):
        service, _ = _create_service(_item(quantity=1))
        with pytest.raises(InsufficientStockError):
            service.record_sale("1", 5)
        assert service.validator.get_audit_log() == []

    def test_out_of_stock_items_are_not_sellable(self):
        service, _ = _create_service(_item("1", quantity=0), _item("2", quantity=1))
        assert [i.id for i in service.sellable_items()] == ["2"]

    def test_duplicate_sale_id_rolls_back(self):
        store = AppStore(AppState(inventory=(_item(),)))
        service = SaleService(store, StockValidator(), clock=lambda: NOW, id_factory=lambda: "dup")
        first = service.record_sale("1", 3)
        with pytest.raises(ValidationError, match="Duplicate sale id"):
            service.record_sale("1", 3)
        assert store.state.sales == (first,)
        assert store.state.find_item("1").quantity == 7
        assert len(service.validator.get_audit_log()) == 1


class TestConcurrentSales:

    def test_no_oversell_under_contention(self):
        service, store = _create_service(_item(quantity=10))
        accepted = []
        rejected = []
        barrier = threading.Barrier(25)

        def sell():
            barrier.wait()
            try:
                accepted.append(service.record_sale("1", 1))
            except InsufficientStockError:
                rejected.append(1)

        threads = [threading.Thread(target=sell) for _ in range(25)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(accepted) == 10
        assert len(rejected) == 15
        assert store.state.find_item("1").quantity == 0
        assert len(store.state.sales) == 10


class TestGetSales:

    def test_filter_by_item(self):
        service, _ = _create_service(_item("1"), _item("2"))
        service.record_sale("1", 1)
        service.record_sale("2", 1)
        assert [s.item_id for s in service.get_sales("2")] == ["2"]
        assert len(service.get_sales()) == 2
