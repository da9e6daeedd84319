"""Sale recording - turns an (item, quantity) request into a sale plus a stock decrement.

The stock check, the ADD_SALE and the UPDATE_INVENTORY_AFTER_SALE
transitions run inside one store transaction: either both mutations
happen or neither, and concurrent callers cannot oversell an item.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from src.errors import InsufficientStockError, ItemNotFoundError, ValidationError
from src.models.business import InventoryItem, Sale
from src.services.validator import StockValidator
from src.store import Action, ActionType, AppStore, StockDecrement
from src.utils.calculations import calculate_profit, generate_id

logger = logging.getLogger(__name__)


class SaleService:
    """Records sales against the store's inventory."""

    def __init__(
        self,
        store: AppStore,
        validator: Optional[StockValidator] = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._store = store
        self._validator = validator or StockValidator()
        self._clock = clock
        self._id_factory = id_factory

    @property
    def validator(self) -> StockValidator:
        return self._validator

    def sellable_items(self) -> list[InventoryItem]:
        """Items that can currently be sold (stock above zero)."""
        return [item for item in self._store.state.inventory if item.quantity > 0]

    def validate_sale(self, item_id: str, quantity: Any) -> InventoryItem:
        """Checks a sale request against the current stock.

        Raises:
            ItemNotFoundError: unknown item id.
            ValidationError: quantity is not a positive integer.
            InsufficientStockError: quantity exceeds the available stock.
        """
        item = self._store.state.find_item(item_id)
        if item is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")

        result = self._validator.validate_sale(item, quantity)
        if not result.is_valid:
            if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0:
                raise InsufficientStockError(result.message)
            raise ValidationError(result.message)

        return item

    def record_sale(self, item_id: str, quantity: int) -> Sale:
        """Sells ``quantity`` units of an item.

        Returns the new Sale; on any validation failure nothing is changed.
        """
        with self._store.transaction():
            item = self.validate_sale(item_id, quantity)

            sale = Sale(
                id=self._id_factory(),
                item_id=item.id,
                item_name=item.name,
                quantity_sold=quantity,
                unit_price=item.selling_price,
                total_amount=item.selling_price * quantity,
                profit=calculate_profit(item.cost_price, item.selling_price, quantity),
                created_at=self._clock(),
            )

            self._store.dispatch(Action(ActionType.ADD_SALE, sale))
            sales = self._store.state.sales
            if not sales or sales[-1] is not sale:
                raise ValidationError(f"Duplicate sale id: {sale.id}")
            self._store.dispatch(
                Action(ActionType.UPDATE_INVENTORY_AFTER_SALE, StockDecrement(item.id, quantity))
            )

            updated = self._store.state.find_item(item.id)
            if updated is None or updated.quantity < 0:
                raise InsufficientStockError(f"Negative stock after sale: {item.id}")

        self._validator.log_stock_change(
            operation_type="sale",
            item_id=item.id,
            quantity_before=item.quantity,
            quantity_after=updated.quantity,
            triggered_by="SaleService",
            sale_id=sale.id,
        )
        logger.info(
            "Sale recorded: %s x%d (total=%.2f, profit=%.2f)",
            item.name, quantity, sale.total_amount, sale.profit,
        )
        return sale

    def get_sales(self, item_id: Optional[str] = None) -> list[Sale]:
        sales = self._store.state.sales
        if item_id:
            return [s for s in sales if s.item_id == item_id]
        return list(sales)
