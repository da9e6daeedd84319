"""Pure state transitions, one per action type."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from src.models.business import AppState, UserTier
from src.store.actions import Action, ActionType, StockDecrement

logger = logging.getLogger(__name__)

Transition = Callable[[AppState, Any], AppState]


def _append(field_name: str) -> Transition:
    def transition(state: AppState, record: Any) -> AppState:
        records = getattr(state, field_name)
        if any(r.id == record.id for r in records):
            logger.warning("Duplicate id ignored: %s/%s", field_name, record.id)
            return state
        return replace(state, **{field_name: records + (record,)})
    return transition


def _replace(field_name: str) -> Transition:
    def transition(state: AppState, record: Any) -> AppState:
        records = getattr(state, field_name)
        if not any(r.id == record.id for r in records):
            return state
        updated = tuple(record if r.id == record.id else r for r in records)
        return replace(state, **{field_name: updated})
    return transition


def _remove(field_name: str) -> Transition:
    def transition(state: AppState, record_id: str) -> AppState:
        records = getattr(state, field_name)
        kept = tuple(r for r in records if r.id != record_id)
        if len(kept) == len(records):
            return state
        return replace(state, **{field_name: kept})
    return transition


def _apply_sale_to_inventory(state: AppState, change: StockDecrement) -> AppState:
    if state.find_item(change.item_id) is None:
        return state
    # No stock check here: SaleService validates under the store lock.
    inventory = tuple(
        replace(item, quantity=item.quantity - change.quantity_sold)
        if item.id == change.item_id else item
        for item in state.inventory
    )
    return replace(state, inventory=inventory)


def _set_tier(tier: UserTier) -> Transition:
    def transition(state: AppState, _payload: Any) -> AppState:
        if state.user_tier == tier:
            return state
        return replace(state, user_tier=tier)
    return transition


TRANSITIONS: dict[ActionType, Transition] = {
    ActionType.ADD_INVENTORY_ITEM: _append("inventory"),
    ActionType.UPDATE_INVENTORY_ITEM: _replace("inventory"),
    ActionType.DELETE_INVENTORY_ITEM: _remove("inventory"),
    ActionType.ADD_SALE: _append("sales"),
    ActionType.UPDATE_INVENTORY_AFTER_SALE: _apply_sale_to_inventory,
    ActionType.ADD_CONTACT: _append("contacts"),
    ActionType.UPDATE_CONTACT: _replace("contacts"),
    ActionType.DELETE_CONTACT: _remove("contacts"),
    ActionType.ADD_REMINDER: _append("reminders"),
    ActionType.UPDATE_REMINDER: _replace("reminders"),
    ActionType.DELETE_REMINDER: _remove("reminders"),
    ActionType.UPGRADE_TO_PRO: _set_tier(UserTier.PRO),
    ActionType.DOWNGRADE_TO_FREE: _set_tier(UserTier.FREE),
}


def reduce(state: AppState, action: Action) -> AppState:
    return TRANSITIONS[action.type](state, action.payload)
