from src.store.actions import Action, ActionType, StockDecrement
from src.store.store import AppStore

__all__ = [
    "Action",
    "ActionType",
    "AppStore",
    "StockDecrement",
]
