"""Application state store - single source of truth for the dashboard.

- dispatch: synchronous, applies exactly one pure transition per action
- transaction: re-entrant critical section with rollback
- subscribe: listeners receive the new state after each committed change
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from src.models.business import AppState
from src.store.actions import Action
from src.store.reducer import reduce

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class AppStore:
    """Owns the AppState; every mutation goes through dispatch."""

    def __init__(self, initial_state: Optional[AppState] = None) -> None:
        self._state = initial_state or AppState()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._depth = 0

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> None:
        """Applies an action. Unknown ids are silent no-ops; never raises for them."""
        with self._lock:
            previous = self._state
            self._state = reduce(previous, action)
            changed = self._state is not previous
            deferred = self._depth > 0
            logger.debug("Action applied: %s (changed=%s)", action.type.value, changed)

        if changed and not deferred:
            self._notify()

    @contextmanager
    def transaction(self) -> Iterator[AppState]:
        """Holds the store lock; restores the entry state if the block raises.

        Listeners are notified once, when the outermost transaction commits.
        """
        self._lock.acquire()
        snapshot = self._state
        self._depth += 1
        committed = False
        try:
            yield snapshot
            committed = True
        except BaseException:
            self._state = snapshot
            logger.debug("Transaction rolled back")
            raise
        finally:
            self._depth -= 1
            notify = committed and self._depth == 0 and self._state is not snapshot
            self._lock.release()
            if notify:
                self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a listener and returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error("Store listener failed: %s", e)
