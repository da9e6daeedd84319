"""Free/pro feature gating."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Union

from src.models.business import UserTier
from src.store import AppStore

logger = logging.getLogger(__name__)

PREMIUM_ANALYTICS = "Premium Analytics"
ADVANCED_PDF_REPORTS = "Advanced PDF Reports"

PRO_FEATURES = frozenset({PREMIUM_ANALYTICS, ADVANCED_PDF_REPORTS})


@dataclass(frozen=True)
class Paywall:
    """Returned instead of a feature's result when the user must upgrade first."""

    feature: str


class FeatureGate:
    def __init__(self, store: AppStore, pro_features: frozenset[str] = PRO_FEATURES):
        self._store = store
        self._pro_features = pro_features

    @property
    def is_pro(self) -> bool:
        return self._store.state.user_tier == UserTier.PRO

    def check(self, feature: str) -> bool:
        """True when the current tier may use the feature."""
        return self.is_pro or feature not in self._pro_features

    def run(self, feature: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Union[Any, Paywall]:
        """Runs fn, or returns a Paywall without calling it on the free tier."""
        if not self.check(feature):
            logger.info("Paywall shown for feature: %s", feature)
            return Paywall(feature=feature)
        return fn(*args, **kwargs)
