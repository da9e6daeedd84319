"""Pro upgrade flow - the only path from the free tier to pro.

A successful charge dispatches UPGRADE_TO_PRO. Invalid details are
rejected before the gateway is called, so they never wait for the
simulated latency. Declines leave the tier untouched and may be retried
without limit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Union

from src.errors import PaymentInProgressError, PaymentValidationError
from src.models.business import UserTier
from src.services.payment import (
    PaymentGateway,
    PaymentMethod,
    PaymentRequest,
    PaymentResult,
    PaymentStatus,
    validate_payment_details,
)
from src.store import Action, ActionType, AppStore

if TYPE_CHECKING:
    from src.services.auth import AuthService

logger = logging.getLogger(__name__)

DEFAULT_PRO_PRICE = 299.0
DEFAULT_DESCRIPTION = "Pro plan upgrade"


class UpgradeService:
    """Runs a payment through the gateway and flips the tier on success."""

    def __init__(
        self,
        store: AppStore,
        gateway: PaymentGateway,
        auth: Optional["AuthService"] = None,
        price: float = DEFAULT_PRO_PRICE,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._auth = auth
        self._price = price
        self._processing = False

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def price(self) -> float:
        return self._price

    def _build_request(self, amount: float, description: str) -> PaymentRequest:
        user = self._auth.current_user if self._auth is not None else None
        if user is None:
            return PaymentRequest(amount=amount, description=description)
        return PaymentRequest(
            amount=amount,
            description=description,
            customer_name=user.owner_name,
            customer_email=user.email,
            customer_phone=user.phone,
        )

    async def purchase_pro(
        self,
        method: Union[PaymentMethod, str],
        details: dict,
        amount: Optional[float] = None,
        description: str = DEFAULT_DESCRIPTION,
    ) -> PaymentResult:
        """Charges for the pro plan.

        Raises:
            PaymentInProgressError: a previous attempt has not finished yet.
        """
        if self._processing:
            raise PaymentInProgressError("A payment is already being processed")

        if self._auth is not None and self._auth.current_user is None:
            return PaymentResult(status=PaymentStatus.INVALID, error="User not authenticated")

        validation = validate_payment_details(method, details)
        if not validation.is_valid:
            logger.info("Payment details rejected: %s", validation.message)
            return PaymentResult(status=PaymentStatus.INVALID, error=validation.message)

        request = self._build_request(self._price if amount is None else amount, description)

        self._processing = True
        try:
            result = await self._gateway.charge(method, details, request)
        except PaymentValidationError as e:
            return PaymentResult(status=PaymentStatus.INVALID, error=str(e))
        except Exception as e:
            logger.error("Payment processing error: %s", e)
            return PaymentResult(status=PaymentStatus.DECLINED, error=str(e) or "Payment processing failed")
        finally:
            self._processing = False

        if result.success:
            self._store.dispatch(Action(ActionType.UPGRADE_TO_PRO))
            logger.info("Payment %s succeeded, user upgraded to pro", result.payment_id)
        else:
            logger.info("Payment declined: %s", result.error)
        return result

    def downgrade(self) -> None:
        """Administrative reset to the free tier."""
        if self._store.state.user_tier == UserTier.FREE:
            return
        self._store.dispatch(Action(ActionType.DOWNGRADE_TO_FREE))
        logger.info("User downgraded to free")
