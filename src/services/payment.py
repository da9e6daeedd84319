"""Simulated payment gateway.

No real processor is contacted. SandboxPaymentGateway mimics a gateway's
latency and probabilistic outcome; anything talking to a real processor
would implement PaymentGateway instead.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from src.errors import PaymentValidationError
from src.services.validator import ValidationResult
from src.utils.calculations import random_base36

logger = logging.getLogger(__name__)


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    NET_BANKING = "netbanking"


class PaymentStatus(str, Enum):
    SUCCEEDED = "succeeded"
    DECLINED = "declined"
    INVALID = "invalid"


@dataclass
class PaymentRequest:
    amount: float
    description: str
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    currency: str = "INR"


@dataclass
class PaymentResult:
    status: PaymentStatus
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == PaymentStatus.SUCCEEDED


DECLINE_REASONS: dict[PaymentMethod, tuple[str, ...]] = {
    PaymentMethod.CARD: (
        "Payment declined by test bank",
        "Insufficient test funds",
        "Test card expired",
        "Test network timeout",
        "Invalid test card details",
        "Test transaction limit exceeded",
    ),
    PaymentMethod.UPI: (
        "Test UPI ID not found",
        "Test transaction declined",
        "Test daily limit exceeded",
        "Test UPI service unavailable",
        "Invalid test UPI PIN",
    ),
    PaymentMethod.NET_BANKING: (
        "Test bank service unavailable",
        "Invalid test credentials",
        "Test transaction timeout",
        "Test daily limit exceeded",
        "Test account temporarily blocked",
    ),
}

# Simulated processing latency, seconds
DEFAULT_DELAYS: dict[PaymentMethod, float] = {
    PaymentMethod.CARD: 2.0,
    PaymentMethod.UPI: 1.5,
    PaymentMethod.NET_BANKING: 2.5,
}

_ID_PREFIXES: dict[PaymentMethod, tuple[str, str]] = {
    PaymentMethod.CARD: ("pay_test", "order_test"),
    PaymentMethod.UPI: ("upi_test", "order_upi_test"),
    PaymentMethod.NET_BANKING: ("nb_test", "order_nb_test"),
}

SUPPORTED_BANKS: list[dict[str, str]] = [
    {"code": "sbi", "name": "State Bank of India (Test)"},
    {"code": "hdfc", "name": "HDFC Bank (Test)"},
    {"code": "icici", "name": "ICICI Bank (Test)"},
    {"code": "axis", "name": "Axis Bank (Test)"},
    {"code": "kotak", "name": "Kotak Mahindra Bank (Test)"},
    {"code": "pnb", "name": "Punjab National Bank (Test)"},
    {"code": "bob", "name": "Bank of Baroda (Test)"},
    {"code": "canara", "name": "Canara Bank (Test)"},
    {"code": "union", "name": "Union Bank of India (Test)"},
    {"code": "indian", "name": "Indian Bank (Test)"},
    {"code": "yes", "name": "Yes Bank (Test)"},
    {"code": "idbi", "name": "IDBI Bank (Test)"},
]

TEST_CARDS: dict[str, list[dict[str, str]]] = {
    "success": [
        {"number": "4111 1111 1111 1111", "type": "Test Visa", "expiry": "12/25", "cvv": "123"},
        {"number": "5555 5555 5555 4444", "type": "Test Mastercard", "expiry": "12/25", "cvv": "123"},
        {"number": "6074 6000 0000 0007", "type": "Test RuPay", "expiry": "12/25", "cvv": "123"},
    ],
    "failure": [
        {"number": "4000 0000 0000 0002", "type": "Test Declined", "expiry": "12/25", "cvv": "123"},
        {"number": "4000 0000 0000 0069", "type": "Test Expired", "expiry": "12/25", "cvv": "123"},
    ],
}


def _text(details: dict, key: str) -> str:
    value = details.get(key)
    return value if isinstance(value, str) else ""


def validate_payment_details(method: Union[PaymentMethod, str], details: dict) -> ValidationResult:
    """Local shape checks, run before any simulated call."""
    try:
        method = PaymentMethod(method)
    except ValueError:
        return ValidationResult(is_valid=False, errors=["Invalid payment method"])

    errors = []
    if method == PaymentMethod.UPI:
        if len(_text(details, "upi_id").strip()) < 3:
            errors.append("Please enter a valid UPI ID")
    elif method == PaymentMethod.NET_BANKING:
        if not _text(details, "bank_code"):
            errors.append("Please select a bank")
    elif method == PaymentMethod.CARD:
        if len(_text(details, "card_number").replace(" ", "")) < 16:
            errors.append("Please enter a valid card number")
        elif len(_text(details, "expiry_date")) < 5:
            errors.append("Please enter a valid expiry date")
        elif len(_text(details, "cvv")) < 3:
            errors.append("Please enter a valid CVV")
        elif len(_text(details, "cardholder_name").strip()) < 2:
            errors.append("Please enter cardholder name")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


def configuration_status() -> dict[str, Any]:
    return {
        "is_test_mode": True,
        "environment": "Test Only",
        "message": "Test mode active - simulated payments only",
        "payment_methods": [m.value for m in PaymentMethod],
        "test_cards_available": True,
    }


class PaymentGateway(ABC):
    """Charges a customer. Implementations must not change application state."""

    @abstractmethod
    async def charge(
        self, method: Union[PaymentMethod, str], details: dict, request: PaymentRequest
    ) -> PaymentResult:
        """Returns SUCCEEDED or DECLINED; raises PaymentValidationError on bad input."""
        ...


class SandboxPaymentGateway(PaymentGateway):
    """Test-mode gateway: fixed delay, random success, random decline reason."""

    def __init__(
        self,
        success_rate: float = 0.95,
        delays: Optional[dict[PaymentMethod, float]] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self._success_rate = success_rate
        self._delays = {**DEFAULT_DELAYS, **(delays or {})}
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._clock = clock

    async def charge(
        self, method: Union[PaymentMethod, str], details: dict, request: PaymentRequest
    ) -> PaymentResult:
        validation = validate_payment_details(method, details)
        if not validation.is_valid:
            raise PaymentValidationError(validation.message)
        method = PaymentMethod(method)

        logger.info("Processing test %s payment: amount=%.2f %s", method.value, request.amount, request.currency)
        await self._sleep(self._delays[method])

        if self._rng.random() < self._success_rate:
            millis = int(self._clock() * 1000)
            payment_prefix, order_prefix = _ID_PREFIXES[method]
            result = PaymentResult(
                status=PaymentStatus.SUCCEEDED,
                payment_id=f"{payment_prefix}_{millis}_{random_base36(9, self._rng)}",
                order_id=f"{order_prefix}_{millis}",
            )
            logger.info("Test payment successful: %s", result.payment_id)
            return result

        reason = self._rng.choice(DECLINE_REASONS[method])
        logger.info("Test payment declined: %s", reason)
        return PaymentResult(status=PaymentStatus.DECLINED, error=reason)
