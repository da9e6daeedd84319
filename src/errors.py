"""Dashboard exception hierarchy."""


class ValidationError(Exception):
    """Input rejected before any state change."""
    pass


class ItemNotFoundError(ValidationError):
    """Referenced inventory item does not exist."""
    pass


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the available stock."""
    pass


class PaymentValidationError(ValidationError):
    """Payment details failed the local shape checks."""
    pass


class PaymentInProgressError(Exception):
    """Another payment attempt is still in flight."""
    pass


class StorageCorruptionError(Exception):
    """A persisted blob could not be parsed or migrated."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Corrupt blob under '{key}': {reason}")
        self.key = key
        self.reason = reason


class AuthError(Exception):
    """Login or signup rejected."""
    pass
