from __future__ import annotations


# Domain-level errors the POS and report screens can surface directly (toast/snackbar)
class DomainError(Exception):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Input rejected before anything is written (discount bounds, checkout fields)."""
    pass


class EmptyCartError(DomainError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InsufficientStockError(DomainError):
    def __init__(self, item_name: str, available: float):
        super().__init__(
            f"Insufficient stock for {item_name}. Available: {available:g}",
            details={"item_name": item_name, "available": available},
        )
        self.item_name = item_name
        self.available = available


class TransactionFailedError(DomainError):
    def __init__(self, message: str = "Transaction failed. Please try again."):
        super().__init__(message)


class QueryError(DomainError):
    """A storage read failed; reports expose this instead of raising."""
    pass


__all__ = [
    "DomainError",
    "ValidationError",
    "EmptyCartError",
    "InsufficientStockError",
    "TransactionFailedError",
    "QueryError",
]
