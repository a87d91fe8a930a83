"""Shared data models for the paybot service."""

from .product import ProductConfig
from .purchase import (
    UNKNOWN_INVOICE,
    Command,
    ProcessResult,
    PurchaseOutcome,
    PurchaseRecord,
    PurchaseStatus,
)

__all__ = [
    "UNKNOWN_INVOICE",
    "Command",
    "ProcessResult",
    "ProductConfig",
    "PurchaseOutcome",
    "PurchaseRecord",
    "PurchaseStatus",
]
