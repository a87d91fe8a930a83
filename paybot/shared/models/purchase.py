"""Data models for purchase records and outbound game commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

UNKNOWN_INVOICE = "unknown"


class PurchaseStatus(str, Enum):
    """Invoice status. Only completed purchases are dispatched."""

    COMPLETED = "completed"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> PurchaseStatus:
        if value == cls.COMPLETED.value:
            return cls.COMPLETED
        return cls.OTHER


class PurchaseOutcome(str, Enum):
    SUCCESS = "success"
    MISSING_RECIPIENT = "missing-recipient"
    UNKNOWN_PRODUCT = "unknown-product"
    NOT_COMPLETED = "not-completed"


@dataclass
class PurchaseRecord:
    """One purchase (or one line item of a multi-item invoice)."""

    invoice_id: str = UNKNOWN_INVOICE
    product_id: str | None = None
    product_name: str | None = None
    quantity: int = 1
    recipient_name: str = ""
    status: PurchaseStatus = PurchaseStatus.COMPLETED
    price_text: str | None = None  # raw "<qty> x <unit price>" line, if any
    source: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status is PurchaseStatus.COMPLETED


@dataclass(frozen=True)
class Command:
    """A literal chat instruction delivered to the game session."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass
class ProcessResult:
    outcome: PurchaseOutcome
    commands: list[Command] = field(default_factory=list)
    product_id: str | None = None
    formatted_amount: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is PurchaseOutcome.SUCCESS
