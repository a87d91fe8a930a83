"""Common interface for purchase payload normalizers"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from paybot.shared.models import PurchaseRecord

logger = logging.getLogger(__name__)


class NormalizerKind(str, Enum):
    FIELD_LIST = "field-list"
    LABEL_BLOCK = "label-block"
    STRUCTURED_INVOICE = "structured-invoice"


class PayloadNormalizer(ABC):
    """Extracts purchase records from one payload shape.

    ``normalize`` returns ``None`` when the payload is not this variant's
    shape and a (possibly empty) list of records otherwise. An empty list
    means the payload was recognised but rejected, e.g. an unpaid invoice.
    """

    kind: NormalizerKind

    def __init__(self, custom_field_name: str = "in_game_name") -> None:
        self.custom_field_name = custom_field_name

    @abstractmethod
    def can_handle(self, payload: Any) -> bool:
        """Applicability predicate for this variant"""

    @abstractmethod
    def extract(self, payload: Any) -> list[PurchaseRecord] | None:
        """Extract records from a payload that passed ``can_handle``"""

    def normalize(self, payload: Any) -> list[PurchaseRecord] | None:
        if not self.can_handle(payload):
            return None
        records = self.extract(payload)
        if records is None:
            return None
        for record in records:
            record.source = self.kind.value
        return records


class NormalizerChain:
    """Ordered, fixed set of normalizers; the first applicable one wins."""

    def __init__(self, normalizers: Iterable[PayloadNormalizer]) -> None:
        self.normalizers: Sequence[PayloadNormalizer] = tuple(normalizers)
        logger.debug(f"Normalizers: {[n.kind.value for n in self.normalizers]}")

    def detect(self, payload: Any) -> PayloadNormalizer | None:
        for normalizer in self.normalizers:
            if normalizer.can_handle(payload):
                return normalizer
        return None

    def normalize(self, payload: Any) -> list[PurchaseRecord] | None:
        normalizer = self.detect(payload)
        if normalizer is None:
            logger.info("Payload not recognised by any normalizer")
            return None
        logger.debug(f"Using {normalizer.kind.value} normalizer")
        return normalizer.normalize(payload)


def parse_quantity(value: Any, default: int = 1) -> int:
    """Positive integer from a field value, ``default`` otherwise."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, float):
        return int(value) if value >= 1 and value.is_integer() else default
    if isinstance(value, str):
        text = value.strip()
        if text.isdecimal() and int(text) > 0:
            return int(text)
    return default


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
