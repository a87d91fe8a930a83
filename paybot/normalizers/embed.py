"""Normalizers for storefront sale notifications forwarded as Discord embeds.

Two embed layouts are understood:

* field list: ``embed.fields`` is a list of ``{"name", "value"}`` pairs
* label block: ``embed.description`` is a multi-line text where a label line
  (``**Product**``) is followed by its value line (``Gold Pack``)
"""

from __future__ import annotations

import logging
import re
from abc import abstractmethod
from typing import Any

from paybot.shared.models import PurchaseRecord, PurchaseStatus

from .base import NormalizerKind, PayloadNormalizer, clean_text, parse_quantity

logger = logging.getLogger(__name__)

TITLE_KEYWORDS = ("purchase", "sale")

_QUANTITY_PATTERN = re.compile(r"(\d+)\s*x")

LABEL_INVOICE = "Invoice ID"
LABEL_PRODUCT = "Product"
LABEL_PRICE = "Price"
LABEL_IN_GAME_NAME = "In game name"


def first_embed(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    embeds = payload.get("embeds")
    if not isinstance(embeds, list) or not embeds or not isinstance(embeds[0], dict):
        return None
    return embeds[0]


class ChatEmbedParser(PayloadNormalizer):
    """Shared applicability test: a sale/purchase title on the first embed."""

    def can_handle(self, payload: Any) -> bool:
        embed = first_embed(payload)
        if embed is None:
            return False
        title = embed.get("title")
        if not isinstance(title, str) or not any(k in title.lower() for k in TITLE_KEYWORDS):
            logger.debug(f"Not a sale notification, title: {title!r}")
            return False
        return self.matches_layout(embed)

    @abstractmethod
    def matches_layout(self, embed: dict[str, Any]) -> bool:
        """Layout-specific part of the applicability test"""

    def extract(self, payload: Any) -> list[PurchaseRecord] | None:
        embed = first_embed(payload)
        if embed is None:
            return None
        record = self.parse_embed(embed)
        return None if record is None else [record]

    @abstractmethod
    def parse_embed(self, embed: dict[str, Any]) -> PurchaseRecord | None:
        """Build a record from the embed, or None when it is unusable"""


class EmbedFieldListParser(ChatEmbedParser):
    kind = NormalizerKind.FIELD_LIST

    def matches_layout(self, embed: dict[str, Any]) -> bool:
        fields = embed.get("fields")
        return isinstance(fields, list) and len(fields) > 0

    def _recipient_keys(self) -> tuple[str, ...]:
        custom = self.custom_field_name.lower()
        return (
            custom,
            custom.replace("_", " "),
            "in game name",
            "in-game name",
            "ingame",
            "player",
            "username",
        )

    def classify(self, name: str) -> str | None:
        """Category of a field name, by case-insensitive substring."""
        lowered = name.lower()
        if "product id" in lowered or "product_id" in lowered:
            return "product_id"
        if "invoice" in lowered:
            return "invoice"
        if "quantity" in lowered or "qty" in lowered:
            return "quantity"
        if any(key in lowered for key in self._recipient_keys()):
            return "recipient"
        if "product" in lowered:
            return "product"
        return None

    def parse_embed(self, embed: dict[str, Any]) -> PurchaseRecord | None:
        found: dict[str, str] = {}
        for field in embed["fields"]:
            if not isinstance(field, dict):
                continue
            category = self.classify(clean_text(field.get("name")))
            value = clean_text(field.get("value"))
            if category is None or category in found or not value:
                continue
            found[category] = value

        record = PurchaseRecord(
            product_id=found.get("product_id") or None,
            product_name=found.get("product") or None,
            quantity=parse_quantity(found.get("quantity")),
            recipient_name=found.get("recipient", ""),
            status=PurchaseStatus.COMPLETED,
        )
        if found.get("invoice"):
            record.invoice_id = found["invoice"]

        if not record.recipient_name:
            logger.warning(f"Missing in-game name in embed fields: {sorted(found)}")
        logger.info(f"Parsed purchase from embed fields: {record}")
        return record


class EmbedLabelBlockParser(ChatEmbedParser):
    kind = NormalizerKind.LABEL_BLOCK

    def matches_layout(self, embed: dict[str, Any]) -> bool:
        fields = embed.get("fields")
        if isinstance(fields, list) and fields:
            return False
        description = embed.get("description")
        return isinstance(description, str) and bool(description.strip())

    def parse_embed(self, embed: dict[str, Any]) -> PurchaseRecord | None:
        lines = embed["description"].split("\n")
        record = PurchaseRecord(status=PurchaseStatus.COMPLETED)
        invoice_id: str | None = None

        for i, line in enumerate(lines):
            if i + 1 >= len(lines):
                break
            label = line.strip().replace("**", "")
            value = lines[i + 1].strip()

            if label == LABEL_INVOICE:
                invoice_id = value
            elif label == LABEL_PRODUCT:
                record.product_name = value
            elif label == LABEL_PRICE:
                record.price_text = value
                match = _QUANTITY_PATTERN.search(value)
                if match:
                    record.quantity = parse_quantity(match.group(1))
            elif label == LABEL_IN_GAME_NAME or label == self.custom_field_name:
                record.recipient_name = value

        if invoice_id:
            record.invoice_id = invoice_id

        if not record.recipient_name:
            available = [ln.strip().replace("**", "") for ln in lines if ln.strip()]
            logger.warning("Missing in-game name in webhook")
            logger.debug(f"Available lines: {available}")
            return None

        logger.info(f"Parsed purchase from embed description: {record}")
        return record
