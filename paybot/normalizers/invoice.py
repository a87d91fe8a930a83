"""Normalizer for storefront invoices posted directly as JSON."""

from __future__ import annotations

import logging
from typing import Any

from paybot.shared.models import UNKNOWN_INVOICE, PurchaseRecord, PurchaseStatus

from .base import NormalizerKind, PayloadNormalizer, clean_text, parse_quantity

logger = logging.getLogger(__name__)


class StructuredInvoiceParser(PayloadNormalizer):
    """One record per invoice line item, only for completed invoices."""

    kind = NormalizerKind.STRUCTURED_INVOICE

    def can_handle(self, payload: Any) -> bool:
        return isinstance(payload, dict) and "status" in payload

    def find_recipient(self, invoice: dict[str, Any]) -> str:
        """In-game name from ``custom_fields`` (mapping) or ``custom_field_values`` (list)."""
        custom_fields = invoice.get("custom_fields")
        if isinstance(custom_fields, dict):
            value = clean_text(custom_fields.get(self.custom_field_name))
            if value:
                logger.debug(f"Found in custom_fields: {value}")
                return value

        field_values = invoice.get("custom_field_values")
        if isinstance(field_values, list):
            for field in field_values:
                if isinstance(field, dict) and field.get("name") == self.custom_field_name:
                    value = clean_text(field.get("value"))
                    if value:
                        logger.debug(f"Found in custom_field_values: {value}")
                        return value
        return ""

    def extract(self, payload: dict[str, Any]) -> list[PurchaseRecord] | None:
        invoice_id = clean_text(payload.get("id") or payload.get("invoice_id")) or UNKNOWN_INVOICE
        status = PurchaseStatus.parse(payload.get("status"))
        logger.info(f"Invoice {invoice_id}: status={payload.get('status')!r}")

        if status is not PurchaseStatus.COMPLETED:
            logger.info(f"Invoice {invoice_id} not completed, skipping")
            return []

        recipient = self.find_recipient(payload)
        if not recipient:
            custom_fields = payload.get("custom_fields")
            available = list(custom_fields) if isinstance(custom_fields, dict) else []
            logger.error(
                f"No in-game name ('{self.custom_field_name}') in invoice {invoice_id}, "
                f"available custom fields: {available}"
            )
            return []

        items = payload.get("items")
        if not isinstance(items, list) or not items:
            logger.warning(f"No items found in invoice {invoice_id}")
            return []

        records: list[PurchaseRecord] = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed item in invoice {invoice_id}: {item!r}")
                continue
            product_id = clean_text(item.get("product_id"))
            records.append(
                PurchaseRecord(
                    invoice_id=invoice_id,
                    product_id=product_id or None,
                    product_name=clean_text(item.get("product_name") or item.get("name")) or None,
                    quantity=parse_quantity(item.get("quantity")),
                    recipient_name=recipient,
                    status=status,
                )
            )
        return records
