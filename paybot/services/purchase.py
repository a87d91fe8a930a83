"""Purchase processing: catalog match, reward/payment commands, status events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from paybot.core.notifier import NotificationKind
from paybot.shared.models import Command, ProcessResult, PurchaseOutcome, PurchaseRecord

if TYPE_CHECKING:
    from .catalog import ProductCatalog

logger = logging.getLogger(__name__)


class CommandSink(Protocol):
    def enqueue(self, command: Command) -> None: ...


class NotificationSink(Protocol):
    def dispatch(self, kind: NotificationKind, data: dict) -> None: ...


def _format_quotient(amount: int, unit: int) -> str:
    quotient = amount / unit
    if quotient.is_integer():
        return str(int(quotient))
    return repr(quotient)


def format_amount(amount: int) -> str:
    """Short in-game currency notation: 1500000 -> "1.5m", 2000 -> "2k", 999 -> "999"."""
    if amount >= 1_000_000:
        return f"{_format_quotient(amount, 1_000_000)}m"
    if amount >= 1_000:
        return f"{_format_quotient(amount, 1_000)}k"
    return str(amount)


def pay_command(recipient: str, formatted_amount: str) -> Command:
    return Command(f"/pay {recipient} {formatted_amount}")


class PurchaseProcessor:
    def __init__(
        self,
        catalog: ProductCatalog,
        queue: CommandSink,
        notifier: NotificationSink | None = None,
    ) -> None:
        self.catalog = catalog
        self.queue = queue
        self.notifier = notifier

    def process(self, record: PurchaseRecord) -> ProcessResult:
        """Turn one purchase into queued commands.

        Commands for a purchase are enqueued together, reward command first,
        then the ``/pay`` command. Rejections are reported to the notifier and
        returned as an outcome, never raised.
        """
        logger.info(
            f"Processing purchase: invoice={record.invoice_id} product={record.product_name} "
            f"quantity={record.quantity}"
        )

        if not record.is_completed:
            logger.info(f"Invoice {record.invoice_id} not completed, skipping")
            return ProcessResult(PurchaseOutcome.NOT_COMPLETED)

        if not record.recipient_name:
            error = "No in-game name found in webhook data"
            logger.error(error)
            self._notify(
                NotificationKind.PAYMENT_ERROR,
                {"error": error, "invoice_id": record.invoice_id},
            )
            return ProcessResult(PurchaseOutcome.MISSING_RECIPIENT)

        product = self.catalog.resolve(record.product_id, record.product_name)
        if product is None:
            error = f"No configuration found for product: {record.product_name or record.product_id}"
            logger.warning(error)
            self._notify(
                NotificationKind.PAYMENT_ERROR,
                {"error": error, "invoice_id": record.invoice_id},
            )
            return ProcessResult(PurchaseOutcome.UNKNOWN_PRODUCT)

        logger.info(f"Matched product id: {product.id}")

        commands: list[Command] = []
        if product.on_purchase_command:
            commands.append(Command(product.on_purchase_command))

        formatted = format_amount(product.amount_per_unit * record.quantity)
        commands.append(pay_command(record.recipient_name, formatted))

        for command in commands:
            self.queue.enqueue(command)

        logger.info(f"Queued payment: {formatted} to {record.recipient_name}")
        self._notify(
            NotificationKind.PAYMENT_SUCCESS,
            {
                "in_game_name": record.recipient_name,
                "amount": formatted,
                "product_name": product.display_name,
                "quantity": record.quantity,
                "invoice_id": record.invoice_id,
            },
        )
        return ProcessResult(
            PurchaseOutcome.SUCCESS,
            commands=commands,
            product_id=product.id,
            formatted_amount=formatted,
        )

    def _notify(self, kind: NotificationKind, data: dict) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.dispatch(kind, data)
        except Exception as e:
            logger.error(f"Could not schedule {kind.value} notification: {e}")
