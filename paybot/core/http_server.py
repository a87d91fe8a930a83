"""HTTP webhook server"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from paybot.normalizers import StructuredInvoiceParser, embed_chain, parse_quantity
from paybot.shared.models import PurchaseRecord

from .notifier import NotificationKind

if TYPE_CHECKING:
    from paybot.state import BotState

logger = logging.getLogger("Paybot.Http")

MANUAL_INVOICE_ID = "MANUAL"


class ManualPurchaseRequest(BaseModel):
    recipient_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("recipientName", "inGameName")
    )
    product_identifier: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("productIdentifier", "productId")
    )
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v: Any) -> int:
        return parse_quantity(v)


class WebhookServer:
    """Webhook endpoints for the storefront, forwarded Discord embeds and manual triggers"""

    def __init__(self, state: BotState, host: str = "0.0.0.0", port: int = 3001) -> None:
        self.state = state
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._invoice_parser = StructuredInvoiceParser(state.settings.custom_field_name)
        self._embed_chain = embed_chain(state.settings.custom_field_name)
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes"""
        self.app.router.add_post("/webhook/sellauth", self.handle_sellauth)
        self.app.router.add_post("/webhook/discord", self.handle_discord)
        self.app.router.add_post("/webhook/manual", self.handle_manual)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_post("/test/discord", self.handle_test_discord)

    async def _read_json(self, request: web.Request) -> Any:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Invalid JSON body on {request.path}: {e}")
            raise web.HTTPBadRequest(text="Invalid JSON") from e
        logger.debug(f"Raw request body on {request.path}:\n{json.dumps(body, indent=2)}")
        return body

    def _process_all(self, records: list[PurchaseRecord]) -> None:
        for record in records:
            self.state.processor.process(record)

    async def handle_sellauth(self, request: web.Request) -> web.Response:
        """Storefront invoice posted directly"""
        logger.info("SellAuth webhook received")
        body = await self._read_json(request)
        try:
            records = self._invoice_parser.normalize(body)
            if records is None:
                logger.warning("Not an invoice payload, ignoring")
            else:
                self._process_all(records)
            return web.Response(text="OK")
        except Exception as e:
            logger.exception(f"Error processing SellAuth webhook: {e}")
            return web.Response(status=500, text="Internal Server Error")

    async def handle_discord(self, request: web.Request) -> web.Response:
        """Sale notification forwarded as a Discord embed"""
        logger.info("Discord webhook received")
        body = await self._read_json(request)
        try:
            records = self._embed_chain.normalize(body)
            if not records:
                logger.info("Not a purchase notification, ignoring")
            else:
                self._process_all(records)
            return web.Response(text="OK")
        except Exception as e:
            logger.exception(f"Error processing webhook: {e}")
            return web.Response(status=500, text="Internal Server Error")

    async def handle_manual(self, request: web.Request) -> web.Response:
        """Manual purchase trigger"""
        logger.info("Manual purchase trigger")
        body = await self._read_json(request)
        try:
            purchase = ManualPurchaseRequest.model_validate(body)
        except ValidationError:
            return web.json_response(
                {"error": "Missing required fields: recipientName, productIdentifier"},
                status=400,
            )

        try:
            product = self.state.catalog.get(purchase.product_identifier)
            record = PurchaseRecord(
                invoice_id=MANUAL_INVOICE_ID,
                product_id=purchase.product_identifier,
                product_name=product.display_name if product else "Unknown Product",
                quantity=purchase.quantity,
                recipient_name=purchase.recipient_name,
                source="manual",
            )
            result = self.state.processor.process(record)
            return web.json_response({"success": True, "outcome": result.outcome.value})
        except Exception as e:
            logger.exception(f"Error processing manual purchase: {e}")
            return web.json_response({"error": str(e)}, status=500)

    async def handle_health(self, request: web.Request) -> web.Response:
        """Liveness plus delivery state"""
        return web.json_response(
            {
                "status": "running",
                "botConnected": self.state.queue.connected,
                "queuedCommands": self.state.queue.pending,
                "productsConfigured": len(self.state.catalog),
                "uptimeSeconds": int(time.time() - self._start_time),
            }
        )

    async def handle_test_discord(self, request: web.Request) -> web.Response:
        """Send a test status embed"""
        sent = await self.state.notifier.send(NotificationKind.BOT_STATUS, {"connected": True})
        return web.json_response(
            {"success": sent, "message": "Test notification sent" if sent else "Not sent"}
        )

    async def start(self) -> None:
        """Start webhook server"""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            logger.info(f"Webhook server running on {self.host}:{self.port}")
            logger.info(f"  POST http://localhost:{self.port}/webhook/sellauth - SellAuth direct")
            logger.info(f"  POST http://localhost:{self.port}/webhook/discord  - Discord forward")
            logger.info(f"  POST http://localhost:{self.port}/webhook/manual   - Manual trigger")

        except Exception as e:
            logger.exception(f"Failed to start webhook server: {e}")
            raise

    async def stop(self) -> None:
        """Stop webhook server"""
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Webhook server stopped")
            except Exception as e:
                logger.exception(f"Error stopping webhook server: {e}")
