"""Purchase services: product catalog and purchase processing."""

from .catalog import DEFAULT_PRODUCT, DEFAULT_PRODUCT_ID, ProductCatalog
from .keepalive import KeepAlive
from .purchase import PurchaseProcessor, format_amount, pay_command

__all__ = [
    "DEFAULT_PRODUCT",
    "DEFAULT_PRODUCT_ID",
    "KeepAlive",
    "ProductCatalog",
    "PurchaseProcessor",
    "format_amount",
    "pay_command",
]
