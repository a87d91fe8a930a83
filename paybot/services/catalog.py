"""Product catalog: product id / display name -> reward policy."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from paybot.shared.models import ProductConfig

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_ID = "default"
DEFAULT_PRODUCT = ProductConfig(
    id=DEFAULT_PRODUCT_ID,
    display_name="Default Package",
    amount_per_unit=1_000_000,
    on_purchase_command="/afk 33",
)


class ProductCatalog:
    """Read-only product lookup, never empty."""

    def __init__(self, products: Mapping[str, ProductConfig] | None = None) -> None:
        if not products:
            logger.warning("No PRODUCT_CONFIG found, using default configuration")
            products = {DEFAULT_PRODUCT_ID: DEFAULT_PRODUCT}

        # Keys are authoritative for ids; insertion order drives name matching
        self._products: dict[str, ProductConfig] = {
            key: config if config.id == key else config.model_copy(update={"id": key})
            for key, config in products.items()
        }

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[ProductConfig]:
        return iter(self._products.values())

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def get(self, product_id: str | None) -> ProductConfig | None:
        if not product_id:
            return None
        return self._products.get(product_id)

    def find_by_name(self, name: str | None) -> ProductConfig | None:
        """Case-insensitive exact match on display name, first wins."""
        if not name:
            return None
        wanted = name.lower()
        for config in self._products.values():
            if config.display_name.lower() == wanted:
                return config
        return None

    def resolve(self, product_id: str | None, product_name: str | None) -> ProductConfig | None:
        """Identifier match first, display-name match second."""
        return self.get(product_id) or self.find_by_name(product_name)
