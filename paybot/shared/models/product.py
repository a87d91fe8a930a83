"""Product configuration model (entries of PRODUCT_CONFIG)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class ProductConfig(BaseModel):
    """Reward policy for one catalog product.

    Accepts the storefront-style JSON keys (``name``, ``amountPerUnit``,
    ``onPurchaseCommand``) as well as the attribute names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    display_name: str = Field(..., alias="name")
    amount_per_unit: PositiveInt = Field(..., alias="amountPerUnit")
    on_purchase_command: str | None = Field(default=None, alias="onPurchaseCommand")
