"""Business settings for the storefront.

Infrastructure (databases, brokers, event store) is configured through
``domain.toml`` and ``PROTEAN_ENV``. The knobs below drive pricing, order
numbering and checkout behaviour and are read from ``STORE_*`` environment
variables.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORE_", env_file=".env", extra="ignore")

    currency: str = Field(default="USD", max_length=3)
    tax_rate: Decimal = Field(default=Decimal("0.18"), ge=0, description="Flat tax rate applied to the subtotal")
    free_shipping_threshold: Decimal = Field(default=Decimal("50.00"), ge=0)
    flat_shipping_fee: Decimal = Field(default=Decimal("5.99"), ge=0)

    order_number_prefix: str = Field(default="QH", min_length=1, max_length=8)
    order_number_max_attempts: int = Field(default=10, ge=1, description="Regenerations allowed on collision")
    checkout_max_attempts: int = Field(default=3, ge=1, description="Whole-transaction retries on write conflicts")

    restock_on_cancel: bool = True


@lru_cache
def get_settings() -> StoreSettings:
    return StoreSettings()
