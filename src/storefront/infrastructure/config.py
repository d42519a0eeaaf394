"""Runtime settings, read once from the environment (and ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from dotenv import load_dotenv

from storefront.domain.model.policy import StorePolicy
from storefront.domain.model.value_objects import Money


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///storefront.db"
    redis_url: str = "redis://localhost:6379/0"
    reservation_ttl: timedelta = timedelta(minutes=10)
    free_shipping_threshold: Decimal = Decimal("1499")
    standard_shipping_charge: Decimal = Decimal("99")
    currency: str = "INR"
    cod_default_enabled: bool = True
    cod_enabled_pincodes: frozenset[str] = field(default_factory=frozenset)
    payment_key_id: str = ""
    payment_key_secret: str = ""
    payment_webhook_secret: str = ""
    payment_api_url: str = "https://api.razorpay.com/v1"
    payment_timeout_seconds: float = 10.0
    side_effect_attempts: int = 3
    log_level: str = "INFO"
    log_json: bool = False

    def store_policy(self) -> StorePolicy:
        return StorePolicy(
            free_shipping_threshold=Money(self.free_shipping_threshold, self.currency),
            standard_shipping_charge=Money(self.standard_shipping_charge, self.currency),
            cod_default_enabled=self.cod_default_enabled,
            cod_enabled_pincodes=self.cod_enabled_pincodes,
        )


def load_settings() -> Settings:
    load_dotenv()
    pincodes = os.getenv("COD_ENABLED_PINCODES", "")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///storefront.db"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        reservation_ttl=timedelta(minutes=int(os.getenv("STOCK_RESERVATION_MINUTES", "10"))),
        free_shipping_threshold=Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "1499")),
        standard_shipping_charge=Decimal(os.getenv("STANDARD_SHIPPING_CHARGE", "99")),
        currency=os.getenv("CURRENCY", "INR"),
        cod_default_enabled=_flag(os.getenv("COD_DEFAULT_ENABLED", "true")),
        cod_enabled_pincodes=frozenset(p.strip() for p in pincodes.split(",") if p.strip()),
        payment_key_id=os.getenv("PAYMENT_KEY_ID", ""),
        payment_key_secret=os.getenv("PAYMENT_KEY_SECRET", ""),
        payment_webhook_secret=os.getenv("PAYMENT_WEBHOOK_SECRET", ""),
        payment_api_url=os.getenv("PAYMENT_API_URL", "https://api.razorpay.com/v1"),
        payment_timeout_seconds=float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "10")),
        side_effect_attempts=int(os.getenv("SIDE_EFFECT_ATTEMPTS", "3")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_json=_flag(os.getenv("LOG_JSON", "false")),
    )
