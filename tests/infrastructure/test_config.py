"""Tests for environment-driven settings."""

from datetime import timedelta
from decimal import Decimal

import pytest

from storefront.domain.model.value_objects import Money
from storefront.infrastructure.config import load_settings

_KEYS = [
    "DATABASE_URL",
    "STOCK_RESERVATION_MINUTES",
    "FREE_SHIPPING_THRESHOLD",
    "COD_DEFAULT_ENABLED",
    "COD_ENABLED_PINCODES",
    "SIDE_EFFECT_ATTEMPTS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.database_url == "sqlite:///storefront.db"
    assert settings.reservation_ttl == timedelta(minutes=10)
    assert settings.free_shipping_threshold == Decimal("1499")
    assert settings.cod_default_enabled is True
    assert settings.side_effect_attempts == 3


def test_overrides(monkeypatch):
    monkeypatch.setenv("STOCK_RESERVATION_MINUTES", "15")
    monkeypatch.setenv("COD_DEFAULT_ENABLED", "false")
    monkeypatch.setenv("COD_ENABLED_PINCODES", "560001, 110001,")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.reservation_ttl == timedelta(minutes=15)
    assert settings.cod_enabled_pincodes == frozenset({"560001", "110001"})
    assert settings.log_level == "DEBUG"
    policy = settings.store_policy()
    assert not policy.allows_cod("400001")
    assert policy.allows_cod("110001")
    assert policy.standard_shipping_charge == Money.of("99")
