"""End-to-end CLI tests against a file-backed SQLite database."""

import pytest
import structlog
from click.testing import CliRunner

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.main import cli

_CACHED = [bootstrap.settings, bootstrap.engine, bootstrap.session_factory, bootstrap.lease_store]


@pytest.fixture
def run(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    for cached in _CACHED:
        cached.cache_clear()
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args))

    invoke("init-db")
    yield invoke

    for cached in _CACHED:
        cached.cache_clear()
    structlog.reset_defaults()


def test_stock_set_and_show(run):
    result = run("stock", "set", "--variant", "TEE-M", "--on-hand", "12")
    assert result.exit_code == 0
    assert "available=12" in result.output

    result = run("stock", "show")
    assert "TEE-M" in result.output


def test_cod_checkout_then_cancel(run):
    run("stock", "set", "--variant", "TEE-M", "--on-hand", "5")
    run("address", "add", "--id", "home", "--user", "asha", "--postal-code", "560001")
    run("cart", "add", "--user", "asha", "--variant", "TEE-M", "--name", "Tee", "--quantity", "2", "--price", "799")

    result = run("checkout", "complete", "--user", "asha", "--address", "home", "--method", "cod")

    assert result.exit_code == 0, result.output
    assert "Order #1 ORD-" in result.output
    assert "INR 1598.00" in result.output
    assert "TEE-M" in run("stock", "show").output

    result = run("order", "cancel", "--id", "1", "--user", "asha")
    assert result.exit_code == 0
    assert "cancelled" in result.output


def test_domain_errors_become_click_errors(run):
    run("address", "add", "--id", "home", "--user", "asha", "--postal-code", "560001")

    result = run("checkout", "complete", "--user", "asha", "--address", "home", "--method", "cod")

    assert result.exit_code == 1
    assert "Error: Cart is empty" in result.output


def test_coupon_create_and_validate(run):
    result = run(
        "coupon", "create", "--code", "monsoon15", "--type", "percentage", "--value", "15",
        "--valid-from", "2000-01-01", "--valid-until", "2999-12-31",
    )
    assert result.exit_code == 0, result.output

    result = run("coupon", "validate", "--code", "MONSOON15", "--order-value", "1000")
    assert "INR 150.00" in result.output
    assert "INR 850.00" in result.output
