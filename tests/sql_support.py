"""SQLite-backed units of work for tests that need real transactions."""

from __future__ import annotations

from typing import Callable

from storefront.domain.model.cart import Address, CartLine
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.database import (
    create_schema,
    make_engine,
    make_session_factory,
)
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


def sql_uow_factory(database_url: str = "sqlite://") -> Callable[[], UnitOfWork]:
    engine = make_engine(database_url)
    create_schema(engine)
    factory = make_session_factory(engine)
    return lambda: SqlUnitOfWork(factory)


def seed(
    uow_factory: Callable[[], UnitOfWork],
    stock: dict[str, int] | None = None,
    carts: dict[str, list[CartLine]] | None = None,
    addresses: list[Address] | None = None,
) -> None:
    with uow_factory() as uow:
        for variant_id, on_hand in (stock or {}).items():
            uow.stock.set_on_hand(variant_id, on_hand)
        for user_id, lines in (carts or {}).items():
            for line in lines:
                uow.carts.add_line(user_id, line)
        for address in addresses or []:
            uow.addresses.add(address)
        uow.commit()


def stock_of(uow_factory: Callable[[], UnitOfWork], variant_id: str) -> tuple[int, int]:
    """(on_hand, held) as committed."""
    with uow_factory() as uow:
        record = uow.stock.get(variant_id)
    return record.on_hand, record.held
