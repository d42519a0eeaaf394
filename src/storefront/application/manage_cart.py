"""Application services: cart upkeep for the shopper (command + query)."""

from __future__ import annotations

from typing import Callable

from storefront.application.dto import CartLineDTO
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddToCartHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork], currency: str) -> None:
        self._uow_factory = uow_factory
        self._currency = currency

    def handle(
        self, user_id: str, variant_id: str, product_name: str, quantity: int, unit_price: str
    ) -> list[CartLineDTO]:
        line = CartLine(
            variant_id=variant_id,
            product_name=product_name,
            quantity=Quantity(quantity),
            unit_price=Money.of(unit_price, self._currency),
        )
        with self._uow_factory() as uow:
            uow.carts.add_line(user_id, line)
            uow.commit()
            return _to_dtos(uow.carts.list_lines(user_id))


class ShowCartHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, user_id: str) -> list[CartLineDTO]:
        with self._uow_factory() as uow:
            return _to_dtos(uow.carts.list_lines(user_id))


def _to_dtos(lines: list[CartLine]) -> list[CartLineDTO]:
    return [
        CartLineDTO(
            variant_id=line.variant_id,
            product_name=line.product_name,
            quantity=line.quantity.value,
            unit_price=str(line.unit_price),
            subtotal=str(line.subtotal),
        )
        for line in lines
    ]
