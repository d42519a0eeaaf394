"""SQLAlchemy-backed cart and address repositories."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.domain.model.cart import Address, CartLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.cart_repository import AddressRepository, CartRepository
from storefront.infrastructure.persistence.orm import AddressRow, CartItemRow


class SqlCartRepository(CartRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_lines(self, user_id: str) -> list[CartLine]:
        rows = self._session.scalars(
            select(CartItemRow)
            .where(CartItemRow.user_id == user_id)
            .order_by(CartItemRow.id)
            .execution_options(populate_existing=True)
        ).all()
        return [
            CartLine(
                variant_id=row.variant_id,
                product_name=row.product_name,
                quantity=Quantity(row.quantity),
                unit_price=Money.of(row.unit_price, row.currency),
            )
            for row in rows
        ]

    def add_line(self, user_id: str, line: CartLine) -> None:
        row = self._session.scalars(
            select(CartItemRow).where(
                CartItemRow.user_id == user_id, CartItemRow.variant_id == line.variant_id
            )
        ).first()
        if row is None:
            row = CartItemRow(user_id=user_id, variant_id=line.variant_id)
            self._session.add(row)
        row.product_name = line.product_name
        row.quantity = line.quantity.value
        row.unit_price = line.unit_price.amount
        row.currency = line.unit_price.currency
        self._session.flush()

    def clear(self, user_id: str) -> int:
        result = self._session.execute(
            delete(CartItemRow)
            .where(CartItemRow.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class SqlAddressRepository(AddressRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, address_id: str) -> Address | None:
        row = self._session.get(AddressRow, address_id)
        if row is None:
            return None
        return Address(id=row.id, user_id=row.user_id, postal_code=row.postal_code)

    def add(self, address: Address) -> None:
        self._session.add(
            AddressRow(id=address.id, user_id=address.user_id, postal_code=address.postal_code)
        )
        self._session.flush()
