"""Application service: Add Address use case."""

from __future__ import annotations

from typing import Callable

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Address
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddAddressHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, address_id: str, user_id: str, postal_code: str) -> Address:
        postal_code = postal_code.strip()
        if not postal_code:
            raise ValidationError("Postal code is required")
        address = Address(id=address_id, user_id=user_id, postal_code=postal_code)
        with self._uow_factory() as uow:
            if uow.addresses.get_by_id(address_id) is not None:
                raise ValidationError(f"Address '{address_id}' already exists")
            uow.addresses.add(address)
            uow.commit()
        return address
