"""Abstract repositories for the cart and address collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Address, CartLine


class CartRepository(ABC):

    @abstractmethod
    def list_lines(self, user_id: str) -> list[CartLine]:
        """Return the user's cart, priced as of now."""

    @abstractmethod
    def add_line(self, user_id: str, line: CartLine) -> None:
        """Add a line, or replace the quantity and price of an existing one."""

    @abstractmethod
    def clear(self, user_id: str) -> int:
        """Empty the user's cart. Returns the number of lines removed."""


class AddressRepository(ABC):

    @abstractmethod
    def get_by_id(self, address_id: str) -> Address | None:
        """Return an address, or None."""

    @abstractmethod
    def add(self, address: Address) -> None:
        """Persist a new address."""
