"""Value Objects shared across the domain.

Money is always held at cent precision: whatever precision an amount
arrives with, it is rounded half-up to two places on construction, so
every total, discount and charge compares and prints the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import total_ordering

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "INR"
_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def _to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative amount in one ISO 4217 currency."""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise ValidationError(f"Money amount must be a finite Decimal, got {self.amount!r}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError(f"Unknown currency code {self.currency!r}")
        # Frozen dataclass: normalize in place.
        object.__setattr__(self, "amount", _to_cents(self.amount))
        object.__setattr__(self, "currency", self.currency.upper())

    # --- Arithmetic -----------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._same_currency(other)
        if other.amount > self.amount:
            raise ValidationError(f"Cannot take {other} from {self}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {units!r}")
        return Money(self.amount * units, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._same_currency(other)
        return self.amount < other.amount

    def percent(self, rate: Decimal) -> Money:
        """``rate`` percent of this amount."""
        return Money(self.amount * rate / _HUNDRED, self.currency)

    def min(self, other: Money) -> Money:
        return self if self <= other else other

    def to_minor_units(self) -> int:
        """Paise (or cents): the integer amount payment providers expect."""
        return int(self.amount * _HUNDRED)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    def _same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Parse ``amount`` (``"499"``, ``"499.5"``, ``Decimal``) into Money."""
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal(0), currency)


@dataclass(frozen=True)
class Quantity:
    """Units of one variant; always a positive whole number."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Quantity must be a whole number, got {self.value!r}")
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
