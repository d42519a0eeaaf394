"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStock(DomainException):
    """A variant lacks the available units a hold or sale needs.

    Retryable: the caller may refresh the cart and try again.
    """

    def __init__(self, variant_id: str, requested: int, message: str | None = None) -> None:
        self.variant_id = variant_id
        self.requested = requested
        super().__init__(
            message or f"Insufficient stock for variant {variant_id} (need {requested})"
        )


class ReservationExpiredOrMissing(DomainException):
    """The lease behind a reservation is gone (expired, released or confirmed)."""


class InvalidCoupon(DomainException):
    """A coupon failed validation. ``reason`` is safe to show to the shopper."""

    def __init__(self, code: str, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(f"Coupon '{code}' rejected: {reason}")


class AddressOwnershipViolation(DomainException):
    """The shipping address does not belong to the checking-out user."""


class PaymentMethodNotAllowed(DomainException):
    """The payment method is not permitted for this checkout."""


class SignatureVerificationFailed(DomainException):
    """A payment callback carried a signature we could not verify."""


class PaymentPreconditionFailed(DomainException):
    """A payment operation was attempted from the wrong payment state."""


class PaymentProviderError(DomainException):
    """The payment provider could not be reached or rejected the call."""


class CheckoutFailed(DomainException):
    """The order transaction failed and was rolled back."""
