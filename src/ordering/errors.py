"""Errors raised by the checkout workflow beyond Protean's own exceptions."""

from protean.exceptions import InvalidStateError


class AlreadyProcessed(InvalidStateError):
    """An order already exists for this idempotency key.

    Raised when a checkout (typically a redelivered gateway notification)
    would create a second order for the same payment.
    """
