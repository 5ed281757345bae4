"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class GatewayError(Exception):
    """The gateway could not be reached or rejected the request."""


class WebhookSignatureError(Exception):
    """A webhook payload failed signature verification."""


@dataclass(frozen=True)
class Customer:
    id: str


@dataclass(frozen=True)
class EphemeralKey:
    id: str
    secret: str


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str


@dataclass(frozen=True)
class WebhookEvent:
    """A verified gateway notification."""

    id: str
    type: str
    data: dict = field(default_factory=dict)

    @property
    def object(self) -> dict:
        """The resource the event is about (``data.object``)."""
        return self.data.get("object") or {}


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_customer(self) -> Customer:
        """Create a gateway customer to attach payment methods to."""
        ...

    @abstractmethod
    def create_ephemeral_key(self, customer_id: str, api_version: str) -> EphemeralKey:
        """Issue a short-lived key that lets the mobile client act for the customer."""
        ...

    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: dict,
        receipt_email: str | None,
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify a webhook payload and return the decoded event.

        Raises WebhookSignatureError when the signature does not match.
        """
        ...
