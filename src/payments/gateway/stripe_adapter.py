"""Stripe payment gateway adapter built on the stripe-python SDK.

The client is created once with the secret key and a bounded HTTP timeout;
every SDK error is surfaced as ``GatewayError`` so callers never depend on
Stripe's exception hierarchy.
"""

import stripe

from payments.gateway.port import (
    Customer,
    EphemeralKey,
    GatewayError,
    PaymentGateway,
    PaymentIntent,
    WebhookEvent,
)
from payments.gateway.signature import verify_event


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, webhook_secret: str, timeout: float = 10.0, client=None) -> None:
        self.webhook_secret = webhook_secret
        self.client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
        )

    def create_customer(self) -> Customer:
        try:
            customer = self.client.customers.create()
        except stripe.StripeError as exc:
            raise GatewayError(f"Customer creation failed: {exc}") from exc
        return Customer(id=customer.id)

    def create_ephemeral_key(self, customer_id: str, api_version: str) -> EphemeralKey:
        try:
            key = self.client.ephemeral_keys.create(
                params={"customer": customer_id},
                options={"stripe_version": api_version},
            )
        except stripe.StripeError as exc:
            raise GatewayError(f"Ephemeral key creation failed: {exc}") from exc
        return EphemeralKey(id=key.id, secret=key.secret)

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: dict,
        receipt_email: str | None,
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        params = {
            "amount": amount,
            "currency": currency,
            "customer": customer_id,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if receipt_email:
            params["receipt_email"] = receipt_email
        options = {"idempotency_key": idempotency_key} if idempotency_key else {}

        try:
            intent = self.client.payment_intents.create(params=params, options=options)
        except stripe.StripeError as exc:
            raise GatewayError(f"Payment intent creation failed: {exc}") from exc
        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> WebhookEvent:
        return verify_event(payload, signature, self.webhook_secret, stripe.Webhook.DEFAULT_TOLERANCE)
