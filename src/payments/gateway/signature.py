"""Webhook signature verification shared by the gateway adapters.

Notifications carry a ``t=<timestamp>,v1=<hmac>`` header over the raw
body. Verification is delegated to stripe-python so every adapter checks
signatures exactly as the production gateway does.
"""

import hashlib
import hmac
import json

import stripe

from payments.gateway.port import WebhookEvent, WebhookSignatureError


def compute_signature(secret: str, timestamp: int, payload: bytes) -> str:
    signed_payload = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()


def verify_event(payload: bytes, signature: str, secret: str, tolerance: int | None) -> WebhookEvent:
    """Authenticate ``payload`` and decode it into a WebhookEvent.

    Any body that cannot be authenticated or decoded raises
    WebhookSignatureError, never a lower-level decoding error.
    """
    try:
        body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    except UnicodeDecodeError as exc:
        raise WebhookSignatureError("Webhook payload is not valid UTF-8") from exc

    try:
        stripe.WebhookSignature.verify_header(body, signature or "", secret, tolerance)
    except stripe.SignatureVerificationError as exc:
        raise WebhookSignatureError(str(exc)) from exc

    try:
        event = json.loads(body)
    except ValueError as exc:
        raise WebhookSignatureError("Webhook payload is not valid JSON") from exc
    if not isinstance(event, dict):
        raise WebhookSignatureError("Webhook payload is not a JSON object")

    return WebhookEvent(id=event.get("id", ""), type=event.get("type", ""), data=event.get("data") or {})
