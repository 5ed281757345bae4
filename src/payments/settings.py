"""Payment gateway settings read from the environment."""

import os
from dataclasses import dataclass

DEFAULT_API_VERSION = "2022-11-15"
DEFAULT_CURRENCY = "egp"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class GatewaySettings:
    secret_key: str | None = None
    publishable_key: str = ""
    webhook_secret: str = ""
    api_version: str = DEFAULT_API_VERSION
    currency: str = DEFAULT_CURRENCY
    timeout: float = DEFAULT_TIMEOUT

    @property
    def uses_stripe(self) -> bool:
        return bool(self.secret_key)

    @classmethod
    def from_env(cls, environ=None) -> "GatewaySettings":
        env = os.environ if environ is None else environ
        return cls(
            secret_key=env.get("STRIPE_SECRET") or None,
            publishable_key=env.get("STRIPE_PUBLISHABLE_KEY", ""),
            webhook_secret=env.get("STRIPE_WEBHOOK_SECRET", ""),
            api_version=env.get("STRIPE_API_VERSION", DEFAULT_API_VERSION),
            currency=env.get("PAYMENT_CURRENCY", DEFAULT_CURRENCY),
            timeout=float(env.get("PAYMENT_GATEWAY_TIMEOUT", DEFAULT_TIMEOUT)),
        )
