"""Tests for gateway settings loaded from the environment."""

from payments.settings import GatewaySettings


class TestGatewaySettings:
    def test_defaults(self):
        settings = GatewaySettings.from_env({})
        assert settings.secret_key is None
        assert settings.uses_stripe is False
        assert settings.api_version == "2022-11-15"
        assert settings.currency == "egp"
        assert settings.timeout == 10.0

    def test_from_environment(self):
        settings = GatewaySettings.from_env(
            {
                "STRIPE_SECRET": "sk_test_123",
                "STRIPE_PUBLISHABLE_KEY": "pk_test_123",
                "STRIPE_WEBHOOK_SECRET": "whsec_123",
                "STRIPE_API_VERSION": "2023-10-16",
                "PAYMENT_CURRENCY": "usd",
                "PAYMENT_GATEWAY_TIMEOUT": "2.5",
            }
        )
        assert settings.uses_stripe is True
        assert settings.publishable_key == "pk_test_123"
        assert settings.webhook_secret == "whsec_123"
        assert settings.api_version == "2023-10-16"
        assert settings.currency == "usd"
        assert settings.timeout == 2.5

    def test_blank_secret_means_fake_gateway(self):
        assert GatewaySettings.from_env({"STRIPE_SECRET": ""}).uses_stripe is False
