"""Settings loading from the environment."""

from __future__ import annotations

import pytest

from woo_gateway.config import ClientSettings, GatewaySettings


def test_gateway_reads_credentials_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WOOCOMMERCE_API_URL", "https://shop.example.com/wp-json/wc/v3//")
    monkeypatch.setenv("WOOCOMMERCE_CONSUMER_KEY", "ck_env")
    monkeypatch.setenv("WOOCOMMERCE_CONSUMER_SECRET", "cs_env")

    settings = GatewaySettings(_env_file=None)

    assert settings.credentials_configured is True
    assert settings.api_url == "https://shop.example.com/wp-json/wc/v3"


@pytest.mark.parametrize(
    "missing", ["woocommerce_api_url", "woocommerce_consumer_key", "woocommerce_consumer_secret"]
)
def test_any_missing_credential_disables_gateway(missing: str) -> None:
    values = {
        "woocommerce_api_url": "https://shop.example.com/wp-json/wc/v3",
        "woocommerce_consumer_key": "ck",
        "woocommerce_consumer_secret": "cs",
    }
    values[missing] = None

    assert GatewaySettings(_env_file=None, **values).credentials_configured is False


def test_allowed_origins_are_split() -> None:
    settings = GatewaySettings(_env_file=None, cors_origins="https://a.example, https://b.example,")

    assert settings.allowed_origins() == ["https://a.example", "https://b.example"]


def test_client_settings_use_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WOO_PROXY_BASE_URL", "http://gateway.internal:8080")
    monkeypatch.setenv("WOO_PROXY_MAX_RETRIES", "4")

    settings = ClientSettings(_env_file=None)

    assert settings.base_url == "http://gateway.internal:8080"
    assert settings.max_retries == 4
    assert settings.timeout == 15.0
    assert settings.backoff_base == 1.0
