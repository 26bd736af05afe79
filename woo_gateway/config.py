"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Gateway settings loaded from environment variables.

    The three WooCommerce credentials are optional here: a process without them
    still starts, and every proxy call is answered with a configuration error.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    woocommerce_api_url: str | None = Field(
        default=None, description="WooCommerce REST base URL, e.g. https://shop/wp-json/wc/v3"
    )
    woocommerce_consumer_key: str | None = Field(default=None, description="REST API consumer key")
    woocommerce_consumer_secret: str | None = Field(
        default=None, description="REST API consumer secret"
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port", ge=1, le=65535)
    log_level: str = Field(default="INFO", description="Logging level")
    upstream_timeout: float = Field(
        default=30.0, description="Upstream request timeout in seconds", ge=1.0
    )
    cors_origins: str = Field(default="*", description="Comma separated list of allowed origins")
    preserve_upstream_status: bool = Field(
        default=False, description="Relay the upstream 2xx status instead of normalizing to 200"
    )

    @property
    def credentials_configured(self) -> bool:
        return bool(
            self.woocommerce_api_url
            and self.woocommerce_consumer_key
            and self.woocommerce_consumer_secret
        )

    @property
    def api_url(self) -> str | None:
        """Base URL without trailing slashes."""
        if not self.woocommerce_api_url:
            return None
        return self.woocommerce_api_url.rstrip("/")

    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class ClientSettings(BaseSettings):
    """Settings for the proxy client, read from WOO_PROXY_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="WOO_PROXY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    base_url: str | None = Field(default=None, description="Base URL of the gateway")
    timeout: float = Field(default=15.0, description="Per-attempt timeout in seconds", gt=0)
    max_retries: int = Field(default=2, description="Retries after the first attempt", ge=0)
    backoff_base: float = Field(default=1.0, description="First backoff delay in seconds", ge=0)


@lru_cache
def get_settings() -> GatewaySettings:
    """Get the gateway settings instance."""
    return GatewaySettings()


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get the client settings instance."""
    return ClientSettings()
