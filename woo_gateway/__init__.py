"""WooCommerce gateway: credential-holding proxy and its resilient client."""

from .client import WooProxyClient
from .errors import (
    AuthenticationError,
    ConfigurationError,
    EndpointNotFoundError,
    NetworkError,
    RequestTimeoutError,
    ResponseParseError,
    UpstreamHTTPError,
    WooGatewayError,
)
from .models import ProxyRequest

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "EndpointNotFoundError",
    "NetworkError",
    "ProxyRequest",
    "RequestTimeoutError",
    "ResponseParseError",
    "UpstreamHTTPError",
    "WooGatewayError",
    "WooProxyClient",
]
