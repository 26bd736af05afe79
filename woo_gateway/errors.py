"""Error taxonomy shared by the gateway and its client."""


class WooGatewayError(Exception):
    """Base class for every failure raised by the client.

    Attributes:
        endpoint: WooCommerce resource path the call was for
        status_code: HTTP status when one was received, else None
    """

    retryable = False

    def __init__(self, message: str, *, endpoint: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code


class ConfigurationError(WooGatewayError):
    """Missing base URL or credentials. Raised before any network I/O."""


class NetworkError(WooGatewayError):
    """The gateway could not be reached."""

    retryable = True


class RequestTimeoutError(WooGatewayError):
    """The client-side deadline expired before a response arrived."""


class UpstreamHTTPError(WooGatewayError):
    """The gateway answered with a non-2xx status."""

    def __init__(self, message: str, *, endpoint: str | None = None, status_code: int | None = None, body=None):
        super().__init__(message, endpoint=endpoint, status_code=status_code)
        self.body = body


class EndpointNotFoundError(UpstreamHTTPError):
    """HTTP 404 for the requested resource."""


class AuthenticationError(UpstreamHTTPError):
    """HTTP 401, the upstream rejected the credentials."""


class ResponseParseError(WooGatewayError):
    """A 2xx response whose body is not valid JSON."""
