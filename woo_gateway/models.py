"""Data models for the WooCommerce gateway."""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

Scalar = str | int | float | bool


class HTTPMethod(str, Enum):
    """Upstream verbs the gateway forwards."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ProxyRequest(BaseModel):
    """Logical WooCommerce operation sent by the browser to the gateway."""

    endpoint: Annotated[str, Field(min_length=1, description="Resource path, no leading slash")]
    method: Annotated[HTTPMethod, Field(description="Upstream HTTP method")] = HTTPMethod.GET
    params: Annotated[dict[str, Scalar], Field(description="Query parameters for GET")] = {}
    data: Annotated[Any, Field(description="JSON body for non-GET methods")] = None

    @field_validator("endpoint", mode="before")
    @classmethod
    def _strip_endpoint(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lstrip("/")
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _drop_null_params(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {key: item for key, item in value.items() if item is not None}
        return value

    @property
    def is_read(self) -> bool:
        return self.method is HTTPMethod.GET

    def query_params(self) -> dict[str, str]:
        """Params that belong in the upstream query string (GET only)."""
        if not self.is_read:
            return {}
        return {key: _format_scalar(value) for key, value in self.params.items()}

    def json_body(self) -> Any:
        """Body that belongs in the upstream request (non-GET only)."""
        return None if self.is_read else self.data


class RequestDetails(BaseModel):
    """Echo of the request attached to every failure envelope."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: str
    method: str
    api_url: Annotated[str | None, Field(alias="apiUrl")] = None


class ProxyErrorEnvelope(BaseModel):
    """Uniform failure body returned by the gateway."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    status_code: Annotated[int, Field(alias="statusCode", ge=100, le=599)]
    raw: Any = None
    request_details: Annotated[RequestDetails | None, Field(alias="requestDetails")] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GatewayStatusResponse(BaseModel):
    """Response body of the status endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    service: str = "woo-gateway"
    credentials_configured: Annotated[bool, Field(alias="credentialsConfigured")]
    api_url: Annotated[str | None, Field(alias="apiUrl")] = None


def _format_scalar(value: Scalar) -> str:
    # WooCommerce expects lowercase booleans in query strings
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def summarize_validation_error(exc: ValidationError) -> str:
    """One-line ``field: message`` summary of a validation failure."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
