"""Validation rules of the proxy request and error envelope."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from woo_gateway.models import (
    HTTPMethod,
    ProxyErrorEnvelope,
    ProxyRequest,
    RequestDetails,
    summarize_validation_error,
)


class TestProxyRequest:
    def test_defaults_to_get(self) -> None:
        req = ProxyRequest(endpoint="products")

        assert req.method is HTTPMethod.GET
        assert req.params == {}
        assert req.data is None

    def test_method_is_case_insensitive(self) -> None:
        assert ProxyRequest(endpoint="orders", method="put").method is HTTPMethod.PUT

    @pytest.mark.parametrize("method", ["PATCH", "HEAD", "", "OPTIONS"])
    def test_unsupported_methods_are_rejected(self, method: str) -> None:
        with pytest.raises(ValidationError):
            ProxyRequest(endpoint="orders", method=method)

    @pytest.mark.parametrize("endpoint", ["", "   ", "/", "///"])
    def test_empty_endpoint_is_rejected(self, endpoint: str) -> None:
        with pytest.raises(ValidationError):
            ProxyRequest(endpoint=endpoint)

    def test_leading_slashes_are_stripped(self) -> None:
        assert ProxyRequest(endpoint="//products/12").endpoint == "products/12"

    def test_get_uses_params_and_drops_body(self) -> None:
        req = ProxyRequest(endpoint="products", params={"per_page": 5, "featured": True}, data={"x": 1})

        assert req.query_params() == {"per_page": "5", "featured": "true"}
        assert req.json_body() is None

    def test_write_uses_body_and_drops_params(self) -> None:
        req = ProxyRequest(endpoint="orders", method="POST", params={"page": 2}, data={"status": "pending"})

        assert req.query_params() == {}
        assert req.json_body() == {"status": "pending"}

    def test_null_params_are_dropped(self) -> None:
        req = ProxyRequest(endpoint="b2bking/rules", params={"type": None, "page": 1})

        assert req.params == {"page": 1}

    def test_non_scalar_params_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProxyRequest(endpoint="products", params={"include": [1, 2]})


class TestErrorEnvelope:
    def test_wire_format_uses_camel_case(self) -> None:
        envelope = ProxyErrorEnvelope(
            error="boom",
            status_code=503,
            raw={"code": "x"},
            request_details=RequestDetails(endpoint="orders", method="GET", api_url="https://shop/wc/v3"),
        )

        assert envelope.to_wire() == {
            "error": "boom",
            "statusCode": 503,
            "raw": {"code": "x"},
            "requestDetails": {"endpoint": "orders", "method": "GET", "apiUrl": "https://shop/wc/v3"},
        }

    def test_absent_raw_is_omitted(self) -> None:
        assert "raw" not in ProxyErrorEnvelope(error="boom", status_code=500).to_wire()


def test_validation_summary_names_every_field_on_one_line() -> None:
    with pytest.raises(ValidationError) as exc_info:
        ProxyRequest.model_validate({"endpoint": "", "method": "PATCH"})

    summary = summarize_validation_error(exc_info.value)

    assert "\n" not in summary
    assert summary.startswith("endpoint: ")
    assert "; method: " in summary
