"""HTTP request handlers for the WooCommerce gateway."""

import asyncio
import json
from typing import Any, Callable

import aiohttp
from aiohttp import web
from pydantic import ValidationError
from yarl import URL

from .config import GatewaySettings
from .logging import get_logger
from .models import (
    GatewayStatusResponse,
    ProxyErrorEnvelope,
    ProxyRequest,
    RequestDetails,
    summarize_validation_error,
)
from .oauth import sign

logger = get_logger(__name__)

PROXY_PATH = "/api/woo-proxy"
MISSING_CREDENTIALS = "Missing WooCommerce credentials"
JSON_CONTENT_TYPE = "application/json"

UPSTREAM_SESSION = web.AppKey("upstream_session", aiohttp.ClientSession)


class ProxyRequestHandler:
    """
    Encapsulates all logic related to forwarding a logical WooCommerce
    operation to the upstream REST API.

    This is the only place that reads the consumer key and secret.
    """

    def __init__(self, settings: GatewaySettings, signer: Callable[..., str] = sign) -> None:
        self.settings = settings
        self._signer = signer

    def _get_upstream_session(self, request: web.Request) -> aiohttp.ClientSession:
        """Get the upstream client session from the application state."""
        session = request.app.get(UPSTREAM_SESSION)
        if session is None:
            raise RuntimeError("Upstream session is not initialized")
        return session

    async def handle_proxy(self, request: web.Request) -> web.Response:
        """Public entry point for POST /api/woo-proxy."""
        if not self.settings.credentials_configured:
            logger.error("WooCommerce credentials are not configured, rejecting proxy call")
            return web.json_response({"error": MISSING_CREDENTIALS}, status=500)

        try:
            payload = await request.json()
            proxy_req = ProxyRequest.model_validate(payload)
        except ValidationError as exc:
            return self._error_response(400, f"Invalid proxy request: {summarize_validation_error(exc)}")
        except ValueError:
            # covers JSONDecodeError and bodies that are not valid UTF-8
            return self._error_response(400, "Request body must be valid JSON")

        url = self._build_upstream_url(proxy_req)
        method = proxy_req.method.value
        details = self._request_details(proxy_req)

        logger.info(f"Forwarding {method} request to WooCommerce endpoint {proxy_req.endpoint}")

        try:
            status, body_text = await self._send_upstream(request, url, proxy_req)
        except asyncio.TimeoutError:
            logger.error(f"WooCommerce {method} {proxy_req.endpoint} timed out")
            return self._error_response(500, "WooCommerce API request timed out", details)
        except aiohttp.ClientError as exc:
            logger.error(f"WooCommerce {method} {proxy_req.endpoint} failed: {exc}")
            return self._error_response(500, str(exc) or "WooCommerce API proxy failed", details)

        return self._build_http_response(proxy_req, status, body_text, details)

    async def handle_method_not_allowed(self, request: web.Request) -> web.Response:
        """Reject every gateway verb other than POST."""
        return web.json_response(
            {"error": f"Method {request.method} not allowed. This endpoint only accepts POST requests."},
            status=405,
            headers={"Allow": "POST"},
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        """Report whether the gateway is usable, without exposing secrets."""
        response = GatewayStatusResponse(
            credentials_configured=self.settings.credentials_configured,
            api_url=self.settings.api_url,
        )
        return web.json_response(response.model_dump(mode="json", by_alias=True))

    def _build_upstream_url(self, proxy_req: ProxyRequest) -> URL:
        """Join the base URL and endpoint; GET params go into the query exactly once."""
        url = URL(f"{self.settings.api_url}/{proxy_req.endpoint}")
        query = proxy_req.query_params()
        if query:
            url = url.update_query(query)
        return url

    async def _send_upstream(
        self, request: web.Request, url: URL, proxy_req: ProxyRequest
    ) -> tuple[int, str]:
        """Sign and send the request, returning the upstream status and raw body."""
        session = self._get_upstream_session(request)
        method = proxy_req.method.value

        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
            "Authorization": self._signer(
                url,
                method,
                self.settings.woocommerce_consumer_key,
                self.settings.woocommerce_consumer_secret,
            ),
        }

        kwargs: dict[str, Any] = {"headers": headers}
        if not proxy_req.is_read:
            kwargs["json"] = proxy_req.json_body()

        async with session.request(method, url, **kwargs) as response:
            body_text = await response.text(errors="replace")
            return response.status, body_text

    def _build_http_response(
        self,
        proxy_req: ProxyRequest,
        status: int,
        body_text: str,
        details: RequestDetails,
    ) -> web.Response:
        """Translate the upstream answer into the gateway response."""
        if _looks_like_html(body_text):
            logger.error(
                "WooCommerce returned HTML instead of JSON, check the API URL and credentials"
            )
            return self._error_response(
                502,
                "WooCommerce returned an unexpected HTML response. "
                "Please check the API URL and credentials.",
                details,
            )

        is_json, parsed = _parse_json(body_text)

        if 200 <= status < 300:
            if not is_json:
                logger.error(f"WooCommerce returned a non-JSON body for {proxy_req.endpoint}")
                return self._error_response(
                    502, "WooCommerce returned a response that is not valid JSON", details, raw=body_text
                )
            relay_status = status if self.settings.preserve_upstream_status else 200
            return web.Response(
                text=body_text or "null", status=relay_status, content_type=JSON_CONTENT_TYPE
            )

        if status == 401:
            logger.error("WooCommerce authentication failed. Check API credentials.")
        elif status == 404:
            logger.error(f"WooCommerce endpoint not found: {proxy_req.endpoint}")
        else:
            logger.error(f"WooCommerce API error {status} for {proxy_req.method.value} {proxy_req.endpoint}")

        raw = parsed if is_json else body_text
        return self._error_response(status, _upstream_message(raw, status), details, raw=raw)

    def _request_details(self, proxy_req: ProxyRequest) -> RequestDetails:
        return RequestDetails(
            endpoint=proxy_req.endpoint,
            method=proxy_req.method.value,
            api_url=self.settings.api_url,
        )

    def _error_response(
        self,
        status: int,
        message: str,
        details: RequestDetails | None = None,
        raw: Any = None,
    ) -> web.Response:
        envelope = ProxyErrorEnvelope(
            error=message,
            status_code=status,
            raw=raw,
            request_details=details,
        )
        return web.json_response(envelope.to_wire(), status=status)


def _looks_like_html(body_text: str) -> bool:
    head = body_text.lstrip()[:15].lower()
    return head.startswith("<!doctype") or head.startswith("<html")


def _parse_json(body_text: str) -> tuple[bool, Any]:
    if not body_text.strip():
        return True, None
    try:
        return True, json.loads(body_text)
    except ValueError:
        return False, None


def _upstream_message(raw: Any, status: int) -> str:
    # WooCommerce error bodies look like {"code": ..., "message": ..., "data": {...}}
    if isinstance(raw, dict):
        for key in ("message", "error"):
            value = raw.get(key)
            if isinstance(value, str) and value:
                return value
    return f"WooCommerce API request failed with status {status}"

