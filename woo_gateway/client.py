"""
Resilient client for the WooCommerce gateway.

Callers pass logical operations (endpoint, method, params, data) and get the
upstream JSON back, or one of the typed errors from ``woo_gateway.errors``.
"""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp
from pydantic import ValidationError

from .config import ClientSettings, get_client_settings
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
from .handlers import PROXY_PATH
from .logging import get_logger, setup_logging
from .models import ProxyRequest, summarize_validation_error

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class WooProxyClient:
    """Client that calls the gateway with a timeout and bounded retries.

    Only GET requests are retried, and only when the gateway could not be
    reached at all. A POST, PUT or DELETE whose outcome is unknown is never
    sent twice.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        session: aiohttp.ClientSession | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings or get_client_settings()
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    async def __aenter__(self) -> "WooProxyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def proxy_url(self) -> str:
        if not self.settings.base_url:
            raise ConfigurationError(
                "WooCommerce proxy base URL is not configured. Set WOO_PROXY_BASE_URL."
            )
        return f"{self.settings.base_url.rstrip('/')}{PROXY_PATH}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> Any:
        """
        Run one logical WooCommerce operation through the gateway.

        Args:
            endpoint: Resource path, e.g. ``products`` or ``orders/42``
            method: Upstream verb (GET, POST, PUT or DELETE)
            params: Query parameters, used for GET only
            data: JSON body, used for non-GET only

        Returns:
            The upstream JSON payload, unmodified

        Raises:
            ConfigurationError: No gateway base URL is configured
            RequestTimeoutError: The per-attempt deadline expired
            NetworkError: The gateway stayed unreachable
            EndpointNotFoundError: HTTP 404
            AuthenticationError: HTTP 401
            UpstreamHTTPError: Any other non-2xx status
            ResponseParseError: The body of a 2xx response is not JSON
        """
        proxy_url = self.proxy_url

        try:
            proxy_req = ProxyRequest(endpoint=endpoint, method=method, params=params or {}, data=data)
        except ValidationError as exc:
            raise WooGatewayError(
                f"Invalid WooCommerce request for '{endpoint}': {summarize_validation_error(exc)}",
                endpoint=endpoint,
            ) from exc

        attempts = self.settings.max_retries + 1 if proxy_req.is_read else 1
        last_error: NetworkError | None = None

        for attempt in range(attempts):
            try:
                return await self._attempt(proxy_url, proxy_req)
            except NetworkError as exc:
                last_error = exc
                if attempt + 1 >= attempts:
                    break
                delay = self.settings.backoff_base * 2**attempt
                logger.warning(
                    f"Proxy unreachable for {proxy_req.endpoint} "
                    f"(attempt {attempt + 1}/{attempts}), retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        plural = "attempt" if attempts == 1 else "attempts"
        raise NetworkError(
            f"Cannot connect to the WooCommerce proxy at {proxy_url} after {attempts} {plural} "
            f"(endpoint: {proxy_req.endpoint})",
            endpoint=proxy_req.endpoint,
        ) from last_error

    async def _attempt(self, proxy_url: str, proxy_req: ProxyRequest) -> Any:
        """Send a single request and classify the outcome."""
        endpoint = proxy_req.endpoint
        session = self._get_session()
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)

        try:
            async with session.post(
                proxy_url, json=proxy_req.model_dump(mode="json"), timeout=timeout
            ) as response:
                status = response.status
                body_text = await response.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise RequestTimeoutError(
                f"WooCommerce request to '{endpoint}' timed out after {self.settings.timeout:g}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientConnectionError as exc:
            raise NetworkError(
                f"Cannot connect to the WooCommerce proxy at {proxy_url}: {exc}", endpoint=endpoint
            ) from exc
        except aiohttp.ClientError as exc:
            raise WooGatewayError(f"WooCommerce request to '{endpoint}' failed: {exc}", endpoint=endpoint) from exc

        if 200 <= status < 300:
            try:
                return json.loads(body_text)
            except ValueError as exc:
                raise ResponseParseError(
                    f"WooCommerce response for '{endpoint}' is not valid JSON",
                    endpoint=endpoint,
                    status_code=status,
                ) from exc

        body = _try_parse(body_text)
        logger.error(f"WooCommerce proxy returned {status} for {proxy_req.method.value} {endpoint}")

        if status == 404:
            raise EndpointNotFoundError(
                f"WooCommerce endpoint not found: '{endpoint}'",
                endpoint=endpoint,
                status_code=status,
                body=body,
            )
        if status == 401:
            raise AuthenticationError(
                f"WooCommerce authentication failed for '{endpoint}'. Check the API credentials.",
                endpoint=endpoint,
                status_code=status,
                body=body,
            )

        message = f"WooCommerce API request to '{endpoint}' failed with status {status}"
        detail = body.get("error") if isinstance(body, dict) else None
        if isinstance(detail, str) and detail:
            message = f"{message}: {detail}"
        raise UpstreamHTTPError(message, endpoint=endpoint, status_code=status, body=body)

    async def check_connection(self) -> bool:
        """Fetch a single product to see whether the gateway and upstream work."""
        try:
            await self.request("products", params={"per_page": 1})
        except WooGatewayError as exc:
            logger.error(f"WooCommerce connection test failed: {exc}")
            return False
        logger.info("WooCommerce connection test succeeded")
        return True


def _try_parse(body_text: str) -> Any:
    try:
        return json.loads(body_text)
    except ValueError:
        return body_text or None


async def _run_check(base_url: str | None) -> bool:
    settings = get_client_settings()
    if base_url:
        settings = settings.model_copy(update={"base_url": base_url})

    async with WooProxyClient(settings) as client:
        return await client.check_connection()


def main() -> None:
    """Entry point: check the gateway given as argument or WOO_PROXY_BASE_URL."""
    setup_logging()
    base_url = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        ok = asyncio.run(_run_check(base_url))
    except KeyboardInterrupt:
        logger.info("Check stopped by user")
        ok = False

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
