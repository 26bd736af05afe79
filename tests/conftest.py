"""Shared fixtures for gateway and client tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from urllib.parse import unquote

import aiohttp
import pytest
from aiohttp import test_utils
from aioresponses import aioresponses

from woo_gateway.config import ClientSettings, GatewaySettings
from woo_gateway.server import WooGatewayServer

WOO_API_URL = "https://shop.example.com/wp-json/wc/v3"
CONSUMER_KEY = "ck_test_key"
CONSUMER_SECRET = "cs_test_secret"
GATEWAY_URL = "http://gateway.test"
PROXY_URL = f"{GATEWAY_URL}/api/woo-proxy"


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def parse_oauth_header(value: str) -> dict[str, str]:
    """Split an ``OAuth k="v", ...`` header into a dict of decoded values."""
    assert value.startswith("OAuth ")
    params = {}
    for part in value[len("OAuth ") :].split(", "):
        name, _, quoted = part.partition("=")
        params[unquote(name)] = unquote(quoted.strip('"'))
    return params


def upstream_calls(mocked: aioresponses) -> list[tuple[str, str, dict]]:
    """Flatten recorded requests into (method, url, kwargs) tuples."""
    return [
        (method, str(url), call.kwargs)
        for (method, url), calls in mocked.requests.items()
        for call in calls
    ]


@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        woocommerce_api_url=f"{WOO_API_URL}/",
        woocommerce_consumer_key=CONSUMER_KEY,
        woocommerce_consumer_secret=CONSUMER_SECRET,
        cors_origins="*",
        preserve_upstream_status=False,
    )


@pytest.fixture
def mocked_http() -> Iterator[aioresponses]:
    """Mock outbound HTTP, letting calls to the local test server through."""
    with aioresponses(passthrough=["http://127.0.0.1"]) as mocked:
        yield mocked


@pytest.fixture
async def gateway(
    gateway_settings: GatewaySettings, mocked_http: aioresponses
) -> AsyncIterator[test_utils.TestClient]:
    app = WooGatewayServer(gateway_settings).create_app()
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        yield client


@pytest.fixture
def gateway_factory(mocked_http: aioresponses):
    """Start a gateway with custom settings inside the test body."""

    def factory(settings: GatewaySettings):
        return test_utils.TestClient(test_utils.TestServer(WooGatewayServer(settings).create_app()))

    return factory


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(base_url=GATEWAY_URL, timeout=15.0, max_retries=2, backoff_base=1.0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
async def http_session() -> AsyncIterator[aiohttp.ClientSession]:
    async with aiohttp.ClientSession() as session:
        yield session
