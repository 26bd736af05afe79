"""
WooCommerce Gateway - credential-holding proxy for the WooCommerce REST API.
The browser sends logical operations; only this process knows the API keys.
"""

import asyncio
from collections.abc import AsyncIterator

import aiohttp
import aiohttp_cors
import uvloop
from aiohttp import web

from .config import GatewaySettings, get_settings
from .handlers import PROXY_PATH, UPSTREAM_SESSION, ProxyRequestHandler
from .logging import get_logger, setup_logging

logger = get_logger(__name__)


class WooGatewayServer:
    """Main server class wiring routes, CORS and the upstream session."""

    def __init__(self, settings: GatewaySettings | None = None) -> None:
        self.settings = settings or get_settings()
        self.handlers = ProxyRequestHandler(self.settings)

    def setup_routes(self, app: web.Application) -> list[web.AbstractRoute]:
        """Configure application routes and return the ones that take CORS."""
        proxy_route = app.router.add_post(PROXY_PATH, self.handlers.handle_proxy)
        for method in ("GET", "PUT", "DELETE", "PATCH"):
            app.router.add_route(method, PROXY_PATH, self.handlers.handle_method_not_allowed)

        status_route = app.router.add_get("/status", self.handlers.handle_status)
        return [proxy_route, status_route]

    async def _upstream_session(self, app: web.Application) -> AsyncIterator[None]:
        """Own the shared upstream client session for the app's lifetime."""
        timeout = aiohttp.ClientTimeout(total=self.settings.upstream_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            app[UPSTREAM_SESSION] = session
            if self.settings.credentials_configured:
                logger.info(f"Forwarding to WooCommerce at {self.settings.api_url}")
            else:
                logger.warning("WooCommerce credentials missing, every proxy call will fail")
            yield
        logger.info("Upstream session closed")

    def create_app(self) -> web.Application:
        """Create and configure the gateway application."""
        app = web.Application()
        app.cleanup_ctx.append(self._upstream_session)

        cors = aiohttp_cors.setup(
            app,
            defaults={
                origin: aiohttp_cors.ResourceOptions(
                    allow_credentials=False,
                    expose_headers="*",
                    allow_headers=("Content-Type", "Authorization"),
                )
                for origin in self.settings.allowed_origins()
            },
        )

        # The 405 routes stay outside CORS so preflight is only registered once per resource
        for route in self.setup_routes(app):
            cors.add(route)

        return app

    async def start(self) -> None:
        """Start the gateway."""
        runner = web.AppRunner(self.create_app())
        await runner.setup()

        site = web.TCPSite(runner, self.settings.host, self.settings.port)
        await site.start()

        logger.info(f"WooCommerce gateway started on http://{self.settings.host}:{self.settings.port}")

        # Keep running
        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()


def main() -> None:
    """Entry point for the gateway."""
    settings = get_settings()
    setup_logging(settings.log_level)

    # Install uvloop as the default event loop
    uvloop.install()

    server = WooGatewayServer(settings)

    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Gateway stopped by user")


if __name__ == "__main__":
    main()
