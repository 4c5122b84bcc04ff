"""Shared fixtures for the scraper tests."""

import asyncio
import socket
import threading
import time
from collections.abc import Generator
from contextlib import closing

import pytest
from aiohttp import web

from policyscrape.config import ScrapeSettings
from policyscrape.data_types import Carrier
from tests.mock_server import (
    MOCK_INDEMNITY_ACCOUNTS,
    PLACEHOLDER_ACCOUNTS,
    REQUEST_LOG,
    MockAccount,
    create_app,
)


@pytest.fixture
def mock_indemnity_account() -> MockAccount:
    """The single-page demo customer."""
    return MOCK_INDEMNITY_ACCOUNTS["a0dfjw9a"]


@pytest.fixture
def placeholder_account() -> MockAccount:
    """The paginated demo customer (three pages of policies)."""
    return PLACEHOLDER_ACCOUNTS["f02dkl4e"]


# =============================================================================
# aiohttp test server fixtures
# =============================================================================


def find_free_port() -> int:
    """Find a free port on localhost.

    Returns:
        An available port number.
    """
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run aiohttp server in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: asyncio.AbstractEventLoop | None = None
        self._runner: web.AppRunner | None = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        """Get the base URL of the server."""
        return f"http://{self.host}:{self.port}"

    @property
    def request_log(self) -> list[str]:
        """Paths requested so far, in order."""
        return self.app[REQUEST_LOG]

    def start(self) -> None:
        """Start the server in a background thread."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        # Give the server time to start
        time.sleep(0.1)

    def _run_server(self) -> None:
        """Run the server in an asyncio event loop."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and clean up resources."""
        if self._loop and self._runner:
            future = asyncio.run_coroutine_threadsafe(
                self._runner.cleanup(), self._loop
            )
            try:
                future.result(timeout=2.0)
            except Exception:
                pass  # Best effort cleanup

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=2.0)


@pytest.fixture
def carrier_server() -> Generator[AioHttpTestServer, None, None]:
    """Create and start an aiohttp test server running both carrier portals.

    This fixture starts a real HTTP server on a random port that can be
    used for integration testing with real HTTP requests.

    Yields:
        AioHttpTestServer instance with the carrier app running.
    """
    app = create_app()
    port = find_free_port()
    server = AioHttpTestServer(app, port)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def server_url(carrier_server: AioHttpTestServer) -> str:
    """Get the base URL of the test server.

    Args:
        carrier_server: The test server fixture.

    Returns:
        The base URL string (e.g., "http://127.0.0.1:8080").
    """
    return carrier_server.url


@pytest.fixture
def server_settings(server_url: str) -> ScrapeSettings:
    """ScrapeSettings pointing both carriers at the test server."""
    return ScrapeSettings(
        base_urls={
            Carrier.MOCK_INDEMNITY: f"{server_url}/mock_indemnity/",
            Carrier.PLACEHOLDER_CARRIER: f"{server_url}/placeholder_carrier",
        },
        timeout=5.0,
    )
