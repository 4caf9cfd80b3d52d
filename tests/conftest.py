"""Test configuration and shared fixtures.

Isolate every test from ``HC_*`` variables set in the calling environment and
provide HTTP test doubles: an `httpx.Client` backed by a mock transport and a
threaded local HTTP server for end-to-end runs.
"""
import logging
import os
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Generator

import httpx
import pytest
import structlog

# ==============================================================================
# ENVIRONMENT FIXTURES
# ==============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove any ``HC_*`` variable inherited from the test runner's environment."""
    for name in list(os.environ):
        if name.startswith("HC_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Detach handlers installed by `configure_logging` once the test ends.

    The handlers write to the stdout captured for that test only.
    """
    yield

    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)

# ==============================================================================
# HTTP TEST DOUBLES
# ==============================================================================

@pytest.fixture
def mock_client() -> Generator[Callable[..., httpx.Client], None, None]:
    """Provide a factory for clients answering every request from a handler.

    Yields:
        Callable: ``factory(handler)`` returning an `httpx.Client` whose
            requests are served by ``handler(request) -> httpx.Response``.
    """
    clients: list[httpx.Client] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


class StatusServer(ThreadingHTTPServer):
    """Local HTTP server answering every GET with a fixed status."""

    status_code = 200
    requests_received = 0

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"


class _StatusHandler(BaseHTTPRequestHandler):
    server: StatusServer

    def do_GET(self) -> None:
        self.server.requests_received += 1
        self.send_response(self.server.status_code)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args) -> None:
        pass


@pytest.fixture
def status_server() -> Generator[StatusServer, None, None]:
    """Run a local HTTP server on an ephemeral port for the test duration.

    Yields:
        StatusServer: Running server; set ``status_code`` to change responses.
    """
    server = StatusServer(("127.0.0.1", 0), _StatusHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
