"""Shared pytest fixtures for cluster_control tests."""

from __future__ import annotations

import json
import logging
import os
import socket
import threading
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlsplit

import pytest
import structlog
import typer
from typer.testing import CliRunner

from cluster_control.cli.main import app
from cluster_control.integrations.kubernetes.config import ClusterProfile, ControlSettings
from cluster_control.logging.config import HANDLER_MARKER


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear CLUSTERCTL_ variables so the host environment cannot leak in."""
    for key in list(os.environ.keys()):
        if key.startswith("CLUSTERCTL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def profile() -> ClusterProfile:
    """A profile for a cluster that is never contacted."""
    return ClusterProfile(api_endpoint="cluster.example.com", bearer_token="t0ken")


@pytest.fixture
def settings() -> ControlSettings:
    """Default control settings."""
    return ControlSettings()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo logging configured by CLI invocations so later tests start clean."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()
    structlog.reset_defaults()


# =============================================================================
# In-process API server
# =============================================================================

DISCOVERY_DOCUMENTS: dict[str, dict[str, Any]] = {
    "/version": {"major": "1", "minor": "29", "gitVersion": "v1.29.0"},
    "/apis": {"kind": "APIGroupList", "apiVersion": "v1", "groups": []},
    "/api/v1": {
        "kind": "APIResourceList",
        "groupVersion": "v1",
        "resources": [
            {
                "name": "configmaps",
                "singularName": "configmap",
                "namespaced": True,
                "kind": "ConfigMap",
                "verbs": ["get", "list", "update"],
            }
        ],
    },
}


class FakeApiServer:
    """Answers core discovery requests; every other path is a 404 Status.

    When ``reject_status`` is set, every request is answered with that status.
    """

    def __init__(self, reject_status: int | None = None) -> None:
        self.reject_status = reject_status
        self.hits: list[str] = []
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                path = urlsplit(self.path).path
                server.hits.append(path)
                if server.reject_status is not None:
                    self._reply(server.reject_status, _status_document(server.reject_status))
                elif path in DISCOVERY_DOCUMENTS:
                    self._reply(200, DISCOVERY_DOCUMENTS[path])
                else:
                    self._reply(404, _status_document(404))

            def _reply(self, status: int, document: dict[str, Any]) -> None:
                body = json.dumps(document).encode("utf-8")
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: Any) -> None:
                return None

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()


def _status_document(code: int) -> dict[str, Any]:
    return {
        "kind": "Status",
        "apiVersion": "v1",
        "status": "Failure",
        "message": f"request failed with {code}",
        "code": code,
    }


@pytest.fixture
def fake_api_server() -> Iterator[FakeApiServer]:
    """A running in-process API server."""
    server = FakeApiServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closed_port_endpoint() -> str:
    """An http endpoint on a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
