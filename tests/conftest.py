from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

import sys


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from mastoclient.client import Client
from mastoclient.config import ClientConfig


@pytest.fixture
def config() -> Generator[ClientConfig, None, None]:
    """Return client settings that do not depend on the environment."""

    yield ClientConfig(
        server="http://mstdn.example.com",
        client_id="foo",
        client_secret="bar",
        access_token="zoo",
        _env_file=None,
    )


@pytest.fixture
def fail_once() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Wrap a handler so that the first request gets an HTTP 500."""

    def _wrap(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        state = {"failed": False}

        def _handler(request: httpx.Request) -> httpx.Response:
            if not state["failed"]:
                state["failed"] = True
                return httpx.Response(500, content=b"Internal Server Error", request=request)
            return handler(request)

        return httpx.MockTransport(_handler)

    return _wrap


@pytest.fixture
def make_client(config: ClientConfig) -> Callable[[httpx.BaseTransport], Client]:
    def _make(transport: httpx.BaseTransport) -> Client:
        return Client(config, transport=transport)

    return _make
