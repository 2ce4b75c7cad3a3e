"""Shared test fixtures for quester.

Provides a client factory backed by :class:`httpx.MockTransport` and a list
that records every request the transport actually received, so tests can
assert both on what was sent and on whether anything was sent at all.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx
import pytest

from quester.client import Client

BASE_URL = "http://api.test"

Handler = Callable[[httpx.Request], httpx.Response]


def _ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ok": True})


@pytest.fixture
def sent() -> list[httpx.Request]:
    """Requests received by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(sent: list[httpx.Request]):
    """Factory for clients whose transport records requests into ``sent``.

    Usage::

        client = make_client(handler, headers={"X-Default": "1"})
    """
    clients: list[Client] = []

    def factory(handler: Optional[Handler] = None, **kwargs) -> Client:
        inner = handler or _ok_handler

        def recording(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return inner(request)

        kwargs.setdefault("transport", httpx.MockTransport(recording))
        client = Client(kwargs.pop("base_url", BASE_URL), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client) -> Client:
    """A client with the default 200 ``{"ok": true}`` handler."""
    return make_client()
