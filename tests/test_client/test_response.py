"""Tests for the response model."""

from __future__ import annotations

import httpx

from quester.client.response import (
    DecodedBody,
    RawBody,
    Response,
    TransportBody,
    status_text_for,
)


def _response(**kwargs) -> Response:
    kwargs.setdefault("status", 200)
    kwargs.setdefault("status_text", "200 OK")
    return Response(**kwargs)


class TestResponse:
    def test_ok(self) -> None:
        assert _response(status=204).ok
        assert not _response(status=404).ok
        assert not _response(status=302).ok

    def test_content_type(self) -> None:
        resp = _response(headers=httpx.Headers({"Content-Type": "text/xml"}))
        assert resp.content_type == "text/xml"
        assert _response().content_type == ""

    def test_decoded_body(self) -> None:
        resp = _response(body=DecodedBody({"a": 1}))
        assert resp.value == {"a": 1}
        assert resp.content is None

    def test_raw_body(self) -> None:
        resp = _response(body=RawBody(b"\x00\x01"))
        assert resp.value is None
        assert resp.content == b"\x00\x01"

    def test_transport_body(self) -> None:
        raw = httpx.Response(200, content=b"hello")
        resp = _response(body=TransportBody(raw))
        assert resp.content == b"hello"
        assert resp.value is None

    def test_unread_body(self) -> None:
        resp = _response()
        assert resp.body is None
        assert resp.content is None


class TestStatusText:
    def test_known_status(self) -> None:
        assert status_text_for(httpx.Response(404)) == "404 Not Found"

    def test_unknown_status(self) -> None:
        assert status_text_for(httpx.Response(599)) == "599"
