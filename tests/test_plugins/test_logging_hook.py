"""Tests for the request/response logging helpers."""

from __future__ import annotations

import logging

import httpx
import pytest

from quester.plugins import LoggingHook, log_request, log_response


class TestHelpers:
    def test_log_request(self, caplog: pytest.LogCaptureFixture) -> None:
        request = httpx.Request("POST", "http://api.test/users", headers={"X-A": "1"})
        with caplog.at_level(logging.INFO, logger="quester"):
            log_request(request)
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "[Request] POST http://api.test/users"
        assert "Header: x-a = 1" in messages

    def test_log_response(self, caplog: pytest.LogCaptureFixture) -> None:
        response = httpx.Response(404, headers={"X-Trace": "t"})
        with caplog.at_level(logging.INFO, logger="quester"):
            log_response(response)
        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "[Response] 404 Not Found"
        assert "Header: x-trace = t" in messages

    def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        custom = logging.getLogger("myapp.http")
        with caplog.at_level(logging.INFO, logger="myapp.http"):
            log_request(httpx.Request("GET", "http://api.test/"), custom)
        assert caplog.records[0].name == "myapp.http"


class TestLoggingHook:
    def test_logs_round_trip(self, client, caplog: pytest.LogCaptureFixture) -> None:
        client.use(LoggingHook())
        with caplog.at_level(logging.INFO, logger="quester"):
            client.new_request().set_path("/users").execute()
        messages = [r.getMessage() for r in caplog.records if r.name == "quester"]
        assert "[Request] GET http://api.test/users" in messages
        assert "[Response] 200 OK" in messages

    def test_logs_transport_failure(self, make_client, caplog: pytest.LogCaptureFixture) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(refuse)
        client.use(LoggingHook())
        with caplog.at_level(logging.INFO, logger="quester"):
            with pytest.raises(httpx.ConnectError):
                client.new_request().set_path("/users").execute()
        assert any(
            r.getMessage() == "[Response] GET http://api.test/users failed: refused"
            for r in caplog.records
        )
