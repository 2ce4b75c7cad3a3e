"""Tests for the hook protocol, the no-op hooks and the hook chain."""

from __future__ import annotations

import threading

import httpx
import pytest

from quester.plugins import DEFAULT_HOOKS, HookChain, Hooks, NoopHooks, Outcome


def _request() -> httpx.Request:
    return httpx.Request("GET", "http://api.test/")


class Named(NoopHooks):
    def __init__(self, name: str, calls: list) -> None:
        self.name = name
        self.calls = calls

    def pre_request(self, request: httpx.Request) -> None:
        self.calls.append(self.name)

    def post_response(self, outcome: Outcome) -> None:
        self.calls.append(self.name)


class TestNoopHooks:
    def test_default_hooks_do_nothing(self) -> None:
        request = _request()
        assert DEFAULT_HOOKS.pre_request(request) is None
        assert DEFAULT_HOOKS.post_response(Outcome(request=request)) is None
        assert len(request.headers) == len(_request().headers)

    def test_satisfies_protocol(self) -> None:
        assert isinstance(DEFAULT_HOOKS, Hooks)
        assert isinstance(NoopHooks(), Hooks)

    def test_plain_object_is_not_hooks(self) -> None:
        assert not isinstance(object(), Hooks)


class TestOutcome:
    def test_failed_without_response(self) -> None:
        outcome = Outcome(request=_request(), error=httpx.ConnectError("boom"))
        assert outcome.failed

    def test_not_failed_with_response(self) -> None:
        assert not Outcome(request=_request(), response=httpx.Response(200)).failed


class TestHookChain:
    def test_order(self) -> None:
        calls: list = []
        chain = HookChain()
        for name in ("a", "b", "c"):
            chain.append(Named(name, calls))
        chain.run_pre_request(_request())
        chain.run_post_response(Outcome(request=_request()))
        assert calls == ["a", "b", "c", "a", "b", "c"]

    def test_pre_request_stops_at_first_error(self) -> None:
        calls: list = []

        class Boom(NoopHooks):
            def pre_request(self, request: httpx.Request) -> None:
                raise ValueError("no")

        chain = HookChain([Named("a", calls), Boom(), Named("c", calls)])
        with pytest.raises(ValueError, match="no"):
            chain.run_pre_request(_request())
        assert calls == ["a"]

    def test_post_response_continues_after_error(self) -> None:
        calls: list = []

        class Boom(NoopHooks):
            def post_response(self, outcome: Outcome) -> None:
                raise ValueError("no")

        chain = HookChain([Boom(), Named("b", calls)])
        chain.run_post_response(Outcome(request=_request()))
        assert calls == ["b"]

    def test_snapshot_is_a_copy(self) -> None:
        chain = HookChain([NoopHooks()])
        snapshot = chain.snapshot()
        chain.append(NoopHooks())
        assert len(snapshot) == 1
        assert len(chain) == 2

    def test_concurrent_append(self) -> None:
        chain = HookChain()

        def register() -> None:
            for _ in range(100):
                chain.append(NoopHooks())

        threads = [threading.Thread(target=register) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(chain) == 400
