"""Hook protocol, outcome dataclass, and chain runner for the dispatch lifecycle.

This module provides the extension points wrapped around every transport
call made by :meth:`quester.client.Client.dispatch`:

* :class:`Hooks` -- The two-method protocol every hook satisfies.
* :class:`Outcome` -- What a post-response hook observes: the request and
  either the transport response or the transport error.
* :class:`NoopHooks` / :data:`DEFAULT_HOOKS` -- A no-op implementation.
* :class:`HookChain` -- Runs hooks in registration order with the
  pre/post error asymmetry: a failing pre-request hook aborts dispatch,
  a failing post-response hook is logged and ignored.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class Hooks(Protocol):
    """Capability contract for request/response hooks.

    Any object with these two methods can be registered with
    :meth:`quester.client.Client.use`; no base class is required.
    """

    def pre_request(self, request: httpx.Request) -> None:
        """Called before the request is sent.

        The hook may mutate ``request.headers``. Raising aborts dispatch:
        the transport is never invoked, later pre-request hooks and all
        post-response hooks are skipped, and the exception reaches the
        caller unchanged.
        """
        ...

    def post_response(self, outcome: Outcome) -> None:
        """Called after the transport call, whether it succeeded or not.

        Exceptions raised here are logged and discarded.
        """
        ...


@dataclass(frozen=True)
class Outcome:
    """Result of a single transport call as seen by post-response hooks.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        request: The request that was sent.
        response: The transport response, streaming and not yet read.
        error: The exception raised by the transport.
    """

    request: httpx.Request
    response: Optional[httpx.Response] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.response is None


class NoopHooks:
    """Hooks that do nothing. Useful as a base when only one callback matters."""

    def pre_request(self, request: httpx.Request) -> None:
        return None

    def post_response(self, outcome: Outcome) -> None:
        return None


DEFAULT_HOOKS = NoopHooks()
"""Shared no-op hooks instance."""


class HookChain:
    """Ordered, append-only list of hooks.

    Insertion order is execution order for both phases. Each run works on
    a snapshot taken under a lock, so hooks appended while another thread
    is dispatching take effect from the next dispatch on.
    """

    def __init__(self, hooks: Optional[list[Hooks]] = None) -> None:
        self._hooks: list[Hooks] = list(hooks or [])
        self._lock = threading.Lock()

    def append(self, hook: Hooks) -> None:
        with self._lock:
            self._hooks.append(hook)

    def snapshot(self) -> list[Hooks]:
        with self._lock:
            return list(self._hooks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._hooks)

    def run_pre_request(self, request: httpx.Request, hooks: Optional[list[Hooks]] = None) -> None:
        """Run every ``pre_request`` callback in order.

        Args:
            request: The fully assembled outgoing request.
            hooks: Snapshot to run; taken now when omitted.

        Raises:
            Exception: Whatever the first failing hook raised, unchanged.
        """
        for hook in self.snapshot() if hooks is None else hooks:
            hook.pre_request(request)

    def run_post_response(self, outcome: Outcome, hooks: Optional[list[Hooks]] = None) -> None:
        """Run every ``post_response`` callback in order.

        A hook that raises does not stop the remaining hooks and never
        changes the result of the dispatch.
        """
        for hook in self.snapshot() if hooks is None else hooks:
            try:
                hook.post_response(outcome)
            except Exception:
                logger.debug("Post-response hook %r failed", hook, exc_info=True)
