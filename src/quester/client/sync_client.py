"""Shared client: base URL, default headers, timeout, and the hook chain.

This module provides :class:`Client`, which every
:class:`~quester.client.request.Request` is dispatched through. It wraps
an :class:`httpx.Client` and layers on:

- **Default headers** -- filled into the outgoing request for keys it does
  not already carry.
- **Hooks** -- pre-request and post-response hooks via
  :class:`~quester.plugins.hooks.HookChain`.

Transport errors are not retried, classified or wrapped.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import httpx

from quester.client.request import Request
from quester.models import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ClientConfig
from quester.plugins.hooks import HookChain, Hooks, Outcome

logger = logging.getLogger(__name__)


class Client:
    """HTTP client shared by every request to one backend.

    Args:
        base_url: Prefix prepended verbatim to each request path. Fixed
            for the lifetime of the client.
        headers: Extra default headers, merged over the ``User-Agent``
            default.
        timeout: Default timeout in seconds, also applied to the transport.
        user_agent: Default ``User-Agent``; ``None`` sends none.
        transport: Optional :class:`httpx.BaseTransport`, e.g. an
            :class:`httpx.MockTransport` in tests.

    Default headers and hooks are shared by all requests. Register hooks
    and adjust :attr:`headers` before the client is used from several
    threads: :meth:`use` is safe during dispatch, header mutation is not.

    Example::

        with Client("https://api.example.com") as client:
            client.use(LoggingHook())
            resp = client.new_request().set_path("/users").execute(list[User])
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self.headers = httpx.Headers()
        if user_agent:
            self.headers["User-Agent"] = user_agent
        self.headers.update(headers or {})
        self._hooks = HookChain()
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> Client:
        return cls(
            config.base_url,
            headers=config.headers,
            timeout=config.timeout,
            user_agent=config.user_agent,
            transport=transport,
        )

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def hooks(self) -> list[Hooks]:
        """A snapshot of the registered hooks, in execution order."""
        return self._hooks.snapshot()

    def new_request(self) -> Request:
        return Request(self)

    r = new_request

    def use(self, hook: Hooks) -> Client:
        """Append *hook* to the chain. There is no way to remove a hook."""
        self._hooks.append(hook)
        return self

    def dispatch(self, request: httpx.Request) -> httpx.Response:
        """Send *request* through the default headers and the hook chain.

        1. Each default header whose key is absent from *request* is added.
           Only the first default value of a multi-valued key is used.
        2. Pre-request hooks run in order; the first one to raise aborts
           dispatch before the transport or any post-response hook runs.
        3. The transport is called exactly once, in streaming mode.
        4. Post-response hooks run in order whatever the transport outcome;
           their exceptions are logged and ignored.

        Returns:
            The streaming transport response. The caller must close it.

        Raises:
            Exception: The first pre-request hook exception, or the
                transport's :class:`httpx.HTTPError`, unchanged.
        """
        encoding = self.headers.encoding
        for raw_key, raw_value in self.headers.raw:
            key = raw_key.decode(encoding)
            if key not in request.headers:
                request.headers[key] = raw_value.decode(encoding)

        hooks = self._hooks.snapshot()
        self._hooks.run_pre_request(request, hooks)

        logger.debug("Dispatching %s %s", request.method, request.url)
        try:
            response = self._http.send(request, stream=True)
        except Exception as exc:
            self._hooks.run_post_response(Outcome(request=request, error=exc), hooks)
            raise

        self._hooks.run_post_response(Outcome(request=request, response=response), hooks)
        return response
