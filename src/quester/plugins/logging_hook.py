"""Request/response logging helpers and a hook that uses them.

:func:`log_request` and :func:`log_response` write one line for the
request or status line and one line per header to the ``quester`` logger
at INFO level. :class:`LoggingHook` wires both into the dispatch
lifecycle::

    client.use(LoggingHook())
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from quester.plugins.hooks import Outcome

logger = logging.getLogger("quester")


def log_request(request: httpx.Request, log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    log.info("[Request] %s %s", request.method, request.url)
    for key, value in request.headers.multi_items():
        log.info("Header: %s = %s", key, value)


def log_response(response: httpx.Response, log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    log.info("[Response] %d %s", response.status_code, response.reason_phrase)
    for key, value in response.headers.multi_items():
        log.info("Header: %s = %s", key, value)


class LoggingHook:
    """Hook that logs every outgoing request and every transport outcome.

    Args:
        log: Logger to write to. Defaults to the ``quester`` logger.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def pre_request(self, request: httpx.Request) -> None:
        log_request(request, self._log)

    def post_response(self, outcome: Outcome) -> None:
        if outcome.failed:
            self._log.info(
                "[Response] %s %s failed: %s",
                outcome.request.method,
                outcome.request.url,
                outcome.error,
            )
            return
        assert outcome.response is not None
        log_response(outcome.response, self._log)
