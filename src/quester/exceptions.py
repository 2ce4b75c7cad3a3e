"""Exception hierarchy for quester.

All errors raised by quester itself inherit from :class:`QuesterError`.
Errors that originate elsewhere are deliberately left alone: exceptions
raised by a pre-request hook and :class:`httpx.HTTPError` subclasses raised
by the transport reach the caller unchanged.

Subclass hierarchy::

    QuesterError
    +-- ConstructionError
    +-- SerializationError
    +-- DecodeError
    +-- ContextError
    |   +-- Cancelled
    |   +-- DeadlineExceeded
    +-- ConfigError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from quester.client.response import Response


class QuesterError(Exception):
    """Base exception for all quester errors."""


class ConstructionError(QuesterError):
    """Raised when the outgoing request cannot be assembled (e.g. a malformed URL)."""


class SerializationError(QuesterError):
    """Raised when a structured request body cannot be encoded as JSON.

    Always raised before any network activity.
    """


class DecodeError(QuesterError):
    """Raised when the response body cannot be read or decoded.

    The exchange itself succeeded, so the partially populated
    :class:`~quester.client.response.Response` is attached: its status,
    status text and headers are always valid.

    Args:
        message: Human-readable error description.
        response: The partially populated response.
    """

    def __init__(self, message: str, response: Optional[Response] = None):
        super().__init__(message)
        self.response = response


class ContextError(QuesterError):
    """Base class for failures driven by a :class:`~quester.context.Context`."""


class Cancelled(ContextError):
    """Raised when the request context was cancelled."""


class DeadlineExceeded(ContextError):
    """Raised when the request context deadline has passed."""


class ConfigError(QuesterError):
    """Raised for invalid client configuration values."""
