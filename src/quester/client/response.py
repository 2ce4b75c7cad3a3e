"""Response model returned by :meth:`quester.client.Request.execute`.

The body of a :class:`Response` is one of three explicit variants,
depending on whether a decode target was supplied and what the server
declared in ``Content-Type``:

* :class:`TransportBody` -- no decode target; wraps the drained
  :class:`httpx.Response`.
* :class:`DecodedBody` -- the body was decoded as JSON or XML.
* :class:`RawBody` -- a decode target was given but the content type was
  not recognised; holds the exact body bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

import httpx


@dataclass(frozen=True)
class TransportBody:
    """The transport response itself.

    The response has already been read and closed, so ``raw.content``,
    ``raw.text`` and ``raw.json()`` keep working.
    """

    raw: httpx.Response


@dataclass(frozen=True)
class DecodedBody:
    value: Any


@dataclass(frozen=True)
class RawBody:
    content: bytes


ResponseBody = Union[TransportBody, DecodedBody, RawBody]


@dataclass
class Response:
    """Status, headers and body of a completed exchange.

    Attributes:
        status: Numeric HTTP status code.
        status_text: Status line text, e.g. ``"200 OK"``.
        headers: Multi-valued, case-insensitive response headers.
        body: The body variant, ``None`` until it has been read.
    """

    status: int
    status_text: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Optional[ResponseBody] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def value(self) -> Any:
        """The decoded value, or ``None`` unless the body is a :class:`DecodedBody`."""
        if isinstance(self.body, DecodedBody):
            return self.body.value
        return None

    @property
    def content(self) -> Optional[bytes]:
        """Raw body bytes when available.

        Returns ``None`` for decoded bodies, since the bytes were consumed
        by the decoder, and for a body that was never read.
        """
        if isinstance(self.body, RawBody):
            return self.body.content
        if isinstance(self.body, TransportBody):
            return self.body.raw.content
        return None


def status_text_for(response: httpx.Response) -> str:
    """Build the ``"<code> <reason>"`` status text for *response*."""
    reason = response.reason_phrase
    return f"{response.status_code} {reason}" if reason else str(response.status_code)
