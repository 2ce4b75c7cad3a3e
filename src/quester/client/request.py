"""Fluent request builder.

A :class:`Request` accumulates per-call configuration through chained
setters and materialises a single :class:`httpx.Request` when
:meth:`Request.execute` is called. The assembled request is handed to
:meth:`quester.client.Client.dispatch`, which applies the client's default
headers and hook chain, and the response body is then decoded according to
its ``Content-Type``.

Header precedence on the outgoing request, from strongest to weakest:

1. Basic auth credentials (written directly as ``Authorization``).
2. Per-request headers set with :meth:`Request.set_header`.
3. The bearer token (only when no ``Authorization`` exists yet).
4. Client default headers (only for keys that are still absent).

A builder is meant to be executed once.
"""

from __future__ import annotations

import base64
import json
import logging
import time
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union, get_origin
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, PydanticSchemaGenerationError, TypeAdapter, ValidationError

from quester.client.response import (
    DecodedBody,
    RawBody,
    Response,
    TransportBody,
    status_text_for,
)
from quester.context import Context
from quester.exceptions import ConstructionError, ContextError, DecodeError, SerializationError

if TYPE_CHECKING:
    from quester.client.sync_client import Client

trace_logger = logging.getLogger("quester.trace")

JSON_CONTENT_TYPE = "application/json"
_XML_CONTENT_TYPES = ("application/xml", "text/xml")
_READ_CHUNK_SIZE = 64 * 1024


# --- Request body variants ---


@dataclass(frozen=True)
class StreamBody:
    """Bytes or a byte stream, sent exactly as given."""

    source: Union[bytes, Iterable[bytes]]


@dataclass(frozen=True)
class JSONBody:
    """A structured value serialised to JSON at send time."""

    value: Any


RequestBody = Union[StreamBody, JSONBody]


def _is_stream(body: Any) -> bool:
    return isinstance(body, (bytes, bytearray, memoryview, Iterator)) or hasattr(body, "read")


def _as_stream(body: Any) -> Union[bytes, Iterable[bytes]]:
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    if hasattr(body, "read"):
        # File-like object: read it lazily in fixed-size chunks.
        return iter(lambda: body.read(_READ_CHUNK_SIZE), b"")
    return body


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# --- Tracing ---

# httpcore folds name resolution into connect_tcp, so connect start/done
# also cover DNS.
_TRACE_LABELS = {
    "connection.connect_tcp.started": "Connect Start",
    "connection.connect_tcp.complete": "Connect Done",
    "connection.connect_tcp.failed": "Connect Failed",
    "connection.start_tls.started": "TLS Start",
    "connection.start_tls.complete": "TLS Done",
    "send_request_headers.complete": "Wrote Headers",
    "receive_response_headers.complete": "Got First Byte",
}


def _trace(event_name: str, info: dict[str, Any]) -> None:
    """Log a connection-lifecycle event reported by the transport."""
    label = _TRACE_LABELS.get(event_name)
    if label is None and event_name.startswith(("http11.", "http2.")):
        label = _TRACE_LABELS.get(event_name.split(".", 1)[1])
    if label is None:
        return

    if "host" in info:
        trace_logger.info("[TRACE] %s: %s:%s", label, info["host"], info.get("port"))
    elif "exception" in info:
        trace_logger.info("[TRACE] %s: %s", label, info["exception"])
    elif label == "Got First Byte":
        trace_logger.info("[TRACE] %s: %s", label, time.strftime("%Y-%m-%dT%H:%M:%S%z"))
    else:
        trace_logger.info("[TRACE] %s", label)


# --- Response decoding ---


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_data(element: ET.Element) -> Any:
    """Convert an XML element into plain data.

    Attributes and child elements become dict keys (namespaces stripped),
    repeated children become lists, and a leaf element without attributes
    becomes its stripped text. Text next to attributes or children is kept
    under ``"#text"``.
    """
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text

    data: dict[str, Any] = {_local_name(k): v for k, v in element.attrib.items()}
    for child in children:
        key = _local_name(child.tag)
        value = element_to_data(child)
        if key not in data:
            data[key] = value
        elif isinstance(data[key], list):
            data[key].append(value)
        else:
            data[key] = [data[key], value]
    if text:
        data["#text"] = text
    return data


def _is_model(target: Any) -> bool:
    # list[X] passes isinstance(..., type) on older interpreters.
    return isinstance(target, type) and get_origin(target) is None and issubclass(target, BaseModel)


def check_target(target: Any) -> None:
    """Ensure *target* is a type or annotation that can be decoded into.

    Raises:
        TypeError: If *target* is an instance (e.g. ``{}``) or a type
            pydantic cannot validate.
    """
    if target is None or target is Any or target is object or target is ET.Element:
        return
    if not isinstance(target, type) and get_origin(target) is None:
        raise TypeError(
            f"Decode target must be a type or annotation, not {type(target).__name__} instance"
        )
    if _is_model(target):
        return
    try:
        TypeAdapter(target)
    except PydanticSchemaGenerationError as exc:
        raise TypeError(f"Cannot decode into {target!r}: {exc}") from exc


def _coerce(data: Any, target: Any) -> Any:
    if target is Any or target is object:
        return data
    if _is_model(target):
        return target.model_validate(data)
    return TypeAdapter(target).validate_python(data)


def _drain(raw: httpx.Response, ctx: Context) -> httpx.Response:
    """Read the body of *raw*, checking *ctx* after every chunk received.

    Returns a read and closed copy of *raw* whose ``content``, ``text`` and
    ``json()`` work, with content decoding applied as usual.

    Raises:
        ContextError: If *ctx* is cancelled or expires mid-body.
    """
    chunks: list[bytes] = []
    for chunk in raw.iter_raw():
        chunks.append(chunk)
        ctx.raise_if_done()

    drained = httpx.Response(
        raw.status_code,
        headers=raw.headers,
        stream=httpx.ByteStream(b"".join(chunks)),
        request=raw.request,
        extensions=raw.extensions,
    )
    drained.read()
    return drained


def decode_body(content: bytes, content_type: str, target: Any) -> Optional[DecodedBody]:
    """Decode *content* into *target* based on *content_type*.

    Matching is by substring, so ``application/json; charset=utf-8`` is JSON.

    Returns:
        The decoded body, or ``None`` when the content type is neither
        JSON nor XML.

    Raises:
        ValueError: If parsing or validation fails (``json.JSONDecodeError``,
            ``xml.etree.ElementTree.ParseError`` wrapped as ``ValueError``, or
            ``pydantic.ValidationError``).
    """
    if JSON_CONTENT_TYPE in content_type:
        if target is ET.Element:
            raise ValueError("a JSON body cannot be decoded into an XML element")
        return DecodedBody(_coerce(json.loads(content), target))

    if any(xml_type in content_type for xml_type in _XML_CONTENT_TYPES):
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ValueError(f"invalid XML: {exc}") from exc
        if target is ET.Element:
            return DecodedBody(root)
        return DecodedBody(_coerce(element_to_data(root), target))

    return None


class Request:
    """Builder for a single HTTP exchange.

    Obtain one from :meth:`quester.client.Client.new_request`. Every setter
    returns the builder so calls can be chained::

        resp = (
            client.new_request()
            .set_method("post")
            .set_path("/users")
            .set_body({"name": "a"})
            .set_bearer_token(token)
            .set_timeout(5)
            .execute(User)
        )

    Args:
        client: The client used to dispatch the request.
    """

    def __init__(self, client: Client) -> None:
        self._client = client
        self._method = "GET"
        self._path = ""
        self._headers = httpx.Headers()
        self._query: dict[str, str] = {}
        self._body: Optional[RequestBody] = None
        self._ctx: Optional[Context] = None
        self._basic_auth_username = ""
        self._basic_auth_password = ""
        self._bearer_token = ""
        self._enable_trace = False

    # ------------------------------------------------------------------ #
    # Setters
    # ------------------------------------------------------------------ #

    def set_method(self, method: str) -> Request:
        self._method = method.upper()
        return self

    def set_path(self, path: str) -> Request:
        """Set the path appended verbatim to the client's base URL."""
        self._path = path
        return self

    def set_header(self, key: str, value: str) -> Request:
        """Set a header, replacing any values already set under *key*."""
        self._headers[key] = value
        return self

    def set_query(self, key: str, value: str) -> Request:
        self._query[key] = value
        return self

    def set_queries(self, queries: Mapping[str, str]) -> Request:
        """Merge *queries* into the query parameters; later values win."""
        for key, value in queries.items():
            self._query[key] = value
        return self

    def set_body(self, body: Any) -> Request:
        """Set the request body.

        ``bytes``, ``bytearray``, ``memoryview``, binary file objects and
        iterators of ``bytes`` are sent unchanged. Anything else, ``str``
        and pydantic models included, is encoded as JSON when the request
        is executed and ``Content-Type: application/json`` is added unless
        a content type was set explicitly. ``None`` clears the body.
        """
        if body is None:
            self._body = None
        elif _is_stream(body):
            self._body = StreamBody(_as_stream(body))
        else:
            self._body = JSONBody(body)
        return self

    def set_basic_auth(self, username: str, password: str) -> Request:
        self._basic_auth_username = username
        self._basic_auth_password = password
        return self

    def set_bearer_token(self, token: str) -> Request:
        """Send ``Authorization: Bearer <token>`` unless another Authorization is set."""
        self._bearer_token = token
        return self

    def set_context(self, ctx: Context) -> Request:
        self._ctx = ctx
        return self

    def set_timeout(self, seconds: float) -> Request:
        """Bound the request by a deadline *seconds* from now.

        Derives a child of the current context, or of a fresh background
        context when none was set.
        """
        parent = self._ctx if self._ctx is not None else Context.background()
        self._ctx = Context.with_timeout(parent, seconds)
        return self

    def enable_trace(self) -> Request:
        """Log connection-lifecycle events to the ``quester.trace`` logger."""
        self._enable_trace = True
        return self

    # ------------------------------------------------------------------ #
    # Read-only views
    # ------------------------------------------------------------------ #

    @property
    def method(self) -> str:
        return self._method

    @property
    def headers(self) -> httpx.Headers:
        return self._headers

    @property
    def context(self) -> Optional[Context]:
        return self._ctx

    @property
    def url(self) -> str:
        """The full URL the request will be sent to."""
        url = self._client.base_url + self._path
        if self._query:
            url += "?" + urlencode(sorted(self._query.items()))
        return url

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def execute(self, result: Any = None) -> Response:
        """Send the request and build a :class:`Response`.

        Args:
            result: Decode target. ``None`` keeps the transport response as
                the body. Otherwise a JSON or XML body is decoded and
                validated into this type (a pydantic model, ``dict``,
                ``list[Model]``, ``Any``, or ``xml.etree.ElementTree.Element``
                for the parsed XML root). Other content types leave the raw
                bytes in the body.

        Returns:
            The populated response.

        Raises:
            SerializationError: If a structured body cannot be encoded.
            ConstructionError: If the outgoing request cannot be built.
            TypeError: If *result* is not a type or annotation.
            ContextError: If the context is cancelled or expired before the
                response headers are processed.
            DecodeError: If the body cannot be read or decoded, including
                when the context ends while the body is still arriving; the
                partially populated response is on ``exc.response``.

        Pre-request hook exceptions and :class:`httpx.HTTPError` raised by
        the transport propagate unchanged.
        """
        check_target(result)
        headers = httpx.Headers(self._headers)
        content = self._encode_body(headers)
        ctx = self._ctx if self._ctx is not None else Context.background()

        request = self._build_request(self._outgoing_headers(headers), content, ctx)

        ctx.raise_if_done()
        raw = self._client.dispatch(request)

        try:
            ctx.raise_if_done()
            response = Response(
                status=raw.status_code,
                status_text=status_text_for(raw),
                headers=raw.headers,
            )
            try:
                drained = _drain(raw, ctx)
            except (httpx.HTTPError, httpx.StreamError, ContextError) as exc:
                raise DecodeError(f"Failed to read response body: {exc}", response) from exc

            if result is None:
                response.body = TransportBody(drained)
                return response

            body = drained.content
            try:
                decoded = decode_body(body, response.content_type, result)
            except (ValueError, ValidationError) as exc:
                raise DecodeError(f"Failed to decode response body: {exc}", response) from exc
            response.body = decoded if decoded is not None else RawBody(body)
            return response
        finally:
            raw.close()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _has_basic_auth(self) -> bool:
        return bool(self._basic_auth_username or self._basic_auth_password)

    def _encode_body(self, headers: httpx.Headers) -> Optional[Union[bytes, Iterable[bytes]]]:
        """Resolve the body into request content, defaulting Content-Type for JSON."""
        if self._body is None:
            return None
        if isinstance(self._body, StreamBody):
            return self._body.source

        try:
            encoded = json.dumps(self._body.value, default=_json_default).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to encode request body as JSON: {exc}") from exc
        if "content-type" not in headers:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return encoded

    def _outgoing_headers(self, headers: httpx.Headers) -> list[tuple[bytes, bytes]]:
        """Auth headers followed by every per-request header, duplicates and casing kept."""
        items: list[tuple[bytes, bytes]] = []
        basic_auth = self._has_basic_auth()
        if basic_auth:
            credentials = f"{self._basic_auth_username}:{self._basic_auth_password}"
            encoded = base64.b64encode(credentials.encode("utf-8"))
            items.append((b"Authorization", b"Basic " + encoded))
        elif self._bearer_token and "authorization" not in headers:
            items.append((b"Authorization", f"Bearer {self._bearer_token}".encode("utf-8")))

        for key, value in headers.raw:
            # Basic auth is authoritative over an explicit Authorization header.
            if basic_auth and key.lower() == b"authorization":
                continue
            items.append((key, value))
        return items

    def _build_request(
        self,
        headers: list[tuple[bytes, bytes]],
        content: Optional[Union[bytes, Iterable[bytes]]],
        ctx: Context,
    ) -> httpx.Request:
        timeout = self._client.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        extensions: dict[str, Any] = {"timeout": httpx.Timeout(timeout).as_dict()}
        if self._enable_trace:
            extensions["trace"] = _trace

        url = self.url
        try:
            request = httpx.Request(
                self._method, url, headers=headers, content=content, extensions=extensions
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise ConstructionError(f"Cannot build request for {url!r}: {exc}") from exc
        if not request.url.scheme or not request.url.host:
            raise ConstructionError(f"Cannot build request for {url!r}: URL is not absolute")
        return request
