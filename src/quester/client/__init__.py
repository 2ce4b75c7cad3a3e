"""Client, request builder and response model for quester.

Classes:
    :class:`Client` -- owns the base URL, default headers, default timeout
    and hook chain, and dispatches every request.
    :class:`Request` -- fluent builder for a single exchange.
    :class:`Response` -- status, headers and a tagged body variant.

Example::

    from quester.client import Client

    with Client("https://api.example.com") as client:
        resp = client.new_request().set_path("/users").execute(dict)
"""

from quester.client.request import JSONBody, Request, StreamBody
from quester.client.response import DecodedBody, RawBody, Response, TransportBody
from quester.client.sync_client import Client

__all__ = [
    "Client",
    "Request",
    "Response",
    "StreamBody",
    "JSONBody",
    "TransportBody",
    "DecodedBody",
    "RawBody",
]
