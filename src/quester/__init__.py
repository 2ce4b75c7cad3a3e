"""quester -- a fluent request builder on top of :mod:`httpx`.

A :class:`~quester.client.Client` owns a base URL, default headers, a
default timeout and an ordered chain of hooks. Each call starts from
:meth:`Client.new_request`, is configured through chained setters, and is
executed with :meth:`~quester.client.Request.execute`, which decodes the
response body according to its ``Content-Type``.

Example::

    from quester import Client

    with Client("https://api.example.com") as client:
        resp = (
            client.new_request()
            .set_method("get")
            .set_path("/users")
            .set_query("id", "7")
            .execute(dict)
        )
        print(resp.status, resp.value)

Modules:
    client: The client, the request builder and the response model.
    plugins: The hook protocol, the hook chain and the logging hook.
    context: Cancellation and deadline carriers.
    models: Pydantic configuration models.
    config: Environment-aware configuration loading.
    exceptions: Exception hierarchy.
"""

__version__ = "0.1.0"

from quester.client import Client, Request, Response  # noqa: E402
from quester.context import Context  # noqa: E402
from quester.plugins import DEFAULT_HOOKS, Hooks, NoopHooks, Outcome  # noqa: E402

__all__ = [
    "Client",
    "Request",
    "Response",
    "Context",
    "Hooks",
    "NoopHooks",
    "DEFAULT_HOOKS",
    "Outcome",
    "__version__",
]
