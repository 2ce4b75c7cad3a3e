"""Pydantic models for client configuration.

:class:`ClientConfig` is the serialisable description of a
:class:`~quester.client.Client`. It can be built directly, loaded from the
environment via :func:`quester.config.load_client_config`, and turned into
a client with :meth:`Client.from_config`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from quester import __version__

DEFAULT_TIMEOUT = 30.0
"""Default timeout in seconds, shared by the client and its transport."""

DEFAULT_USER_AGENT = f"quester/{__version__}"


class ClientConfig(BaseModel):
    """Settings needed to construct a :class:`~quester.client.Client`.

    Example::

        ClientConfig(
            base_url="https://api.example.com",
            timeout=10,
            headers={"Accept": "application/json"},
        )
    """

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(description="Prefix prepended verbatim to every request path")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Default timeout in seconds"
    )
    user_agent: Optional[str] = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent default header; None disables it",
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Additional default headers"
    )
