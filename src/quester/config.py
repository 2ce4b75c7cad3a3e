"""Configuration loading with environment-variable precedence.

:func:`load_client_config` merges explicit overrides, ``QUESTER_*``
environment variables and model defaults into a validated
:class:`~quester.models.ClientConfig`.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from quester.exceptions import ConfigError
from quester.models import ClientConfig

ENV_BASE_URL = "QUESTER_BASE_URL"
ENV_TIMEOUT = "QUESTER_TIMEOUT"
ENV_USER_AGENT = "QUESTER_USER_AGENT"

_ENV_FIELDS = {
    "base_url": ENV_BASE_URL,
    "timeout": ENV_TIMEOUT,
    "user_agent": ENV_USER_AGENT,
}


def load_client_config(
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientConfig:
    """Resolve a client configuration.

    Precedence (high to low):
        1. Explicit ``overrides`` (``None`` values are ignored)
        2. Environment variables (``QUESTER_BASE_URL``, ``QUESTER_TIMEOUT``,
           ``QUESTER_USER_AGENT``)
        3. Defaults declared on :class:`ClientConfig`

    Args:
        overrides: Field values that take precedence over everything else.
        environ: Environment mapping, defaults to :data:`os.environ`.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If no base URL can be resolved or a value is invalid.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    for field_name, var in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw:
            values[field_name] = raw

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    if "base_url" not in values:
        raise ConfigError(
            f"No base URL configured (pass base_url or set {ENV_BASE_URL})"
        )

    try:
        return ClientConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc
