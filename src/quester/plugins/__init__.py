"""Hook system for quester -- the extension points around every dispatch.

Key names:

* :class:`Hooks` -- Protocol with ``pre_request`` and ``post_response``.
* :class:`Outcome` -- Request plus transport response or error, handed to
  ``post_response``.
* :class:`NoopHooks` / :data:`DEFAULT_HOOKS` -- No-op implementation.
* :class:`HookChain` -- Ordered runner used by the client.
* :class:`LoggingHook` -- Logs requests and responses.
"""

from quester.plugins.hooks import DEFAULT_HOOKS, HookChain, Hooks, NoopHooks, Outcome
from quester.plugins.logging_hook import LoggingHook, log_request, log_response

__all__ = [
    "Hooks",
    "Outcome",
    "NoopHooks",
    "DEFAULT_HOOKS",
    "HookChain",
    "LoggingHook",
    "log_request",
    "log_response",
]
