"""Cancellation and deadline carriers for requests.

A :class:`Context` travels with a :class:`~quester.client.Request` and
bounds how long the exchange may take. Contexts form a tree: a child
created with :meth:`Context.with_timeout` or :meth:`Context.with_cancel`
is done as soon as it, or any of its ancestors, is cancelled or past its
deadline. A child's effective deadline is the earliest in its ancestry.

Deriving a child allocates nothing that needs releasing. The child only
keeps a reference to its parent, so an abandoned context is reclaimed by
the garbage collector like any other object.

Example::

    parent = Context.background()
    ctx = Context.with_timeout(parent, 5.0)
    ...
    parent.cancel()      # ctx.done() is now True
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from quester.exceptions import Cancelled, DeadlineExceeded


class Context:
    """A node in a cancellation tree with an optional deadline.

    Use :meth:`background` for a root context instead of calling the
    constructor directly.

    Args:
        parent: The context this one derives from, if any.
        deadline: Absolute :func:`time.monotonic` deadline for this node.
    """

    def __init__(
        self,
        parent: Optional[Context] = None,
        deadline: Optional[float] = None,
    ) -> None:
        self._parent = parent
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> Context:
        """Return a fresh root context that never expires on its own."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Context) -> Context:
        """Derive a child that can be cancelled independently of *parent*."""
        return cls(parent=parent)

    @classmethod
    def with_timeout(cls, parent: Context, seconds: float) -> Context:
        """Derive a child whose deadline is *seconds* from now.

        The child never outlives *parent*: if the parent's deadline is
        earlier, that one stays in effect.
        """
        return cls(parent=parent, deadline=time.monotonic() + seconds)

    @property
    def parent(self) -> Optional[Context]:
        return self._parent

    @property
    def deadline(self) -> Optional[float]:
        """The earliest monotonic deadline along the ancestry, or ``None``."""
        deadlines = []
        node: Optional[Context] = self
        while node is not None:
            if node._deadline is not None:
                deadlines.append(node._deadline)
            node = node._parent
        return min(deadlines) if deadlines else None

    @property
    def cancelled(self) -> bool:
        """Whether this context or one of its ancestors was cancelled."""
        node: Optional[Context] = self
        while node is not None:
            if node._cancelled.is_set():
                return True
            node = node._parent
        return False

    def cancel(self) -> None:
        """Cancel this context and, implicitly, every context derived from it."""
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, ``0.0`` once passed, ``None`` without one."""
        deadline = self.deadline
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def done(self) -> bool:
        return self.cancelled or self.expired()

    def raise_if_done(self) -> None:
        """Raise the matching :class:`~quester.exceptions.ContextError` if done.

        Raises:
            Cancelled: If the context or an ancestor was cancelled.
            DeadlineExceeded: If the effective deadline has passed.
        """
        if self.cancelled:
            raise Cancelled("context cancelled")
        if self.expired():
            raise DeadlineExceeded("context deadline exceeded")

    def __repr__(self) -> str:
        return f"Context(cancelled={self.cancelled}, remaining={self.remaining()})"
