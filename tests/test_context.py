"""Tests for cancellation and deadline contexts."""

from __future__ import annotations

import time

import pytest

from quester.context import Context
from quester.exceptions import Cancelled, ContextError, DeadlineExceeded


class TestBackground:
    def test_never_done(self) -> None:
        ctx = Context.background()
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.done()
        ctx.raise_if_done()

    def test_cancel(self) -> None:
        ctx = Context.background()
        ctx.cancel()
        assert ctx.cancelled
        assert ctx.done()
        with pytest.raises(Cancelled):
            ctx.raise_if_done()


class TestDerived:
    def test_timeout_sets_deadline(self) -> None:
        ctx = Context.with_timeout(Context.background(), 10)
        remaining = ctx.remaining()
        assert remaining is not None
        assert 9 < remaining <= 10

    def test_expired(self) -> None:
        ctx = Context.with_timeout(Context.background(), 0.01)
        time.sleep(0.02)
        assert ctx.expired()
        assert ctx.remaining() == 0.0
        with pytest.raises(DeadlineExceeded):
            ctx.raise_if_done()

    def test_child_keeps_earlier_parent_deadline(self) -> None:
        parent = Context.with_timeout(Context.background(), 1)
        child = Context.with_timeout(parent, 100)
        assert child.deadline == parent.deadline

    def test_child_deadline_can_be_earlier(self) -> None:
        parent = Context.with_timeout(Context.background(), 100)
        child = Context.with_timeout(parent, 1)
        assert child.deadline < parent.deadline

    def test_parent_cancel_propagates(self) -> None:
        parent = Context.background()
        child = Context.with_cancel(parent)
        grandchild = Context.with_timeout(child, 30)
        parent.cancel()
        assert child.cancelled
        assert grandchild.cancelled

    def test_child_cancel_does_not_propagate_up(self) -> None:
        parent = Context.background()
        child = Context.with_cancel(parent)
        child.cancel()
        assert child.cancelled
        assert not parent.cancelled

    def test_cancelled_wins_over_expired(self) -> None:
        ctx = Context.with_timeout(Context.background(), 0)
        ctx.cancel()
        with pytest.raises(Cancelled):
            ctx.raise_if_done()

    def test_errors_share_base(self) -> None:
        assert issubclass(Cancelled, ContextError)
        assert issubclass(DeadlineExceeded, ContextError)
