"""Cancellation contexts.

A :class:`Context` carries a cancellation signal and an optional deadline
into a generation call.  The retry loop waits on it between attempts and
the HTTP exchange is abandoned as soon as it ends, so cancelling a context (or
letting its deadline pass) aborts the call with a
:class:`~llmkit.errors.CancellationError`.

Contexts form a tree: children created with :meth:`Context.with_cancel`
or :meth:`Context.with_timeout` are cancelled together with their parent
and never outlive its deadline.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional

from .errors import CancellationError, Cancelled, DeadlineExceeded


class Context:
    """Cancellation signal with an optional monotonic deadline."""

    def __init__(self, parent: Optional["Context"] = None, deadline: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._err: Optional[CancellationError] = None
        self._children: List[Context] = []
        self._callbacks: List[Callable[[], None]] = []
        self._parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline
        if parent is not None:
            parent._adopt(self)
        if deadline is not None and time.monotonic() >= deadline:
            self._finish(DeadlineExceeded())

    @classmethod
    def background(cls) -> "Context":
        """Return a context that is never cancelled and has no deadline."""
        return cls()

    def with_cancel(self) -> "Context":
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> "Context":
        return Context(parent=self, deadline=time.monotonic() + seconds)

    def _adopt(self, child: "Context") -> None:
        now = time.monotonic()
        with self._lock:
            err = self._err
            expired = [c for c in self._children if c.deadline is not None and c.deadline <= now]
            if err is None:
                self._children.append(child)
        # Children whose deadline nobody observed are finished here so the
        # list only holds live contexts.
        for stale in expired:
            stale._finish(DeadlineExceeded())
        if err is not None:
            child._finish(err)

    def _remove_child(self, child: "Context") -> None:
        with self._lock:
            self._children = [c for c in self._children if c is not child]

    def on_done(self, fn: Callable[[], None]) -> Callable[[], None]:
        """Run ``fn`` once this context ends; return a function that unregisters it.

        If the context has already ended ``fn`` runs immediately.
        """
        with self._lock:
            registered = self._err is None
            if registered:
                self._callbacks.append(fn)
        if not registered:
            fn()

        def remove() -> None:
            with self._lock:
                self._callbacks = [cb for cb in self._callbacks if cb is not fn]

        return remove

    def _finish(self, err: CancellationError) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            children, self._children = self._children, []
            callbacks, self._callbacks = self._callbacks, []
        self._event.set()
        if self._parent is not None:
            self._parent._remove_child(self)
        for child in children:
            child._finish(err)
        for fn in callbacks:
            fn()

    def cancel(self) -> None:
        self._finish(Cancelled())

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or ``None`` without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> Optional[CancellationError]:
        if self._err is None and self.deadline is not None and time.monotonic() >= self.deadline:
            self._finish(DeadlineExceeded())
        return self._err

    def done(self) -> bool:
        return self.err() is not None

    def raise_if_done(self) -> None:
        err = self.err()
        if err is not None:
            raise err

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if the context ended meanwhile."""
        if self.done():
            return True
        remaining = self.remaining()
        if remaining is not None and remaining <= seconds:
            self._event.wait(remaining)
            return self.done() or self._expire()
        return self._event.wait(seconds)

    def _expire(self) -> bool:
        self._finish(DeadlineExceeded())
        return True


__all__ = ["Context"]
