"""Per-request deadlines propagated into storage operations.

The request adapter opens a deadline around each request; repositories read
the active deadline with :func:`remaining` and abort work once it expires.
"""

import contextvars
import time
from collections.abc import Iterator
from contextlib import contextmanager

from task_manager.exceptions import DeadlineExceeded


_deadline: contextvars.ContextVar[float | None] = contextvars.ContextVar(
    "task_manager_deadline", default=None
)


@contextmanager
def deadline(seconds: float | None) -> Iterator[None]:
    """Bound every storage operation in this context to ``seconds``.

    A nested deadline never extends an outer one. ``None`` or a non-positive
    value leaves the current deadline untouched.
    """
    if seconds is None or seconds <= 0:
        yield
        return

    expires_at = time.monotonic() + seconds
    current = _deadline.get()
    if current is not None:
        expires_at = min(expires_at, current)

    token = _deadline.set(expires_at)
    try:
        yield
    finally:
        _deadline.reset(token)


def expires_at() -> float | None:
    """Monotonic timestamp at which the active deadline expires."""
    return _deadline.get()


def remaining() -> float | None:
    """Seconds left before the active deadline, or None when unbounded."""
    current = _deadline.get()
    if current is None:
        return None
    return current - time.monotonic()


def check() -> None:
    """Raise if the active deadline has already passed.

    Raises:
        DeadlineExceeded: If no time is left.
    """
    left = remaining()
    if left is not None and left <= 0:
        raise DeadlineExceeded()
