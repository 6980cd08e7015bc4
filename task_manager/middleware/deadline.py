"""Per-request storage deadline middleware."""

from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from flask import current_app

from task_manager.deadline import deadline


P = ParamSpec("P")
T = TypeVar("T")


def request_deadline(f: Callable[P, T]) -> Callable[P, T]:
    """Decorator bounding the view's storage work by REQUEST_TIMEOUT.

    Storage calls still running when the timeout passes fail with
    DeadlineExceeded. A missing or zero REQUEST_TIMEOUT disables the bound.
    """

    @wraps(f)
    def decorated(*args: P.args, **kwargs: P.kwargs) -> T:
        with deadline(current_app.config.get("REQUEST_TIMEOUT")):
            return f(*args, **kwargs)

    return decorated
