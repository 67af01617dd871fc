"""Invoke a callable and capture whatever it raises."""

from collections.abc import Callable
from typing import Any

from expectly.errors import UsageError


def must_be_callable(value: Any, operation: str) -> Callable[[], Any]:
    """Return ``value`` if it is callable, otherwise fail fast."""
    if not callable(value):
        raise UsageError(f"Value is not a function: {type(value).__name__}", operation=operation)
    return value


def capture_raise(fn: Callable[[], Any]) -> Exception | None:
    """Call ``fn()`` and return the exception it raised, or None if it returned.

    Only ``Exception`` subclasses are captured. KeyboardInterrupt, SystemExit
    and :class:`UsageError` propagate.
    """
    fn = must_be_callable(fn, "Panics")
    try:
        fn()
    except Exception as e:
        return e
    return None
