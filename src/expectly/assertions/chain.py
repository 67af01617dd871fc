"""Fluent expectations on a single actual value.

Every operation returns ``True`` when it holds. When it does not, one
:class:`ExpectationFailure` is recorded on the owning test context and the
operation returns ``False``; the test keeps running. Using an operation on a
value of the wrong kind raises :class:`UsageError` instead.
"""

from __future__ import annotations

import dataclasses
import logging
import numbers
import weakref
from collections.abc import Sized
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from expectly.assertions.capture import capture_raise, must_be_callable
from expectly.assertions.compare import deep_equal
from expectly.assertions.describe import describe, type_tag
from expectly.assertions.polling import PollingScheduler
from expectly.assertions.result import ExpectationFailure
from expectly.errors import UsageError

if TYPE_CHECKING:
    from expectly.context.context import TestContext

logger = logging.getLogger(__name__)

# Kinds that hold a value rather than refer to one; asking them (or a dataclass
# instance) for nil-ness is an error.
_VALUE_KINDS = (numbers.Number, str, bytes, tuple, Enum, date, time, timedelta)


class Nilable(Protocol):
    """Objects that know whether they currently refer to nothing."""

    def is_nil(self) -> bool: ...


def _format(operation: str, *sections: tuple[str, str]) -> str:
    body = "".join(f"\n {label}: \n\t\t {text}" for label, text in sections)
    return f"{operation} assertion failed. {body}"


class Expectation:
    """Expectations on one actual value, bound to a :class:`TestContext`."""

    __slots__ = ("_actual", "_context")

    def __init__(self, actual: Any, context: TestContext) -> None:
        self._actual = actual
        self._context = context

    @property
    def actual(self) -> Any:
        return self._actual

    @property
    def context(self) -> TestContext:
        return self._context

    def __repr__(self) -> str:
        return f"Expectation({self._describe(self._actual)})"

    def _describe(self, value: Any) -> str:
        return describe(value, self._context.config.max_description_length)

    def _report(
        self,
        operation: str,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
    ) -> bool:
        self._context.record(
            ExpectationFailure(operation=operation, message=message, expected=expected, actual=actual)
        )
        return False

    def _equals(self, expected: Any, operation: str) -> bool:
        if deep_equal(expected, self._actual):
            return True
        expected_desc = self._describe(expected)
        actual_desc = self._describe(self._actual)
        return self._report(
            operation,
            _format(operation, ("Expected", expected_desc), ("Actual", actual_desc)),
            expected=expected_desc,
            actual=actual_desc,
        )

    def _not_equals(self, other: Any, operation: str) -> bool:
        if not deep_equal(other, self._actual):
            return True
        other_desc = self._describe(other)
        actual_desc = self._describe(self._actual)
        return self._report(
            operation,
            _format(operation, ("Other", other_desc), ("Actual", actual_desc)),
            expected=other_desc,
            actual=actual_desc,
        )

    def equals(self, expected: Any) -> bool:
        """Actual is structurally equal to ``expected``."""
        return self._equals(expected, "Equals")

    def not_equals(self, other: Any) -> bool:
        """Actual is structurally different from ``other``."""
        return self._not_equals(other, "NotEquals")

    def contains_string(self, substr: str) -> bool:
        """Actual is a string containing ``substr``."""
        if not isinstance(self._actual, str):
            raise UsageError(f"Value is not a string: {type_tag(self._actual)}", operation="ContainsString")
        if not isinstance(substr, str):
            raise UsageError(f"Substring is not a string: {type_tag(substr)}", operation="ContainsString")
        if substr in self._actual:
            return True
        actual_desc = self._describe(self._actual)
        return self._report(
            "ContainsString",
            _format("ContainsString", ("String", substr), ("Actual", actual_desc)),
            expected=substr,
            actual=actual_desc,
        )

    def is_true(self) -> bool:
        return self._equals(True, "IsTrue")

    def is_false(self) -> bool:
        return self._equals(False, "IsFalse")

    def is_empty(self) -> bool:
        """Actual is the empty string."""
        return self._equals("", "IsEmpty")

    def is_not_empty(self) -> bool:
        """Actual is anything but the empty string."""
        return self._not_equals("", "IsNotEmpty")

    def _is_nil(self, operation: str) -> bool:
        value = self._actual
        if value is None:
            return True
        # Proxies first: isinstance() on a dead proxy raises unless the type matches exactly.
        if type(value) in (weakref.ProxyType, weakref.CallableProxyType):
            try:
                value.__class__
            except ReferenceError:
                return True
            return False
        if isinstance(value, weakref.ReferenceType):
            return value() is None
        if callable(getattr(type(value), "is_nil", None)):
            return bool(value.is_nil())
        if isinstance(value, _VALUE_KINDS) or (dataclasses.is_dataclass(value) and not isinstance(value, type)):
            raise UsageError(f"Value of kind {type_tag(value)} cannot be nil", operation=operation)
        return False

    def is_nil(self) -> bool:
        """Actual is None, a dead reference, or a :class:`Nilable` that is nil."""
        if self._is_nil("IsNil"):
            return True
        actual_desc = self._describe(self._actual)
        return self._report("IsNil", _format("IsNil", ("Actual", actual_desc)), actual=actual_desc)

    def is_not_nil(self) -> bool:
        if not self._is_nil("IsNotNil"):
            return True
        actual_desc = self._describe(self._actual)
        return self._report("IsNotNil", _format("IsNotNil", ("Actual", actual_desc)), actual=actual_desc)

    def has_len(self, expected: int) -> bool:
        """Actual has ``len()`` equal to ``expected``."""
        if not isinstance(self._actual, Sized):
            raise UsageError(f"Value of kind {type_tag(self._actual)} has no length", operation="HasLen")
        length = len(self._actual)
        if length == expected:
            return True
        return self._report(
            "HasLen",
            _format("HasLen", ("Expected", str(expected)), ("Actual", str(length))),
            expected=str(expected),
            actual=str(length),
        )

    def panics(self) -> bool:
        """Actual is a callable that raises when invoked with no arguments."""
        error = capture_raise(self._actual)
        if error is not None:
            logger.debug("Captured %s from %r", type(error).__name__, self._actual)
            return True
        return self._report("Panics", "Panics assertion failed. \n Given function didn't raise")

    def eventually_equals(
        self,
        expected: Any,
        *,
        timeout: float | None = None,
        interval: float | None = None,
        scheduler: PollingScheduler | None = None,
    ) -> bool:
        """Actual is a callable that returns ``expected`` before the timeout.

        The callable is polled once right away and then every ``interval``
        seconds until it returns a value structurally equal to ``expected`` or
        ``timeout`` seconds pass. Defaults come from the context configuration.
        """
        supplier = must_be_callable(self._actual, "EventuallyEquals")
        if scheduler is None:
            config = self._context.config
            scheduler = PollingScheduler(
                timeout=config.poll_timeout if timeout is None else timeout,
                interval=config.poll_interval if interval is None else interval,
            )

        outcome = scheduler.poll(supplier, expected)
        if outcome.matched:
            return True

        expected_desc = self._describe(expected)
        actual_desc = self._describe(outcome.last_value)
        message = _format(
            "EventuallyEquals",
            ("Expected", expected_desc),
            ("Actual", actual_desc),
            ("Polled", f"{outcome.attempts} time(s) over {scheduler.timeout:g}s"),
        )
        return self._report("EventuallyEquals", message, expected=expected_desc, actual=actual_desc)

    def within_time(self, other: datetime, diff: timedelta | float) -> bool:
        """Actual is a datetime strictly inside ``(other - diff, other + diff)``."""
        actual = self._actual
        if actual is None:
            raise UsageError("Value is nil", operation="WithinTime")
        if not isinstance(actual, datetime):
            raise UsageError(f"Value is not a time: {type_tag(actual)}", operation="WithinTime")
        if not isinstance(other, datetime):
            raise UsageError(f"Reference is not a time: {type_tag(other)}", operation="WithinTime")
        if isinstance(diff, (int, float)) and not isinstance(diff, bool):
            diff = timedelta(seconds=diff)
        elif not isinstance(diff, timedelta):
            raise UsageError(f"Range is not a duration: {type_tag(diff)}", operation="WithinTime")

        lower = other - diff
        upper = other + diff
        try:
            inside = lower < actual < upper
        except TypeError as e:
            raise UsageError("Cannot compare naive and aware datetimes", operation="WithinTime") from e
        if inside:
            return True

        actual_desc = actual.isoformat()
        return self._report(
            "WithinTime",
            _format("WithinTime", ("Range", f"{lower.isoformat()} ~ {upper.isoformat()}"), ("Actual", actual_desc)),
            expected=f"{lower.isoformat()} ~ {upper.isoformat()}",
            actual=actual_desc,
        )
