"""Base reporter protocol for expectation failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from expectly.assertions.result import ExpectationFailure
    from expectly.context.context import TestContext


@runtime_checkable
class FailureReporter(Protocol):
    """Protocol defining the interface for failure reporters.

    Reporters are called synchronously from the test thread, so they should
    return quickly.
    """

    def on_failure(self, failure: ExpectationFailure) -> None:
        """Called each time an expectation fails."""
        ...

    def on_test_complete(self, ctx: TestContext) -> None:
        """Called once the test that owns ``ctx`` has finished."""
        ...
