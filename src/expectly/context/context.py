from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

from expectly.assertions.result import ExpectationFailure
from expectly.config import ExpectConfig
from expectly.context.environment import get_snapshot
from expectly.errors import UsageError

if TYPE_CHECKING:
    from expectly.assertions.chain import Expectation
    from expectly.reports.base import FailureReporter


CURRENT_TEST: ContextVar[TestContext | None] = ContextVar("current_test", default=None)

MISSING_REGISTRATION = "Did you forget to call register_test(ctx)?"


@dataclass(frozen=True, slots=True)
class TestContext:
    """Execution context for a single test using expectations.

    Attributes
    ----------
    name
        Display name of the test (e.g. a pytest node id).
    config
        Settings used by expectations created from this context.
    reporters
        Receivers notified of every recorded failure.
    failures
        Failures recorded so far, in order.
    """

    __test__ = False

    name: str | None = None
    config: ExpectConfig = field(default_factory=ExpectConfig)
    reporters: list[FailureReporter] = field(default_factory=list)
    failures: list[ExpectationFailure] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    def record(self, failure: ExpectationFailure) -> None:
        """Record a failure and forward it to every reporter."""
        if failure.test_name is None:
            failure = failure.model_copy(update={"test_name": self.name})
        self.failures.append(failure)
        for reporter in self.reporters:
            reporter.on_failure(failure)

    def fail(self, template: str, *args: Any) -> None:
        """Record a failure with a ``%``-formatted message."""
        message = template % args if args else template
        self.record(ExpectationFailure(operation="Fail", message=message))

    def expect(self, actual: Any) -> Expectation:
        """Start a chain of expectations on ``actual``."""
        from expectly.assertions.chain import Expectation

        return Expectation(actual, self)

    def complete(self) -> None:
        """Notify reporters that the test has finished."""
        for reporter in self.reporters:
            reporter.on_test_complete(self)


@contextmanager
def test_context_scope(ctx: TestContext) -> Iterator[TestContext]:
    token = CURRENT_TEST.set(ctx)
    try:
        yield ctx
    finally:
        CURRENT_TEST.reset(token)


test_context_scope.__test__ = False  # type: ignore[attr-defined]


def register_test(ctx: TestContext) -> TestContext:
    """Make ``ctx`` the current test context.

    Replaces any previous registration in the current execution context. When
    environment restoring is enabled, the first registration in the process
    captures the environment and every registration resets it to that baseline.
    """
    if ctx.config.restore_environment:
        get_snapshot().apply()
    CURRENT_TEST.set(ctx)
    return ctx


def current_test() -> TestContext:
    """Return the registered test context, failing fast if there is none."""
    ctx = CURRENT_TEST.get()
    if ctx is None:
        raise UsageError(MISSING_REGISTRATION)
    return ctx


def expect(actual: Any) -> Expectation:
    """Start a chain of expectations on ``actual`` for the registered test."""
    return current_test().expect(actual)


def fail(template: str, *args: Any) -> None:
    """Fail the registered test with a ``%``-formatted message."""
    current_test().fail(template, *args)
