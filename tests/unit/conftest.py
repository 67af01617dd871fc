"""Shared fixtures for unit tests."""

from collections.abc import Iterable

import pytest

from expectly.config import ExpectConfig
from expectly.context import CURRENT_TEST, TestContext, reset_snapshot


class RecordingReporter:
    """Reporter that keeps everything it is told."""

    def __init__(self):
        self.failures = []
        self.completed = []

    def on_failure(self, failure) -> None:
        self.failures.append(failure)

    def on_test_complete(self, ctx) -> None:
        self.completed.append(ctx)


class FakeClock:
    """Monotonic clock advanced only by its own sleep()."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeEnvironment:
    """Dict-backed stand-in for the process environment."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.vars = dict(initial or {})

    def items(self) -> Iterable[tuple[str, str]]:
        return list(self.vars.items())

    def get(self, name: str) -> str | None:
        return self.vars.get(name)

    def set(self, name: str, value: str) -> None:
        self.vars[name] = value

    def unset(self, name: str) -> None:
        self.vars.pop(name, None)


@pytest.fixture(autouse=True)
def isolated_expectly_state():
    """Start every test with no registered context and no environment baseline."""
    reset_snapshot()
    token = CURRENT_TEST.set(None)
    yield
    CURRENT_TEST.reset(token)
    reset_snapshot()


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def ctx(recording_reporter) -> TestContext:
    """A test context that records failures without touching the environment."""
    return TestContext(
        name="unit",
        config=ExpectConfig(restore_environment=False),
        reporters=[recording_reporter],
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_env() -> FakeEnvironment:
    return FakeEnvironment({"HOME": "/home/tester", "LANG": "C.UTF-8"})
