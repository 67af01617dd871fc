"""Environment variable baseline shared by every registered test.

The first test registration in a process captures the environment; every
registration (the first included) resets the captured variables to their
baseline values. Variables that were not captured are left alone, so values a
fixture sets before registering survive.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable
from typing import Protocol

logger = logging.getLogger(__name__)

# Maintained by pytest itself for the running test phase.
DEFAULT_IGNORED = frozenset({"PYTEST_CURRENT_TEST"})


class Environment(Protocol):
    """Host environment the snapshot reads from and writes to."""

    def items(self) -> Iterable[tuple[str, str]]: ...

    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...


class OsEnvironment:
    """Process environment backed by ``os.environ``."""

    def items(self) -> Iterable[tuple[str, str]]:
        return list(os.environ.items())

    def get(self, name: str) -> str | None:
        return os.environ.get(name)

    def set(self, name: str, value: str) -> None:
        os.environ[name] = value


class EnvironmentSnapshot:
    """Capture-once, restore-many copy of an :class:`Environment`.

    Variables named in ``ignored`` are neither captured nor restored.
    """

    def __init__(
        self,
        environment: Environment | None = None,
        ignored: Iterable[str] = DEFAULT_IGNORED,
    ) -> None:
        self.environment: Environment = OsEnvironment() if environment is None else environment
        self.ignored = frozenset(ignored)
        self._baseline: dict[str, str] | None = None
        self._lock = threading.Lock()

    @property
    def captured(self) -> bool:
        return self._baseline is not None

    @property
    def baseline(self) -> dict[str, str]:
        """Copy of the captured variables (empty before the first capture)."""
        return dict(self._baseline or {})

    def apply(self) -> None:
        """Capture the baseline if this is the first call, then restore it."""
        with self._lock:
            if self._baseline is None:
                self._baseline = {
                    name: value for name, value in self.environment.items() if name not in self.ignored
                }
                logger.debug("Captured environment baseline (%d variables)", len(self._baseline))
            self._restore(self._baseline)

    def reset(self) -> None:
        """Forget the baseline; the next :meth:`apply` captures a fresh one."""
        with self._lock:
            self._baseline = None

    def _restore(self, baseline: dict[str, str]) -> None:
        changed = 0
        for name, value in baseline.items():
            if self.environment.get(name) != value:
                self.environment.set(name, value)
                changed += 1

        if changed:
            logger.debug("Restored %d environment variable(s) to baseline", changed)


_snapshot = EnvironmentSnapshot()


def get_snapshot() -> EnvironmentSnapshot:
    """Return the process-wide environment snapshot."""
    return _snapshot


def reset_snapshot(environment: Environment | None = None) -> EnvironmentSnapshot:
    """Replace the process-wide snapshot with an uncaptured one."""
    global _snapshot
    _snapshot = EnvironmentSnapshot(environment)
    return _snapshot


__all__ = ["Environment", "EnvironmentSnapshot", "OsEnvironment", "get_snapshot", "reset_snapshot"]
