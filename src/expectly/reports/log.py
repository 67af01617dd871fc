"""Reporter that forwards failures to the standard logging system."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expectly.assertions.result import ExpectationFailure
    from expectly.context.context import TestContext


class LoggingReporter:
    """Log each failure at ``level`` on the ``expectly.failures`` logger.

    ``level`` may be a number or a level name, so it can be set from
    ``[tool.expectly.reporter_options.LoggingReporter]``.
    """

    def __init__(self, logger_name: str = "expectly.failures", level: int | str = logging.ERROR) -> None:
        self.logger = logging.getLogger(logger_name)
        if isinstance(level, str):
            try:
                level = logging.getLevelNamesMapping()[level.upper()]
            except KeyError:
                raise ValueError(f"Unknown logging level: {level}") from None
        self.level = level

    def on_failure(self, failure: ExpectationFailure) -> None:
        self.logger.log(
            self.level,
            "[%s] %s",
            failure.test_name or "<unnamed test>",
            failure.message,
            extra={"expectly_operation": failure.operation},
        )

    def on_test_complete(self, ctx: TestContext) -> None:
        if ctx.failures:
            self.logger.log(self.level, "[%s] %d expectation(s) failed", ctx.name, len(ctx.failures))
