"""Error types for expectly."""


class UsageError(BaseException):
    """Raised when expectly is used incorrectly (developer error).

    Derives from BaseException so ``except Exception`` blocks in test code and
    :meth:`Expectation.panics` never swallow it. An escaping UsageError stops
    the whole pytest session.
    """

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        self.operation = operation
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)


class ConfigError(ValueError):
    """Raised when the expectly configuration is invalid."""

    def __init__(self, source: str, cause: Exception | None = None) -> None:
        self.source = source
        self.cause = cause

        message = f"Invalid expectly configuration in {source}"
        if cause:
            message += f"\nCause: {cause}"

        super().__init__(message)
