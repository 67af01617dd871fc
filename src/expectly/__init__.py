"""expectly - fluent, non-raising expectations for tests."""

from .assertions import Expectation, ExpectationFailure, Nilable, PollingScheduler
from .config import ExpectConfig, load_config
from .context import TestContext, current_test, expect, fail, register_test, test_context_scope
from .errors import ConfigError, UsageError
from .version import __version__


__all__ = [
    # Registration and entry points
    "TestContext",
    "register_test",
    "current_test",
    "test_context_scope",
    "expect",
    "fail",
    # Expectations
    "Expectation",
    "ExpectationFailure",
    "Nilable",
    "PollingScheduler",
    # Configuration and errors
    "ExpectConfig",
    "load_config",
    "ConfigError",
    "UsageError",
    "__version__",
]
