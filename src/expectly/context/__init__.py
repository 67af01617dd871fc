from .context import (
    CURRENT_TEST,
    TestContext,
    current_test,
    expect,
    fail,
    register_test,
    test_context_scope,
)
from .environment import Environment, EnvironmentSnapshot, OsEnvironment, get_snapshot, reset_snapshot

__all__ = [
    "CURRENT_TEST",
    "Environment",
    "EnvironmentSnapshot",
    "OsEnvironment",
    "TestContext",
    "current_test",
    "expect",
    "fail",
    "get_snapshot",
    "register_test",
    "reset_snapshot",
    "test_context_scope",
]
