"""pytest integration for expectly.

Loaded automatically through the ``pytest11`` entry point. Provides:

- the ``expect`` fixture, which registers a fresh :class:`TestContext` for the
  test and returns its bound ``expect``;
- the ``expect_context`` fixture, exposing that context;
- pickup of contexts a test registers itself with :func:`register_test`;
- report handling that fails a test which recorded expectation failures, and
  stops the session when a :class:`UsageError` escapes a test.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from expectly.assertions.chain import Expectation
from expectly.config import ExpectConfig, load_config
from expectly.context import CURRENT_TEST, TestContext, register_test
from expectly.errors import ConfigError, UsageError
from expectly.reports import FailureReporter, build_reporters, render_failures

logger = logging.getLogger(__name__)

config_key = pytest.StashKey[ExpectConfig]()
contexts_key = pytest.StashKey[list[TestContext]]()


def pytest_configure(config: pytest.Config) -> None:
    try:
        expect_config = load_config(config.rootpath)
        # Fail at start-up rather than in every test's setup.
        build_reporters(expect_config.reporters, expect_config.reporter_options)
    except ConfigError as e:
        logger.warning("Invalid expectly configuration: %s", e)
        raise pytest.UsageError(str(e)) from e

    config.stash[config_key] = expect_config


def _expect_config(config: pytest.Config) -> ExpectConfig:
    expect_config = config.stash.get(config_key, None)
    if expect_config is None:
        expect_config = config.stash[config_key] = load_config(config.rootpath)
    return expect_config


def _reporters(config: pytest.Config) -> list[FailureReporter]:
    expect_config = _expect_config(config)
    return build_reporters(expect_config.reporters, expect_config.reporter_options)


def _track(item: pytest.Item, ctx: TestContext) -> None:
    contexts = item.stash.setdefault(contexts_key, [])
    if all(known is not ctx for known in contexts):
        contexts.append(ctx)


@pytest.fixture
def expect_context(request: pytest.FixtureRequest) -> Iterator[TestContext]:
    """Register a TestContext for the requesting test."""
    ctx = TestContext(
        name=request.node.nodeid,
        config=_expect_config(request.config),
        reporters=_reporters(request.config),
    )
    _track(request.node, ctx)
    register_test(ctx)
    try:
        yield ctx
    finally:
        ctx.complete()
        if CURRENT_TEST.get() is ctx:
            CURRENT_TEST.set(None)


@pytest.fixture
def expect(expect_context: TestContext) -> Callable[[Any], Expectation]:
    """Start expectations on a value: ``expect(value).equals(...)``."""
    return expect_context.expect


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Iterator[None]:
    """Report contexts the test body registered itself with register_test()."""
    before = CURRENT_TEST.get()
    try:
        return (yield)
    finally:
        registered = CURRENT_TEST.get()
        if registered is not None and registered is not before:
            _track(item, registered)
            registered.complete()
            # Later tests must register again instead of recording here.
            CURRENT_TEST.set(None)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Iterator[Any]:
    report = yield

    if call.excinfo is not None and call.excinfo.errisinstance(UsageError):
        item.session.shouldstop = f"expectly usage error in {item.nodeid}: {call.excinfo.value}"
        logger.debug("Stopping session: %s", item.session.shouldstop)
        return report

    if call.when != "call":
        return report
    failures = [failure for ctx in item.stash.get(contexts_key, []) for failure in ctx.failures]
    if not failures:
        return report

    text = render_failures(failures)
    if report.passed:
        report.outcome = "failed"
        report.longrepr = f"{len(failures)} expectation(s) failed:\n{text}"
    else:
        report.sections.append(("expectly failures", text))
    return report
