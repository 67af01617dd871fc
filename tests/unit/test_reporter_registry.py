"""Tests for expectly.reports.registry."""

import logging

import pytest

from expectly.errors import ConfigError
from expectly.reports import ConsoleReporter, LoggingReporter, registry
from expectly.reports.registry import build_reporters, register_reporter, registered_reporters, reporter_class


@pytest.fixture(autouse=True)
def restore_registry(monkeypatch):
    monkeypatch.setattr(registry, "_registry", dict(registry._registry))


class CountingReporter:
    """Counts what it is told; ``prefix`` arrives through reporter options."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self.failures = 0

    def on_failure(self, failure) -> None:
        self.failures += 1

    def on_test_complete(self, ctx) -> None:
        pass


class HalfReporter:
    def on_failure(self, failure) -> None:
        pass


class TestRegisterReporter:
    def test_builtins_are_registered(self):
        assert registered_reporters()["ConsoleReporter"] is ConsoleReporter
        assert registered_reporters()["LoggingReporter"] is LoggingReporter

    def test_registers_under_class_name(self):
        register_reporter(CountingReporter)

        assert reporter_class("CountingReporter") is CountingReporter

    def test_registers_under_custom_name(self):
        decorated = register_reporter(name="counting")(CountingReporter)

        assert decorated is CountingReporter
        assert reporter_class("counting") is CountingReporter
        assert "CountingReporter" not in registered_reporters()

    def test_rejects_class_missing_a_hook(self):
        with pytest.raises(TypeError, match="on_test_complete"):
            register_reporter(HalfReporter)

    def test_registered_reporters_is_a_copy(self):
        registered_reporters()["Bogus"] = CountingReporter

        assert "Bogus" not in registered_reporters()


class TestReporterClass:
    @pytest.mark.parametrize(
        "path",
        ["expectly.reports.log:LoggingReporter", "expectly.reports.log.LoggingReporter"],
    )
    def test_import_strings(self, path):
        assert reporter_class(path) is LoggingReporter

    def test_unknown_name_lists_available_reporters(self):
        with pytest.raises(ConfigError, match="Unknown reporter: Nope. Available: ConsoleReporter, LoggingReporter"):
            reporter_class("Nope")

    def test_missing_module(self):
        with pytest.raises(ConfigError) as exc_info:
            reporter_class("no_such_module_for_expectly:Reporter")

        assert isinstance(exc_info.value.cause, ImportError)

    def test_missing_attribute(self):
        with pytest.raises(ConfigError):
            reporter_class("expectly.reports.log:NoSuchReporter")

    def test_import_must_name_a_failure_reporter(self):
        with pytest.raises(ConfigError, match="does not implement"):
            reporter_class(f"{__name__}:HalfReporter")

        with pytest.raises(ConfigError, match="does not implement"):
            reporter_class("expectly.reports.console:render_failures")


class TestBuildReporters:
    def test_builds_one_instance_per_name(self):
        register_reporter(CountingReporter)

        first, second = build_reporters(["CountingReporter", "LoggingReporter"])

        assert isinstance(first, CountingReporter)
        assert isinstance(second, LoggingReporter)
        assert build_reporters(["CountingReporter"])[0] is not first

    def test_passes_options_to_constructor(self):
        register_reporter(CountingReporter)

        (reporter,) = build_reporters(["CountingReporter"], {"CountingReporter": {"prefix": "ci"}})

        assert reporter.prefix == "ci"

    def test_logging_reporter_level_by_name(self):
        (reporter,) = build_reporters(["LoggingReporter"], {"LoggingReporter": {"level": "warning"}})

        assert reporter.level == logging.WARNING

    def test_bad_options_are_config_errors(self):
        with pytest.raises(ConfigError, match="reporter_options for 'LoggingReporter'"):
            build_reporters(["LoggingReporter"], {"LoggingReporter": {"colour": "red"}})

        with pytest.raises(ConfigError, match="Unknown logging level"):
            build_reporters(["LoggingReporter"], {"LoggingReporter": {"level": "LOUD"}})

    def test_empty(self):
        assert build_reporters([]) == []
