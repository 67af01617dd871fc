"""Reporting module for expectation failures."""

from expectly.reports.base import FailureReporter
from expectly.reports.console import ConsoleReporter, render_failures
from expectly.reports.log import LoggingReporter
from expectly.reports.registry import build_reporters, register_reporter, registered_reporters, reporter_class


register_reporter(ConsoleReporter)
register_reporter(LoggingReporter)

__all__ = [
    "ConsoleReporter",
    "FailureReporter",
    "LoggingReporter",
    "build_reporters",
    "register_reporter",
    "registered_reporters",
    "render_failures",
    "reporter_class",
]
