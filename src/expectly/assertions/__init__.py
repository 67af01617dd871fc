"""Expectation primitives and the fluent chain built on them."""

from .capture import capture_raise
from .chain import Expectation, Nilable
from .compare import deep_equal
from .describe import describe
from .polling import PollingScheduler, PollOutcome, PollState
from .result import ExpectationFailure

__all__ = [
    "Expectation",
    "ExpectationFailure",
    "Nilable",
    "PollOutcome",
    "PollState",
    "PollingScheduler",
    "capture_raise",
    "deep_equal",
    "describe",
]
