"""Reporter lookup for the names listed in ``[tool.expectly] reporters``.

A name is either registered here (the built-ins register themselves when
:mod:`expectly.reports` is imported) or an import string such as
``"myproject.testing:SlackReporter"``. Constructor arguments come from
``[tool.expectly.reporter_options.<name>]``.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from expectly.errors import ConfigError
from expectly.reports.base import FailureReporter

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=type)

_registry: dict[str, type[FailureReporter]] = {}


def register_reporter(cls: R | None = None, *, name: str | None = None) -> Any:
    """Make a reporter class available by name (default: the class name).

    Works as a plain decorator or with a custom name::

        @register_reporter
        class JUnitReporter: ...

        @register_reporter(name="junit")
        class JUnitReporter: ...
    """

    def decorator(cls: R) -> R:
        if not issubclass(cls, FailureReporter):
            raise TypeError(f"{cls.__qualname__} must define on_failure() and on_test_complete()")
        _registry[name or cls.__name__] = cls
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


def registered_reporters() -> dict[str, type[FailureReporter]]:
    """Copy of the name to class mapping."""
    return dict(_registry)


def _import_class(path: str) -> Any:
    module_path, sep, class_name = path.partition(":")
    if not sep:
        module_path, _, class_name = path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(f"Invalid import path: {path}")
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def reporter_class(name: str) -> type[FailureReporter]:
    """Look ``name`` up in the registry, falling back to an import string.

    Raises:
        ConfigError: If the name is unknown, cannot be imported, or does not
            name a :class:`FailureReporter`.
    """
    if name in _registry:
        return _registry[name]

    if ":" not in name and "." not in name:
        available = ", ".join(sorted(_registry))
        raise ConfigError(f"reporters entry {name!r}", ValueError(f"Unknown reporter: {name}. Available: {available}"))

    try:
        cls = _import_class(name)
    except (ImportError, AttributeError, ValueError) as e:
        raise ConfigError(f"reporters entry {name!r}", e) from e

    if not isinstance(cls, type) or not issubclass(cls, FailureReporter):
        raise ConfigError(
            f"reporters entry {name!r}",
            TypeError(f"{name} does not implement on_failure() and on_test_complete()"),
        )
    return cls


def build_reporters(
    names: list[str],
    options: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[FailureReporter]:
    """Instantiate one reporter per name, passing its configured options."""
    options = options or {}
    reporters = []
    for name in names:
        kwargs = dict(options.get(name, {}))
        logger.debug("Building reporter %s with options %s", name, sorted(kwargs))
        cls = reporter_class(name)
        try:
            reporters.append(cls(**kwargs))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"reporter_options for {name!r}", e) from e
    return reporters


__all__ = ["build_reporters", "register_reporter", "registered_reporters", "reporter_class"]
