"""Configuration for expectly.

Settings are read from the ``[tool.expectly]`` table of the nearest
``pyproject.toml`` and can be overridden per process with ``EXPECTLY_*``
environment variables, either exported or listed in a ``.env`` file next to
that ``pyproject.toml`` (exported variables win)::

    [tool.expectly]
    poll_timeout = 5.0
    poll_interval = 0.05
    reporters = ["LoggingReporter"]
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from expectly.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = DEFAULT_POLL_TIMEOUT / 300

ENV_PREFIX = "EXPECTLY_"
_FILE_ONLY_FIELDS = frozenset({"reporter_options"})


class ExpectConfig(BaseModel):
    """Resolved expectly settings.

    Attributes:
    ----------
    poll_timeout: float
        Seconds ``eventually_equals`` keeps polling before giving up.
    poll_interval: float
        Seconds between two polls.
    restore_environment: bool
        Whether registering a test resets environment variables to the
        baseline captured at the first registration.
    max_description_length: int | None
        Truncate rendered values in diagnostics to this many characters.
    reporters: list[str]
        Reporter names or import strings that receive every failure.
    reporter_options: dict[str, dict[str, Any]]
        Constructor arguments per reporter name, from
        ``[tool.expectly.reporter_options.<name>]``. File only.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    poll_timeout: float = Field(default=DEFAULT_POLL_TIMEOUT, ge=0)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    restore_environment: bool = True
    max_description_length: int | None = Field(default=None, ge=4)
    reporters: list[str] = Field(default_factory=list)
    reporter_options: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _interval_within_timeout(self) -> ExpectConfig:
        if self.poll_timeout and self.poll_interval > self.poll_timeout:
            raise ValueError(
                f"poll_interval ({self.poll_interval}) cannot exceed poll_timeout ({self.poll_timeout})"
            )
        return self

    @model_validator(mode="after")
    def _options_for_listed_reporters(self) -> ExpectConfig:
        unknown = sorted(set(self.reporter_options) - set(self.reporters))
        if unknown:
            raise ValueError(f"reporter_options given for reporters not listed in reporters: {unknown}")
        return self


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: cwd) to the nearest pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _read_tool_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(path), e) from e
    return dict(data.get("tool", {}).get("expectly", {}))


def _read_dotenv(directory: Path) -> dict[str, str]:
    path = directory / ".env"
    if not path.is_file():
        return {}
    values = dotenv_values(path)
    return {key: value for key, value in values.items() if key.startswith(ENV_PREFIX) and value is not None}


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in ExpectConfig.model_fields:
        if name in _FILE_ONLY_FIELDS:
            continue
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        if name == "reporters":
            overrides[name] = [part.strip() for part in raw.split(",") if part.strip()]
        else:
            overrides[name] = raw
    return overrides


def load_config(
    start: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ExpectConfig:
    """Load configuration from pyproject.toml plus environment overrides.

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid.
    """
    values: dict[str, Any] = {}
    source = "defaults"

    pyproject = find_pyproject(start)
    if pyproject is not None:
        values.update(_read_tool_table(pyproject))
        source = str(pyproject)

    project_dir = pyproject.parent if pyproject is not None else (start or Path.cwd())
    merged_environ = {**_read_dotenv(project_dir), **(os.environ if environ is None else environ)}
    overrides = _env_overrides(merged_environ)
    if overrides:
        logger.debug("Applying environment overrides: %s", sorted(overrides))
        values.update(overrides)
        source = f"{source} (with {ENV_PREFIX}* overrides)"

    try:
        return ExpectConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigError(source, e) from e


__all__ = ["DEFAULT_POLL_INTERVAL", "DEFAULT_POLL_TIMEOUT", "ExpectConfig", "find_pyproject", "load_config"]
