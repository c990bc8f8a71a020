"""Section-keyed configuration store backed by YAML.

The file's top level maps section names to flat ``KEY: value`` mappings::

    TRAJ:
      AXES: 3
      LINEAR_UNITS: mm
    JOINT_0:
      TYPE: LINEAR
      MAX_VELOCITY: 25.0

Lookups distinguish *absent* (``find`` returns ``None``) from *present but
unconvertible* (``MalformedValue`` is raised).  Callers supply the default
for an absent key; a malformed value never falls back to one.

Usage::

    source = ConfigSource()
    if not source.open("machine.yaml"):
        ...
    axes = source.find("AXES", "TRAJ", ValueKind.INT)
"""

from __future__ import annotations

import logging
import math
from enum import Enum, auto
from pathlib import Path
from typing import Any, Mapping, TypeVar

import yaml

from joint_loader.configs.units import (
    ANGULAR_UNITS,
    LINEAR_UNITS,
    UnitError,
    parse_unit_value,
)
from joint_loader.utils.fs import load_yaml

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_WORDS = frozenset({"TRUE", "YES", "ON", "1"})
_FALSE_WORDS = frozenset({"FALSE", "NO", "OFF", "0"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base class for configuration lookup failures."""

    pass


class SourceUnavailable(ConfigError):
    """The config source could not be opened or was never opened."""

    pass


class MissingRequiredKey(ConfigError):
    """A key that has no sane default is absent."""

    def __init__(self, key: str, section: str) -> None:
        super().__init__(f"[{section}] {key} is required but not set")
        self.key = key
        self.section = section


class MalformedValue(ConfigError):
    """A present value could not be converted to the requested type."""

    def __init__(
        self, key: str, section: str, raw: Any, expected: str,
    ) -> None:
        super().__init__(
            f"[{section}] {key} = {raw!r} is not a valid {expected}"
        )
        self.key = key
        self.section = section
        self.raw = raw
        self.expected = expected


class IndexOutOfRange(ConfigError):
    """A requested joint index lies outside the configured axis count."""

    pass


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class ValueKind(Enum):
    """Target type of a ``ConfigSource.find`` lookup."""

    STRING = auto()
    INT = auto()
    FLOAT = auto()
    BOOL = auto()
    LINEAR_UNITS = auto()
    ANGULAR_UNITS = auto()


def _to_string(raw: Any) -> str:
    if isinstance(raw, (dict, list)):
        raise ValueError("not a scalar")
    return str(raw)


def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError("fractional value")
        return int(raw)
    if isinstance(raw, str):
        return int(raw.strip(), 10)
    raise ValueError("unsupported type")


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("boolean is not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        value = float(raw.strip())
    else:
        raise ValueError("unsupported type")
    if not math.isfinite(value):
        raise ValueError("value is not finite")
    return value


def _to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        word = raw.strip().upper()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError("not a boolean")


_CONVERTERS = {
    ValueKind.STRING: _to_string,
    ValueKind.INT: _to_int,
    ValueKind.FLOAT: _to_float,
    ValueKind.BOOL: _to_bool,
    ValueKind.LINEAR_UNITS: lambda raw: parse_unit_value(raw, LINEAR_UNITS),
    ValueKind.ANGULAR_UNITS: lambda raw: parse_unit_value(raw, ANGULAR_UNITS),
}


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class ConfigSource:
    """Read-only section/key lookup over a YAML document.

    A fresh instance is closed; call ``open()`` or build one with
    ``from_mapping()``.
    """

    def __init__(self) -> None:
        self._sections: dict[str, dict[str, Any]] | None = None
        self.path: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> ConfigSource:
        """Build an open source from an in-memory ``{section: {key: value}}``."""
        source = cls()
        source._sections = _validate_layout(data, "<mapping>")
        return source

    @property
    def is_open(self) -> bool:
        return self._sections is not None

    def open(self, path: str | Path) -> bool:
        """Load *path*.  Returns ``False`` (and logs why) on any failure."""
        path = Path(path)
        try:
            data = load_yaml(path)
            sections = _validate_layout(data, str(path))
        except FileNotFoundError:
            logger.error("Config file not found: %s", path)
            return False
        except (OSError, yaml.YAMLError, SourceUnavailable) as exc:
            logger.error("Cannot read config file %s: %s", path, exc)
            return False

        self._sections = sections
        self.path = path
        logger.debug("Opened config %s (%d sections)", path, len(sections))
        return True

    def close(self) -> None:
        self._sections = None

    def sections(self) -> list[str]:
        return list(self._require_open())

    def find(
        self,
        key: str,
        section: str,
        kind: ValueKind = ValueKind.STRING,
    ) -> Any | None:
        """Look up *key* in *section* and convert it to *kind*.

        Returns
        -------
        Any | None
            The converted value, or ``None`` when the section or key is
            absent (or the value is empty / YAML null).

        Raises
        ------
        SourceUnavailable
            If the source is not open.
        MalformedValue
            If the value is present but cannot be converted.
        """
        raw = self._raw(key, section)
        if raw is None:
            return None
        try:
            return _CONVERTERS[kind](raw)
        except (ValueError, UnitError):
            raise MalformedValue(
                key, section, raw, kind.name.lower().replace("_", " "),
            ) from None

    def find_choice(
        self, key: str, section: str, choices: Mapping[str, T],
    ) -> T | None:
        """Look up *key* and map it through *choices* (case-insensitive)."""
        raw = self._raw(key, section)
        if raw is None:
            return None
        if isinstance(raw, (dict, list, bool)):
            raise MalformedValue(key, section, raw, "choice")
        word = str(raw).strip().upper()
        for name, value in choices.items():
            if name.upper() == word:
                return value
        raise MalformedValue(
            key, section, raw, "one of " + "/".join(choices),
        )

    # ------------------------------------------------------------------

    def _require_open(self) -> dict[str, dict[str, Any]]:
        if self._sections is None:
            raise SourceUnavailable("config source is not open")
        return self._sections

    def _raw(self, key: str, section: str) -> Any | None:
        values = self._require_open().get(section)
        if values is None:
            return None
        raw = values.get(key)
        if isinstance(raw, str) and not raw.strip():
            return None
        return raw


def _validate_layout(data: Any, origin: str) -> dict[str, dict[str, Any]]:
    """Check the document is a mapping of section mappings."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise SourceUnavailable(
            f"{origin}: top level must be a mapping of sections"
        )
    sections: dict[str, dict[str, Any]] = {}
    for name, values in data.items():
        if values is None:
            values = {}
        if not isinstance(values, Mapping):
            raise SourceUnavailable(
                f"{origin}: section '{name}' must be a mapping"
            )
        sections[str(name)] = {str(k): v for k, v in values.items()}
    return sections
