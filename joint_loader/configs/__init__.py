"""Config store access, unit tables, trajectory defaults and write-back formatting."""

from joint_loader.configs.ini_format import (
    build_float2_format,
    build_float_format,
    format_float_entry,
    infer_precision,
)
from joint_loader.configs.source import (
    ConfigError,
    ConfigSource,
    IndexOutOfRange,
    MalformedValue,
    MissingRequiredKey,
    SourceUnavailable,
    ValueKind,
)
from joint_loader.configs.trajectory import TrajectoryContext

__all__ = [
    "ConfigError",
    "ConfigSource",
    "IndexOutOfRange",
    "MalformedValue",
    "MissingRequiredKey",
    "SourceUnavailable",
    "TrajectoryContext",
    "ValueKind",
    "build_float2_format",
    "build_float_format",
    "format_float_entry",
    "infer_precision",
]
