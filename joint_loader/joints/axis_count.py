"""Configured axis count and joint index validation."""

from __future__ import annotations

import logging

from joint_loader.configs.source import (
    ConfigSource,
    IndexOutOfRange,
    MissingRequiredKey,
    ValueKind,
)
from joint_loader.configs.trajectory import TRAJ_SECTION

logger = logging.getLogger(__name__)

AXES_KEY = "AXES"


def resolve_axis_count(source: ConfigSource) -> int:
    """Read ``AXES`` from the ``[TRAJ]`` section.

    There is no default: an absent key raises ``MissingRequiredKey`` and a
    non-integer raises ``MalformedValue``.
    """
    axes = source.find(AXES_KEY, TRAJ_SECTION, ValueKind.INT)
    if axes is None:
        raise MissingRequiredKey(AXES_KEY, TRAJ_SECTION)
    return axes


def check_joint_index(joint: int, axis_count: int) -> None:
    """Raise ``IndexOutOfRange`` unless ``0 <= joint < axis_count``."""
    if not 0 <= joint < axis_count:
        raise IndexOutOfRange(
            f"joint {joint} outside configured axes [0, {axis_count})"
        )
