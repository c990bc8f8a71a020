"""Trajectory-level defaults consumed by the joint loader.

The joint loader never reads process-wide state directly: the current
linear/angular units and the machine-wide velocity/acceleration fallbacks
are captured once, before a joint is loaded, in a ``TrajectoryContext``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from joint_loader.configs.source import ConfigSource, ValueKind

if TYPE_CHECKING:
    from joint_loader.hardware.controller import MotionController

logger = logging.getLogger(__name__)

TRAJ_SECTION = "TRAJ"

# Machine-wide fallbacks when a joint sets neither MAX_VELOCITY nor
# MAX_ACCELERATION (machine units per second, per second squared).
DEFAULT_JOINT_MAX_VELOCITY = 1.0
DEFAULT_JOINT_MAX_ACCELERATION = 1.0


@dataclass(frozen=True)
class TrajectoryContext:
    """Snapshot of the trajectory-level values a joint load depends on.

    Parameters
    ----------
    linear_units : float
        Default ``UNITS`` for linear joints.
    angular_units : float
        Default ``UNITS`` for angular joints.
    default_max_velocity : float
        Fallback for a joint without ``MAX_VELOCITY``.
    default_max_acceleration : float
        Fallback for a joint without ``MAX_ACCELERATION``.
    """

    linear_units: float = 1.0
    angular_units: float = 1.0
    default_max_velocity: float = DEFAULT_JOINT_MAX_VELOCITY
    default_max_acceleration: float = DEFAULT_JOINT_MAX_ACCELERATION

    @classmethod
    def from_source(cls, source: ConfigSource) -> TrajectoryContext:
        """Read the ``[TRAJ]`` unit and limit defaults from *source*.

        Absent keys keep the class defaults; malformed ones raise
        ``MalformedValue``.
        """
        base = cls()
        linear = source.find("LINEAR_UNITS", TRAJ_SECTION, ValueKind.LINEAR_UNITS)
        angular = source.find("ANGULAR_UNITS", TRAJ_SECTION, ValueKind.ANGULAR_UNITS)
        max_vel = source.find(
            "DEFAULT_JOINT_MAX_VELOCITY", TRAJ_SECTION, ValueKind.FLOAT,
        )
        max_acc = source.find(
            "DEFAULT_JOINT_MAX_ACCELERATION", TRAJ_SECTION, ValueKind.FLOAT,
        )
        ctx = cls(
            linear_units=base.linear_units if linear is None else linear,
            angular_units=base.angular_units if angular is None else angular,
            default_max_velocity=(
                base.default_max_velocity if max_vel is None else max_vel
            ),
            default_max_acceleration=(
                base.default_max_acceleration if max_acc is None else max_acc
            ),
        )
        logger.debug("Trajectory context from config: %s", ctx)
        return ctx

    @classmethod
    def from_controller(cls, controller: MotionController) -> TrajectoryContext:
        """Capture the controller's current trajectory unit settings."""
        return cls(
            linear_units=controller.linear_units(),
            angular_units=controller.angular_units(),
        )
