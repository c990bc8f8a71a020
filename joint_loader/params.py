"""Joint parameter types.

``JointConfig`` is the fully resolved parameter set for one joint.  It is
built by ``joints.loader.resolve_joint_config`` without touching the
controller, then pushed field by field by ``apply_joint_config``.  It is
never cached between loads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class JointType(Enum):
    """Kinematic type of a joint; selects the unit system."""

    LINEAR = 1
    ANGULAR = 2

    @classmethod
    def choices(cls) -> dict[str, JointType]:
        """Accepted ``TYPE`` spellings: names and numeric codes."""
        names = {member.name: member for member in cls}
        codes = {str(member.value): member for member in cls}
        return {**names, **codes}


@dataclass(frozen=True)
class HomingParams:
    """Homing parameters, always submitted as one ``set_homing_params`` call.

    Velocities are in machine units per second.  ``home_vel = -1`` means
    move from the offset to the home position at rapid speed.
    ``sequence = -1`` leaves the joint out of the homing sequence.
    """

    home: float = 0.0
    offset: float = 0.0
    search_vel: float = 0.0
    latch_vel: float = 0.0
    home_vel: float = -1.0
    is_shared: bool = False
    use_index: bool = False
    ignore_limits: bool = False
    sequence: int = -1
    volatile_home: int = 0


@dataclass(frozen=True)
class JointConfig:
    """Resolved parameters for one joint.

    Soft limits default to +/-1e99 (effectively unbounded).
    ``min_ferror`` defaults to ``ferror`` rather than a literal.
    ``comp_file`` is ``None`` when no compensation table is configured,
    in which case ``comp_file_type`` is resolved but never applied.
    """

    joint_type: JointType
    units: float
    backlash: float = 0.0
    min_limit: float = -1e99
    max_limit: float = 1e99
    ferror: float = 1.0
    min_ferror: float = 1.0
    homing: HomingParams = field(default_factory=HomingParams)
    max_velocity: float = 1.0
    max_acceleration: float = 1.0
    comp_file_type: int = 0
    comp_file: str | None = None
