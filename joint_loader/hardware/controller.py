"""Motion-controller command interface.

``MotionController`` lists every joint setter the loader drives.  Each
setter returns ``None`` on success and raises ``ControllerRejected`` when
the controller refuses the value; the loader never inspects return values.

Implementations:
    - ``SimulatedController`` (in-memory, used by the CLI and tests)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from joint_loader.params import HomingParams, JointType


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ControllerError(Exception):
    """Base exception for all controller errors."""

    pass


class ControllerRejected(ControllerError):
    """The controller refused a setter call."""

    def __init__(self, method: str, joint: int, reason: str) -> None:
        super().__init__(f"{method}(joint={joint}) rejected: {reason}")
        self.method = method
        self.joint = joint
        self.reason = reason


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class MotionController(ABC):
    """Joint configuration surface of a motion controller."""

    # -- Trajectory-level settings ------------------------------------------

    @abstractmethod
    def linear_units(self) -> float:
        """Current trajectory linear units."""

    @abstractmethod
    def angular_units(self) -> float:
        """Current trajectory angular units."""

    # -- Joint setters ------------------------------------------------------

    @abstractmethod
    def set_joint_type(self, joint: int, joint_type: JointType) -> None: ...

    @abstractmethod
    def set_units(self, joint: int, units: float) -> None: ...

    @abstractmethod
    def set_backlash(self, joint: int, backlash: float) -> None: ...

    @abstractmethod
    def set_min_limit(self, joint: int, limit: float) -> None: ...

    @abstractmethod
    def set_max_limit(self, joint: int, limit: float) -> None: ...

    @abstractmethod
    def set_ferror(self, joint: int, ferror: float) -> None: ...

    @abstractmethod
    def set_min_ferror(self, joint: int, ferror: float) -> None: ...

    @abstractmethod
    def set_homing_params(self, joint: int, homing: HomingParams) -> None: ...

    @abstractmethod
    def set_max_velocity(self, joint: int, velocity: float) -> None: ...

    @abstractmethod
    def set_max_acceleration(self, joint: int, acceleration: float) -> None: ...

    @abstractmethod
    def load_compensation_file(
        self, joint: int, path: str | Path, file_type: int,
    ) -> None:
        """Load a joint compensation table (see ``hardware.compensation``)."""

    @abstractmethod
    def activate_joint(self, joint: int) -> None: ...

    @abstractmethod
    def deactivate_joint(self, joint: int) -> None: ...
