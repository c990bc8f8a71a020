"""In-memory motion controller.

Stands in for the real-time controller during startup dry runs and tests.
It validates each value the way the controller would, keeps a per-joint
state table, and records every accepted or rejected call in order.

Fault injection::

    ctrl = SimulatedController(fail_on={"set_max_velocity"})
    ctrl.set_max_velocity(0, 10.0)   # raises ControllerRejected
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from joint_loader.hardware.compensation import (
    CompensationError,
    CompensationTable,
    load_compensation_table,
)
from joint_loader.hardware.controller import ControllerRejected, MotionController
from joint_loader.params import HomingParams, JointType

logger = logging.getLogger(__name__)

DEFAULT_MAX_JOINTS = 16


@dataclass
class JointState:
    """Live controller state for one joint."""

    joint_type: JointType | None = None
    units: float | None = None
    backlash: float | None = None
    min_limit: float | None = None
    max_limit: float | None = None
    ferror: float | None = None
    min_ferror: float | None = None
    homing: HomingParams | None = None
    max_velocity: float | None = None
    max_acceleration: float | None = None
    compensation: CompensationTable | None = None
    active: bool = False


@dataclass(frozen=True)
class ControllerCall:
    """One recorded setter invocation."""

    method: str
    joint: int
    args: tuple[Any, ...] = ()
    accepted: bool = True


class SimulatedController(MotionController):
    """Validating in-memory ``MotionController``.

    Parameters
    ----------
    linear_units : float
        Trajectory linear units reported to the loader.
    angular_units : float
        Trajectory angular units reported to the loader.
    max_joints : int
        Number of joint slots; indices outside ``[0, max_joints)`` are
        rejected.
    fail_on : Iterable[str]
        Setter names that always reject (fault injection).
    """

    def __init__(
        self,
        linear_units: float = 1.0,
        angular_units: float = 1.0,
        max_joints: int = DEFAULT_MAX_JOINTS,
        fail_on: Iterable[str] = (),
    ) -> None:
        self._linear_units = linear_units
        self._angular_units = angular_units
        self.max_joints = max_joints
        self.fail_on = set(fail_on)
        self.joints: dict[int, JointState] = {}
        self.calls: list[ControllerCall] = []

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def joint(self, joint: int) -> JointState:
        """State for *joint* (a blank state if it was never touched)."""
        return self.joints.get(joint, JointState())

    def calls_for(self, joint: int) -> list[ControllerCall]:
        return [c for c in self.calls if c.joint == joint]

    def call_names(self, joint: int | None = None) -> list[str]:
        return [
            c.method for c in self.calls
            if joint is None or c.joint == joint
        ]

    # ------------------------------------------------------------------
    # Trajectory settings
    # ------------------------------------------------------------------

    def linear_units(self) -> float:
        return self._linear_units

    def angular_units(self) -> float:
        return self._angular_units

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_joint_type(self, joint: int, joint_type: JointType) -> None:
        state = self._begin("set_joint_type", joint, joint_type)
        state.joint_type = joint_type

    def set_units(self, joint: int, units: float) -> None:
        state = self._begin("set_units", joint, units)
        self._check(units > 0, "set_units", joint, f"units must be > 0, got {units}")
        state.units = units

    def set_backlash(self, joint: int, backlash: float) -> None:
        state = self._begin("set_backlash", joint, backlash)
        self._check(
            backlash >= 0, "set_backlash", joint,
            f"backlash must be >= 0, got {backlash}",
        )
        state.backlash = backlash

    # The limits are independent setters; their ordering is checked when
    # the joint is activated.
    def set_min_limit(self, joint: int, limit: float) -> None:
        state = self._begin("set_min_limit", joint, limit)
        state.min_limit = limit

    def set_max_limit(self, joint: int, limit: float) -> None:
        state = self._begin("set_max_limit", joint, limit)
        state.max_limit = limit

    def set_ferror(self, joint: int, ferror: float) -> None:
        state = self._begin("set_ferror", joint, ferror)
        self._check(ferror >= 0, "set_ferror", joint, f"ferror must be >= 0, got {ferror}")
        state.ferror = ferror

    def set_min_ferror(self, joint: int, ferror: float) -> None:
        state = self._begin("set_min_ferror", joint, ferror)
        self._check(
            ferror >= 0, "set_min_ferror", joint,
            f"min ferror must be >= 0, got {ferror}",
        )
        state.min_ferror = ferror

    def set_homing_params(self, joint: int, homing: HomingParams) -> None:
        state = self._begin("set_homing_params", joint, homing)
        state.homing = homing

    def set_max_velocity(self, joint: int, velocity: float) -> None:
        state = self._begin("set_max_velocity", joint, velocity)
        self._check(
            velocity > 0, "set_max_velocity", joint,
            f"max velocity must be > 0, got {velocity}",
        )
        state.max_velocity = velocity

    def set_max_acceleration(self, joint: int, acceleration: float) -> None:
        state = self._begin("set_max_acceleration", joint, acceleration)
        self._check(
            acceleration > 0, "set_max_acceleration", joint,
            f"max acceleration must be > 0, got {acceleration}",
        )
        state.max_acceleration = acceleration

    def load_compensation_file(
        self, joint: int, path: str | Path, file_type: int,
    ) -> None:
        state = self._begin("load_compensation_file", joint, str(path), file_type)
        try:
            table = load_compensation_table(path, file_type)
        except CompensationError as exc:
            raise self._rejection(
                "load_compensation_file", joint, str(exc),
            ) from exc
        state.compensation = table
        logger.debug("Joint %d: %d compensation points", joint, len(table))

    def activate_joint(self, joint: int) -> None:
        state = self._begin("activate_joint", joint)
        self._check(
            state.min_limit is None
            or state.max_limit is None
            or state.min_limit <= state.max_limit,
            "activate_joint", joint,
            f"min limit {state.min_limit} above max limit {state.max_limit}",
        )
        state.active = True
        logger.debug("Joint %d activated", joint)

    def deactivate_joint(self, joint: int) -> None:
        state = self._begin("deactivate_joint", joint)
        state.active = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _begin(self, method: str, joint: int, *args: Any) -> JointState:
        """Record the call, run common checks, return the joint's state."""
        self.calls.append(ControllerCall(method, joint, args))
        if not 0 <= joint < self.max_joints:
            raise self._rejection(
                method, joint,
                f"joint index outside [0, {self.max_joints})",
            )
        if method in self.fail_on:
            raise self._rejection(method, joint, "fault injected")
        return self.joints.setdefault(joint, JointState())

    def _check(self, ok: bool, method: str, joint: int, reason: str) -> None:
        if not ok:
            raise self._rejection(method, joint, reason)

    def _rejection(
        self, method: str, joint: int, reason: str,
    ) -> ControllerRejected:
        """Mark the last recorded call as refused and build the error."""
        last = self.calls[-1]
        self.calls[-1] = ControllerCall(last.method, last.joint, last.args, False)
        return ControllerRejected(method, joint, reason)
