"""
Motion-controller module.

Provides the controller command interface the joint loader drives, an
in-memory validating controller, and the compensation-table reader.
"""

from joint_loader.hardware.compensation import (
    CompensationError,
    CompensationTable,
    load_compensation_table,
)
from joint_loader.hardware.controller import (
    ControllerError,
    ControllerRejected,
    MotionController,
)
from joint_loader.hardware.simulated import JointState, SimulatedController

__all__ = [
    "CompensationError",
    "CompensationTable",
    "ControllerError",
    "ControllerRejected",
    "JointState",
    "MotionController",
    "SimulatedController",
    "load_compensation_table",
]
