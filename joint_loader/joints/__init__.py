"""Per-joint parameter loading: axis count, section naming, resolve/apply."""

from joint_loader.joints.axis_count import check_joint_index, resolve_axis_count
from joint_loader.joints.loader import (
    apply_joint_config,
    ini_joint,
    load_all_joints,
    load_joint_config,
    resolve_joint_config,
)
from joint_loader.joints.naming import joint_section

__all__ = [
    "apply_joint_config",
    "check_joint_index",
    "ini_joint",
    "joint_section",
    "load_all_joints",
    "load_joint_config",
    "resolve_axis_count",
    "resolve_joint_config",
]
