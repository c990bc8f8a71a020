"""Config section names for joints.

Joint *n* reads its parameters from section ``JOINT_<n>``::

    joint_section(0) -> "JOINT_0"
    joint_section(5) -> "JOINT_5"

The scheme is fixed; config files must use it exactly.
"""

from __future__ import annotations

JOINT_SECTION_PREFIX = "JOINT_"


def joint_section(joint: int) -> str:
    """Section name holding the parameters of *joint*."""
    if joint < 0:
        raise ValueError(f"joint index must be >= 0, got {joint}")
    return f"{JOINT_SECTION_PREFIX}{joint}"
