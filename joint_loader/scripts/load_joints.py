#!/usr/bin/env python3
"""Dry-run joint loading against the simulated controller.

Loads every joint (or a single one) from a machine config, printing one
line per joint.  Useful to check a config edit before starting the machine.

Usage::

    python -m joint_loader.scripts.load_joints
    python -m joint_loader.scripts.load_joints --config /path/machine.yaml
    python -m joint_loader.scripts.load_joints --joint 2 --log-level DEBUG
    python -m joint_loader.scripts.load_joints --keep-going --dump resolved.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from joint_loader.configs.ini_format import BACKUP_SUFFIX
from joint_loader.configs.source import ConfigError, ConfigSource
from joint_loader.configs.trajectory import TrajectoryContext
from joint_loader.hardware.simulated import SimulatedController
from joint_loader.joints.loader import ini_joint, load_all_joints
from joint_loader.joints.naming import joint_section
from joint_loader.utils import fs
from joint_loader.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "machine.yaml"


def _summary_line(joint: int, ok: bool, controller: SimulatedController) -> str:
    if not ok:
        label = joint_section(joint) if joint >= 0 else f"joint {joint}"
        return f"[FAIL] {label}: not activated"
    state = controller.joint(joint)
    comp = (
        f", comp={len(state.compensation)} pts"
        if state.compensation is not None
        else ""
    )
    return (
        f"[OK]   {joint_section(joint)}: {state.joint_type.name.lower()}, "
        f"units={state.units:g}, vmax={state.max_velocity:g}, "
        f"amax={state.max_acceleration:g}{comp}"
    )


def _dump_states(path: Path, controller: SimulatedController) -> None:
    """Write the controller's accepted joint values as YAML."""
    out = {}
    for joint, state in sorted(controller.joints.items()):
        out[joint_section(joint)] = {
            "TYPE": state.joint_type.name if state.joint_type else None,
            "UNITS": state.units,
            "BACKLASH": state.backlash,
            "MIN_LIMIT": state.min_limit,
            "MAX_LIMIT": state.max_limit,
            "FERROR": state.ferror,
            "MIN_FERROR": state.min_ferror,
            "MAX_VELOCITY": state.max_velocity,
            "MAX_ACCELERATION": state.max_acceleration,
            "ACTIVE": state.active,
        }
    backup = fs.backup_file(path, BACKUP_SUFFIX)
    if backup is not None:
        logger.info("Previous dump saved to %s", backup)
    fs.atomic_yaml_dump(out, path)
    logger.info("Wrote %s", path)


def run(
    config_path: str | Path,
    joint: int | None = None,
    keep_going: bool = False,
    dump: str | Path | None = None,
) -> bool:
    """Load joints into a fresh ``SimulatedController``.

    Returns ``True`` if every requested joint was activated.
    """
    source = ConfigSource()
    if not source.open(config_path):
        print(f"[FAIL] Cannot open {config_path}")
        return False
    try:
        context = TrajectoryContext.from_source(source)
    except ConfigError as exc:
        print(f"[FAIL] {exc}")
        return False

    controller = SimulatedController(
        linear_units=context.linear_units,
        angular_units=context.angular_units,
    )

    if joint is None:
        results = load_all_joints(
            config_path, controller, context, keep_going=keep_going,
        )
    else:
        results = {joint: ini_joint(joint, config_path, controller, context)}

    if not results:
        print(f"[FAIL] No joints loaded from {config_path}")
        return False

    for index, ok in results.items():
        print(_summary_line(index, ok, controller))

    if dump is not None:
        _dump_states(Path(dump), controller)

    return all(results.values())


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Load joint parameters into a simulated controller",
    )
    parser.add_argument(
        "--config", type=str, default=str(DEFAULT_CONFIG),
        help="Machine config YAML (default: bundled machine.yaml)",
    )
    parser.add_argument(
        "--joint", type=int, default=None,
        help="Load only this joint index",
    )
    parser.add_argument(
        "--keep-going", action="store_true",
        help="Continue with later joints after a failure",
    )
    parser.add_argument(
        "--dump", type=str, default=None,
        help="Write the accepted joint values to this YAML file",
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit JSON log lines",
    )
    args = parser.parse_args()

    setup_logging(
        log_level=args.log_level,
        json=args.json_logs,
        context={"app": "load_joints"},
    )

    ok = run(args.config, args.joint, args.keep_going, args.dump)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
