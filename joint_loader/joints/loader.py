"""Per-joint parameter resolution and activation.

Loading one joint happens in two passes:

Resolve (pure)
    Every parameter is read from section ``JOINT_<n>`` in a fixed order,
    falling back to its default when the key is absent.  The joint type is
    resolved first because the ``UNITS`` default and unit parsing depend on
    it; ``MIN_FERROR`` falls back to the resolved ``FERROR``.  A malformed
    value aborts the load before the controller is touched.

Apply
    The resolved ``JointConfig`` is pushed to the controller in the same
    order, homing parameters as a single call, the compensation table only
    if ``COMP_FILE`` is set.  The joint is activated last, and only if every
    earlier call succeeded.  A rejected call stops the pass; values already
    applied stay applied and the joint stays inactive.

``load_joint_config`` / ``ini_joint`` turn every failure into ``False``
after logging it; callers decide whether startup continues.

Usage::

    controller = SimulatedController()
    ok = ini_joint(0, "machine.yaml", controller)
"""

from __future__ import annotations

import logging
from pathlib import Path

from joint_loader.configs.source import (
    ConfigError,
    ConfigSource,
    IndexOutOfRange,
    SourceUnavailable,
    ValueKind,
)
from joint_loader.configs.trajectory import TrajectoryContext
from joint_loader.hardware.controller import ControllerError, MotionController
from joint_loader.joints.axis_count import check_joint_index, resolve_axis_count
from joint_loader.joints.naming import joint_section
from joint_loader.params import HomingParams, JointConfig, JointType
from joint_loader.utils.logging_config import log_context

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _resolve_homing(source: ConfigSource, section: str) -> HomingParams:
    """Resolve the ten homing fields independently, each with its default."""

    def find(key: str, kind: ValueKind, default):
        value = source.find(key, section, kind)
        return default if value is None else value

    base = HomingParams()
    return HomingParams(
        home=find("HOME", ValueKind.FLOAT, base.home),
        offset=find("HOME_OFFSET", ValueKind.FLOAT, base.offset),
        search_vel=find("HOME_SEARCH_VEL", ValueKind.FLOAT, base.search_vel),
        latch_vel=find("HOME_LATCH_VEL", ValueKind.FLOAT, base.latch_vel),
        home_vel=find("HOME_VEL", ValueKind.FLOAT, base.home_vel),
        is_shared=find("HOME_IS_SHARED", ValueKind.BOOL, base.is_shared),
        use_index=find("HOME_USE_INDEX", ValueKind.BOOL, base.use_index),
        ignore_limits=find(
            "HOME_IGNORE_LIMITS", ValueKind.BOOL, base.ignore_limits,
        ),
        sequence=find("HOME_SEQUENCE", ValueKind.INT, base.sequence),
        volatile_home=find("VOLATILE_HOME", ValueKind.INT, base.volatile_home),
    )


def resolve_joint_config(
    joint: int,
    source: ConfigSource,
    context: TrajectoryContext,
) -> JointConfig:
    """Resolve every parameter of *joint* without touching a controller.

    Parameters
    ----------
    joint : int
        Joint index (selects section ``JOINT_<joint>``).
    source : ConfigSource
        Open config source.
    context : TrajectoryContext
        Unit and limit defaults in force for this load.

    Returns
    -------
    JointConfig
        Fully resolved parameters.

    Raises
    ------
    MalformedValue
        If any present value cannot be converted.
    SourceUnavailable
        If *source* is not open.
    """
    section = joint_section(joint)

    def find(key: str, kind: ValueKind, default):
        value = source.find(key, section, kind)
        return default if value is None else value

    joint_type = source.find_choice("TYPE", section, JointType.choices())
    if joint_type is None:
        joint_type = JointType.LINEAR

    if joint_type is JointType.LINEAR:
        units = find("UNITS", ValueKind.LINEAR_UNITS, context.linear_units)
    else:
        units = find("UNITS", ValueKind.ANGULAR_UNITS, context.angular_units)

    backlash = find("BACKLASH", ValueKind.FLOAT, 0.0)
    min_limit = find("MIN_LIMIT", ValueKind.FLOAT, -1e99)
    max_limit = find("MAX_LIMIT", ValueKind.FLOAT, 1e99)
    ferror = find("FERROR", ValueKind.FLOAT, 1.0)
    min_ferror = find("MIN_FERROR", ValueKind.FLOAT, ferror)
    homing = _resolve_homing(source, section)
    max_velocity = find(
        "MAX_VELOCITY", ValueKind.FLOAT, context.default_max_velocity,
    )
    max_acceleration = find(
        "MAX_ACCELERATION", ValueKind.FLOAT, context.default_max_acceleration,
    )
    comp_file_type = find("COMP_FILE_TYPE", ValueKind.INT, 0)
    comp_file = source.find("COMP_FILE", section, ValueKind.STRING)

    return JointConfig(
        joint_type=joint_type,
        units=units,
        backlash=backlash,
        min_limit=min_limit,
        max_limit=max_limit,
        ferror=ferror,
        min_ferror=min_ferror,
        homing=homing,
        max_velocity=max_velocity,
        max_acceleration=max_acceleration,
        comp_file_type=comp_file_type,
        comp_file=comp_file,
    )


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def _comp_path(comp_file: str, source: ConfigSource) -> Path:
    """Relative compensation paths are taken from the config file's directory."""
    path = Path(comp_file).expanduser()
    if not path.is_absolute() and source.path is not None:
        path = source.path.parent / path
    return path


def apply_joint_config(
    joint: int,
    config: JointConfig,
    controller: MotionController,
    source: ConfigSource | None = None,
) -> None:
    """Push *config* to *controller* and activate the joint.

    The joint is deactivated first, so a reload that fails partway leaves
    it inactive rather than active with a mix of old and new fields.

    Raises
    ------
    ControllerRejected
        On the first refused call; later calls (including activation) are
        not attempted.
    """
    controller.deactivate_joint(joint)
    controller.set_joint_type(joint, config.joint_type)
    controller.set_units(joint, config.units)
    controller.set_backlash(joint, config.backlash)
    controller.set_min_limit(joint, config.min_limit)
    controller.set_max_limit(joint, config.max_limit)
    controller.set_ferror(joint, config.ferror)
    controller.set_min_ferror(joint, config.min_ferror)
    controller.set_homing_params(joint, config.homing)
    controller.set_max_velocity(joint, config.max_velocity)
    controller.set_max_acceleration(joint, config.max_acceleration)

    if config.comp_file is not None:
        path = (
            _comp_path(config.comp_file, source)
            if source is not None
            else Path(config.comp_file)
        )
        controller.load_compensation_file(joint, path, config.comp_file_type)

    # Last, so the controller never sees a half-configured active joint.
    controller.activate_joint(joint)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_joint_config(
    joint: int,
    source: ConfigSource,
    controller: MotionController,
    context: TrajectoryContext | None = None,
) -> bool:
    """Resolve, apply and activate one joint.

    Parameters
    ----------
    joint : int
        Joint index.
    source : ConfigSource
        Open config source.
    controller : MotionController
        Controller receiving the parameters.
    context : TrajectoryContext | None
        Unit and limit defaults.  ``None`` captures the controller's current
        trajectory units.

    Returns
    -------
    bool
        ``True`` if the joint was fully configured and activated.  Failures
        are logged, not raised.
    """
    with log_context(joint=joint):
        try:
            if joint < 0:
                raise IndexOutOfRange(f"joint index must be >= 0, got {joint}")
            if context is None:
                context = TrajectoryContext.from_controller(controller)
            config = resolve_joint_config(joint, source, context)
            logger.debug("Joint %d resolved: %s", joint, config)
            apply_joint_config(joint, config, controller, source)
        except ConfigError as exc:
            logger.error("Joint %d config error: %s", joint, exc)
            return False
        except ControllerError as exc:
            logger.error("Joint %d controller error: %s", joint, exc)
            return False

    logger.info(
        "Joint %d loaded (%s, units=%g)", joint,
        config.joint_type.name.lower(), config.units,
    )
    return True


def _open_source(path: str | Path) -> ConfigSource:
    source = ConfigSource()
    if not source.open(path):
        raise SourceUnavailable(f"cannot open config {path}")
    return source


def ini_joint(
    joint: int,
    path: str | Path,
    controller: MotionController,
    context: TrajectoryContext | None = None,
) -> bool:
    """Open *path*, check *joint* against ``[TRAJ] AXES`` and load it.

    Returns ``False`` if the file cannot be opened, ``AXES`` is missing or
    malformed, the index is out of range, or the joint load fails.  The
    controller is not touched unless the index is valid.
    """
    with log_context(joint=joint):
        try:
            source = _open_source(path)
            check_joint_index(joint, resolve_axis_count(source))
        except ConfigError as exc:
            logger.error("Cannot load joint %d from %s: %s", joint, path, exc)
            return False

    return load_joint_config(joint, source, controller, context)


def load_all_joints(
    path: str | Path,
    controller: MotionController,
    context: TrajectoryContext | None = None,
    keep_going: bool = False,
) -> dict[int, bool]:
    """Load joints ``0 .. AXES-1`` sequentially.

    Parameters
    ----------
    keep_going : bool
        If ``False`` (default), stop after the first joint that fails.

    Returns
    -------
    dict[int, bool]
        Result per attempted joint.  Empty if the file or ``AXES`` could
        not be read.
    """
    try:
        source = _open_source(path)
        axes = resolve_axis_count(source)
    except ConfigError as exc:
        logger.error("Cannot load joints from %s: %s", path, exc)
        return {}

    results: dict[int, bool] = {}
    for joint in range(axes):
        results[joint] = load_joint_config(joint, source, controller, context)
        if not results[joint] and not keep_going:
            logger.error("Stopping after joint %d failed", joint)
            break
    return results
