"""
Joint Loader Package.

Resolves per-joint motion parameters from a section-keyed machine config
and applies them to a motion controller at startup, activating each joint
only after all of its parameters were accepted.

Subpackages:
    configs: Config source, unit tables, trajectory defaults, write-back formatting
    hardware: Controller interface, simulated controller, compensation tables
    joints: Axis count, section naming, joint resolve/apply pipeline
    utils: Logging setup and YAML helpers
"""

__version__ = "1.0.0"

__all__ = ["configs", "hardware", "joints", "params", "utils"]
