"""Cross-cutting utilities (lowest dependency layer).

    - Filesystem and YAML helpers (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (configs, hardware, joints).
"""

from . import fs
from . import logging_config

from .logging_config import log_context, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'log_context',
    'push_context',
    'setup_logging',
]
