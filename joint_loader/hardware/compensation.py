"""Joint compensation tables.

A compensation file holds one row per calibration point with three
whitespace-separated columns.  ``#`` starts a comment.

Type 0 (absolute)::

    # nominal  forward   reverse
    0.000      0.001     -0.002
    100.000    100.004   99.998

Type 1 (trims)::

    # nominal  forward_trim  reverse_trim
    0.000      0.001         -0.002

Type 1 trims are converted to absolute positions on load, so callers
always see ``nominal / forward / reverse`` positions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

COMP_TYPE_ABSOLUTE = 0
COMP_TYPE_TRIM = 1


class CompensationError(Exception):
    """Raised when a compensation file cannot be read or is malformed."""

    pass


@dataclass(frozen=True)
class CompensationTable:
    """Compensation points sorted by nominal position.

    Parameters
    ----------
    nominal, forward, reverse : np.ndarray
        1-D float arrays of equal length.
    """

    nominal: np.ndarray
    forward: np.ndarray
    reverse: np.ndarray

    def __len__(self) -> int:
        return int(self.nominal.shape[0])


def load_compensation_table(
    path: str | Path, file_type: int = COMP_TYPE_ABSOLUTE,
) -> CompensationTable:
    """Read and normalise a compensation file.

    Parameters
    ----------
    path : str | Path
        Text file with three columns per row.
    file_type : int
        ``0`` for absolute positions, ``1`` for trims relative to nominal.

    Returns
    -------
    CompensationTable
        Absolute positions, sorted by nominal.

    Raises
    ------
    CompensationError
        On a missing file, unknown type, bad column count or non-numeric data.
    """
    path = Path(path)
    if file_type not in (COMP_TYPE_ABSOLUTE, COMP_TYPE_TRIM):
        raise CompensationError(
            f"Unknown compensation file type {file_type} for {path}"
        )
    if not path.is_file():
        raise CompensationError(f"Compensation file not found: {path}")

    try:
        data = np.loadtxt(path, dtype=float, comments="#", ndmin=2)
    except ValueError as exc:
        raise CompensationError(f"Cannot parse {path}: {exc}") from exc

    if data.size == 0:
        raise CompensationError(f"Compensation file {path} has no points")
    if data.shape[1] != 3:
        raise CompensationError(
            f"Compensation file {path} must have 3 columns, "
            f"got {data.shape[1]}"
        )

    data = data[np.argsort(data[:, 0], kind="stable")]
    nominal = data[:, 0]
    forward = data[:, 1]
    reverse = data[:, 2]
    if file_type == COMP_TYPE_TRIM:
        forward = nominal + forward
        reverse = nominal + reverse

    logger.debug(
        "Loaded %d compensation points from %s (type %d)",
        data.shape[0], path, file_type,
    )
    return CompensationTable(
        nominal=nominal.copy(), forward=forward.copy(), reverse=reverse.copy(),
    )
