"""Unit tables and unit-aware value parsing.

Joint ``UNITS`` entries (and the ``TRAJ`` unit defaults) may be written
three ways::

    UNITS: 0.03937        # bare number, taken as-is
    UNITS: inch           # unit name alone -> table factor
    UNITS: "2 in"         # number x unit factor

Linear factors are expressed per millimetre, angular factors per degree.
"""

from __future__ import annotations

import math

LINEAR_UNITS: dict[str, float] = {
    "mm": 1.0,
    "metric": 1.0,
    "cm": 0.1,
    "in": 1.0 / 25.4,
    "inch": 1.0 / 25.4,
    "imperial": 1.0 / 25.4,
}

ANGULAR_UNITS: dict[str, float] = {
    "deg": 1.0,
    "degree": 1.0,
    "grad": 0.9,
    "gon": 0.9,
    "rad": math.pi / 180.0,
    "radian": math.pi / 180.0,
}


class UnitError(ValueError):
    """Raised when a unit-aware value cannot be parsed."""

    pass


def parse_unit_value(raw: object, table: dict[str, float]) -> float:
    """Convert *raw* to a float using *table* for unit names.

    Parameters
    ----------
    raw : object
        Value as read from the config store (number or string).
    table : dict[str, float]
        Unit name -> factor lookup (``LINEAR_UNITS`` or ``ANGULAR_UNITS``).

    Returns
    -------
    float
        The converted value.

    Raises
    ------
    UnitError
        If *raw* is neither a number, a known unit name, nor
        ``"<number> <unit>"``, or if it is not finite.
    """
    value = _parse(raw, table)
    if not math.isfinite(value):
        raise UnitError(f"unit value {raw!r} is not finite")
    return value


def _parse(raw: object, table: dict[str, float]) -> float:
    if isinstance(raw, bool):
        raise UnitError(f"boolean {raw!r} is not a unit value")
    if isinstance(raw, (int, float)):
        return float(raw)
    if not isinstance(raw, str):
        raise UnitError(f"unsupported unit value {raw!r}")

    text = raw.strip()
    name = text.lower()
    if name in table:
        return table[name]

    parts = text.split()
    if len(parts) == 1:
        try:
            return float(parts[0])
        except ValueError:
            raise UnitError(f"unknown unit '{text}'") from None
    if len(parts) == 2:
        number, unit = parts
        factor = table.get(unit.lower())
        if factor is None:
            raise UnitError(f"unknown unit '{unit}' in {text!r}")
        try:
            return float(number) * factor
        except ValueError:
            raise UnitError(f"bad number '{number}' in {text!r}") from None
    raise UnitError(f"cannot parse unit value {text!r}")
