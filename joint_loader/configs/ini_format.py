"""Float formatting for writing values back into a config file.

When a tuned value is written back, it should keep at least the precision
the operator originally typed.  The precision is inferred from the existing
text and turned into a printf-style template::

    >>> build_float_format("FERROR", "0.0125")
    'FERROR = %.4f\\n'
    >>> format_float_entry("FERROR", "0.0125", 0.02)
    'FERROR = 0.0200\\n'
"""

from __future__ import annotations

MIN_FLOAT_PRECISION = 3
BACKUP_SUFFIX = ".bak"


def infer_precision(text: str) -> int:
    """Count the digits after the first decimal point, minimum 3.

    Scanning stops at the first non-digit after the point, so trailing
    whitespace, units or a second value are ignored.
    """
    point = text.find(".")
    if point < 0:
        return MIN_FLOAT_PRECISION

    digits = 0
    for ch in text[point + 1:]:
        if not ch.isdigit():
            break
        digits += 1
    return max(digits, MIN_FLOAT_PRECISION)


def build_float_format(var: str, sample: str) -> str:
    """Template for ``VAR = <float>`` using *sample*'s precision."""
    return f"{var} = %.{infer_precision(sample)}f\n"


def build_float2_format(var: str, sample: str) -> str:
    """Template for ``VAR = <float> <float>``.

    Both floats share the precision inferred from the first one in
    *sample* (e.g. ``"1.0 0.25"`` for a scale/offset pair).
    """
    prec = infer_precision(sample)
    return f"{var} = %.{prec}f %.{prec}f\n"


def format_float_entry(var: str, sample: str, value: float) -> str:
    return build_float_format(var, sample) % value
