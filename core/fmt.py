"""core/fmt.py — Human-readable number formatting for the HUD and logs.

    format_number(12.4)        -> "12"
    format_number(15300)       -> "15.30K"
    format_number(float("nan"))-> "∞"
"""

from __future__ import annotations
import math

INFINITY_SENTINEL = "∞"

# Short-scale suffixes, each step is x1000
_SUFFIXES = ("", "K", "M", "B", "T", "Qa", "Qi", "Sx", "Sp", "Oc", "No", "Dc")


def format_number(value) -> str:
    """Format *value* for display.

    Below 10 000 the value is rounded to an integer; above that it is
    scaled to the largest suffix unit with two decimals.  NaN and
    infinities render as ``∞``.
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        return INFINITY_SENTINEL
    if math.isnan(num) or math.isinf(num):
        return INFINITY_SENTINEL

    if abs(num) < 10_000:
        return f"{num:.0f}"

    sign = "-" if num < 0 else ""
    num = abs(num)
    tier = min(int(math.log10(num) // 3), len(_SUFFIXES) - 1)
    scaled = num / (1000 ** tier)
    return f"{sign}{scaled:.2f}{_SUFFIXES[tier]}"


def format_delta(value: float) -> str:
    """Signed one-decimal delta, e.g. ``+1.5`` / ``-0.5``."""
    if value is None or math.isnan(value) or math.isinf(value):
        return INFINITY_SENTINEL
    return f"{value:+.1f}"
