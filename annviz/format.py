"""Human-readable formatting for metric values."""

import math

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(num_bytes: float) -> str:
    """
    Format a byte count with binary (1024) units.

    Example:
        >>> format_bytes(1536)
        '1.50 KB'
    """
    if not num_bytes or num_bytes <= 0 or not math.isfinite(num_bytes):
        return "0 B"

    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1

    decimals = 2 if value < 10 else 1
    return f"{value:.{decimals}f} {BYTE_UNITS[unit]}"


def format_number(n: float) -> str:
    """Format a count with K/M/B/T suffix."""
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if n >= threshold:
            return f"{n / threshold:.1f}{suffix}"
    return str(n)


def format_time(seconds: float) -> str:
    """Format a duration in seconds as ms/s/m/h."""
    if seconds < 0.001:
        return "<1ms"
    if seconds < 1:
        return f"{round(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"
