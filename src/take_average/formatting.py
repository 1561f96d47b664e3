"""Human-readable formatting for durations and file sizes."""

import math

_SIZE_UNITS = ("KB", "MB", "GB")


def human_time(seconds: float) -> str:
    """Format ``seconds`` as ``m:ss``.

    Examples:
        >>> human_time(65)
        '1:05'
        >>> human_time(float("inf"))
        '—'
    """
    if not math.isfinite(seconds):
        return "—"
    minutes = math.floor(seconds / 60)
    # Remainder keeps the sign of ``seconds``
    secs = math.floor(math.fmod(seconds, 60) + 0.5)
    return f"{minutes}:{secs:02d}"


def clamp(value: float, lo: float, hi: float) -> float:
    """Limit ``value`` to ``[lo, hi]``."""
    return min(hi, max(lo, value))


def bytes_human(n: float) -> str:
    """Format a byte count using binary units up to GB.

    Examples:
        >>> bytes_human(500)
        '500 B'
        >>> bytes_human(1024)
        '1.00 KB'
    """
    if n < 1024:
        return f"{int(n)} B" if float(n).is_integer() else f"{n} B"

    unit = -1
    while True:
        n /= 1024
        unit += 1
        if n < 1024 or unit >= len(_SIZE_UNITS) - 1:
            break
    return f"{n:.2f} {_SIZE_UNITS[unit]}" if n < 10 else f"{n:.1f} {_SIZE_UNITS[unit]}"
