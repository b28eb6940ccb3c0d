import re
from datetime import timedelta

DEFAULT_LOOKBACK = timedelta(days=7)

_UNIT_SECONDS = {
    "s": 1,
    "min": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}

_LOOKBACK_RE = re.compile(r"^\s*(\d+)\s*(s|min|h|d|w)\s*$")


def parse_lookback(value: str) -> timedelta:
    """Parse a relative window such as ``7d``, ``12h`` or ``30min``"""
    match = _LOOKBACK_RE.match(value)
    if not match:
        raise ValueError(f"Invalid lookback window: {value!r}")
    amount, unit = int(match[1]), match[2]
    if amount <= 0:
        raise ValueError(f"Lookback window must be positive: {value!r}")
    return timedelta(seconds=amount * _UNIT_SECONDS[unit])


def format_lookback(window: timedelta) -> str:
    """Render a window as a Graphite relative offset, largest whole unit first"""
    seconds = int(window.total_seconds())
    if seconds <= 0:
        raise ValueError(f"Lookback window must be positive: {window}")
    for unit in ("d", "h", "min"):
        if seconds % _UNIT_SECONDS[unit] == 0:
            return f"{seconds // _UNIT_SECONDS[unit]}{unit}"
    return f"{seconds}s"
