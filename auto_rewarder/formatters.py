"""Formatting and conversion utilities."""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from auto_rewarder.constants import PRECISION, TOKEN_UNIT


def as_int(value, *, default: int = 0) -> int:
    """Convert value to int, handling decimal and 0x-prefixed strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        v = value.strip()
        if v.startswith("0x"):
            return int(v, 16)
        return int(v)
    return int(value)


def vault_key(vault: str) -> str:
    """Case-insensitive lookup key for a vault address."""
    key = str(vault).strip().lower()
    if not key:
        raise ValueError("vault identifier must be non-empty")
    return key


def parse_units(value: str | int | Decimal, *, decimals: int = 18) -> int:
    """Parse a human decimal amount ("1000", "0.231") into a fixed-point integer, truncating extra digits."""
    try:
        d = Decimal(str(value).strip())
    except InvalidOperation as ex:
        raise ValueError(f"not a decimal amount: {value!r}") from ex
    if not d.is_finite():
        raise ValueError(f"not a finite amount: {value!r}")
    return int(d * (Decimal(10) ** decimals))


def format_units(value: int, *, decimals: int = 6) -> str:
    """Format an 18-decimal fixed-point amount as a plain decimal string."""
    amount = Decimal(value) / TOKEN_UNIT
    s = f"{amount:.{decimals}f}".rstrip("0").rstrip(".")
    return s or "0"


def format_ratio(ratio: int) -> str:
    """Format a 1e18-scaled fraction as a percentage."""
    return f"{(Decimal(ratio) * 100 / Decimal(PRECISION)):.2f}%"


def format_timestamp(ts: int | None) -> str:
    """Format a unix timestamp in UTC, or a dash if unset."""
    if ts is None:
        return "n/a"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_age(seconds: int) -> str:
    """Format a duration as 1d 2h 3m."""
    seconds = max(0, int(seconds))
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
