# File: care_engine/models/common.py

import math
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Any, Optional, Type, TypeVar

import pytz

E = TypeVar("E", bound=Enum)

TRUTHY_STRINGS = ['yes', 'true', '1', 'active', 'on', 'y', 't']


def parse_iso_datetime(date_str: Any) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if isinstance(date_str, datetime):
        return date_str
    if not date_str:
        return None
    try:
        # fromisoformat on older interpreters does not accept 'Z'
        clean_str = str(date_str).replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        # Fallback for simple date strings without time
        try:
            return datetime.strptime(str(date_str), "%Y-%m-%d")
        except ValueError:
            return None


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret sheet/JSON style booleans ("Yes", "TRUE", 1...)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY_STRINGS


def coerce_enum(value: Any, enum_cls: Type[E], default: Optional[E]) -> Optional[E]:
    """Convert a raw value to ``enum_cls``, falling back to ``default``.

    Accepts the enum member itself, its value, or "EnumName.MEMBER" strings.
    Matching of string values is case-insensitive.
    """
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    raw = str(value).split('.')[-1].strip()
    for member in enum_cls:
        if raw.lower() in (str(member.value).lower(), member.name.lower()):
            return member
    return default


def clamp_int(value: Any, lower: int, upper: int) -> int:
    """Floor ``value`` into ``[lower, upper]``; unparseable or non-finite input gives ``lower``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return lower
    if not math.isfinite(number):
        return lower
    return max(lower, min(upper, math.floor(number)))


def align_instant(instant: datetime, reference: datetime) -> datetime:
    """Return ``instant`` made comparable with ``reference``.

    Naive instants are read as wall-clock time in the reference's zone;
    aware instants are converted into it (or stripped when the reference is naive).
    """
    ref_tz = reference.tzinfo
    if instant.tzinfo is None and ref_tz is None:
        return instant
    if instant.tzinfo is None:
        if hasattr(ref_tz, 'localize'):
            return ref_tz.localize(instant)
        return instant.replace(tzinfo=ref_tz)
    if ref_tz is None:
        return instant.replace(tzinfo=None)
    return instant.astimezone(ref_tz)


def resolve_timezone(tz: Any):
    """Accept a zone name, a tzinfo, or None and return a tzinfo (or None)."""
    if tz is None or isinstance(tz, tzinfo):
        return tz
    return pytz.timezone(str(tz))


def to_local(now: datetime, tz: Any = None) -> datetime:
    """Express ``now`` in the caller's zone context.

    With no zone, ``now`` is returned as is. A naive ``now`` is read as
    wall-clock time in ``tz``; an aware one is converted into ``tz``.
    """
    zone = resolve_timezone(tz)
    if zone is None:
        return now
    if now.tzinfo is None:
        return zone.localize(now) if hasattr(zone, 'localize') else now.replace(tzinfo=zone)
    return now.astimezone(zone)


def wall_clock(day: date, hour: int, minute: int, tz: Any = None) -> datetime:
    """Build ``day`` at ``hour:minute`` local time in ``tz`` (naive when ``tz`` is None)."""
    naive = datetime.combine(day, time(hour, minute))
    if tz is None:
        return naive
    if hasattr(tz, 'localize'):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)
