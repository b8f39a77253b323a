# File: care_engine/processors/due_resolver.py
"""
Next-due resolution for recurring and one-off items.

Daily items resolve to today's slot even after it has passed; re-arming at
the day rollover is left to the caller.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any

from care_engine.core.config_manager import Config
from care_engine.models.common import resolve_timezone, to_local, wall_clock
from care_engine.models.enums import Cadence, TimeSlot
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)

SUNDAY = 6  # date.weekday()


def days_until_sunday(day: date) -> int:
    """0 on Sunday, otherwise days to the coming Sunday."""
    return (SUNDAY - day.weekday()) % 7


def coming_sunday(day: date) -> date:
    return day + timedelta(days=days_until_sunday(day))


def last_day_of_month(day: date) -> date:
    _, days_in_month = calendar.monthrange(day.year, day.month)
    return day.replace(day=days_in_month)


def resolve_next_due(item: Any, now: datetime, tz: Any = None) -> datetime:
    """
    Compute when ``item`` is next due.

    Args:
        item: CareTask or Notice (anything with ``due_at``/``cadence``/``time_slot``)
        now: Reference instant
        tz: Zone name or tzinfo; defaults to ``now``'s own zone

    Returns:
        The explicit ``due_at`` when set, otherwise a wall-clock instant
        derived from the cadence.
    """
    explicit = getattr(item, 'due_at', None)
    if explicit is not None:
        return explicit

    local_now = to_local(now, tz)
    zone = resolve_timezone(tz) or local_now.tzinfo
    today = local_now.date()
    cadence = getattr(item, 'cadence', None)

    if cadence == Cadence.DAILY:
        slot = getattr(item, 'time_slot', None) or TimeSlot.ANY
        hour, minute = Config.SLOT_TIMES.get(slot, Config.FALLBACK_DUE_TIME)
        return wall_clock(today, hour, minute, zone)

    if cadence == Cadence.WEEKLY:
        hour, minute = Config.WEEKLY_DUE_TIME
        return wall_clock(coming_sunday(today), hour, minute, zone)

    if cadence == Cadence.MONTHLY:
        hour, minute = Config.MONTHLY_DUE_TIME
        return wall_clock(last_day_of_month(today), hour, minute, zone)

    if cadence is None:
        logger.debug(f"No usable cadence for '{getattr(item, 'title', item)}', using end of day")

    hour, minute = Config.FALLBACK_DUE_TIME
    return wall_clock(today, hour, minute, zone)


def next_digest_delivery(now: datetime, tz: Any = None) -> datetime:
    """Next weekly digest delivery (Sunday 18:00); rolls a week on once today's has passed."""
    local_now = to_local(now, tz)
    zone = resolve_timezone(tz) or local_now.tzinfo
    hour, minute = Config.DIGEST_DELIVERY_TIME
    delivery = wall_clock(coming_sunday(local_now.date()), hour, minute, zone)
    if delivery < local_now:
        delivery = wall_clock(coming_sunday(local_now.date()) + timedelta(days=7), hour, minute, zone)
    return delivery
