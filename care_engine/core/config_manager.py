# File: care_engine/core/config_manager.py
"""
Centralized configuration management for the care engine.
Loads settings from environment variables (optionally a .env file).
"""

import os
from typing import Dict, FrozenSet, Tuple
from dotenv import load_dotenv
import pytz

from care_engine.models.enums import TimeSlot
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)

# Load environment variables
load_dotenv()

TRUTHY = ('yes', 'true', '1', 'on', 'y')


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(float(raw))
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


class Config:
    """Application configuration singleton."""


    # Application Settings
    TIMEZONE = os.getenv("TIMEZONE", "Asia/Tokyo")

    # Inventory thresholds (days of stock left)
    INV_SOON_DAYS = _env_int("INV_SOON_DAYS", 7)
    INV_URGENT_DAYS = _env_int("INV_URGENT_DAYS", 3)
    INV_CRITICAL_DAYS = _env_int("INV_CRITICAL_DAYS", 1)
    THRESHOLD_BOUNDS: Tuple[int, int] = (1, 60)
    STOCK_DAYS_CAP = 365

    # Capability flags
    SEASONAL_DECK_ENABLED = _env_flag("SEASONAL_DECK_ENABLED")
    HIGHLIGHT_PHOTOS_ENABLED = _env_flag("HIGHLIGHT_PHOTOS_ENABLED")

    # Due resolution (hour, minute)
    SLOT_TIMES: Dict[TimeSlot, Tuple[int, int]] = {
        TimeSlot.MORNING: (9, 0),
        TimeSlot.EVENING: (20, 0),
        TimeSlot.ANY: (23, 59),
    }
    WEEKLY_DUE_TIME: Tuple[int, int] = (18, 0)   # Sunday
    MONTHLY_DUE_TIME: Tuple[int, int] = (20, 0)  # last day of month
    FALLBACK_DUE_TIME: Tuple[int, int] = (23, 59)

    # Bucket windows
    NOW_WINDOW_HOURS = 3
    WEEK_WINDOW_DAYS = 7
    MONTH_WINDOW_DAYS = 31

    # Priority classes, lower sorts first
    PRIORITY_ABNORMAL_NOTICE = 0.0
    PRIORITY_NOTICE = 0.8
    PRIORITY_CARE_TASK = 1.0
    PRIORITY_MEMO = 1.7
    PRIORITY_MOMENT = 2.0
    PRIORITY_OTHER = 3.0

    # Exact answer tokens that flag a notice as abnormal
    ABNORMAL_ANSWERS: FrozenSet[str] = frozenset({"slightly off", "concerning", "yes"})
    HIGHLIGHT_TAGS: FrozenSet[str] = frozenset({"food", "condition", "litter box", "meal"})

    # Card queue
    QUEUE_CAPACITY = 6
    QUEUE_NOTICE_QUOTA = 3
    QUEUE_SEASONAL_QUOTA = 2
    QUEUE_CARE_QUOTA = 3

    # Digest
    DIGEST_WINDOW_DAYS = 7
    DIGEST_TOP_TASKS = 3
    DIGEST_TOP_MEMOS = 3
    DIGEST_RECENT_NOTES = 2
    DIGEST_HIGHLIGHT_PHOTOS = 3
    DIGEST_DELIVERY_TIME: Tuple[int, int] = (18, 0)  # Sunday

    # Memos and restocking
    MEMO_DUE_DAYS = 3
    MEMO_DUE_TIME: Tuple[int, int] = (20, 0)
    EVENT_MEMO_LEAD_DAYS = 1  # evening before the event
    EVENT_MEMO_DUE_TIME: Tuple[int, int] = (20, 0)
    RESTOCK_RANGE: Tuple[int, int] = (10, 21)
    STILL_HAVE_EXTENSION: Tuple[int, int] = (2, 3)

    @classmethod
    def validate(cls) -> bool:
        """Validate that the configured values are usable."""
        errors = []

        try:
            pytz.timezone(cls.TIMEZONE)
        except pytz.UnknownTimeZoneError:
            errors.append(f"TIMEZONE {cls.TIMEZONE!r} is not a known zone")

        low, high = cls.THRESHOLD_BOUNDS
        for name in ("INV_SOON_DAYS", "INV_URGENT_DAYS", "INV_CRITICAL_DAYS"):
            value = getattr(cls, name)
            if not low <= value <= high:
                errors.append(f"{name}={value} outside [{low}, {high}]")

        if not cls.INV_CRITICAL_DAYS <= cls.INV_URGENT_DAYS <= cls.INV_SOON_DAYS:
            errors.append(
                "Inventory thresholds must satisfy critical <= urgent <= soon "
                f"(got {cls.INV_CRITICAL_DAYS}/{cls.INV_URGENT_DAYS}/{cls.INV_SOON_DAYS})"
            )

        if errors:
            for error in errors:
                logger.error(f"Configuration Error: {error}")
            return False

        return True
