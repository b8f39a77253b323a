# File: care_engine/models/enums.py

from enum import Enum


class Cadence(Enum):
    """Recurrence pattern of a care task."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONCE = "once"


class TimeSlot(Enum):
    """Preferred time of day for a daily item."""
    MORNING = "morning"  # 09:00
    EVENING = "evening"  # 20:00
    ANY = "any"          # 23:59


class Category(Enum):
    """Task groups used by the household checklist."""
    CARE = "CARE"
    HEALTH = "HEALTH"
    INVENTORY = "INVENTORY"
    MEMO = "MEMO"  # things to keep in mind, for later


class NoticeKind(Enum):
    """Check-in card flavours."""
    NOTICE = "notice"  # health/behaviour observation
    MOMENT = "moment"  # optional, low-stakes prompt


class ItemState(Enum):
    """Active state of a tracked item (exactly one at a time)."""
    PENDING = "pending"
    LATER = "later"
    DONE = "done"


class DueBucket(Enum):
    """Urgency class derived from time remaining until due."""
    OVERDUE = "overdue"
    NOW = "now"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    LATER = "later"
    DONE = "done"

    @property
    def rank(self) -> int:
        """Display rank, lowest first."""
        return BUCKET_RANKS.get(self, UNKNOWN_BUCKET_RANK)


BUCKET_RANKS = {
    DueBucket.OVERDUE: 0,
    DueBucket.NOW: 1,
    DueBucket.TODAY: 2,
    DueBucket.WEEK: 3,
    DueBucket.MONTH: 4,
    DueBucket.LATER: 5,
    DueBucket.DONE: 9,
}
UNKNOWN_BUCKET_RANK = 6


class StockTier(Enum):
    """Severity of a consumable running low."""
    DANGER = "danger"  # buy now
    WARN = "warn"      # buy soon
    SOON = "soon"      # keep an eye on it
    OK = "ok"


class Season(Enum):
    """Calendar seasons for the seasonal notice deck."""
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class InventoryAction(Enum):
    """Quick actions on a consumable."""
    BOUGHT = "bought"
    STILL = "still"  # still have some left


class DeckView(Enum):
    """Filters of the swipe deck."""
    TODO = "todo"
    LATER = "later"
    DONE = "done"


class SlotType(Enum):
    """Slot kinds of the bounded today queue."""
    NOTICE_GROUP = "notice_group"
    CARE = "care"
    MOMENT = "moment"
    MEMO = "memo"
