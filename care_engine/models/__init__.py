from .enums import (
    Cadence, TimeSlot, Category, NoticeKind, ItemState, DueBucket, StockTier,
    Season, InventoryAction, DeckView, SlotType, BUCKET_RANKS, UNKNOWN_BUCKET_RANK,
)
from .common import parse_iso_datetime, parse_bool, coerce_enum, clamp_int, resolve_timezone
from .items import CareTask, Notice, TrackedItem, task_from_dict, notice_from_dict, memo_from_text, memo_from_event
from .inventory import InventoryItem, InventoryThresholds, StockStatus, inventory_from_dict, thresholds_from_dict
from .queue import RankedItem, CardSlot, CardQueue
from .digest import (
    Subject, Photo, SharedNote, DigestWindow, SubjectDigest, DigestSummary,
    subject_from_dict, photo_from_dict, note_from_dict,
)
from .config import CareContext
from .snapshot import CareSnapshot, snapshot_from_dict

__all__ = [
    "Cadence",
    "TimeSlot",
    "Category",
    "NoticeKind",
    "ItemState",
    "DueBucket",
    "StockTier",
    "Season",
    "InventoryAction",
    "DeckView",
    "SlotType",
    "BUCKET_RANKS",
    "UNKNOWN_BUCKET_RANK",
    "parse_iso_datetime",
    "parse_bool",
    "coerce_enum",
    "clamp_int",
    "resolve_timezone",
    "CareTask",
    "Notice",
    "TrackedItem",
    "task_from_dict",
    "notice_from_dict",
    "memo_from_text",
    "memo_from_event",
    "InventoryItem",
    "InventoryThresholds",
    "StockStatus",
    "inventory_from_dict",
    "thresholds_from_dict",
    "RankedItem",
    "CardSlot",
    "CardQueue",
    "Subject",
    "Photo",
    "SharedNote",
    "DigestWindow",
    "SubjectDigest",
    "DigestSummary",
    "subject_from_dict",
    "photo_from_dict",
    "note_from_dict",
    "CareContext",
    "CareSnapshot",
    "snapshot_from_dict",
]
