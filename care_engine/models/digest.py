# File: care_engine/models/digest.py

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional
from .common import parse_iso_datetime, parse_bool, align_instant
from .inventory import InventoryThresholds, StockStatus
from .queue import RankedItem


@dataclass
class Subject:
    """A tracked pet."""
    id: str
    name: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name}


@dataclass
class Photo:
    """A photo record with confirmed, suggested and legacy tags."""
    id: str
    taken_at: Optional[datetime] = None
    subject_id: Optional[str] = None
    confirmed_tags: List[str] = field(default_factory=list)
    suggested_tags: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    archived: bool = False

    def __post_init__(self):
        if self.taken_at and not isinstance(self.taken_at, datetime):
            self.taken_at = parse_iso_datetime(self.taken_at)
        self.confirmed_tags = list(self.confirmed_tags or [])
        self.suggested_tags = list(self.suggested_tags or [])
        self.tags = list(self.tags or [])

    @property
    def effective_tags(self) -> List[str]:
        """Confirmed tags win, then suggestions, then the legacy tag list."""
        if self.confirmed_tags:
            return self.confirmed_tags
        if self.suggested_tags:
            return self.suggested_tags
        return self.tags


@dataclass
class SharedNote:
    """A note shared between household members."""
    at: datetime
    text: str
    author: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.at, datetime):
            self.at = parse_iso_datetime(self.at)


@dataclass(frozen=True)
class DigestWindow:
    """Immutable rolling window ``[start, end]``."""
    start: datetime
    end: datetime

    @classmethod
    def ending_at(cls, now: datetime, days: int = 7) -> "DigestWindow":
        return cls(start=now - timedelta(days=days), end=now)

    def contains(self, instant: Optional[datetime]) -> bool:
        if instant is None:
            return False
        instant = align_instant(instant, self.end)
        return self.start <= instant <= self.end


@dataclass
class SubjectDigest:
    """What happened to one subject during the window."""
    subject: Subject
    abnormal_answers: List = field(default_factory=list)
    moments: List = field(default_factory=list)

    @property
    def abnormal_count(self) -> int:
        return len(self.abnormal_answers)

    @property
    def has_activity(self) -> bool:
        return bool(self.abnormal_answers or self.moments)


@dataclass
class DigestSummary:
    """Weekly rollup handed to the summary formatter."""
    window: DigestWindow
    per_subject: List[SubjectDigest] = field(default_factory=list)
    stock_warnings: List[StockStatus] = field(default_factory=list)
    top_tasks: List[RankedItem] = field(default_factory=list)
    top_memos: List[RankedItem] = field(default_factory=list)
    recent_notes: List[SharedNote] = field(default_factory=list)
    highlight_photos: List[Photo] = field(default_factory=list)
    abnormal_count: int = 0
    scheduled_for: Optional[datetime] = None
    thresholds: InventoryThresholds = field(default_factory=InventoryThresholds)

    @property
    def is_empty(self) -> bool:
        """True when nothing at all is worth reporting."""
        has_subject_activity = any(s.has_activity for s in self.per_subject)
        return not (
            has_subject_activity
            or self.stock_warnings
            or self.top_tasks
            or self.top_memos
            or self.recent_notes
            or self.highlight_photos
        )


def subject_from_dict(data: dict) -> Subject:
    return Subject(id=str(data.get('id', '')), name=str(data.get('name', 'Unnamed')))


def photo_from_dict(data: dict) -> Photo:
    return Photo(
        id=str(data.get('id', '')),
        taken_at=parse_iso_datetime(data.get('taken_at') or data.get('at')),
        subject_id=data.get('subject_id', data.get('catId')),
        confirmed_tags=data.get('confirmed_tags') or [],
        suggested_tags=data.get('suggested_tags') or [],
        tags=data.get('tags') or [],
        archived=parse_bool(data.get('archived')),
    )


def note_from_dict(data: dict) -> SharedNote:
    at = parse_iso_datetime(data.get('at'))
    if at is None:
        raise ValueError(f"Shared note without a timestamp: {data!r}")
    return SharedNote(at=at, text=str(data.get('text', '')), author=data.get('author'))
