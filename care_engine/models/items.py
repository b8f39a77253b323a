# File: care_engine/models/items.py

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Union
from .enums import Cadence, TimeSlot, Category, NoticeKind, ItemState, Season
from .common import parse_iso_datetime, parse_bool, coerce_enum, to_local, wall_clock


def _state_of(done: bool, later: bool) -> ItemState:
    if done:
        return ItemState.DONE
    if later:
        return ItemState.LATER
    return ItemState.PENDING


@dataclass
class CareTask:
    """An actionable care task (or a memo when category is MEMO)."""
    id: str
    title: str
    cadence: Optional[Cadence] = None
    time_slot: TimeSlot = TimeSlot.ANY
    due_at: Optional[datetime] = None
    done: bool = False
    later: bool = False
    optional: bool = False
    category: Category = Category.CARE

    def __post_init__(self):
        """Auto-convert raw values; never reject domain data."""
        self.cadence = coerce_enum(self.cadence, Cadence, None)
        self.time_slot = coerce_enum(self.time_slot, TimeSlot, TimeSlot.ANY)
        self.category = coerce_enum(self.category, Category, Category.CARE)

        if self.due_at and not isinstance(self.due_at, datetime):
            self.due_at = parse_iso_datetime(self.due_at)

        # done and later are mutually exclusive; done wins
        if self.done and self.later:
            self.later = False

    @property
    def is_memo(self) -> bool:
        return self.category == Category.MEMO

    @property
    def state(self) -> ItemState:
        return _state_of(self.done, self.later)

    @property
    def is_pending(self) -> bool:
        return self.state == ItemState.PENDING

    @property
    def is_open(self) -> bool:
        """Not done yet (pending or deferred)."""
        return not self.done

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'cadence': self.cadence.value if self.cadence else None,
            'time_slot': self.time_slot.value,
            'due_at': self.due_at.isoformat() if self.due_at else None,
            'done': self.done,
            'later': self.later,
            'optional': self.optional,
            'category': self.category.value,
        }


@dataclass
class Notice:
    """A health/behaviour check-in card merged with one subject's latest answer."""
    id: str
    title: str
    kind: NoticeKind = NoticeKind.NOTICE
    enabled: bool = True
    optional: bool = False
    choices: List[str] = field(default_factory=list)
    seasonal: bool = False
    season: Optional[Season] = None
    value: Optional[str] = None
    recorded_at: Optional[datetime] = None
    done: bool = False
    later: bool = False
    subject_id: Optional[str] = None
    cadence: Optional[Cadence] = Cadence.DAILY
    time_slot: TimeSlot = TimeSlot.ANY

    def __post_init__(self):
        self.kind = coerce_enum(self.kind, NoticeKind, NoticeKind.NOTICE)
        self.season = coerce_enum(self.season, Season, None)
        self.cadence = coerce_enum(self.cadence, Cadence, None)
        self.time_slot = coerce_enum(self.time_slot, TimeSlot, TimeSlot.ANY)
        self.choices = [str(c) for c in (self.choices or [])]

        if self.recorded_at and not isinstance(self.recorded_at, datetime):
            self.recorded_at = parse_iso_datetime(self.recorded_at)

        if self.done and self.later:
            self.later = False

    @property
    def due_at(self) -> Optional[datetime]:
        # Notices always recur; they never carry an explicit due instant
        return None

    @property
    def is_moment(self) -> bool:
        return self.kind == NoticeKind.MOMENT

    @property
    def state(self) -> ItemState:
        return _state_of(self.done, self.later)

    @property
    def is_pending(self) -> bool:
        return self.state == ItemState.PENDING

    def is_abnormal(self, abnormal_answers=None) -> bool:
        """Check the latest answer against the closed abnormal answer set.

        A notice without answer choices has no applicable urgency.
        """
        if self.kind != NoticeKind.NOTICE or not self.choices or not self.value:
            return False
        if abnormal_answers is None:
            from care_engine.core.config_manager import Config
            abnormal_answers = Config.ABNORMAL_ANSWERS
        return self.value in abnormal_answers

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'kind': self.kind.value,
            'enabled': self.enabled,
            'optional': self.optional,
            'choices': list(self.choices),
            'seasonal': self.seasonal,
            'season': self.season.value if self.season else None,
            'value': self.value,
            'recorded_at': self.recorded_at.isoformat() if self.recorded_at else None,
            'done': self.done,
            'later': self.later,
            'subject_id': self.subject_id,
        }


TrackedItem = Union[CareTask, Notice]


def task_from_dict(data: dict) -> CareTask:
    """Create CareTask from dictionary with type safety."""
    return CareTask(
        id=str(data.get('id', '')),
        title=str(data.get('title', 'Untitled Task')),
        cadence=data.get('cadence'),
        # The app stores the slot under 'due' ("morning", "evening", "any")
        time_slot=data.get('time_slot', data.get('due')),
        due_at=parse_iso_datetime(data.get('due_at') or data.get('dueAt')),
        done=parse_bool(data.get('done')),
        later=parse_bool(data.get('later')),
        optional=parse_bool(data.get('optional')),
        category=data.get('category', data.get('group')),
    )


def notice_from_dict(data: dict) -> Notice:
    """Create Notice from dictionary (definition merged with its latest log)."""
    return Notice(
        id=str(data.get('id', '')),
        title=str(data.get('title', 'Untitled Notice')),
        kind=data.get('kind'),
        enabled=parse_bool(data.get('enabled'), default=True),
        optional=parse_bool(data.get('optional')),
        choices=list(data.get('choices') or []),
        seasonal=parse_bool(data.get('seasonal')),
        season=data.get('season'),
        value=data.get('value'),
        recorded_at=parse_iso_datetime(data.get('recorded_at') or data.get('at')),
        done=parse_bool(data.get('done')),
        later=parse_bool(data.get('later')),
        subject_id=data.get('subject_id'),
        cadence=data.get('cadence', Cadence.DAILY),
        time_slot=data.get('time_slot', data.get('due')),
    )


def _memo(memo_id: str, title: str, due_at: datetime, deferred: bool) -> CareTask:
    return CareTask(
        id=memo_id,
        title=title,
        cadence=Cadence.ONCE,
        time_slot=TimeSlot.ANY,
        due_at=due_at,
        optional=True,
        later=deferred,
        category=Category.MEMO,
    )


def memo_from_text(
    text: str,
    now: datetime,
    tz=None,
    memo_id: Optional[str] = None,
    deferred: bool = False,
) -> Optional[CareTask]:
    """Turn a free-text note into a MEMO task due three days out at 20:00.

    Returns None for blank text. ``deferred`` files the memo under "later".
    """
    from care_engine.core.config_manager import Config

    clean = (text or "").strip()
    if not clean:
        return None

    local_now = to_local(now, tz)
    due_day = local_now.date() + timedelta(days=Config.MEMO_DUE_DAYS)
    hour, minute = Config.MEMO_DUE_TIME
    due_at = wall_clock(due_day, hour, minute, local_now.tzinfo)

    return _memo(memo_id or f"q_{int(local_now.timestamp() * 1000)}", clean, due_at, deferred)


def memo_from_event(
    event_title: str,
    event_at: Union[datetime, str],
    subject_name: Optional[str] = None,
    tz=None,
    memo_id: Optional[str] = None,
    deferred: bool = False,
) -> Optional[CareTask]:
    """Turn a calendar event (vet visit, grooming...) into a preparation memo.

    The memo is due the evening before the event, at 20:00 local time.
    Returns None for a blank title or an unparseable event time.
    """
    from care_engine.core.config_manager import Config

    clean = (event_title or "").strip()
    at = parse_iso_datetime(event_at)
    if not clean or at is None:
        return None

    local_at = to_local(at, tz)
    due_day = local_at.date() - timedelta(days=Config.EVENT_MEMO_LEAD_DAYS)
    hour, minute = Config.EVENT_MEMO_DUE_TIME
    due_at = wall_clock(due_day, hour, minute, local_at.tzinfo)

    title = f"{clean}: {subject_name or 'cat'} (things to bring / ask)"
    return _memo(memo_id or f"q_{int(local_at.timestamp() * 1000)}_ev", title, due_at, deferred)
