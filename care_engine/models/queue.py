# File: care_engine/models/queue.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from .enums import DueBucket, SlotType


@dataclass
class RankedItem:
    """A tracked item together with the values it was ordered by."""
    item: Any
    priority: float
    bucket: DueBucket
    due_at: datetime

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def title(self) -> str:
        return self.item.title


@dataclass
class CardSlot:
    """One slot of the today queue; the notice group carries several items."""
    slot_type: SlotType
    items: List[RankedItem] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.items)


@dataclass
class CardQueue:
    """Bounded, ordered view of what to do now."""
    slots: List[CardSlot] = field(default_factory=list)
    overflow: int = 0

    @property
    def is_empty(self) -> bool:
        return not any(slot.items for slot in self.slots)

    @property
    def shown_count(self) -> int:
        return sum(slot.size for slot in self.slots)

    def slot(self, slot_type: SlotType) -> Optional[CardSlot]:
        """First slot of the given type, if any."""
        for s in self.slots:
            if s.slot_type == slot_type:
                return s
        return None

    def slots_of(self, slot_type: SlotType) -> List[CardSlot]:
        return [s for s in self.slots if s.slot_type == slot_type]
