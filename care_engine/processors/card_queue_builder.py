# File: care_engine/processors/card_queue_builder.py

from datetime import datetime
from typing import Any, List, Optional

from care_engine.core.config_manager import Config
from care_engine.models.common import to_local
from care_engine.models.enums import NoticeKind, Season, SlotType
from care_engine.models.items import CareTask, Notice
from care_engine.models.queue import CardQueue, CardSlot, RankedItem
from care_engine.processors.priority_sorter import PrioritySorter
from care_engine.processors.season_gate import season_for, apply_seasonal_gating, active_notices
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


class CardQueueBuilder:
    """Builds the bounded "today" card queue.

    Allocation order: notice group, first care tasks, moment, memo, then
    further care tasks until the queue is full.
    """

    def __init__(
        self,
        tz: Any = None,
        seasonal_deck_enabled: bool = False,
        capacity: int = Config.QUEUE_CAPACITY,
        sorter: Optional[PrioritySorter] = None,
    ):
        self.tz = tz
        self.seasonal_deck_enabled = seasonal_deck_enabled
        self.capacity = capacity
        self.sorter = sorter or PrioritySorter(tz=tz)

    def build(
        self,
        tasks: List[CareTask],
        notices: List[Notice],
        now: datetime,
        season: Optional[Season] = None,
    ) -> CardQueue:
        """
        Build the queue for one subject's notices and the household tasks.

        Args:
            tasks: Care tasks and memos
            notices: Notices and moments (seasonal gating is applied here)
            now: Reference instant
            season: Active season, derived from ``now`` when omitted

        Returns:
            CardQueue with at most ``capacity`` slots and the pending overflow
        """
        if season is None:
            season = season_for(to_local(now, self.tz))

        enabled = active_notices(apply_seasonal_gating(notices, season, self.seasonal_deck_enabled))
        ranked_notices = self.sorter.rank(enabled, now)

        care = self.sorter.rank([t for t in tasks if t.is_pending and not t.is_memo], now)
        memos = self.sorter.rank([t for t in tasks if t.is_pending and t.is_memo], now)

        slots = [self._notice_group(ranked_notices)]

        care_quota = min(Config.QUEUE_CARE_QUOTA, self.capacity)
        slots.extend(CardSlot(SlotType.CARE, [r]) for r in care[:care_quota])

        moment = next((r for r in ranked_notices if r.item.kind == NoticeKind.MOMENT), None)
        if moment is not None:
            slots.append(CardSlot(SlotType.MOMENT, [moment]))

        if len(slots) < self.capacity and memos:
            slots.append(CardSlot(SlotType.MEMO, [memos[0]]))

        needed = self.capacity - len(slots)
        if needed > 0:
            slots.extend(CardSlot(SlotType.CARE, [r]) for r in care[care_quota:care_quota + needed])

        slots = slots[:self.capacity]

        total_pending = len(care) + len(memos) + sum(1 for n in enabled if n.is_pending)
        shown_pending = sum(1 for slot in slots for r in slot.items if r.item.is_pending)
        overflow = max(0, total_pending - shown_pending)

        queue = CardQueue(slots=slots, overflow=overflow)
        logger.info(
            f"Card queue built: {len(slots)} slots, {queue.shown_count} cards shown, "
            f"{overflow} more waiting"
        )
        return queue

    def _notice_group(self, ranked_notices: List[RankedItem]) -> CardSlot:
        observations = [r for r in ranked_notices if r.item.kind == NoticeKind.NOTICE]
        fixed = [r for r in observations if not r.item.optional and not r.item.seasonal]
        seasonal = [r for r in observations if r.item.seasonal] if self.seasonal_deck_enabled else []

        items = fixed[:Config.QUEUE_NOTICE_QUOTA] + seasonal[:Config.QUEUE_SEASONAL_QUOTA]
        logger.debug(f"Notice group: {len(items)} notices")
        return CardSlot(SlotType.NOTICE_GROUP, items)
