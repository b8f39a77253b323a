# File: care_engine/processors/priority_sorter.py

from datetime import datetime
from typing import Any, FrozenSet, Iterable, List

from care_engine.core.config_manager import Config
from care_engine.models.common import align_instant, to_local
from care_engine.models.items import CareTask, Notice
from care_engine.models.enums import NoticeKind
from care_engine.models.queue import RankedItem
from care_engine.processors.due_resolver import resolve_next_due
from care_engine.processors.urgency_classifier import classify_bucket, bucket_rank
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


class PrioritySorter:
    """Orders heterogeneous items by priority class, then bucket, then due time.

    Python's sort is stable, so items that tie on all three keep their input
    order and sorting an already sorted list changes nothing.
    """

    def __init__(self, tz: Any = None, abnormal_answers: FrozenSet[str] = Config.ABNORMAL_ANSWERS):
        self.tz = tz
        self.abnormal_answers = abnormal_answers

    def priority_of(self, item: Any) -> float:
        if isinstance(item, Notice):
            if item.kind == NoticeKind.NOTICE:
                if item.is_abnormal(self.abnormal_answers):
                    return Config.PRIORITY_ABNORMAL_NOTICE
                return Config.PRIORITY_NOTICE
            if item.kind == NoticeKind.MOMENT:
                return Config.PRIORITY_MOMENT
        if isinstance(item, CareTask):
            return Config.PRIORITY_MEMO if item.is_memo else Config.PRIORITY_CARE_TASK
        return Config.PRIORITY_OTHER

    def evaluate(self, item: Any, now: datetime) -> RankedItem:
        """Attach priority, bucket and resolved due to a single item."""
        local_now = to_local(now, self.tz)
        due = align_instant(resolve_next_due(item, now, self.tz), local_now)
        return RankedItem(
            item=item,
            priority=self.priority_of(item),
            bucket=classify_bucket(item, now, self.tz),
            due_at=due,
        )

    @staticmethod
    def sort_key(ranked: RankedItem):
        return (ranked.priority, bucket_rank(ranked.bucket), ranked.due_at)

    def sort_ranked(self, ranked: Iterable[RankedItem]) -> List[RankedItem]:
        return sorted(ranked, key=self.sort_key)

    def rank(self, items: Iterable[Any], now: datetime) -> List[RankedItem]:
        """
        Rank items for display.

        Args:
            items: CareTasks and Notices in any mix
            now: Reference instant

        Returns:
            New list of RankedItem, highest priority first
        """
        evaluated = [self.evaluate(item, now) for item in items]
        ranked = self.sort_ranked(evaluated)
        logger.debug(f"Ranked {len(ranked)} items")
        return ranked
