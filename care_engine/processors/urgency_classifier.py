# File: care_engine/processors/urgency_classifier.py
"""
Urgency classification: due buckets for items and stock tiers for consumables.
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Union

from care_engine.core.config_manager import Config
from care_engine.models.common import align_instant, clamp_int, to_local
from care_engine.models.enums import DueBucket, StockTier
from care_engine.models.inventory import (
    InventoryItem, InventoryThresholds, StockStatus, thresholds_from_dict,
)
from care_engine.processors.due_resolver import resolve_next_due
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)

ThresholdsLike = Optional[Union[InventoryThresholds, dict]]


def classify_bucket(item: Any, now: datetime, tz: Any = None) -> DueBucket:
    """Place ``item`` in a due bucket relative to ``now``."""
    if getattr(item, 'done', False):
        return DueBucket.DONE

    local_now = to_local(now, tz)
    due = align_instant(resolve_next_due(item, now, tz), local_now)
    delta = due - local_now

    if delta < timedelta(0):
        return DueBucket.OVERDUE
    if delta <= timedelta(hours=Config.NOW_WINDOW_HOURS):
        return DueBucket.NOW
    if due.date() == local_now.date():
        return DueBucket.TODAY
    if delta <= timedelta(days=Config.WEEK_WINDOW_DAYS):
        return DueBucket.WEEK
    if delta <= timedelta(days=Config.MONTH_WINDOW_DAYS):
        return DueBucket.MONTH
    return DueBucket.LATER


def bucket_rank(bucket: Optional[DueBucket]) -> int:
    """Display rank of a bucket; unknown buckets sort between later and done."""
    if isinstance(bucket, DueBucket):
        return bucket.rank
    return DueBucket.LATER.rank + 1


def normalize_thresholds(thresholds: ThresholdsLike = None) -> InventoryThresholds:
    """Return a fresh, ordered copy of ``thresholds`` (defaults for None)."""
    if isinstance(thresholds, InventoryThresholds):
        return InventoryThresholds(
            soon=thresholds.soon,
            urgent=thresholds.urgent,
            critical=thresholds.critical,
        )
    return thresholds_from_dict(thresholds)


def classify_stock(remaining_lower_bound: Any, thresholds: ThresholdsLike = None) -> StockTier:
    """Tier a consumable by its conservative days-remaining estimate."""
    t = normalize_thresholds(thresholds)
    days = clamp_int(remaining_lower_bound, 0, Config.STOCK_DAYS_CAP)

    if days <= t.critical:
        return StockTier.DANGER
    if days <= t.urgent:
        return StockTier.WARN
    if days <= t.soon:
        return StockTier.SOON
    return StockTier.OK


def classify_inventory(items: Iterable[InventoryItem], thresholds: ThresholdsLike = None) -> List[StockStatus]:
    """Tier every inventory item with one normalized threshold set."""
    t = normalize_thresholds(thresholds)
    statuses = [StockStatus(item=item, tier=classify_stock(item.lower_bound, t)) for item in items]
    flagged = sum(1 for s in statuses if s.needs_attention)
    logger.debug(f"Classified {len(statuses)} inventory items, {flagged} need attention")
    return statuses
