# File: care_engine/core/engine.py
"""
Engine facade for the care tracker.
Wires due resolution, urgency, ranking, the card queue, the deck and the
weekly digest around one runtime context.

Every method is a pure function of (snapshot, now); nothing is cached.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional, Tuple

from care_engine.core.config_manager import Config
from care_engine.models.common import to_local
from care_engine.models.config import CareContext
from care_engine.models.digest import DigestSummary, DigestWindow
from care_engine.models.enums import DeckView, DueBucket, Season
from care_engine.models.inventory import StockStatus
from care_engine.models.items import Notice
from care_engine.models.queue import CardQueue, RankedItem
from care_engine.models.snapshot import CareSnapshot
from care_engine.processors.card_deck import build_deck, remaining_counts
from care_engine.processors.card_queue_builder import CardQueueBuilder
from care_engine.processors.digest_aggregator import DigestAggregator
from care_engine.processors.due_resolver import resolve_next_due
from care_engine.processors.priority_sorter import PrioritySorter
from care_engine.processors.season_gate import active_notices, apply_seasonal_gating, season_for
from care_engine.processors.urgency_classifier import classify_bucket, classify_inventory
from care_engine.utils.logger import LoggerMixin


class CareEngine(LoggerMixin):
    """
    Main entry point for derived views.

    Callers hand in a fresh CareSnapshot whenever the household state changes
    and re-run whatever views they display.
    """

    def __init__(self, context: Optional[CareContext] = None):
        """
        Initialize the engine.

        Args:
            context: Runtime context; built from Config when omitted
        """
        self.context = context or CareContext.from_config()
        self.tz = self.context.tz
        self.sorter = PrioritySorter(tz=self.tz, abnormal_answers=Config.ABNORMAL_ANSWERS)
        self.queue_builder = CardQueueBuilder(
            tz=self.tz,
            seasonal_deck_enabled=self.context.seasonal_deck_enabled,
            sorter=self.sorter,
        )
        self.digest_aggregator = DigestAggregator(tz=self.tz, sorter=self.sorter)
        self.logger.debug(
            f"CareEngine ready (tz={self.context.timezone}, "
            f"seasonal deck {'on' if self.context.seasonal_deck_enabled else 'off'})"
        )

    def season(self, now: datetime) -> Season:
        return season_for(to_local(now, self.tz))

    def active_subject(self, snapshot: CareSnapshot, subject_id: Optional[str] = None) -> Optional[str]:
        """The subject a per-subject view works on.

        Defaults to the first listed subject, then to the first subject any
        notice belongs to. None means the notices carry no subject at all.
        """
        if subject_id is not None:
            return subject_id
        if snapshot.subjects:
            return snapshot.subjects[0].id
        for notice in snapshot.notices:
            if notice.subject_id is not None:
                return notice.subject_id
        return None

    def _subject_notices(self, snapshot: CareSnapshot, subject_id: Optional[str]) -> List[Notice]:
        active = self.active_subject(snapshot, subject_id)
        if active is None:
            return list(snapshot.notices)
        return snapshot.notices_for(active)

    def gate_notices(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> List[Notice]:
        """One subject's notices with seasonal gating applied."""
        return apply_seasonal_gating(
            self._subject_notices(snapshot, subject_id), self.season(now), self.context.seasonal_deck_enabled
        )

    def _items(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str]) -> list:
        return list(snapshot.tasks) + active_notices(self.gate_notices(snapshot, now, subject_id))

    def resolve_due(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> List[Tuple[Any, datetime]]:
        return [(item, resolve_next_due(item, now, self.tz)) for item in self._items(snapshot, now, subject_id)]

    def classify_bucket(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> List[Tuple[Any, DueBucket]]:
        return [(item, classify_bucket(item, now, self.tz)) for item in self._items(snapshot, now, subject_id)]

    def classify_stock(self, snapshot: CareSnapshot, now: Optional[datetime] = None) -> List[StockStatus]:
        """Stock tiers do not depend on ``now``; it is accepted for symmetry."""
        return classify_inventory(snapshot.inventory, self.context.thresholds)

    def rank(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> List[RankedItem]:
        return self.sorter.rank(self._items(snapshot, now, subject_id), now)

    def build_card_queue(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> CardQueue:
        notices = self._subject_notices(snapshot, subject_id)
        return self.queue_builder.build(snapshot.tasks, notices, now, season=self.season(now))

    def build_deck(
        self,
        snapshot: CareSnapshot,
        now: datetime,
        view: Any = DeckView.TODO,
        subject_id: Optional[str] = None,
    ) -> List[RankedItem]:
        notices = self.gate_notices(snapshot, now, subject_id)
        return build_deck(snapshot.tasks, notices, now, view=view, tz=self.tz, sorter=self.sorter)

    def remaining_counts(self, snapshot: CareSnapshot, now: datetime, subject_id: Optional[str] = None) -> Tuple[int, int]:
        return remaining_counts(snapshot.tasks, self.gate_notices(snapshot, now, subject_id))

    def build_digest(self, snapshot: CareSnapshot, now: datetime) -> DigestSummary:
        window = DigestWindow.ending_at(to_local(now, self.tz), Config.DIGEST_WINDOW_DAYS)
        return self.digest_aggregator.build(
            window,
            replace(snapshot, notices=apply_seasonal_gating(
                snapshot.notices, self.season(now), self.context.seasonal_deck_enabled
            )),
            thresholds=self.context.thresholds,
            highlight_photos_enabled=self.context.highlight_photos_enabled,
        )
