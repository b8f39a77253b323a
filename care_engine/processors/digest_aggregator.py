# File: care_engine/processors/digest_aggregator.py
"""
Weekly digest aggregation over a rolling window.

The result is a plain summary object; turning it into text or a push
message is the formatter's job.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from care_engine.core.config_manager import Config
from care_engine.models.common import align_instant
from care_engine.models.digest import DigestSummary, DigestWindow, Photo, SharedNote, Subject, SubjectDigest
from care_engine.models.enums import NoticeKind
from care_engine.models.items import Notice
from care_engine.models.snapshot import CareSnapshot
from care_engine.processors.due_resolver import next_digest_delivery
from care_engine.processors.priority_sorter import PrioritySorter
from care_engine.processors.urgency_classifier import ThresholdsLike, classify_inventory, normalize_thresholds
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


class DigestAggregator:
    """Rolls a snapshot up into a DigestSummary for one window."""

    def __init__(self, tz: Any = None, sorter: Optional[PrioritySorter] = None):
        self.tz = tz
        self.sorter = sorter or PrioritySorter(tz=tz)
        self.abnormal_answers = self.sorter.abnormal_answers

    def build(
        self,
        window: DigestWindow,
        snapshot: CareSnapshot,
        thresholds: ThresholdsLike = None,
        highlight_photos_enabled: bool = False,
    ) -> DigestSummary:
        """
        Build the digest.

        Args:
            window: Reporting window; its end is the reference instant
            snapshot: Household state
            thresholds: Inventory thresholds (normalized here)
            highlight_photos_enabled: Capability flag for photo highlights

        Returns:
            DigestSummary; ``is_empty`` is True when there is nothing to report
        """
        now = window.end
        t = normalize_thresholds(thresholds)

        per_subject = [self._subject_digest(subject, snapshot, window) for subject in self._subjects(snapshot)]
        abnormal_count = sum(s.abnormal_count for s in per_subject)

        stock_warnings = [s for s in classify_inventory(snapshot.inventory, t) if s.needs_attention]

        open_tasks = [task for task in snapshot.care_tasks if task.is_open]
        open_memos = [task for task in snapshot.memos if task.is_open]
        top_tasks = self.sorter.rank(open_tasks, now)[:Config.DIGEST_TOP_TASKS]
        top_memos = self.sorter.rank(open_memos, now)[:Config.DIGEST_TOP_MEMOS]

        recent_notes = self._recent_notes(snapshot.notes, now)

        highlight_photos: List[Photo] = []
        if highlight_photos_enabled:
            highlight_photos = self._highlight_photos(snapshot.photos, window, abnormal_count > 0)

        summary = DigestSummary(
            window=window,
            per_subject=per_subject,
            stock_warnings=stock_warnings,
            top_tasks=top_tasks,
            top_memos=top_memos,
            recent_notes=recent_notes,
            highlight_photos=highlight_photos,
            abnormal_count=abnormal_count,
            scheduled_for=next_digest_delivery(now, self.tz),
            thresholds=t,
        )

        if summary.is_empty:
            logger.info("Digest window contains no data")
        else:
            logger.info(
                f"Digest built: {abnormal_count} abnormal answers, {len(stock_warnings)} stock warnings, "
                f"{len(top_tasks)} open tasks, {len(top_memos)} open memos, {len(highlight_photos)} photos"
            )
        return summary

    def _subjects(self, snapshot: CareSnapshot) -> List[Subject]:
        if snapshot.subjects:
            return list(snapshot.subjects)
        # No subject list: fall back to whoever the notices were answered for
        seen: Dict[str, Subject] = {}
        for notice in snapshot.notices:
            key = notice.subject_id or ""
            if key not in seen:
                seen[key] = Subject(id=key, name=key or "default")
        return list(seen.values())

    def _subject_digest(self, subject: Subject, snapshot: CareSnapshot, window: DigestWindow) -> SubjectDigest:
        notices: List[Notice] = [
            n for n in snapshot.notices
            if (n.subject_id or "") == subject.id and n.enabled and window.contains(n.recorded_at)
        ]
        abnormal = [n for n in notices if n.is_abnormal(self.abnormal_answers)]
        moments = [n for n in notices if n.kind == NoticeKind.MOMENT and n.value]
        return SubjectDigest(subject=subject, abnormal_answers=abnormal, moments=moments)

    def _recent_notes(self, notes: List[SharedNote], now) -> List[SharedNote]:
        dated = [n for n in notes if isinstance(n.at, datetime)]
        if len(dated) < len(notes):
            logger.warning(f"Skipping {len(notes) - len(dated)} note(s) without a readable timestamp")
        ordered = sorted(dated, key=lambda n: align_instant(n.at, now), reverse=True)
        return ordered[:Config.DIGEST_RECENT_NOTES]

    def _highlight_photos(self, photos: List[Photo], window: DigestWindow, abnormal_seen: bool) -> List[Photo]:
        pool = [p for p in photos if not p.archived and window.contains(p.taken_at)]
        if abnormal_seen:
            pool = [p for p in pool if any(tag in Config.HIGHLIGHT_TAGS for tag in p.effective_tags)]

        pool.sort(key=lambda p: align_instant(p.taken_at, window.end), reverse=True)

        picked: List[Photo] = []
        seen_ids = set()
        for photo in pool:
            if photo.id in seen_ids:
                continue
            seen_ids.add(photo.id)
            picked.append(photo)
            if len(picked) >= Config.DIGEST_HIGHLIGHT_PHOTOS:
                break
        return picked
