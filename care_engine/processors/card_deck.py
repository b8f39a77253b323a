# File: care_engine/processors/card_deck.py

from datetime import datetime
from typing import Any, List, Optional, Tuple

from care_engine.models.enums import DeckView
from care_engine.models.common import coerce_enum
from care_engine.models.items import CareTask, Notice
from care_engine.models.queue import RankedItem
from care_engine.processors.priority_sorter import PrioritySorter
from care_engine.processors.season_gate import active_notices
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


def _in_view(item: Any, view: DeckView) -> bool:
    if view == DeckView.DONE:
        return item.done
    if view == DeckView.LATER:
        return not item.done and item.later
    return not item.done and not item.later


def build_deck(
    tasks: List[CareTask],
    notices: List[Notice],
    now: datetime,
    view: Any = DeckView.TODO,
    tz: Any = None,
    sorter: Optional[PrioritySorter] = None,
) -> List[RankedItem]:
    """Swipe-deck contents for one view (todo, later or done), ranked for display."""
    view = coerce_enum(view, DeckView, DeckView.TODO)
    sorter = sorter or PrioritySorter(tz=tz)

    candidates = list(tasks) + active_notices(notices)
    deck = sorter.rank([item for item in candidates if _in_view(item, view)], now)
    logger.debug(f"Deck '{view.value}': {len(deck)} cards")
    return deck


def current_card(deck: List[RankedItem], cursor: int = 0) -> Optional[RankedItem]:
    """Card under the cursor; the cursor is clamped into the deck. None for an empty deck."""
    if not deck:
        return None
    index = min(max(cursor, 0), len(deck) - 1)
    return deck[index]


def remaining_counts(tasks: List[CareTask], notices: List[Notice]) -> Tuple[int, int]:
    """(remaining_all, remaining_now): items not done, and items still pending."""
    items = list(tasks) + active_notices(notices)
    remaining_all = sum(1 for item in items if not item.done)
    remaining_now = sum(1 for item in items if item.is_pending)
    return remaining_all, remaining_now
