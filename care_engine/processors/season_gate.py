# File: care_engine/processors/season_gate.py

from dataclasses import replace
from datetime import date
from typing import Iterable, List, Optional

from care_engine.models.enums import Season
from care_engine.models.items import Notice
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)

SEASON_BY_MONTH = {
    3: Season.SPRING, 4: Season.SPRING, 5: Season.SPRING,
    6: Season.SUMMER, 7: Season.SUMMER, 8: Season.SUMMER,
    9: Season.AUTUMN, 10: Season.AUTUMN, 11: Season.AUTUMN,
}


def season_for(day: date) -> Season:
    """Meteorological season of ``day`` (a date or datetime)."""
    return SEASON_BY_MONTH.get(day.month, Season.WINTER)


def is_in_season(notice: Notice, season: Optional[Season], seasonal_deck_enabled: bool) -> bool:
    return bool(seasonal_deck_enabled and season is not None and notice.season == season)


def apply_seasonal_gating(
    notices: Iterable[Notice],
    season: Optional[Season],
    seasonal_deck_enabled: bool,
) -> List[Notice]:
    """Enable seasonal notices only for the current season and a granted deck.

    Non-seasonal notices pass through untouched; seasonal ones are copied.
    """
    gated = []
    switched_on = 0
    for notice in notices:
        if not notice.seasonal:
            gated.append(notice)
            continue
        enabled = is_in_season(notice, season, seasonal_deck_enabled)
        switched_on += int(enabled)
        gated.append(replace(notice, enabled=enabled))

    logger.debug(
        f"Seasonal gating ({season.value if season else 'none'}, "
        f"deck {'on' if seasonal_deck_enabled else 'off'}): {switched_on} seasonal notices enabled"
    )
    return gated


def active_notices(notices: Iterable[Notice]) -> List[Notice]:
    """Enabled notices only."""
    return [n for n in notices if n.enabled]
