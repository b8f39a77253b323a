# File: care_engine/models/config.py
"""
Runtime context handed to the engine: zone, thresholds and capability flags.
"""

from dataclasses import dataclass, field
from typing import Any
from .common import parse_bool, resolve_timezone
from .inventory import InventoryThresholds, thresholds_from_dict


@dataclass
class CareContext:
    """Everything a computation needs besides the snapshot and the instant."""
    timezone: Any = "Asia/Tokyo"
    thresholds: InventoryThresholds = field(default_factory=InventoryThresholds)
    seasonal_deck_enabled: bool = False
    highlight_photos_enabled: bool = False

    def __post_init__(self):
        if isinstance(self.thresholds, dict) or self.thresholds is None:
            self.thresholds = thresholds_from_dict(self.thresholds)

    @property
    def tz(self):
        """The resolved tzinfo (pytz zone for names)."""
        return resolve_timezone(self.timezone)

    @classmethod
    def from_dict(cls, data: dict) -> 'CareContext':
        """Create CareContext from dictionary (e.g., app settings)."""
        return cls(
            timezone=data.get('timezone', 'Asia/Tokyo'),
            thresholds=thresholds_from_dict(data.get('thresholds')),
            seasonal_deck_enabled=parse_bool(data.get('seasonal_deck_enabled')),
            highlight_photos_enabled=parse_bool(data.get('highlight_photos_enabled')),
        )

    @classmethod
    def from_config(cls) -> 'CareContext':
        """Create CareContext from the environment-backed Config."""
        from care_engine.core.config_manager import Config

        return cls(
            timezone=Config.TIMEZONE,
            thresholds=InventoryThresholds(
                soon=Config.INV_SOON_DAYS,
                urgent=Config.INV_URGENT_DAYS,
                critical=Config.INV_CRITICAL_DAYS,
            ),
            seasonal_deck_enabled=Config.SEASONAL_DECK_ENABLED,
            highlight_photos_enabled=Config.HIGHLIGHT_PHOTOS_ENABLED,
        )
