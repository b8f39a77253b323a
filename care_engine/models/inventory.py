# File: care_engine/models/inventory.py

from dataclasses import dataclass
from typing import Any, Optional, Tuple
from .enums import InventoryAction, StockTier
from .common import clamp_int, coerce_enum

DEFAULT_SOON_DAYS = 7
DEFAULT_URGENT_DAYS = 3
DEFAULT_CRITICAL_DAYS = 1


def _as_days(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _as_range(value: Any) -> Tuple[float, float]:
    """Accept ``n``, ``[low, high]`` or ``(low, high)`` and return a (low, high) pair."""
    if isinstance(value, (list, tuple)):
        if not value:
            return (0, 0)
        low = value[0]
        high = value[1] if len(value) > 1 else value[0]
        return (_as_days(low), _as_days(high))
    return (_as_days(value), _as_days(value))


@dataclass
class InventoryThresholds:
    """Day thresholds for stock tiers; always ordered critical <= urgent <= soon."""
    soon: int = DEFAULT_SOON_DAYS
    urgent: int = DEFAULT_URGENT_DAYS
    critical: int = DEFAULT_CRITICAL_DAYS

    def __post_init__(self):
        from care_engine.core.config_manager import Config
        low, high = Config.THRESHOLD_BOUNDS
        # Clamp from the outside in so raw ordering is never trusted
        self.soon = clamp_int(self.soon, low, high)
        self.urgent = clamp_int(self.urgent, low, self.soon)
        self.critical = clamp_int(self.critical, low, self.urgent)

    def to_dict(self) -> dict:
        return {'soon': self.soon, 'urgent': self.urgent, 'critical': self.critical}


def thresholds_from_dict(data: Optional[dict]) -> InventoryThresholds:
    """Create InventoryThresholds from a (possibly partial) dictionary."""
    data = data or {}

    def _pick(key: str, default: int):
        value = data.get(key)
        return default if value is None else value

    return InventoryThresholds(
        soon=_pick('soon', DEFAULT_SOON_DAYS),
        urgent=_pick('urgent', DEFAULT_URGENT_DAYS),
        critical=_pick('critical', DEFAULT_CRITICAL_DAYS),
    )


@dataclass
class InventoryItem:
    """A consumable with an estimated range of remaining days."""
    id: str
    label: str
    remaining_days: Tuple[float, float] = (0, 0)
    last_action: Optional[InventoryAction] = None

    def __post_init__(self):
        self.remaining_days = _as_range(self.remaining_days)
        self.last_action = coerce_enum(self.last_action, InventoryAction, None)

    @property
    def lower_bound(self):
        """Conservative estimate used for tiering."""
        return self.remaining_days[0]

    @property
    def upper_bound(self):
        return self.remaining_days[1]

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'label': self.label,
            'remaining_days': list(self.remaining_days),
            'last_action': self.last_action.value if self.last_action else None,
        }


@dataclass
class StockStatus:
    """An inventory item paired with its derived tier."""
    item: InventoryItem
    tier: StockTier

    @property
    def needs_attention(self) -> bool:
        return self.tier != StockTier.OK


def inventory_from_dict(data: dict) -> InventoryItem:
    """Create InventoryItem from dictionary.

    The app stores the range as ``range`` and the label as ``name``.
    """
    remaining = data.get('remaining_days', data.get('range', (0, 0)))
    return InventoryItem(
        id=str(data.get('id', '')),
        label=str(data.get('label', data.get('name', 'Unnamed item'))),
        remaining_days=remaining,
        last_action=data.get('last_action'),
    )
