# File: care_engine/processors/inventory_actions.py

from dataclasses import replace
from typing import Any

from care_engine.core.config_manager import Config
from care_engine.models.common import coerce_enum
from care_engine.models.enums import InventoryAction
from care_engine.models.inventory import InventoryItem
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


def apply_inventory_action(item: InventoryItem, action: Any) -> InventoryItem:
    """
    Apply a quick stock action and return the updated copy.

    ``bought`` resets the estimate to a fresh pack; ``still`` stretches the
    current estimate. Unknown actions leave the item as it was.
    """
    resolved = coerce_enum(action, InventoryAction, None)

    if resolved == InventoryAction.BOUGHT:
        updated = replace(item, remaining_days=Config.RESTOCK_RANGE, last_action=resolved)
    elif resolved == InventoryAction.STILL:
        low, high = item.remaining_days
        extend_low, extend_high = Config.STILL_HAVE_EXTENSION
        updated = replace(
            item,
            remaining_days=(max(1, low + extend_low), high + extend_high),
            last_action=resolved,
        )
    else:
        logger.warning(f"Unknown inventory action {action!r} for '{item.label}', leaving it unchanged")
        return item

    logger.debug(f"{item.label}: {resolved.value} -> {updated.remaining_days[0]}-{updated.remaining_days[1]} days")
    return updated
