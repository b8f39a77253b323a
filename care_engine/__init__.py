"""
Care prioritization and scheduling engine for a household pet-care tracker.
"""

from care_engine.core.engine import CareEngine
from care_engine.models import CareContext, CareSnapshot, snapshot_from_dict

__version__ = "1.0.0"

__all__ = ["CareEngine", "CareContext", "CareSnapshot", "snapshot_from_dict"]
