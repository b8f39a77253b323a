# File: care_engine/models/snapshot.py

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from .items import CareTask, Notice, task_from_dict, notice_from_dict
from .inventory import InventoryItem, inventory_from_dict
from .digest import Subject, Photo, SharedNote, subject_from_dict, photo_from_dict, note_from_dict
from care_engine.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class CareSnapshot:
    """Read-only view of the household state at one point in time."""
    tasks: List[CareTask] = field(default_factory=list)
    notices: List[Notice] = field(default_factory=list)
    inventory: List[InventoryItem] = field(default_factory=list)
    subjects: List[Subject] = field(default_factory=list)
    photos: List[Photo] = field(default_factory=list)
    notes: List[SharedNote] = field(default_factory=list)

    @property
    def memos(self) -> List[CareTask]:
        return [t for t in self.tasks if t.is_memo]

    @property
    def care_tasks(self) -> List[CareTask]:
        return [t for t in self.tasks if not t.is_memo]

    def notices_for(self, subject_id: str) -> List[Notice]:
        return [n for n in self.notices if n.subject_id == subject_id]


def _convert_all(raw_items: List[dict], factory: Callable[[dict], Any], label: str) -> list:
    converted = []
    for raw in raw_items or []:
        try:
            converted.append(factory(raw))
        except Exception as e:
            name = raw.get('title', raw.get('id', 'Unknown')) if isinstance(raw, dict) else 'Unknown'
            logger.error(f"Failed to convert {label} {name}: {e}")
    return converted


def _merge_notice_logs(
    definitions: List[dict],
    logs: Dict[str, Dict[str, dict]],
    subject_ids: Optional[List[str]] = None,
) -> List[dict]:
    """Expand notice definitions into one record per subject with its latest answer.

    Subjects come from the subject list plus any extra log keys. A subject
    with no log gets unanswered notices. With no subjects at all the
    definitions are emitted once, unassigned.
    """
    logs = logs or {}
    ordered: List[Optional[str]] = []
    for subject_id in list(subject_ids or []) + list(logs.keys()):
        if subject_id not in ordered:
            ordered.append(subject_id)
    if not ordered:
        ordered = [None]

    merged = []
    for subject_id in ordered:
        answers = logs.get(subject_id)
        if not isinstance(answers, dict):
            answers = {}
        for definition in definitions or []:
            if not isinstance(definition, dict):
                merged.append(definition)
                continue
            record = dict(definition)
            answer = answers.get(definition.get('id'))
            if isinstance(answer, dict):
                record.update(answer)
            record['subject_id'] = subject_id
            merged.append(record)
    return merged


def snapshot_from_dict(data: dict) -> CareSnapshot:
    """Build a typed snapshot from plain dicts (e.g. decoded JSON from the app store).

    Notices may arrive already merged (``notices``) or as definitions plus
    per-subject logs (``notice_defs`` + ``notice_logs``). Bad records are
    logged and skipped.
    """
    raw_notices = list(data.get('notices') or [])
    if data.get('notice_defs'):
        subject_ids = [s.get('id') for s in data.get('subjects') or [] if isinstance(s, dict) and s.get('id')]
        raw_notices.extend(_merge_notice_logs(data['notice_defs'], data.get('notice_logs'), subject_ids))

    snapshot = CareSnapshot(
        tasks=_convert_all(data.get('tasks'), task_from_dict, 'task'),
        notices=_convert_all(raw_notices, notice_from_dict, 'notice'),
        inventory=_convert_all(data.get('inventory'), inventory_from_dict, 'inventory item'),
        subjects=_convert_all(data.get('subjects'), subject_from_dict, 'subject'),
        photos=_convert_all(data.get('photos'), photo_from_dict, 'photo'),
        notes=_convert_all(data.get('notes'), note_from_dict, 'note'),
    )

    logger.info(
        f"Snapshot loaded: {len(snapshot.tasks)} tasks, {len(snapshot.notices)} notices, "
        f"{len(snapshot.inventory)} inventory items, {len(snapshot.subjects)} subjects"
    )
    return snapshot
