# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data for all tests.

All instants are fixed in Asia/Tokyo so results never depend on the
machine clock: "now" is Wednesday 2025-06-18 14:00 JST.
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

import pytz

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from care_engine.models import (
    CareTask, Notice, InventoryItem, InventoryThresholds, Subject, Photo,
    SharedNote, CareSnapshot, CareContext, Cadence, TimeSlot, Category, NoticeKind,
)


# ==================== Time Fixtures ====================

@pytest.fixture
def tz():
    """Fixed zone without DST."""
    return pytz.timezone("Asia/Tokyo")


@pytest.fixture
def now(tz):
    """Wednesday afternoon."""
    return tz.localize(datetime(2025, 6, 18, 14, 0))


@pytest.fixture
def at(tz):
    """Factory for local instants in the fixed zone."""
    def _at(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
        return tz.localize(datetime(year, month, day, hour, minute))

    return _at


# ==================== Item Factories ====================

@pytest.fixture
def create_task():
    """Factory fixture for creating care tasks."""
    def _create(
        title: str = "Test Task",
        cadence: Cadence = Cadence.DAILY,
        time_slot: TimeSlot = TimeSlot.ANY,
        due_at: datetime = None,
        done: bool = False,
        later: bool = False,
        category: Category = Category.CARE,
        task_id: str = None,
    ) -> CareTask:
        return CareTask(
            id=task_id or f"t_{title.lower().replace(' ', '_')}",
            title=title,
            cadence=cadence,
            time_slot=time_slot,
            due_at=due_at,
            done=done,
            later=later,
            category=category,
        )

    return _create


@pytest.fixture
def create_memo(create_task):
    """Factory fixture for creating memo tasks."""
    def _create(title: str = "Test Memo", due_at: datetime = None, **kwargs) -> CareTask:
        return create_task(title=title, cadence=Cadence.ONCE, due_at=due_at, category=Category.MEMO, **kwargs)

    return _create


@pytest.fixture
def create_notice():
    """Factory fixture for creating notices and moments."""
    def _create(
        title: str = "Appetite",
        kind: NoticeKind = NoticeKind.NOTICE,
        value: str = None,
        recorded_at: datetime = None,
        choices=("normal", "slightly off", "concerning"),
        optional: bool = False,
        enabled: bool = True,
        seasonal: bool = False,
        season=None,
        done: bool = False,
        later: bool = False,
        subject_id: str = "c1",
        notice_id: str = None,
    ) -> Notice:
        return Notice(
            id=notice_id or f"n_{title.lower().replace(' ', '_')}",
            title=title,
            kind=kind,
            enabled=enabled,
            optional=optional,
            choices=list(choices),
            seasonal=seasonal,
            season=season,
            value=value,
            recorded_at=recorded_at,
            done=done,
            later=later,
            subject_id=subject_id,
        )

    return _create


@pytest.fixture
def create_moment(create_notice):
    """Factory fixture for creating moment prompts."""
    def _create(title: str = "Best face today", **kwargs) -> Notice:
        kwargs.setdefault("choices", ())
        kwargs.setdefault("optional", True)
        return create_notice(title=title, kind=NoticeKind.MOMENT, **kwargs)

    return _create


@pytest.fixture
def create_inventory():
    """Factory fixture for creating inventory items."""
    def _create(label: str = "Dry food", low: float = 10, high: float = 14) -> InventoryItem:
        return InventoryItem(id=f"i_{label.lower().replace(' ', '_')}", label=label, remaining_days=(low, high))

    return _create


# ==================== Scenario Fixtures ====================

@pytest.fixture
def five_care_tasks(create_task):
    """Five pending daily tasks with distinct slots."""
    return [
        create_task("Breakfast", time_slot=TimeSlot.MORNING),
        create_task("Water bowl", time_slot=TimeSlot.MORNING),
        create_task("Dinner", time_slot=TimeSlot.EVENING),
        create_task("Litter box", time_slot=TimeSlot.EVENING),
        create_task("Brushing", time_slot=TimeSlot.ANY),
    ]


@pytest.fixture
def busy_day(five_care_tasks, create_notice, create_moment, create_memo, now):
    """5 tasks, 1 abnormal notice, 1 moment, 2 memos (all pending)."""
    notices = [
        create_notice("Appetite", value="concerning", recorded_at=now - timedelta(hours=1)),
        create_moment("Best face today"),
    ]
    memos = [
        create_memo("Ask vet about teeth", due_at=now + timedelta(days=2)),
        create_memo("Buy new brush", due_at=now + timedelta(days=3)),
    ]
    return five_care_tasks + memos, notices


@pytest.fixture
def sample_snapshot(busy_day, create_inventory, now):
    """Snapshot with one subject, stock, photos and notes."""
    tasks, notices = busy_day
    return CareSnapshot(
        tasks=tasks,
        notices=notices,
        inventory=[
            create_inventory("Dry food", 1, 3),
            create_inventory("Litter", 20, 30),
        ],
        subjects=[Subject(id="c1", name="Mugi")],
        photos=[
            Photo(id="p1", taken_at=now - timedelta(days=1), subject_id="c1", confirmed_tags=["food"]),
            Photo(id="p2", taken_at=now - timedelta(days=2), subject_id="c1", tags=["sleeping"]),
        ],
        notes=[
            SharedNote(at=now - timedelta(days=10), text="Vet on Friday", author="Mom"),
            SharedNote(at=now - timedelta(hours=5), text="Refilled water", author="Dad"),
        ],
    )


@pytest.fixture
def context():
    """Runtime context with default thresholds and both capabilities on."""
    return CareContext(
        timezone="Asia/Tokyo",
        thresholds=InventoryThresholds(),
        seasonal_deck_enabled=True,
        highlight_photos_enabled=True,
    )


# ==================== Pytest Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
