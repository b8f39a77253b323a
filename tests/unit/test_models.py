# File: tests/unit/test_models.py
"""
Unit tests for data models.
Tests dataclass normalization, factories and value objects.
"""

import pytest
from dataclasses import replace
from datetime import datetime, timedelta
from care_engine.models.items import CareTask, Notice, task_from_dict, notice_from_dict, memo_from_text, memo_from_event
from care_engine.models.enums import Cadence, TimeSlot, Category, NoticeKind, ItemState, InventoryAction, Season
from care_engine.models.inventory import InventoryItem, InventoryThresholds, thresholds_from_dict, inventory_from_dict
from care_engine.models.digest import Photo, DigestWindow
from care_engine.models.config import CareContext
from care_engine.models.snapshot import snapshot_from_dict


# ==================== CareTask Tests ====================

class TestCareTask:
    """Tests for CareTask dataclass."""

    def test_task_creation(self):
        """Test basic task creation with defaults."""
        task = CareTask(id="t1", title="Breakfast")

        assert task.cadence is None
        assert task.time_slot == TimeSlot.ANY
        assert task.category == Category.CARE
        assert task.state == ItemState.PENDING

    def test_string_enums_are_coerced(self):
        """Test that raw strings become enum members, case-insensitively."""
        task = CareTask(id="t1", title="Nails", cadence="Weekly", time_slot="EVENING", category="health")

        assert task.cadence == Cadence.WEEKLY
        assert task.time_slot == TimeSlot.EVENING
        assert task.category == Category.HEALTH

    def test_unknown_values_fall_back(self):
        """Test that unknown strings never raise."""
        task = CareTask(id="t1", title="Odd", cadence="fortnightly", time_slot="noon", category="TOYS")

        assert task.cadence is None
        assert task.time_slot == TimeSlot.ANY
        assert task.category == Category.CARE

    def test_done_wins_over_later(self):
        """Test that done and later are never both set."""
        task = CareTask(id="t1", title="Both", done=True, later=True)

        assert task.done is True
        assert task.later is False
        assert task.state == ItemState.DONE

    def test_replace_keeps_exclusive_states(self):
        """Test normalization also runs on dataclasses.replace."""
        task = replace(CareTask(id="t1", title="Later", later=True), done=True)

        assert task.later is False

    def test_due_at_string_is_parsed(self):
        """Test ISO strings with 'Z' are parsed into aware datetimes."""
        task = CareTask(id="t1", title="Vet", due_at="2025-06-20T09:00:00Z")

        assert isinstance(task.due_at, datetime)
        assert task.due_at.utcoffset() == timedelta(0)

    def test_task_from_dict(self):
        """Test creating task from the app's stored shape."""
        task = task_from_dict({
            'id': 'c1',
            'title': 'Dinner',
            'cadence': 'daily',
            'due': 'evening',
            'group': 'CARE',
            'done': 'yes',
        })

        assert task.time_slot == TimeSlot.EVENING
        assert task.cadence == Cadence.DAILY
        assert task.done is True

    def test_to_dict(self):
        """Test conversion to dictionary."""
        result = CareTask(id="t1", title="Brush", cadence=Cadence.MONTHLY).to_dict()

        assert result['cadence'] == "monthly"
        assert result['category'] == "CARE"
        assert result['due_at'] is None


# ==================== Notice Tests ====================

class TestNotice:
    """Tests for Notice dataclass."""

    def test_notice_defaults(self):
        """Test notices recur daily and have no explicit due."""
        notice = Notice(id="n1", title="Appetite")

        assert notice.cadence == Cadence.DAILY
        assert notice.due_at is None
        assert notice.enabled is True

    @pytest.mark.parametrize("value", ["slightly off", "concerning", "yes"])
    def test_abnormal_answers(self, value):
        """Test every configured abnormal answer is detected."""
        notice = Notice(id="n1", title="Vomit", choices=["no", "yes"], value=value)

        assert notice.is_abnormal() is True

    def test_normal_answer_is_not_abnormal(self):
        """Test an ordinary answer."""
        notice = Notice(id="n1", title="Appetite", choices=["normal", "concerning"], value="normal")

        assert notice.is_abnormal() is False

    def test_matching_is_exact(self):
        """Test that abnormal matching is exact string equality."""
        notice = Notice(id="n1", title="Appetite", choices=["Concerning"], value="Concerning")

        assert notice.is_abnormal() is False

    def test_empty_choices_never_abnormal(self):
        """Test that a notice without choices has no urgency."""
        notice = Notice(id="n1", title="Free text", choices=[], value="concerning")

        assert notice.is_abnormal() is False

    def test_moment_never_abnormal(self):
        """Test that moments are not health observations."""
        moment = Notice(id="m1", title="Best face", kind=NoticeKind.MOMENT, choices=["yes"], value="yes")

        assert moment.is_abnormal() is False

    def test_explicit_answer_set(self):
        """Test a caller-supplied answer set overrides the configured one."""
        notice = Notice(id="n1", title="Appetite", choices=["normal", "off"], value="off")

        assert notice.is_abnormal() is False
        assert notice.is_abnormal(frozenset({"off"})) is True

    def test_notice_from_dict(self):
        """Test merged definition + log record."""
        notice = notice_from_dict({
            'id': 'sn_1',
            'title': 'Heat check',
            'kind': 'notice',
            'seasonal': True,
            'season': 'summer',
            'choices': ['fine', 'slightly off'],
            'value': 'slightly off',
            'at': '2025-06-18T10:00:00+09:00',
        })

        assert notice.season == Season.SUMMER
        assert notice.recorded_at.hour == 10
        assert notice.is_abnormal() is True


# ==================== Memo Tests ====================

class TestMemoFromText:
    """Tests for memo creation from free text."""

    def test_memo_due_three_days_out_at_evening(self, now, tz):
        """Test the memo due instant."""
        memo = memo_from_text("  Ask vet about teeth  ", now, tz=tz, memo_id="q_1")

        assert memo.id == "q_1"
        assert memo.title == "Ask vet about teeth"
        assert memo.category == Category.MEMO
        assert memo.cadence == Cadence.ONCE
        assert memo.optional is True
        assert memo.is_pending
        assert memo.due_at == tz.localize(datetime(2025, 6, 21, 20, 0))

    def test_blank_text_returns_none(self, now):
        """Test that blank text creates nothing."""
        assert memo_from_text("   ", now) is None
        assert memo_from_text(None, now) is None

    def test_generated_id(self, now):
        """Test a generated id when none is given."""
        memo = memo_from_text("Buy brush", now)

        assert memo.id.startswith("q_")

    def test_deferred_memo(self, now):
        """Test a memo filed straight under later."""
        memo = memo_from_text("Buy brush", now, deferred=True)

        assert memo.later is True
        assert memo.state == ItemState.LATER


class TestMemoFromEvent:
    """Tests for preparation memos built from calendar events."""

    def test_due_evening_before_event(self, tz, at):
        """Test the memo falls due at 20:00 the day before the event."""
        memo = memo_from_event("Vet visit", at(2025, 6, 20, 11, 0), subject_name="Mugi", tz=tz, memo_id="q_ev")

        assert memo.id == "q_ev"
        assert memo.title == "Vet visit: Mugi (things to bring / ask)"
        assert memo.category == Category.MEMO
        assert memo.cadence == Cadence.ONCE
        assert memo.optional is True
        assert memo.is_pending
        assert memo.due_at == at(2025, 6, 19, 20, 0)

    def test_event_time_string_in_local_zone(self, tz):
        """Test an ISO event time is read in the caller's zone before stepping back a day."""
        memo = memo_from_event("Grooming", "2025-06-01T01:30:00+00:00", tz=tz)

        assert memo.due_at == tz.localize(datetime(2025, 5, 31, 20, 0))
        assert memo.title == "Grooming: cat (things to bring / ask)"
        assert memo.id.endswith("_ev")

    def test_deferred_event_memo(self, at, tz):
        """Test the deferred flag."""
        memo = memo_from_event("Vet visit", at(2025, 6, 20, 11, 0), tz=tz, deferred=True)

        assert memo.later is True

    @pytest.mark.parametrize("title, event_at", [
        ("   ", "2025-06-20T11:00:00+09:00"),
        ("Vet visit", "someday"),
        ("Vet visit", None),
    ])
    def test_unusable_event_returns_none(self, title, event_at):
        """Test blank titles and unreadable times create nothing."""
        assert memo_from_event(title, event_at) is None


# ==================== Inventory Tests ====================

class TestInventoryThresholds:
    """Tests for threshold normalization."""

    def test_defaults(self):
        """Test default thresholds."""
        t = InventoryThresholds()

        assert (t.soon, t.urgent, t.critical) == (7, 3, 1)

    def test_urgent_above_soon_is_clamped(self):
        """Test the misordered example {soon: 2, urgent: 9, critical: 1}."""
        t = InventoryThresholds(soon=2, urgent=9, critical=1)

        assert (t.soon, t.urgent, t.critical) == (2, 2, 1)

    def test_bounds_and_flooring(self):
        """Test clamping into [1, 60] and flooring floats."""
        t = InventoryThresholds(soon=99, urgent=4.9, critical=0)

        assert (t.soon, t.urgent, t.critical) == (60, 4, 1)

    def test_non_numeric_falls_back_to_lower_bound(self):
        """Test garbage values."""
        t = InventoryThresholds(soon="lots", urgent=float("nan"), critical=None)

        assert (t.soon, t.urgent, t.critical) == (1, 1, 1)

    def test_replace_renormalizes(self):
        """Test that copies are normalized too."""
        t = replace(InventoryThresholds(), critical=50)

        assert t.critical == t.urgent == 3

    def test_from_dict_uses_defaults_for_missing_keys(self):
        """Test partial settings."""
        t = thresholds_from_dict({'soon': 10, 'urgent': None})

        assert (t.soon, t.urgent, t.critical) == (10, 3, 1)


class TestInventoryItem:
    """Tests for InventoryItem dataclass."""

    def test_single_number_becomes_range(self):
        """Test that a single estimate is widened to (n, n)."""
        item = InventoryItem(id="i1", label="Food", remaining_days=5)

        assert item.remaining_days == (5, 5)
        assert item.lower_bound == 5

    def test_from_dict_app_shape(self):
        """Test the stored shape with 'name' and 'range'."""
        item = inventory_from_dict({'id': 'i1', 'name': 'Litter', 'range': [4, 9], 'last_action': 'still'})

        assert item.label == "Litter"
        assert item.remaining_days == (4, 9)
        assert item.last_action == InventoryAction.STILL

    def test_unparseable_range_is_zero(self):
        """Test that bad estimates never raise."""
        item = InventoryItem(id="i1", label="Treats", remaining_days=["?", None])

        assert item.remaining_days == (0, 0)


# ==================== Digest Model Tests ====================

class TestPhoto:
    """Tests for Photo tags."""

    def test_confirmed_tags_win(self):
        """Test confirmed tags override suggestions and legacy tags."""
        photo = Photo(id="p1", confirmed_tags=["meal"], suggested_tags=["sleeping"], tags=["old"])

        assert photo.effective_tags == ["meal"]

    def test_suggested_then_legacy(self):
        """Test the fallback order without confirmed tags."""
        assert Photo(id="p1", suggested_tags=["condition"], tags=["old"]).effective_tags == ["condition"]
        assert Photo(id="p2", tags=["old"]).effective_tags == ["old"]


class TestDigestWindow:
    """Tests for DigestWindow."""

    def test_window_is_seven_days(self, now):
        """Test window bounds."""
        window = DigestWindow.ending_at(now, 7)

        assert window.end == now
        assert window.end - window.start == timedelta(days=7)

    def test_contains_aligns_naive_instants(self, now):
        """Test naive instants are read in the window's zone."""
        window = DigestWindow.ending_at(now, 7)

        assert window.contains(datetime(2025, 6, 17, 9, 0)) is True
        assert window.contains(datetime(2025, 6, 1, 9, 0)) is False
        assert window.contains(None) is False

    def test_window_is_immutable(self, now):
        """Test the window cannot be changed after construction."""
        window = DigestWindow.ending_at(now)

        with pytest.raises(Exception):
            window.end = now + timedelta(days=1)


# ==================== Context Tests ====================

class TestCareContext:
    """Tests for CareContext."""

    def test_from_dict(self):
        """Test building a context from settings."""
        ctx = CareContext.from_dict({
            'timezone': 'Europe/Amsterdam',
            'thresholds': {'soon': 2, 'urgent': 9, 'critical': 1},
            'seasonal_deck_enabled': 'true',
        })

        assert ctx.tz.zone == 'Europe/Amsterdam'
        assert ctx.thresholds.urgent == 2
        assert ctx.seasonal_deck_enabled is True
        assert ctx.highlight_photos_enabled is False

    def test_from_config(self):
        """Test building a context from Config."""
        ctx = CareContext.from_config()

        assert ctx.thresholds.critical <= ctx.thresholds.urgent <= ctx.thresholds.soon


# ==================== Snapshot Tests ====================

class TestSnapshotFromDict:
    """Tests for snapshot loading."""

    def test_bad_records_are_skipped(self, caplog):
        """Test that one bad record never drops the snapshot."""
        snapshot = snapshot_from_dict({
            'tasks': [{'id': 't1', 'title': 'Dinner', 'cadence': 'daily'}, "not a task"],
            'notes': [{'text': 'no timestamp'}, {'at': '2025-06-18T09:00:00+09:00', 'text': 'ok'}],
        })

        assert [t.id for t in snapshot.tasks] == ['t1']
        assert len(snapshot.notes) == 1
        assert "Failed to convert" in caplog.text

    def test_notice_logs_are_merged_per_subject(self):
        """Test definitions merged with each subject's latest answer."""
        snapshot = snapshot_from_dict({
            'notice_defs': [{'id': 'n1', 'title': 'Appetite', 'choices': ['normal', 'concerning']}],
            'notice_logs': {
                'c1': {'n1': {'value': 'concerning', 'done': True}},
                'c2': {},
            },
        })

        by_subject = {n.subject_id: n for n in snapshot.notices}
        assert by_subject['c1'].value == 'concerning'
        assert by_subject['c1'].done is True
        assert by_subject['c2'].value is None
        assert snapshot.notices_for('c2')[0].title == 'Appetite'

    def test_definitions_without_logs(self):
        """Test a fresh household with no answers still gets its notices."""
        snapshot = snapshot_from_dict({
            'notice_defs': [{'id': 'n1', 'title': 'Appetite', 'choices': ['normal', 'concerning']}],
            'notice_logs': {},
        })

        assert len(snapshot.notices) == 1
        assert snapshot.notices[0].subject_id is None
        assert snapshot.notices[0].is_pending

    def test_subjects_without_logs_get_unanswered_notices(self):
        """Test every listed subject gets the definitions, answered or not."""
        snapshot = snapshot_from_dict({
            'notice_defs': [{'id': 'n1', 'title': 'Appetite', 'choices': ['normal', 'concerning']}],
            'notice_logs': {'mugi': {'n1': {'value': 'normal', 'done': True}}},
            'subjects': [{'id': 'mugi', 'name': 'Mugi'}, {'id': 'kuro', 'name': 'Kuro'}],
        })

        assert [n.subject_id for n in snapshot.notices] == ['mugi', 'kuro']
        assert snapshot.notices_for('mugi')[0].done is True
        kuro = snapshot.notices_for('kuro')[0]
        assert kuro.value is None
        assert kuro.is_pending

    def test_malformed_logs_are_ignored(self):
        """Test a log that is not a mapping leaves the notice unanswered."""
        snapshot = snapshot_from_dict({
            'notice_defs': [{'id': 'n1', 'title': 'Appetite'}],
            'notice_logs': {'mugi': ['not', 'a', 'log'], 'sora': {'n1': 'normal'}},
        })

        assert [n.subject_id for n in snapshot.notices] == ['mugi', 'sora']
        assert all(n.value is None for n in snapshot.notices)

    def test_empty_input(self):
        """Test an empty snapshot."""
        snapshot = snapshot_from_dict({})

        assert snapshot.tasks == []
        assert snapshot.inventory == []
