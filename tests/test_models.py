"""Tests for task identifiers, the Task entity and the task filter."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fakes import BASE_TIME, make_task
from pydantic import ValidationError

from bujo_mcp import (
    EMPTY_TASK_ID,
    AddTaskInput,
    EmptyTitleError,
    InvalidStateTransitionError,
    InvalidStatusError,
    ListTasksInput,
    ResponseFormat,
    SyncStatus,
    TaskFilter,
    TaskStatus,
    TaskValidationError,
    is_empty_task_id,
    new_task,
    new_task_id,
    parse_task_id,
)

# ============================================================================
# Identifiers
# ============================================================================


class TestTaskIds:
    """Tests for task id helpers."""

    def test_new_task_ids_are_unique_and_non_empty(self):
        ids = {new_task_id() for _ in range(100)}
        assert len(ids) == 100
        assert EMPTY_TASK_ID not in ids

    def test_parse_round_trips_canonical_form(self):
        task_id = new_task_id()
        assert parse_task_id(str(task_id)) == task_id

    def test_parse_accepts_surrounding_whitespace(self):
        task_id = new_task_id()
        assert parse_task_id(f"  {task_id}\n") == task_id

    @pytest.mark.parametrize("raw", ["", "   ", "not-a-uuid", "1234"])
    def test_parse_rejects_malformed(self, raw):
        with pytest.raises(TaskValidationError) as exc_info:
            parse_task_id(raw)
        assert exc_info.value.field == "id"

    def test_parse_rejects_empty_sentinel(self):
        with pytest.raises(TaskValidationError):
            parse_task_id(str(EMPTY_TASK_ID))

    def test_is_empty(self):
        assert is_empty_task_id(EMPTY_TASK_ID)
        assert is_empty_task_id(None)
        assert not is_empty_task_id(new_task_id())


# ============================================================================
# Enums
# ============================================================================


class TestEnums:
    """Tests for enum definitions."""

    def test_task_status_values(self):
        assert TaskStatus.POOL.value == "pool"
        assert TaskStatus.TODAY.value == "today"
        assert TaskStatus.DONE.value == "done"

    @pytest.mark.parametrize("value", ["pool", "today", "done", TaskStatus.DONE])
    def test_valid_statuses(self, value):
        assert TaskStatus.is_valid(value)

    @pytest.mark.parametrize("value", ["", "Pool", "archived", None, 3])
    def test_invalid_statuses(self, value):
        assert not TaskStatus.is_valid(value)

    def test_sync_status_values(self):
        assert {s.value for s in SyncStatus} == {"synced", "ahead", "behind", "diverged"}

    def test_response_format_values(self):
        assert ResponseFormat.JSON.value == "json"
        assert ResponseFormat.CONCISE.value == "concise"


# ============================================================================
# Task construction
# ============================================================================


class TestNewTask:
    """Tests for the new_task constructor."""

    def test_defaults(self):
        before = datetime.now(timezone.utc)
        task = new_task("Buy milk")
        after = datetime.now(timezone.utc)

        assert task.title == "Buy milk"
        assert task.status == TaskStatus.POOL
        assert task.tags == []
        assert task.notes == ""
        assert task.deferred_count == 0
        assert task.completed_at is None
        assert task.due_date is None
        assert not is_empty_task_id(task.id)
        assert before <= task.created_at <= after
        task.validate()

    def test_title_is_trimmed(self):
        assert new_task("  Write report \n").title == "Write report"

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_title_rejected(self, title):
        with pytest.raises(EmptyTitleError):
            new_task(title)

    def test_tags_are_copied(self):
        tags = ["work"]
        task = new_task("Report", tags)
        tags.append("leak")
        assert task.tags == ["work"]

    def test_optional_fields(self):
        due = datetime(2025, 3, 1, 17, 0, tzinfo=timezone.utc)
        task = new_task("Report", ["work"], notes="quarterly", due_date=due)
        assert task.notes == "quarterly"
        assert task.due_date == due

    def test_naive_datetimes_are_treated_as_utc(self):
        task = new_task("Report", due_date=datetime(2025, 3, 1, 17, 0))
        assert task.due_date == datetime(2025, 3, 1, 17, 0, tzinfo=timezone.utc)

    def test_id_and_created_at_are_frozen(self):
        task = new_task("Report")
        with pytest.raises(ValidationError):
            task.id = uuid.uuid4()
        with pytest.raises(ValidationError):
            task.created_at = BASE_TIME


# ============================================================================
# Task lifecycle
# ============================================================================


class TestTaskTransitions:
    """Tests for pick, defer and complete."""

    def test_pick_moves_pool_to_today(self):
        task = make_task()
        task.pick()
        assert task.status == TaskStatus.TODAY

    def test_pick_is_idempotent_for_today(self):
        task = make_task(status=TaskStatus.TODAY)
        task.pick()
        assert task.status == TaskStatus.TODAY
        assert task.deferred_count == 0

    def test_pick_done_is_rejected(self):
        task = make_task(status=TaskStatus.DONE)
        completed_at = task.completed_at
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            task.pick()
        assert exc_info.value.action == "pick"
        assert task.status == TaskStatus.DONE
        assert task.completed_at == completed_at

    def test_defer_moves_today_to_pool_and_counts(self):
        task = make_task(status=TaskStatus.TODAY)
        task.defer()
        assert task.status == TaskStatus.POOL
        assert task.deferred_count == 1

    def test_defer_pool_is_noop(self):
        task = make_task()
        task.defer()
        assert task.status == TaskStatus.POOL
        assert task.deferred_count == 0

    def test_defer_done_is_rejected(self):
        task = make_task(status=TaskStatus.DONE)
        with pytest.raises(InvalidStateTransitionError):
            task.defer()
        assert task.deferred_count == 0

    def test_deferred_count_accumulates(self):
        task = make_task()
        for _ in range(3):
            task.pick()
            task.defer()
        assert task.deferred_count == 3
        assert task.status == TaskStatus.POOL

    @pytest.mark.parametrize("status", [TaskStatus.POOL, TaskStatus.TODAY])
    def test_complete_sets_completed_at(self, status):
        task = make_task(status=status)
        before = datetime.now(timezone.utc)
        task.complete()
        assert task.status == TaskStatus.DONE
        assert task.completed_at >= before
        task.validate()

    def test_complete_is_idempotent(self):
        task = make_task()
        task.complete()
        first = task.completed_at
        task.complete()
        assert task.completed_at == first


# ============================================================================
# Task validation
# ============================================================================


class TestTaskValidate:
    """Tests for Task.validate."""

    def test_valid_task_passes(self):
        make_task(status=TaskStatus.DONE, tags=["a"]).validate()

    def test_empty_id(self):
        task = make_task().model_copy(update={"id": EMPTY_TASK_ID})
        with pytest.raises(TaskValidationError) as exc_info:
            task.validate()
        assert exc_info.value.field == "id"

    def test_blank_title(self):
        task = make_task()
        task.title = "   "
        with pytest.raises(EmptyTitleError):
            task.validate()

    def test_invalid_status(self):
        task = make_task()
        task.status = "archived"
        with pytest.raises(InvalidStatusError):
            task.validate()

    def test_negative_deferred_count(self):
        task = make_task()
        task.deferred_count = -1
        with pytest.raises(TaskValidationError) as exc_info:
            task.validate()
        assert exc_info.value.field == "deferred_count"

    def test_done_without_completed_at(self):
        task = make_task()
        task.status = TaskStatus.DONE
        with pytest.raises(TaskValidationError) as exc_info:
            task.validate()
        assert exc_info.value.field == "completed_at"

    def test_completed_at_without_done(self):
        task = make_task()
        task.completed_at = BASE_TIME
        with pytest.raises(TaskValidationError) as exc_info:
            task.validate()
        assert exc_info.value.field == "completed_at"

    def test_first_violation_wins(self):
        task = make_task()
        task.title = ""
        task.deferred_count = -5
        with pytest.raises(EmptyTitleError):
            task.validate()


# ============================================================================
# Filter
# ============================================================================


class TestTaskFilter:
    """Tests for TaskFilter.matches."""

    def test_empty_filter_matches_everything(self):
        task_filter = TaskFilter()
        assert task_filter.matches(make_task())
        assert task_filter.matches(make_task(status=TaskStatus.DONE))

    def test_status(self):
        task_filter = TaskFilter(status=TaskStatus.TODAY)
        assert task_filter.matches(make_task(status=TaskStatus.TODAY))
        assert not task_filter.matches(make_task())

    def test_tags_require_all(self):
        task_filter = TaskFilter(tags=["work", "urgent"])
        assert task_filter.matches(make_task(tags=["work", "urgent", "q1"]))
        assert not task_filter.matches(make_task(tags=["work"]))
        assert not task_filter.matches(make_task())

    def test_due_bounds_are_inclusive(self):
        low = BASE_TIME
        high = BASE_TIME + timedelta(days=7)
        task_filter = TaskFilter(due_after=low, due_before=high)

        assert task_filter.matches(make_task(due_date=low))
        assert task_filter.matches(make_task(due_date=high))
        assert not task_filter.matches(make_task(due_date=low - timedelta(seconds=1)))
        assert not task_filter.matches(make_task(due_date=high + timedelta(seconds=1)))

    @pytest.mark.parametrize("bound", ["due_after", "due_before"])
    def test_task_without_due_date_excluded_by_any_bound(self, bound):
        task_filter = TaskFilter(**{bound: BASE_TIME})
        assert not task_filter.matches(make_task())

    def test_criteria_combine_with_and(self):
        task_filter = TaskFilter(status=TaskStatus.POOL, tags=["work"])
        assert task_filter.matches(make_task(tags=["work"]))
        assert not task_filter.matches(make_task(status=TaskStatus.TODAY, tags=["work"]))

    def test_limit_does_not_affect_matching(self):
        assert TaskFilter(limit=0).matches(make_task())

    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            TaskFilter(limit=-1)


# ============================================================================
# Tool input models
# ============================================================================


class TestInputModels:
    """Tests for MCP tool input models."""

    def test_add_input_strips_title(self):
        params = AddTaskInput(title="  Buy milk  ")
        assert params.title == "Buy milk"

    def test_add_input_rejects_empty_title(self):
        with pytest.raises(ValidationError):
            AddTaskInput(title="   ")

    def test_add_input_drops_blank_tags(self):
        params = AddTaskInput(title="Report", tags=["work", " ", " urgent "])
        assert params.tags == ["work", "urgent"]

    def test_list_input_defaults(self):
        params = ListTasksInput()
        assert params.status is None
        assert params.limit == 50
        assert params.response_format == ResponseFormat.MARKDOWN

    def test_list_input_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            ListTasksInput(status="archived")

    def test_list_input_limit_bounds(self):
        with pytest.raises(ValidationError):
            ListTasksInput(limit=0)
        with pytest.raises(ValidationError):
            ListTasksInput(limit=501)
