"""Tests for the maintenance record state machine and edit guards.

Pure functions: no DB access, deterministic outputs.
"""

import uuid
from datetime import UTC, datetime

import pytest

from maintenix.core.exceptions import AlreadyFinishedError, NothingToUpdateError, SolutionRequiredError
from maintenix.domain.lifecycle import (
    TRANSITIONS,
    can_transition,
    collect_changes,
    ensure_editable,
    finish_values,
    responsible_changed,
)
from maintenix.schemas.maintenance import RecordPriority, RecordStatus

pytestmark = pytest.mark.unit


def test_pending_can_only_go_to_done():
    assert TRANSITIONS[RecordStatus.PENDING] == [RecordStatus.DONE]


def test_done_is_terminal():
    assert TRANSITIONS[RecordStatus.DONE] == []
    assert not can_transition(RecordStatus.DONE, RecordStatus.DONE)
    assert not can_transition(RecordStatus.DONE, RecordStatus.PENDING)


def test_can_transition_accepts_raw_strings():
    """Status values read from the DB are plain strings."""
    assert can_transition("PENDING", "DONE")
    assert not can_transition("DONE", "PENDING")


def test_ensure_editable_allows_pending():
    ensure_editable(RecordStatus.PENDING)


def test_ensure_editable_rejects_done():
    with pytest.raises(AlreadyFinishedError):
        ensure_editable("DONE")


def test_collect_changes_drops_none_values():
    """Omitted fields are left untouched, never nulled."""
    changes = collect_changes(
        {
            "problem_description": "Seal leaking",
            "priority": None,
            "category": None,
            "shift": None,
            "responsible_id": None,
            "started_at": None,
        }
    )
    assert changes == {"problem_description": "Seal leaking"}


def test_collect_changes_ignores_unknown_and_guarded_fields():
    changes = collect_changes({"priority": RecordPriority.HIGH, "status": "DONE", "finished_by": uuid.uuid4()})
    assert changes == {"priority": RecordPriority.HIGH}


def test_collect_changes_rejects_empty_payload():
    with pytest.raises(NothingToUpdateError):
        collect_changes({"problem_description": None, "priority": None})


def test_collect_changes_rejects_only_unknown_fields():
    with pytest.raises(NothingToUpdateError):
        collect_changes({"status": "DONE"})


def test_responsible_changed():
    current = uuid.uuid4()
    assert not responsible_changed(current, current)
    assert not responsible_changed(current, None)
    assert responsible_changed(current, uuid.uuid4())
    assert responsible_changed(None, uuid.uuid4())


def test_finish_values_defaults_finished_at_to_now():
    now = datetime(2026, 1, 27, 13, 10, tzinfo=UTC)
    finished_by = uuid.uuid4()

    values = finish_values("replaced seal", finished_by, now=now)

    assert values == {
        "status": "DONE",
        "solution_description": "replaced seal",
        "finished_by": finished_by,
        "finished_at": now,
    }


def test_finish_values_keeps_caller_supplied_finished_at():
    supplied = datetime(2026, 1, 27, 9, 0, tzinfo=UTC)
    values = finish_values("replaced seal", uuid.uuid4(), finished_at=supplied, now=datetime.now(UTC))
    assert values["finished_at"] == supplied


def test_finish_values_without_now_uses_current_time():
    before = datetime.now(UTC)
    values = finish_values("replaced seal", uuid.uuid4())
    assert before <= values["finished_at"] <= datetime.now(UTC)


@pytest.mark.parametrize("solution", ["", "   "])
def test_finish_values_requires_solution(solution):
    with pytest.raises(SolutionRequiredError):
        finish_values(solution, uuid.uuid4())
