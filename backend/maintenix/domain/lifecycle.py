"""Maintenance record state machine and edit guards.

Pure domain functions: no DB access, fully deterministic. The service layer
loads the record, asks these functions what is allowed, and persists.

    PENDING --finish--> DONE      (DONE is terminal)
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from maintenix.core.exceptions import AlreadyFinishedError, NothingToUpdateError, SolutionRequiredError
from maintenix.schemas.maintenance import RecordStatus

TRANSITIONS: dict[RecordStatus, list[RecordStatus]] = {
    RecordStatus.PENDING: [RecordStatus.DONE],
    RecordStatus.DONE: [],
}

# Fields an update may touch while the record is PENDING
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"problem_description", "priority", "category", "shift", "responsible_id", "started_at"}
)


def can_transition(current: RecordStatus | str, target: RecordStatus | str) -> bool:
    """Check whether ``current -> target`` is an allowed transition."""
    return RecordStatus(target) in TRANSITIONS.get(RecordStatus(current), [])


def ensure_editable(status: RecordStatus | str) -> None:
    """Raise AlreadyFinishedError unless the record can still be mutated."""
    if not can_transition(status, RecordStatus.DONE):
        raise AlreadyFinishedError()


def collect_changes(attrs: dict[str, Any]) -> dict[str, Any]:
    """Reduce an update payload to the fields that will actually be written.

    Unknown keys and None values are dropped, so omitted fields are left
    untouched rather than nulled.

    Raises:
        NothingToUpdateError: if no field survives.
    """
    changes = {key: value for key, value in attrs.items() if key in UPDATABLE_FIELDS and value is not None}
    if not changes:
        raise NothingToUpdateError()
    return changes


def responsible_changed(current: UUID | None, requested: UUID | None) -> bool:
    """True when an update assigns a different responsible than the stored one."""
    return requested is not None and requested != current


def finish_values(
    solution_description: str,
    finished_by: UUID,
    finished_at: datetime | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the column values written by the PENDING -> DONE transition.

    Args:
        solution_description: How the problem was solved (required, non-blank)
        finished_by: User closing the record
        finished_at: Caller-supplied completion time, defaults to ``now``
        now: Current time (for deterministic testing)

    Raises:
        SolutionRequiredError: if solution_description is blank.
    """
    if not solution_description or not solution_description.strip():
        raise SolutionRequiredError()

    return {
        "status": RecordStatus.DONE.value,
        "solution_description": solution_description,
        "finished_by": finished_by,
        "finished_at": finished_at or now or datetime.now(UTC),
    }
