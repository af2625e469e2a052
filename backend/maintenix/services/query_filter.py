"""Listing filters for maintenance records.

Turns a RecordFilters request into one conjunctive list of SQLAlchemy
conditions. Fields left as None add nothing.
"""

import uuid

from sqlalchemy import ColumnElement

from maintenix.db.models.maintenance_record import MaintenanceRecord
from maintenix.schemas.maintenance import RecordFilters


def build_record_conditions(
    filters: RecordFilters,
    machine_id: uuid.UUID | None = None,
) -> list[ColumnElement[bool]]:
    """Build WHERE conditions for a record listing.

    Args:
        filters: Optional field filters from the caller
        machine_id: When given, scopes the listing to that machine and
            overrides filters.machine_id

    Returns:
        Conditions to AND together (empty list = no constraint)
    """
    conditions: list[ColumnElement[bool]] = []

    scoped_machine = machine_id or filters.machine_id
    if scoped_machine is not None:
        conditions.append(MaintenanceRecord.machine_id == scoped_machine)

    if filters.status is not None:
        conditions.append(MaintenanceRecord.status == filters.status.value)
    if filters.priority is not None:
        conditions.append(MaintenanceRecord.priority == filters.priority.value)
    if filters.category is not None:
        conditions.append(MaintenanceRecord.category == filters.category.value)
    if filters.shift is not None:
        conditions.append(MaintenanceRecord.shift == filters.shift.value)
    if filters.responsible_id is not None:
        conditions.append(MaintenanceRecord.responsible_id == filters.responsible_id)

    search = (filters.query or "").strip()
    if search:
        conditions.append(MaintenanceRecord.problem_description.icontains(search, autoescape=True))

    return conditions
