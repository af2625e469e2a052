"""MaintenanceRepository — persistence primitives for records, events and photos.

Every record lookup is scoped by machine id. The only write that must be
race-safe, the PENDING guard on record updates, is a single conditional
UPDATE so concurrent service instances settle it in the database.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from maintenix.db.models.machine import Machine
from maintenix.db.models.maintenance_event import MaintenanceEvent
from maintenix.db.models.maintenance_photo import MaintenancePhoto
from maintenix.db.models.maintenance_record import MaintenanceRecord
from maintenix.db.models.user import User
from maintenix.schemas.maintenance import RecordStatus


@dataclass(frozen=True)
class AssignmentContext:
    """Everything the assignment email needs, read in one query."""

    record_id: uuid.UUID
    machine_id: uuid.UUID
    machine_name: str | None
    problem_description: str
    priority: str | None
    category: str | None
    shift: str | None
    responsible_name: str | None
    responsible_email: str | None


class MaintenanceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Machines and users
    # ------------------------------------------------------------------

    async def find_machine(self, machine_id: uuid.UUID) -> Machine | None:
        result = await self.session.execute(select(Machine).where(Machine.id == machine_id))
        return result.scalar_one_or_none()

    async def find_active_user(self, user_id: uuid.UUID) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id, User.active.is_(True)))
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def find_record(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> MaintenanceRecord | None:
        result = await self.session.execute(
            select(MaintenanceRecord).where(
                MaintenanceRecord.id == record_id,
                MaintenanceRecord.machine_id == machine_id,
            )
        )
        return result.scalar_one_or_none()

    async def insert_record(self, **values: Any) -> MaintenanceRecord:
        record = MaintenanceRecord(**values)
        self.session.add(record)
        await self.session.flush()
        return record

    async def update_record_if_pending(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        values: dict[str, Any],
    ) -> bool:
        """Write ``values`` only while the record is still PENDING.

        Returns:
            True if the row was updated, False if it was missing or no
            longer PENDING when the statement ran.
        """
        result = await self.session.execute(
            update(MaintenanceRecord)
            .where(
                MaintenanceRecord.id == record_id,
                MaintenanceRecord.machine_id == machine_id,
                MaintenanceRecord.status == RecordStatus.PENDING.value,
            )
            .values(**values, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_records(self, conditions: list[ColumnElement[bool]]) -> list[MaintenanceRecord]:
        result = await self.session.execute(
            select(MaintenanceRecord).where(*conditions).order_by(MaintenanceRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_records_with_machine(
        self, conditions: list[ColumnElement[bool]]
    ) -> list[tuple[MaintenanceRecord, uuid.UUID, str]]:
        result = await self.session.execute(
            select(MaintenanceRecord, Machine.id, Machine.name)
            .join(Machine, Machine.id == MaintenanceRecord.machine_id)
            .where(*conditions)
            .order_by(MaintenanceRecord.created_at.desc())
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def load_assignment_context(self, record_id: uuid.UUID) -> AssignmentContext | None:
        result = await self.session.execute(
            select(
                MaintenanceRecord.id,
                MaintenanceRecord.machine_id,
                Machine.name,
                MaintenanceRecord.problem_description,
                MaintenanceRecord.priority,
                MaintenanceRecord.category,
                MaintenanceRecord.shift,
                User.name,
                User.email,
            )
            .outerjoin(Machine, Machine.id == MaintenanceRecord.machine_id)
            .outerjoin(User, User.id == MaintenanceRecord.responsible_id)
            .where(MaintenanceRecord.id == record_id)
        )
        row = result.first()
        if row is None:
            return None
        return AssignmentContext(*row)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def insert_event(self, **values: Any) -> MaintenanceEvent:
        event = MaintenanceEvent(**values)
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_events(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> list[MaintenanceEvent]:
        result = await self.session.execute(
            select(MaintenanceEvent)
            .where(
                MaintenanceEvent.machine_id == machine_id,
                MaintenanceEvent.maintenance_record_id == record_id,
            )
            .order_by(MaintenanceEvent.event_date.desc(), MaintenanceEvent.created_at.desc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    async def insert_photo(self, **values: Any) -> MaintenancePhoto:
        photo = MaintenancePhoto(**values)
        self.session.add(photo)
        await self.session.flush()
        return photo

    async def find_photo(self, record_id: uuid.UUID, photo_id: uuid.UUID) -> MaintenancePhoto | None:
        result = await self.session.execute(
            select(MaintenancePhoto).where(
                MaintenancePhoto.id == photo_id,
                MaintenancePhoto.maintenance_record_id == record_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_photos(self, record_id: uuid.UUID) -> list[MaintenancePhoto]:
        result = await self.session.execute(
            select(MaintenancePhoto)
            .where(MaintenancePhoto.maintenance_record_id == record_id)
            .order_by(MaintenancePhoto.created_at.desc())
        )
        return list(result.scalars().all())

    async def delete_photo(self, photo_id: uuid.UUID) -> None:
        await self.session.execute(delete(MaintenancePhoto).where(MaintenancePhoto.id == photo_id))
