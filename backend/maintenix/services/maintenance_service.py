"""MaintenanceService — lifecycle of maintenance records and their events.

Owns create / update / finish and the reads around them. Every mutation
goes through the PENDING guard in maintenix.domain.lifecycle; the final
write is a conditional UPDATE so two concurrent finishes cannot both win.
Assignment emails are sent after the write commits and can never fail it.
"""

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maintenix.core.best_effort import run_best_effort
from maintenix.core.exceptions import AlreadyFinishedError, NotFoundError
from maintenix.db.models.maintenance_record import MaintenanceRecord
from maintenix.db.repository import MaintenanceRepository
from maintenix.domain.lifecycle import collect_changes, ensure_editable, finish_values, responsible_changed
from maintenix.schemas.maintenance import (
    EventCreate,
    EventResponse,
    MachineSummary,
    RecordCreate,
    RecordFilters,
    RecordFinish,
    RecordPriority,
    RecordResponse,
    RecordStatus,
    RecordUpdate,
    RecordWithMachineResponse,
)
from maintenix.services.assignment_notifier import AssignmentNotifier
from maintenix.services.query_filter import build_record_conditions

logger = structlog.get_logger(__name__)


class MaintenanceService:
    """Service layer for maintenance record operations."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: AssignmentNotifier,
    ):
        """Initialize with dependency injection.

        Args:
            session_factory: SQLAlchemy async session factory
            notifier: Assignment notifier triggered on (re)assignment
        """
        self.session_factory = session_factory
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def create_record(
        self,
        machine_id: uuid.UUID,
        data: RecordCreate,
        created_by: uuid.UUID,
    ) -> RecordResponse:
        """Open a PENDING record on a machine.

        Raises:
            NotFoundError: machine missing, or responsible is not an active user
        """
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            if await repo.find_machine(machine_id) is None:
                raise NotFoundError("machine")
            if data.responsible_id is not None and await repo.find_active_user(data.responsible_id) is None:
                raise NotFoundError("responsible")

            record = await repo.insert_record(
                machine_id=machine_id,
                created_by=created_by,
                responsible_id=data.responsible_id,
                status=RecordStatus.PENDING.value,
                priority=(data.priority or RecordPriority.MEDIUM).value,
                category=data.category.value if data.category else None,
                shift=data.shift.value if data.shift else None,
                problem_description=data.problem_description,
                started_at=data.started_at,
            )
            await session.commit()
            await session.refresh(record)
            response = RecordResponse.model_validate(record)

        logger.info(
            "maintenance_record_created",
            record_id=str(response.id),
            machine_id=str(machine_id),
            responsible_id=str(response.responsible_id) if response.responsible_id else None,
        )

        if response.responsible_id is not None:
            await self._notify_assignment(response.id)

        return response

    async def find_record(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> RecordResponse:
        async with self.session_factory() as session:
            record = await self._get_record(MaintenanceRepository(session), machine_id, record_id)
            return RecordResponse.model_validate(record)

    async def list_records(self, machine_id: uuid.UUID, filters: RecordFilters) -> list[RecordResponse]:
        """List one machine's records, newest first."""
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            if await repo.find_machine(machine_id) is None:
                raise NotFoundError("machine")
            records = await repo.list_records(build_record_conditions(filters, machine_id=machine_id))
            return [RecordResponse.model_validate(record) for record in records]

    async def list_all_records(self, filters: RecordFilters) -> list[RecordWithMachineResponse]:
        """List records across all machines, each with its machine id and name."""
        async with self.session_factory() as session:
            rows = await MaintenanceRepository(session).list_records_with_machine(build_record_conditions(filters))
            return [
                RecordWithMachineResponse(
                    **RecordResponse.model_validate(record).model_dump(),
                    machine=MachineSummary(id=machine_id, name=machine_name),
                )
                for record, machine_id, machine_name in rows
            ]

    async def update_record(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        data: RecordUpdate,
    ) -> RecordResponse:
        """Apply a partial update to a PENDING record.

        Re-sends the assignment email when the responsible changes.

        Raises:
            NotFoundError: record (or new responsible) missing
            AlreadyFinishedError: record is DONE
            NothingToUpdateError: payload carries no field to change
        """
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            record = await self._get_record(repo, machine_id, record_id)
            ensure_editable(record.status)

            changes = collect_changes(data.model_dump())
            for key in ("priority", "category", "shift"):
                if key in changes:
                    changes[key] = changes[key].value

            reassigned = responsible_changed(record.responsible_id, changes.get("responsible_id"))
            if reassigned and await repo.find_active_user(changes["responsible_id"]) is None:
                raise NotFoundError("responsible")

            if not await repo.update_record_if_pending(machine_id, record_id, changes):
                await session.rollback()
                raise AlreadyFinishedError()
            await session.commit()
            await session.refresh(record)
            response = RecordResponse.model_validate(record)

        logger.info(
            "maintenance_record_updated",
            record_id=str(record_id),
            machine_id=str(machine_id),
            fields=sorted(changes),
            reassigned=reassigned,
        )

        if reassigned:
            await self._notify_assignment(record_id)

        return response

    async def finish_record(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        data: RecordFinish,
        finished_by: uuid.UUID,
    ) -> RecordResponse:
        """Move a record from PENDING to DONE.

        Raises:
            NotFoundError: record missing
            AlreadyFinishedError: record already DONE, or another finish won the race
        """
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            record = await self._get_record(repo, machine_id, record_id)
            ensure_editable(record.status)

            values = finish_values(data.solution_description, finished_by, data.finished_at)
            if not await repo.update_record_if_pending(machine_id, record_id, values):
                await session.rollback()
                raise AlreadyFinishedError()
            await session.commit()
            await session.refresh(record)
            response = RecordResponse.model_validate(record)

        logger.info(
            "maintenance_record_finished",
            record_id=str(record_id),
            machine_id=str(machine_id),
            finished_by=str(finished_by),
        )
        return response

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def create_event(
        self,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
        data: EventCreate,
        created_by: uuid.UUID,
    ) -> EventResponse:
        """Append a maintenance event (replacement, inspection, adjustment) to a record."""
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            await self._get_record(repo, machine_id, record_id)

            values = data.model_dump()
            values["event_type"] = data.event_type.value
            values["destination"] = data.destination.value if data.destination else None
            event = await repo.insert_event(
                maintenance_record_id=record_id,
                machine_id=machine_id,
                created_by=created_by,
                **values,
            )
            await session.commit()
            await session.refresh(event)
            response = EventResponse.model_validate(event)

        logger.info(
            "maintenance_event_created",
            event_id=str(response.id),
            record_id=str(record_id),
            event_type=response.event_type.value,
        )
        return response

    async def list_events(self, machine_id: uuid.UUID, record_id: uuid.UUID) -> list[EventResponse]:
        async with self.session_factory() as session:
            repo = MaintenanceRepository(session)
            await self._get_record(repo, machine_id, record_id)
            events = await repo.list_events(machine_id, record_id)
            return [EventResponse.model_validate(event) for event in events]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_record(
        self,
        repo: MaintenanceRepository,
        machine_id: uuid.UUID,
        record_id: uuid.UUID,
    ) -> MaintenanceRecord:
        record = await repo.find_record(machine_id, record_id)
        if record is None:
            raise NotFoundError("record")
        return record

    async def _notify_assignment(self, record_id: uuid.UUID) -> None:
        await run_best_effort(
            lambda: self.notifier.notify(record_id),
            "assignment_notification_failed",
            record_id=str(record_id),
        )
