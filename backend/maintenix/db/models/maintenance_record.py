"""MaintenanceRecord model — the work order and its lifecycle status."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from maintenix.db.base import Base


class MaintenanceRecord(Base):
    """A maintenance work order raised against one machine.

    status is PENDING until the record is finished, then DONE for good.
    solution_description, finished_by and finished_at are only set on DONE
    records.
    """

    __tablename__ = "maintenance_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    machine_id = Column(Uuid, ForeignKey("machines.id"), nullable=False, index=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    responsible_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    finished_by = Column(Uuid, ForeignKey("users.id"), nullable=True)

    status = Column(String(20), nullable=False, default="PENDING", index=True)  # RecordStatus value
    priority = Column(String(20), nullable=False, default="MEDIUM")  # RecordPriority value
    category = Column(String(50), nullable=True)  # RecordCategory value
    shift = Column(String(20), nullable=True)  # RecordShift value

    problem_description = Column(Text, nullable=False)
    solution_description = Column(Text, nullable=True)

    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
