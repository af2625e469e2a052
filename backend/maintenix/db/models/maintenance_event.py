"""MaintenanceEvent model — append-only actions logged against a record."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, String, Text, Uuid

from maintenix.db.base import Base


class MaintenanceEvent(Base):
    __tablename__ = "maintenance_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    maintenance_record_id = Column(
        Uuid, ForeignKey("maintenance_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    machine_id = Column(Uuid, ForeignKey("machines.id"), nullable=False, index=True)

    component_name = Column(String(255), nullable=False)
    event_type = Column(String(20), nullable=False)  # REPLACEMENT, INSPECTION, ADJUSTMENT
    event_date = Column(Date, nullable=False)
    used_part_description = Column(Text, nullable=True)
    quantity = Column(Float, nullable=True)
    removed_condition = Column(Text, nullable=True)
    destination = Column(String(20), nullable=True)  # REPAIR, SCRAP, ANALYSIS, STORAGE, RETURN
    observation = Column(Text, nullable=True)
    photo_url = Column(String(1024), nullable=True)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
