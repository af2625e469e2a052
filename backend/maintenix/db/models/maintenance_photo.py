"""MaintenancePhoto model — metadata row for a before/after photo blob."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from maintenix.db.base import Base


class MaintenancePhoto(Base):
    __tablename__ = "maintenance_photos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    maintenance_record_id = Column(
        Uuid, ForeignKey("maintenance_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(10), nullable=False)  # BEFORE, AFTER
    file_url = Column(String(1024), nullable=False)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
