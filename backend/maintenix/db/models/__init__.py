"""Re-export all models so Base.metadata sees them."""

from maintenix.db.models.machine import Machine
from maintenix.db.models.maintenance_event import MaintenanceEvent
from maintenix.db.models.maintenance_photo import MaintenancePhoto
from maintenix.db.models.maintenance_record import MaintenanceRecord
from maintenix.db.models.user import User

__all__ = [
    "Machine",
    "MaintenanceEvent",
    "MaintenancePhoto",
    "MaintenanceRecord",
    "User",
]
