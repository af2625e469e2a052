"""Pydantic schemas and enums for maintenance records, events and photos.

Request models arrive already validated from the HTTP layer; response models
are built straight from ORM rows (from_attributes).
"""

from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RecordStatus(StrEnum):
    PENDING = "PENDING"
    DONE = "DONE"


class RecordPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RecordCategory(StrEnum):
    """Maintenance domains a record can be filed under."""

    ELECTRICAL = "ELECTRICAL"
    MECHANICAL = "MECHANICAL"
    PNEUMATIC = "PNEUMATIC"
    PROCESS = "PROCESS"
    ELECTRONIC = "ELECTRONIC"
    AUTOMATION = "AUTOMATION"
    BUILDING = "BUILDING"
    TOOLING = "TOOLING"
    REFRIGERATION = "REFRIGERATION"
    SETUP = "SETUP"
    HYDRAULIC = "HYDRAULIC"


class RecordShift(StrEnum):
    FIRST = "FIRST"
    SECOND = "SECOND"
    THIRD = "THIRD"


class PhotoType(StrEnum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"


class EventType(StrEnum):
    REPLACEMENT = "REPLACEMENT"
    INSPECTION = "INSPECTION"
    ADJUSTMENT = "ADJUSTMENT"


class EventDestination(StrEnum):
    """Where a removed component went after a replacement."""

    REPAIR = "REPAIR"
    SCRAP = "SCRAP"
    ANALYSIS = "ANALYSIS"
    STORAGE = "STORAGE"
    RETURN = "RETURN"


# ==================== REQUEST SCHEMAS ====================


class RecordCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    problem_description: str = Field(..., min_length=1)
    priority: RecordPriority | None = None
    category: RecordCategory | None = None
    shift: RecordShift | None = None
    responsible_id: UUID | None = None
    started_at: datetime | None = None


class RecordUpdate(BaseModel):
    """Partial update. Fields left out (or sent as null) are not touched."""

    model_config = ConfigDict(str_strip_whitespace=True)

    problem_description: str | None = Field(None, min_length=1)
    priority: RecordPriority | None = None
    category: RecordCategory | None = None
    shift: RecordShift | None = None
    responsible_id: UUID | None = None
    started_at: datetime | None = None


class RecordFinish(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    solution_description: str = Field(..., min_length=1)
    finished_at: datetime | None = None


class RecordFilters(BaseModel):
    """Optional listing filters; every field left as None imposes no constraint."""

    status: RecordStatus | None = None
    priority: RecordPriority | None = None
    category: RecordCategory | None = None
    shift: RecordShift | None = None
    responsible_id: UUID | None = None
    machine_id: UUID | None = None
    query: str | None = Field(None, description="Substring searched in problem_description")


class EventCreate(BaseModel):
    component_name: str = Field(..., min_length=1)
    event_type: EventType
    event_date: date
    used_part_description: str | None = Field(None, min_length=1)
    quantity: float | None = Field(None, ge=0)
    removed_condition: str | None = Field(None, min_length=1)
    destination: EventDestination | None = None
    observation: str | None = Field(None, min_length=1)
    photo_url: str | None = Field(None, min_length=1)


# ==================== RESPONSE SCHEMAS ====================


class RecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    machine_id: UUID
    created_by: UUID
    responsible_id: UUID | None
    finished_by: UUID | None
    status: RecordStatus
    priority: RecordPriority
    category: RecordCategory | None
    shift: RecordShift | None
    problem_description: str
    solution_description: str | None
    started_at: datetime | None
    finished_at: datetime | None
    created_at: datetime
    updated_at: datetime


class MachineSummary(BaseModel):
    id: UUID
    name: str


class RecordWithMachineResponse(RecordResponse):
    machine: MachineSummary


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    maintenance_record_id: UUID
    machine_id: UUID
    component_name: str
    event_type: EventType
    event_date: date
    used_part_description: str | None
    quantity: float | None
    removed_condition: str | None
    destination: EventDestination | None
    observation: str | None
    photo_url: str | None
    created_by: UUID
    created_at: datetime


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    maintenance_record_id: UUID
    type: PhotoType
    file_url: str
    created_by: UUID
    created_at: datetime
