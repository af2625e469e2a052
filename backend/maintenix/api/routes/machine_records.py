"""Maintenance record routes scoped to one machine: records, events and photos."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile

from maintenix.api.deps import get_attachment_service, get_maintenance_service
from maintenix.core.auth import require_user_id
from maintenix.schemas.maintenance import (
    EventCreate,
    EventResponse,
    PhotoResponse,
    PhotoType,
    RecordCreate,
    RecordFilters,
    RecordFinish,
    RecordResponse,
    RecordUpdate,
)
from maintenix.services.attachment_service import AttachmentService
from maintenix.services.maintenance_service import MaintenanceService

router = APIRouter()


@router.post("", status_code=201, response_model=RecordResponse)
async def create_record(
    machine_id: UUID,
    body: RecordCreate,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.create_record(machine_id, body, created_by=user_id)


@router.get("", response_model=list[RecordResponse])
async def list_records(
    machine_id: UUID,
    filters: RecordFilters = Depends(),
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.list_records(machine_id, filters)


@router.get("/{record_id}", response_model=RecordResponse)
async def find_record(
    machine_id: UUID,
    record_id: UUID,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.find_record(machine_id, record_id)


@router.patch("/{record_id}", response_model=RecordResponse)
async def update_record(
    machine_id: UUID,
    record_id: UUID,
    body: RecordUpdate,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.update_record(machine_id, record_id, body)


@router.patch("/{record_id}/finish", response_model=RecordResponse)
async def finish_record(
    machine_id: UUID,
    record_id: UUID,
    body: RecordFinish,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.finish_record(machine_id, record_id, body, finished_by=user_id)


# ==================== EVENTS ====================


@router.post("/{record_id}/events", status_code=201, response_model=EventResponse)
async def create_event(
    machine_id: UUID,
    record_id: UUID,
    body: EventCreate,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.create_event(machine_id, record_id, body, created_by=user_id)


@router.get("/{record_id}/events", response_model=list[EventResponse])
async def list_events(
    machine_id: UUID,
    record_id: UUID,
    user_id: UUID = Depends(require_user_id),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    return await service.list_events(machine_id, record_id)


# ==================== PHOTOS ====================


@router.post("/{record_id}/photos", status_code=201, response_model=PhotoResponse)
async def create_photo(
    machine_id: UUID,
    record_id: UUID,
    photo_type: PhotoType = Form(..., alias="type"),
    file: UploadFile | None = File(None),
    user_id: UUID = Depends(require_user_id),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Upload a BEFORE or AFTER photo (multipart field ``file``)."""
    data = await file.read() if file is not None else b""
    return await service.add_photo(
        machine_id,
        record_id,
        photo_type=photo_type,
        data=data,
        content_type=file.content_type if file is not None else None,
        filename=file.filename if file is not None else None,
        created_by=user_id,
    )


@router.get("/{record_id}/photos", response_model=list[PhotoResponse])
async def list_photos(
    machine_id: UUID,
    record_id: UUID,
    user_id: UUID = Depends(require_user_id),
    service: AttachmentService = Depends(get_attachment_service),
):
    return await service.list_photos(machine_id, record_id)


@router.delete("/{record_id}/photos/{photo_id}", response_model=PhotoResponse)
async def remove_photo(
    machine_id: UUID,
    record_id: UUID,
    photo_id: UUID,
    user_id: UUID = Depends(require_user_id),
    service: AttachmentService = Depends(get_attachment_service),
):
    return await service.remove_photo(machine_id, record_id, photo_id)
