"""Cross-machine maintenance record listing."""

from fastapi import APIRouter, Depends

from maintenix.api.deps import get_maintenance_service
from maintenix.core.auth import require_user_id
from maintenix.schemas.maintenance import RecordFilters, RecordWithMachineResponse
from maintenix.services.maintenance_service import MaintenanceService

router = APIRouter(dependencies=[Depends(require_user_id)])


@router.get("", response_model=list[RecordWithMachineResponse])
async def list_all_records(
    filters: RecordFilters = Depends(),
    service: MaintenanceService = Depends(get_maintenance_service),
):
    """List records from every machine, newest first. Paging is done client-side."""
    return await service.list_all_records(filters)
