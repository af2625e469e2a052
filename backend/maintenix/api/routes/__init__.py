from fastapi import APIRouter

from maintenix.api.routes import health, machine_records, records

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(
    machine_records.router,
    prefix="/machines/{machine_id}/maintenance-records",
    tags=["maintenance-records"],
)
api_router.include_router(records.router, prefix="/maintenance-records", tags=["maintenance-records"])
