from fastapi import APIRouter, Depends, Response

from src.config.settings import DashboardSettings
from src.core.storage.storage_factory import StorageFactory
from src.models.responses import HealthCheckResponse
from src.routers.dependencies import get_settings, get_storage_factory
from src.services.bootstrap import check_health

router = APIRouter(
    prefix="/api",
    tags=["Health"],
)


@router.get("/healthz", response_model=HealthCheckResponse)
async def health_check(
    response: Response,
    settings: DashboardSettings = Depends(get_settings),
    storage_factory: StorageFactory = Depends(get_storage_factory),
) -> HealthCheckResponse:
    """Check that both collections are readable and exports can be written"""
    health = await check_health(storage_factory, settings)
    if health["overall_status"] != "healthy":
        response.status_code = 503  # Service Unavailable
    return HealthCheckResponse(**health)
