import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from src.core.errors import DashboardError
from src.models.responses import ExportResponse, ServerStatsResponse, SuccessResponse
from src.models.types import (
    Ambiente,
    Location,
    ServerSortKey,
    ServerStatus,
    SortDirection,
)
from src.repositories.server_repository import (
    ServerRepository,
    compute_stats,
    filter_servers,
)
from src.routers.dependencies import get_export_service, get_server_repository
from src.routers.errors import to_http_exception
from src.services.export_service import (
    ExportService,
    render_servers_csv,
    servers_export_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/servers",
    tags=["Servers"],
)


def server_filters(
    search: Optional[str] = Query(None, description="Substring of name, host, IP, project or notes"),
    status: Optional[ServerStatus] = Query(None),
    projeto: Optional[str] = Query(None),
    ambiente: Optional[Ambiente] = Query(None),
    location: Optional[Location] = Query(None),
    sort_by: Optional[ServerSortKey] = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
) -> Dict[str, Any]:
    """Query parameters shared by listing and CSV export"""
    return {
        "search": search,
        "status": status,
        "projeto": projeto,
        "ambiente": ambiente,
        "location": location,
        "sort_by": sort_by,
        "direction": direction,
    }


def _has_filters(filters: Dict[str, Any]) -> bool:
    return any(
        value is not None for key, value in filters.items() if key != "direction"
    )


@router.get("", response_model=List[Dict[str, Any]])
async def list_servers(
    filters: Dict[str, Any] = Depends(server_filters),
    repository: ServerRepository = Depends(get_server_repository),
) -> List[Dict[str, Any]]:
    """
    Get the server inventory.

    Without query parameters the stored collection is returned as is.
    """
    try:
        servers = await repository.list_servers()
    except DashboardError as e:
        raise to_http_exception(e, "Error loading server data")

    if _has_filters(filters):
        return filter_servers(servers, **filters)
    return servers


@router.post("", response_model=SuccessResponse)
async def save_servers(
    payload: Any = Body(..., description="Full server collection (JSON array)"),
    repository: ServerRepository = Depends(get_server_repository),
) -> SuccessResponse:
    """Replace the whole inventory with the posted array"""
    try:
        await repository.replace_servers(payload)
    except DashboardError as e:
        raise to_http_exception(e, "Error saving server data")

    return SuccessResponse(success=True)


@router.get("/stats", response_model=ServerStatsResponse)
async def server_stats(
    repository: ServerRepository = Depends(get_server_repository),
) -> ServerStatsResponse:
    try:
        servers = await repository.list_servers()
    except DashboardError as e:
        raise to_http_exception(e, "Error loading server data")

    return ServerStatsResponse(**compute_stats(servers))


@router.post("/export", response_model=ExportResponse)
async def export_servers(
    filters: Dict[str, Any] = Depends(server_filters),
    repository: ServerRepository = Depends(get_server_repository),
    export_service: ExportService = Depends(get_export_service),
) -> ExportResponse:
    """
    Render the (filtered) inventory as CSV into the export directory.

    The file can then be fetched from /api/download/{filename}.
    """
    try:
        servers = filter_servers(await repository.list_servers(), **filters)
        exported = await export_service.export_text(
            servers_export_filename(), render_servers_csv(servers)
        )
    except DashboardError as e:
        raise to_http_exception(e, "Error exporting data")

    return ExportResponse(filename=exported["filename"], path=exported["path"])
