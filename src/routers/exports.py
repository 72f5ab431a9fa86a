import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response

from src.core.errors import DashboardError
from src.models.requests import ExportRequest
from src.models.responses import ExportResponse
from src.routers.dependencies import get_export_service
from src.routers.errors import to_http_exception
from src.services.export_service import ExportService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Exports"],
)


def content_disposition(filename: str) -> str:
    """
    Attachment header for filename.

    Plain printable ASCII names go in a quoted filename parameter; anything
    else (non-ASCII, quotes, backslashes, control characters) is sent as an
    RFC 5987 filename* value.
    """
    plain = (
        filename.isascii()
        and filename.isprintable()
        and '"' not in filename
        and "\\" not in filename
    )
    if plain:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename*=UTF-8''{quote(filename, safe='')}"


@router.post("/export", response_model=ExportResponse)
async def export_csv(
    request: ExportRequest,
    export_service: ExportService = Depends(get_export_service),
) -> ExportResponse:
    """Write client-rendered CSV content verbatim to the export directory"""
    try:
        exported = await export_service.export_text(request.filename, request.data)
    except DashboardError as e:
        raise to_http_exception(e, "Error exporting data")

    return ExportResponse(filename=exported["filename"], path=exported["path"])


@router.get("/download/{filename}")
async def download_csv(
    filename: str,
    export_service: ExportService = Depends(get_export_service),
) -> Response:
    try:
        content = await export_service.open_download(filename)
    except DashboardError as e:
        raise to_http_exception(e, "Error downloading file")
    except OSError as e:
        logger.error(f"Error downloading {filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error downloading file")

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": content_disposition(filename)},
    )
