import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from src.core.errors import DashboardError
from src.models.requests import CommandRequest
from src.models.responses import CommandRecord, SuccessResponse
from src.models.types import CommandSort
from src.repositories.command_repository import CommandRepository, filter_commands
from src.routers.dependencies import get_command_repository
from src.routers.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/commands",
    tags=["Commands"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[Dict[str, Any]])
async def list_commands(
    search: Optional[str] = Query(None, description="Substring of command or description"),
    sort: Optional[CommandSort] = Query(None),
    repository: CommandRepository = Depends(get_command_repository),
) -> List[Dict[str, Any]]:
    """
    Get the command catalog.

    Read failures return an empty list rather than an error status.
    """
    commands = await repository.list_commands()
    if search or sort:
        return filter_commands(commands, search=search, sort=sort)
    return commands


@router.get("/{command_id}", response_model=CommandRecord, response_model_exclude_none=True)
async def get_command(
    command_id: str,
    repository: CommandRepository = Depends(get_command_repository),
) -> Dict[str, Any]:
    try:
        return await repository.get_command(command_id)
    except DashboardError as e:
        raise to_http_exception(e, "Error loading command")


@router.post(
    "",
    status_code=201,
    response_model=CommandRecord,
    response_model_exclude_none=True,
)
async def create_command(
    request: CommandRequest,
    repository: CommandRepository = Depends(get_command_repository),
) -> Dict[str, Any]:
    """Add a command; the id and createdAt are assigned here"""
    try:
        return await repository.add_command(request.command, request.description)
    except DashboardError as e:
        raise to_http_exception(e, "Error saving command")


@router.put("/{command_id}", response_model=CommandRecord, response_model_exclude_none=True)
async def update_command(
    command_id: str,
    request: CommandRequest,
    repository: CommandRepository = Depends(get_command_repository),
) -> Dict[str, Any]:
    """Replace command and description, keeping createdAt and stamping updatedAt"""
    try:
        return await repository.update_command(
            command_id, request.command, request.description
        )
    except DashboardError as e:
        raise to_http_exception(e, "Error updating command")


@router.delete("/{command_id}", response_model=SuccessResponse)
async def delete_command(
    command_id: str,
    repository: CommandRepository = Depends(get_command_repository),
) -> SuccessResponse:
    try:
        await repository.delete_command(command_id)
    except DashboardError as e:
        raise to_http_exception(e, "Error deleting command")

    return SuccessResponse(success=True)
