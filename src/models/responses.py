from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    success: bool = True


class CommandRecord(BaseModel):
    id: str = Field(..., description="Timestamp-derived identifier")
    command: str
    description: str
    createdAt: Optional[str] = Field(
        None, description="ISO-8601 creation timestamp (absent on legacy records)"
    )
    updatedAt: Optional[str] = Field(None, description="ISO-8601 last edit timestamp")


class ExportResponse(BaseModel):
    success: bool = True
    message: str = "File exported successfully"
    filename: str
    path: str


class ServerStatsResponse(BaseModel):
    """Counters shown on the servers dashboard cards"""

    total: int
    active: int
    inactive: int
    by_ambiente: Dict[str, int] = Field(default_factory=dict)
    projects: List[str] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint"""

    overall_status: str = Field(..., description="Overall system health status")
    timestamp: float = Field(..., description="Unix timestamp of the health check")
    checks: Dict[str, Dict[str, Any]] = Field(
        ..., description="Individual component health checks"
    )
    unhealthy_components: int = Field(..., description="Number of unhealthy components")
