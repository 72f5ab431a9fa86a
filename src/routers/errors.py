import logging

from fastapi import HTTPException

from src.core.errors import DashboardError


logger = logging.getLogger(__name__)


def to_http_exception(error: DashboardError, fallback_detail: str) -> HTTPException:
    """
    Map a domain error to the HTTPException returned to the client.

    Client errors (4xx) keep their message. Anything else is logged with its
    detail and answered with the generic fallback_detail.
    """
    if error.status_code < 500:
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.error(f"{fallback_detail}: {error.message}", exc_info=error)
    return HTTPException(status_code=500, detail=fallback_detail)
