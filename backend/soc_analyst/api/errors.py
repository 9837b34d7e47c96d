# backend/soc_analyst/api/errors.py
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from soc_analyst.core.errors import (
    AIBackendError,
    AIServiceUnavailableError,
    AnalysisError,
)
from soc_analyst.schemas.analysis import ErrorResponse

logger = logging.getLogger(__name__)


async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    """
    Turn conversation-engine failures into the JSON shapes the dashboard
    expects. Nothing from the model backend leaks past this point except
    the short description carried by the exception.
    """
    if isinstance(exc, AIServiceUnavailableError):
        body = ErrorResponse(
            error=exc.error, message=exc.detail, session_id=exc.session_id
        )
    elif isinstance(exc, AIBackendError):
        body = ErrorResponse(error=exc.error, details=exc.detail, message=exc.message)
    else:
        body = ErrorResponse(error=exc.detail)

    logger.info(
        "%s %s -> %d (%s)",
        request.method, request.url.path, exc.status_code, type(exc).__name__,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
