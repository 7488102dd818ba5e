import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from app.models.api_response import APIResponse, APIError
from search.exceptions import QueryError

logger = logging.getLogger(__name__)

async def query_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, QueryError)
    logger.warning("Rejected %s %s: %s (%s)", request.method, request.url.path, exc.code, exc.message)

    return JSONResponse(
        status_code=400,
        content=APIResponse(
            status="error",
            error=APIError(
                code=exc.code,
                message=exc.message,
                details=exc.details
            )
        ).model_dump()
    )
