from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from daily_briefing.core.exceptions import APIException, MethodNotAllowedError
from daily_briefing.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: ``{"error": ..., "details": ...}`` with the exception's status
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"API Exception: {exc.error}",
        extra={
            "status_code": exc.status_code,
            "details": exc.details,
            "request_path": request.url.path,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request bodies that are not JSON objects of the expected shape.

    Returns:
        JSONResponse: 400 with the first validation message as details
    """
    errors = exc.errors()
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in errors
    )
    logger.warning(f"Validation error: {details}", extra={"request_path": request.url.path})

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": details}
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle routing errors raised by Starlette.

    A method mismatch is rendered as the method-not-allowed envelope; other
    routing errors keep their status with the detail as the error text.
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error = MethodNotAllowedError(request.method)
        logger.info(
            f"Method {request.method} not allowed",
            extra={"request_path": request.url.path}
        )
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_dict(),
            headers=getattr(exc, "headers", None)
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred", "details": str(exc)}
    )
