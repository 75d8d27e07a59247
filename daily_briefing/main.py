from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
from typing import Callable

from daily_briefing.api.error_handlers import (
    handle_api_exception,
    handle_http_exception,
    handle_unexpected_exception,
    handle_validation_exception,
)
from daily_briefing.core.config import get_settings, load_env_file
from daily_briefing.core.exceptions import APIException
from daily_briefing.core.logging import configure_logging, get_logger, set_correlation_id


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=None,
        debug=settings.DEBUG
    )

    configure_middleware(app)
    handle_exceptions(app)
    register_routers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up Daily Briefing Service")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Daily Briefing Service")

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID") or str(uuid.uuid4()))

        start_time = time.time()

        try:
            response = await call_next(request)

            response.headers["X-Correlation-ID"] = correlation_id

            process_time = time.time() - start_time
            logger.info(
                "Request completed",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "process_time_ms": round(process_time * 1000, 2)
                }
            )

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round(process_time * 1000, 2),
                    "error": str(e)
                },
                exc_info=True
            )
            raise


def handle_exceptions(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # Import routers here to avoid circular imports
    from daily_briefing.api.routes.briefing import briefing_router
    from daily_briefing.api.routes.calendar import calendar_router
    from daily_briefing.api.routes.health import health_router

    app.include_router(
        briefing_router,
        prefix=f"{settings.API_PREFIX}/briefing",
        tags=["Briefing"]
    )

    app.include_router(
        calendar_router,
        prefix=f"{settings.API_PREFIX}/calendar",
        tags=["Calendar"]
    )

    app.include_router(
        health_router,
        prefix=f"{settings.API_PREFIX}/health",
        tags=["Health"]
    )


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("daily_briefing.main:app", host="0.0.0.0", port=8000, reload=True)
