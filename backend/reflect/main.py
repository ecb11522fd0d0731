"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from reflect.api.routes import (analytics, auth, auth_pages, collections,
                                health, journal, metrics, pages)
from reflect.core.auth import LoginRequired
from reflect.core.config import get_settings
from reflect.core.database import get_session_local, init_db
from reflect.core.logging_config import LoggingConfig
from reflect.core.metrics import set_app_info
from reflect.core.middleware import LoggingContextMiddleware
from reflect.core.middleware_metrics import MetricsMiddleware
from reflect.services.auth_service import AuthService

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")

    if settings.app_env == "development":
        init_db()

    db = get_session_local()()
    try:
        AuthService(db).cleanup_expired_sessions()
    except Exception as e:
        logger.warning(f"Could not clean up expired sessions: {e}")
    finally:
        db.close()

    yield

    logger.info(f"Shutting down {settings.app_name}...")


def validation_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Map pydantic errors to one message per field"""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "__root__"
        if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
            message = str(error["ctx"]["error"])
        else:
            message = error.get("msg", "Invalid value")
        errors.setdefault(field, message)
    return errors


def create_app() -> FastAPI:
    settings = get_settings()
    set_app_info(settings.app_name, settings.app_env, settings.app_version)

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return RedirectResponse(exc.login_url, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation failed", "errors": validation_errors(exc)}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log unhandled errors and answer with a JSON 500"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
            }
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error", "type": type(exc).__name__}
        )

    app.include_router(pages.router)
    app.include_router(auth_pages.router)
    app.include_router(auth.router)
    app.include_router(journal.router)
    app.include_router(collections.router)
    app.include_router(analytics.router)
    app.include_router(health.router)
    app.include_router(metrics.router)

    @app.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "environment": settings.app_env,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "reflect.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
