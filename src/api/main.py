"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Middleware configuration (audit and security headers)
4. Exception handlers (directory exceptions, request validation)
5. Startup/shutdown events

Run with: uvicorn src.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.config import get_settings
from src.core.logging_config import setup_logging, get_logger
from src.core.exceptions import DirectoryException
from src.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from src.api.routes import health_router, swift_codes_router


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, app_name=settings.app_name)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create the bank table when the SQL store is configured
    - Shutdown: close the record store and drop the shared service
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"Store backend: {settings.store_backend}")
    logger.info(f"Aggregation timeout: {settings.aggregation_timeout_seconds}s")
    logger.info(f"Audit Logging: {settings.enable_audit_logging}")

    if settings.uses_sql_store():
        from src.database.init_db import init_bank_tables
        try:
            init_bank_tables()
            logger.info("Checked/Initialized bank tables.")
        except Exception as e:
            logger.error(f"Failed to auto-init tables: {e}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from src.database.store_factory import reset_record_store
    from src.services.directory_service import reset_directory_service
    try:
        reset_directory_service()
        reset_record_store()
        logger.info("Closed record store")
    except Exception as e:
        logger.error(f"Error closing record store: {e}")


app = FastAPI(
    title="SWIFT Code Directory API",
    description="""
    Lookup service for bank SWIFT/BIC codes.

    ## Features

    - **Point lookups**: Bank details by SWIFT code
    - **Branch resolution**: Headquarters list every branch sharing their prefix
    - **Country listing**: Every bank registered under a country code
    - **Partial results**: 206 with per-record warnings when fetches fail
    - **Add/Delete**: Validated single-record writes
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (Order matters!)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(DirectoryException)
async def directory_exception_handler(request: Request, exc: DirectoryException):
    """Handle all custom directory exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    else:
        logger.info(f"{exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render request body errors in the 400 validation error format."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": first.get("msg", "Invalid request body"),
            "details": f"field={field}" if field else None,
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(swift_codes_router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "SWIFT Code Directory API",
        "version": "1.0.0",
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development()
    )
