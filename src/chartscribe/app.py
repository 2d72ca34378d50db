"""
FastAPI application factory and main app configuration.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError, domain_error_status
from .api.routers import cdi, charts, health, patients, transcription
from .api.schemas.common import ErrorResponse
from .core.config import get_settings
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("chartscribe")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version} (env={settings.app_env})")

    from beanie import init_beanie
    from motor.motor_asyncio import AsyncIOMotorClient
    import certifi

    from .adapters.db.mongo.models.chart_m import CdiChartInfoMongo, ChartInfoMongo
    from .adapters.db.mongo.models.patient_m import AppointmentMongo, PatientMongo

    mongo_uri = settings.database.uri
    timeout_ms = settings.database.server_selection_timeout_ms
    # Enable TLS only for Atlas SRV URIs
    if mongo_uri.startswith("mongodb+srv://"):
        client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        client = AsyncIOMotorClient(mongo_uri, serverSelectionTimeoutMS=timeout_ms)

    try:
        await init_beanie(
            database=client[settings.database.db_name],
            document_models=[ChartInfoMongo, CdiChartInfoMongo, PatientMongo, AppointmentMongo],
        )
    except Exception as e:
        logger.error(f"Database connection failed: {type(e).__name__}: {e}")
        client.close()
        raise
    logger.info("Database connection established")

    if not settings.azure_openai.is_configured:
        logger.warning(
            "Azure OpenAI is not configured; extraction and CDI endpoints will fail. "
            "Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
        )

    yield

    client.close()
    logger.info("Shutdown complete")


def _error_body(request: Request, error: str, message: str, details=None) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return ErrorResponse(
        error=error, message=message, request_id=req_id or "", details=details or {}
    ).model_dump()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Transcript-to-structured-note extraction, field reveal and CDI review",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(PerformanceMiddleware)
    # Added last so it runs first and the id is visible to everything after it
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(patients.router)
    app.include_router(transcription.router)
    app.include_router(charts.router)
    app.include_router(cdi.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = domain_error_status(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            f"DomainError: {exc.error_code} ({status_code}) on {request.method} {request.url.path} "
            f"| request_id={getattr(request.state, 'request_id', None)}"
        )
        return JSONResponse(
            status_code=status_code,
            content=_error_body(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message}")
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_body(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            error_messages.append(f"{loc}: {error.get('msg', 'Validation error')}")
        logger.warning(f"ValidationError on {request.method} {request.url.path}: {len(error_details)} error(s)")
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
                {"path": request.url.path, "fields": error_messages},
            ),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=422,
            content=_error_body(request, "VALIDATION_ERROR", str(exc)),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error: {type(exc).__name__}")
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ),
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health/",
                "process_transcription": "POST /transcription/process",
                "transcribe_chart": "POST /charts/{appointment_id}/transcribe",
                "active_note": "GET /charts/{appointment_id}/active",
                "process_cdi": "POST /cdi/{appointment_id}/process",
                "confirm_cdi": "POST /cdi/{appointment_id}/review/confirm",
                "cdi_report": "GET /cdi/{appointment_id}/report",
            },
        }

    return app


# Create the app instance
app = create_app()
