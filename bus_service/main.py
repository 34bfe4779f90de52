import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bus_service.api.api_router import api_router
from bus_service.core.config import Settings, get_settings
from bus_service.core.logging import LOG_FORMAT, configure_logging
from bus_service.db.session import Database
from bus_service.schemas.response_schemas import HealthResponse

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Headers": (
        "Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization, "
        "accept, origin, Cache-Control, X-Requested-With"
    ),
    "Access-Control-Allow-Methods": "POST, OPTIONS, GET, PUT, DELETE",
}


def _format_validation_errors(errors) -> str:
    parts = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request body"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={"error": _format_validation_errors(errors), "details": jsonable_encoder(errors, custom_encoder={Exception: str})},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        # Sent by the outermost error middleware, past add_cors_headers.
        headers=CORS_HEADERS,
    )


def create_app(settings: Settings, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.
    The connection pool is opened in the lifespan; pass ``database`` to use an
    already built pool instead of one created from ``settings``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events"""
        # Startup
        logger.info(f"🚀 Starting {settings.PROJECT_NAME}...")

        db = database or Database.from_settings(settings)
        try:
            db.ping()
            db.init_schema()
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to connect to database: {e}")
            db.dispose()
            raise
        app.state.db = db
        logger.info("✅ Connected to database, bus and staff tables ready")

        yield

        # Shutdown
        logger.info(f"🛑 Shutting down {settings.PROJECT_NAME}...")
        db.dispose()
        logger.info("👋 Database pool closed")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="CRUD API for buses and staff of the fleet management application.",
        version=settings.VERSION,
        docs_url=None if settings.is_release else "/docs",
        redoc_url=None if settings.is_release else "/redoc",
        openapi_url=None if settings.is_release else "/openapi.json",
        lifespan=lifespan,
    )

    # Add request timing middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.4f}s")
        return response

    # Registered last so it runs first: preflight never reaches routing.
    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Liveness probe."""
        return {"status": "ok", "service": settings.SERVICE_NAME}

    return app


def run() -> None:
    """Console entry point: load settings and serve with uvicorn."""
    try:
        settings = get_settings()
    except ValueError as e:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logger.critical(f"❌ Invalid configuration: {e}")
        raise SystemExit(1)

    configure_logging(settings)
    logger.info(f"Bus Management Service starting on port {settings.PORT} ({settings.APP_MODE} mode)")
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=not settings.is_release,
    )
