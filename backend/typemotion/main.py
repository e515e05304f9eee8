"""
FastAPI application entry point.
Configures the application with all routes, middleware, and lifecycle handlers.
"""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from typemotion.config import settings
from typemotion.database import init_db, close_db, check_db_connection
from typemotion.utils.logging import configure_logging, get_logger, bind_context, clear_context

from typemotion.api.v1.router import api_router
from typemotion.api.v1.websocket import ws_manager
from typemotion.services.credentials import create_credential_provider
from typemotion.services.errors import SharingUnavailable
from typemotion.services.gemini_service import GenerationClient
from typemotion.services.genai_gateway import GoogleGenAIGateway
from typemotion.services.session_controller import SessionController


# Configure logging on module load
configure_logging()
logger = get_logger(__name__)


def create_controller() -> SessionController:
    """Wire the credential provider, gateway and client into a controller."""
    credentials = create_credential_provider()
    client = GenerationClient(
        gateway=GoogleGenAIGateway(credentials),
        credentials=credentials,
    )
    return SessionController(client=client, credentials=credentials)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Create directories, initialize the profile store, load the profile
    - Shutdown: Close DB connections
    """
    # Startup
    logger.info("Starting application...", debug=settings.debug)

    # Create static directories if they don't exist
    static_path = Path(settings.static_dir)
    (static_path / "videos").mkdir(parents=True, exist_ok=True)
    logger.info("Static directories initialized.", path=str(static_path))

    await init_db()

    # Gallery carousel rotation counts from here
    app.state.started_at = time.monotonic()

    if getattr(app.state, "controller", None) is None:
        app.state.controller = create_controller()
    controller: SessionController = app.state.controller
    controller.subscribe(ws_manager.broadcast_snapshot)
    await controller.load_profile()

    logger.info("Application startup complete")

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down application")
    controller.unsubscribe(ws_manager.broadcast_snapshot)
    await close_db()
    logger.info("Database connection closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Motion typography ads from a product description",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)

# === MIDDLEWARE ===

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all requests and bind context.

    Logs request method, path, and response status.
    Binds request_id for tracing.
    """
    request_id = str(uuid.uuid4())[:8]
    bind_context(request_id=request_id)

    logger.info(
        "Request started",
        method=request.method,
        path=request.url.path,
    )

    try:
        response = await call_next(request)
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response
    except Exception as e:
        logger.exception(
            "Request failed", method=request.method, path=request.url.path, error=str(e)
        )
        raise
    finally:
        clear_context()


# === STATIC FILES ===

# Mount static files directory for serving generated videos
app.mount(
    "/static",
    StaticFiles(directory=settings.static_dir, check_dir=False),
    name="static",
)


# === HEALTH CHECK ===


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns 200 OK if the profile store is reachable, 503 otherwise.
    """
    db_healthy = await check_db_connection()

    if db_healthy:
        return {"status": "healthy", "database": "connected", "version": "1.0.0"}
    else:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
            },
        )


# === ROOT ENDPOINT ===


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "app": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "health": "/health",
    }


# === EXCEPTION HANDLERS ===


@app.exception_handler(SharingUnavailable)
async def sharing_unavailable_handler(request: Request, exc: SharingUnavailable):
    """Sharing before a result is ready."""
    logger.warning("Sharing unavailable", path=request.url.path)
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle validation errors with 400 response."""
    logger.warning("Validation error", error=str(exc), path=request.url.path)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors with 500 response."""
    logger.exception("Unhandled exception", error=str(exc), path=request.url.path)

    if settings.debug:
        # Include error details in development
        return JSONResponse(
            status_code=500, content={"detail": str(exc), "type": type(exc).__name__}
        )
    else:
        # Hide details in production
        return JSONResponse(
            status_code=500, content={"detail": "Internal server error"}
        )
