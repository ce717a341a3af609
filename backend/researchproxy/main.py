import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import log_configuration, settings, validate_config
from .config.settings import Settings
from .exceptions import ConfigurationError, ResearchProxyError
from .routers import build_search_router, catalog, chat
from .utils.error_handling import format_error_message, status_for_exception

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.environment == "development" else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# httpx logs full request URLs at INFO, and Mojeek takes its key as a query parameter
logging.getLogger("httpx").setLevel(logging.WARNING)

# Get logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for FastAPI application.

    Startup validates configuration and logs it with secrets masked. The
    process refuses to start when no completion backend has a credential.
    """
    app_settings: Settings = app.state.settings
    try:
        logger.info("Validating configuration...")
        report = validate_config(app_settings, strict=True)
        log_configuration(app_settings, report)
        logger.info("Application startup complete")
    except ConfigurationError as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the application for ``app_settings`` (defaults to the process settings)."""
    app_settings = app_settings or settings
    # Non-strict here so an app can still be built for inspection; startup enforces it
    report = validate_config(app_settings)

    app = FastAPI(title="Research Proxy API", version="1.0.0", lifespan=lifespan)
    app.state.settings = app_settings

    # For development, allow all origins
    if app_settings.environment == "development":
        allowed_origins = ["*"]
    else:
        allowed_origins = [app_settings.frontend_url]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ResearchProxyError)
    async def research_proxy_exception_handler(request: Request, exc: ResearchProxyError):
        status_code = status_for_exception(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": format_error_message(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    # Global exception handler to ensure all errors return JSON
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        if isinstance(exc, HTTPException):
            raise exc

        logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": format_error_message(exc)})

    # Include routers AFTER middleware
    app.include_router(build_search_router(app_settings), prefix="/api")
    app.include_router(catalog.router, prefix="/api")
    if report.completion_available:
        app.include_router(chat.router, prefix="/api")
    else:
        logger.warning("No completion backend is configured; /api/chat is disabled")

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "search_providers": list(report.search_providers),
            "completion_backends": list(report.completion_backends),
        }

    return app


app = create_app()
