"""
FastAPI application for the DeepHand form submission service.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from util.logging import logger
from ..core.config import VERSION, Settings, load_settings, validate_email_config
from ..core.handler import RequestHandler
from ..core.messages import response_message
from .forms import router as forms_router
from .schemas import ErrorResponse, HealthResponse


def create_app(settings: Settings = None, handler: RequestHandler = None) -> FastAPI:
    """Build the application; settings are read from the environment when omitted."""
    if settings is None:
        settings = load_settings()
    if handler is None:
        handler = RequestHandler(settings)

    app = FastAPI(
        title="DeepHand Forms API",
        version=VERSION,
        description="Contact and data-request submissions with email notification",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.handler = handler

    # The static site posts from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["POST", "OPTIONS", "GET"],
        allow_headers=["*"],
    )

    app.include_router(forms_router, prefix="/api", tags=["forms"])

    issues = validate_email_config(settings)
    if issues:
        logger.log_config_issues(issues)

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint():
        """Report whether email delivery is configured."""
        current = validate_email_config(settings)
        return HealthResponse(
            status="healthy" if not current else "degraded",
            version=VERSION,
            email_config_valid=not current,
            issues=current,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle all unhandled exceptions."""
        logger.log_exception("api.unhandled", exc, {"path": request.url.path})
        content = ErrorResponse(message=response_message("server_error", settings.default_language))
        if settings.debug:
            content = content.model_copy(update={"debug": str(exc)})
        return JSONResponse(status_code=500, content=content.model_dump(exclude_none=True))

    return app
