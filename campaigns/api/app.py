"""
FastAPI application for the Campaigns API.

Services are built in the lifespan and kept on ``app.state``. A missing or
short signing secret aborts startup.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campaigns import __version__
from campaigns.api.responses import ApiResponse
from campaigns.api.routes import router as campaigns_router
from campaigns.api.seed import seed_demo_data
from campaigns.auth.routes import router as auth_router
from campaigns.auth.service import AuthService
from campaigns.auth.tokens import TokenService
from campaigns.config import Settings, get_settings
from campaigns.core.exceptions import CampaignsError
from campaigns.core.models import format_errors
from campaigns.integrations.sentry import init_sentry
from campaigns.logging_config import configure_logging
from campaigns.services.campaigns import CampaignService
from campaigns.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass their own settings and storage; the module-level ``app`` uses
    the environment.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        init_sentry(settings)

        # Fails fast (ConfigurationError) on a bad signing secret
        token_service = TokenService(settings.token_settings())

        app.state.storage = storage or create_local_storage()
        app.state.token_service = token_service
        app.state.auth_service = AuthService(app.state.storage, token_service)
        app.state.campaign_service = CampaignService(app.state.storage)

        if settings.seed_demo_data:
            await seed_demo_data(app.state.storage)

        logger.info(f"Campaigns API starting in {settings.environment} mode")
        yield
        logger.info("Campaigns API shutting down")

    app = FastAPI(
        title="Campaigns API",
        description="Campaign management with token authentication",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, settings)

    app.include_router(auth_router)
    app.include_router(campaigns_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "version": __version__}

    return app


# =============================================================================
# Error Handling
# =============================================================================


def _envelope(status_code: int, message: str, errors: list[str]) -> JSONResponse:
    body = ApiResponse[None](success=False, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(CampaignsError)
    async def handle_domain_error(request: Request, exc: CampaignsError):
        return _envelope(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _envelope(400, "Validation failed", format_errors(exc.errors()))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        errors = [str(exc)] if settings.debug else ["Please contact support if the problem persists."]
        return _envelope(500, "An error occurred while processing your request.", errors)


app = create_app()
