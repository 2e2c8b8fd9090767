"""
FastAPI application entry point for the sign-up service.
"""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app.api.auth import Settings, SupabaseIdentityProvider
from app.api.common.responses import workflow_error_response
from app.api.session import SecureSessionManager
from app.api.signup_workflow.config import SignupWorkflowConfig, get_signup_config
from app.api.signup_workflow.orchestrator import SignUpOrchestrator
from app.api.signup_workflow.routes.shared_utils import limiter
from app.api.signup_workflow.supabase_service import (
    SupabaseObjectStore,
    SupabaseRecordStore,
    create_sign_up_client,
    create_supabase_client,
)
from app.api.voicemail import VoicemailUploadPipeline
from app.api.workflow_base.backends import IdentityProvider, ObjectStore, RecordStore
from app.api.workflow_base.exceptions import WorkflowException

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

# Initialize settings
settings = Settings()


def build_orchestrator(
    app: FastAPI,
    identity_provider: IdentityProvider,
    record_store: RecordStore,
    object_store: ObjectStore,
    config: SignupWorkflowConfig,
) -> None:
    """
    Wire the upload pipeline and orchestrator into app state.

    The pipeline lives as long as the app so bucket provisioning runs once.
    """
    pipeline = VoicemailUploadPipeline(
        object_store,
        container=config.voicemail_bucket,
        extension_map=config.audio_extension_fallback,
        fallback_extension=config.generic_audio_extension,
        cache_control=config.voicemail_cache_control,
    )
    app.state.upload_pipeline = pipeline
    app.state.orchestrator = SignUpOrchestrator(identity_provider, record_store, pipeline, config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Debug mode: {settings.debug}")

    if getattr(app.state, "orchestrator", None) is None:
        client = await create_supabase_client(settings.supabase_url, settings.supabase_service_key)
        build_orchestrator(
            app,
            SupabaseIdentityProvider(
                client,
                partial(
                    create_sign_up_client, settings.supabase_url, settings.supabase_service_key
                ),
            ),
            SupabaseRecordStore(client),
            SupabaseObjectStore(client),
            app.state.signup_config,
        )
        logger.info("Supabase backends initialized")

    yield

    # Shutdown
    logger.info("Shutting down application")


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """
    Configure all middleware components for the application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    # Add rate limiter to app state
    app.state.limiter = limiter

    # Add rate limit exceeded handler
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(WorkflowException)
    async def handle_workflow_exception(request: Request, exc: WorkflowException):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        else:
            logger.warning(f"{exc.__class__.__name__}: {exc.message}")
        return workflow_error_response(exc)

    # Add request size limit middleware (15MB max)
    MAX_REQUEST_SIZE = 15 * 1024 * 1024

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):
        """Limit request size to prevent DoS attacks."""
        content_length = request.headers.get("content-length")
        if content_length and int(content_length) > MAX_REQUEST_SIZE:
            return JSONResponse(
                status_code=413, content={"detail": "Request too large. Maximum size is 15MB."}
            )
        return await call_next(request)

    # Add session middleware
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret_key)


def configure_cors(app: FastAPI, settings: Settings) -> None:
    """
    Configure CORS settings for development.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    if settings.debug:
        cors_origins = settings.cors_origins.split(",")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )


def configure_routes(app: FastAPI) -> None:
    """
    Register all API routes and endpoints.

    Args:
        app: FastAPI application instance
    """

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}

    from app.api.signup_workflow.routes import router as signup_router

    app.include_router(signup_router)


def create_app(
    identity_provider: IdentityProvider | None = None,
    record_store: RecordStore | None = None,
    object_store: ObjectStore | None = None,
    config: SignupWorkflowConfig | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Backends passed in are used as-is; when none are given the Supabase
    adapters are created at startup.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="Account sign-up with committee details and a voicemail greeting",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Configure application components
    configure_middleware(app, settings)
    configure_cors(app, settings)
    configure_routes(app)

    app.state.session_manager = SecureSessionManager(settings.session_secret_key)
    app.state.signup_config = config or get_signup_config()
    app.state.orchestrator = None
    if identity_provider and record_store and object_store:
        build_orchestrator(
            app, identity_provider, record_store, object_store, app.state.signup_config
        )

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=7001,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )
