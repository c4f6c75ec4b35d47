"""Motion Control Video API - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from motion_control.api.router import api_router
from motion_control.config import Settings, settings as default_settings
from motion_control.error_handlers import register_error_handlers
from motion_control.jobs.orchestrator import GenerationOrchestrator
from motion_control.jobs.provider import InferenceProvider, ReplicateProvider
from motion_control.jobs.registry import JobRegistry
from motion_control.middleware_logging import configure_logging, register_request_logging
from motion_control.storage.uploads import UploadStore

logger = logging.getLogger("motion_control.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    settings: Settings = app.state.settings
    app.state.upload_store.ensure_dir()

    logger.info("Starting Motion Control Video API on port %s", settings.port)
    logger.info("Upload dir: %s (served at %s)", settings.upload_dir, settings.uploads_mount_path)
    logger.info("Model: %s", settings.model_ref)
    if not settings.replicate_api_token and isinstance(app.state.provider, ReplicateProvider):
        logger.warning("REPLICATE_API_TOKEN is not set; generation requests will fail")

    yield

    # Jobs are held in memory only
    logger.info("Shutting down Motion Control Video API (%d job(s) discarded)", len(app.state.registry))


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[InferenceProvider] = None,
) -> FastAPI:
    """Build the application with its registry, orchestrator and upload store."""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    if provider is None:
        provider = ReplicateProvider(api_token=settings.replicate_api_token)

    app = FastAPI(
        title="Motion Control Video API",
        description="Character image + motion reference video to generated video",
        version="0.1.0",
        lifespan=lifespan,
    )

    registry = JobRegistry()
    upload_store = UploadStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)
    app.state.settings = settings
    app.state.provider = provider
    app.state.registry = registry
    app.state.upload_store = upload_store
    app.state.orchestrator = GenerationOrchestrator(registry, provider, settings)

    register_request_logging(app, quiet_prefixes=(settings.uploads_mount_path,))
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    # Uploaded files, read-only, one URL per stored filename. The directory
    # itself is created at startup, not on import.
    app.mount(
        settings.uploads_mount_path,
        StaticFiles(directory=upload_store.base_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
