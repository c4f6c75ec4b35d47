"""Request-scoped access to the services created in create_app()."""

from fastapi import Request

from motion_control.config import Settings
from motion_control.jobs.orchestrator import GenerationOrchestrator
from motion_control.storage.uploads import UploadStore


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    return request.app.state.orchestrator


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
