"""Aggregate all API routers under /api."""

from fastapi import APIRouter
from motion_control.api.health import router as health_router
from motion_control.api.jobs import router as jobs_router
from motion_control.api.upload import router as upload_router

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router, tags=["health"])
api_router.include_router(upload_router, tags=["upload"])
api_router.include_router(jobs_router, tags=["jobs"])
