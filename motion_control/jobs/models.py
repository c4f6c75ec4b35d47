"""Job record data model for provider-backed generation jobs."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    PENDING = "pending"
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELED)


class JobRecord(BaseModel):
    """Tracks one generation job and the provider prediction behind it."""
    id: str
    provider_job_id: str = Field(frozen=True)
    status: JobStatus = JobStatus.PROCESSING
    character_image_url: str
    motion_video_url: str
    prompt: Optional[str] = None
    output_url: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None


class JobStatusView(BaseModel):
    """Result of a single status poll, built from the freshly fetched state."""
    job_id: str
    status: str
    video_url: Optional[str] = None
    error: Optional[str] = None
