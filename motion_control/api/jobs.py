"""Generation API — start a motion-transfer job and poll its status.

Domain errors raised by the orchestrator (missing input, unknown job,
provider failure) are turned into status codes by the app's error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from motion_control.api.deps import get_orchestrator
from motion_control.jobs.orchestrator import GenerationOrchestrator

router = APIRouter()


class GenerateRequest(BaseModel):
    characterImageUrl: Optional[str] = None
    motionVideoUrl: Optional[str] = None
    prompt: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool
    message: str
    jobId: str
    predictionId: str
    status: str


class StatusResponse(BaseModel):
    jobId: str
    status: str
    videoUrl: Optional[str] = None
    error: Optional[str] = None


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    request: Optional[GenerateRequest] = None,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    """Submit a generation to the provider. Poll GET /api/status/{jobId} afterwards."""
    # No body at all is the same as a body with both URLs missing
    request = request or GenerateRequest()
    job = await orchestrator.generate(
        request.characterImageUrl,
        request.motionVideoUrl,
        request.prompt,
    )
    return GenerateResponse(
        success=True,
        message="Video generation started",
        jobId=job.id,
        predictionId=job.provider_job_id,
        status=job.status.value,
    )


@router.get("/status/{job_id}", response_model=StatusResponse)
async def get_status(
    job_id: str,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    """Fetch the provider's current state for a job and return it."""
    view = await orchestrator.poll_status(job_id)
    return StatusResponse(
        jobId=view.job_id,
        status=view.status,
        videoUrl=view.video_url,
        error=view.error,
    )
