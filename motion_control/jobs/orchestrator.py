"""Generation orchestrator: submits provider predictions and reconciles job state.

generate() creates a provider prediction and registers a local job for it.
poll_status() reads the prediction through to the provider on every call and
mirrors the result into the registry. The registry never invents a status; it
holds the last successfully fetched provider state.
"""

import logging
from typing import Any, Dict, Optional

from motion_control.config import Settings
from motion_control.jobs.errors import JobNotFoundError, MissingInputError, ProviderError
from motion_control.jobs.models import JobRecord, JobStatus, JobStatusView
from motion_control.jobs.provider import InferenceProvider
from motion_control.jobs.registry import JobRegistry

logger = logging.getLogger("motion_control.orchestrator")


class GenerationOrchestrator:
    def __init__(self, registry: JobRegistry, provider: InferenceProvider, settings: Settings):
        self._registry = registry
        self._provider = provider
        self._settings = settings

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def build_input(self, motion_video_url: str, prompt: Optional[str]) -> Dict[str, Any]:
        """Model input; only the prompt and motion video come from the caller."""
        s = self._settings
        return {
            "path": motion_video_url,
            "seed": s.seed,
            "steps": s.steps,
            "prompt": prompt or s.default_prompt,
            "n_prompt": s.negative_prompt,
            "motion_module": s.motion_module,
            "guidance_scale": s.guidance_scale,
        }

    async def generate(
        self,
        character_image_url: Optional[str],
        motion_video_url: Optional[str],
        prompt: Optional[str] = None,
    ) -> JobRecord:
        if not character_image_url or not motion_video_url:
            raise MissingInputError("Character image and motion video are required")

        try:
            prediction = await self._provider.submit(
                self._settings.model_ref,
                self.build_input(motion_video_url, prompt),
            )
        except Exception as e:
            logger.error("Generation error: %s", e)
            raise ProviderError(str(e)) from e

        job_id = self._registry.create(
            prediction.id,
            character_image_url,
            motion_video_url,
            prompt,
        )
        return self._registry.get(job_id)

    async def poll_status(self, job_id: str) -> JobStatusView:
        if job_id not in self._registry:
            raise JobNotFoundError(job_id)

        async with self._registry.lock(job_id):
            job = self._registry.get(job_id)
            try:
                prediction = await self._provider.fetch(job.provider_job_id)
            except Exception as e:
                logger.error("Status check error for job %s: %s", job_id, e)
                raise ProviderError(str(e)) from e

            try:
                status = JobStatus(prediction.status)
            except ValueError:
                logger.warning(
                    "job %s: unrecognized provider status %r, keeping %s",
                    job_id, prediction.status, job.status.value,
                )
                status = job.status

            updated = self._registry.update(
                job_id,
                status,
                output_url=prediction.output,
                error=prediction.error,
            )

        return JobStatusView(
            job_id=job_id,
            status=prediction.status,
            video_url=prediction.output or (updated.output_url if updated else None),
            error=prediction.error,
        )
