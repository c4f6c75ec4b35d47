"""In-memory job registry keyed by locally issued job ids.

The registry is volatile: it lives only as long as the process, so a restart
loses every job. Records are never deleted while the process runs.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Dict, Optional

from motion_control.jobs.models import JobRecord, JobStatus

logger = logging.getLogger("motion_control.registry")


class JobRegistry:
    """Owns all JobRecords. Callers only ever see copies."""

    def __init__(self):
        self._jobs: Dict[str, JobRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last_id_ms = 0

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped so ids stay strictly increasing
        now_ms = int(time.time() * 1000)
        self._last_id_ms = max(now_ms, self._last_id_ms + 1)
        return str(self._last_id_ms)

    def create(
        self,
        provider_job_id: str,
        character_image_url: str,
        motion_video_url: str,
        prompt: Optional[str] = None,
    ) -> str:
        """Insert a new record in status 'processing' and return its id."""
        job_id = self._next_id()
        self._jobs[job_id] = JobRecord(
            id=job_id,
            provider_job_id=provider_job_id,
            status=JobStatus.PROCESSING,
            character_image_url=character_image_url,
            motion_video_url=motion_video_url,
            prompt=prompt,
        )
        self._locks[job_id] = asyncio.Lock()
        logger.info("job created id=%s prediction=%s", job_id, provider_job_id)
        return job_id

    def get(self, job_id: str) -> Optional[JobRecord]:
        job = self._jobs.get(job_id)
        return job.model_copy() if job is not None else None

    def update(
        self,
        job_id: str,
        status: JobStatus,
        output_url: Optional[str] = None,
        error: Optional[str] = None,
    ) -> Optional[JobRecord]:
        """Overwrite the mutable fields of a record.

        Unknown ids are ignored. A stored output_url is never cleared, and a
        terminal status is kept if a later update reports a non-terminal one.
        """
        job = self._jobs.get(job_id)
        if job is None:
            logger.warning("update for unknown job id=%s ignored", job_id)
            return None

        if job.status.is_terminal and not status.is_terminal:
            logger.warning(
                "job %s: keeping terminal status %s over reported %s",
                job_id, job.status.value, status.value,
            )
        else:
            if status != job.status:
                logger.info("job %s: %s -> %s", job_id, job.status.value, status.value)
            job.status = status

        if output_url:
            job.output_url = output_url
        if error:
            job.error = error
        job.updated_at = datetime.utcnow()
        return job.model_copy()

    def lock(self, job_id: str) -> asyncio.Lock:
        """Per-job mutex used to serialize reconciliation of one job."""
        return self._locks.setdefault(job_id, asyncio.Lock())

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs
