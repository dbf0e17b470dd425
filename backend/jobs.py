import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from brickmap import BrickBuilder, ConversionCancelled, GenOptions

from backend import config

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    result: Optional[dict] = None
    cancel_requested: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.completed, JobStatus.failed,
                               JobStatus.cancelled)


def _sync_convert(heightmaps: List[str], colormap: Optional[str],
                  output_name: str, options: GenOptions,
                  owner_id: str, owner_name: str, preview: bool = False,
                  progress_callback=None) -> dict:
    """Run the conversion pipeline in a worker thread."""
    builder = BrickBuilder(options, owner_id=owner_id, owner_name=owner_name)
    config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    output_path = config.OUTPUT_DIR / f"{output_name}.brs.json"
    preview_path = config.OUTPUT_DIR / f"{output_name}.glb" if preview else None
    result = builder.run(heightmaps, output_path, colormap_file=colormap,
                         preview_path=preview_path,
                         progress_callback=progress_callback)
    result["save_url"] = f"/api/saves/{output_path.name}"
    return result


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    def cancel_job(self, job: Job) -> None:
        """Ask a job to stop at its next progress checkpoint."""
        job.cancel_requested = True
        if job.status is JobStatus.queued:
            job.status = JobStatus.cancelled
            job.message = "Cancelled"

    async def run_convert(self, job: Job, heightmaps: List[str],
                          colormap: Optional[str], output_name: str,
                          options: GenOptions, owner_id: str, owner_name: str,
                          preview: bool = False) -> None:
        """Execute the conversion, updating *job* with progress."""
        if job.cancel_requested:
            return
        try:
            job.status = JobStatus.running
            job.message = "Converting heightmap..."

            def _update_progress(fraction: float) -> bool:
                job.progress = round(fraction * 100, 1)
                return not job.cancel_requested

            result = await asyncio.to_thread(
                _sync_convert,
                heightmaps,
                colormap,
                output_name,
                options,
                owner_id,
                owner_name,
                preview=preview,
                progress_callback=_update_progress,
            )

            job.progress = 100.0
            job.message = f"Generated {result['bricks']} bricks"
            job.status = JobStatus.completed
            job.result = result

        except ConversionCancelled as exc:
            logger.info(f"Job {job.id} cancelled: {exc}")
            job.status = JobStatus.cancelled
            job.message = "Cancelled"

        except Exception as exc:
            logger.exception("Conversion failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            job.message = f"Conversion failed: {exc}"


# Singleton instance used across the application
job_manager = JobManager()
