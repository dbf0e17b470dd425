import logging
import pathlib

from fastapi import APIRouter, BackgroundTasks, HTTPException

from brickmap import GenOptions

from backend import config
from backend.jobs import JobStatus, job_manager
from backend.models import ConvertRequest, JobResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/convert", tags=["convert"])


def _resolve_input(name: str) -> str:
    """Map a file name to a path inside the input directory."""
    input_dir = pathlib.Path(config.INPUT_DIR).resolve()
    path = (input_dir / name).resolve()
    if input_dir not in path.parents:
        raise HTTPException(status_code=400, detail=f"Invalid input path: {name}")
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Input file not found: {name}")
    return str(path)


def _job_response(job) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )


@router.post("", response_model=JobResponse)
async def start_conversion(request: ConvertRequest, background_tasks: BackgroundTasks):
    """Start converting heightmaps from the input directory.

    The conversion runs in the background; the caller receives a job ID
    immediately and can poll ``/status/{job_id}`` for progress or cancel
    it with ``/cancel/{job_id}``.
    """
    heightmaps = [_resolve_input(name) for name in request.heightmaps]
    colormap = _resolve_input(request.colormap) if request.colormap else None

    options = GenOptions.from_cli(
        studs=request.size, tile=request.tile, micro=request.micro,
        stud=request.stud, scale=request.vertical, cull=request.cull,
        snap=request.snap, img=request.img, glow=request.glow,
        hdmap=request.hdmap, lrgb=request.lrgb, nocollide=request.nocollide,
        quadtree=request.quadtree, layer_threshold=request.layers,
    )
    output_name = request.output_name or pathlib.Path(request.heightmaps[0]).stem
    output_name = (
        output_name.lower()
        .replace(" ", "-")
        .replace("/", "-")
        .replace("\\", "-")
    )

    job = job_manager.create_job()
    background_tasks.add_task(
        job_manager.run_convert, job, heightmaps, colormap, output_name,
        options, request.owner_id, request.owner, preview=request.preview)

    return _job_response(job)


@router.get("/status/{job_id}", response_model=JobResponse)
async def get_conversion_status(job_id: str):
    """Poll the status of a running or finished conversion."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_response(job)


@router.post("/cancel/{job_id}", response_model=JobResponse)
async def cancel_conversion(job_id: str):
    """Request cancellation; a running job stops at its next checkpoint."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    if job.finished and job.status is not JobStatus.cancelled:
        raise HTTPException(status_code=409, detail=f"Job already {job.status.value}")
    job_manager.cancel_job(job)
    return _job_response(job)
