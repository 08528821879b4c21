from fastapi import APIRouter

from content_gallery.api.schemas import StatusOut
from content_gallery.services.status_service import get_status
from content_gallery.services.sync_service import get_last_result, sync_lock
from content_gallery.worker.queue import job_queue, running_jobs

router = APIRouter(prefix="/status", tags=["status"])


@router.get("/", response_model=StatusOut)
async def current_status():
    return StatusOut(
        status=get_status(),
        queue_depth=job_queue.qsize(),
        running_jobs=running_jobs(),
        sync_in_progress=sync_lock.locked,
        last_sync=get_last_result(),
    )
