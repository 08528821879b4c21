from fastapi import APIRouter, Depends

from content_gallery.api.deps import get_content_store, get_media_scanner
from content_gallery.api.schemas import LastSync, SyncJob, SyncResponse
from content_gallery.services.content_store import SqlContentStore
from content_gallery.services.scanner import MediaScanner
from content_gallery.services.sync_service import get_last_result, run_sync
from content_gallery.worker.auto_sync import enqueue_sync
from content_gallery.worker.jobs import job_result, job_status

router = APIRouter(prefix="/sync", tags=["sync"])

@router.post("", response_model=SyncResponse)
async def sync_now(
    scanner: MediaScanner = Depends(get_media_scanner),
    store: SqlContentStore = Depends(get_content_store),
):
    result = await run_sync("api", scanner=scanner, store=store)
    if result is None:
        return SyncResponse(status="skipped")
    return SyncResponse(status="completed", result=result)

@router.post("/run")
async def run_sync_job():
    job_id = enqueue_sync("api_job")
    return {"job_id": job_id, "status": "queued"}

@router.get("/last", response_model=LastSync)
async def last_sync():
    return get_last_result()

@router.get("/jobs/{job_id}", response_model=SyncJob)
async def get_job_status(job_id: str):
    return SyncJob(job_id=job_id, status=job_status(job_id) or "unknown", result=job_result(job_id))
