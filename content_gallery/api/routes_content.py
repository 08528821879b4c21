from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from content_gallery.api.deps import get_content_store, get_media_scanner
from content_gallery.api.schemas import ContentOut, MediaKind, UploadResult
from content_gallery.core.config import settings as env_settings
from content_gallery.core.db import get_session
from content_gallery.services.activity_service import log_activity
from content_gallery.services.content_store import SqlContentStore
from content_gallery.services.scanner import MediaScanner
from content_gallery.services.upload_service import save_uploads

router = APIRouter(prefix="/content", tags=["content"])

@router.get("", response_model=list[ContentOut])
async def list_content(
    type: Optional[MediaKind] = Query(default=None),
    store: SqlContentStore = Depends(get_content_store),
):
    return await store.list_content(type)

@router.get("/{content_id}", response_model=ContentOut)
async def get_content(content_id: int, store: SqlContentStore = Depends(get_content_store)):
    record = await store.get_content(content_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return record

@router.delete("/{content_id}")
async def delete_content(content_id: int, store: SqlContentStore = Depends(get_content_store)):
    if not await store.delete_content(content_id):
        raise HTTPException(status_code=404, detail="Content not found")
    return {"status": "deleted"}

@router.post("/upload-local", response_model=UploadResult)
async def upload_local(
    files: List[UploadFile] = File(...),
    scanner: MediaScanner = Depends(get_media_scanner),
    store: SqlContentStore = Depends(get_content_store),
    session: AsyncSession = Depends(get_session),
):
    max_bytes = env_settings.max_upload_mb * 1024 * 1024
    result = await save_uploads(((f.filename, f.file) for f in files), scanner, store, max_bytes)
    await log_activity(
        session,
        "WARN" if result.error_count else "INFO",
        f"Upload: {result.success_count} stored, {result.error_count} failed",
        {"errors": [e.model_dump() for e in result.errors]},
    )
    return result
