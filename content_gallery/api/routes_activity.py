from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from content_gallery.api.schemas import ActivityOut
from content_gallery.core.db import get_session
from content_gallery.services.activity_service import fetch_recent_activity

router = APIRouter(prefix="/activity", tags=["activity"])

@router.get("/", response_model=list[ActivityOut])
async def recent_activity(limit: int = Query(default=50, ge=1, le=500), session: AsyncSession = Depends(get_session)):
    return await fetch_recent_activity(session, limit=limit)
