from typing import List, Optional, Literal, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

MediaKind = Literal["image", "video"]

class ContentCreate(BaseModel):
    title: str
    type: MediaKind
    local_file_path: Optional[str] = None
    mime_type: str = "application/octet-stream"
    file_size: int = Field(default=0, ge=0)
    duration: Optional[float] = None
    remote_id: Optional[str] = None
    remote_url: Optional[str] = None

class ContentOut(BaseModel):
    id: int
    title: str
    type: str
    local_file_path: Optional[str] = None
    mime_type: str
    file_size: int
    duration: Optional[float] = None
    remote_id: Optional[str] = None
    remote_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class SyncResult(BaseModel):
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    errors: List[str] = Field(default_factory=list)

class SyncResponse(BaseModel):
    status: Literal["completed", "skipped"]
    result: Optional[SyncResult] = None

class LastSync(BaseModel):
    result: Optional[SyncResult] = None
    finished_at: Optional[datetime] = None
    reason: Optional[str] = None

class SyncJob(BaseModel):
    job_id: str
    status: str
    result: Optional[SyncResult] = None

class UploadError(BaseModel):
    filename: str
    error: str

class UploadResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success_count: int = Field(default=0, alias="successCount")
    error_count: int = Field(default=0, alias="errorCount")
    errors: List[UploadError] = Field(default_factory=list)
    content: List[ContentOut] = Field(default_factory=list)

class ActivityOut(BaseModel):
    ts: datetime
    level: str
    message: str
    payload_json: str

    class Config:
        from_attributes = True

class StatusOut(BaseModel):
    status: Dict[str, Any]
    queue_depth: int
    running_jobs: List[str]
    sync_in_progress: bool
    last_sync: LastSync
