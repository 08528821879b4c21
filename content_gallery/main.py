import logging
from pathlib import Path

from fastapi import FastAPI

from content_gallery.api.routes_activity import router as activity_router
from content_gallery.api.routes_content import router as content_router
from content_gallery.api.routes_health import router as health_router
from content_gallery.api.routes_logs import router as logs_router
from content_gallery.api.routes_status import router as status_router
from content_gallery.api.routes_sync import router as sync_router
from content_gallery.core.config import APP_VERSION, settings as env_settings
from content_gallery.core.db import init_db
from content_gallery.core.logging_utils import setup_logging
from content_gallery.services.sync_service import media_directories, run_sync
from content_gallery.worker.auto_sync import start_auto_sync_thread, stop_auto_sync_thread
from content_gallery.worker.jobs import start_worker

logger = logging.getLogger("contentgallery")

app = FastAPI(title="Content Gallery", version=APP_VERSION)


def _ensure_dir(path: Path, allow_failure: bool = False) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except Exception as exc:  # pragma: no cover - startup safety
        logger.warning("Failed to create directory %s: %s", path, exc)
        if not allow_failure:
            raise
        return False


@app.on_event("startup")
async def startup():
    setup_logging(Path(env_settings.config_root), debug_enabled=env_settings.debug_logging)
    _ensure_dir(Path(env_settings.config_root))
    for path in media_directories():
        _ensure_dir(path, allow_failure=True)
    await init_db()
    start_worker()
    if env_settings.sync_on_startup:
        try:
            await run_sync("startup")
        except Exception:  # pragma: no cover - startup safety
            logger.error("Startup sync failed", exc_info=True)
    start_auto_sync_thread()


@app.on_event("shutdown")
async def shutdown():
    stop_auto_sync_thread()


app.include_router(content_router, prefix="/api")
app.include_router(sync_router, prefix="/api")
app.include_router(status_router, prefix="/api")
app.include_router(activity_router, prefix="/api")
app.include_router(logs_router, prefix="/api")
app.include_router(health_router, prefix="/api")
