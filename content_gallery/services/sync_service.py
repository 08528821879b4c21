import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

from content_gallery.api.schemas import LastSync, SyncResult
from content_gallery.core.config import settings as env_settings
from content_gallery.core.db import SessionLocal
from content_gallery.services.activity_service import log_activity
from content_gallery.services.content_store import ContentStore, SqlContentStore
from content_gallery.services.scanner import MediaScanner
from content_gallery.services.status_service import reset_status, set_status

logger = logging.getLogger("contentgallery.sync")
_last_lock = threading.Lock()
_last_result: Dict[str, Optional[object]] = {"result": None, "finished_at": None, "reason": None}


def _path_accessible(path: str) -> bool:
    return os.access(path, os.F_OK)


async def synchronize(scanner: MediaScanner, store: ContentStore) -> SyncResult:
    """
    Reconcile the media directories with the content store.

    New files get a record, records whose file is gone are deleted, and everything
    else counts as unchanged. Failures never propagate: they end up in ``errors``
    and whatever was accumulated so far is returned.
    """
    logger.info("Starting local media sync...")
    result = SyncResult()

    try:
        report = await scanner.scan()
        result.errors.extend(report.errors)
        all_content = await store.get_all_content()

        local_paths = {f.local_file_path for f in report.files}
        db_local_content = [c for c in all_content if c.local_file_path]

        for file_info in report.files:
            try:
                existing = await store.get_content_by_local_path(file_info.local_file_path)
                if existing is None:
                    await store.create_content(file_info.to_content_create())
                    result.added += 1
                    logger.info("Added: %s", file_info.title)
                else:
                    result.unchanged += 1
            except Exception as exc:
                message = f"Error adding {file_info.title}: {exc}"
                logger.error(message)
                result.errors.append(message)

        for record in db_local_content:
            if record.local_file_path in local_paths:
                continue
            # still on disk, just outside the scanned directories or allow-list
            if _path_accessible(record.local_file_path):
                result.unchanged += 1
                continue
            try:
                await store.delete_content_by_local_path(record.local_file_path)
                result.removed += 1
                logger.info("Removed (file deleted): %s", record.title)
            except Exception as exc:
                message = f"Error removing {record.title}: {exc}"
                logger.error(message)
                result.errors.append(message)

        logger.info("Sync complete: +%s, -%s, =%s", result.added, result.removed, result.unchanged)
    except Exception as exc:
        message = f"Sync failed: {exc}"
        logger.error(message, exc_info=True)
        result.errors.append(message)

    return result


class SyncLock:
    """Non-blocking exclusive guard: a second caller is skipped, never queued."""

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def run_exclusive(self, sync_fn: Callable[[], Awaitable[SyncResult]]) -> Optional[SyncResult]:
        if not self._lock.acquire(blocking=False):
            logger.info("Sync already in progress, skipping...")
            return None
        try:
            return await sync_fn()
        finally:
            self._lock.release()


sync_lock = SyncLock()


async def sync_with_lock(scanner: MediaScanner, store: ContentStore) -> Optional[SyncResult]:
    return await sync_lock.run_exclusive(lambda: synchronize(scanner, store))


def default_scanner() -> MediaScanner:
    return MediaScanner(env_settings.images_dir, env_settings.videos_dir)


def default_store() -> SqlContentStore:
    return SqlContentStore(SessionLocal)


def _record_last(result: SyncResult, reason: str):
    with _last_lock:
        _last_result.update({"result": result, "finished_at": datetime.utcnow(), "reason": reason})


def get_last_result() -> LastSync:
    with _last_lock:
        return LastSync(**_last_result)


async def run_sync(
    reason: str = "manual",
    scanner: MediaScanner | None = None,
    store: ContentStore | None = None,
    session_factory=SessionLocal,
) -> Optional[SyncResult]:
    """Run a locked sync with the configured media root and database, then record the outcome."""
    scanner = scanner or default_scanner()
    store = store or default_store()

    async def _run() -> SyncResult:
        set_status("syncing", f"Syncing local media ({reason})", meta={"reason": reason})
        try:
            return await synchronize(scanner, store)
        finally:
            reset_status()

    result = await sync_lock.run_exclusive(_run)
    if result is None:
        return None

    _record_last(result, reason)
    level = "WARN" if result.errors else "INFO"
    async with session_factory() as session:
        await log_activity(
            session,
            level,
            f"Sync ({reason}): +{result.added}, -{result.removed}, ={result.unchanged}",
            result.model_dump(),
        )
    return result


def media_directories() -> list[Path]:
    return [env_settings.images_dir, env_settings.videos_dir]
