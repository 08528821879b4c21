import asyncio
import logging
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from content_gallery.core.config import settings as env_settings
from content_gallery.services.sync_service import media_directories, run_sync
from content_gallery.worker.jobs import enqueue
from content_gallery.worker.queue import running_jobs

logger = logging.getLogger("contentgallery.auto")

_thread: threading.Thread | None = None
_stop_event = threading.Event()


@dataclass
class MediaSnapshot:
    latest_mtime: float = 0.0


def _latest_mtime(directories: Iterable[Path]) -> float:
    """Newest mtime among the directories and their direct entries; deletions bump the directory mtime."""
    newest = 0.0
    for directory in directories:
        try:
            newest = max(newest, directory.stat().st_mtime)
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        newest = max(newest, entry.stat().st_mtime)
                    except FileNotFoundError:
                        continue
        except FileNotFoundError:
            continue
    return newest


def _any_job_running() -> bool:
    return bool(running_jobs())


def _sync_job(reason: str):
    return asyncio.run(run_sync(reason))


def enqueue_sync(reason: str) -> str:
    job_id = enqueue(f"sync_{reason}", lambda: _sync_job(reason))
    logger.info("Sync enqueued (reason=%s) job_id=%s", reason, job_id)
    return job_id


def next_trigger(
    now: float,
    last_full_sync: float,
    interval_secs: float,
    snapshot: MediaSnapshot,
    latest_mtime: float | None,
) -> str | None:
    """Decide whether a sync is due: 'interval' when the period elapsed, 'change' when media moved forward."""
    if now - last_full_sync >= interval_secs:
        return "interval"
    if latest_mtime is not None and latest_mtime > snapshot.latest_mtime:
        return "change"
    return None


def start_auto_sync_thread():
    global _thread
    if _thread and _thread.is_alive():
        return
    _stop_event.clear()
    _thread = threading.Thread(target=_loop, name="content-gallery-auto-sync", daemon=True)
    _thread.start()
    logger.info("Auto-sync thread started")


def stop_auto_sync_thread():
    _stop_event.set()
    if _thread:
        _thread.join(timeout=2)


def _loop():
    # the startup sync (if any) counts as the first full run
    last_full_sync = time.time()
    snapshot = MediaSnapshot(latest_mtime=_latest_mtime(media_directories()))
    last_mtime_check = 0.0
    while not _stop_event.is_set():
        try:
            if not env_settings.auto_sync_enabled or _any_job_running():
                _stop_event.wait(5)
                continue

            now = time.time()
            latest = None
            if now - last_mtime_check >= env_settings.change_check_seconds:
                last_mtime_check = now
                latest = _latest_mtime(media_directories())

            interval_secs = max(env_settings.auto_sync_interval_minutes, 1) * 60
            reason = next_trigger(now, last_full_sync, interval_secs, snapshot, latest)
            if latest is not None:
                if reason == "change":
                    logger.debug("Media change detected (mtime %.2f -> %.2f)", snapshot.latest_mtime, latest)
                snapshot = MediaSnapshot(latest_mtime=latest)

            if reason and not _any_job_running():
                enqueue_sync(reason)
                last_full_sync = now
        except Exception:
            logger.error("Auto-sync loop error", exc_info=True)
        _stop_event.wait(5)
