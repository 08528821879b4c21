import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Any
from uuid import uuid4

logger = logging.getLogger("contentgallery.worker")

@dataclass
class Job:
    id: str
    name: str
    fn: Callable[[], Any]

job_queue: "queue.Queue[Job]" = queue.Queue()
job_status: dict[str, str] = {}
job_results: dict[str, Any] = {}
_status_lock = threading.Lock()

MAX_FINISHED_JOBS = 200
_FINISHED = ("done", "failed")

def _prune_finished():
    """Forget the oldest finished jobs beyond MAX_FINISHED_JOBS; caller holds _status_lock."""
    finished = [jid for jid, status in job_status.items() if status in _FINISHED]
    for jid in finished[: max(len(finished) - MAX_FINISHED_JOBS, 0)]:
        job_status.pop(jid, None)
        job_results.pop(jid, None)

def enqueue_job(name: str, fn: Callable[[], Any]) -> str:
    job_id = str(uuid4())
    with _status_lock:
        job_status[job_id] = "queued"
    job_queue.put(Job(id=job_id, name=name, fn=fn))
    logger.debug("Enqueued job %s (%s)", job_id, name)
    return job_id

def set_status(job_id: str, status: str, result: Any = None):
    with _status_lock:
        job_status[job_id] = status
        if result is not None:
            job_results[job_id] = result
        if status in _FINISHED:
            _prune_finished()

def get_status(job_id: str) -> str | None:
    with _status_lock:
        return job_status.get(job_id)

def get_result(job_id: str) -> Any:
    with _status_lock:
        return job_results.get(job_id)

def running_jobs() -> list[str]:
    with _status_lock:
        return [jid for jid, status in job_status.items() if status == "running"]
