import threading
import time
from typing import Any, Dict, Optional

_lock = threading.Lock()
_status: Dict[str, Any] = {
    "state": "standby",
    "message": "Idle",
    "meta": {},
    "updated_at": time.time(),
}


def set_status(state: str, message: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    with _lock:
        _status.update(
            {
                "state": state,
                "message": message or _status.get("message", ""),
                "meta": meta if meta is not None else {},
                "updated_at": time.time(),
            }
        )


def get_status() -> Dict[str, Any]:
    with _lock:
        return dict(_status)


def reset_status():
    set_status("standby", "Idle")
