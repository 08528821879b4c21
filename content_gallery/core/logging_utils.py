import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = "content-gallery.log"
DEBUG_LOG_FILE = "content-gallery-debug.log"
_MAX_BYTES = 10 * 1024 * 1024

_configured = False
_current_debug = False


def log_dir(config_root: Path) -> Path:
    return config_root / "logs"


def _rotating(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=5)
    handler.setLevel(level)
    return handler


def setup_logging(config_root: Path, debug_enabled: bool = False):
    """
    Configure logging to stdout, a primary log file and, when debug is on, a debug
    log file under <config_root>/logs. Calling it again with the same debug flag is a no-op.
    """
    global _configured
    global _current_debug
    if _configured and _current_debug == debug_enabled:
        return
    _current_debug = debug_enabled

    fmt = "[%(levelname)s] %(asctime)s %(name)s :: %(message)s"
    target_dir = log_dir(config_root)
    handlers: list[logging.Handler] = []
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except Exception as exc:  # pragma: no cover - startup-only path
        print(f"[ContentGallery] Could not create log dir: {exc}")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug_enabled else logging.INFO)
    handlers.append(console_handler)

    try:
        handlers.append(_rotating(target_dir / LOG_FILE, logging.INFO))
    except Exception as exc:  # pragma: no cover - startup-only path
        print(f"[ContentGallery] Could not set up main log file: {exc}")

    if debug_enabled:
        try:
            handlers.append(_rotating(target_dir / DEBUG_LOG_FILE, logging.DEBUG))
        except Exception as exc:  # pragma: no cover - startup-only path
            print(f"[ContentGallery] Could not set up debug log file: {exc}")

    logging.basicConfig(
        level=logging.DEBUG if debug_enabled else logging.INFO,
        format=fmt,
        handlers=handlers,
        force=True,
    )
    _configured = True
