"""Action log for audit sessions and application logging setup."""

import json
import logging
import os
from pathlib import Path

from compliance.utils import iso_now

DEFAULT_AUDIT_DIR = Path(__file__).resolve().parent.parent / "logs"
# Explicit override; when None the directory comes from UI_AUDIT_LOG_DIR at call time.
AUDIT_DIR: Path | None = None
AUDIT_FILENAME = "audit.log"
APP_LOG_FILENAME = "app.log"


def log_dir() -> Path:
    if AUDIT_DIR is not None:
        return AUDIT_DIR
    return Path(os.environ.get("UI_AUDIT_LOG_DIR") or DEFAULT_AUDIT_DIR)


def _ensure_log_dir() -> Path:
    path = log_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def audit_log(
    action: str,
    status: str,
    *,
    role: str | None = None,
    filename: str | None = None,
    content_type: str | None = None,
    image_hash: str | None = None,
    byte_count: int | None = None,
    score: int | None = None,
    error: str | None = None,
    extra: dict | None = None,
):
    """
    Append a structured entry to the action log (JSONL).
    Image bytes are never written; only their hash and size.
    """
    log_dir = _ensure_log_dir()
    entry = {
        "timestamp": iso_now(),
        "action": action,
        "status": status,
        "role": role,
    }
    if filename:
        entry["filename"] = filename
    if content_type:
        entry["content_type"] = content_type
    if image_hash:
        entry["image_hash"] = image_hash
    if byte_count is not None:
        entry["byte_count"] = byte_count
    if score is not None:
        entry["score"] = score
    if error:
        entry["error"] = error
    if extra:
        entry.update(extra)

    with open(log_dir / AUDIT_FILENAME, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def setup_app_logging():
    """Configure application logging to console and file."""
    log_dir = _ensure_log_dir()
    logger = logging.getLogger("ui_audit")
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)

    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(ch)

    # File
    fh = logging.FileHandler(log_dir / APP_LOG_FILENAME, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(fh)

    return logger
