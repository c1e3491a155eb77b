"""Utilities for hashing and audit metadata."""

import hashlib
from datetime import datetime, timezone


def hash_bytes(data: bytes) -> str:
    """Compute SHA256 hash of raw bytes. Deterministic."""
    return hashlib.sha256(data).hexdigest()


def iso_now() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
