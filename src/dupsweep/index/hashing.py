"""Streaming content fingerprints."""

from __future__ import annotations

import hashlib
from pathlib import Path

from dupsweep.errors import ReadFailureError

HASH_CHUNK_BYTES = 1024 * 128


def sha256_file(path: Path, chunk_size: int = HASH_CHUNK_BYTES) -> str:
    """Compute SHA-256 hex digest in bounded chunked reads."""
    digest = hashlib.sha256()
    try:
        with path.open("rb") as handle:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                digest.update(chunk)
    except OSError as exc:
        raise ReadFailureError(f"Cannot read file ({exc.strerror or exc})", str(path)) from exc
    return digest.hexdigest()
