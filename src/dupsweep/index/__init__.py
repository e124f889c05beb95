"""Content fingerprinting, tie-break and indexing."""

from .content_index import ContentIndex
from .hashing import HASH_CHUNK_BYTES, sha256_file
from .models import FileRecord, Resolution, WalkStats
from .resolver import new_record_wins, resolve
from .walker import should_exclude, walk_tree

__all__ = [
    "ContentIndex",
    "FileRecord",
    "HASH_CHUNK_BYTES",
    "Resolution",
    "WalkStats",
    "new_record_wins",
    "resolve",
    "sha256_file",
    "should_exclude",
    "walk_tree",
]
