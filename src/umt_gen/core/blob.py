"""Write-only storage for computed snapshots and the template archive."""

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Persists blobs; returns a locator, or None if storing failed."""

    def store(self, key: str, data: bytes) -> str | None: ...


class LocalBlobStore:
    """Blob store backed by a local directory."""

    def __init__(self, root: Path):
        self.root = root

    def store(self, key: str, data: bytes) -> str | None:
        path = self.root / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error("Error storing blob %s: %s", key, e)
            return None
        logger.info("Stored blob %s (%d bytes)", key, len(data))
        return path.resolve().as_uri()
