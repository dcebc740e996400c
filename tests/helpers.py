"""Builders and fakes shared across the test modules."""

import io
import json
import threading
import zipfile
from datetime import datetime

from umt_gen.core.feeds import FeedFetchError, FeedSource
from umt_gen.versions.schemas import (
    CompatibilityRecord,
    GameVersion,
    LoaderKind,
    LoaderVersionEntry,
)


def make_record(version_id: str, released: str = "2024-01-01T00:00:00+00:00", **loaders):
    """Build a record from loader kwargs, e.g. fabric="0.15.0", neoforge=("72", "20.4.72")."""
    entries = {}
    for key, value in loaders.items():
        kind = LoaderKind(key)
        full_version = None
        if isinstance(value, tuple):
            value, full_version = value
        entries[kind] = LoaderVersionEntry(loader=kind, version=value, full_version=full_version)
    return CompatibilityRecord(
        game_version=GameVersion(id=version_id, release_timestamp=datetime.fromisoformat(released)),
        loaders=entries,
    )


def build_zip(files: dict[str, bytes | str], directories: tuple[str, ...] = ()) -> bytes:
    """Build an in-memory ZIP from a path -> content mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for directory in directories:
            zf.writestr(directory if directory.endswith("/") else f"{directory}/", b"")
        for path, content in files.items():
            zf.writestr(path, content)
    return buffer.getvalue()


FEEDS = {
    FeedSource.GAME_VERSIONS: {
        "versions": [
            {"id": "1.21", "type": "release", "releaseTime": "2024-06-13T08:24:03+00:00"},
            {"id": "1.20.4", "type": "release", "releaseTime": "2023-12-07T12:56:20+00:00"},
        ]
    },
    FeedSource.FABRIC_GAMES: [
        {"version": "1.21", "stable": True},
        {"version": "1.20.4", "stable": True},
    ],
    FeedSource.FABRIC_LOADERS: [{"version": "0.15.11"}],
    FeedSource.FABRIC_API: [
        {"version_number": "0.97.0+1.20.4", "version_type": "release", "game_versions": ["1.20.4"]},
    ],
    FeedSource.FORGE: {"promos": {"1.20.4-recommended": "49.0.3"}},
    FeedSource.NEOFORGE: {"versions": ["20.4.72", "21.0.5"]},
}


class FakeFeedClient:
    """Serves canned payloads and counts fetches per source."""

    def __init__(self, payloads=None, failing=(), gate=None):
        self.payloads = dict(FEEDS if payloads is None else payloads)
        self.failing = set(failing)
        self.gate = gate
        self.calls = {}
        self._lock = threading.Lock()

    def fetch(self, source):
        with self._lock:
            self.calls[source] = self.calls.get(source, 0) + 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if source in self.failing:
            raise FeedFetchError(source, "503 Service Unavailable")
        payload = self.payloads[source]
        return payload if isinstance(payload, bytes) else json.dumps(payload).encode()
