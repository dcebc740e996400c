"""Catalog of game versions and loader support, refreshed as whole snapshots.

Readers always go through ``SnapshotStore.current`` and get an immutable
``CatalogSnapshot``. A refresh builds a complete new snapshot and swaps the
reference, so a reader sees either the old catalog or the new one, never a
mix. Refreshes of the same source are coalesced: while one is in flight,
further requests join it instead of fetching again.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from umt_gen import constants
from umt_gen.config import Settings, get_settings
from umt_gen.core.blob import BlobStore, LocalBlobStore
from umt_gen.core.feeds import FeedClient, FeedFetchError, FeedSource
from umt_gen.versions.matrix import build_matrix, loader_map_to_client, matrix_to_client
from umt_gen.versions.normalizers import (
    LoaderMap,
    normalize_fabric,
    normalize_fabric_api,
    normalize_forge,
    normalize_game_versions,
    normalize_neoforge,
)
from umt_gen.versions.schemas import (
    CompatibilityRecord,
    GameVersion,
    LoaderKind,
    LoaderVersionEntry,
)

logger = logging.getLogger(__name__)

_BLOB_NAMES = {
    LoaderKind.FABRIC: constants.BLOB_FABRIC_VERSIONS,
    LoaderKind.FABRIC_API: constants.BLOB_FABRIC_API_VERSIONS,
    LoaderKind.FORGE: constants.BLOB_FORGE_VERSIONS,
    LoaderKind.NEOFORGE: constants.BLOB_NEOFORGE_VERSIONS,
}


class RefreshTarget(str, Enum):
    """Independently refreshable parts of the catalog."""

    GAME_VERSIONS = "minecraft"
    FABRIC = "fabric"
    FABRIC_API = "fabricApi"
    FORGE = "forge"
    NEOFORGE = "neoforge"
    TEMPLATE = "template"

    @property
    def loader(self) -> LoaderKind | None:
        try:
            return LoaderKind(self.value)
        except ValueError:
            return None


def _freeze(loader_maps: Mapping[LoaderKind, Mapping[str, LoaderVersionEntry]]):
    return MappingProxyType(
        {kind: MappingProxyType(dict(loader_maps.get(kind, {}))) for kind in LoaderKind}
    )


@dataclass(frozen=True)
class CatalogSnapshot:
    """One consistent view of game versions, loader maps and the matrix."""

    game_versions: tuple[GameVersion, ...]
    loader_maps: Mapping[LoaderKind, Mapping[str, LoaderVersionEntry]]
    matrix: tuple[CompatibilityRecord, ...]
    refreshed_at: datetime | None = None

    @classmethod
    def empty(cls) -> CatalogSnapshot:
        return cls(game_versions=(), loader_maps=_freeze({}), matrix=())

    @classmethod
    def build(
        cls,
        game_versions: tuple[GameVersion, ...],
        loader_maps: Mapping[LoaderKind, Mapping[str, LoaderVersionEntry]],
        refreshed_at: datetime | None = None,
    ) -> CatalogSnapshot:
        frozen = _freeze(loader_maps)
        return cls(
            game_versions=tuple(game_versions),
            loader_maps=frozen,
            matrix=build_matrix(game_versions, frozen),
            refreshed_at=refreshed_at or datetime.now(timezone.utc),
        )

    @property
    def is_loaded(self) -> bool:
        """Whether any refresh has completed yet."""
        return self.refreshed_at is not None

    @property
    def is_empty(self) -> bool:
        """No game versions, or no loader data at all."""
        return not self.game_versions or not any(self.loader_maps.values())

    @property
    def needs_refresh(self) -> bool:
        return not self.is_loaded or self.is_empty

    def record(self, version_id: str) -> CompatibilityRecord | None:
        return next((r for r in self.matrix if r.id == version_id), None)


class SnapshotStore:
    """Holds the current snapshot and swaps it atomically."""

    def __init__(self, snapshot: CatalogSnapshot | None = None):
        self._snapshot = snapshot or CatalogSnapshot.empty()
        self._lock = threading.Lock()

    @property
    def current(self) -> CatalogSnapshot:
        return self._snapshot

    def update(
        self,
        game_versions: tuple[GameVersion, ...] | None = None,
        loader_maps: Mapping[LoaderKind, LoaderMap] | None = None,
    ) -> CatalogSnapshot:
        """Publish a new snapshot from the current one plus replaced parts."""
        with self._lock:
            previous = self._snapshot
            maps = dict(previous.loader_maps)
            maps.update(loader_maps or {})
            snapshot = CatalogSnapshot.build(
                previous.game_versions if game_versions is None else game_versions,
                maps,
            )
            self._snapshot = snapshot
        return snapshot


class CatalogService:
    """Fetches, normalizes and publishes the version catalog and template."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: FeedClient | None = None,
        blob_store: BlobStore | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or FeedClient(self.settings)
        if blob_store is None and self.settings.blob_dir:
            blob_store = LocalBlobStore(self.settings.blob_dir)
        self.blob_store = blob_store
        self.store = SnapshotStore()
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.fetch_workers, thread_name_prefix="umt-refresh"
        )
        self._inflight: dict[str, Future] = {}
        self._inflight_lock = threading.Lock()
        self._template: bytes | None = None

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self.store.current

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    # --- Coalescing ---

    def _submit(self, key: str, fn: Callable[..., Any], *args: Any) -> Future:
        """Run ``fn`` in the pool unless a job under ``key`` is already running."""
        with self._inflight_lock:
            future = self._inflight.get(key)
            if future is not None:
                logger.debug("Joining in-flight refresh of %s", key)
                return future
            future = self._executor.submit(fn, *args)
            self._inflight[key] = future
        future.add_done_callback(lambda f: self._forget(key, f))
        return future

    def _forget(self, key: str, future: Future) -> None:
        with self._inflight_lock:
            if self._inflight.get(key) is future:
                del self._inflight[key]

    def _lead_or_join(self, key: str, fn: Callable[[], Any]) -> Any:
        """Run ``fn`` on this thread, or wait for the caller already running it."""
        with self._inflight_lock:
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[key] = future
        if not leader:
            logger.debug("Joining in-flight %s", key)
            return future.result()

        try:
            future.set_result(fn())
        except BaseException as e:
            future.set_exception(e)
        finally:
            self._forget(key, future)
        return future.result()

    # --- Source loaders (run in the pool, never raise for feed failures) ---

    def _fetch(self, source: FeedSource) -> bytes | None:
        try:
            return self.client.fetch(source)
        except FeedFetchError as e:
            logger.error("Error fetching %s: %s", source.value, e)
            return None

    def _load_game_versions(self) -> tuple[GameVersion, ...]:
        payload = self._fetch(FeedSource.GAME_VERSIONS)
        return normalize_game_versions(payload) if payload is not None else ()

    def _load_fabric(self) -> LoaderMap:
        games = self._fetch(FeedSource.FABRIC_GAMES)
        loaders = self._fetch(FeedSource.FABRIC_LOADERS)
        if games is None or loaders is None:
            return {}
        return normalize_fabric(games, loaders)

    def _load_fabric_api(self, fabric_versions: Mapping[str, Any]) -> LoaderMap:
        payload = self._fetch(FeedSource.FABRIC_API)
        return normalize_fabric_api(payload, fabric_versions) if payload is not None else {}

    def _load_forge(self) -> LoaderMap:
        payload = self._fetch(FeedSource.FORGE)
        return normalize_forge(payload) if payload is not None else {}

    def _load_neoforge(self) -> LoaderMap:
        payload = self._fetch(FeedSource.NEOFORGE)
        return normalize_neoforge(payload) if payload is not None else {}

    def _load_template(self) -> bytes | None:
        data = self._fetch(FeedSource.TEMPLATE)
        if data is not None:
            self._template = data
            self._store_blob(constants.BLOB_TEMPLATE, data)
        return data

    # --- Refresh ---

    def refresh_source(self, target: RefreshTarget) -> CatalogSnapshot:
        """Refresh a single source and publish it.

        A Fabric API refresh on its own resolves fallbacks against the Fabric
        map of the current snapshot.
        """
        if target is RefreshTarget.TEMPLATE:
            self.refresh_template()
            return self.snapshot

        if target is RefreshTarget.GAME_VERSIONS:
            game_versions = self._submit(target.value, self._load_game_versions).result()
            return self.store.update(game_versions=game_versions)

        if target is RefreshTarget.FABRIC_API:
            fabric = self.snapshot.loader_maps[LoaderKind.FABRIC]
            future = self._submit(target.value, self._load_fabric_api, fabric)
        else:
            future = self._submit(target.value, self._loader_job(target))
        return self.store.update(loader_maps={target.loader: future.result()})

    def _loader_job(self, target: RefreshTarget) -> Callable[[], LoaderMap]:
        return {
            RefreshTarget.FABRIC: self._load_fabric,
            RefreshTarget.FORGE: self._load_forge,
            RefreshTarget.NEOFORGE: self._load_neoforge,
        }[target]

    def refresh_all(self) -> CatalogSnapshot:
        """Refresh every version source and publish one new snapshot.

        Sources are fetched in parallel; Fabric API waits for the Fabric map
        it falls back against. Concurrent callers share one refresh.
        """
        return self._lead_or_join("all", self._refresh_all)

    def _refresh_all(self) -> CatalogSnapshot:
        logger.info("Refreshing all version sources...")
        game_future = self._submit(RefreshTarget.GAME_VERSIONS.value, self._load_game_versions)
        fabric_future = self._submit(RefreshTarget.FABRIC.value, self._load_fabric)
        forge_future = self._submit(RefreshTarget.FORGE.value, self._load_forge)
        neoforge_future = self._submit(RefreshTarget.NEOFORGE.value, self._load_neoforge)

        fabric = fabric_future.result()
        fabric_api_future = self._submit(
            RefreshTarget.FABRIC_API.value, self._load_fabric_api, fabric
        )

        snapshot = self.store.update(
            game_versions=game_future.result(),
            loader_maps={
                LoaderKind.FABRIC: fabric,
                LoaderKind.FABRIC_API: fabric_api_future.result(),
                LoaderKind.FORGE: forge_future.result(),
                LoaderKind.NEOFORGE: neoforge_future.result(),
            },
        )
        logger.info(
            "Compatible versions generated at %s (%d game versions)",
            snapshot.refreshed_at, len(snapshot.matrix),
        )
        self._store_snapshot(snapshot)
        return snapshot

    def ensure_loaded(self) -> CatalogSnapshot:
        """Current snapshot, refreshing first if it was never loaded or is empty."""
        snapshot = self.snapshot
        if snapshot.needs_refresh:
            snapshot = self.refresh_all()
        return snapshot

    # --- Template ---

    def refresh_template(self) -> bytes | None:
        """Fetch the template archive again; None if the fetch failed."""
        return self._submit(RefreshTarget.TEMPLATE.value, self._load_template).result()

    @property
    def template_cached(self) -> bool:
        return self._template is not None

    def template(self) -> bytes | None:
        """Cached template archive, fetching it on first use."""
        if self._template is None:
            return self.refresh_template()
        return self._template

    # --- Blob storage ---

    def _store_blob(self, name: str, data: bytes) -> str | None:
        if self.blob_store is None:
            return None
        return self.blob_store.store(self.settings.blob_name(name), data)

    def _store_json(self, name: str, value: Any) -> str | None:
        return self._store_blob(name, json.dumps(value, indent=2).encode("utf-8"))

    def _store_snapshot(self, snapshot: CatalogSnapshot) -> None:
        if self.blob_store is None:
            return
        self._store_json(
            constants.BLOB_MINECRAFT_VERSIONS,
            [v.model_dump(mode="json", by_alias=True) for v in snapshot.game_versions],
        )
        for kind, name in _BLOB_NAMES.items():
            self._store_json(name, loader_map_to_client(kind, snapshot.loader_maps[kind]))
        self._store_json(constants.BLOB_COMPATIBLE_VERSIONS, matrix_to_client(snapshot.matrix))
