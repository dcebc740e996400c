"""Game version and loader compatibility endpoints."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from umt_gen.api.deps import get_catalog
from umt_gen.api.models import ClientVersion
from umt_gen.core.catalog import CatalogService, CatalogSnapshot
from umt_gen.versions.matrix import loader_map_to_client, matrix_to_client
from umt_gen.versions.schemas import GameVersion, LoaderKind

router = APIRouter()


async def loaded_snapshot(catalog: CatalogService) -> CatalogSnapshot:
    """Current snapshot; a missing or empty catalog triggers a coalesced refresh."""
    snapshot = catalog.snapshot
    if snapshot.needs_refresh:
        loop = asyncio.get_running_loop()
        snapshot = await loop.run_in_executor(None, catalog.ensure_loaded)
    return snapshot


@router.get("/minecraft-versions", response_model=list[GameVersion])
async def minecraft_versions(catalog: CatalogService = Depends(get_catalog)):
    """Release versions, newest first."""
    snapshot = await loaded_snapshot(catalog)
    if not snapshot.game_versions:
        raise HTTPException(
            status_code=503,
            detail="Failed to fetch Minecraft versions. Please try again later.",
        )
    return list(snapshot.game_versions)


@router.get("/mod-loader-versions")
async def mod_loader_versions(catalog: CatalogService = Depends(get_catalog)):
    """Every canonical loader map, keyed by loader."""
    snapshot = await loaded_snapshot(catalog)
    return {
        kind.value: loader_map_to_client(kind, snapshot.loader_maps[kind])
        for kind in LoaderKind
    }


@router.get("/compatible-versions", response_model=list[ClientVersion])
async def compatible_versions(catalog: CatalogService = Depends(get_catalog)):
    """Game versions with the loader versions available for each."""
    snapshot = await loaded_snapshot(catalog)
    if not snapshot.matrix:
        raise HTTPException(
            status_code=503,
            detail="Failed to fetch compatible versions. Please try again later.",
        )
    return matrix_to_client(snapshot.matrix)
