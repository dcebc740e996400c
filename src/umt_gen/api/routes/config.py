"""Configuration and status endpoints."""

from fastapi import APIRouter, Depends

from umt_gen.api.deps import get_catalog
from umt_gen.api.models import ConfigStatus
from umt_gen.config import get_settings
from umt_gen.core.catalog import CatalogService

router = APIRouter()


@router.get("/config", response_model=ConfigStatus)
def get_config(catalog: CatalogService = Depends(get_catalog)):
    """Get current configuration and catalog status."""
    settings = get_settings()
    snapshot = catalog.snapshot

    return ConfigStatus(
        minecraft_versions_url=settings.minecraft_versions_url,
        fabric_game_versions_url=settings.fabric_game_versions_url,
        fabric_loader_versions_url=settings.fabric_loader_versions_url,
        fabric_api_versions_url=settings.fabric_api_versions_url,
        forge_versions_url=settings.forge_versions_url,
        neoforge_versions_url=settings.neoforge_versions_url,
        template_url=settings.template_url,
        blob_dir=str(settings.blob_dir) if settings.blob_dir else None,
        catalog_loaded=snapshot.is_loaded,
        refreshed_at=snapshot.refreshed_at,
        game_version_count=len(snapshot.game_versions),
        template_cached=catalog.template_cached,
    )
