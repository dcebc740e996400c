"""API request/response models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ConfigStatus(BaseModel):
    """Current configuration and catalog status."""

    minecraft_versions_url: str
    fabric_game_versions_url: str
    fabric_loader_versions_url: str
    fabric_api_versions_url: str
    forge_versions_url: str
    neoforge_versions_url: str
    template_url: str
    blob_dir: str | None
    catalog_loaded: bool
    refreshed_at: datetime | None
    game_version_count: int
    template_cached: bool


class ClientLoaders(BaseModel):
    """Loader versions for one game version; null when unsupported."""

    fabric: str | None = None
    fabric_api: str | None = Field(None, alias="fabricApi")
    forge: str | None = None
    neoforge: str | None = None
    neoforge_full_version: str | None = Field(None, alias="neoforgeFullVersion")

    model_config = {"populate_by_name": True}


class ClientVersion(BaseModel):
    """One row of the compatibility matrix as the selection UI sees it."""

    id: str
    release_timestamp: datetime = Field(..., alias="releaseTimestamp")
    loaders: ClientLoaders

    model_config = {"populate_by_name": True}


class GenerateRequest(BaseModel):
    """Request to generate a customized template."""

    mod_id: str = Field(..., alias="modId")
    mod_name: str = Field(..., alias="modName")
    package_name: str = Field(..., alias="packageName")
    loaders: list[str] = Field(default_factory=list)
    versions: list[str] = Field(default_factory=list, description="Game version ids")

    model_config = {"populate_by_name": True}


class TemplateErrorDetail(BaseModel):
    """Why a generation request failed."""

    kind: str
    message: str
