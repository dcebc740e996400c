"""Configuration and environment loading."""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream feeds
    minecraft_versions_url: str = Field(
        default="https://launchermeta.mojang.com/mc/game/version_manifest.json",
        alias="MINECRAFT_VERSIONS_URL",
    )
    fabric_game_versions_url: str = Field(
        default="https://meta.fabricmc.net/v2/versions/game",
        alias="FABRIC_GAME_VERSIONS_URL",
    )
    fabric_loader_versions_url: str = Field(
        default="https://meta.fabricmc.net/v2/versions/loader",
        alias="FABRIC_LOADER_VERSIONS_URL",
    )
    fabric_api_versions_url: str = Field(
        default="https://api.modrinth.com/v2/project/fabric-api/version",
        alias="FABRIC_API_VERSIONS_URL",
    )
    forge_versions_url: str = Field(
        default="https://files.minecraftforge.net/net/minecraftforge/forge/promotions_slim.json",
        alias="FORGE_VERSIONS_URL",
    )
    neoforge_versions_url: str = Field(
        default="https://maven.neoforged.net/api/maven/versions/releases/net/neoforged/neoforge",
        alias="NEOFORGE_VERSIONS_URL",
    )

    # Template archive
    template_url: str = Field(
        default="https://github.com/Ran-Mewo/universal-mod-template/archive/refs/heads/master.zip",
        alias="TEMPLATE_URL",
    )

    # Fetching
    http_timeout: float = Field(default=30.0, gt=0, alias="HTTP_TIMEOUT")
    fetch_workers: int = Field(default=6, ge=1, alias="FETCH_WORKERS")

    # Storage
    blob_dir: Path | None = Field(default=None, alias="BLOB_DIR")
    blob_prefix: str = Field(
        default="universal-mod-template-generator/", alias="BLOB_PREFIX"
    )
    output_dir: Path = Field(default=Path("."), alias="OUTPUT_DIR")

    model_config = {"env_file": ".env", "extra": "ignore"}

    def blob_name(self, name: str) -> str:
        """Full blob key for a stored artifact name."""
        return f"{self.blob_prefix}{name}"


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
