"""HTTP access to the upstream version feeds and the template archive."""

import logging
from enum import Enum

import requests

from umt_gen.config import Settings

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """An upstream feed could not be fetched."""

    def __init__(self, source: "FeedSource", message: str):
        super().__init__(f"{source.value}: {message}")
        self.source = source


class FeedSource(str, Enum):
    """Upstream payloads the catalog is built from."""

    GAME_VERSIONS = "minecraft-versions"
    FABRIC_GAMES = "fabric-game-versions"
    FABRIC_LOADERS = "fabric-loader-versions"
    FABRIC_API = "fabric-api-versions"
    FORGE = "forge-promotions"
    NEOFORGE = "neoforge-versions"
    TEMPLATE = "template"

    def url(self, settings: Settings) -> str:
        return {
            FeedSource.GAME_VERSIONS: settings.minecraft_versions_url,
            FeedSource.FABRIC_GAMES: settings.fabric_game_versions_url,
            FeedSource.FABRIC_LOADERS: settings.fabric_loader_versions_url,
            FeedSource.FABRIC_API: settings.fabric_api_versions_url,
            FeedSource.FORGE: settings.forge_versions_url,
            FeedSource.NEOFORGE: settings.neoforge_versions_url,
            FeedSource.TEMPLATE: settings.template_url,
        }[self]


class FeedClient:
    """Fetches raw payloads; parsing is left to the normalizers."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None):
        self.settings = settings or Settings()
        self.session = session or requests.Session()

    def fetch(self, source: FeedSource) -> bytes:
        """Fetch the raw bytes of one source.

        Raises:
            FeedFetchError: On connection errors, timeouts and non-2xx responses.
        """
        url = source.url(self.settings)
        logger.info("Fetching %s from %s", source.value, url)
        try:
            response = self.session.get(url, timeout=self.settings.http_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FeedFetchError(source, str(e)) from e
        return response.content
