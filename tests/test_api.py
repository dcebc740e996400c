"""Tests for the HTTP API."""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient

from tests.helpers import FakeFeedClient
from umt_gen.api.app import create_app
from umt_gen.api.deps import get_catalog
from umt_gen.config import Settings
from umt_gen.core.catalog import CatalogService
from umt_gen.core.feeds import FeedSource


@pytest.fixture
def catalog(template_zip):
    client = FakeFeedClient()
    client.payloads[FeedSource.TEMPLATE] = template_zip
    service = CatalogService(Settings(BLOB_DIR=None), client=client)
    yield service
    service.close()


@pytest.fixture
def api(catalog):
    app = create_app()
    app.dependency_overrides[get_catalog] = lambda: catalog
    with TestClient(app) as client:
        yield client


def _generate_body(**overrides):
    body = {
        "modId": "mymod",
        "modName": "My Mod",
        "packageName": "com.example.mymod",
        "loaders": ["fabric", "neoforge"],
        "versions": ["1.20.4"],
    }
    body.update(overrides)
    return body


class TestVersionEndpoints:
    """Tests for the version listing endpoints."""

    def test_minecraft_versions(self, api):
        response = api.get("/api/minecraft-versions")
        assert response.status_code == 200
        versions = response.json()
        assert [v["id"] for v in versions] == ["1.21", "1.20.4"]
        assert "releaseTimestamp" in versions[0]

    def test_compatible_versions(self, api):
        response = api.get("/api/compatible-versions")
        assert response.status_code == 200
        rows = {row["id"]: row for row in response.json()}
        assert rows["1.20.4"]["loaders"] == {
            "fabric": "0.15.11",
            "fabricApi": "0.97.0+1.20.4",
            "forge": "49.0.3",
            "neoforge": "72",
            "neoforgeFullVersion": "20.4.72",
        }
        assert rows["1.21"]["loaders"]["forge"] is None

    def test_mod_loader_versions(self, api):
        response = api.get("/api/mod-loader-versions")
        assert response.status_code == 200
        maps = response.json()
        assert set(maps) == {"fabric", "fabricApi", "forge", "neoforge"}
        assert maps["forge"] == {"1.20.4": "49.0.3"}
        assert maps["neoforge"]["1.21"] == {"version": "5", "fullVersion": "21.0.5"}

    def test_unavailable_when_game_feed_down(self):
        service = CatalogService(
            Settings(BLOB_DIR=None), client=FakeFeedClient(failing={FeedSource.GAME_VERSIONS})
        )
        app = create_app()
        app.dependency_overrides[get_catalog] = lambda: service
        try:
            with TestClient(app) as client:
                assert client.get("/api/minecraft-versions").status_code == 503
                assert client.get("/api/compatible-versions").status_code == 503
        finally:
            service.close()

    def test_recovers_after_game_feed_comes_back(self, api, catalog):
        catalog.client.failing.add(FeedSource.GAME_VERSIONS)
        assert api.get("/api/compatible-versions").status_code == 503

        catalog.client.failing.clear()
        response = api.get("/api/compatible-versions")

        assert response.status_code == 200
        assert [row["id"] for row in response.json()] == ["1.21", "1.20.4"]
        assert catalog.client.calls[FeedSource.GAME_VERSIONS] == 2

    def test_loader_versions_refetched_when_empty(self, api, catalog):
        catalog.client.failing.update(
            {FeedSource.FABRIC_GAMES, FeedSource.FABRIC_API, FeedSource.FORGE, FeedSource.NEOFORGE}
        )
        assert api.get("/api/mod-loader-versions").json()["forge"] == {}

        catalog.client.failing.clear()
        response = api.get("/api/mod-loader-versions")

        assert response.json()["forge"] == {"1.20.4": "49.0.3"}

    def test_generate_after_failed_first_refresh(self, api, catalog):
        catalog.client.failing.add(FeedSource.GAME_VERSIONS)
        assert api.post("/api/generate", json=_generate_body()).status_code == 503

        catalog.client.failing.clear()
        assert api.post("/api/generate", json=_generate_body()).status_code == 200


class TestTemplateEndpoints:
    """Tests for template download and generation."""

    def test_download_template(self, api, template_zip):
        response = api.get("/api/template")
        assert response.status_code == 200
        assert response.content == template_zip
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="universal-mod-template.zip"' in response.headers["content-disposition"]

    def test_generate(self, api):
        response = api.post("/api/generate", json=_generate_body())

        assert response.status_code == 200
        assert 'filename="mymod-template.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as zf:
            names = zf.namelist()
            properties = zf.read("versionProperties/1.20.4.properties").decode()

        assert any(name.startswith("neoforge/") for name in names)
        assert not any(name.startswith("forge/") for name in names)
        assert "builds_for=fabric,neoforge" in properties

    def test_unknown_version(self, api):
        response = api.post("/api/generate", json=_generate_body(versions=["1.99"]))
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"packageName": "com..bad"},
            {"loaders": []},
            {"loaders": ["fabricApi"]},
            {"loaders": ["quilt"]},
            {"versions": []},
            {"modId": ""},
        ],
    )
    def test_invalid_selection(self, api, overrides):
        response = api.post("/api/generate", json=_generate_body(**overrides))
        assert response.status_code == 422

    def test_broken_template(self, api, catalog):
        catalog.client.payloads[FeedSource.TEMPLATE] = b"not a zip"
        response = api.post("/api/generate", json=_generate_body())

        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "DecodeError"

    def test_template_unavailable(self, api, catalog):
        catalog.client.failing.add(FeedSource.TEMPLATE)
        assert api.get("/api/template").status_code == 503


class TestConfigEndpoint:
    """Tests for GET /api/config."""

    def test_reports_catalog_status(self, api):
        before = api.get("/api/config").json()
        assert before["catalog_loaded"] is False
        assert before["template_cached"] is False

        api.get("/api/compatible-versions")
        after = api.get("/api/config").json()
        assert after["catalog_loaded"] is True
        assert after["game_version_count"] == 2
