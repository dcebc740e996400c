"""Tests for the compatibility matrix and Java toolchain tiers."""

from datetime import datetime, timezone

import pytest

from umt_gen.versions.matrix import build_matrix, loader_map_to_client, matrix_to_client
from umt_gen.versions.schemas import (
    CompatibilityRecord,
    GameVersion,
    LoaderKind,
    LoaderVersionEntry,
)
from umt_gen.versions.toolchain import java_version_for


def _game(version_id, year):
    return GameVersion(id=version_id, release_timestamp=datetime(year, 1, 1, tzinfo=timezone.utc))


def _entry(kind, version, full_version=None):
    return LoaderVersionEntry(loader=kind, version=version, full_version=full_version)


@pytest.fixture
def game_versions():
    return [_game("1.21", 2024), _game("1.20.4", 2023), _game("1.7.10", 2014)]


@pytest.fixture
def loader_maps():
    return {
        LoaderKind.FABRIC: {
            "1.21": _entry(LoaderKind.FABRIC, "0.15.11"),
            "1.20.4": _entry(LoaderKind.FABRIC, "0.15.11"),
        },
        LoaderKind.FABRIC_API: {"1.20.4": _entry(LoaderKind.FABRIC_API, "0.97.0+1.20.4")},
        LoaderKind.FORGE: {"1.7.10": _entry(LoaderKind.FORGE, "10.13.4.1614")},
        LoaderKind.NEOFORGE: {"1.20.4": _entry(LoaderKind.NEOFORGE, "72", "20.4.72")},
    }


class TestBuildMatrix:
    """Tests for build_matrix()."""

    def test_one_record_per_game_version_in_order(self, game_versions, loader_maps):
        matrix = build_matrix(game_versions, loader_maps)
        assert [r.id for r in matrix] == ["1.21", "1.20.4", "1.7.10"]

    def test_only_loaders_with_data(self, game_versions, loader_maps):
        matrix = build_matrix(game_versions, loader_maps)
        by_id = {r.id: r for r in matrix}

        assert set(by_id["1.21"].loaders) == {LoaderKind.FABRIC}
        assert set(by_id["1.20.4"].loaders) == {
            LoaderKind.FABRIC,
            LoaderKind.FABRIC_API,
            LoaderKind.NEOFORGE,
        }
        assert by_id["1.7.10"].version_of(LoaderKind.FORGE) == "10.13.4.1614"
        assert not by_id["1.7.10"].supports(LoaderKind.FABRIC)

    def test_missing_loader_maps(self, game_versions):
        matrix = build_matrix(game_versions, {})
        assert all(not r.loaders for r in matrix)

    def test_loader_entries_without_game_version_dropped(self, loader_maps):
        matrix = build_matrix([_game("1.21", 2024)], loader_maps)
        assert len(matrix) == 1
        assert matrix[0].entry(LoaderKind.NEOFORGE) is None

    def test_record_loaders_are_read_only(self, game_versions, loader_maps):
        record = build_matrix(game_versions, loader_maps)[0]

        with pytest.raises(TypeError):
            record.loaders[LoaderKind.FORGE] = _entry(LoaderKind.FORGE, "51.0.1")
        assert not record.supports(LoaderKind.FORGE)

    def test_record_detached_from_input_dict(self):
        loaders = {LoaderKind.FABRIC: _entry(LoaderKind.FABRIC, "0.15.11")}
        record = CompatibilityRecord(game_version=_game("1.21", 2024), loaders=loaders)

        loaders[LoaderKind.FORGE] = _entry(LoaderKind.FORGE, "51.0.1")

        assert set(record.loaders) == {LoaderKind.FABRIC}


class TestClientShapes:
    """Tests for the JSON shapes served to the selection UI."""

    def test_matrix_to_client(self, game_versions, loader_maps):
        client = matrix_to_client(build_matrix(game_versions, loader_maps))
        row = client[1]

        assert row["id"] == "1.20.4"
        assert row["releaseTimestamp"].startswith("2023-01-01T00:00:00")
        assert row["loaders"] == {
            "fabric": "0.15.11",
            "fabricApi": "0.97.0+1.20.4",
            "forge": None,
            "neoforge": "72",
            "neoforgeFullVersion": "20.4.72",
        }

    def test_neoforge_map_keeps_full_version(self, loader_maps):
        client = loader_map_to_client(LoaderKind.NEOFORGE, loader_maps[LoaderKind.NEOFORGE])
        assert client == {"1.20.4": {"version": "72", "fullVersion": "20.4.72"}}

    def test_other_maps_are_flat(self, loader_maps):
        client = loader_map_to_client(LoaderKind.FABRIC, loader_maps[LoaderKind.FABRIC])
        assert client == {"1.21": "0.15.11", "1.20.4": "0.15.11"}


class TestJavaVersion:
    """Tests for java_version_for()."""

    @pytest.mark.parametrize(
        "version_id,expected",
        [
            ("1.5.2", 8),
            ("1.8", 8),
            ("1.12.2", 8),
            ("1.16.5", 8),
            ("1.17", 16),
            ("1.17.1", 16),
            ("1.18.2", 17),
            ("1.20.4", 17),
            ("1.20.5", 21),
            ("1.20.6", 21),
            ("1.21", 21),
            ("1.21.5", 21),
        ],
    )
    def test_tiers(self, version_id, expected):
        assert java_version_for(version_id) == expected

    def test_rejects_non_release_id(self):
        with pytest.raises(ValueError):
            java_version_for("24w14a")
