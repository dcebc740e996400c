"""Merge canonical loader maps into the per-release compatibility matrix."""

from collections.abc import Mapping, Sequence
from typing import Any

from umt_gen.versions.schemas import (
    CompatibilityRecord,
    GameVersion,
    LoaderKind,
    LoaderVersionEntry,
)


def build_matrix(
    game_versions: Sequence[GameVersion],
    loader_maps: Mapping[LoaderKind, Mapping[str, LoaderVersionEntry]],
) -> tuple[CompatibilityRecord, ...]:
    """Build one record per game version, in the order given.

    A loader appears in a record only if its map has an entry for that game
    version. Fallbacks have already been applied by the normalizers; nothing
    is substituted here.
    """
    records = []
    for game_version in game_versions:
        loaders = {}
        for kind in LoaderKind:
            entry = loader_maps.get(kind, {}).get(game_version.id)
            if entry is not None:
                loaders[kind] = entry
        records.append(CompatibilityRecord(game_version=game_version, loaders=loaders))
    return tuple(records)


def matrix_to_client(matrix: Sequence[CompatibilityRecord]) -> list[dict[str, Any]]:
    """Client-facing JSON list for the selection UI."""
    return [record.to_client() for record in matrix]


def loader_map_to_client(
    kind: LoaderKind, loader_map: Mapping[str, LoaderVersionEntry]
) -> dict[str, Any]:
    """JSON form of one canonical map.

    NeoForge keeps its raw tag alongside the build; every other loader maps
    straight to a version string.
    """
    if kind is LoaderKind.NEOFORGE:
        return {
            mc_version: {"version": entry.version, "fullVersion": entry.full_version}
            for mc_version, entry in loader_map.items()
        }
    return {mc_version: entry.version for mc_version, entry in loader_map.items()}
