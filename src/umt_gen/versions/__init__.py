"""Game version feeds, loader normalization and the compatibility matrix."""

from umt_gen.versions.matrix import build_matrix, loader_map_to_client, matrix_to_client
from umt_gen.versions.normalizers import (
    normalize_fabric,
    normalize_fabric_api,
    normalize_forge,
    normalize_game_versions,
    normalize_neoforge,
)
from umt_gen.versions.schemas import (
    SELECTABLE_LOADERS,
    CompatibilityRecord,
    GameVersion,
    LoaderKind,
    LoaderVersionEntry,
    Selection,
)
from umt_gen.versions.toolchain import java_version_for

__all__ = [
    "SELECTABLE_LOADERS",
    "CompatibilityRecord",
    "GameVersion",
    "LoaderKind",
    "LoaderVersionEntry",
    "Selection",
    "build_matrix",
    "java_version_for",
    "loader_map_to_client",
    "matrix_to_client",
    "normalize_fabric",
    "normalize_fabric_api",
    "normalize_forge",
    "normalize_game_versions",
    "normalize_neoforge",
]
