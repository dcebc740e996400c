"""Pydantic models for game versions, loader versions and user selections.

All models are frozen: a catalog snapshot and the records inside it are shared
between concurrent requests and must never change after they are built.
"""

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, field_validator

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class LoaderKind(str, Enum):
    """Mod loaders tracked by the compatibility matrix."""

    FABRIC = "fabric"
    FABRIC_API = "fabricApi"
    FORGE = "forge"
    NEOFORGE = "neoforge"

    @property
    def selectable(self) -> bool:
        """Whether users pick this loader (Fabric API rides along with Fabric)."""
        return self is not LoaderKind.FABRIC_API

    @property
    def path_prefix(self) -> str | None:
        """Template directory holding this loader's subproject."""
        return f"{self.value}/" if self.selectable else None


# Canonical order for every loader listing we emit
SELECTABLE_LOADERS: tuple[LoaderKind, ...] = (
    LoaderKind.FABRIC,
    LoaderKind.FORGE,
    LoaderKind.NEOFORGE,
)


class GameVersion(BaseModel):
    """A Minecraft release."""

    id: str = Field(..., description="Release identifier, e.g. 1.20.4")
    release_timestamp: datetime = Field(..., alias="releaseTimestamp")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("release_timestamp")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC so every release orders against every other."""
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class LoaderVersionEntry(BaseModel):
    """The loader build chosen for one game version."""

    loader: LoaderKind
    version: str
    full_version: str | None = Field(
        None,
        alias="fullVersion",
        description="Raw upstream tag, kept only when it differs from version",
    )

    model_config = {"frozen": True, "populate_by_name": True}


class CompatibilityRecord(BaseModel):
    """Loader support for a single game version.

    ``loaders`` only holds keys for loaders that actually have data, and is
    read-only like the rest of the record.
    """

    game_version: GameVersion
    loaders: Mapping[LoaderKind, LoaderVersionEntry] = Field(
        default_factory=dict, validate_default=True
    )

    model_config = {"frozen": True}

    @field_validator("loaders")
    @classmethod
    def freeze_loaders(
        cls, v: Mapping[LoaderKind, LoaderVersionEntry]
    ) -> Mapping[LoaderKind, LoaderVersionEntry]:
        return MappingProxyType(dict(v))

    @property
    def id(self) -> str:
        return self.game_version.id

    def entry(self, kind: LoaderKind) -> LoaderVersionEntry | None:
        return self.loaders.get(kind)

    def supports(self, kind: LoaderKind) -> bool:
        return kind in self.loaders

    def version_of(self, kind: LoaderKind) -> str | None:
        entry = self.loaders.get(kind)
        return entry.version if entry else None

    def to_client(self) -> dict[str, Any]:
        """Render the shape the selection UI consumes."""
        neoforge = self.entry(LoaderKind.NEOFORGE)
        return {
            "id": self.id,
            "releaseTimestamp": self.game_version.release_timestamp.isoformat(),
            "loaders": {
                "fabric": self.version_of(LoaderKind.FABRIC),
                "fabricApi": self.version_of(LoaderKind.FABRIC_API),
                "forge": self.version_of(LoaderKind.FORGE),
                "neoforge": self.version_of(LoaderKind.NEOFORGE),
                "neoforgeFullVersion": neoforge.full_version if neoforge else None,
            },
        }


class Selection(BaseModel):
    """What the user asked the template to be customized for."""

    mod_id: str = Field(..., min_length=1)
    mod_name: str = Field(..., min_length=1)
    package_name: str = Field(..., description="Dotted Java package, e.g. com.example.mymod")
    loaders: frozenset[LoaderKind] = Field(..., min_length=1)
    versions: tuple[CompatibilityRecord, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        if not _PACKAGE_RE.match(v):
            raise ValueError(f"Not a valid Java package name: {v!r}")
        return v

    @field_validator("loaders")
    @classmethod
    def validate_loaders(cls, v: frozenset[LoaderKind]) -> frozenset[LoaderKind]:
        unselectable = [kind.value for kind in v if not kind.selectable]
        if unselectable:
            raise ValueError(f"Loaders cannot be selected directly: {unselectable}")
        return v

    @field_validator("versions")
    @classmethod
    def validate_versions(
        cls, v: tuple[CompatibilityRecord, ...]
    ) -> tuple[CompatibilityRecord, ...]:
        ids = [record.id for record in v]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate game versions selected: {ids}")
        return v

    @property
    def package_path(self) -> str:
        """Package name in folder form (com.example.mymod -> com/example/mymod)."""
        return self.package_name.replace(".", "/")

    def is_loader_enabled(self, kind: LoaderKind) -> bool:
        """Selected and supported by at least one selected version."""
        return kind in self.loaders and any(v.supports(kind) for v in self.versions)

    def ordered_loaders(self) -> list[LoaderKind]:
        return [kind for kind in SELECTABLE_LOADERS if kind in self.loaders]
