"""Per-version build properties synthesized into the generated template."""

from umt_gen.constants import VERSION_PROPERTIES_DIR
from umt_gen.template.archive import ArchiveEntry
from umt_gen.versions.schemas import CompatibilityRecord, LoaderKind, Selection
from umt_gen.versions.toolchain import java_version_for


def properties_path(version_id: str) -> str:
    return f"{VERSION_PROPERTIES_DIR}/{version_id}.properties"


def render_version_properties(record: CompatibilityRecord, selection: Selection) -> str:
    """Render the .properties file for one selected game version.

    Loader sections appear only for loaders that are both selected and
    available for this version; ``builds_for`` is always written.
    """
    mc_version = record.id
    lines = [
        "# General Properties",
        f"java_version={java_version_for(mc_version)}",
        f"minecraft_version={mc_version}",
        f'compatible_mc_versions=["{mc_version}"]',
    ]

    available = [
        kind for kind in selection.ordered_loaders() if record.supports(kind)
    ]

    if LoaderKind.FABRIC in available:
        lines += [
            "",
            "# Fabric-specific Properties",
            f"fabric_loader={record.version_of(LoaderKind.FABRIC)}",
            f"fabric_api_version={record.version_of(LoaderKind.FABRIC_API) or ''}",
        ]

    if LoaderKind.FORGE in available:
        lines += [
            "",
            "# Forge-specific Properties",
            f"forge_loader={record.version_of(LoaderKind.FORGE)}",
        ]

    if LoaderKind.NEOFORGE in available:
        neoforge = record.entry(LoaderKind.NEOFORGE)
        full_version = neoforge.full_version or neoforge.version
        lines += [
            "",
            "# NeoForge-specific Properties",
            "## Unimined wants the last version number, for example, "
            f"{full_version} -> {neoforge.version}",
            f"neoforge_loader={neoforge.version}",
        ]

    lines += [
        "",
        "# Selected loaders",
        f"builds_for={','.join(kind.value for kind in available)}",
    ]
    return "\n".join(lines) + "\n"


def build_version_properties(selection: Selection) -> list[ArchiveEntry]:
    """Directory marker plus one properties entry per selected version."""
    entries = [ArchiveEntry.directory(VERSION_PROPERTIES_DIR)]
    for record in selection.versions:
        entries.append(
            ArchiveEntry.file(
                properties_path(record.id),
                render_version_properties(record, selection),
            )
        )
    return entries
