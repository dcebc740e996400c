"""Customize the universal mod template for a user's selection."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from umt_gen.constants import (
    KNOWN_ROOT_FOLDERS,
    PLACEHOLDER_MC_VERSION,
    PLACEHOLDER_MOD_ID,
    PLACEHOLDER_MOD_NAME,
    PLACEHOLDER_PACKAGE,
    PLACEHOLDER_PACKAGE_PATH,
    VERSION_PROPERTIES_DIR,
)
from umt_gen.template.archive import ArchiveCodec, ArchiveEntry, ZipArchiveCodec
from umt_gen.template.errors import RootNotFoundError
from umt_gen.template.properties import build_version_properties
from umt_gen.versions.schemas import SELECTABLE_LOADERS, Selection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedArtifact:
    """A customized template ready for download."""

    filename: str
    entries: tuple[ArchiveEntry, ...]
    data: bytes


def detect_root(entries: Sequence[ArchiveEntry]) -> str:
    """Find the single top-level folder the template is packed under.

    Tries the known folder names first (they differ by download method),
    then the first top-level directory marker, then the first segment of the
    first entry's path.

    Raises:
        RootNotFoundError: If none of the above yields a folder.
    """
    for folder in KNOWN_ROOT_FOLDERS:
        prefix = f"{folder}/"
        if any(entry.path.startswith(prefix) for entry in entries):
            return folder

    for entry in entries:
        if entry.is_directory and entry.path.rstrip("/").count("/") == 0:
            root = entry.path.rstrip("/")
            if root:
                logger.info("Using detected root folder: %s", root)
                return root

    if entries and "/" in entries[0].path.strip("/"):
        root = entries[0].path.split("/")[0]
        if root:
            logger.info("Using root folder of first entry: %s", root)
            return root

    raise RootNotFoundError("Could not determine the template's root folder")


def replace_path_segments(path: str, old: str, new: str) -> str:
    """Replace every segment-aligned occurrence of ``old`` within ``path``.

    ``src/com/examplemod/Mod.java`` matches ``com/examplemod``;
    ``src/com/examplemodded/Mod.java`` does not.
    """
    segments = path.split("/")
    old_segments = old.split("/")
    new_segments = new.split("/")
    width = len(old_segments)

    result = []
    i = 0
    while i < len(segments):
        if segments[i:i + width] == old_segments:
            result.extend(new_segments)
            i += width
        else:
            result.append(segments[i])
            i += 1
    return "/".join(result)


class TemplateCustomizer:
    """Rewrites a template archive into a project for one selection.

    Stateless: one instance can serve concurrent requests.
    """

    def __init__(self, codec: ArchiveCodec | None = None):
        self.codec = codec or ZipArchiveCodec()

    def generate(self, archive: bytes, selection: Selection) -> GeneratedArtifact:
        """Decode the template, customize it and encode the result.

        Raises:
            TemplateDecodeError: If the archive can't be decoded.
            RootNotFoundError: If no root folder can be determined.
        """
        entries = self.codec.decode(archive)
        customized = self.customize(entries, selection)
        return GeneratedArtifact(
            filename=f"{selection.mod_id}-template.zip",
            entries=customized,
            data=self.codec.encode(customized),
        )

    def customize(
        self, entries: Sequence[ArchiveEntry], selection: Selection
    ) -> tuple[ArchiveEntry, ...]:
        """Filter and rewrite template entries, then add version properties."""
        root = detect_root(entries)
        root_prefix = f"{root}/"
        excluded_prefixes = self._excluded_loader_prefixes(selection)
        replacements = self._replacements(selection)

        output: list[ArchiveEntry] = []
        for entry in entries:
            if entry.is_directory or entry.path == root_prefix:
                continue
            if not entry.path.startswith(root_prefix):
                logger.debug("Skipping entry outside template root: %s", entry.path)
                continue

            relative_path = entry.path[len(root_prefix):]
            if not relative_path:
                continue
            if relative_path.startswith(excluded_prefixes):
                continue
            if relative_path.startswith(f"{VERSION_PROPERTIES_DIR}/"):
                continue

            try:
                content = entry.data.decode("utf-8")
            except UnicodeDecodeError:
                output.append(ArchiveEntry.file(relative_path, bytes(entry.data)))
                continue

            relative_path = replace_path_segments(
                relative_path, PLACEHOLDER_PACKAGE_PATH, selection.package_path
            )
            for placeholder, replacement in replacements:
                content = content.replace(placeholder, replacement)
            output.append(ArchiveEntry.file(relative_path, content))

        output.extend(build_version_properties(selection))
        return tuple(output)

    def _excluded_loader_prefixes(self, selection: Selection) -> tuple[str, ...]:
        """Prefixes of loader subprojects that must not be copied."""
        return tuple(
            kind.path_prefix
            for kind in SELECTABLE_LOADERS
            if not selection.is_loader_enabled(kind)
        )

    def _replacements(self, selection: Selection) -> list[tuple[str, str]]:
        """Placeholder substitutions, applied in this order."""
        return [
            (PLACEHOLDER_PACKAGE, selection.package_name),
            (PLACEHOLDER_PACKAGE_PATH, selection.package_path),
            (PLACEHOLDER_MOD_ID, selection.mod_id),
            (PLACEHOLDER_MOD_NAME, selection.mod_name),
            (PLACEHOLDER_MC_VERSION, selection.versions[0].id),
        ]


def generate(archive: bytes, selection: Selection) -> GeneratedArtifact:
    """Generate a customized template with the default ZIP codec."""
    return TemplateCustomizer().generate(archive, selection)
