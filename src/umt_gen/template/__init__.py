"""Template archive handling and customization."""

from umt_gen.template.archive import ArchiveCodec, ArchiveEntry, ZipArchiveCodec
from umt_gen.template.customizer import (
    GeneratedArtifact,
    TemplateCustomizer,
    detect_root,
    generate,
)
from umt_gen.template.errors import RootNotFoundError, TemplateDecodeError, TemplateError

__all__ = [
    "ArchiveCodec",
    "ArchiveEntry",
    "GeneratedArtifact",
    "RootNotFoundError",
    "TemplateCustomizer",
    "TemplateDecodeError",
    "TemplateError",
    "ZipArchiveCodec",
    "detect_root",
    "generate",
]
