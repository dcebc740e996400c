"""Archive capability: ordered named entries, encoded as ZIP."""

import io
import zipfile
import zlib
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from umt_gen.template.errors import TemplateDecodeError

# Fixed entry timestamp so identical entries encode to identical bytes
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class ArchiveEntry:
    """One entry of an archive: a directory marker or a file payload."""

    path: str
    is_directory: bool = False
    data: bytes = b""

    @classmethod
    def directory(cls, path: str) -> "ArchiveEntry":
        return cls(path=path if path.endswith("/") else f"{path}/", is_directory=True)

    @classmethod
    def file(cls, path: str, data: bytes | str) -> "ArchiveEntry":
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(path=path, data=bytes(data))


class ArchiveCodec(Protocol):
    """Converts between archive bytes and an ordered list of entries."""

    def decode(self, data: bytes) -> list[ArchiveEntry]: ...

    def encode(self, entries: Iterable[ArchiveEntry]) -> bytes: ...


class ZipArchiveCodec:
    """ZIP implementation of the archive capability."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    def decode(self, data: bytes) -> list[ArchiveEntry]:
        """Read all entries in archive order.

        Raises:
            TemplateDecodeError: If the bytes aren't a readable ZIP archive.
        """
        try:
            with zipfile.ZipFile(io.BytesIO(data), "r") as zf:
                entries = []
                for info in zf.infolist():
                    if info.is_dir():
                        entries.append(ArchiveEntry.directory(info.filename))
                    else:
                        entries.append(ArchiveEntry(path=info.filename, data=zf.read(info)))
                return entries
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            NotImplementedError,
            EOFError,
            OSError,
        ) as e:
            raise TemplateDecodeError(f"Could not read template archive: {e}") from e

    def encode(self, entries: Iterable[ArchiveEntry]) -> bytes:
        """Write entries in the given order."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", self.compression) as zf:
            for entry in entries:
                info = zipfile.ZipInfo(entry.path, date_time=_ZIP_EPOCH)
                if entry.is_directory:
                    info.external_attr = 0o40755 << 16 | 0x10
                    zf.writestr(info, b"")
                else:
                    info.compress_type = self.compression
                    info.external_attr = 0o644 << 16
                    zf.writestr(info, entry.data)
        return buffer.getvalue()
