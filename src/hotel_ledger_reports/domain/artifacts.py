"""Export and print artifacts handed to the host for download or preview."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from hotel_ledger_reports.exceptions import PreviewError


class ExportEncoding(str, Enum):
    """Byte-level policy for delimited exports. Chosen by the caller, never inferred."""

    UTF8_BOM = "utf8-bom"
    UTF16LE_BOM = "utf16le-bom"
    TSV = "tsv"

    @property
    def codec(self) -> str:
        return "utf-16-le" if self is ExportEncoding.UTF16LE_BOM else "utf-8"

    @property
    def bom(self) -> bytes:
        if self is ExportEncoding.UTF8_BOM:
            return b"\xef\xbb\xbf"
        if self is ExportEncoding.UTF16LE_BOM:
            return b"\xff\xfe"
        return b""

    @property
    def delimiter(self) -> str:
        # Excel only splits UTF-16 text into columns on tabs
        return "," if self is ExportEncoding.UTF8_BOM else "\t"

    @property
    def extension(self) -> str:
        return "tsv" if self is ExportEncoding.TSV else "csv"

    @property
    def media_type(self) -> str:
        if self is ExportEncoding.UTF8_BOM:
            return "text/csv;charset=utf-8"
        if self is ExportEncoding.UTF16LE_BOM:
            return "text/csv;charset=utf-16le"
        return "text/tab-separated-values;charset=utf-8"


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    """In-memory export file: bytes, encoding descriptor and suggested name."""

    content: bytes
    encoding: ExportEncoding
    filename: str
    row_count: int = 0

    @property
    def media_type(self) -> str:
        return self.encoding.media_type

    @property
    def delimiter(self) -> str:
        return self.encoding.delimiter

    def decode(self) -> str:
        """Text content without the byte-order mark."""
        return self.content[len(self.encoding.bom) :].decode(self.encoding.codec)

    def save(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.content)
        return path


@dataclass(frozen=True, slots=True)
class PrintArtifact:
    """A self-contained HTML document ready for an isolated preview surface."""

    html: str
    title: str
    language: str
    direction: str

    def publish(self, directory: Path | None = None) -> PreviewResource:
        """Stage the document as a single-use addressable resource.

        The caller owns the returned handle and must revoke it.
        """
        fd, name = tempfile.mkstemp(
            prefix="print-preview-", suffix=".html", dir=directory
        )
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(self.html)
        return PreviewResource(path=Path(name))


@dataclass(slots=True)
class PreviewResource:
    """Disposable handle on a staged print document."""

    path: Path
    _revoked: bool = field(default=False, repr=False)

    @property
    def url(self) -> str:
        if self._revoked:
            raise PreviewError(
                "Preview resource has been revoked", context={"path": str(self.path)}
            )
        return self.path.resolve().as_uri()

    @property
    def revoked(self) -> bool:
        return self._revoked

    def revoke(self) -> None:
        if self._revoked:
            return
        self.path.unlink(missing_ok=True)
        self._revoked = True

    def __enter__(self) -> PreviewResource:
        return self

    def __exit__(self, *args: object) -> None:
        self.revoke()
