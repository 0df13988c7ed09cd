"""Local file blobs for knowledge-base uploads."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class FileBlob:
    """A file selected locally, ready to be sent as one multipart part."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Path) -> "FileBlob":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )

    @property
    def is_pdf(self) -> bool:
        return (
            self.content_type == PDF_CONTENT_TYPE
            or self.filename.lower().endswith(".pdf")
        )


@dataclass(frozen=True)
class FileSelection:
    """Result of filtering a batch of selected files."""

    accepted: List[FileBlob]
    rejected: List[FileBlob]

    @property
    def has_rejections(self) -> bool:
        return bool(self.rejected)


def filter_pdf_files(files: Iterable[FileBlob]) -> FileSelection:
    """Split files into PDFs (by declared type or extension) and the rest."""
    accepted: List[FileBlob] = []
    rejected: List[FileBlob] = []
    for blob in files:
        (accepted if blob.is_pdf else rejected).append(blob)
    return FileSelection(accepted=accepted, rejected=rejected)


def to_multipart(
    files: Iterable[FileBlob], field_name: str = "files"
) -> List[Tuple[str, Tuple[str, bytes, str]]]:
    """Encode blobs as repeated multipart parts under one field name."""
    return [(field_name, (f.filename, f.content, f.content_type)) for f in files]
