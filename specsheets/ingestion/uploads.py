import io
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


@dataclass(frozen=True)
class UploadedFile:
    """A candidate upload: declared metadata plus a way to open its bytes.

    ``size`` and ``content_type`` are what the client declared; the validator
    checks them before any byte is read.
    """

    filename: str
    content_type: str
    size: int
    opener: Callable[[], BinaryIO]

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        data: bytes,
        content_type: str = "application/pdf",
    ) -> "UploadedFile":
        return cls(
            filename=filename,
            content_type=content_type,
            size=len(data),
            opener=lambda: io.BytesIO(data),
        )

    @classmethod
    def from_path(cls, path: Path, content_type: str | None = None) -> "UploadedFile":
        """Describe a file on disk. Content type is guessed from the suffix if omitted."""
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(
            filename=path.name,
            content_type=content_type,
            size=path.stat().st_size,
            opener=lambda: path.open("rb"),
        )

    def read_head(self, length: int) -> bytes:
        """Read at most ``length`` leading bytes.

        Raises:
            OSError: if the underlying source cannot be opened or read.
        """
        with self.opener() as stream:
            return stream.read(length)

    def read(self) -> bytes:
        """Read the full payload.

        Raises:
            OSError: if the underlying source cannot be opened or read.
        """
        with self.opener() as stream:
            return stream.read()
