import json
import os
import tempfile
from pathlib import Path

from specsheets.documents.exceptions import DocumentNotFoundError, PersistenceError
from specsheets.documents.models import Document
from specsheets.logging.logger import Log
from specsheets.storage.base import BaseDocumentStorage


class SnapshotStorage(BaseDocumentStorage):
    """Keeps the whole collection in one JSON file, rewritten on every mutation.

    The file holds a JSON array of ``Document.to_dict()`` objects. Writes go to
    a temporary sibling first and are moved into place, so a crash mid-write
    leaves the previous snapshot intact.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._documents: dict[str, Document] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[Document]:
        self._documents = {doc.id: doc for doc in self._read()}
        return [doc.copy() for doc in self._documents.values()]

    def insert(self, document: Document) -> None:
        documents = self._current()
        documents[document.id] = document.copy()
        self._write(documents)

    def update(self, document: Document) -> None:
        documents = self._current()
        if document.id not in documents:
            raise DocumentNotFoundError(document.id)
        documents[document.id] = document.copy()
        self._write(documents)

    def delete(self, document_id: str) -> None:
        documents = self._current()
        if document_id not in documents:
            raise DocumentNotFoundError(document_id)
        del documents[document_id]
        self._write(documents)

    def _current(self) -> dict[str, Document]:
        if self._documents is None:
            self._documents = {doc.id: doc for doc in self._read()}
        return self._documents

    def _read(self) -> list[Document]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("snapshot must be a JSON array")
            return [Document.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            Log.error(f"Failed to load document snapshot {self._path}: {exc}")
            raise PersistenceError(f"Cannot read snapshot {self._path}: {exc}") from exc

    def _write(self, documents: dict[str, Document]) -> None:
        payload = [doc.to_dict() for doc in documents.values()]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            # the cached mapping no longer matches the file; reread on next access
            self._documents = None
            Log.error(f"Failed to write document snapshot {self._path}: {exc}")
            raise PersistenceError(f"Cannot write snapshot {self._path}: {exc}") from exc
        Log.debug(f"Wrote snapshot of {len(payload)} documents to {self._path}")
