import base64
import threading
import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from specsheets.auth.gate import AccessGate
from specsheets.auth.models import Session
from specsheets.documents.exceptions import (
    DocumentNotFoundError,
    DocumentValidationError,
    FetchError,
    RejectionReason,
)
from specsheets.documents.models import (
    DATA_URL_PREFIX,
    Document,
    DocumentType,
    DocumentWithData,
    ProductType,
    utcnow,
)
from specsheets.ingestion.classifier import classify
from specsheets.ingestion.uploads import UploadedFile
from specsheets.ingestion.validator import PdfValidator
from specsheets.logging.logger import Log
from specsheets.storage.base import BaseDocumentStorage
from specsheets.store.fetcher import RemoteContentFetcher

ProgressCallback = Callable[[int], None]

_MUTABLE_FIELDS = frozenset({"name", "description", "filename", "type", "required"})
# Accepted in update payloads but always taken from the stored record.
_PROTECTED_FIELDS = frozenset(
    {"id", "product_type", "file_url", "size", "created_at", "updated_at"}
)


class DocumentStore:
    """Owns the document collection and keeps it in sync with durable storage.

    Reads are served from memory. Every mutation updates memory and storage
    inside one critical section, so concurrent callers cannot lose each
    other's writes. Validation and remote fetches run outside that section.

    When an ``access_gate`` is supplied, create/update/delete require a
    session the gate accepts.
    """

    def __init__(
        self,
        storage: BaseDocumentStorage,
        validator: PdfValidator | None = None,
        fetcher: RemoteContentFetcher | None = None,
        access_gate: AccessGate | None = None,
    ) -> None:
        self._storage = storage
        self._validator = validator or PdfValidator()
        self._fetcher = fetcher or RemoteContentFetcher()
        self._access_gate = access_gate
        self._lock = threading.Lock()
        self._documents: dict[str, Document] = {}
        self.reload()

    def reload(self) -> None:
        """Replace the in-memory collection with what storage holds."""
        documents = self._storage.load_all()
        with self._lock:
            self._documents = {doc.id: doc for doc in documents}
        Log.info(f"Loaded {len(documents)} documents from storage")

    def create(
        self,
        file: UploadedFile,
        product_type: ProductType,
        *,
        session: Session | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Document:
        """Validate, classify and store an uploaded PDF.

        Raises:
            AuthorizationError: if the store is gated and the session is invalid.
            DocumentValidationError: if the file is rejected.
            PersistenceError: if storage cannot be written.
        """
        self._authorize(session)
        product_type = ProductType(product_type)

        result = self._validator.validate(file)
        if not result.valid:
            Log.warning(f"Rejected upload {file.filename}: {result.message}")
        result.raise_for_rejection()
        _report(on_progress, 25)

        payload = self._read_payload(file)
        _report(on_progress, 50)

        classification = classify(file.filename)
        now = utcnow()
        document = Document(
            id=str(uuid.uuid4()),
            name=classification.name,
            description=f"{classification.type.value} Document",
            filename=file.filename,
            file_url=DATA_URL_PREFIX + base64.b64encode(payload).decode("ascii"),
            size=len(payload),
            type=classification.type,
            product_type=product_type,
            required=False,
            created_at=now,
            updated_at=now,
        )

        with self._lock:
            self._storage.insert(document)
            self._documents[document.id] = document
        _report(on_progress, 100)

        Log.info(
            f"Created document {document.id} ({document.type.value}) "
            f"from {file.filename} for {product_type.value}"
        )
        return document.copy()

    def get(self, document_id: str) -> Document | None:
        document = self._documents.get(document_id)
        return document.copy() if document is not None else None

    def list_documents(self, product_type: ProductType | None = None) -> list[Document]:
        """All documents, newest first, optionally restricted to one product type."""
        with self._lock:
            current = list(self._documents.values())
        documents = [
            doc.copy()
            for doc in current
            if product_type is None or doc.product_type == product_type
        ]
        documents.sort(key=lambda doc: doc.id)
        documents.sort(key=lambda doc: doc.created_at, reverse=True)
        return documents

    def update(
        self,
        document_id: str,
        fields: Mapping[str, Any],
        *,
        session: Session | None = None,
    ) -> None:
        """Merge ``fields`` over the stored record.

        ``id``, ``product_type``, ``file_url`` and the size/timestamps are kept
        from the stored record whatever the caller passes.

        Raises:
            AuthorizationError: if the store is gated and the session is invalid.
            DocumentNotFoundError: if no document has this id.
            ValueError: for unknown field names or an invalid document type.
            PersistenceError: if storage cannot be written.
        """
        self._authorize(session)
        changes = _coerce_changes(fields)

        with self._lock:
            existing = self._documents.get(document_id)
            if existing is None:
                raise DocumentNotFoundError(document_id)
            updated = replace(existing, **changes, updated_at=utcnow())
            self._storage.update(updated)
            self._documents[document_id] = updated

        Log.info(f"Updated document {document_id}: {sorted(changes)}")

    def delete(self, document_id: str, *, session: Session | None = None) -> None:
        """Remove a document.

        Raises:
            AuthorizationError: if the store is gated and the session is invalid.
            DocumentNotFoundError: if no document has this id.
            PersistenceError: if storage cannot be written.
        """
        self._authorize(session)
        with self._lock:
            if document_id not in self._documents:
                raise DocumentNotFoundError(document_id)
            self._storage.delete(document_id)
            del self._documents[document_id]
        Log.info(f"Deleted document {document_id}")

    def export_as_base64(self, document_id: str) -> str | None:
        """Return the document's PDF bytes as base64, or None if unavailable.

        Inline content is returned without decoding; remote content is fetched.
        Failures are logged rather than raised.
        """
        document = self._documents.get(document_id)
        if document is None or not document.file_url:
            return None

        if document.is_inline:
            _header, sep, data = document.file_url.partition(",")
            if not sep:
                Log.error(f"Document {document_id} has a malformed inline payload")
                return None
            return data

        try:
            content = self._fetcher.fetch(document.file_url)
        except FetchError as exc:
            Log.error(f"Error exporting document {document_id}: {exc}")
            return None
        return base64.b64encode(content).decode("ascii")

    def list_with_data(
        self, product_type: ProductType | None = None
    ) -> list[DocumentWithData]:
        """Documents paired with their exported content; unexportable ones are skipped."""
        results = []
        for document in self.list_documents(product_type):
            file_data = self.export_as_base64(document.id)
            if file_data:
                results.append(DocumentWithData(document=document, file_data=file_data))
        return results

    def _authorize(self, session: Session | None) -> None:
        if self._access_gate is not None:
            self._access_gate.verify(session)

    @staticmethod
    def _read_payload(file: UploadedFile) -> bytes:
        try:
            payload = file.read()
        except (OSError, TimeoutError) as exc:
            Log.warning(f"Failed to read upload {file.filename}: {exc}")
            raise DocumentValidationError(
                RejectionReason.UNREADABLE, "Failed to read file"
            ) from exc
        if len(payload) != file.size:
            Log.warning(
                f"Upload {file.filename} declared {file.size} bytes but has {len(payload)}"
            )
            raise DocumentValidationError(
                RejectionReason.UNREADABLE, "File size does not match its contents"
            )
        return payload


def _coerce_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - _MUTABLE_FIELDS - _PROTECTED_FIELDS
    if unknown:
        raise ValueError(f"Unknown document fields: {sorted(unknown)}")

    changes = {key: value for key, value in fields.items() if key in _MUTABLE_FIELDS}
    if "type" in changes:
        changes["type"] = DocumentType(changes["type"])
    if "required" in changes:
        changes["required"] = bool(changes["required"])
    return changes


def _report(callback: ProgressCallback | None, progress: int) -> None:
    if callback is not None:
        callback(progress)
