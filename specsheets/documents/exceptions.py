from enum import Enum


class DocumentError(Exception):
    """Base exception for all document-library errors."""


class RejectionReason(str, Enum):
    """Why an upload was refused by the validator."""

    NOT_PDF = "not_pdf"
    TOO_LARGE = "too_large"
    TOO_SMALL = "too_small"
    BAD_SIGNATURE = "bad_signature"
    UNREADABLE = "unreadable"


class DocumentValidationError(DocumentError):
    """Raised when an uploaded file is not an acceptable PDF."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class DocumentNotFoundError(DocumentError):
    """Raised when a document id is not present in the store."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class PersistenceError(DocumentError):
    """Raised when durable storage cannot be read or written."""


class FetchError(DocumentError):
    """Raised when remote document content cannot be retrieved."""
