"""Acceptance checks for uploaded spec-sheet PDFs."""

from dataclasses import dataclass

from specsheets.documents.exceptions import DocumentValidationError, RejectionReason
from specsheets.documents.models import PDF_MIME_TYPE
from specsheets.ingestion.uploads import UploadedFile

DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_MIN_BYTES = 1024

_SIGNATURE = b"%PDF"
_HEAD_LENGTH = 5

_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.NOT_PDF: "File must be a PDF document",
    RejectionReason.TOO_LARGE: "File size exceeds 50MB limit",
    RejectionReason.TOO_SMALL: "File is too small to be a valid PDF",
    RejectionReason.BAD_SIGNATURE: "File does not appear to be a valid PDF",
    RejectionReason.UNREADABLE: "Failed to read file",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one file. ``reason`` is None when accepted."""

    reason: RejectionReason | None = None
    message: str = ""

    @property
    def valid(self) -> bool:
        return self.reason is None

    def raise_for_rejection(self) -> None:
        """Raise DocumentValidationError if the file was rejected."""
        if self.reason is not None:
            raise DocumentValidationError(self.reason, self.message)


class PdfValidator:
    """Checks declared MIME type, size bounds and the ``%PDF`` signature, in that order."""

    def __init__(
        self,
        max_bytes: int = DEFAULT_MAX_BYTES,
        min_bytes: int = DEFAULT_MIN_BYTES,
    ) -> None:
        if min_bytes > max_bytes:
            raise ValueError("min_bytes must not exceed max_bytes")
        self._max_bytes = max_bytes
        self._min_bytes = min_bytes

    def validate(self, file: UploadedFile) -> ValidationResult:
        if file.content_type != PDF_MIME_TYPE:
            return _reject(RejectionReason.NOT_PDF)
        if file.size > self._max_bytes:
            return _reject(RejectionReason.TOO_LARGE)
        if file.size < self._min_bytes:
            return _reject(RejectionReason.TOO_SMALL)

        try:
            head = file.read_head(_HEAD_LENGTH)
        except (OSError, TimeoutError):
            return _reject(RejectionReason.UNREADABLE)

        if not head.startswith(_SIGNATURE):
            return _reject(RejectionReason.BAD_SIGNATURE)
        return ValidationResult()


def _reject(reason: RejectionReason) -> ValidationResult:
    return ValidationResult(reason=reason, message=_MESSAGES[reason])
