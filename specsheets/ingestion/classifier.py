"""Filename-based document type inference.

Rules are evaluated top to bottom and the first rule with a matching needle
wins, so a filename such as ``tds-install.pdf`` resolves to TDS. Matching is a
case-insensitive substring test, not a whole-word one.
"""

import re
from dataclasses import dataclass

from specsheets.documents.models import DocumentType

CLASSIFICATION_RULES: tuple[tuple[tuple[str, ...], DocumentType], ...] = (
    (("tds", "technical data"), DocumentType.TDS),
    (("esr", "evaluation report"), DocumentType.ESR),
    (("msds", "safety data"), DocumentType.MSDS),
    (("leed",), DocumentType.LEED),
    (("installation", "install"), DocumentType.INSTALLATION),
    (("warranty",), DocumentType.WARRANTY),
    (("acoustic", "esl"), DocumentType.ACOUSTIC),
    (("spec", "3-part"), DocumentType.PART_SPEC),
)

DEFAULT_TYPE = DocumentType.TDS

TYPE_LABELS: dict[DocumentType, str] = {
    DocumentType.TDS: "Technical Data Sheet",
    DocumentType.ESR: "Evaluation Report",
    DocumentType.MSDS: "Material Safety Data Sheet",
    DocumentType.LEED: "LEED Credit Guide",
    DocumentType.INSTALLATION: "Installation Guide",
    DocumentType.WARRANTY: "Limited Warranty",
    DocumentType.ACOUSTIC: "Acoustical Performance",
    DocumentType.PART_SPEC: "3-Part Specifications",
}

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


@dataclass(frozen=True)
class Classification:
    type: DocumentType
    name: str


def infer_document_type(filename: str) -> DocumentType:
    lower = filename.lower()
    for needles, document_type in CLASSIFICATION_RULES:
        if any(needle in lower for needle in needles):
            return document_type
    return DEFAULT_TYPE


def display_name(filename: str, document_type: DocumentType) -> str:
    """Canonical label for the type; the filename stem if the type has none."""
    stem = _PDF_SUFFIX.sub("", filename)
    return TYPE_LABELS.get(document_type, stem)


def classify(filename: str) -> Classification:
    document_type = infer_document_type(filename)
    return Classification(type=document_type, name=display_name(filename, document_type))
