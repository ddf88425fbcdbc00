from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

PDF_MIME_TYPE = "application/pdf"
DATA_URL_PREFIX = f"data:{PDF_MIME_TYPE};base64,"


class DocumentType(str, Enum):
    """Content category of a spec-sheet PDF. Values are the stored codes."""

    TDS = "TDS"
    ESR = "ESR"
    MSDS = "MSDS"
    LEED = "LEED"
    INSTALLATION = "Installation"
    WARRANTY = "warranty"
    ACOUSTIC = "Acoustic"
    PART_SPEC = "PartSpec"


class ProductType(str, Enum):
    """Product line a document belongs to."""

    STRUCTURAL_FLOOR = "structural-floor"
    UNDERLAYMENT = "underlayment"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    """A stored PDF asset plus its descriptive metadata.

    Column names match the ``documents`` table so a record can be written to
    either storage backend unchanged.
    """

    id: str
    name: str
    filename: str
    file_url: str
    size: int
    type: DocumentType
    product_type: ProductType
    description: str = ""
    required: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_inline(self) -> bool:
        return self.file_url.startswith("data:")

    def copy(self) -> "Document":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "filename": self.filename,
            "file_url": self.file_url,
            "size": self.size,
            "type": self.type.value,
            "product_type": self.product_type.value,
            "required": self.required,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        """Build a document from its ``to_dict`` form.

        Raises:
            KeyError, ValueError: if a field is missing or holds an unknown value.
        """
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
            filename=data["filename"],
            file_url=data["file_url"],
            size=int(data.get("size") or 0),
            type=DocumentType(data["type"]),
            product_type=ProductType(data["product_type"]),
            required=bool(data.get("required", False)),
            created_at=_parse_timestamp(data["created_at"]),
            updated_at=_parse_timestamp(data["updated_at"]),
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Document":
        """Build a document from a ``dict_row`` of the documents table."""
        return cls.from_dict(row)


@dataclass(frozen=True)
class DocumentWithData:
    """A document paired with its base64-encoded PDF content."""

    document: Document
    file_data: str


def _parse_timestamp(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
