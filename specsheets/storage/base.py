from abc import ABC, abstractmethod

from specsheets.documents.models import Document


class BaseDocumentStorage(ABC):
    """Contract for durable document storage backends."""

    @abstractmethod
    def load_all(self) -> list[Document]:
        """Return every persisted document.

        Raises:
            PersistenceError: if storage cannot be read or decoded.
        """

    @abstractmethod
    def insert(self, document: Document) -> None:
        """Persist a new document.

        Raises:
            PersistenceError: if the write fails.
        """

    @abstractmethod
    def update(self, document: Document) -> None:
        """Persist the new state of an existing document.

        Raises:
            DocumentNotFoundError: if the backend has no such document.
            PersistenceError: if the write fails.
        """

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: if the backend has no such document.
            PersistenceError: if the write fails.
        """
