import psycopg
from psycopg.rows import dict_row

from specsheets.database.connection import get_connection
from specsheets.documents.exceptions import DocumentNotFoundError, PersistenceError
from specsheets.documents.models import Document
from specsheets.logging.logger import Log
from specsheets.storage.base import BaseDocumentStorage

_COLUMNS = (
    "id, name, description, filename, file_url, size, type, product_type, "
    "required, created_at, updated_at"
)


class PostgresDocumentStorage(BaseDocumentStorage):
    """Per-record operations on the ``documents`` table."""

    def load_all(self) -> list[Document]:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(f"SELECT {_COLUMNS} FROM documents ORDER BY created_at DESC")
                    rows = cur.fetchall()
            return [Document.from_row(row) for row in rows]
        except (psycopg.Error, ValueError, KeyError) as exc:
            Log.error(f"Failed to load documents: {exc}")
            raise PersistenceError(f"Cannot load documents: {exc}") from exc

    def insert(self, document: Document) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO documents
                        (id, name, description, filename, file_url, size, type,
                         product_type, required, created_at, updated_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            document.id,
                            document.name,
                            document.description,
                            document.filename,
                            document.file_url,
                            document.size,
                            document.type.value,
                            document.product_type.value,
                            document.required,
                            document.created_at,
                            document.updated_at,
                        ),
                    )
                conn.commit()
        except psycopg.Error as exc:
            Log.error(f"Failed to insert document {document.id}: {exc}")
            raise PersistenceError(f"Cannot insert document {document.id}: {exc}") from exc

    def update(self, document: Document) -> None:
        """Write the mutable columns. ``product_type`` and ``file_url`` are never updated."""
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE documents
                        SET name = %s,
                            description = %s,
                            filename = %s,
                            size = %s,
                            type = %s,
                            required = %s
                        WHERE id = %s
                        """,
                        (
                            document.name,
                            document.description,
                            document.filename,
                            document.size,
                            document.type.value,
                            document.required,
                            document.id,
                        ),
                    )
                    if cur.rowcount == 0:
                        raise DocumentNotFoundError(document.id)
                conn.commit()
        except psycopg.Error as exc:
            Log.error(f"Failed to update document {document.id}: {exc}")
            raise PersistenceError(f"Cannot update document {document.id}: {exc}") from exc

    def delete(self, document_id: str) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                    if cur.rowcount == 0:
                        raise DocumentNotFoundError(document_id)
                conn.commit()
        except psycopg.Error as exc:
            Log.error(f"Failed to delete document {document_id}: {exc}")
            raise PersistenceError(f"Cannot delete document {document_id}: {exc}") from exc
