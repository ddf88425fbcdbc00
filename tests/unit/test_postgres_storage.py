from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from specsheets.documents.exceptions import DocumentNotFoundError, PersistenceError
from specsheets.documents.models import Document, DocumentType, ProductType
from specsheets.storage.postgres_storage import PostgresDocumentStorage

_TIMESTAMP = datetime(2025, 11, 26, tzinfo=timezone.utc)


def _make_document() -> Document:
    return Document(
        id="0b5e8c1e-5a4f-4a38-9a55-3f0f8f0e2d11",
        name="Evaluation Report",
        filename="esr-1234.pdf",
        file_url="https://cdn.example.com/esr-1234.pdf",
        size=4096,
        type=DocumentType.ESR,
        product_type=ProductType.STRUCTURAL_FLOOR,
        created_at=_TIMESTAMP,
        updated_at=_TIMESTAMP,
    )


def _make_row() -> dict:
    return {
        "id": "0b5e8c1e-5a4f-4a38-9a55-3f0f8f0e2d11",
        "name": "Evaluation Report",
        "description": "",
        "filename": "esr-1234.pdf",
        "file_url": "https://cdn.example.com/esr-1234.pdf",
        "size": 4096,
        "type": "ESR",
        "product_type": "structural-floor",
        "required": False,
        "created_at": _TIMESTAMP,
        "updated_at": _TIMESTAMP,
    }


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestLoadAll:
    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_builds_documents_from_rows(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_make_row()]

        documents = PostgresDocumentStorage().load_all()

        assert documents == [_make_document()]
        sql = mock_cursor.execute.call_args.args[0]
        assert "FROM documents" in sql

    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_wraps_database_errors(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(PersistenceError, match="connection lost"):
            PostgresDocumentStorage().load_all()


    @pytest.mark.parametrize(
        ("column", "value"), [("type", "tds"), ("product_type", "decking")]
    )
    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_wraps_undecodable_rows(
        self, mock_get_conn: MagicMock, column: str, value: str
    ) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        row = _make_row()
        row[column] = value
        mock_cursor.fetchall.return_value = [row]

        with pytest.raises(PersistenceError, match=value):
            PostgresDocumentStorage().load_all()

    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_wraps_rows_missing_columns(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        row = _make_row()
        del row["file_url"]
        mock_cursor.fetchall.return_value = [row]

        with pytest.raises(PersistenceError, match="Cannot load documents"):
            PostgresDocumentStorage().load_all()


class TestInsert:
    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_executes_insert_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)

        PostgresDocumentStorage().insert(_make_document())

        sql, params = mock_cursor.execute.call_args.args
        assert "INSERT INTO documents" in sql
        assert params[0] == "0b5e8c1e-5a4f-4a38-9a55-3f0f8f0e2d11"
        assert params[6] == "ESR"
        assert params[7] == "structural-floor"
        mock_conn.commit.assert_called_once()

    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_wraps_database_errors(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.IntegrityError("duplicate key")

        with pytest.raises(PersistenceError, match="duplicate key"):
            PostgresDocumentStorage().insert(_make_document())
        mock_conn.commit.assert_not_called()


class TestUpdate:
    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_never_writes_immutable_columns(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        PostgresDocumentStorage().update(_make_document())

        sql, params = mock_cursor.execute.call_args.args
        assert "UPDATE documents" in sql
        assert "product_type" not in sql
        assert "file_url" not in sql
        assert params[-1] == "0b5e8c1e-5a4f-4a38-9a55-3f0f8f0e2d11"
        mock_conn.commit.assert_called_once()

    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_raises_not_found_when_no_rows_updated(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(DocumentNotFoundError, match="not found"):
            PostgresDocumentStorage().update(_make_document())


class TestDelete:
    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_executes_delete_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        PostgresDocumentStorage().delete("doc-1")

        sql, params = mock_cursor.execute.call_args.args
        assert "DELETE FROM documents" in sql
        assert params == ("doc-1",)
        mock_conn.commit.assert_called_once()

    @patch("specsheets.storage.postgres_storage.get_connection")
    def test_raises_not_found_when_no_rows_deleted(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(DocumentNotFoundError, match="Document doc-9 not found"):
            PostgresDocumentStorage().delete("doc-9")
        mock_conn.commit.assert_not_called()
