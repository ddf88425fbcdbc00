from specsheets.auth.gate import AccessGate
from specsheets.auth.providers import PasswordAuthProvider
from specsheets.config.settings import Settings
from specsheets.database.connection import init_pool
from specsheets.ingestion.validator import PdfValidator
from specsheets.logging.logger import Log
from specsheets.storage.factory import StorageFactory
from specsheets.store.document_store import DocumentStore
from specsheets.store.fetcher import RemoteContentFetcher


def build_access_gate(settings: Settings) -> AccessGate:
    provider = PasswordAuthProvider(settings.admin_email, settings.admin_password)
    return AccessGate(
        provider,
        secret=settings.session_secret,
        ttl_seconds=settings.session_ttl_seconds,
    )


def build_document_store(
    settings: Settings,
    access_gate: AccessGate | None = None,
) -> DocumentStore:
    """Build a DocumentStore with the configured storage backend.

    Opens the connection pool first when the postgres backend is selected;
    the caller owns closing it via ``close_pool``.
    """
    Log.configure(settings.log_level)
    if settings.storage_backend.lower() == "postgres":
        init_pool(settings)
    storage = StorageFactory.create(settings)
    validator = PdfValidator(
        max_bytes=settings.max_upload_bytes,
        min_bytes=settings.min_upload_bytes,
    )
    fetcher = RemoteContentFetcher(timeout_seconds=settings.fetch_timeout_seconds)
    Log.info(f"Document store using '{settings.storage_backend}' storage ({settings.app_env})")
    return DocumentStore(
        storage=storage,
        validator=validator,
        fetcher=fetcher,
        access_gate=access_gate,
    )
