from collections.abc import Callable
from pathlib import Path

from specsheets.config.settings import Settings
from specsheets.storage.base import BaseDocumentStorage
from specsheets.storage.postgres_storage import PostgresDocumentStorage
from specsheets.storage.snapshot_storage import SnapshotStorage


class StorageFactory:
    """Creates the storage backend named by ``settings.storage_backend``."""

    BACKENDS: dict[str, Callable[[Settings], BaseDocumentStorage]] = {
        "snapshot": lambda settings: SnapshotStorage(Path(settings.snapshot_path)),
        "postgres": lambda settings: PostgresDocumentStorage(),
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStorage:
        backend = settings.storage_backend.lower()
        builder = cls.BACKENDS.get(backend)
        if builder is None:
            raise ValueError(
                f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return builder(settings)
