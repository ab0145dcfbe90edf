"""
Repositories Module
-----------------
Storage backends for parks behind a single interface:
- FileParkRepository: read-only, loaded once from a JSON dataset
- PostgresParkRepository: PostgreSQL/PostGIS with geographic search

The backend is chosen once, at startup, by create_repository().
"""
import logging

from src.config import BACKEND_FILE, BACKEND_POSTGRES, BACKENDS
from src.repositories.base import ParkRepository
from src.repositories.errors import (
    OperationNotSupportedError,
    ParkConflictError,
    ParkNotFoundError,
    ParkValidationError,
    RepositoryError,
    StorageUnavailableError,
)
from src.repositories.file_repository import FileParkRepository

logger = logging.getLogger(__name__)


def create_repository(settings):
    backend = settings.repository_backend

    if backend == BACKEND_FILE:
        logger.info("Using file park repository")
        return FileParkRepository(settings.data_file)

    if backend == BACKEND_POSTGRES:
        if not settings.database_url:
            raise ValueError("DB_URL must be set to use the postgres park repository")
        # Imported here so the file backend works without a database driver
        from src.repositories.postgres_repository import PostgresParkRepository

        logger.info("Using PostgreSQL park repository")
        return PostgresParkRepository.from_url(settings.database_url)

    raise ValueError(f"Unknown park repository '{backend}'. Please choose from: {', '.join(BACKENDS)}")


__all__ = [
    "FileParkRepository",
    "OperationNotSupportedError",
    "ParkConflictError",
    "ParkNotFoundError",
    "ParkRepository",
    "ParkValidationError",
    "RepositoryError",
    "StorageUnavailableError",
    "create_repository",
]
