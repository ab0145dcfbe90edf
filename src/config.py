"""
Runtime configuration read from environment variables.

    PARKS_REPOSITORY   storage backend, "postgres" (default) or "file"
    DB_URL             SQLAlchemy URL for the postgres backend
    PARKS_DATA_FILE    JSON dataset for the file backend and for seeding
    DEFAULT_RADIUS_KM  radius used by geographic search when none is given
    LOG_LEVEL          logging level name, INFO by default
    PARKS_API_URL      base URL of a running API; when set, main.py posts the
                       dataset there instead of seeding the repository
"""
import os
from dataclasses import dataclass
from typing import Optional

BACKEND_POSTGRES = "postgres"
BACKEND_FILE = "file"
BACKENDS = (BACKEND_POSTGRES, BACKEND_FILE)


@dataclass(frozen=True)
class Settings:
    repository_backend: str = BACKEND_POSTGRES
    database_url: Optional[str] = None
    data_file: Optional[str] = None
    default_radius_km: float = 50.0
    log_level: str = "INFO"
    api_url: Optional[str] = None

    @classmethod
    def from_env(cls):
        return cls(
            repository_backend=os.getenv("PARKS_REPOSITORY", BACKEND_POSTGRES).strip().lower(),
            database_url=os.getenv("DB_URL"),
            data_file=os.getenv("PARKS_DATA_FILE") or None,
            default_radius_km=float(os.getenv("DEFAULT_RADIUS_KM", "50")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_url=os.getenv("PARKS_API_URL") or None,
        )
