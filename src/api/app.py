from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Depends, Request, Response
import logging
from typing import Optional, List

from src.config import Settings
from src.models.park import Park, ParkCreate
from src.repositories import create_repository
from src.repositories.base import ParkRepository
from src.repositories.errors import (
    OperationNotSupportedError,
    ParkConflictError,
    ParkNotFoundError,
    ParkValidationError,
    RepositoryError,
    StorageUnavailableError,
)

settings = Settings.from_env()

# Configure logging - Adjust format to remove INFO/WARNING prefixes
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

# HTTP status for each repository error
ERROR_STATUS_CODES = {
    ParkNotFoundError: 404,
    ParkConflictError: 409,
    ParkValidationError: 422,
    OperationNotSupportedError: 501,
    StorageUnavailableError: 503,
}


def status_code_for(error):
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


def to_http_exception(error, action):
    status_code = status_code_for(error)
    if status_code >= 500:
        logger.error(f"Error {action}: {str(error)}")
    else:
        logger.warning(f"Rejected {action}: {str(error)}")
    return HTTPException(status_code=status_code, detail=str(error))


def get_repository(request: Request) -> ParkRepository:
    return request.app.state.repository


def create_app(repository: Optional[ParkRepository] = None, app_settings: Optional[Settings] = None):
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The backend is picked once, before the first request
        if getattr(app.state, "repository", None) is None:
            app.state.repository = create_repository(app_settings)
        yield

    app = FastAPI(
        title="Parks API",
        description="Catalog of parks and their activities with geographic search",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.repository = repository
    app.state.default_radius_km = app_settings.default_radius_km

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Parks API"}

    @app.get("/parks", response_model=List[Park])
    def list_parks(repo: ParkRepository = Depends(get_repository)):
        try:
            return repo.list_parks()
        except RepositoryError as e:
            raise to_http_exception(e, "retrieving parks")

    @app.get("/parks/search", response_model=List[Park])
    def search_parks(
        request: Request,
        latitude: float,
        longitude: float,
        activity: Optional[str] = None,
        radius_km: Optional[float] = None,
        repo: ParkRepository = Depends(get_repository),
    ):
        """
        Parks within radius_km of (latitude, longitude) offering the activity,
        nearest first. Without an activity every park is returned.
        """
        if radius_km is None:
            radius_km = request.app.state.default_radius_km

        try:
            if radius_km <= 0:
                raise ParkValidationError(f"radius_km must be positive, got {radius_km}")

            if not activity or not activity.strip():
                return repo.list_parks()

            return repo.search_geographic(latitude, longitude, activity.strip(), radius_km)
        except RepositoryError as e:
            raise to_http_exception(e, f"searching parks near ({latitude}, {longitude})")

    @app.get("/park/{park_code}", response_model=Park)
    def get_park(park_code: str, repo: ParkRepository = Depends(get_repository)):
        try:
            return repo.get_park(park_code)
        except RepositoryError as e:
            raise to_http_exception(e, f"retrieving park {park_code}")

    @app.post("/park", response_model=Park, status_code=201)
    def create_park(park: ParkCreate, response: Response, repo: ParkRepository = Depends(get_repository)):
        try:
            stored = repo.create_park(park)
        except RepositoryError as e:
            raise to_http_exception(e, f"creating park {park.name}")

        response.headers["Location"] = f"/park/{stored.park_code}"
        return stored

    @app.put("/park/{park_code}", response_model=Park)
    def update_park(park_code: str, park: ParkCreate, repo: ParkRepository = Depends(get_repository)):
        try:
            return repo.update_park(park_code, park)
        except RepositoryError as e:
            raise to_http_exception(e, f"updating park {park_code}")

    @app.delete("/park/{park_code}", status_code=204)
    def delete_park(park_code: str, repo: ParkRepository = Depends(get_repository)):
        try:
            repo.delete_park(park_code)
        except RepositoryError as e:
            raise to_http_exception(e, f"deleting park {park_code}")
        return Response(status_code=204)

    return app


app = create_app()
