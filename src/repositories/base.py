"""Park repository interface - abstraction over park storage."""
from abc import ABC, abstractmethod
from typing import List

from src.models.park import Park, ParkCreate

DEFAULT_SEARCH_RADIUS_KM = 50.0


class ParkRepository(ABC):
    """
    Storage-independent access to parks and their activities.

    Parks are addressed by their park code everywhere except list. Every
    backend raises the errors from src.repositories.errors; storage
    failures surface as StorageUnavailableError and are never retried here.
    """

    @abstractmethod
    def list_parks(self) -> List[Park]:
        """Return all parks with their activities."""

    @abstractmethod
    def get_park(self, park_code: str) -> Park:
        """Return one park, or raise ParkNotFoundError."""

    @abstractmethod
    def create_park(self, park: ParkCreate) -> Park:
        """
        Derive the park code, store the park and all of its activities as
        one unit and return the stored park.

        Raises ParkConflictError when the code is already taken.
        """

    @abstractmethod
    def update_park(self, park_code: str, park: ParkCreate) -> Park:
        """Replace a park's fields and its whole activity list. The code never changes."""

    @abstractmethod
    def delete_park(self, park_code: str) -> None:
        """Remove a park and its activities, or raise ParkNotFoundError."""

    @abstractmethod
    def search_geographic(
        self,
        latitude: float,
        longitude: float,
        activity: str,
        radius_km: float = DEFAULT_SEARCH_RADIUS_KM,
    ) -> List[Park]:
        """Parks within radius_km of the point offering a matching activity, nearest first."""
