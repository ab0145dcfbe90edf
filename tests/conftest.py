"""Shared fixtures: an in-memory park repository and sample parks."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.models.park import Activity, Park, ParkCreate
from src.models.park_code import derive_park_code
from src.repositories.base import ParkRepository
from src.repositories.errors import ParkConflictError, ParkNotFoundError


class InMemoryParkRepository(ParkRepository):
    """Writable dict-backed repository; records search calls."""

    def __init__(self) -> None:
        self.parks: dict[str, Park] = {}
        self.next_id = 1
        self.search_calls: list[tuple] = []

    def list_parks(self) -> list[Park]:
        return list(self.parks.values())

    def get_park(self, park_code: str) -> Park:
        if park_code not in self.parks:
            raise ParkNotFoundError(park_code)
        return self.parks[park_code]

    def create_park(self, park: ParkCreate) -> Park:
        code = derive_park_code(park.name, park.state_code)
        if code in self.parks:
            raise ParkConflictError(code, "a park with this code already exists")
        stored = Park.from_create(park, self.next_id, code)
        self.next_id += 1
        self.parks[code] = stored
        return stored

    def update_park(self, park_code: str, park: ParkCreate) -> Park:
        existing = self.get_park(park_code)
        stored = Park.from_create(park, existing.id, park_code)
        self.parks[park_code] = stored
        return stored

    def delete_park(self, park_code: str) -> None:
        self.get_park(park_code)
        del self.parks[park_code]

    def search_geographic(self, latitude, longitude, activity, radius_km=50.0):
        self.search_calls.append((latitude, longitude, activity, radius_km))
        wanted = activity.lower()
        return [p for p in self.parks.values() if any(a.name.lower() == wanted for a in p.activities)]


@pytest.fixture
def memory_repository() -> InMemoryParkRepository:
    return InMemoryParkRepository()


@pytest.fixture
def grand_canyon() -> ParkCreate:
    return ParkCreate(
        name="Grand Canyon",
        state_code="AZ",
        latitude=36.1,
        longitude=-112.1,
        activities=[Activity(name="Hiking", description="trails")],
    )


@pytest.fixture
def parks_file(tmp_path: Path) -> Path:
    records = [
        {
            "name": "Starved Rock State Park",
            "stateCode": "IL",
            "latitude": 41.3214,
            "longitude": -88.9942,
            "activities": [
                {"Name": "Hiking", "description": "Canyon trails"},
                {"Name": "Fishing", "description": "Illinois River"},
            ],
        },
        {
            "name": "Brown County State Park",
            "stateCode": "IN",
            "latitude": 39.1704,
            "longitude": -86.2467,
            "activities": None,
        },
    ]
    path = tmp_path / "parks.json"
    path.write_text(json.dumps(records))
    return path
