"""Tests for the read-only file park repository."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.models.park import ParkCreate
from src.repositories.errors import OperationNotSupportedError, ParkNotFoundError
from src.repositories.file_repository import DEFAULT_DATA_FILE, FileParkRepository, load_parks_file


class TestLoading:
    """Test dataset loading and degraded startup."""

    def test_loads_and_keys_by_park_code(self, parks_file: Path) -> None:
        repo = FileParkRepository(str(parks_file))
        assert set(repo.parks) == {"starved-rock-state-park-il", "brown-county-state-park-in"}

    def test_id_and_park_code_are_the_composite_key(self, parks_file: Path) -> None:
        park = FileParkRepository(str(parks_file)).get_park("starved-rock-state-park-il")
        assert park.id == "starved-rock-state-park-il"
        assert park.park_code == "starved-rock-state-park-il"

    def test_missing_file_starts_empty(self, tmp_path: Path) -> None:
        repo = FileParkRepository(str(tmp_path / "missing.json"))
        assert repo.list_parks() == []

    def test_malformed_json_starts_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "parks.json"
        path.write_text("{not json")
        assert FileParkRepository(str(path)).list_parks() == []

    def test_non_utf8_file_starts_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "parks.json"
        path.write_bytes(b'[{"name": "Caf\xe9", "stateCode": "IL", "latitude": 1, "longitude": 2}]')
        assert FileParkRepository(str(path)).list_parks() == []

    def test_non_list_starts_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "parks.json"
        path.write_text(json.dumps({"name": "Lonely"}))
        assert load_parks_file(str(path)) == {}

    def test_invalid_records_are_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "parks.json"
        path.write_text(json.dumps([
            {"name": "Good", "stateCode": "IL", "latitude": 1, "longitude": 2},
            {"name": "No coordinates", "stateCode": "IL"},
        ]))
        assert list(load_parks_file(str(path))) == ["good-il"]

    def test_duplicate_keys_keep_later_record(self, tmp_path: Path) -> None:
        path = tmp_path / "parks.json"
        path.write_text(json.dumps([
            {"name": "Twin", "stateCode": "IL", "latitude": 1, "longitude": 1},
            {"name": "twin", "stateCode": "il", "latitude": 2, "longitude": 2},
        ]))
        parks = load_parks_file(str(path))
        assert len(parks) == 1
        assert parks["twin-il"].latitude == 2

    def test_bundled_dataset_loads(self) -> None:
        repo = FileParkRepository()
        assert repo.data_path == DEFAULT_DATA_FILE
        assert repo.get_park("grand-canyon-az").activities[0].name == "Hiking"


class TestReads:
    """Test list and get."""

    def test_list_keeps_dataset_order(self, parks_file: Path) -> None:
        names = [p.name for p in FileParkRepository(str(parks_file)).list_parks()]
        assert names == ["Starved Rock State Park", "Brown County State Park"]

    def test_null_activities_are_empty(self, parks_file: Path) -> None:
        park = FileParkRepository(str(parks_file)).get_park("brown-county-state-park-in")
        assert park.activities == []

    def test_get_unknown_code(self, parks_file: Path) -> None:
        with pytest.raises(ParkNotFoundError):
            FileParkRepository(str(parks_file)).get_park("nope-xx")

    def test_mapping_is_read_only(self, parks_file: Path) -> None:
        repo = FileParkRepository(str(parks_file))
        with pytest.raises(TypeError):
            repo.parks["new-xx"] = None

    def test_returned_parks_do_not_alias_the_dataset(self, parks_file: Path) -> None:
        repo = FileParkRepository(str(parks_file))
        repo.get_park("starved-rock-state-park-il").activities.clear()
        assert len(repo.get_park("starved-rock-state-park-il").activities) == 2


class TestUnsupportedOperations:
    """Writes and geographic search are not available on this backend."""

    @pytest.fixture
    def repo(self, parks_file: Path) -> FileParkRepository:
        return FileParkRepository(str(parks_file))

    def test_create(self, repo: FileParkRepository, grand_canyon: ParkCreate) -> None:
        with pytest.raises(OperationNotSupportedError):
            repo.create_park(grand_canyon)

    def test_update(self, repo: FileParkRepository, grand_canyon: ParkCreate) -> None:
        with pytest.raises(OperationNotSupportedError):
            repo.update_park("starved-rock-state-park-il", grand_canyon)

    def test_delete(self, repo: FileParkRepository) -> None:
        with pytest.raises(OperationNotSupportedError):
            repo.delete_park("starved-rock-state-park-il")
        assert len(repo.list_parks()) == 2

    def test_search(self, repo: FileParkRepository) -> None:
        with pytest.raises(OperationNotSupportedError):
            repo.search_geographic(41.3, -89.0, "Hiking", 50)
