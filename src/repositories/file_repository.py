import json
import logging
import os
from types import MappingProxyType

from pydantic import ValidationError

from src.models.park import Park
from src.models.park_code import derive_park_code
from src.repositories.base import DEFAULT_SEARCH_RADIUS_KM, ParkRepository
from src.repositories.errors import OperationNotSupportedError, ParkNotFoundError

# Get logger
logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "parks.json"
)


def load_parks_file(path):
    """
    Read a parks dataset and key every park by its derived park code.

    Returns an empty dict when the file is missing or unreadable. Records
    that fail validation are skipped.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Parks file {path} not found, starting with empty repository")
        return {}
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Error reading parks file {path}: {e}")
        return {}

    if not isinstance(records, list):
        logger.error(f"Parks file {path} must contain a list of parks, got {type(records).__name__}")
        return {}

    parks = {}
    for i, record in enumerate(records):
        try:
            park = Park.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Skipping invalid park record #{i} in {path}: {e.errors()}")
            continue

        key = derive_park_code(park.name, park.state_code)
        if key in parks:
            logger.warning(f"Duplicate park key '{key}' in {path}, keeping the later record")

        parks[key] = park.model_copy(update={"id": key, "park_code": key})

    return parks


class FileParkRepository(ParkRepository):
    """
    Read-only repository backed by a JSON dataset loaded once at construction.

    Meant for local development and static datasets. Writes and geographic
    search raise OperationNotSupportedError.
    """

    def __init__(self, data_path=None):
        self.data_path = data_path or DEFAULT_DATA_FILE
        self._parks = MappingProxyType(load_parks_file(self.data_path))
        logger.info(f"Loaded {len(self._parks)} parks from {self.data_path}")

    @property
    def parks(self):
        return self._parks

    def list_parks(self):
        # Copies, so callers cannot mutate the loaded dataset
        return [park.model_copy(deep=True) for park in self._parks.values()]

    def get_park(self, park_code):
        park = self._parks.get(park_code)
        if park is None:
            raise ParkNotFoundError(park_code)
        return park.model_copy(deep=True)

    def create_park(self, park):
        raise OperationNotSupportedError("create_park", type(self).__name__)

    def update_park(self, park_code, park):
        raise OperationNotSupportedError("update_park", type(self).__name__)

    def delete_park(self, park_code):
        raise OperationNotSupportedError("delete_park", type(self).__name__)

    def search_geographic(self, latitude, longitude, activity, radius_km=DEFAULT_SEARCH_RADIUS_KM):
        raise OperationNotSupportedError("search_geographic", type(self).__name__)
