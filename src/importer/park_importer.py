import requests
from pydantic import ValidationError
import glob
import json
import logging
import os
import time
from typing import Optional

from src.geocoding.nominatim import batch_geocode
from src.models.park import ParkCreate
from src.repositories.errors import ParkConflictError, RepositoryError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

REQUEST_TIMEOUT = 10
MAX_RETRIES = 3

CREATED = "created"
CONFLICT = "conflict"
FAILED = "failed"


class ParkRecord(ParkCreate):
    """A park as found in an import file. Coordinates of 0/0 mean 'unknown'."""
    latitude: float = 0.0
    longitude: float = 0.0
    address: Optional[str] = None

    @property
    def has_coordinates(self):
        return not (self.latitude == 0 and self.longitude == 0)

    def to_payload(self):
        return self.model_dump(mode="json", by_alias=True, exclude={"address"})


def _read_json_file(path):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # scraper output holds one park per file; datasets hold a list
    return data if isinstance(data, list) else [data]


def load_park_records(path):
    """
    Load park records from a JSON file, or from every *.json file below a
    directory (the scraper writes one file per park under output/{STATE}/).

    Unreadable files and invalid records are logged and skipped.
    """
    if os.path.isdir(path):
        files = sorted(glob.glob(os.path.join(path, "**", "*.json"), recursive=True))
    else:
        files = [path]

    records = []
    for file_path in files:
        try:
            raw_records = _read_json_file(file_path)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Could not read park file {file_path}: {e}")
            continue

        for raw in raw_records:
            try:
                records.append(ParkRecord.model_validate(raw))
            except ValidationError as e:
                name = raw.get("name", "unnamed") if isinstance(raw, dict) else "unnamed"
                logger.error(f"Validation error for park {name} in {file_path}: {e.errors()}")

    logger.info(f"Loaded {len(records)} park records from {path}")
    return records


def fill_missing_coordinates(records, max_workers=4):
    """Geocode the address of every record that has no coordinates. Returns how many were filled."""
    pending = [r for r in records if not r.has_coordinates and r.address]
    if not pending:
        return 0

    coordinates = batch_geocode([r.address for r in pending], max_workers=max_workers)

    filled = 0
    for record in pending:
        found = coordinates.get(record.address)
        if found:
            record.latitude, record.longitude = found
            filled += 1
        else:
            logger.warning(f"Could not geocode {record.name} ({record.address}), keeping 0/0")
    return filled


def seed_repository(repository, records):
    """Create every record through a repository. Returns (created, conflicts, failed)."""
    created = conflicts = failed = 0

    for record in records:
        try:
            park = repository.create_park(ParkCreate.model_validate(record.model_dump(exclude={"address"})))
            created += 1
            logger.debug(f"Seeded {park.park_code}")
        except ParkConflictError as e:
            conflicts += 1
            logger.info(f"Skipping existing park: {e}")
        except RepositoryError as e:
            failed += 1
            logger.error(f"Failed to seed park {record.name}: {e}")

    return created, conflicts, failed


def post_park(record, base_url, session=None):
    """
    POST one park to a running API. Retries on rate limiting, server errors
    and connection errors; a 409 means the park already exists.

    Returns CREATED, CONFLICT or FAILED.
    """
    http = session or requests
    url = f"{base_url.rstrip('/')}/park"

    retries = 0
    while retries < MAX_RETRIES:
        try:
            logger.info(f"Writing park {record.name} to API")
            response = http.post(url, json=record.to_payload(), headers=DEFAULT_HEADERS, timeout=REQUEST_TIMEOUT)

            if response.status_code in (200, 201):
                logger.info(f"POST successful for {record.name}: HTTP {response.status_code}")
                return CREATED

            if response.status_code == 409:
                logger.info(f"Park {record.name} already exists")
                return CONFLICT

            retries += 1
            wait_time = 2 * retries

            if 400 <= response.status_code < 500 and response.status_code != 429:
                logger.error(f"Client error for {record.name}: HTTP {response.status_code} - {response.text}")
                return FAILED

            logger.warning(f"HTTP {response.status_code} for {record.name}. Retrying in {wait_time} seconds... (Attempt {retries}/{MAX_RETRIES})")
            time.sleep(wait_time)

        except requests.exceptions.RequestException as e:
            retries += 1
            wait_time = 2 * retries
            logger.warning(f"Connection error: {e}. Retrying in {wait_time} seconds... (Attempt {retries}/{MAX_RETRIES})")
            time.sleep(wait_time)

    logger.error(f"Failed to post park {record.name} after {MAX_RETRIES} attempts.")
    return FAILED


def import_parks(records, base_url):
    """Post every record to the API. Returns (created, conflicts, failed)."""
    counts = {CREATED: 0, CONFLICT: 0, FAILED: 0}

    with requests.Session() as session:
        for record in records:
            counts[post_park(record, base_url, session=session)] += 1

    logger.info(f"Import finished: {counts[CREATED]} created, {counts[CONFLICT]} already present, {counts[FAILED]} failed")
    return counts[CREATED], counts[CONFLICT], counts[FAILED]
