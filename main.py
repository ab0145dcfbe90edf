"""
Main entrypoint for the parks catalog.

Usage:
    `python main.py` prepares the configured store and seeds it from the parks
    dataset (PARKS_DATA_FILE, or the bundled src/data/parks.json). The API itself
    is served with `uvicorn src.api.app:app`.

With PARKS_API_URL set, the dataset is posted to that running API instead and
no repository is opened. With PARKS_REPOSITORY=file the dataset is only loaded
and counted, since the file backend is read-only.
"""
import logging

from src.config import BACKEND_POSTGRES, Settings
from src.importer.park_importer import (
    fill_missing_coordinates,
    import_parks,
    load_park_records,
    seed_repository,
)
from src.repositories import create_repository
from src.repositories.file_repository import DEFAULT_DATA_FILE


def load_records(settings):
    data_file = settings.data_file or DEFAULT_DATA_FILE
    print(f"Reading parks from {data_file}...")
    records = load_park_records(data_file)
    geocoded = fill_missing_coordinates(records)
    return records, geocoded


def print_summary(action, records, geocoded, created, conflicts, failed):
    print(f"\n{action} completed")
    print(f"  Park records read: {len(records)}")
    print(f"  Coordinates geocoded: {geocoded}")
    print(f"  Parks created: {created}")
    print(f"  Parks already present: {conflicts}")
    print(f"  Parks failed: {failed}")


def main():
    """
    Main function to create the schema and seed parks, or post them to an API.
    """
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )

    try:
        if settings.api_url:
            records, geocoded = load_records(settings)
            print(f"Posting {len(records)} parks to {settings.api_url}...")
            created, conflicts, failed = import_parks(records, settings.api_url)
            print_summary("Import", records, geocoded, created, conflicts, failed)
            return 0 if failed == 0 else 1

        repository = create_repository(settings)

        if settings.repository_backend != BACKEND_POSTGRES:
            print(f"File repository loaded with {len(repository.list_parks())} parks, nothing to seed")
            return 0

        from src.db.database import create_tables, get_engine
        create_tables(get_engine(settings.database_url))

        records, geocoded = load_records(settings)
        created, conflicts, failed = seed_repository(repository, records)
        print_summary("Seeding", records, geocoded, created, conflicts, failed)

        return 0 if failed == 0 else 1
    except Exception as e:
        print(f"An error occurred in the main function: {str(e)}")
        return 1


if __name__ == "__main__":
    exit_code = main()
    print(f"Exiting with code {exit_code}")
    raise SystemExit(exit_code)
