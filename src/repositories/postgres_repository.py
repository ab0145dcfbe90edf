"""
PostgreSQL/PostGIS park repository.

Parks and activities live in two tables. Reads fold the activities of each
park back into a single row with json_agg, and geographic search filters by
ST_DWithin on a geography column, so distances are measured on the spheroid
in kilometres rather than in planar degrees.
"""
import json
import logging

from sqlalchemy import delete, exists, func, insert, literal_column, select, update
from sqlalchemy.dialects.postgresql import aggregate_order_by
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import aliased

from src.db.database import (
    TEXT_SEARCH_CONFIG,
    ActivityDB,
    ParkDB,
    activity_name_tsvector,
    get_engine,
    make_point,
    make_session_factory,
)
from src.models.park import Park
from src.models.park_code import derive_park_code
from src.repositories.base import DEFAULT_SEARCH_RADIUS_KM, ParkRepository
from src.repositories.errors import (
    ParkConflictError,
    ParkNotFoundError,
    StorageUnavailableError,
)

# Get logger
logger = logging.getLogger(__name__)

PARK_COLUMNS = (
    ParkDB.id,
    ParkDB.name,
    ParkDB.park_code,
    ParkDB.park_url,
    ParkDB.state_code,
    ParkDB.latitude,
    ParkDB.longitude,
)


def activities_aggregate():
    """
    Every activity of the joined park as a JSON array, in insertion order.

    The FILTER drops the all-NULL row produced by the outer join for a park
    without activities, and COALESCE turns the resulting NULL into [].
    """
    activity_object = func.json_build_object(
        literal_column("'name'"), ActivityDB.name,
        literal_column("'description'"), ActivityDB.description,
    )
    aggregated = func.json_agg(aggregate_order_by(activity_object, ActivityDB.id)).filter(
        ActivityDB.id.isnot(None)
    )
    return func.coalesce(aggregated, literal_column("'[]'::json")).label("activities")


def build_parks_query():
    """Parks joined with their activities, one row per park."""
    return (
        select(*PARK_COLUMNS, activities_aggregate())
        .select_from(ParkDB)
        .outerjoin(ActivityDB, ActivityDB.park_id == ParkDB.id)
        .group_by(*PARK_COLUMNS)
    )


def build_search_query(latitude, longitude, activity, radius_km):
    """
    Parks within radius_km of the point having at least one activity whose
    name matches the full-text query, nearest first.

    The whole activity set of each matching park is returned, not only the
    activities that matched.
    """
    point = make_point(latitude, longitude)
    distance_km = (func.ST_Distance(ParkDB.location, point) / 1000.0).label("distance_km")

    matching = aliased(ActivityDB)
    has_matching_activity = exists().where(
        matching.park_id == ParkDB.id,
        activity_name_tsvector(matching.name).op("@@")(
            func.plainto_tsquery(literal_column(f"'{TEXT_SEARCH_CONFIG}'"), activity)
        ),
    )

    return (
        select(*PARK_COLUMNS, activities_aggregate(), distance_km)
        .select_from(ParkDB)
        .outerjoin(ActivityDB, ActivityDB.park_id == ParkDB.id)
        .where(func.ST_DWithin(ParkDB.location, point, radius_km * 1000.0))
        .where(has_matching_activity)
        .group_by(*PARK_COLUMNS)
        .order_by(distance_km, ParkDB.id)
    )


def row_to_park(row):
    values = row._mapping
    activities = values["activities"]
    # psycopg2 decodes json columns itself; other drivers may hand back text
    if isinstance(activities, str):
        activities = json.loads(activities)

    return Park(
        id=str(values["id"]),
        name=values["name"],
        park_code=values["park_code"],
        park_url=values["park_url"],
        state_code=values["state_code"],
        latitude=values["latitude"],
        longitude=values["longitude"],
        activities=activities or [],
    )


def _park_values(park):
    return {
        "name": park.name,
        "park_url": park.park_url,
        "state_code": park.state_code,
        "latitude": park.latitude,
        "longitude": park.longitude,
        "location": make_point(park.latitude, park.longitude),
    }


def _activity_rows(park_id, activities):
    return [
        {"park_id": park_id, "name": activity.name, "description": activity.description}
        for activity in activities
    ]


class PostgresParkRepository(ParkRepository):
    """
    Park repository over PostgreSQL with PostGIS.

    A session is opened per operation and always closed. Multi-row writes
    run in a single transaction that is rolled back on any error.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url):
        return cls(make_session_factory(get_engine(database_url)))

    def list_parks(self):
        db = self._session_factory()
        try:
            rows = db.execute(build_parks_query().order_by(ParkDB.id)).all()
            return [row_to_park(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error listing parks: {e}")
            raise StorageUnavailableError(f"Could not list parks: {e}") from e
        finally:
            db.close()

    def get_park(self, park_code):
        db = self._session_factory()
        try:
            row = db.execute(build_parks_query().where(ParkDB.park_code == park_code)).first()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving park {park_code}: {e}")
            raise StorageUnavailableError(f"Could not retrieve park '{park_code}': {e}") from e
        finally:
            db.close()

        if row is None:
            raise ParkNotFoundError(park_code)
        return row_to_park(row)

    def create_park(self, park):
        park_code = derive_park_code(park.name, park.state_code)

        db = self._session_factory()
        try:
            park_id = db.execute(
                insert(ParkDB)
                .values(park_code=park_code, **_park_values(park))
                .returning(ParkDB.id)
            ).scalar_one_or_none()

            if park_id is None:
                db.rollback()
                raise ParkConflictError(park_code, "insert returned no id")

            if park.activities:
                db.execute(insert(ActivityDB), _activity_rows(park_id, park.activities))

            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Conflict inserting park {park_code}: {e.orig}")
            raise ParkConflictError(park_code, "a park with this code already exists") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error inserting park {park_code}: {e}")
            raise StorageUnavailableError(f"Could not create park '{park_code}': {e}") from e
        finally:
            db.close()

        logger.info(f"Inserted: {park.name} (code: {park_code}, id: {park_id})")
        return Park.from_create(park, park_id, park_code)

    def update_park(self, park_code, park):
        db = self._session_factory()
        try:
            park_id = db.execute(
                select(ParkDB.id).where(ParkDB.park_code == park_code).with_for_update()
            ).scalar_one_or_none()

            if park_id is None:
                db.rollback()
                raise ParkNotFoundError(park_code)

            db.execute(
                update(ParkDB)
                .where(ParkDB.id == park_id)
                .values(**_park_values(park))
                .execution_options(synchronize_session=False)
            )
            # Activities are replaced wholesale, not merged
            db.execute(
                delete(ActivityDB)
                .where(ActivityDB.park_id == park_id)
                .execution_options(synchronize_session=False)
            )
            if park.activities:
                db.execute(insert(ActivityDB), _activity_rows(park_id, park.activities))

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error updating park {park_code}: {e}")
            raise StorageUnavailableError(f"Could not update park '{park_code}': {e}") from e
        finally:
            db.close()

        logger.info(f"Updated: {park.name} (code: {park_code}, id: {park_id})")
        return Park.from_create(park, park_id, park_code)

    def delete_park(self, park_code):
        db = self._session_factory()
        try:
            # activities go with it through ON DELETE CASCADE
            deleted_id = db.execute(
                delete(ParkDB)
                .where(ParkDB.park_code == park_code)
                .returning(ParkDB.id)
                .execution_options(synchronize_session=False)
            ).scalar_one_or_none()

            if deleted_id is None:
                db.rollback()
                raise ParkNotFoundError(park_code)

            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error deleting park {park_code}: {e}")
            raise StorageUnavailableError(f"Could not delete park '{park_code}': {e}") from e
        finally:
            db.close()

        logger.info(f"Deleted: park {park_code} (id: {deleted_id})")

    def search_geographic(self, latitude, longitude, activity, radius_km=DEFAULT_SEARCH_RADIUS_KM):
        db = self._session_factory()
        try:
            rows = db.execute(build_search_query(latitude, longitude, activity, radius_km)).all()
        except SQLAlchemyError as e:
            logger.error(f"Error searching parks near ({latitude}, {longitude}) for '{activity}': {e}")
            raise StorageUnavailableError(f"Geographic search failed: {e}") from e
        finally:
            db.close()

        logger.info(
            f"Found {len(rows)} parks within {radius_km} km of ({latitude}, {longitude}) offering '{activity}'"
        )
        return [row_to_park(row) for row in rows]
