from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    cast,
    create_engine,
    func,
    literal_column,
    text,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from geoalchemy2 import Geography
import logging

# Get logger
logger = logging.getLogger(__name__)

Base = declarative_base()

# Text search configuration used by the activity index and by geo search
TEXT_SEARCH_CONFIG = "english"

WGS84_SRID = 4326


# Define the Park table structure
class ParkDB(Base):
    __tablename__ = "parks"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    park_code = Column(String, nullable=False, unique=True, index=True)
    park_url = Column(String, nullable=True)
    state_code = Column(String, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    # Kept in sync with latitude/longitude on every write; backs distance queries
    location = Column(Geography(geometry_type="POINT", srid=WGS84_SRID, spatial_index=True))


# Define the Activity table structure
class ActivityDB(Base):
    __tablename__ = "activities"
    id = Column(Integer, primary_key=True)
    park_id = Column(Integer, ForeignKey("parks.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")


def activity_name_tsvector(name_column):
    return func.to_tsvector(literal_column(f"'{TEXT_SEARCH_CONFIG}'"), name_column)


Index(
    "ix_activities_name_fts",
    activity_name_tsvector(ActivityDB.name),
    postgresql_using="gin",
)


def make_point(latitude, longitude):
    """Geography point for a coordinate pair. Coordinates are bound as parameters."""
    return cast(
        func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), WGS84_SRID),
        Geography(geometry_type="POINT", srid=WGS84_SRID),
    )


def get_engine(database_url):
    if not database_url:
        raise ValueError("A database URL is required (set DB_URL)")
    return create_engine(database_url, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine):
    try:
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (if they didn't exist previously).")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise
