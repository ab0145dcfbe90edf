"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines the structure of park and activity data, and the natural key
(park code) derived from a park's name and state code.
"""
from src.models.park import Activity, Park, ParkCreate
from src.models.park_code import derive_park_code, to_url_friendly

__all__ = [
    "Activity",
    "Park",
    "ParkCreate",
    "derive_park_code",
    "to_url_friendly",
]
