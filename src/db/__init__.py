"""
Database Module
-------------
Handles database connections and ORM models.
Uses SQLAlchemy with PostgreSQL/PostGIS and defines the schema for parks and
their activities.
"""
