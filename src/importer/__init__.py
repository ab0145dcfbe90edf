"""
Importer Module
-------------
Loads park records from JSON files, fills in missing coordinates by
geocoding, and stores them either directly through a repository or by
posting them to a running API.
"""
