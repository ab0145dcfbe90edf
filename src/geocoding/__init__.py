"""
Geocoding Module
--------------
Converts addresses to geographic coordinates for park records that lack them.
Uses OpenStreetMap's Nominatim API with caching and rate limiting.
"""
