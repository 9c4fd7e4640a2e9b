"""
Geocoding Module
--------------
Handles reverse geocoding operations to convert geographic coordinates to human-readable addresses.
Uses OpenStreetMap's Nominatim API; also exposes the search, lookup and status endpoints.
One HTTP request per call: no caching, no retries.
"""
