"""
API Module
---------
Provides RESTful API endpoints in front of a Nominatim server using FastAPI.
Features include:
- Reverse geocoding coordinates into places
- Free-form place search
- Lookup of OSM objects by id
- Upstream server status
"""
