"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines the coordinates and query options sent to Nominatim and the place,
address and status records it returns. Every response field is optional so
new or missing keys never break decoding.
"""
