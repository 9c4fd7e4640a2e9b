"""
tag_nominatim
-----------
Bindings to the reverse geocoding API powered by OpenStreetMap's Nominatim.

    from tag_nominatim import Client, Coordinates

    client = Client()
    place = client.reverse(Coordinates(40.689249, -74.0445))
    print(place.display_name)
"""
from tag_nominatim.errors import (
    ApiError,
    ConfigError,
    InvalidCoordinatesError,
    NominatimError,
    ParseError,
    RequestTimeoutError,
    TransportError,
)
from tag_nominatim.geocoding.identification import IdentificationMethod
from tag_nominatim.geocoding.nominatim import AsyncClient, Client
from tag_nominatim.models.coordinates import Coordinates
from tag_nominatim.models.params import LookupParams, ReverseParams, SearchParams
from tag_nominatim.models.place import Address, ExtraTags, Place, Status

__version__ = "0.1.0"

__all__ = [
    "Address",
    "ApiError",
    "AsyncClient",
    "Client",
    "ConfigError",
    "Coordinates",
    "ExtraTags",
    "IdentificationMethod",
    "InvalidCoordinatesError",
    "LookupParams",
    "NominatimError",
    "ParseError",
    "Place",
    "RequestTimeoutError",
    "ReverseParams",
    "SearchParams",
    "Status",
    "TransportError",
]
