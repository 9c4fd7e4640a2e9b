"""
Response records returned by a Nominatim server.
Field names follow the JSON output format; keys Nominatim adds later are ignored
on places and kept as extra attributes on addresses and extra tags.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tag_nominatim.errors import InvalidCoordinatesError
from tag_nominatim.models.coordinates import Coordinates


class Address(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    house_number: Optional[str] = None
    road: Optional[str] = None
    neighbourhood: Optional[str] = None
    suburb: Optional[str] = None
    village: Optional[str] = None
    town: Optional[str] = None
    city: Optional[str] = None
    municipality: Optional[str] = None
    county: Optional[str] = None
    state_district: Optional[str] = None
    state: Optional[str] = None
    iso3166_2_lvl4: Optional[str] = Field(default=None, alias="ISO3166-2-lvl4")
    postcode: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None

    @property
    def locality(self) -> Optional[str]:
        """City, town, village or municipality, whichever is present first."""
        return self.city or self.town or self.village or self.municipality


class ExtraTags(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    capital: Optional[str] = None
    website: Optional[str] = None
    wikidata: Optional[str] = None
    wikipedia: Optional[str] = None
    population: Optional[str] = None


class Place(BaseModel):
    """A location returned by the Nominatim server."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    place_id: int = 0
    licence: str = ""
    osm_type: str = ""
    osm_id: int = 0
    boundingbox: List[str] = Field(default_factory=list)
    lat: str = ""
    lon: str = ""
    display_name: str = ""
    category: Optional[str] = Field(default=None, alias="class")
    type: Optional[str] = None
    place_rank: Optional[int] = None
    addresstype: Optional[str] = None
    name: Optional[str] = None
    importance: Optional[float] = None
    icon: Optional[str] = None
    address: Optional[Address] = None
    extratags: Optional[ExtraTags] = None
    namedetails: Optional[Dict[str, str]] = None

    @field_validator("address", "extratags", "namedetails", mode="before")
    @classmethod
    def _empty_list_is_absent(cls, value: Any) -> Any:
        # Older servers encode an empty object as []
        if isinstance(value, list) and not value:
            return None
        return value

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if not self.lat or not self.lon:
            return None
        try:
            return Coordinates(self.lat, self.lon)
        except InvalidCoordinatesError:
            return None


class Status(BaseModel):
    """The status of a Nominatim server."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: int
    message: str
    data_updated: Optional[str] = None
    software_version: Optional[str] = None
    database_version: Optional[str] = None
