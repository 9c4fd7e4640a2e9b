"""
Query options for the Nominatim endpoints.
Unset options are left out of the query string so the server default applies.
"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _flag(value: bool) -> str:
    return "1" if value else "0"


class LookupParams(BaseModel):
    """Output options shared by every endpoint that returns places."""

    model_config = ConfigDict(frozen=True)

    accept_language: Optional[str] = None
    addressdetails: bool = True
    extratags: bool = True
    namedetails: bool = False

    def to_query(self) -> Dict[str, str]:
        query = {
            "addressdetails": _flag(self.addressdetails),
            "extratags": _flag(self.extratags),
        }
        if self.namedetails:
            query["namedetails"] = "1"
        if self.accept_language:
            query["accept-language"] = self.accept_language
        return query


class ReverseParams(LookupParams):
    # 3 = country, 10 = city, 18 = building
    zoom: Optional[int] = Field(default=None, ge=0, le=18)

    def to_query(self) -> Dict[str, str]:
        query = super().to_query()
        if self.zoom is not None:
            query["zoom"] = str(self.zoom)
        return query


class SearchParams(LookupParams):
    limit: Optional[int] = Field(default=None, ge=1, le=40)
    countrycodes: Optional[str] = None

    def to_query(self) -> Dict[str, str]:
        query = super().to_query()
        if self.limit is not None:
            query["limit"] = str(self.limit)
        if self.countrycodes:
            query["countrycodes"] = self.countrycodes
        return query
