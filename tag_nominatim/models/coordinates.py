from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tag_nominatim.errors import InvalidCoordinatesError


class Coordinates(BaseModel):
    """A validated latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(ge=-180, le=180, allow_inf_nan=False)

    def __init__(self, latitude: float, longitude: float):
        try:
            super().__init__(latitude=latitude, longitude=longitude)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise InvalidCoordinatesError(
                f"Invalid coordinates ({latitude}, {longitude}): bad {fields}"
            ) from e

    def query_values(self) -> Dict[str, str]:
        # repr() is the shortest string that parses back to the same float
        return {"lat": repr(self.latitude), "lon": repr(self.longitude)}

    def __str__(self):
        return f"{self.latitude},{self.longitude}"
