from fastapi import FastAPI, HTTPException, Depends, Query
from functools import lru_cache
import logging
from typing import Optional, List

from tag_nominatim import config
from tag_nominatim.errors import (
    ApiError,
    InvalidCoordinatesError,
    NominatimError,
    ParseError,
    RequestTimeoutError,
)
from tag_nominatim.geocoding.nominatim import AsyncClient
from tag_nominatim.models.coordinates import Coordinates
from tag_nominatim.models.params import LookupParams, ReverseParams, SearchParams
from tag_nominatim.models.place import Place, Status

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Nominatim Geocoding API",
    description="Simple API in front of a Nominatim server for reverse geocoding, search and lookup",
    version="0.1.0"
)


@lru_cache(maxsize=1)
def get_client() -> AsyncClient:
    client = AsyncClient()
    logger.info(f"Using Nominatim server at {client.client.base_url}")
    return client


def upstream_error(e: NominatimError) -> HTTPException:
    """Translate a client error into the response this API returns."""
    if isinstance(e, RequestTimeoutError):
        return HTTPException(status_code=504, detail="Nominatim server timed out")
    if isinstance(e, ApiError):
        # 2xx with an error document: the server found nothing
        status_code = 404 if e.status_code < 400 else 502
        return HTTPException(
            status_code=status_code,
            detail={"message": e.message, "upstream_status": e.status_code}
        )
    if isinstance(e, ParseError):
        return HTTPException(status_code=502, detail=f"Unexpected response from Nominatim: {e.detail}")
    return HTTPException(status_code=502, detail=f"Could not reach Nominatim: {e}")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Nominatim Geocoding API"}


@app.get("/reverse", response_model=Place)
async def reverse_geocode(
    lat: float,
    lon: float,
    zoom: Optional[int] = Query(None, ge=0, le=18),
    accept_language: Optional[str] = None,
    addressdetails: bool = True,
    client: AsyncClient = Depends(get_client)
):
    """Return the place at the given coordinates."""
    try:
        coordinates = Coordinates(lat, lon)
    except InvalidCoordinatesError as e:
        raise HTTPException(status_code=422, detail=str(e))

    params = ReverseParams(zoom=zoom, accept_language=accept_language, addressdetails=addressdetails)
    try:
        return await client.reverse(coordinates, params)
    except NominatimError as e:
        logger.error(f"Reverse geocoding failed for ({coordinates}): {e}")
        raise upstream_error(e)


@app.get("/search", response_model=List[Place])
async def search_places(
    q: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, ge=1, le=40),
    accept_language: Optional[str] = None,
    countrycodes: Optional[str] = None,
    client: AsyncClient = Depends(get_client)
):
    params = SearchParams(limit=limit, accept_language=accept_language, countrycodes=countrycodes)
    try:
        return await client.search(q, params)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NominatimError as e:
        logger.error(f"Search for '{q}' failed: {e}")
        raise upstream_error(e)


@app.get("/lookup", response_model=List[Place])
async def lookup_places(
    osm_ids: str = Query(..., description="Comma separated ids such as R146656,W50637691"),
    accept_language: Optional[str] = None,
    client: AsyncClient = Depends(get_client)
):
    params = LookupParams(accept_language=accept_language)
    try:
        return await client.lookup(osm_ids.split(","), params)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NominatimError as e:
        logger.error(f"Lookup of {osm_ids} failed: {e}")
        raise upstream_error(e)


@app.get("/status", response_model=Status)
async def server_status(client: AsyncClient = Depends(get_client)):
    """Return the status of the upstream Nominatim server"""
    try:
        return await client.status()
    except NominatimError as e:
        logger.error(f"Status check failed: {e}")
        raise upstream_error(e)
