"""
Nominatim Client
--------------
Thin binding to the Nominatim HTTP API: builds the query, sends one GET request
and decodes the JSON answer into the models in tag_nominatim.models.

A client only holds immutable settings (base URL, identification, timeout,
TLS backend) and keeps no session between calls, so one instance can be shared
by any number of threads or asyncio tasks.
"""
import asyncio
import logging
import math
import re
import ssl
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar, Union
from urllib.parse import urljoin

import requests
from pydantic import HttpUrl, TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter

from tag_nominatim import config
from tag_nominatim.errors import (
    ApiError,
    ConfigError,
    ParseError,
    RequestTimeoutError,
    TransportError,
)
from tag_nominatim.geocoding.identification import IdentificationMethod
from tag_nominatim.models.coordinates import Coordinates
from tag_nominatim.models.params import LookupParams, ReverseParams, SearchParams
from tag_nominatim.models.place import Place, Status

# Get logger
logger = logging.getLogger(__name__)

# Server side cap on osm_ids per lookup request
MAX_LOOKUP_IDS = 50

# "default" verifies against the CA bundle requests ships (certifi),
# "truststore" against the operating system store (extra: tag-nominatim[truststore])
TLS_BACKENDS = ("default", "truststore")

T = TypeVar("T")

_http_url = TypeAdapter(HttpUrl)
_place_list = TypeAdapter(List[Place])

_HOST_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")

CoordinatesLike = Union[Coordinates, Tuple[float, float]]


def _valid_host(host: str) -> bool:
    if host.startswith("["):
        return True
    return all(_HOST_LABEL.match(label) for label in host.rstrip(".").split("."))


def _normalize_base_url(base_url: str) -> str:
    if not isinstance(base_url, str):
        raise ConfigError(f"Base URL must be a string, got {type(base_url).__name__}")
    try:
        url = _http_url.validate_python(base_url.strip())
    except ValidationError as e:
        raise ConfigError(f"Invalid base URL {base_url!r}: {_describe(e)}") from e
    if not url.host or not _valid_host(url.host):
        raise ConfigError(f"Base URL has an invalid host, got {base_url!r}")
    if url.query or url.fragment:
        raise ConfigError(f"Base URL must not carry a query or fragment, got {base_url!r}")
    normalized = str(url)
    # urljoin drops the last path segment unless it ends with a slash
    if not normalized.endswith("/"):
        normalized += "/"
    return normalized


def _check_timeout(timeout: Any) -> float:
    if isinstance(timeout, bool):
        raise ConfigError(f"Timeout must be a number of seconds, got {timeout!r}")
    try:
        seconds = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Timeout must be a number of seconds, got {timeout!r}") from e
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"Timeout must be a finite positive number, got {timeout!r}")
    return seconds


def _system_ssl_context() -> ssl.SSLContext:
    try:
        import truststore
    except ImportError as e:
        raise ConfigError(
            "The truststore TLS backend needs the extra: pip install 'tag-nominatim[truststore]'"
        ) from e
    return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)


class _SSLContextAdapter(HTTPAdapter):
    """Transport adapter that verifies HTTPS with a fixed SSL context."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs):
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().init_poolmanager(*args, **kwargs)

    def build_connection_pool_key_attributes(self, request, verify, cert=None):
        host_params, pool_kwargs = super().build_connection_pool_key_attributes(
            request, verify, cert
        )
        pool_kwargs["ssl_context"] = self._ssl_context
        return host_params, pool_kwargs


def _as_coordinates(value: CoordinatesLike) -> Coordinates:
    if isinstance(value, Coordinates):
        return value
    latitude, longitude = value
    return Coordinates(latitude, longitude)


def _as_id_list(osm_ids: Union[str, Iterable[str]]) -> List[str]:
    # A single string is one id (or a comma separated list), not a sequence of characters
    if isinstance(osm_ids, str):
        osm_ids = osm_ids.split(",")
    return list(osm_ids)


def _message_from(data: Dict[str, Any]) -> Optional[str]:
    error = data.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    if error:
        return str(error)
    message = data.get("message")
    return str(message) if message else None


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = _message_from(data)
        if message:
            return message
    text = (response.text or "").strip()
    return text or response.reason or f"HTTP {response.status_code}"


def _describe(error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)


class Client:
    """The interface for accessing a Nominatim API server."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        identification: Optional[IdentificationMethod] = None,
        timeout: Optional[float] = None,
        verify: Union[bool, str, None] = None,
        tls_backend: Optional[str] = None,
    ):
        self._base_url = _normalize_base_url(
            config.NOMINATIM_BASE_URL if base_url is None else base_url
        )
        self._identification = identification or IdentificationMethod.from_user_agent(
            config.USER_AGENT
        )
        self._timeout = _check_timeout(config.REQUEST_TIMEOUT if timeout is None else timeout)

        self._tls_backend = config.TLS_BACKEND if tls_backend is None else tls_backend
        if self._tls_backend not in TLS_BACKENDS:
            raise ConfigError(
                f"Unknown TLS backend {self._tls_backend!r}, expected one of {', '.join(TLS_BACKENDS)}"
            )
        self._ssl_context = None
        if self._tls_backend == "truststore":
            if verify not in (None, True):
                raise ConfigError("verify cannot be combined with the truststore TLS backend")
            self._ssl_context = _system_ssl_context()
            verify = True
        elif verify is None:
            verify = config.CA_BUNDLE or True
        self._verify = verify

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def identification(self) -> IdentificationMethod:
        return self._identification

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def verify(self) -> Union[bool, str]:
        return self._verify

    @property
    def tls_backend(self) -> str:
        return self._tls_backend

    def __repr__(self):
        return f"Client(base_url={self._base_url!r}, timeout={self._timeout})"

    def _endpoint(self, path: str) -> str:
        return urljoin(self._base_url, path)

    def _send(self, url: str, params: Dict[str, str]) -> requests.Response:
        options = {
            "params": params,
            "headers": self._identification.headers(),
            "timeout": self._timeout,
            "verify": self._verify,
        }
        if self._ssl_context is None:
            return requests.get(url, **options)
        # One session per call, so nothing is shared between callers
        with requests.Session() as session:
            session.mount("https://", _SSLContextAdapter(self._ssl_context))
            return session.get(url, **options)

    def _get(self, path: str, params: Dict[str, str]) -> Tuple[Any, str]:
        """Send one GET request and return the decoded JSON with the raw body."""
        url = self._endpoint(path)
        logger.debug(f"GET {url} params={params}")

        try:
            response = self._send(url, params)
        except requests.Timeout as e:
            logger.warning(f"Nominatim request to {url} timed out after {self._timeout}s")
            raise RequestTimeoutError(
                f"Request to {url} timed out after {self._timeout}s", e
            ) from e
        except requests.RequestException as e:
            logger.warning(f"Network error calling {url}: {e}")
            raise TransportError(f"Request to {url} failed: {e}", e) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"Nominatim HTTP error ({response.status_code}) for {url}: {message}")
            raise ApiError(response.status_code, message)

        body = response.text
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Nominatim returned a non-JSON body for {url}")
            raise ParseError(f"body is not valid JSON ({e})", body=body) from e

        # Nominatim reports "nothing found" as a 200 with an error document
        if isinstance(data, dict) and "error" in data:
            message = _message_from(data) or "unknown error"
            logger.info(f"Nominatim returned an error for {url}: {message}")
            raise ApiError(response.status_code, message)

        return data, body

    def _decode(self, validate: Callable[[Any], T], data: Any, body: str) -> T:
        try:
            return validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected Nominatim response shape: {_describe(e)}")
            raise ParseError(_describe(e), body=body) from e

    def _reverse_query(
        self, coordinates: Coordinates, params: Optional[ReverseParams]
    ) -> Dict[str, str]:
        query = {"format": "json"}
        query.update(coordinates.query_values())
        query.update((params or ReverseParams()).to_query())
        return query

    def reverse_url(
        self, coordinates: CoordinatesLike, params: Optional[ReverseParams] = None
    ) -> str:
        """Return the URL a reverse call would request, without sending it."""
        query = self._reverse_query(_as_coordinates(coordinates), params)
        return requests.Request("GET", self._endpoint("reverse"), params=query).prepare().url

    def reverse(
        self, coordinates: CoordinatesLike, params: Optional[ReverseParams] = None
    ) -> Place:
        """
        Generate a Place from latitude and longitude.

        Args:
            coordinates: Coordinates, or a (latitude, longitude) tuple validated here
            params: zoom level, language and detail flags

        Raises:
            InvalidCoordinatesError: before any request, for out of range input
            TransportError: network failure or timeout
            ApiError: error status or error document from the server
            ParseError: body is not a place
        """
        coordinates = _as_coordinates(coordinates)
        data, body = self._get("reverse", self._reverse_query(coordinates, params))
        place = self._decode(Place.model_validate, data, body)
        logger.info(f"Successfully geocoded coordinates ({coordinates})")
        return place

    reverse_geocode = reverse

    def search(self, query: str, params: Optional[SearchParams] = None) -> List[Place]:
        """Get Places matching a free-form search query."""
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")
        request_params = {"q": query.strip(), "format": "json"}
        request_params.update((params or SearchParams()).to_query())
        data, body = self._get("search", request_params)
        places = self._decode(_place_list.validate_python, data, body)
        logger.info(f"Search for '{query}' returned {len(places)} places")
        return places

    def lookup(
        self, osm_ids: Union[str, Iterable[str]], params: Optional[LookupParams] = None
    ) -> List[Place]:
        """Return Places for OSM node, way or relation ids such as "R146656" or "W50637691"."""
        ids = [str(osm_id).strip() for osm_id in _as_id_list(osm_ids)]
        ids = [osm_id for osm_id in ids if osm_id]
        if not ids:
            raise ValueError("At least one OSM id is required")
        if len(ids) > MAX_LOOKUP_IDS:
            raise ValueError(f"At most {MAX_LOOKUP_IDS} OSM ids per lookup, got {len(ids)}")
        request_params = {"osm_ids": ",".join(ids), "format": "json"}
        request_params.update((params or LookupParams()).to_query())
        data, body = self._get("lookup", request_params)
        return self._decode(_place_list.validate_python, data, body)

    def status(self) -> Status:
        """Check the status of the Nominatim server."""
        data, body = self._get("status", {"format": "json"})
        return self._decode(Status.model_validate, data, body)


class AsyncClient:
    """
    Awaitable wrapper around Client.

    Each call runs the blocking request in a worker thread so the event loop keeps
    serving other tasks. Cancelling the awaiting task does not stop the thread; the
    client timeout bounds how long it can run.
    """

    def __init__(self, client: Optional[Client] = None, **settings):
        if client is not None and settings:
            raise ConfigError("Pass either a Client or client settings, not both")
        self._client = client if client is not None else Client(**settings)

    @property
    def client(self) -> Client:
        return self._client

    def __repr__(self):
        return f"AsyncClient({self._client!r})"

    def reverse_url(
        self, coordinates: CoordinatesLike, params: Optional[ReverseParams] = None
    ) -> str:
        return self._client.reverse_url(coordinates, params)

    async def reverse(
        self, coordinates: CoordinatesLike, params: Optional[ReverseParams] = None
    ) -> Place:
        # Validate in the caller so bad input fails before a thread is used
        coordinates = _as_coordinates(coordinates)
        return await asyncio.to_thread(self._client.reverse, coordinates, params)

    reverse_geocode = reverse

    async def search(self, query: str, params: Optional[SearchParams] = None) -> List[Place]:
        return await asyncio.to_thread(self._client.search, query, params)

    async def lookup(
        self, osm_ids: Union[str, Iterable[str]], params: Optional[LookupParams] = None
    ) -> List[Place]:
        # osm_ids may be a generator; consume it on the calling thread
        return await asyncio.to_thread(self._client.lookup, _as_id_list(osm_ids), params)

    async def status(self) -> Status:
        return await asyncio.to_thread(self._client.status)
