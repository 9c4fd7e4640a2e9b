"""
Configuration Module
------------------
Default settings for the client and the HTTP API, read once from the environment.
"""
import os

from tag_nominatim.errors import ConfigError


def _env_number(name, default, kind=float):
    raw = os.getenv(name, default)
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigError(f"Environment variable {name} must be a number, got {raw!r}") from e


# Public instance; self-hosted servers override this
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org/")

# Nominatim's usage policy requires an identifying User-Agent
USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "tag-nominatim/0.1")

REQUEST_TIMEOUT = _env_number("NOMINATIM_TIMEOUT", "10")

# Path to a CA bundle; unset means the bundle shipped with requests
CA_BUNDLE = os.getenv("NOMINATIM_CA_BUNDLE")

# "default" or "truststore"
TLS_BACKEND = os.getenv("NOMINATIM_TLS_BACKEND", "default").lower()

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = _env_number("API_PORT", "8000", int)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
