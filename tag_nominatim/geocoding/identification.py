"""
How a client identifies itself to a Nominatim server.
The public instance rejects anonymous traffic, so every request carries either
an application User-Agent or the Referer of the web page making the call.
"""
from tag_nominatim.errors import ConfigError


class IdentificationMethod:
    __slots__ = ("_header", "_value")

    def __init__(self, header: str, value: str):
        if not value or not value.strip():
            raise ConfigError(f"{header} identification must not be empty")
        if "\r" in value or "\n" in value:
            raise ConfigError(f"{header} identification must be a single line")
        try:
            # http.client encodes header values as latin-1
            value.encode("latin-1")
        except UnicodeEncodeError as e:
            raise ConfigError(f"{header} identification {value!r} cannot be sent in an HTTP header") from e
        self._header = header
        self._value = value.strip()

    @classmethod
    def from_user_agent(cls, user_agent: str) -> "IdentificationMethod":
        return cls("User-Agent", user_agent)

    @classmethod
    def from_referer(cls, referer: str) -> "IdentificationMethod":
        return cls("Referer", referer)

    def header(self) -> str:
        return self._header

    def value(self) -> str:
        return self._value

    def headers(self):
        return {self._header: self._value}

    def __eq__(self, other):
        if not isinstance(other, IdentificationMethod):
            return NotImplemented
        return (self._header, self._value) == (other._header, other._value)

    def __hash__(self):
        return hash((self._header, self._value))

    def __repr__(self):
        return f"IdentificationMethod({self._header!r}, {self._value!r})"
