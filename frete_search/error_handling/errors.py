"""Exception taxonomy for the freight search engine."""


class FreteSearchError(Exception):
    """Base class for all errors raised by the search engine."""
    pass


class ListingsUnavailableError(FreteSearchError):
    """The listings source failed (timeout, non-2xx or malformed payload)."""
    pass


class RegistryUnavailableError(FreteSearchError):
    """The geographic registry failed; callers degrade to offline data."""
    pass


class GeocodingError(FreteSearchError):
    """A place lookup failed; never escapes the geocoding layer."""
    pass


class UpstreamStatusError(FreteSearchError):
    """A remote endpoint answered with a non-2xx status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP {status} from {url}")
        self.status = status
        self.url = url
