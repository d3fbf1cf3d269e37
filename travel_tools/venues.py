from typing import Mapping, Optional, Protocol

from .config import CONFIG


class VenueResolver(Protocol):
    def resolve(self, name: str) -> Optional[str]:
        ...


class StaticVenueResolver:
    """Venue name -> address lookup from a fixed directory (``VENUE_ADDRESSES_JSON``)."""

    def __init__(self, directory: Optional[Mapping[str, str]] = None) -> None:
        source = CONFIG.venue_addresses if directory is None else directory
        self._by_name = {k.strip().lower(): v for k, v in source.items() if k.strip() and v.strip()}

    def resolve(self, name: str) -> Optional[str]:
        return self._by_name.get((name or "").strip().lower())
