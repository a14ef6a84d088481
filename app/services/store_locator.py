"""Nearby grocery store search from the device position."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Protocol

from app.models.recipe import Coordinates, Store
from app.utils.exceptions import LocationError, StoreSearchError

logger = logging.getLogger(__name__)

PositionSource = Callable[[], Awaitable[Coordinates]]

# Error codes of the browser Geolocation API
LOCATION_ERRORS = {
    "permission_denied": "Location permission was denied. Check your browser settings.",
    "unavailable": "Your location is currently unavailable.",
    "timeout": "Timed out while getting your location.",
    "unsupported": "This browser does not support location services.",
}


class StoreSearcher(Protocol):
    async def search_nearby_stores(self, coordinates: Coordinates, limit: Optional[int] = None) -> List[Store]:
        ...


def position_from_report(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    error_code: Optional[str] = None,
) -> PositionSource:
    """
    Turn what the browser reported into an awaitable position source.

    The source raises LocationError when the browser reported an error or
    sent no coordinates.
    """

    async def _position() -> Coordinates:
        if error_code:
            raise LocationError(LOCATION_ERRORS.get(error_code, LOCATION_ERRORS["unavailable"]))
        if latitude is None or longitude is None:
            raise LocationError(LOCATION_ERRORS["unavailable"])
        return Coordinates(latitude=latitude, longitude=longitude)

    return _position


class NearbyStoreLocator:
    """Holds the latest store search result; each search replaces it wholesale."""

    def __init__(self, searcher: StoreSearcher, limit: int = 5) -> None:
        self.searcher = searcher
        self.limit = limit
        self._stores: List[Store] = []

    @property
    def stores(self) -> List[Store]:
        return list(self._stores)

    async def locate(self, position_source: PositionSource) -> List[Store]:
        """
        Resolve the position, then search around it.

        Raises:
            LocationError: position denied or unavailable
            StoreSearchError: the grounded search failed
        """
        try:
            coordinates = await position_source()
            stores = await self.searcher.search_nearby_stores(coordinates, limit=self.limit)
        except (LocationError, StoreSearchError):
            self._stores = []
            raise

        self._stores = self._dedupe(stores)
        logger.info("Nearby store search returned %d stores", len(self._stores))
        return self.stores

    def _dedupe(self, stores: List[Store]) -> List[Store]:
        unique: List[Store] = []
        seen = set()
        for store in stores:
            if store.name in seen:
                continue
            seen.add(store.name)
            unique.append(store)
        return unique[: self.limit]
