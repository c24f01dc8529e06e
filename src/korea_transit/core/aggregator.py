"""Combined lookup of subway, bus stop and bike station data for a location."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from ..utils.korean_text import normalize_station_name
from .client import SeoulTransitClient
from .exceptions import UpstreamError
from .models import BikeStation, BusStop, CombinedInfo, SourceOutcome, SubwayArrival
from .search import search_bike_stations, search_bus_stops

logger = logging.getLogger(__name__)

COMBINED_SUBWAY_LIMIT = 5
COMBINED_STOP_SCAN_SIZE = 100
COMBINED_BIKE_SCAN_SIZE = 1000
COMBINED_MATCH_CAP = 3

SUBWAY_SOURCE = "subway"
BUS_SOURCE = "bus"
BIKE_SOURCE = "bike"

RecordT = TypeVar("RecordT")


class CombinedInfoCoordinator:
    """Runs the three lookups of a combined query and merges their outcomes.

    Each lookup settles into its own ``SourceOutcome``; a failed source
    degrades to an empty outcome carrying the reason and never affects the
    other two.
    """

    def __init__(self, client: SeoulTransitClient):
        self.client = client

    async def collect(self, location: str) -> CombinedInfo:
        """Gather transit data around ``location``.

        Args:
            location: Location or station name as typed by the user

        Returns:
            Combined outcomes, one per source
        """
        query = normalize_station_name(location)

        subway, bus, bike = await asyncio.gather(
            self._settle(SUBWAY_SOURCE, self._subway(query)),
            self._settle(BUS_SOURCE, self._bus_stops(query)),
            self._settle(BIKE_SOURCE, self._bike_stations(query)),
        )
        return CombinedInfo(
            location=location, query=query, subway=subway, bus=bus, bike=bike
        )

    async def _settle(
        self, source: str, lookup: Awaitable[list[RecordT]]
    ) -> SourceOutcome[RecordT]:
        try:
            records = await lookup
        except UpstreamError as e:
            logger.warning(f"Combined query degraded {source} source: {e}")
            return SourceOutcome.failure(source, str(e))
        return SourceOutcome.success(source, records)

    async def _subway(self, query: str) -> list[SubwayArrival]:
        arrivals = await self.client.get_subway_arrivals(query, COMBINED_SUBWAY_LIMIT)
        return arrivals[:COMBINED_SUBWAY_LIMIT]

    async def _bus_stops(self, query: str) -> list[BusStop]:
        return await search_bus_stops(
            self.client,
            query,
            COMBINED_MATCH_CAP,
            page_size=COMBINED_STOP_SCAN_SIZE,
            max_pages=1,
            ranked=False,
            match_numbers=False,
        )

    async def _bike_stations(self, query: str) -> list[BikeStation]:
        return await search_bike_stations(
            self.client,
            query,
            COMBINED_MATCH_CAP,
            page_size=COMBINED_BIKE_SCAN_SIZE,
            max_pages=1,
        )
