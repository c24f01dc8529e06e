"""Directory searches for bus stops and bike stations."""

from collections.abc import Callable

from ..utils.korean_text import contains_text, is_ars_id
from .client import SeoulTransitClient
from .models import BikeStation, BusStop
from .ranking import rank_by_name
from .scanner import DEFAULT_PAGE_SIZE, DirectoryScanner

STOP_SEARCH_MAX_PAGES = 5
BIKE_SEARCH_MAX_PAGES = 3


def stop_predicate(query: str, match_numbers: bool = True) -> Callable[[BusStop], bool]:
    """Match stops by name substring, or by exact stop number when enabled."""
    by_number = match_numbers and is_ars_id(query)

    def matches(stop: BusStop) -> bool:
        if by_number and stop.ars_id == query:
            return True
        return contains_text(stop.name, query)

    return matches


def bike_predicate(query: str) -> Callable[[BikeStation], bool]:
    """Match bike stations by name substring."""

    def matches(station: BikeStation) -> bool:
        return contains_text(station.name, query)

    return matches


async def search_bus_stops(
    client: SeoulTransitClient,
    query: str,
    limit: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = STOP_SEARCH_MAX_PAGES,
    ranked: bool = True,
    match_numbers: bool = True,
) -> list[BusStop]:
    """Find up to ``limit`` stops matching ``query``.

    Args:
        client: Feed client
        query: Stop name fragment or 5-digit stop number
        limit: Maximum stops returned
        page_size: Directory rows per page
        max_pages: Scan horizon in pages
        ranked: Order by match quality instead of directory order
        match_numbers: Also match a 5-digit query against stop numbers

    Raises:
        UpstreamError: If a page cannot be fetched
    """
    scanner: DirectoryScanner[BusStop] = DirectoryScanner(
        client.get_bus_stop_page, max_pages=max_pages, page_size=page_size, name="stop"
    )
    result = await scanner.scan(stop_predicate(query, match_numbers), limit)
    stops = result.matches
    if ranked:
        stops = rank_by_name(stops, query, lambda stop: stop.name)
    return stops[:limit]


async def search_bike_stations(
    client: SeoulTransitClient,
    query: str,
    limit: int,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = BIKE_SEARCH_MAX_PAGES,
) -> list[BikeStation]:
    """Find up to ``limit`` bike stations matching ``query`` in directory order.

    Raises:
        UpstreamError: If a page cannot be fetched
    """
    scanner: DirectoryScanner[BikeStation] = DirectoryScanner(
        client.get_bike_station_page,
        max_pages=max_pages,
        page_size=page_size,
        name="bike station",
    )
    result = await scanner.scan(bike_predicate(query), limit)
    return result.matches[:limit]
