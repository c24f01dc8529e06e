"""Unit tests for the combined-location coordinator."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from korea_transit.core.aggregator import CombinedInfoCoordinator
from korea_transit.core.client import SeoulTransitClient
from korea_transit.core.exceptions import (
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from korea_transit.core.models import BikeStation, BusStop, DirectoryPage, SubwayArrival


def page_of(records):
    return DirectoryPage(records=records, row_count=len(records))


@pytest.fixture
def arrivals():
    return [
        SubwayArrival(subway_id="1002", destination=f"성수{i}", message=f"{i}분 후")
        for i in range(7)
    ]


@pytest.fixture
def stops():
    return [BusStop(name=f"강남역{i}번출구", ars_id=f"2200{i}") for i in range(5)]


@pytest.fixture
def bikes():
    return [
        BikeStation(name=f"강남역 {i}번출구", station_id=f"ST-{i}", available_bikes=i, rack_total=10)
        for i in range(5)
    ]


@pytest.fixture
def client(arrivals, stops, bikes):
    mock_client = MagicMock(spec=SeoulTransitClient)
    mock_client.get_subway_arrivals = AsyncMock(return_value=arrivals)
    mock_client.get_bus_stop_page = AsyncMock(return_value=page_of(stops))
    mock_client.get_bike_station_page = AsyncMock(return_value=page_of(bikes))
    return mock_client


class TestCombinedInfoCoordinator:
    """Test fan-out and failure isolation."""

    @pytest.mark.asyncio
    async def test_all_sources_succeed(self, client):
        """Test a fully successful combined query."""
        info = await CombinedInfoCoordinator(client).collect("강남역")

        assert info.location == "강남역"
        assert info.query == "강남"
        assert all(outcome.ok for outcome in info.outcomes)
        assert len(info.subway.records) == 5
        assert len(info.bus.records) == 3
        assert len(info.bike.records) == 3

    @pytest.mark.asyncio
    async def test_lookup_bounds(self, client):
        """Test the per-source request bounds."""
        await CombinedInfoCoordinator(client).collect("강남역")

        client.get_subway_arrivals.assert_awaited_once_with("강남", 5)
        client.get_bus_stop_page.assert_awaited_once_with(1, 100)
        client.get_bike_station_page.assert_awaited_once_with(1, 1000)

    @pytest.mark.asyncio
    async def test_stop_lookup_matches_names_only(self, client):
        """Test that a 5-digit location is not matched against stop numbers."""
        info = await CombinedInfoCoordinator(client).collect("22001")

        assert info.bus.ok
        assert info.bus.records == []

    @pytest.mark.asyncio
    async def test_stop_directory_failure_is_isolated(self, client):
        """Test that a failed stop scan leaves the other sources intact."""
        client.get_bus_stop_page.side_effect = UpstreamTransportError(
            "Failed to fetch bus stop directory: ConnectionError"
        )

        info = await CombinedInfoCoordinator(client).collect("강남")

        assert not info.bus.ok
        assert info.bus.records == []
        assert "bus stop directory" in info.bus.error
        assert info.subway.ok and len(info.subway.records) == 5
        assert info.bike.ok and len(info.bike.records) == 3

    @pytest.mark.asyncio
    async def test_every_source_failing_still_settles(self, client):
        """Test that the coordinator never fails on upstream errors."""
        client.get_subway_arrivals.side_effect = UpstreamTimeoutError("subway arrivals timed out")
        client.get_bus_stop_page.side_effect = UpstreamPayloadError("API 에러")
        client.get_bike_station_page.side_effect = UpstreamTransportError("refused")

        info = await CombinedInfoCoordinator(client).collect("강남")

        assert [o.ok for o in info.outcomes] == [False, False, False]
        assert [o.source for o in info.outcomes] == ["subway", "bus", "bike"]

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self, client, arrivals, stops, bikes):
        """Test that sources are awaited together rather than one by one."""
        started = []
        release = asyncio.Event()

        async def gated(name, value):
            started.append(name)
            if len(started) == 3:
                release.set()
            await asyncio.wait_for(release.wait(), timeout=1)
            return value

        async def subway_lookup(*args):
            return await gated("subway", arrivals)

        async def stop_page(*args):
            return await gated("bus", page_of(stops))

        async def bike_page(*args):
            return await gated("bike", page_of(bikes))

        client.get_subway_arrivals.side_effect = subway_lookup
        client.get_bus_stop_page.side_effect = stop_page
        client.get_bike_station_page.side_effect = bike_page

        info = await CombinedInfoCoordinator(client).collect("강남")

        assert sorted(started) == ["bike", "bus", "subway"]
        assert all(outcome.ok for outcome in info.outcomes)

    @pytest.mark.asyncio
    async def test_stops_keep_scan_order(self, client):
        """Test that combined stop matches are not re-ranked."""
        client.get_bus_stop_page.return_value = page_of(
            [
                BusStop(name="신강남아파트", ars_id="23110"),
                BusStop(name="강남", ars_id="22010"),
                BusStop(name="망원역", ars_id="14001"),
            ]
        )

        info = await CombinedInfoCoordinator(client).collect("강남")

        assert [s.name for s in info.bus.records] == ["신강남아파트", "강남"]
