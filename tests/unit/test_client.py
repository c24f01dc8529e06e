"""Unit tests for the Seoul feed client and payload parsing."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import quote

import pytest

from korea_transit.core.client import (
    SeoulTransitClient,
    parse_bus_arrivals,
    parse_directory_page,
    parse_subway_arrivals,
)
from korea_transit.core.exceptions import UpstreamPayloadError
from korea_transit.core.gateway import FeedGateway
from korea_transit.core.models import BikeStation, BusStop


class TestParseSubwayArrivals:
    """Test subway payload parsing."""

    def test_parses_arrivals(self, subway_payload):
        """Test a normal payload."""
        arrivals = parse_subway_arrivals(subway_payload)

        assert [a.subway_id for a in arrivals] == ["1002", "1077", "1002"]
        assert arrivals[1].destination == "신사"

    def test_no_data_is_empty(self):
        """Test that the no-data code is an empty result, not an error."""
        payload = {"code": "INFO-200", "message": "해당하는 데이터가 없습니다.", "status": 200}
        assert parse_subway_arrivals(payload) == []

    def test_embedded_error_code(self):
        """Test that an error code inside errorMessage is raised."""
        payload = {
            "errorMessage": {"code": "ERROR-337", "message": "일일 트래픽 초과"},
            "realtimeArrivalList": [],
        }
        with pytest.raises(UpstreamPayloadError, match="일일 트래픽 초과"):
            parse_subway_arrivals(payload)

    def test_top_level_error_body(self):
        """Test error bodies that carry the status at top level."""
        payload = {"status": 500, "code": "ERROR-500", "message": "서버 오류입니다."}
        with pytest.raises(UpstreamPayloadError, match="서버 오류입니다."):
            parse_subway_arrivals(payload)

    def test_unexpected_body(self):
        """Test that a non-object body is rejected."""
        with pytest.raises(UpstreamPayloadError):
            parse_subway_arrivals(["not", "an", "object"])

    def test_malformed_rows_skipped(self, subway_payload):
        """Test that rows without a line code are dropped."""
        subway_payload["realtimeArrivalList"].append({"bstatnNm": "???"})
        assert len(parse_subway_arrivals(subway_payload)) == 3


class TestParseBusArrivals:
    """Test bus payload parsing."""

    def test_parses_arrivals(self, bus_payload):
        """Test a normal payload."""
        arrivals = parse_bus_arrivals(bus_payload)

        assert [a.route_name for a in arrivals] == ["140", "3412"]
        assert arrivals[0].station_name == "강남역"
        assert arrivals[0].route_type == "6"

    def test_no_result_header(self):
        """Test that the no-result header is an empty result."""
        payload = {"msgHeader": {"headerCd": "4", "headerMsg": "결과가 없습니다."}, "msgBody": {}}
        assert parse_bus_arrivals(payload) == []

    def test_error_header(self):
        """Test that other header codes are raised with their message."""
        payload = {"msgHeader": {"headerCd": "8", "headerMsg": "요청 제한 초과"}}
        with pytest.raises(UpstreamPayloadError, match="요청 제한 초과"):
            parse_bus_arrivals(payload)

    def test_missing_header(self):
        """Test that a payload without a header is rejected."""
        with pytest.raises(UpstreamPayloadError, match="API 오류"):
            parse_bus_arrivals({"msgBody": {"itemList": []}})

    def test_null_item_list(self):
        """Test that a null item list is an empty result."""
        payload = {"msgHeader": {"headerCd": "0"}, "msgBody": {"itemList": None}}
        assert parse_bus_arrivals(payload) == []

    def test_single_item_object(self, bus_payload):
        """Test that a lone item object is accepted."""
        item = bus_payload["msgBody"]["itemList"][0]
        bus_payload["msgBody"]["itemList"] = item
        assert len(parse_bus_arrivals(bus_payload)) == 1


class TestParseDirectoryPage:
    """Test directory page parsing."""

    def test_parses_rows(self, stop_rows, stop_page):
        """Test a normal page."""
        page = parse_directory_page(
            stop_page(stop_rows), "busStopLocationXyInfo", BusStop, "stops"
        )

        assert page.row_count == 5
        assert [s.name for s in page.records][:2] == ["서울역버스환승센터", "강남구청"]

    def test_malformed_row_counts_toward_page(self, stop_rows, stop_page):
        """Test that skipped rows still count for exhaustion checks."""
        rows = stop_rows + [{"STOPS_NM": {"nested": "bad"}, "STOPS_NO": "99999"}]
        page = parse_directory_page(
            stop_page(rows), "busStopLocationXyInfo", BusStop, "stops"
        )

        assert page.row_count == 6
        assert len(page.records) == 5

    def test_bike_page(self, bike_rows, bike_page):
        """Test a bike station page."""
        page = parse_directory_page(
            bike_page(bike_rows), "rentBikeStatus", BikeStation, "bikes"
        )

        assert page.row_count == 3
        assert page.records[1].available_bikes == 3

    def test_range_past_end(self):
        """Test that a no-data result ends the directory."""
        payload = {"RESULT": {"CODE": "INFO-200", "MESSAGE": "해당하는 데이터가 없습니다."}}
        page = parse_directory_page(payload, "bikeList", BikeStation, "bikes")

        assert page.records == []
        assert page.row_count == 0

    def test_top_level_error(self):
        """Test that an error result is raised."""
        payload = {"RESULT": {"CODE": "ERROR-331", "MESSAGE": "요청시작위치 값을 확인하세요."}}
        with pytest.raises(UpstreamPayloadError, match="요청시작위치"):
            parse_directory_page(payload, "rentBikeStatus", BikeStation, "bikes")

    def test_error_inside_dataset(self, stop_page):
        """Test an error code inside the dataset block."""
        payload = stop_page([])
        payload["busStopLocationXyInfo"]["RESULT"] = {"CODE": "ERROR-500", "MESSAGE": "서버 오류"}
        with pytest.raises(UpstreamPayloadError):
            parse_directory_page(payload, "busStopLocationXyInfo", BusStop, "stops")

    def test_missing_dataset(self):
        """Test that a body with neither dataset nor result is rejected."""
        with pytest.raises(UpstreamPayloadError):
            parse_directory_page({"unexpected": 1}, "rentBikeStatus", BikeStation, "bikes")


class TestSeoulTransitClient:
    """Test URL building and fetch wiring."""

    @pytest.fixture
    def gateway(self):
        return MagicMock(spec=FeedGateway)

    @pytest.fixture
    def client(self, settings, gateway):
        return SeoulTransitClient(settings=settings, gateway=gateway)

    def test_default_gateway_uses_settings_timeout(self, settings):
        """Test that the gateway budget comes from settings."""
        client = SeoulTransitClient(settings=settings.model_copy(update={"timeout": 3.0}))
        assert client.gateway.timeout == 3.0

    def test_subway_url(self, client):
        """Test the subway arrival URL."""
        url = client.subway_arrival_url("강남", 5)

        assert url == (
            "http://swopenapi.seoul.go.kr/api/subway/test-key/json/"
            f"realtimeStationArrival/0/5/{quote('강남')}"
        )

    def test_bus_url(self, client):
        """Test the bus arrival URL."""
        url = client.bus_arrival_url("22009")

        assert "serviceKey=bus-key" in url
        assert "resultType=json" in url
        assert url.endswith("arsId=22009")

    def test_directory_url(self, client):
        """Test directory page URLs."""
        assert (
            client.directory_url("bikeList", 1001, 2000)
            == "http://openapi.seoul.go.kr:8088/test-key/json/bikeList/1001/2000/"
        )

    @pytest.mark.asyncio
    async def test_get_subway_arrivals(self, client, gateway, subway_payload):
        """Test fetching and parsing subway arrivals."""
        gateway.fetch_json = AsyncMock(return_value=subway_payload)

        arrivals = await client.get_subway_arrivals("강남", 10)

        assert len(arrivals) == 3
        url = gateway.fetch_json.await_args.args[0]
        assert "/realtimeStationArrival/0/10/" in url

    @pytest.mark.asyncio
    async def test_get_bus_stop_page(self, client, gateway, stop_rows, stop_page):
        """Test fetching one stop directory page."""
        gateway.fetch_json = AsyncMock(return_value=stop_page(stop_rows))

        page = await client.get_bus_stop_page(1, 1000)

        assert page.row_count == 5
        url = gateway.fetch_json.await_args.args[0]
        assert url.endswith("/busStopLocationXyInfo/1/1000/")

    @pytest.mark.asyncio
    async def test_get_bike_station_page(self, client, gateway, bike_rows, bike_page):
        """Test fetching one bike directory page."""
        gateway.fetch_json = AsyncMock(return_value=bike_page(bike_rows))

        page = await client.get_bike_station_page(1, 1000)

        assert len(page.records) == 3
        url = gateway.fetch_json.await_args.args[0]
        assert url.endswith("/bikeList/1/1000/")

    @pytest.mark.asyncio
    async def test_get_bus_arrivals(self, client, gateway, bus_payload):
        """Test fetching bus arrivals."""
        gateway.fetch_json = AsyncMock(return_value=bus_payload)

        arrivals = await client.get_bus_arrivals("22009")

        assert len(arrivals) == 2
        assert gateway.fetch_json.await_args.kwargs["label"] == "bus arrivals"
