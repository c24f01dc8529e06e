"""Seoul open data feed client.

Builds feed URLs, fetches them through the gateway and converts the loosely
shaped payloads into typed records. Embedded status fields are checked
before any record is read.
"""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import TransitSettings
from .exceptions import UpstreamPayloadError
from .gateway import FeedGateway
from .models import BikeStation, BusArrival, BusStop, DirectoryPage, SubwayArrival

logger = logging.getLogger(__name__)

SUBWAY_ARRIVAL_SERVICE = "realtimeStationArrival"
BUS_STOP_SERVICE = "busStopLocationXyInfo"
BIKE_STATUS_SERVICE = "bikeList"
BIKE_STATUS_DATASET = "rentBikeStatus"

SEOUL_OK = "INFO-000"
SEOUL_NO_DATA = "INFO-200"
BUS_OK = "0"
BUS_NO_RESULT = "4"

RecordT = TypeVar("RecordT", bound=BaseModel)


def _seoul_status(result: Any) -> tuple[str | None, str]:
    """Read code and message from a Seoul result block in either key casing."""
    if not isinstance(result, dict):
        return None, ""
    code = result.get("CODE", result.get("code"))
    message = result.get("MESSAGE", result.get("message", ""))
    return (str(code) if code is not None else None), str(message or "")


def _check_seoul_status(code: str | None, message: str, label: str) -> bool:
    """Validate a Seoul status code.

    Returns:
        False when the feed reports no data, True when records may follow

    Raises:
        UpstreamPayloadError: If the code reports an error
    """
    if code is None or code == SEOUL_OK:
        return True
    if code == SEOUL_NO_DATA:
        return False
    raise UpstreamPayloadError(f"API 에러: {message or code} ({label})")


def _validate_rows(model: type[RecordT], rows: Any, label: str) -> list[RecordT]:
    """Convert raw rows, skipping the ones that do not fit the record schema."""
    if rows is None:
        return []
    if isinstance(rows, dict):
        rows = [rows]
    if not isinstance(rows, list):
        raise UpstreamPayloadError(f"{label} returned rows in an unexpected shape")

    records: list[RecordT] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except PydanticValidationError as e:
            logger.warning(
                f"Skipping malformed {label} row: {e.error_count()} validation errors"
            )
    return records


def parse_subway_arrivals(payload: Any) -> list[SubwayArrival]:
    """Extract arrivals from a realtime subway payload."""
    label = "subway arrivals"
    if not isinstance(payload, dict):
        raise UpstreamPayloadError(f"{label} returned an unexpected body")

    # Error bodies put the status at top level instead of under errorMessage
    code, message = _seoul_status(payload.get("errorMessage") or payload)
    if not _check_seoul_status(code, message, label):
        return []
    return _validate_rows(SubwayArrival, payload.get("realtimeArrivalList"), label)


def parse_bus_arrivals(payload: Any) -> list[BusArrival]:
    """Extract arrivals from a bus stop arrival payload."""
    label = "bus arrivals"
    if not isinstance(payload, dict):
        raise UpstreamPayloadError(f"{label} returned an unexpected body")

    header = payload.get("msgHeader") or {}
    code = str(header.get("headerCd", ""))
    if code == BUS_NO_RESULT:
        return []
    if code != BUS_OK:
        raise UpstreamPayloadError(header.get("headerMsg") or "API 오류")

    body = payload.get("msgBody") or {}
    return _validate_rows(BusArrival, body.get("itemList"), label)


def parse_directory_page(
    payload: Any, dataset: str, model: type[RecordT], label: str
) -> DirectoryPage[RecordT]:
    """Extract one page of a Seoul directory dataset."""
    if not isinstance(payload, dict):
        raise UpstreamPayloadError(f"{label} returned an unexpected body")

    block = payload.get(dataset)
    if not isinstance(block, dict):
        # Errors and empty ranges come back as a bare top-level RESULT
        code, message = _seoul_status(payload.get("RESULT"))
        if code is None:
            raise UpstreamPayloadError(f"{label} returned no {dataset} block")
        _check_seoul_status(code, message, label)
        return DirectoryPage(records=[], row_count=0)

    code, message = _seoul_status(block.get("RESULT"))
    if not _check_seoul_status(code, message, label):
        return DirectoryPage(records=[], row_count=0)

    rows = block.get("row") or []
    records = _validate_rows(model, rows, label)
    row_count = len(rows) if isinstance(rows, list) else len(records)
    return DirectoryPage(records=records, row_count=row_count)


class SeoulTransitClient:
    """Client for the Seoul subway, bus and bike-share feeds."""

    def __init__(
        self,
        settings: TransitSettings | None = None,
        gateway: FeedGateway | None = None,
    ):
        self.settings = settings or TransitSettings()
        self.gateway = gateway or FeedGateway(timeout=self.settings.timeout)

    def subway_arrival_url(self, station_name: str, limit: int) -> str:
        base = self.settings.subway_base_url.rstrip("/")
        return (
            f"{base}/{self.settings.seoul_api_key}/json/{SUBWAY_ARRIVAL_SERVICE}"
            f"/0/{limit}/{quote(station_name)}"
        )

    def bus_arrival_url(self, ars_id: str) -> str:
        return (
            f"{self.settings.bus_arrival_url}?serviceKey={self.settings.data_go_kr_api_key}"
            f"&resultType=json&arsId={quote(ars_id)}"
        )

    def directory_url(self, service: str, start: int, end: int) -> str:
        base = self.settings.open_api_base_url.rstrip("/")
        return f"{base}/{self.settings.seoul_api_key}/json/{service}/{start}/{end}/"

    async def get_subway_arrivals(
        self, station_name: str, limit: int
    ) -> list[SubwayArrival]:
        """Fetch realtime arrivals for a normalized station name."""
        payload = await self.gateway.fetch_json(
            self.subway_arrival_url(station_name, limit), label="subway arrivals"
        )
        return parse_subway_arrivals(payload)

    async def get_bus_arrivals(self, ars_id: str) -> list[BusArrival]:
        """Fetch arrivals for every route serving a stop."""
        payload = await self.gateway.fetch_json(
            self.bus_arrival_url(ars_id), label="bus arrivals"
        )
        return parse_bus_arrivals(payload)

    async def get_bus_stop_page(self, start: int, end: int) -> DirectoryPage[BusStop]:
        """Fetch stop directory rows ``start``..``end`` (1-based, inclusive)."""
        payload = await self.gateway.fetch_json(
            self.directory_url(BUS_STOP_SERVICE, start, end), label="bus stop directory"
        )
        return parse_directory_page(
            payload, BUS_STOP_SERVICE, BusStop, "bus stop directory"
        )

    async def get_bike_station_page(
        self, start: int, end: int
    ) -> DirectoryPage[BikeStation]:
        """Fetch bike station status rows ``start``..``end`` (1-based, inclusive)."""
        payload = await self.gateway.fetch_json(
            self.directory_url(BIKE_STATUS_SERVICE, start, end),
            label="bike station status",
        )
        return parse_directory_page(
            payload, BIKE_STATUS_DATASET, BikeStation, "bike station status"
        )

    def close(self) -> None:
        self.gateway.close()
