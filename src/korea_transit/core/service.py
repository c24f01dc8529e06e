"""Tool execution for Korea transit queries.

Every tool is a member of ``ToolName`` and maps to one handler taking the raw
argument mapping and returning a rendered response.
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..utils.korean_text import normalize_station_name
from .aggregator import CombinedInfoCoordinator
from .client import SeoulTransitClient
from .config import TransitSettings
from .exceptions import InvalidArgumentError, UnknownToolError, UpstreamError
from .models import (
    BikeStationArguments,
    BusArrivalArguments,
    CombinedInfoArguments,
    RenderedResponse,
    StopSearchArguments,
    SubwayArrivalArguments,
    SubwayStatusArguments,
)
from .rendering import ResponseRenderer
from .search import search_bike_stations, search_bus_stops

logger = logging.getLogger(__name__)

ArgumentsT = TypeVar("ArgumentsT", bound=BaseModel)

ToolHandler = Callable[[dict[str, Any]], Awaitable[RenderedResponse]]


class ToolName(str, Enum):
    """Closed set of tools exposed to agents."""

    SUBWAY_ARRIVAL = "transit_get_subway_arrival"
    SUBWAY_STATUS = "transit_get_subway_status"
    BUS_ARRIVAL = "transit_get_bus_arrival"
    SEARCH_BUS_STATION = "transit_search_bus_station"
    BIKE_STATION = "transit_get_bike_station"
    COMBINED_INFO = "transit_get_combined_info"


def parse_arguments(model: type[ArgumentsT], arguments: dict[str, Any] | None) -> ArgumentsT:
    """Validate raw tool arguments.

    Raises:
        InvalidArgumentError: If a required field is missing or malformed
    """
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidArgumentError(f"Invalid arguments: {problems}") from e


class TransitToolService:
    """Runs transit tools against the Seoul feeds."""

    def __init__(
        self,
        client: SeoulTransitClient | None = None,
        renderer: ResponseRenderer | None = None,
        settings: TransitSettings | None = None,
    ):
        self.settings = settings or (client.settings if client else TransitSettings())
        self.client = client or SeoulTransitClient(self.settings)
        self.renderer = renderer or ResponseRenderer(self.settings.character_limit)
        self.coordinator = CombinedInfoCoordinator(self.client)

        self.handlers: dict[ToolName, ToolHandler] = {
            ToolName.SUBWAY_ARRIVAL: self.subway_arrival,
            ToolName.SUBWAY_STATUS: self.subway_status,
            ToolName.BUS_ARRIVAL: self.bus_arrival,
            ToolName.SEARCH_BUS_STATION: self.search_bus_station,
            ToolName.BIKE_STATION: self.bike_station,
            ToolName.COMBINED_INFO: self.combined_info,
        }
        missing = set(ToolName) - set(self.handlers)
        if missing:
            raise RuntimeError(f"Tools without handlers: {sorted(t.value for t in missing)}")

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run a tool by name and return its response body.

        Raises:
            UnknownToolError: If ``name`` is not a registered tool
            InvalidArgumentError: If the arguments are malformed
        """
        response = await self.run(name, arguments)
        return response.body

    async def run(
        self, name: str | ToolName, arguments: dict[str, Any] | None = None
    ) -> RenderedResponse:
        try:
            tool = ToolName(name)
        except ValueError as e:
            raise UnknownToolError(f"Unknown tool: {name}") from e

        logger.info(f"Running tool {tool.value}")
        return await self.handlers[tool](arguments or {})

    async def subway_arrival(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(SubwayArrivalArguments, arguments)
        station = normalize_station_name(args.station_name)
        try:
            arrivals = await self.client.get_subway_arrivals(station, args.limit)
        except UpstreamError as e:
            return self.renderer.failure(f"지하철 정보 조회 실패: {e}")
        return self.renderer.subway_arrivals(
            station, arrivals[: args.limit], args.response_format
        )

    async def subway_status(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(SubwayStatusArguments, arguments)
        return self.renderer.subway_status(args.line, args.response_format)

    async def bus_arrival(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(BusArrivalArguments, arguments)
        try:
            arrivals = await self.client.get_bus_arrivals(args.ars_id)
        except UpstreamError as e:
            return self.renderer.failure(
                f"버스 도착정보 조회 실패: {e}\n\n💡 정류장 번호가 올바른지 확인해 주세요."
            )
        return self.renderer.bus_arrivals(
            args.ars_id, arrivals, args.limit, args.response_format
        )

    async def search_bus_station(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(StopSearchArguments, arguments)
        try:
            stops = await search_bus_stops(self.client, args.query, args.limit)
        except UpstreamError as e:
            return self.renderer.failure(f"정류장 검색 실패: {e}")
        return self.renderer.bus_stops(args.query, stops, args.response_format)

    async def bike_station(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(BikeStationArguments, arguments)
        try:
            stations = await search_bike_stations(self.client, args.query, args.limit)
        except UpstreamError as e:
            return self.renderer.failure(f"따릉이 대여소 검색 실패: {e}")
        return self.renderer.bike_stations(args.query, stations, args.response_format)

    async def combined_info(self, arguments: dict[str, Any]) -> RenderedResponse:
        args = parse_arguments(CombinedInfoArguments, arguments)
        info = await self.coordinator.collect(args.location)
        return self.renderer.combined(info, args.response_format)

    def close(self) -> None:
        self.client.close()
