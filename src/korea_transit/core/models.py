"""Data models for Korea transit queries."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_LIMIT = 10
MAX_LIMIT = 20

RecordT = TypeVar("RecordT")


class FeedRecord(BaseModel):
    """Base for records read from an upstream feed.

    Fields are populated from the upstream key (alias) or the Python name.
    Numeric identifiers are coerced to strings.
    """

    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, extra="ignore"
    )


class SubwayArrival(FeedRecord):
    """Represents one train approaching a subway station."""

    subway_id: str = Field(..., alias="subwayId", description="Line code, e.g. 1002")
    destination: str = Field("", alias="bstatnNm", description="Terminal station")
    message: str = Field("", alias="arvlMsg2", description="Arrival message")
    direction: str = Field("", alias="updnLine", description="상행/하행 or 내선/외선")
    train_number: str | None = Field(None, alias="btrainNo", description="Train number")

    def __str__(self) -> str:
        return f"{self.subway_id} → {self.destination} ({self.message})"


class BusArrival(FeedRecord):
    """Represents the next two buses of one route at a stop."""

    station_name: str | None = Field(None, alias="stNm", description="Stop name")
    ars_id: str | None = Field(None, alias="arsId", description="5-digit stop number")
    route_name: str = Field("", alias="rtNm", description="Route name")
    route_abbr: str | None = Field(
        None, alias="busRouteAbrv", description="Abbreviated route name"
    )
    first_arrival: str = Field("", alias="arrmsg1", description="First bus message")
    second_arrival: str = Field("", alias="arrmsg2", description="Second bus message")
    route_type: str = Field("1", alias="routeType", description="Route type code")

    @field_validator("route_type", mode="before")
    @classmethod
    def default_route_type(cls, value: Any) -> Any:
        return "1" if value in (None, "") else value

    def __str__(self) -> str:
        return f"{self.route_name}: {self.first_arrival}"


class BusStop(FeedRecord):
    """Represents a bus stop from the stop directory."""

    name: str = Field("", alias="STOPS_NM", description="Stop name")
    ars_id: str = Field("", alias="STOPS_NO", description="5-digit stop number")
    stop_type: str | None = Field(None, alias="STOPS_TYPE", description="Stop type")

    def __str__(self) -> str:
        return f"{self.name} ({self.ars_id})"


class BikeStation(FeedRecord):
    """Represents a bike-share station with its current availability."""

    name: str = Field("", alias="stationName", description="Station name")
    station_id: str = Field("", alias="stationId", description="Station identifier")
    available_bikes: int = Field(
        0, alias="parkingBikeTotCnt", description="Bikes ready to rent"
    )
    rack_total: int = Field(0, alias="rackTotCnt", description="Total rack count")

    @property
    def availability_rate(self) -> int:
        """Percentage of racks holding a bike, 0 when the station has no racks."""
        if self.rack_total <= 0:
            return 0
        return round(self.available_bikes / self.rack_total * 100)

    def __str__(self) -> str:
        return f"{self.name} ({self.available_bikes}/{self.rack_total})"


@dataclass
class DirectoryPage(Generic[RecordT]):
    """One page of a directory feed.

    ``row_count`` is the number of raw rows the feed returned, which can
    exceed ``len(records)`` when malformed rows were skipped.
    """

    records: list[RecordT]
    row_count: int


@dataclass
class SourceOutcome(Generic[RecordT]):
    """Result of one upstream lookup inside a combined query."""

    source: str
    records: list[RecordT] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, records: list[RecordT]) -> "SourceOutcome[RecordT]":
        return cls(source=source, records=list(records))

    @classmethod
    def failure(cls, source: str, reason: str) -> "SourceOutcome[RecordT]":
        return cls(source=source, records=[], error=reason)


@dataclass
class CombinedInfo:
    """Merged outcomes of the subway, stop and bike lookups for a location."""

    location: str
    query: str
    subway: SourceOutcome[SubwayArrival]
    bus: SourceOutcome[BusStop]
    bike: SourceOutcome[BikeStation]

    @property
    def outcomes(self) -> list[SourceOutcome[Any]]:
        return [self.subway, self.bus, self.bike]


class ResponseFormat(str, Enum):
    """Output format requested by the caller."""

    MARKDOWN = "markdown"
    JSON = "json"


@dataclass
class RenderedResponse:
    """A rendered tool result."""

    format: ResponseFormat
    body: str
    truncated: bool = False


def clamp_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    """Clamp a requested result count to [1, MAX_LIMIT].

    Missing or zero values fall back to ``default``. Infinite or huge values
    clamp to ``MAX_LIMIT``; NaN is rejected.
    """
    if value is None or value == "" or value == 0:
        return default
    if isinstance(value, bool):
        raise ValueError("limit must be a number")
    if isinstance(value, int):
        return max(1, min(value, MAX_LIMIT))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"limit must be a number, got {value!r}") from e
    if math.isnan(number):
        raise ValueError("limit must be a number, got NaN")
    # clamp before int() so infinities never reach the conversion
    return int(max(1.0, min(number, float(MAX_LIMIT))))


class ToolArguments(BaseModel):
    """Arguments shared by every tool."""

    model_config = ConfigDict(extra="ignore")

    response_format: ResponseFormat = Field(
        ResponseFormat.MARKDOWN, description="markdown (text) or json (structured)"
    )

    @field_validator("response_format", mode="before")
    @classmethod
    def parse_format(cls, value: Any) -> ResponseFormat:
        if isinstance(value, ResponseFormat):
            return value
        if isinstance(value, str) and value.strip().lower() == "json":
            return ResponseFormat.JSON
        return ResponseFormat.MARKDOWN


class LimitedArguments(ToolArguments):
    """Arguments for tools returning a bounded list."""

    limit: int = Field(DEFAULT_LIMIT, description="Maximum results (1-20)")

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_requested_limit(cls, value: Any) -> int:
        return clamp_limit(value)


def _require_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
    return value


class SubwayArrivalArguments(LimitedArguments):
    station_name: str = Field(..., description="Subway station name")

    @field_validator("station_name", mode="before")
    @classmethod
    def require_station_name(cls, value: Any) -> Any:
        return _require_text(value)


class SubwayStatusArguments(ToolArguments):
    line: str | None = Field(None, description="Line number filter (1-9)")

    @field_validator("line", mode="before")
    @classmethod
    def blank_line_means_all(cls, value: Any) -> Any:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class BusArrivalArguments(LimitedArguments):
    ars_id: str = Field(..., pattern=r"^\d{5}$", description="5-digit stop number")

    @field_validator("ars_id", mode="before")
    @classmethod
    def normalize_ars_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return f"{value:05d}"
        return value.strip() if isinstance(value, str) else value


class StopSearchArguments(LimitedArguments):
    query: str = Field(..., description="Stop name or 5-digit stop number")

    @field_validator("query", mode="before")
    @classmethod
    def require_query(cls, value: Any) -> Any:
        return _require_text(value)


class BikeStationArguments(LimitedArguments):
    query: str = Field(..., description="Bike station name or area")

    @field_validator("query", mode="before")
    @classmethod
    def require_query(cls, value: Any) -> Any:
        return _require_text(value)


class CombinedInfoArguments(ToolArguments):
    location: str = Field(..., description="Location name")

    @field_validator("location", mode="before")
    @classmethod
    def require_location(cls, value: Any) -> Any:
        return _require_text(value)
