"""Core transit query functionality."""

from .aggregator import CombinedInfoCoordinator
from .client import SeoulTransitClient
from .config import TransitSettings
from .exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    TransitError,
    UnknownToolError,
    UpstreamError,
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from .gateway import FeedGateway
from .models import (
    BikeStation,
    BusArrival,
    BusStop,
    CombinedInfo,
    RenderedResponse,
    ResponseFormat,
    SourceOutcome,
    SubwayArrival,
)
from .ranking import rank_by_name
from .rendering import ResponseRenderer, truncate_response
from .scanner import DirectoryScanner
from .service import ToolName, TransitToolService

__all__ = [
    "BikeStation",
    "BusArrival",
    "BusStop",
    "CombinedInfo",
    "CombinedInfoCoordinator",
    "DirectoryScanner",
    "FeedGateway",
    "RenderedResponse",
    "ResponseFormat",
    "ResponseRenderer",
    "SeoulTransitClient",
    "SourceOutcome",
    "SubwayArrival",
    "ToolName",
    "TransitSettings",
    "TransitToolService",
    "rank_by_name",
    "truncate_response",
    "ConfigurationError",
    "InvalidArgumentError",
    "TransitError",
    "UnknownToolError",
    "UpstreamError",
    "UpstreamPayloadError",
    "UpstreamTimeoutError",
    "UpstreamTransportError",
]
