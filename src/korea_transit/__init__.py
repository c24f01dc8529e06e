"""Korea Transit Package

A Python package for querying Seoul subway, bus and bike-share feeds
with CLI and MCP server capabilities.
"""

__version__ = "1.0.0"

from .core.models import BikeStation, BusArrival, BusStop, SubwayArrival
from .core.service import ToolName, TransitToolService

__all__ = [
    "BikeStation",
    "BusArrival",
    "BusStop",
    "SubwayArrival",
    "ToolName",
    "TransitToolService",
]
