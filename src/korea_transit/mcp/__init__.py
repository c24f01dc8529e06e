"""MCP (Model Context Protocol) server module for Korea transit queries.

This module provides the MCP server implementation that exposes subway,
bus and bike-share lookups through the Model Context Protocol.
"""

from .server import TOOL_DEFINITIONS, TransitMCPServer, main

__all__ = ["TOOL_DEFINITIONS", "TransitMCPServer", "main"]
