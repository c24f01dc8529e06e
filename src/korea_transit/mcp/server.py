"""MCP Server for Korea Transit queries.

This module implements a Model Context Protocol (MCP) server that exposes
Seoul subway, bus and bike-share lookups as tools.
"""

import asyncio
import logging
from typing import Any

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    TextContent,
    Tool,
)

from ..core.config import TransitSettings
from ..core.exceptions import TransitError
from ..core.service import ToolName, TransitToolService

logger = logging.getLogger(__name__)

SERVER_NAME = "korea-transit-mcp"
SERVER_VERSION = "1.0.0"

_RESPONSE_FORMAT_SCHEMA = {
    "type": "string",
    "enum": ["markdown", "json"],
    "description": "출력 형식: 'markdown'은 사람이 읽기 좋은 형태, 'json'은 구조화된 데이터",
    "default": "markdown",
}


def _limit_schema(description: str) -> dict[str, Any]:
    return {
        "type": "number",
        "description": description,
        "default": 10,
    }


TOOL_DEFINITIONS: dict[ToolName, Tool] = {
    ToolName.SUBWAY_ARRIVAL: Tool(
        name=ToolName.SUBWAY_ARRIVAL.value,
        description="서울 지하철역의 실시간 도착정보를 조회합니다. 역 이름으로 검색하여 각 호선별 도착 예정 열차 정보를 반환합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "station_name": {
                    "type": "string",
                    "description": "지하철역 이름 (예: '강남', '홍대입구', '서울역'). '역' 접미사는 자동 제거됩니다.",
                },
                "limit": _limit_schema("조회할 최대 결과 수 (1-20, 기본값: 10)"),
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": ["station_name"],
        },
    ),
    ToolName.SUBWAY_STATUS: Tool(
        name=ToolName.SUBWAY_STATUS.value,
        description="서울 지하철 호선별 운행상태를 조회합니다. 지연, 사고, 정상운행 등의 상태를 확인할 수 있습니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "line": {
                    "type": "string",
                    "description": "호선 번호 (1-9). 생략시 전체 호선 조회",
                },
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": [],
        },
    ),
    ToolName.BUS_ARRIVAL: Tool(
        name=ToolName.BUS_ARRIVAL.value,
        description="서울 버스 정류장의 실시간 도착정보를 조회합니다. 5자리 정류장 ID(arsId)가 필요하며, 정류장을 모르면 transit_search_bus_station으로 먼저 검색하세요.",
        inputSchema={
            "type": "object",
            "properties": {
                "ars_id": {
                    "type": "string",
                    "description": "버스 정류장 ID (5자리 숫자, 예: '16165')",
                    "pattern": r"^\d{5}$",
                },
                "limit": _limit_schema("조회할 최대 버스 수 (1-20, 기본값: 10)"),
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": ["ars_id"],
        },
    ),
    ToolName.SEARCH_BUS_STATION: Tool(
        name=ToolName.SEARCH_BUS_STATION.value,
        description="버스 정류장을 이름 또는 번호로 검색합니다. 검색 결과에서 정류장 ID(arsId)를 확인하여 도착정보 조회에 사용할 수 있습니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "검색할 정류장 이름 또는 5자리 정류장 번호 (예: '강남역', '16165')",
                },
                "limit": _limit_schema("조회할 최대 결과 수 (1-20, 기본값: 10)"),
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": ["query"],
        },
    ),
    ToolName.BIKE_STATION: Tool(
        name=ToolName.BIKE_STATION.value,
        description="서울 따릉이(공공자전거) 대여소를 검색하고 실시간 자전거 이용가능 현황을 조회합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "대여소 이름 또는 지역명 (예: '강남역', '여의도')",
                },
                "limit": _limit_schema("조회할 최대 대여소 수 (1-20, 기본값: 10)"),
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": ["query"],
        },
    ),
    ToolName.COMBINED_INFO: Tool(
        name=ToolName.COMBINED_INFO.value,
        description="특정 위치 주변의 지하철, 버스, 따릉이 정보를 통합 조회합니다. 위치명을 입력하면 주변의 모든 대중교통 정보를 한번에 확인할 수 있습니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "위치명 (예: '강남역', '홍대입구'). 지하철, 버스 정류장, 따릉이 정보를 통합 조회합니다.",
                },
                "response_format": _RESPONSE_FORMAT_SCHEMA,
            },
            "required": ["location"],
        },
    ),
}


class TransitMCPServer:
    """MCP Server for Korea transit functionality."""

    def __init__(
        self,
        settings: TransitSettings | None = None,
        service: TransitToolService | None = None,
    ) -> None:
        """Initialize the Transit MCP Server."""
        self.server = Server(SERVER_NAME)
        self.settings = settings or TransitSettings.from_env()
        self.service = service or TransitToolService(settings=self.settings)

        self._register_handlers()

    def list_tools(self) -> list[Tool]:
        """Tool declarations in registry order."""
        return [TOOL_DEFINITIONS[tool] for tool in ToolName]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """Run a tool and wrap its response as text content.

        Raises:
            TransitError: If the tool is unknown or its arguments are rejected;
                the protocol layer turns this into an error result
        """
        try:
            text = await self.service.execute(name, arguments)
        except TransitError as e:
            logger.warning(f"Rejected call to {name}: {e}")
            raise
        except Exception as e:
            logger.error(f"Error in tool {name}: {e}")
            return [TextContent(type="text", text=f"Error: {str(e)}")]
        return [TextContent(type="text", text=text)]

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[TextContent]:
            """Handle tool calls."""
            return await self.call_tool(name, arguments)


async def main() -> None:
    """Main entry point for the MCP server."""
    # stdio carries the protocol, so logs go to stderr
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting Korea Transit MCP Server")

    server_instance = TransitMCPServer()

    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP Server running with stdio transport")
            await server_instance.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=SERVER_VERSION,
                    capabilities=server_instance.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    finally:
        server_instance.service.close()


def main_sync() -> None:
    """Synchronous wrapper for the async main function - used as entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
