"""Rendering of tool results as markdown text or JSON.

Markdown responses are bounded by a character limit; JSON responses are
always complete.
"""

import json
from typing import Any

from .config import CHARACTER_LIMIT
from .labels import bus_type_name, subway_line_name
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

TRUNCATION_MARGIN = 100
UNKNOWN_STATION = "알 수 없음"
SUBWAY_STATUS_NOTICE = "실시간 운행장애 정보는 서울교통공사 공지사항을 확인해주세요."


def truncate_response(content: str, limit: int = CHARACTER_LIMIT) -> tuple[str, bool]:
    """Cut ``content`` to fit ``limit`` characters.

    Returns:
        The possibly shortened text and whether it was cut
    """
    if len(content) <= limit:
        return content, False
    truncated = content[: limit - TRUNCATION_MARGIN]
    return f"{truncated}\n\n... (응답이 {limit:,}자 제한으로 잘렸습니다)", True


def availability_marker(rate: int) -> str:
    if rate >= 50:
        return "🟢"
    if rate >= 20:
        return "🟡"
    return "🔴"


def direction_label(direction: str) -> str:
    return "⬆️ 상행" if direction == "상행" else "⬇️ 하행"


def _source_status(outcome: SourceOutcome[Any]) -> dict[str, Any]:
    status: dict[str, Any] = {"ok": outcome.ok}
    if outcome.error is not None:
        status["error"] = outcome.error
    return status


class ResponseRenderer:
    """Turns query results into the requested response format."""

    def __init__(self, character_limit: int = CHARACTER_LIMIT):
        self.character_limit = character_limit

    def markdown(self, text: str) -> RenderedResponse:
        body, truncated = truncate_response(text, self.character_limit)
        return RenderedResponse(ResponseFormat.MARKDOWN, body, truncated)

    def json(self, data: dict[str, Any]) -> RenderedResponse:
        return RenderedResponse(
            ResponseFormat.JSON, json.dumps(data, indent=2, ensure_ascii=False)
        )

    def failure(self, message: str) -> RenderedResponse:
        return RenderedResponse(ResponseFormat.MARKDOWN, f"❌ {message}")

    def subway_arrivals(
        self, station: str, arrivals: list[SubwayArrival], fmt: ResponseFormat
    ) -> RenderedResponse:
        if fmt is ResponseFormat.JSON:
            return self.json(
                {
                    "station": station,
                    "count": len(arrivals),
                    "arrivals": [
                        {
                            "line": subway_line_name(a.subway_id),
                            "destination": a.destination,
                            "message": a.message,
                            "direction": a.direction,
                            "trainNumber": a.train_number,
                        }
                        for a in arrivals
                    ],
                }
            )

        if not arrivals:
            return self.markdown(
                f"## 🚇 {station}역 도착정보\n\n현재 도착 예정 열차가 없습니다."
            )

        md = f"## 🚇 {station}역 실시간 도착정보\n\n"
        md += f"> 총 {len(arrivals)}개의 열차 정보\n\n"
        for idx, arrival in enumerate(arrivals, 1):
            md += f"### {idx}. {subway_line_name(arrival.subway_id)} - {arrival.destination}행\n"
            md += f"- **도착**: {arrival.message}\n"
            md += f"- **방향**: {direction_label(arrival.direction)}\n\n"
        return self.markdown(md)

    def subway_status(self, line: str | None, fmt: ResponseFormat) -> RenderedResponse:
        title = f"{line}호선" if line else "전체 호선"
        if fmt is ResponseFormat.JSON:
            return self.json(
                {"filter": title, "status": "정상 운행 중", "message": SUBWAY_STATUS_NOTICE}
            )
        return self.markdown(
            f"## 🚇 지하철 운행상태 ({title})\n\n✅ 정상 운행 중\n\n※ {SUBWAY_STATUS_NOTICE}"
        )

    def bus_arrivals(
        self, ars_id: str, arrivals: list[BusArrival], limit: int, fmt: ResponseFormat
    ) -> RenderedResponse:
        station_name = (arrivals[0].station_name if arrivals else None) or UNKNOWN_STATION
        listed = arrivals[:limit]

        if fmt is ResponseFormat.JSON:
            return self.json(
                {
                    "stationName": station_name,
                    "arsId": ars_id,
                    "count": len(listed),
                    "total": len(arrivals),
                    "arrivals": [
                        {
                            "routeName": bus.route_name,
                            "routeAbbr": bus.route_abbr,
                            "arrival1": bus.first_arrival,
                            "arrival2": bus.second_arrival,
                            "routeType": bus_type_name(bus.route_type),
                        }
                        for bus in listed
                    ],
                }
            )

        if not arrivals:
            return self.markdown(
                f"## 🚌 버스 도착정보 (정류장: {ars_id})\n\n현재 도착 예정 버스가 없습니다."
            )

        md = f"## 🚌 {station_name} 버스 도착정보\n\n"
        md += f"> 정류장 번호: {ars_id} | {len(arrivals)}개 노선\n\n"
        for idx, bus in enumerate(listed, 1):
            md += f"### {idx}. {bus.route_name} ({bus_type_name(bus.route_type)})\n"
            md += f"- **첫번째 버스**: {bus.first_arrival}\n"
            md += f"- **두번째 버스**: {bus.second_arrival}\n\n"
        return self.markdown(md)

    def bus_stops(
        self, query: str, stops: list[BusStop], fmt: ResponseFormat
    ) -> RenderedResponse:
        if fmt is ResponseFormat.JSON:
            return self.json(
                {
                    "query": query,
                    "count": len(stops),
                    "stations": [
                        {"name": s.name, "arsId": s.ars_id, "type": s.stop_type or "일반"}
                        for s in stops
                    ],
                }
            )

        header = f'## 🔍 버스 정류장 검색: "{query}"\n\n'
        if not stops:
            return self.markdown(header + "검색 결과가 없습니다.")

        md = header + f"> {len(stops)}개 정류장 발견\n\n"
        for idx, stop in enumerate(stops, 1):
            md += f"### {idx}. {stop.name}\n"
            md += f"- **정류장 번호**: `{stop.ars_id}`\n\n"
        md += "---\n> 💡 **Tip**: 도착정보 조회 시 정류장 번호(arsId)를 사용하세요.\n"
        return self.markdown(md)

    def bike_stations(
        self, query: str, stations: list[BikeStation], fmt: ResponseFormat
    ) -> RenderedResponse:
        if fmt is ResponseFormat.JSON:
            return self.json(
                {
                    "query": query,
                    "count": len(stations),
                    "stations": [
                        {
                            "name": s.name,
                            "id": s.station_id,
                            "available": s.available_bikes,
                            "rackTotal": s.rack_total,
                        }
                        for s in stations
                    ],
                }
            )

        header = f'## 🚲 따릉이 대여소 검색: "{query}"\n\n'
        if not stations:
            return self.markdown(header + "검색 결과가 없습니다.")

        md = header + f"> {len(stations)}개 대여소 발견\n\n"
        for idx, station in enumerate(stations, 1):
            rate = station.availability_rate
            md += f"### {idx}. {station.name}\n"
            md += (
                f"- **대여 가능**: {availability_marker(rate)} "
                f"{station.available_bikes}대 / {station.rack_total}대 ({rate}%)\n\n"
            )
        return self.markdown(md)

    def combined(self, info: CombinedInfo, fmt: ResponseFormat) -> RenderedResponse:
        subway = info.subway.records
        stops = info.bus.records
        bikes = info.bike.records

        if fmt is ResponseFormat.JSON:
            return self.json(
                {
                    "location": info.location,
                    "subway": {
                        "count": len(subway),
                        "arrivals": [
                            {
                                "line": subway_line_name(a.subway_id),
                                "destination": a.destination,
                                "message": a.message,
                            }
                            for a in subway
                        ],
                    },
                    "bus": {
                        "count": len(stops),
                        "stations": [{"name": s.name, "arsId": s.ars_id} for s in stops],
                    },
                    "bike": {
                        "count": len(bikes),
                        "stations": [
                            {
                                "name": s.name,
                                "available": s.available_bikes,
                                "total": s.rack_total,
                            }
                            for s in bikes
                        ],
                    },
                    "sources": {o.source: _source_status(o) for o in info.outcomes},
                }
            )

        md = f"# 📍 {info.location} 주변 교통정보\n\n"

        md += "## 🚇 지하철 도착정보\n\n"
        if not subway:
            md += "주변 지하철역 정보가 없습니다.\n\n"
        else:
            for arrival in subway:
                md += (
                    f"- **{subway_line_name(arrival.subway_id)}** "
                    f"{arrival.destination}행: {arrival.message}\n"
                )
            md += "\n"

        md += "## 🚌 버스 정류장\n\n"
        if not stops:
            md += "주변 버스 정류장 정보가 없습니다.\n\n"
        else:
            for stop in stops:
                md += f"- **{stop.name}** ({stop.ars_id})\n"
            md += "\n"

        md += "## 🚲 따릉이 대여소\n\n"
        if not bikes:
            md += "주변 따릉이 대여소 정보가 없습니다.\n"
        else:
            for station in bikes:
                marker = availability_marker(station.availability_rate)
                md += f"- **{station.name}**: {marker} {station.available_bikes}대 이용가능\n"

        return self.markdown(md)
