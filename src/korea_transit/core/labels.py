"""Static code-to-label lookup tables for Seoul transit feeds."""

SUBWAY_LINE_MAP: dict[str, str] = {
    "1001": "1호선",
    "1002": "2호선",
    "1003": "3호선",
    "1004": "4호선",
    "1005": "5호선",
    "1006": "6호선",
    "1007": "7호선",
    "1008": "8호선",
    "1009": "9호선",
    "1077": "신분당선",
    "1063": "경의중앙선",
    "1065": "공항철도",
}

BUS_TYPE_MAP: dict[str, str] = {
    "1": "일반",
    "2": "좌석",
    "3": "마을",
    "4": "광역",
    "5": "공항",
    "6": "간선",
    "7": "지선",
}

UNKNOWN_BUS_TYPE = "기타"


def subway_line_name(line_code: str) -> str:
    """Label for a subway line code; unknown codes are returned unchanged."""
    return SUBWAY_LINE_MAP.get(line_code, line_code)


def bus_type_name(type_code: str | None) -> str:
    """Label for a bus route type code."""
    return BUS_TYPE_MAP.get(type_code or "1", UNKNOWN_BUS_TYPE)
