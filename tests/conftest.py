"""Test configuration and fixtures."""

import pytest

from korea_transit.core.config import TransitSettings


@pytest.fixture
def settings():
    """Settings with fake credentials."""
    return TransitSettings(seoul_api_key="test-key", data_go_kr_api_key="bus-key")


@pytest.fixture
def subway_payload():
    """Realtime subway arrival payload for 강남."""
    return {
        "errorMessage": {
            "status": 200,
            "code": "INFO-000",
            "message": "정상 처리되었습니다.",
            "total": 3,
        },
        "realtimeArrivalList": [
            {
                "subwayId": "1002",
                "updnLine": "내선",
                "bstatnNm": "성수",
                "arvlMsg2": "3분 후 (역삼)",
                "btrainNo": "2234",
            },
            {
                "subwayId": "1077",
                "updnLine": "상행",
                "bstatnNm": "신사",
                "arvlMsg2": "전역 도착",
                "btrainNo": "7012",
            },
            {
                "subwayId": "1002",
                "updnLine": "외선",
                "bstatnNm": "신도림",
                "arvlMsg2": "5분 후 (교대)",
                "btrainNo": "2241",
            },
        ],
    }


@pytest.fixture
def bus_payload():
    """Bus arrival payload for stop 22009."""
    return {
        "msgHeader": {"headerCd": "0", "headerMsg": "정상적으로 처리되었습니다."},
        "msgBody": {
            "itemList": [
                {
                    "stNm": "강남역",
                    "arsId": "22009",
                    "rtNm": "140",
                    "busRouteAbrv": "140",
                    "arrmsg1": "3분12초후[1번째 전]",
                    "arrmsg2": "11분40초후[5번째 전]",
                    "routeType": "6",
                },
                {
                    "stNm": "강남역",
                    "arsId": "22009",
                    "rtNm": "3412",
                    "arrmsg1": "곧 도착",
                    "arrmsg2": "출발대기",
                    "routeType": "4",
                },
            ]
        },
    }


def stop_row(name, ars_id, stop_type=None):
    row = {"STOPS_NM": name, "STOPS_NO": ars_id}
    if stop_type:
        row["STOPS_TYPE"] = stop_type
    return row


def bike_row(name, station_id, available, racks):
    return {
        "stationName": name,
        "stationId": station_id,
        "parkingBikeTotCnt": str(available),
        "rackTotCnt": str(racks),
    }


def stop_directory_payload(rows):
    """Wrap rows as a bus stop directory page."""
    return {
        "busStopLocationXyInfo": {
            "list_total_count": 11290,
            "RESULT": {"CODE": "INFO-000", "MESSAGE": "정상 처리되었습니다"},
            "row": rows,
        }
    }


def bike_directory_payload(rows):
    """Wrap rows as a bike station status page."""
    return {
        "rentBikeStatus": {
            "list_total_count": len(rows),
            "RESULT": {"CODE": "INFO-000", "MESSAGE": "정상 처리되었습니다."},
            "row": rows,
        }
    }


@pytest.fixture
def stop_rows():
    """A small stop directory."""
    return [
        stop_row("서울역버스환승센터", "02001"),
        stop_row("강남구청", "23001"),
        stop_row("강남역", "22009"),
        stop_row("신강남아파트", "23110"),
        stop_row("강남", "22010"),
    ]


@pytest.fixture
def bike_rows():
    """A small bike station directory."""
    return [
        bike_row("102. 망원역 1번출구 앞", "ST-4", 10, 15),
        bike_row("2301. 강남역 5번출구", "ST-1001", 3, 20),
        bike_row("2302. 강남역 11번출구", "ST-1002", 12, 20),
    ]


@pytest.fixture
def make_stop_row():
    """Factory for stop directory rows."""
    return stop_row


@pytest.fixture
def make_bike_row():
    """Factory for bike station rows."""
    return bike_row


@pytest.fixture
def stop_page():
    """Factory wrapping rows as a stop directory payload."""
    return stop_directory_payload


@pytest.fixture
def bike_page():
    """Factory wrapping rows as a bike station payload."""
    return bike_directory_payload
