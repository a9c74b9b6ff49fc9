import json

import httpx
import pytest

from occucalc.rooms_client import RoomsAPIError, RoomsClient, room_payload
from occucalc.row_model import Row

BASE_URL = "https://rooms.test"


def _client(handler):
    return RoomsClient(BASE_URL + "/", timeout=1, transport=httpx.MockTransport(handler))


def test_payload_uses_recomputed_load(ibc_factors):
    row = Row(id=1, number='101', name='Open Office', area='186', type='Business/Office', load=0)
    assert room_payload(row, ibc_factors) == {
        "roomNumber": '101',
        "roomName": 'Open Office',
        "area": '186',
        "occupancyType": 'Business/Office',
        "occupantLoad": 20,
    }


@pytest.mark.parametrize("body", [
    [{"roomName": "A"}],
    {"rooms": [{"roomName": "A"}]},
])
def test_list_rooms_accepts_both_shapes(body):
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/api/rooms"
        return httpx.Response(200, json=body)

    assert _client(handler).list_rooms() == [{"roomName": "A"}]


def test_list_rooms_http_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(RoomsAPIError):
        client.list_rooms()


def test_list_rooms_bad_json():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(RoomsAPIError):
        client.list_rooms()


def test_connection_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RoomsAPIError):
        _client(handler).list_rooms()


def test_push_rows_posts_in_order(sample_rows, ibc_factors):
    seen = []

    def handler(request):
        assert request.method == "POST"
        seen.append(json.loads(request.content))
        return httpx.Response(201, json={"ok": True})

    assert _client(handler).push_rows(sample_rows, ibc_factors) == 4
    assert [p["roomNumber"] for p in seen] == ['101', '102', '103', 'B01']
    assert [p["occupantLoad"] for p in seen] == [20, 50, 13, 10]


def test_push_rows_stops_at_first_failure(sample_rows, ibc_factors):
    calls = []

    def handler(request):
        calls.append(request)
        status = 400 if len(calls) == 2 else 201
        return httpx.Response(status, json={})

    with pytest.raises(RoomsAPIError):
        _client(handler).push_rows(sample_rows, ibc_factors)
    assert len(calls) == 2
