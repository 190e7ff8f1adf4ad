import json

import pytest

from tondilisten.errors import ServerError
from tondilisten.websocket import handle_socket, respond, welcome_message


class FakeSocket:
    def __init__(self, incoming, fail_send=False):
        self.incoming = list(incoming)
        self.sent = []
        self.fail_send = fail_send

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        for message in self.incoming:
            yield message

    async def send(self, text):
        if self.fail_send:
            raise ConnectionError("closed")
        self.sent.append(text)


def test_welcome_message():
    assert json.loads(welcome_message()) == {
        "type": "welcome",
        "message": "Connected to Tondi Listener WebSocket",
    }


def test_ping_returns_timestamp():
    reply = json.loads(respond(json.dumps({"type": "ping"}), 1700000000))
    assert reply == {"type": "pong", "message": "1700000000"}


def test_subscribe_and_unsubscribe():
    assert json.loads(respond('{"type": "subscribe"}', 0)) == {
        "type": "subscribed",
        "message": "Event subscription successful",
    }
    assert json.loads(respond('{"type": "unsubscribe"}', 0)) == {
        "type": "unsubscribed",
        "message": "Event unsubscription successful",
    }


def test_get_status():
    reply = json.loads(respond('{"type": "get_status"}', 42))
    assert reply == {"type": "status", "status": "connected", "timestamp": 42}


def test_get_events_is_empty():
    assert json.loads(respond('{"type": "get_events"}', 0)) == {"type": "events", "events": []}


def test_unknown_type():
    reply = json.loads(respond('{"type": "dance"}', 0))
    assert reply == {"type": "error", "message": "Unknown message type: dance"}


@pytest.mark.parametrize("text", ['{"kind": "ping"}', '{"type": 3}', "[1, 2]"])
def test_missing_type(text):
    assert json.loads(respond(text, 0)) == {"type": "error", "message": "Missing message type"}


def test_replies_are_compact_with_sorted_keys():
    reply = respond('{"type": "subscribe"}', 0)
    assert " " not in reply.replace("Event subscription successful", "")
    assert reply.index('"message"') < reply.index('"type"')


def test_invalid_json_raises():
    with pytest.raises(ServerError) as info:
        respond("{not json", 0)
    assert info.value.error_code() == "INTERNAL_SERVER_ERROR"
    assert str(info.value).startswith("Internal server error: Invalid JSON: ")


@pytest.mark.asyncio
async def test_handle_socket_replies_in_order():
    socket = FakeSocket(['{"type": "subscribe"}', b"\x00binary", '{"type": "get_events"}'])
    await handle_socket(socket)
    assert [json.loads(text)["type"] for text in socket.sent] == ["welcome", "subscribed", "events"]


@pytest.mark.asyncio
async def test_handle_socket_stops_on_invalid_json():
    socket = FakeSocket(['{"type": "subscribe"}', "garbage", '{"type": "get_events"}'])
    await handle_socket(socket)
    assert [json.loads(text)["type"] for text in socket.sent] == ["welcome", "subscribed"]


@pytest.mark.asyncio
async def test_handle_socket_ping_uses_current_time():
    socket = FakeSocket(['{"type": "ping"}'])
    await handle_socket(socket)
    reply = json.loads(socket.sent[1])
    assert reply["type"] == "pong"
    assert int(reply["message"]) > 0


@pytest.mark.asyncio
async def test_handle_socket_send_failure_raises():
    socket = FakeSocket([], fail_send=True)
    with pytest.raises(ServerError) as info:
        await handle_socket(socket)
    assert "Failed to send message: closed" in str(info.value)