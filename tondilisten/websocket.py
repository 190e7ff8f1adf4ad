"""The WebSocket message protocol: replies to client requests."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from .errors import ErrorKind, ServerError

_log = logging.getLogger(__name__)

_WELCOME = "Connected to Tondi Listener WebSocket"


def _encode(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), sort_keys=True)


def _message(msg_type: str, message: str) -> str:
    return _encode({"type": msg_type, "message": message})


def welcome_message() -> str:
    """The message sent when a client connects."""
    return _message("welcome", _WELCOME)


def respond(text: str, now: int) -> str:
    """The reply to one text message; ``now`` is the time in Unix seconds.

    Raises ServerError if ``text`` is not JSON.
    """
    try:
        request = json.loads(text)
    except ValueError as exc:
        raise ServerError(f"Invalid JSON: {exc}", ErrorKind.INTERNAL_SERVER_ERROR) from exc

    msg_type = request.get("type") if isinstance(request, dict) else None
    if not isinstance(msg_type, str):
        return _message("error", "Missing message type")

    timestamp = int(now)
    if msg_type == "ping":
        return _message("pong", str(timestamp))
    if msg_type == "subscribe":
        return _message("subscribed", "Event subscription successful")
    if msg_type == "unsubscribe":
        return _message("unsubscribed", "Event unsubscription successful")
    if msg_type == "get_status":
        return _encode({"type": "status", "status": "connected", "timestamp": timestamp})
    if msg_type == "get_events":
        return _encode({"type": "events", "events": []})
    return _message("error", f"Unknown message type: {msg_type}")


async def _send(socket, text: str) -> None:
    try:
        await socket.send(text)
    except Exception as exc:
        raise ServerError(
            f"Failed to send message: {exc}", ErrorKind.INTERNAL_SERVER_ERROR
        ) from exc


async def handle_socket(socket) -> None:
    """Serve one connection until it closes or a message cannot be handled.

    ``socket`` is an async iterable of incoming messages (text as ``str``;
    anything else is ignored) with an async ``send(text)``. A failure to send
    the welcome message raises ServerError.
    """
    await _send(socket, welcome_message())
    async for message in socket:
        if not isinstance(message, str):
            continue
        try:
            await _send(socket, respond(message, int(time.time())))
        except ServerError as exc:
            _log.error("Failed to handle message: %s", exc)
            break