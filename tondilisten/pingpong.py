"""The ping/pong liveness exchange."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Ping:
    """A ping carrying a caller-chosen identifier."""

    id: str


@dataclass(frozen=True)
class Pong:
    """The reply to a ping."""

    id: str


async def pingpong(ping: Ping) -> Pong:
    """Answer ``ping`` with a pong echoing its identifier."""
    return Pong(id=f"Pong: {ping.id}")


class PingPongService:
    """Service that answers ping requests."""

    async def pingpong(self, request: Ping) -> Pong:
        """Answer a ping request."""
        return await pingpong(request)