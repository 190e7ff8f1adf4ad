"""Choosing the node protocol from an endpoint URL."""

from __future__ import annotations

import logging
from enum import Enum

from .pool import PoolError

_log = logging.getLogger(__name__)

_WRPC_SCHEMES = ("ws://", "wss://")
_GRPC_SCHEMES = ("grpc://", "http://", "https://")


class Protocol(Enum):
    """The RPC protocol used to talk to the node."""

    WRPC = "wRPC"
    GRPC = "gRPC"

    def __str__(self) -> str:
        return self.value


def resolve_endpoint(url: str) -> tuple[Protocol, str]:
    """Return the protocol for ``url`` and the URL to connect to.

    WebSocket URLs use wRPC; gRPC and HTTP(S) URLs use gRPC. A bare
    ``host:port`` is taken as a wRPC endpoint over ``ws://``. Anything
    else raises PoolError.
    """
    if url.startswith(_WRPC_SCHEMES):
        _log.info("Connecting to wRPC endpoint: %s", url)
        return Protocol.WRPC, url
    if url.startswith(_GRPC_SCHEMES):
        _log.info("Connecting to gRPC endpoint: %s", url)
        return Protocol.GRPC, url
    if ":" in url and "://" not in url:
        wrpc_url = f"ws://{url}"
        _log.info("Auto-detected wRPC format, using: %s", wrpc_url)
        return resolve_endpoint(wrpc_url)
    raise PoolError(f"Unsupported URL format: {url}")