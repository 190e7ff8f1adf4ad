"""Building blocks for a blockchain listener service: events, client settings, chain models and queries, replies and errors."""

__version__ = "0.1.1"

__all__ = [
    "client_config",
    "dispatch",
    "endpoint",
    "envelope",
    "errors",
    "events",
    "hexutil",
    "models",
    "pingpong",
    "pool",
    "queries",
    "websocket",
]