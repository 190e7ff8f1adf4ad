"""Node client configuration: endpoint URL building and RPC settings."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field, fields
from typing import Any

_DEFAULT_NETWORK = "devnet"
_DEFAULT_ENCODING = "borsh"
_DEFAULT_HOST = "8.210.45.192"
_DEFAULT_PROTOCOL = "wss"

# Standard wRPC ports by (network, encoding); these match the server side.
_WRPC_PORTS: dict[tuple[str, str], int] = {
    ("mainnet", "borsh"): 17110,
    ("mainnet", "json"): 18110,
    ("testnet", "borsh"): 17210,
    ("testnet", "json"): 18210,
    ("devnet", "borsh"): 17610,
    ("devnet", "json"): 18610,
    ("simnet", "borsh"): 17310,
    ("simnet", "json"): 18310,
}

_AVAILABLE_EVENTS = (
    "block-added",
    "utxos-changed",
    "virtual-chain-changed",
    "finality-conflict",
    "finality-conflict-resolved",
    "sink-blue-score-changed",
    "virtual-daa-score-changed",
    "pruning-point-utxo-set-override",
    "new-block-template",
)


def _default_events() -> list[str]:
    return ["block-added", "utxos-changed", "virtual-chain-changed", "new-block-template"]


def available_events() -> list[str]:
    """Every event name a client may handle."""
    return list(_AVAILABLE_EVENTS)


@dataclass(frozen=True)
class RpcSettings:
    """What the RPC client is built from: URL, wire encoding and network."""

    url: str
    encoding: str
    network_id: str | None = None


def _string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"invalid type for `{name}`: expected a string")
    return value


def _boolean(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"invalid type for `{name}`: expected a boolean")
    return value


def _unsigned(bits: int) -> Callable[[str, Any], int]:
    limit = 1 << bits

    def check(name: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"invalid type for `{name}`: expected an integer")
        if not 0 <= value < limit:
            raise ValueError(f"invalid value for `{name}`: {value} is out of range for u{bits}")
        return value

    return check


def _string_list(name: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"invalid type for `{name}`: expected a list of strings")
    return list(value)


_CHECKS: dict[str, Callable[[str, Any], Any]] = {
    "url": _string,
    "encoding": _string,
    "network_id": _string,
    "host": _string,
    "protocol": _string,
    "connection_timeout_ms": _unsigned(64),
    "ping_interval_ms": _unsigned(64),
    "auto_reconnect": _boolean,
    "max_reconnect_attempts": _unsigned(32),
    "reconnect_delay_ms": _unsigned(64),
    "default_events": _string_list,
    "log_level": _string,
    "enable_console_log": _boolean,
}


@dataclass
class ListenerConfig:
    """Client configuration; every field is optional.

    Constructed directly, fields take the standard defaults and ``url`` is
    left unset so that it is built from network and encoding. Read from a
    mapping, absent keys are left unset.
    """

    url: str | None = None
    encoding: str | None = _DEFAULT_ENCODING
    network_id: str | None = _DEFAULT_NETWORK
    host: str | None = _DEFAULT_HOST
    protocol: str | None = _DEFAULT_PROTOCOL
    connection_timeout_ms: int | None = 10000
    ping_interval_ms: int | None = 30000
    auto_reconnect: bool | None = True
    max_reconnect_attempts: int | None = 5
    reconnect_delay_ms: int | None = 1000
    default_events: list[str] | None = field(default_factory=_default_events)
    log_level: str | None = "info"
    enable_console_log: bool | None = True

    def default_port(self) -> int:
        """The standard port for this network and encoding; devnet/borsh if unknown."""
        network = self.network_id if self.network_id is not None else _DEFAULT_NETWORK
        encoding = self.encoding if self.encoding is not None else _DEFAULT_ENCODING
        return _WRPC_PORTS.get((network, encoding), _WRPC_PORTS[("devnet", "borsh")])

    def build_url(self) -> str:
        """The configured URL, or one built from protocol, host and port."""
        if self.url is not None:
            return self.url
        protocol = self.protocol if self.protocol is not None else _DEFAULT_PROTOCOL
        host = self.host if self.host is not None else _DEFAULT_HOST
        return f"{protocol}://{host}:{self.default_port()}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListenerConfig:
        """Read a configuration mapping; absent or null keys are left unset."""
        if not isinstance(data, dict):
            raise ValueError("invalid type: expected a mapping")
        values: dict[str, Any] = {}
        for name, check in _CHECKS.items():
            raw = data.get(name)
            values[name] = None if raw is None else check(name, raw)
        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> ListenerConfig:
        """Read a configuration from JSON text."""
        try:
            return cls.from_dict(json.loads(text))
        except ValueError as exc:
            raise ValueError(f"Failed to parse JSON config: {exc}") from exc

    @classmethod
    def from_config_file(cls) -> ListenerConfig:
        """The configuration used when no file is supplied: the defaults."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Every field by name, unset ones as None."""
        result: dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            result[item.name] = list(value) if isinstance(value, list) else value
        return result

    def rpc_settings(self) -> RpcSettings:
        """Settings for the RPC client; unknown encodings fall back to borsh."""
        encoding = "json" if self.encoding == "json" else "borsh"
        return RpcSettings(url=self.build_url(), encoding=encoding, network_id=None)