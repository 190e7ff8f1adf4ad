"""Blockchain event types and event-processing configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class EventType(str, Enum):
    """A node notification kind, named in kebab-case."""

    BLOCK_ADDED = "block-added"
    VIRTUAL_CHAIN_CHANGED = "virtual-chain-changed"
    FINALITY_CONFLICT = "finality-conflict"
    FINALITY_CONFLICT_RESOLVED = "finality-conflict-resolved"
    UTXOS_CHANGED = "utxos-changed"
    SINK_BLUE_SCORE_CHANGED = "sink-blue-score-changed"
    VIRTUAL_DAA_SCORE_CHANGED = "virtual-daa-score-changed"
    PRUNING_POINT_UTXO_SET_OVERRIDE = "pruning-point-utxo-set-override"
    NEW_BLOCK_TEMPLATE = "new-block-template"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> EventType:
        """Return the event type named by ``text``; raise ValueError if unknown."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown event type: {text}") from None

    @classmethod
    def all(cls) -> list[EventType]:
        """Every event type, in declaration order."""
        return list(cls)


@dataclass(frozen=True)
class RealTimeStrategy:
    """Process every event as it arrives."""


@dataclass(frozen=True)
class BatchStrategy:
    """Process events in batches to reduce database writes."""

    batch_size: int
    batch_timeout_ms: int


@dataclass(frozen=True)
class PriorityStrategy:
    """Process events by priority tier."""

    high_priority: list[str] = field(default_factory=list)
    medium_priority: list[str] = field(default_factory=list)
    low_priority: list[str] = field(default_factory=list)


EventStrategy = Union[RealTimeStrategy, BatchStrategy, PriorityStrategy]


def _require_uint(body: dict, key: str) -> int:
    if key not in body:
        raise ValueError(f"missing field `{key}`")
    value = body[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"field `{key}` must be a non-negative integer")
    return value


def _require_str_list(body: dict, key: str) -> list[str]:
    if key not in body:
        raise ValueError(f"missing field `{key}`")
    value = body[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"field `{key}` must be a list of strings")
    return list(value)


def strategy_from_dict(data: Any) -> EventStrategy:
    """Read a strategy from its tagged form: ``"RealTime"``, ``{"Batch": {...}}`` or ``{"Priority": {...}}``."""
    if data == "RealTime":
        return RealTimeStrategy()
    if isinstance(data, dict) and len(data) == 1:
        ((name, body),) = data.items()
        if name == "RealTime" and body is None:
            return RealTimeStrategy()
        if name == "Batch" and isinstance(body, dict):
            return BatchStrategy(
                batch_size=_require_uint(body, "batch_size"),
                batch_timeout_ms=_require_uint(body, "batch_timeout_ms"),
            )
        if name == "Priority" and isinstance(body, dict):
            return PriorityStrategy(
                high_priority=_require_str_list(body, "high_priority"),
                medium_priority=_require_str_list(body, "medium_priority"),
                low_priority=_require_str_list(body, "low_priority"),
            )
    raise ValueError(f"Unknown event strategy: {data!r}")


_DEFAULT_ENABLED_EVENTS = ("block-added", "utxos-changed", "virtual-chain-changed")
_DEFAULT_BUFFER_SIZE = 1000
_DEFAULT_DEDUPLICATION = True


@dataclass
class EventConfig:
    """Which events are enabled and how they are processed.

    Constructed directly, every field starts empty; ``from_dict`` fills
    missing keys with the configuration-file defaults instead.
    """

    enabled_events: list[str] = field(default_factory=list)
    event_strategy: EventStrategy = field(default_factory=RealTimeStrategy)
    buffer_size: int = 0
    enable_deduplication: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventConfig:
        """Read a configuration section, applying defaults to missing keys."""
        enabled = data.get("enabled_events", list(_DEFAULT_ENABLED_EVENTS))
        if not isinstance(enabled, list) or not all(isinstance(item, str) for item in enabled):
            raise ValueError("field `enabled_events` must be a list of strings")
        strategy = strategy_from_dict(data["event_strategy"]) if "event_strategy" in data else RealTimeStrategy()
        buffer_size = _require_uint(data, "buffer_size") if "buffer_size" in data else _DEFAULT_BUFFER_SIZE
        dedup = data.get("enable_deduplication", _DEFAULT_DEDUPLICATION)
        if not isinstance(dedup, bool):
            raise ValueError("field `enable_deduplication` must be a boolean")
        return cls(
            enabled_events=list(enabled),
            event_strategy=strategy,
            buffer_size=buffer_size,
            enable_deduplication=dedup,
        )

    def parse_event_types(self) -> set[EventType]:
        """Parse the enabled event names; raise ValueError on the first unknown one."""
        result = set()
        for name in self.enabled_events:
            try:
                result.add(EventType.parse(name))
            except ValueError as exc:
                raise ValueError(f"Invalid event type '{name}': {exc}") from None
        return result

    def validate(self) -> None:
        """Raise ValueError if the configuration is inconsistent."""
        self.parse_event_types()
        strategy = self.event_strategy
        if isinstance(strategy, BatchStrategy):
            if strategy.batch_size == 0:
                raise ValueError("Batch size must be greater than 0")
            if strategy.batch_timeout_ms == 0:
                raise ValueError("Batch timeout must be greater than 0")
        if isinstance(strategy, PriorityStrategy):
            names = dict.fromkeys(
                [*strategy.high_priority, *strategy.medium_priority, *strategy.low_priority]
            )
            for name in names:
                try:
                    EventType.parse(name)
                except ValueError as exc:
                    raise ValueError(f"Invalid priority event type '{name}': {exc}") from None

    @classmethod
    def all_event_types(cls) -> list[EventType]:
        """Every available event type."""
        return EventType.all()