"""The status envelope that wraps API response data."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Status(IntEnum):
    """Outcome of a request, serialized as its integer code."""

    OK = 0
    FAIL = 1

    @classmethod
    def from_code(cls, code: int) -> Status:
        """Return the status for ``code``; raise ValueError if out of range."""
        if isinstance(code, bool) or not isinstance(code, int) or not 0 <= code <= 255:
            raise ValueError(f"Invalid Status code: {code!r}")
        highest = max(cls)
        if code > highest:
            raise ValueError(f"Invalid Status: {code} > {int(highest)}")
        return cls(code)


def _default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class Envelope(Generic[T]):
    """Response data with its status, or the cause of a failure."""

    status: Status
    data: T | None = None
    cause: str | None = None

    @classmethod
    def ok(cls, data: T) -> Envelope[T]:
        """A successful envelope carrying ``data``."""
        return cls(Status.OK, data, None)

    @classmethod
    def fail(cls, cause: str) -> Envelope[T]:
        """A failed envelope carrying ``cause``."""
        return cls(Status.FAIL, None, cause)

    @classmethod
    def capture(cls, func: Callable[..., T], *args: Any) -> Envelope[T]:
        """Call ``func``; wrap its result, or the message of the exception it raised."""
        try:
            return cls.ok(func(*args))
        except Exception as exc:
            return cls.fail(str(exc))

    def to_dict(self) -> dict[str, Any]:
        """The wire form; ``cause`` is omitted when absent."""
        result: dict[str, Any] = {"status": int(self.status), "data": self.data}
        if self.cause is not None:
            result["cause"] = self.cause
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Envelope[Any]:
        """Read the wire form back."""
        if "status" not in data:
            raise ValueError("missing field `status`")
        return cls(Status.from_code(data["status"]), data.get("data"), data.get("cause"))

    def to_json(self) -> str:
        """The wire form as JSON text."""
        return json.dumps(self.to_dict(), default=_default)