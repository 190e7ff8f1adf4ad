"""Error types for the server and the client, with their HTTP mapping."""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorKind(Enum):
    """Server error categories: code, HTTP status and message templates."""

    CONFIG = ("CONFIG_ERROR", 500, "Config error: {}", "System configuration error: {}")
    IO = ("IO_ERROR", 500, "IO error: {}", "System internal error")
    ADDR_PARSE = ("ADDR_PARSE_ERROR", 400, "Network address parse error: {}", "Invalid network address: {}")
    GRPC_TRANSPORT = ("GRPC_TRANSPORT_ERROR", 503, "gRPC transport error: {}", "Network connection error: {}")
    DB_POOL = ("DB_POOL_ERROR", 503, "Database connection pool error: {}", "Database connection pool error: {}")
    DB_CONNECTION = ("DB_CONNECTION_ERROR", 503, "Database connection error: {}", "Database connection error: {}")
    DB_QUERY = ("DB_QUERY_ERROR", 500, "Database query error: {}", "Database operation error: {}")
    DB_OPERATION = ("DB_OPERATION_ERROR", 500, "Database operation error: {}", "Database error: {}")
    CLIENT_POOL = ("CLIENT_POOL_ERROR", 503, "Client pool error: {}", "Client pool error: {}")
    NOT_FOUND = ("NOT_FOUND", 404, "Resource not found: {}", "Resource not found: {}")
    FORBIDDEN = ("FORBIDDEN", 403, "Permission denied: {}", "Access denied: {}")
    BAD_REQUEST = ("BAD_REQUEST", 400, "Invalid request parameters: {}", "Invalid request: {}")
    INTERNAL_SERVER_ERROR = (
        "INTERNAL_SERVER_ERROR",
        500,
        "Internal server error: {}",
        "Internal server error: {}",
    )
    SERVICE_UNAVAILABLE = (
        "SERVICE_UNAVAILABLE",
        503,
        "Service temporarily unavailable: {}",
        "Service temporarily unavailable: {}",
    )
    GENERIC = ("GENERIC_ERROR", 500, "{}", "{}")

    def __init__(self, code: str, status: int, display: str, user: str) -> None:
        self.error_code = code
        self.http_status = HTTPStatus(status)
        self.display_template = display
        self.user_template = user


class ServerError(Exception):
    """An error raised while serving a request.

    ``detail`` is a message or the underlying exception; a bare message is
    a generic error.
    """

    def __init__(self, detail: Any, kind: ErrorKind = ErrorKind.GENERIC) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(kind.display_template.format(detail))

    def status_code(self) -> HTTPStatus:
        """The HTTP status that reports this error."""
        return self.kind.http_status

    def user_message(self) -> str:
        """A message fit to show to a client."""
        return self.kind.user_template.format(self.detail)

    def error_code(self) -> str:
        """A stable code for logs and clients."""
        return self.kind.error_code

    def to_response(self) -> tuple[int, dict[str, Any]]:
        """The HTTP status and JSON body that report this error."""
        status = self.status_code()
        body = {
            "error": {
                "code": self.error_code(),
                "message": self.user_message(),
                "status": int(status),
            }
        }
        return int(status), body


class ClientErrorKind(Enum):
    """Client error categories and their message templates."""

    GENERIC = "{}"
    WEBSOCKET = "WebSocket error: {}"
    SERIALIZATION = "Serialization error: {}"


class ClientError(Exception):
    """An error raised by the node client; a bare message is a generic error."""

    def __init__(self, detail: Any, kind: ClientErrorKind = ClientErrorKind.GENERIC) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(kind.value.format(detail))