"""
Typed error classes for the VSS client.

These are raised by the client, the transport and the header providers so
callers can catch specific failure modes while still being able to catch the
base `VssError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Type

from google.protobuf.message import DecodeError as _ProtoDecodeError

from . import schema

__all__ = [
    "VssError",
    "AuthError",
    "TransportError",
    "ApplicationError",
    "ConflictError",
    "InvalidRequestError",
    "InternalServerError",
    "NoSuchKeyError",
    "ServerAuthError",
    "DecodeError",
    "ServerContractError",
    "ErrorCode",
    "from_error_response",
    "is_retryable",
]


class VssError(Exception):
    """Base class for all client errors."""


class ErrorCode(IntEnum):
    # Mirrors the `vss.ErrorCode` wire enum
    UNKNOWN = schema.UNKNOWN
    CONFLICT_EXCEPTION = schema.CONFLICT_EXCEPTION
    INVALID_REQUEST_EXCEPTION = schema.INVALID_REQUEST_EXCEPTION
    INTERNAL_SERVER_EXCEPTION = schema.INTERNAL_SERVER_EXCEPTION
    NO_SUCH_KEY_EXCEPTION = schema.NO_SUCH_KEY_EXCEPTION
    AUTH_EXCEPTION = schema.AUTH_EXCEPTION


@dataclass(slots=True)
class AuthError(VssError):
    """Raised when the header provider fails to produce request headers."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"AuthError: {self.message}"


@dataclass(slots=True)
class TransportError(VssError):
    """Connection, timeout or response-size failure below the application layer."""

    message: str
    url: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" url={self.url}" if self.url else ""
        return f"TransportError{where}: {self.message}"


@dataclass(slots=True)
class ApplicationError(VssError):
    """
    Raised for any non-2xx response.

    Fields:
      - status_code: HTTP status returned by the server
      - payload: raw response body, verbatim
      - error_code: decoded `ErrorResponse.error_code`, if the payload parsed
      - message: decoded `ErrorResponse.message`, if the payload parsed
    """

    status_code: int
    payload: bytes = b""
    error_code: Optional[ErrorCode] = None
    message: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"{type(self).__name__} http={self.status_code}"]
        if self.error_code is not None:
            parts.append(f"code={self.error_code.name}")
        if self.message:
            parts.append(f"msg={self.message!r}")
        elif self.payload:
            parts.append(f"payload={self.payload[:256]!r}")
        return " ".join(parts)


class ConflictError(ApplicationError):
    """A version check failed: the key was modified concurrently."""


class InvalidRequestError(ApplicationError):
    """The server rejected the request as malformed."""


class InternalServerError(ApplicationError):
    """The server failed while handling the request."""


class NoSuchKeyError(ApplicationError):
    """The requested key does not exist."""


class ServerAuthError(ApplicationError):
    """The server rejected the request's credentials."""


@dataclass(slots=True)
class DecodeError(VssError):
    """A 2xx response body did not parse as the expected response type."""

    message: str
    response_type: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        rt = f" [{self.response_type}]" if self.response_type else ""
        return f"DecodeError{rt}: {self.message}"


@dataclass(slots=True)
class ServerContractError(VssError):
    """A 2xx response violated the server API contract (e.g. a get without value)."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"ServerContractError: {self.message}"


_BY_CODE: dict[ErrorCode, Type[ApplicationError]] = {
    ErrorCode.CONFLICT_EXCEPTION: ConflictError,
    ErrorCode.INVALID_REQUEST_EXCEPTION: InvalidRequestError,
    ErrorCode.INTERNAL_SERVER_EXCEPTION: InternalServerError,
    ErrorCode.NO_SUCH_KEY_EXCEPTION: NoSuchKeyError,
    ErrorCode.AUTH_EXCEPTION: ServerAuthError,
}


def from_error_response(status_code: int, payload: bytes) -> ApplicationError:
    """
    Convert a non-2xx response into an ApplicationError.

    The payload is kept verbatim. If it parses as `vss.ErrorResponse`, the error
    code selects the subclass and the message is attached; otherwise a plain
    ApplicationError is returned.
    """
    payload = bytes(payload)
    try:
        err = schema.ErrorResponse.FromString(payload)
    except _ProtoDecodeError:
        return ApplicationError(status_code=status_code, payload=payload)

    try:
        code = ErrorCode(err.error_code)
    except ValueError:
        code = ErrorCode.UNKNOWN
    cls = _BY_CODE.get(code, ApplicationError)
    return cls(
        status_code=status_code,
        payload=payload,
        error_code=code,
        message=err.message or None,
    )


def is_retryable(error: BaseException) -> bool:
    """
    Default classification used by `default_retry_policy`.

    Transport failures, server-side failures (5xx or INTERNAL_SERVER_EXCEPTION)
    and 429 are transient; authentication, request, conflict, decode and
    contract errors are not.
    """
    if isinstance(error, TransportError):
        return True
    if isinstance(error, InternalServerError):
        return True
    if isinstance(error, ApplicationError):
        if isinstance(error, (ConflictError, InvalidRequestError, NoSuchKeyError, ServerAuthError)):
            return False
        return error.status_code >= 500 or error.status_code == 429
    return False
