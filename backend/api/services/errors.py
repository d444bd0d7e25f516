# backend/api/services/errors.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    PROVIDER_ERROR = "provider_error"
    NO_ROUTE = "no_route"
    NETWORK = "network"
    TIMEOUT = "timeout"


# What the client sees for each kind. None -> use the error's own message.
_USER_MESSAGES = {
    ErrorKind.INVALID_REQUEST: "Source and destination are required",
    ErrorKind.NOT_FOUND: "Could not find one or both locations. Please check the addresses.",
    ErrorKind.PROVIDER_ERROR: None,
    ErrorKind.NO_ROUTE: None,
    ErrorKind.NETWORK: "Network connection failed. Please try again in a moment.",
    ErrorKind.TIMEOUT: "Request timed out. Please try again.",
}

_STATUS_CODES = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.NOT_FOUND: 400,
    ErrorKind.PROVIDER_ERROR: 500,
    ErrorKind.NO_ROUTE: 400,
    ErrorKind.NETWORK: 500,
    ErrorKind.TIMEOUT: 500,
}


class DirectionsError(RuntimeError):
    """
    Base error for the directions pipeline.
    The kind is fixed where the failure happens; status code and
    user-facing text are derived from it.
    """
    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        if self._status_code is not None:
            return self._status_code
        return _STATUS_CODES[self.kind]

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES.get(self.kind) or self.message


class InvalidRequest(DirectionsError):
    kind = ErrorKind.INVALID_REQUEST


class NotFound(DirectionsError):
    kind = ErrorKind.NOT_FOUND


class ProviderError(DirectionsError):
    kind = ErrorKind.PROVIDER_ERROR


class NoRouteFound(DirectionsError):
    kind = ErrorKind.NO_ROUTE

    def __init__(self, provider_message: str, *, status_code: Optional[int] = None):
        # keep the provider's wording verbatim for diagnostics
        super().__init__(f"OSRM error: {provider_message}", status_code=status_code)
        self.provider_message = provider_message


class TransportFailure(DirectionsError):
    kind = ErrorKind.NETWORK

    def __init__(self, message: str, *, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out
        if timed_out:
            self.kind = ErrorKind.TIMEOUT
