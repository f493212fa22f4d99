"""Typed results of an HTTP call made through the transport."""

from dataclasses import dataclass
from typing import Any, Optional

from common.exceptions import (
    ClientRequestError,
    GENERIC_ERROR_MESSAGE,
    PermissionDenied,
    TransportError,
)


@dataclass(frozen=True)
class Ok:
    """2xx response with its parsed body."""

    payload: Any = None
    ok: bool = True


@dataclass(frozen=True)
class ClientError:
    """4xx response other than 403."""

    status: int
    message: str = GENERIC_ERROR_MESSAGE
    server_message: Optional[str] = None
    ok: bool = False


@dataclass(frozen=True)
class Forbidden:
    """403 response."""

    status: int = 403
    ok: bool = False


@dataclass(frozen=True)
class NetworkOrServerError:
    """Network failure, 5xx, or a response that could not be understood."""

    detail: str = GENERIC_ERROR_MESSAGE
    status: Optional[int] = None
    ok: bool = False


Outcome = Ok | ClientError | Forbidden | NetworkOrServerError


def map_outcome(outcome: Outcome, func) -> Outcome:
    """Apply func to the payload of an Ok outcome, pass failures through."""
    if isinstance(outcome, Ok):
        return Ok(func(outcome.payload))
    return outcome


def raise_for_outcome(outcome: Outcome) -> Any:
    """
    Convert a failure outcome into its exception.

    Args:
        outcome: Result of a transport call

    Returns:
        The payload of an Ok outcome

    Raises:
        ClientRequestError: For ClientError
        PermissionDenied: For Forbidden
        TransportError: For NetworkOrServerError
    """
    if isinstance(outcome, Ok):
        return outcome.payload
    if isinstance(outcome, ClientError):
        raise ClientRequestError(outcome.status, outcome.message)
    if isinstance(outcome, Forbidden):
        raise PermissionDenied("Access forbidden")
    raise TransportError(outcome.detail)
