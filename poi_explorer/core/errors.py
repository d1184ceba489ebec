from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ErrorKind(str, Enum):
    INPUT_EMPTY = "input_empty"
    TRANSPORT = "transport"
    DECODE = "decode"
    AUTHENTICATION = "authentication"
    TIMEOUT = "timeout"


class SearchError(Exception):
    """Base failure raised by the transport and the response projections."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class TransportFailure(SearchError):
    kind = ErrorKind.TRANSPORT


class AuthenticationFailure(TransportFailure):
    kind = ErrorKind.AUTHENTICATION


class TimeoutFailure(TransportFailure):
    kind = ErrorKind.TIMEOUT


class DecodeFailure(SearchError):
    kind = ErrorKind.DECODE


class SearchOutcome(BaseModel, Generic[T]):
    """
    Tagged result of a query: either a value or the kind of failure.
    Callers that do not care collapse failures with `unwrap_or`.
    """

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    # Category aggregation only: more buckets existed than were fetched
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value, truncated: bool = False):
        return cls(value=value, truncated=truncated)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str = ""):
        return cls(error=kind, message=message)

    def unwrap_or(self, default):
        return self.value if self.ok else default
