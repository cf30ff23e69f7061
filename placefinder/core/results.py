"""
Service outcomes.

Services return one of these values instead of raising for expected
outcomes; the HTTP layer maps them to status codes.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    message: str = "Not found"


@dataclass(frozen=True)
class InvalidArgument:
    message: str


@dataclass(frozen=True)
class Unauthenticated:
    message: str = "User not authenticated"


@dataclass(frozen=True)
class ServiceUnavailable:
    message: str = "Store unavailable"


Failure = Union[NotFound, InvalidArgument, Unauthenticated, ServiceUnavailable]
Result = Union[Ok[Any], Failure]
