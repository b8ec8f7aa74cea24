"""Classified failures and the outcome type returned by pipeline operations.

Non-fatal problems (a tool that failed, a page count that could not be read)
are returned to the caller as an ``Outcome`` holding the degraded value plus a
``Failure`` instead of being raised. Callers aggregate the failures onto the
result records and the run summary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class FailureKind(str, Enum):
    """Classification of non-fatal failures."""

    SOURCE_MISSING = "source_missing"
    EXTERNAL_TOOL_FAILURE = "external_tool_failure"
    INFO_QUERY_PARSE_FAILURE = "info_query_parse_failure"
    IO_FAILURE = "io_failure"


class Failure(BaseModel):
    """A classified failure of one operation on one subject."""

    kind: FailureKind
    operation: str
    message: str
    subject: Optional[str] = None

    def __str__(self) -> str:
        subject = f" [{self.subject}]" if self.subject else ""
        return f"{self.operation}{subject}: {self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Value of an operation, with the failure that degraded it if any."""

    value: T
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(
        cls,
        value: T,
        kind: FailureKind,
        operation: str,
        message: str,
        subject: Optional[str] = None,
    ) -> "Outcome[T]":
        """Build a failed outcome carrying the fallback ``value``."""
        return cls(
            value=value,
            failure=Failure(kind=kind, operation=operation, message=message, subject=subject),
        )
