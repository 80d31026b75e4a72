# src/quokka/engine/validate.py

"""
Outcome types shared by the engine.

Every engine operation that can fail on user input or stored data
returns a `Result` instead of raising. The caller (session / CLI)
inspects the outcome and decides how to report it.

Failure kinds:
- VALIDATION          missing/empty field, malformed deadline/event syntax
- INDEX               index argument is not a positive integer
- INDEX_OUT_OF_RANGE  index outside [1, size]
- CAPACITY_EXCEEDED   add beyond the list capacity
- CORRUPT_RECORD      unparseable stored line
- IO_FAILURE          store cannot be read or written
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------
# Failure
# ---------------------------------------------------------------------

class FailureKind(str, Enum):
    VALIDATION = "validation"
    INDEX = "index"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    CORRUPT_RECORD = "corrupt_record"
    IO_FAILURE = "io_failure"


@dataclass(frozen=True, slots=True)
class Failure:
    """
    A single named failure.

    `kind` is a stable identifier suitable for tests and future filtering.
    """

    kind: FailureKind
    message: str

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Success value or named failure, never both.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: FailureKind, message: str) -> "Result[T]":
        return cls(failure=Failure(kind=kind, message=message))

    def unwrap(self) -> T:
        """
        Return the value, or raise ValueError carrying the failure message.

        Intended for call sites that have already checked `ok`.
        """
        if self.failure is not None:
            raise ValueError(self.failure.message)
        return self.value  # type: ignore[return-value]
