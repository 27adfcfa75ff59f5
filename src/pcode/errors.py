"""Error taxonomy shared by the stack, the codec and the dispatcher."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .instruction import Instruction


#one entry per way a run can break
class ErrorKind(Enum):
    INVALID_COMMAND = "InvalidCommand"
    INVALID_OPERATION = "InvalidOperation"
    OUT_OF_CODE_SEGMENT = "OutOfCodeSegment"
    NO_CODE = "NoCode"
    OVERFLOW = "Overflow"
    UNDERFLOW = "Underflow"
    OUT_OF_BOUNDS = "OutOfBounds"
    INSUFFICIENT_OPERANDS = "InsufficientOperands"
    DIVIDE_BY_ZERO = "DivideByZero"
    STEP_LIMIT_EXCEEDED = "StepLimitExceeded"


#normalizes the base exception for all codec/VM layers
class PCodeError(Exception):
    """Base class for P-code related errors."""


#program files that cannot be turned into a code buffer
class ProgramFormatError(PCodeError):
    """Raised when a serialized program is malformed."""


#fatal failure of a single interpret run, with the point where it broke
class MachineError(PCodeError):
    """Raised when the machine cannot continue executing.

    The dispatcher fills in ``address``, ``instruction`` and ``snapshot``
    before the error leaves the current cycle, so callers can render a
    diagnostic without access to the machine itself.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.address: Optional[int] = None
        self.instruction: Optional["Instruction"] = None
        self.snapshot: Tuple[int, ...] = ()

    def attach(
        self,
        address: Optional[int],
        instruction: Optional["Instruction"],
        snapshot: Tuple[int, ...],
    ) -> "MachineError":
        """Record where the failure happened and return ``self``."""

        self.address = address
        self.instruction = instruction
        self.snapshot = snapshot
        return self

    def __str__(self) -> str:
        if self.address is None:
            return self.message
        return f"{self.message} (pc={self.address})"


class InvalidCommand(MachineError):
    kind = ErrorKind.INVALID_COMMAND


class InvalidOperation(MachineError):
    kind = ErrorKind.INVALID_OPERATION


class OutOfCodeSegment(MachineError):
    kind = ErrorKind.OUT_OF_CODE_SEGMENT


class NoCode(MachineError):
    kind = ErrorKind.NO_CODE


class StackOverflow(MachineError):
    kind = ErrorKind.OVERFLOW


class StackUnderflow(MachineError):
    kind = ErrorKind.UNDERFLOW


class OutOfBounds(MachineError):
    kind = ErrorKind.OUT_OF_BOUNDS


class InsufficientOperands(MachineError):
    kind = ErrorKind.INSUFFICIENT_OPERANDS


class DivideByZero(MachineError):
    kind = ErrorKind.DIVIDE_BY_ZERO


#raised only by the bounded interpret wrapper, never by the core loop
class StepLimitExceeded(MachineError):
    kind = ErrorKind.STEP_LIMIT_EXCEEDED


__all__ = [
    "DivideByZero",
    "ErrorKind",
    "InsufficientOperands",
    "InvalidCommand",
    "InvalidOperation",
    "MachineError",
    "NoCode",
    "OutOfBounds",
    "OutOfCodeSegment",
    "PCodeError",
    "ProgramFormatError",
    "StackOverflow",
    "StackUnderflow",
    "StepLimitExceeded",
]
