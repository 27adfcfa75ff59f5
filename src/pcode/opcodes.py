"""Command and operation definitions for the P-code machine."""
from __future__ import annotations

from enum import IntEnum

from .errors import InvalidOperation


#enumerates every command a packed word can carry, by ordinal
class Command(IntEnum):
    LIT = 0
    OPR = 1
    LOD = 2
    STO = 3
    CAL = 4
    INC = 5
    JPC = 6
    JMP = 7


#selects what an OPR instruction does with the top of the stack
class Operation(IntEnum):
    RETURN = 0
    NEG = 1
    ADD = 2
    SUB = 3
    MUL = 4
    DIV = 5
    MOD = 6
    EQ = 7
    NE = 8
    LT = 9
    GT = 10
    LE = 11
    GE = 12


MAX_COMMAND = max(Command)
MAX_OPERATION = max(Operation)


#commands whose level field addresses an outer frame
LEXICAL_COMMANDS = frozenset({Command.LOD, Command.STO})

#commands whose value is an absolute code address
JUMP_COMMANDS = frozenset({Command.CAL, Command.JPC, Command.JMP})


def to_operation(value: int) -> Operation:
    """Map an OPR operand onto its operation, rejecting unknown selectors."""

    if value < 0 or value > MAX_OPERATION:
        raise InvalidOperation(f"unknown operation {value}")
    return Operation(value)


__all__ = [
    "Command",
    "JUMP_COMMANDS",
    "LEXICAL_COMMANDS",
    "MAX_COMMAND",
    "MAX_OPERATION",
    "Operation",
    "to_operation",
]
