"""Packed instruction words and their decoded form.

A word is a signed 32-bit integer laid out as::

    31                              8 7        4 3        0
    +--------------------------------+----------+----------+
    |        value (24-bit signed)   | command  |  level   |
    +--------------------------------+----------+----------+

``value`` is sign-extended explicitly when decoding, so negative operands
round-trip exactly regardless of how the word was spelled (signed or
unsigned 32-bit).
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidCommand
from .opcodes import MAX_COMMAND, Command, Operation

WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1

LEVEL_SHIFT = 0
LEVEL_BITS = 4
LEVEL_MASK = (1 << LEVEL_BITS) - 1

COMMAND_SHIFT = 4
COMMAND_BITS = 4
COMMAND_MASK = (1 << COMMAND_BITS) - 1

VALUE_SHIFT = 8
VALUE_BITS = 24
VALUE_MASK = (1 << VALUE_BITS) - 1

MAX_LEVEL = LEVEL_MASK
MIN_VALUE = -(1 << (VALUE_BITS - 1))
MAX_VALUE = (1 << (VALUE_BITS - 1)) - 1


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low ``bits`` of ``value`` as a two's-complement number."""

    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int onto the signed 32-bit range."""

    return sign_extend(value, WORD_BITS)


#structured view of one packed word
@dataclass(frozen=True, slots=True)
class Instruction:
    command: Command
    value: int = 0
    level: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", Command(self.command))
        if not 0 <= self.level <= MAX_LEVEL:
            raise ValueError(f"level must be 0-{MAX_LEVEL}, got {self.level}")
        if not MIN_VALUE <= self.value <= MAX_VALUE:
            raise ValueError(f"value must be {MIN_VALUE}-{MAX_VALUE}, got {self.value}")

    @classmethod
    def op(cls, operation: Operation) -> Instruction:
        """Build the OPR instruction that performs ``operation``."""

        return cls(Command.OPR, int(operation))

    def __str__(self) -> str:
        return f"{self.command.name.lower()} {self.level} {self.value}"


def encode(instruction: Instruction) -> int:
    """Pack ``instruction`` into a signed 32-bit word."""

    word = (
        ((instruction.value & VALUE_MASK) << VALUE_SHIFT)
        | (int(instruction.command) << COMMAND_SHIFT)
        | (instruction.level << LEVEL_SHIFT)
    )
    return to_int32(word)


def decode(word: int) -> Instruction:
    """Unpack a word, failing on command ordinals outside the known set."""

    word &= WORD_MASK
    ordinal = (word >> COMMAND_SHIFT) & COMMAND_MASK
    if ordinal > MAX_COMMAND:
        raise InvalidCommand(f"unknown command {ordinal}")
    return Instruction(
        command=Command(ordinal),
        value=sign_extend(word >> VALUE_SHIFT, VALUE_BITS),
        level=(word >> LEVEL_SHIFT) & LEVEL_MASK,
    )


__all__ = [
    "Instruction",
    "MAX_LEVEL",
    "MAX_VALUE",
    "MIN_VALUE",
    "decode",
    "encode",
    "sign_extend",
    "to_int32",
]
