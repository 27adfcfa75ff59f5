"""Human-readable listings of code buffers and stack contents."""
from __future__ import annotations

from typing import Iterable, List, Sequence

from .errors import InvalidCommand
from .instruction import WORD_MASK, Instruction, decode
from .opcodes import JUMP_COMMANDS, LEXICAL_COMMANDS, MAX_OPERATION, Command, Operation


#nice string formatter used by CLI/tests for debugging
def disassemble(code: Sequence[int]) -> str:
    lines: List[str] = []
    for address, word in enumerate(code):
        raw = word & WORD_MASK
        try:
            instruction = decode(word)
        except InvalidCommand:
            lines.append(f"{address:04} {raw:08x} <invalid 0x{raw:08x}>")
            continue
        lines.append(f"{address:04} {raw:08x} {format_instruction(instruction)}")
    return "\n".join(lines)


#handles command-specific operand formatting
def format_instruction(instruction: Instruction) -> str:
    command = instruction.command
    mnemonic = command.name.lower()
    if command is Command.OPR:
        if 0 <= instruction.value <= MAX_OPERATION:
            return f"{mnemonic:<4} {Operation(instruction.value).name.lower()}"
        return f"{mnemonic:<4} <unknown operation {instruction.value}>"
    if command in LEXICAL_COMMANDS:
        return f"{mnemonic:<4} {instruction.level}, {instruction.value}"
    if command in JUMP_COMMANDS:
        return f"{mnemonic:<4} -> {instruction.value:04}"
    return f"{mnemonic:<4} {instruction.value}"


#one slot per line with its index, values as zero-padded 32-bit hex
def format_stack_dump(snapshot: Iterable[int]) -> str:
    lines = ["stack:"]
    for index, value in enumerate(snapshot):
        lines.append(f"\t{index}\t0x{value & WORD_MASK:08x}")
    return "\n".join(lines)


__all__ = ["disassemble", "format_instruction", "format_stack_dump"]
