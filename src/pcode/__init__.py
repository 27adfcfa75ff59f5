"""P-code: a small stack machine for packed, pre-compiled bytecode."""

#makes package exports explicit for downstream imports
from . import cli, disasm, errors, instruction, opcodes, program, stack, vm

__all__ = [
    "cli",
    "disasm",
    "errors",
    "instruction",
    "opcodes",
    "program",
    "stack",
    "vm",
]
