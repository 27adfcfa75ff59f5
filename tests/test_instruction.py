import pytest

from pcode.errors import ErrorKind, InvalidCommand, InvalidOperation
from pcode.instruction import MAX_LEVEL, MAX_VALUE, MIN_VALUE, Instruction, decode, encode
from pcode.opcodes import Command, Operation, to_operation


#words follow the level | command << 4 | value << 8 layout
def test_encode_known_words() -> None:
    assert encode(Instruction(Command.LIT, 2)) == 0x200
    assert encode(Instruction.op(Operation.ADD)) == 0x210
    assert encode(Instruction(Command.LOD, 3, level=1)) == 0x321
    assert encode(Instruction(Command.JMP, 7)) == 0x770


#negative operands are sign-extended back out of the top 24 bits
def test_negative_value_round_trips() -> None:
    instruction = Instruction(Command.JMP, -1)
    word = encode(instruction)
    assert word == -144
    assert decode(word) == instruction
    assert decode(0xFFFFFF70) == instruction


#extremes of the level and value fields survive packing
@pytest.mark.parametrize(
    "instruction",
    [
        Instruction(Command.LIT, MAX_VALUE),
        Instruction(Command.LIT, MIN_VALUE),
        Instruction(Command.STO, -5, level=MAX_LEVEL),
        Instruction(Command.INC, 0, level=0),
        Instruction(Command.OPR, int(Operation.GE)),
    ],
)
def test_boundary_instructions_round_trip(instruction: Instruction) -> None:
    assert decode(encode(instruction)) == instruction


#packed words stay inside the signed 32-bit range
def test_encode_produces_signed_words() -> None:
    assert encode(Instruction(Command.LIT, MAX_VALUE)) == 0x7FFFFF00
    assert encode(Instruction(Command.LIT, MIN_VALUE)) == -(1 << 31)


#ordinals 8-15 are not commands and must not be masked into range
@pytest.mark.parametrize("word", [0x80, 0xF0, 0x12345690])
def test_decode_rejects_unknown_commands(word: int) -> None:
    with pytest.raises(InvalidCommand) as excinfo:
        decode(word)
    assert excinfo.value.kind is ErrorKind.INVALID_COMMAND


#operation selectors are only checked when the OPR executes
def test_decode_keeps_out_of_range_operation() -> None:
    instruction = decode(encode(Instruction(Command.OPR, 99)))
    assert instruction.command is Command.OPR
    assert instruction.value == 99


#instructions that cannot be packed are refused up front
def test_instruction_validates_fields() -> None:
    with pytest.raises(ValueError):
        Instruction(Command.LIT, MAX_VALUE + 1)
    with pytest.raises(ValueError):
        Instruction(Command.LIT, MIN_VALUE - 1)
    with pytest.raises(ValueError):
        Instruction(Command.LOD, 0, level=MAX_LEVEL + 1)
    with pytest.raises(ValueError):
        Instruction(9, 0)


#plain ints are accepted for the command and normalized to the enum
def test_instruction_normalizes_command() -> None:
    instruction = Instruction(4, 10)
    assert instruction.command is Command.CAL
    assert str(instruction) == "cal 0 10"


def test_to_operation() -> None:
    assert to_operation(0) is Operation.RETURN
    assert to_operation(5) is Operation.DIV
    assert to_operation(12) is Operation.GE
    for bad in (-1, 13):
        with pytest.raises(InvalidOperation):
            to_operation(bad)
