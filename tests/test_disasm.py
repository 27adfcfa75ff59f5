from pcode.disasm import disassemble, format_instruction, format_stack_dump
from pcode.instruction import Instruction
from pcode.opcodes import Command, Operation
from pcode.program import Program


#each word is listed with its address, raw hex and mnemonic
def test_disassemble_sample_program() -> None:
    program = Program.from_instructions(
        [
            Instruction(Command.LIT, 2),
            Instruction(Command.LIT, 512),
            Instruction.op(Operation.ADD),
            Instruction.op(Operation.DIV),
        ]
    )
    assert disassemble(program.code).splitlines() == [
        "0000 00000200 lit  2",
        "0001 00020000 lit  512",
        "0002 00000210 opr  add",
        "0003 00000510 opr  div",
    ]


#lexical commands show their level, jumps show their target address
def test_format_operands() -> None:
    assert format_instruction(Instruction(Command.LOD, 3, level=1)) == "lod  1, 3"
    assert format_instruction(Instruction(Command.STO, -2, level=0)) == "sto  0, -2"
    assert format_instruction(Instruction(Command.JMP, 7)) == "jmp  -> 0007"
    assert format_instruction(Instruction(Command.CAL, 12)) == "cal  -> 0012"
    assert format_instruction(Instruction(Command.INC, 3)) == "inc  3"
    assert format_instruction(Instruction.op(Operation.RETURN)) == "opr  return"


#undecodable words and unknown operations are listed rather than rejected
def test_disassemble_invalid_words() -> None:
    code = [0x80, Program.from_instructions([Instruction(Command.OPR, 13)]).code[0]]
    assert disassemble(code).splitlines() == [
        "0000 00000080 <invalid 0x00000080>",
        "0001 00000d10 opr  <unknown operation 13>",
    ]


#dump renders the live stack as zero-padded two's-complement hex
def test_format_stack_dump() -> None:
    assert format_stack_dump((0x300, -1)) == "stack:\n\t0\t0x00000300\n\t1\t0xffffffff"
    assert format_stack_dump(()) == "stack:"
