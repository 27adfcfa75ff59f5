"""Command-line entry point for the P-code machine."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .disasm import disassemble, format_stack_dump
from .errors import PCodeError
from .instruction import Instruction
from .opcodes import Command, Operation
from .program import Program
from .stack import Stack
from .vm import DEFAULT_STACK_SIZE, ExecutionResult, Failed, interpret

#the sample shipped with the machine: 2 / (512 + 1024), never empties the stack
SAMPLE_PROGRAM = Program.from_instructions(
    [
        Instruction(Command.LIT, 0x002),
        Instruction(Command.LIT, 0x200),
        Instruction(Command.LIT, 0x400),
        Instruction.op(Operation.ADD),
        Instruction.op(Operation.DIV),
    ]
)


#loads a JSON bytecode artifact back into a code buffer
def load_program(path: Path) -> Program:
    data = json.loads(path.read_text())
    return Program.from_dict(data)


#normalizes JSON output for reproducible storage
def save_program(program: Program, path: Path) -> None:
    data = program.to_dict()
    path.write_text(json.dumps(data, indent=2))


#prints the outcome; failures go to stderr together with the stack dump
def report(result: ExecutionResult) -> int:
    if isinstance(result, Failed):
        print(f"breaking with: {result.error}", file=sys.stderr)
        print(format_stack_dump(result.error.snapshot), file=sys.stderr)
        return 1
    print(f"halted after {result.steps} steps")
    return 0


def execute(program: Program, stack_size: int, trace: bool, max_steps: Optional[int]) -> int:
    stack = Stack.with_capacity(stack_size)
    result = interpret(program.code, stack, trace=trace, max_steps=max_steps)
    return report(result)


#handles the `pcode run` subcommand
def cmd_run(args: argparse.Namespace) -> int:
    program = load_program(Path(args.program))
    return execute(program, args.stack_size, args.trace, args.max_steps)


#prints a human-readable view of the code buffer
def cmd_disasm(args: argparse.Namespace) -> int:
    program = load_program(Path(args.program))
    print(disassemble(program.code))
    return 0


#runs or exports the built-in sample program
def cmd_demo(args: argparse.Namespace) -> int:
    if args.output:
        save_program(SAMPLE_PROGRAM, Path(args.output))
        return 0
    return execute(SAMPLE_PROGRAM, DEFAULT_STACK_SIZE, args.trace, None)


def _count(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


#configures the CLI surface across run/disasm/demo
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pcode", description="P-code virtual machine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_run = subparsers.add_parser("run", help="execute a bytecode JSON file")
    p_run.add_argument("program", help="path to bytecode JSON")
    p_run.add_argument(
        "-s",
        "--stack-size",
        type=_count,
        default=DEFAULT_STACK_SIZE,
        help=f"stack capacity in slots (default {DEFAULT_STACK_SIZE})",
    )
    p_run.add_argument("--max-steps", type=_count, help="stop after this many instructions")
    p_run.add_argument("--trace", action="store_true", help="print VM trace while executing")
    p_run.set_defaults(func=cmd_run)

    p_dis = subparsers.add_parser("disasm", help="disassemble a bytecode JSON file")
    p_dis.add_argument("program", help="path to bytecode JSON")
    p_dis.set_defaults(func=cmd_disasm)

    p_demo = subparsers.add_parser("demo", help="run the built-in sample program")
    p_demo.add_argument("-o", "--output", help="write the sample as bytecode JSON instead of running it")
    p_demo.add_argument("--trace", action="store_true", help="print VM trace while executing")
    p_demo.set_defaults(func=cmd_demo)

    return parser


#entry point used by both console script and module execution
def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError, PCodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
