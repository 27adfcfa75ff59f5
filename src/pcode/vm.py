"""Decode/dispatch loop for packed P-code programs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from .errors import (
    DivideByZero,
    InvalidCommand,
    MachineError,
    NoCode,
    OutOfCodeSegment,
    StepLimitExceeded,
)
from .instruction import Instruction, decode
from .opcodes import Command, Operation, to_operation
from .stack import Stack

#slots in the demonstration harness's stack
DEFAULT_STACK_SIZE = 100


#walks `level` static links outward, then addresses `index` in that frame
def resolve_lexical(stack: Stack, frame_base: int, index: int, level: int) -> int:
    for _ in range(level):
        frame_base = stack[frame_base]
    return stack.check_index(frame_base + index)


#integer division truncating toward zero, as 32-bit machine code does
def _divide(a: int, b: int) -> int:
    if b == 0:
        raise DivideByZero("division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


#remainder takes the sign of the dividend
def _modulo(a: int, b: int) -> int:
    if b == 0:
        raise DivideByZero("modulo by zero")
    return a - b * _divide(a, b)


#written as (earlier operand, later operand): `lit A; lit B; sub` gives A - B
_BINARY_OPERATIONS: Dict[Operation, Callable[[int, int], int]] = {
    Operation.ADD: lambda a, b: a + b,
    Operation.SUB: lambda a, b: a - b,
    Operation.MUL: lambda a, b: a * b,
    Operation.DIV: _divide,
    Operation.MOD: _modulo,
    Operation.EQ: lambda a, b: int(a == b),
    Operation.NE: lambda a, b: int(a != b),
    Operation.LT: lambda a, b: int(a < b),
    Operation.GT: lambda a, b: int(a > b),
    Operation.LE: lambda a, b: int(a <= b),
    Operation.GE: lambda a, b: int(a >= b),
}


#executes one code buffer against one stack
class Machine:
    def __init__(self, code: Sequence[int], stack: Stack, trace: bool = False) -> None:
        if code is None or len(code) == 0:
            raise NoCode("no code to execute")
        self.code = code
        self.stack = stack
        self.trace = trace
        self.program_counter = 0
        self.frame_base = 0
        self.steps = 0
        self.halted = False

    #runs until the stack empties; a program that never empties it never returns
    def run(self) -> None:
        while not self.step():
            pass

    def step(self) -> bool:
        """Execute one instruction and report whether the machine halted.

        Any ``MachineError`` leaving this method carries the address of the
        failing instruction and a snapshot of the stack at that point.
        """

        if self.halted:
            return True
        address = self.program_counter
        instruction: Optional[Instruction] = None
        try:
            if not 0 <= address < len(self.code):
                raise OutOfCodeSegment("out of code segment")
            instruction = decode(self.code[address])
            self.program_counter += 1
            if self.trace:
                self._trace(address, instruction)
            self._execute(instruction)
        except MachineError as exc:
            exc.attach(address, instruction, self.stack.snapshot())
            raise
        self.steps += 1
        if self.stack.empty:
            self.halted = True
            if self.trace:
                self._log("halt")
        return self.halted

    def _execute(self, instruction: Instruction) -> None:
        command = instruction.command
        if command is Command.LIT:
            self.stack.push(instruction.value)
        elif command is Command.OPR:
            self._operate(to_operation(instruction.value))
        elif command is Command.LOD:
            slot = resolve_lexical(self.stack, self.frame_base, instruction.value, instruction.level)
            self.stack.push(self.stack[slot])
        elif command is Command.STO:
            value = self.stack.pop()
            slot = resolve_lexical(self.stack, self.frame_base, instruction.value, instruction.level)
            self.stack[slot] = value
        elif command is Command.CAL:
            self.stack.push(self.program_counter)
            self.stack.push(self.frame_base)
            self.frame_base = self.stack.size - 1
            self.program_counter = instruction.value
        elif command is Command.INC:
            self.stack.resize(instruction.value)
        elif command is Command.JPC:
            #jumps when the condition is true
            condition = self.stack.pop()
            if condition != 0:
                self.program_counter = instruction.value
        elif command is Command.JMP:
            self.program_counter = instruction.value
        else:
            raise InvalidCommand(f"unknown command {command}")

    def _operate(self, operation: Operation) -> None:
        if operation is Operation.RETURN:
            self.stack.resize(self.frame_base + 1 - self.stack.size)
            self.frame_base = self.stack.pop()
            self.program_counter = self.stack.pop()
        elif operation is Operation.NEG:
            self.stack.apply1(lambda a: -a)
        else:
            op = _BINARY_OPERATIONS[operation]
            #apply2 hands over the later operand first
            self.stack.apply2(lambda later, earlier: op(earlier, later))

    # Helpers -----------------------------------------------------------------

    #prints a concise view of the current instruction and stack tail
    def _trace(self, address: int, instruction: Instruction) -> None:
        tail = self.stack.snapshot()[-5:]
        prefix = "..." if self.stack.size > 5 else ""
        stack_preview = prefix + ",".join(str(v) for v in tail) if tail else "<empty>"
        self._log(
            f"pc={address:04} {instruction.command.name.lower()} "
            f"{instruction.level},{instruction.value} ref={self.frame_base} stack=[{stack_preview}]"
        )

    def _log(self, message: str) -> None:
        print(f"[trace] {message}")


#outcome of one interpret call; exactly one of Halted / Failed
@dataclass(frozen=True)
class ExecutionResult:
    """Base class for run outcomes - used as a union type."""

    stack: Stack
    steps: int


@dataclass(frozen=True)
class Halted(ExecutionResult):
    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Stack:
        return self.stack


@dataclass(frozen=True)
class Failed(ExecutionResult):
    error: MachineError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Stack:
        raise self.error


def interpret(
    code: Sequence[int],
    stack: Stack,
    *,
    trace: bool = False,
    max_steps: Optional[int] = None,
) -> ExecutionResult:
    """Run ``code`` on ``stack`` and report how the run ended.

    ``max_steps`` bounds the number of executed instructions; without it a
    program that never empties the stack keeps running.
    """

    if max_steps is not None and max_steps < 1:
        raise ValueError(f"max_steps must be at least 1, got {max_steps}")
    try:
        machine = Machine(code, stack, trace=trace)
    except NoCode as exc:
        return Failed(stack=stack, steps=0, error=exc.attach(None, None, stack.snapshot()))
    try:
        if max_steps is None:
            machine.run()
        else:
            _run_bounded(machine, max_steps)
    except MachineError as exc:
        return Failed(stack=stack, steps=machine.steps, error=exc)
    return Halted(stack=stack, steps=machine.steps)


def _run_bounded(machine: Machine, max_steps: int) -> None:
    while not machine.step():
        if machine.steps >= max_steps:
            raise StepLimitExceeded(f"step limit of {max_steps} reached").attach(
                machine.program_counter, None, machine.stack.snapshot()
            )


__all__ = [
    "DEFAULT_STACK_SIZE",
    "ExecutionResult",
    "Failed",
    "Halted",
    "Machine",
    "interpret",
    "resolve_lexical",
]
