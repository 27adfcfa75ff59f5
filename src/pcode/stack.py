"""Fixed-capacity stack of signed 32-bit integers."""
from __future__ import annotations

from array import array
from typing import Callable, Iterator, MutableSequence, Tuple

from .errors import InsufficientOperands, OutOfBounds, StackOverflow, StackUnderflow
from .instruction import to_int32


#the machine's only memory: operands, locals and call frames share it
class Stack:
    """A bounded stack over caller-supplied storage.

    The capacity is the length of ``storage`` and never changes. Only the
    first ``size`` cells are live; cells above the cursor keep whatever was
    last written to them, which is what ``resize`` exposes when it grows.
    """

    def __init__(self, storage: MutableSequence[int]) -> None:
        self._cells = storage
        self._size = 0

    @classmethod
    def with_capacity(cls, capacity: int) -> Stack:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        return cls(array("i", [0]) * capacity)

    @property
    def capacity(self) -> int:
        return len(self._cells)

    @property
    def size(self) -> int:
        return self._size

    @property
    def empty(self) -> bool:
        return self._size == 0

    @property
    def full(self) -> bool:
        return self._size >= self.capacity

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"Stack(size={self._size}, capacity={self.capacity}, cells={list(self.snapshot())})"

    def push(self, value: int) -> None:
        if self.full:
            raise StackOverflow("stack overflow")
        self._cells[self._size] = to_int32(value)
        self._size += 1

    def pop(self) -> int:
        if self.empty:
            raise StackUnderflow("stack underflow")
        self._size -= 1
        return self._cells[self._size]

    def top(self) -> int:
        if self.empty:
            raise StackUnderflow("stack underflow")
        return self._cells[self._size - 1]

    #single bounds check behind every indexed access
    def check_index(self, index: int) -> int:
        if index < 0 or index >= self._size:
            raise OutOfBounds(f"index {index} out of bounds")
        return index

    def __getitem__(self, index: int) -> int:
        return self._cells[self.check_index(index)]

    def __setitem__(self, index: int, value: int) -> None:
        self._cells[self.check_index(index)] = to_int32(value)

    def resize(self, delta: int) -> None:
        """Move the size cursor by ``delta`` without touching cell contents."""

        new_size = self._size + delta
        if delta < 0 and new_size < 0:
            raise StackUnderflow("remove too many elements")
        if delta > 0 and new_size > self.capacity:
            raise StackOverflow("add too many elements")
        self._size = new_size

    def apply1(self, fn: Callable[[int], int]) -> None:
        """Replace the top element with ``fn(top)``."""

        if self.empty:
            raise StackUnderflow("stack underflow")
        self._cells[self._size - 1] = to_int32(fn(self._cells[self._size - 1]))

    def apply2(self, fn: Callable[[int, int], int]) -> None:
        """Pop the top ``b`` and replace the new top ``a`` with ``fn(b, a)``."""

        if self._size < 2:
            raise InsufficientOperands("not two arguments for binary")
        #a failing fn leaves both operands in place
        result = to_int32(fn(self._cells[self._size - 1], self._cells[self._size - 2]))
        self._size -= 1
        self._cells[self._size - 1] = result

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._cells[: self._size])


__all__ = ["Stack"]
