"""Code buffer helpers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .errors import ProgramFormatError
from .instruction import WORD_MASK, Instruction, decode, encode, to_int32


#holds the packed words a machine executes, addressed from zero
@dataclass(slots=True)
class Program:
    code: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.code)

    def emit(self, instruction: Instruction) -> int:
        """Append ``instruction`` and return its code address."""

        self.code.append(encode(instruction))
        return len(self.code) - 1

    #rewrites an already emitted word, e.g. once a jump target is known
    def patch(self, address: int, instruction: Instruction) -> None:
        self.code[address] = encode(instruction)

    def instructions(self) -> List[Instruction]:
        return [decode(word) for word in self.code]

    @classmethod
    def from_instructions(cls, instructions: Iterable[Instruction]) -> Program:
        return cls(code=[encode(instruction) for instruction in instructions])

    def to_dict(self) -> Dict[str, Any]:
        return {"code": [int(word) for word in self.code]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Program:
        try:
            words = [int(x) for x in data["code"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise ProgramFormatError(f"malformed program: {exc!r}") from exc
        for address, word in enumerate(words):
            if word < -(WORD_MASK // 2 + 1) or word > WORD_MASK:
                raise ProgramFormatError(f"word at {address} does not fit in 32 bits: {word}")
        return cls(code=[to_int32(word) for word in words])


__all__ = ["Program"]
