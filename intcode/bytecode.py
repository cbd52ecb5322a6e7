from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple


class Opcode(Enum):
    ADD = 1                   # ADD a, b, dst
    MUL = 2                   # MUL a, b, dst
    INPUT = 3                 # INPUT dst
    OUTPUT = 4                # OUTPUT src
    JUMP_IF_TRUE = 5          # JUMP_IF_TRUE cond, target
    JUMP_IF_FALSE = 6         # JUMP_IF_FALSE cond, target
    LESS_THAN = 7             # LESS_THAN a, b, dst
    EQUALS = 8                # EQUALS a, b, dst
    ADJUST_RELATIVE_BASE = 9  # ADJUST_RELATIVE_BASE delta
    HALT = 99


class ParameterMode(Enum):
    POSITIONAL = 0
    IMMEDIATE = 1
    RELATIVE = 2


ARITY: Dict[Opcode, int] = {
    Opcode.ADD: 3,
    Opcode.MUL: 3,
    Opcode.INPUT: 1,
    Opcode.OUTPUT: 1,
    Opcode.JUMP_IF_TRUE: 2,
    Opcode.JUMP_IF_FALSE: 2,
    Opcode.LESS_THAN: 3,
    Opcode.EQUALS: 3,
    Opcode.ADJUST_RELATIVE_BASE: 1,
    Opcode.HALT: 0,
}

# Index of the parameter each opcode stores into.
WRITE_PARAMETER: Dict[Opcode, int] = {
    Opcode.ADD: 2,
    Opcode.MUL: 2,
    Opcode.INPUT: 0,
    Opcode.LESS_THAN: 2,
    Opcode.EQUALS: 2,
}

JUMP_OPCODES: FrozenSet[Opcode] = frozenset({Opcode.JUMP_IF_TRUE, Opcode.JUMP_IF_FALSE})

_MODE_MARKERS = {
    ParameterMode.POSITIONAL: "[{}]",
    ParameterMode.IMMEDIATE: "#{}",
    ParameterMode.RELATIVE: "@{}",
}


@dataclass(frozen=True)
class Parameter:
    value: int
    mode: ParameterMode

    def __str__(self):
        return _MODE_MARKERS[self.mode].format(self.value)


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    params: Tuple[Parameter, ...]
    address: int

    @property
    def size(self) -> int:
        return ARITY[self.opcode] + 1

    def __str__(self):
        if not self.params:
            return self.opcode.name
        return f"{self.opcode.name} {' '.join(map(str, self.params))}"


__all__ = [
    "ARITY",
    "Instruction",
    "JUMP_OPCODES",
    "Opcode",
    "Parameter",
    "ParameterMode",
    "WRITE_PARAMETER",
]
