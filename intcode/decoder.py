from __future__ import annotations

from typing import List

from .bytecode import ARITY, Instruction, Opcode, Parameter, ParameterMode
from .memory import Memory
from .vm_errors import (
    InvalidOpcode,
    InvalidParameterMode,
    NegativeInstruction,
    OutOfRange,
    TooManyParameterModes,
)


def split_modes(word: int, arity: int, *, pointer: int) -> List[ParameterMode]:
    """Return one mode per parameter, least significant digit first."""
    digits: List[int] = []
    remaining = word // 100
    while remaining:
        digits.append(remaining % 10)
        remaining //= 10
    if len(digits) > arity:
        raise TooManyParameterModes(word, arity, pointer=pointer)

    modes = []
    for digit in digits:
        try:
            modes.append(ParameterMode(digit))
        except ValueError:
            raise InvalidParameterMode(digit, pointer=pointer) from None
    modes.extend([ParameterMode.POSITIONAL] * (arity - len(modes)))
    return modes


def decode(memory: Memory, pointer: int) -> Instruction:
    if pointer >= len(memory):
        raise OutOfRange(pointer, None, pointer=pointer)

    word = memory.load(pointer)
    if word < 0:
        raise NegativeInstruction(word, pointer=pointer)
    try:
        opcode = Opcode(word % 100)
    except ValueError:
        raise InvalidOpcode(word % 100, pointer=pointer) from None

    arity = ARITY[opcode]
    modes = split_modes(word, arity, pointer=pointer)
    params = tuple(
        Parameter(memory.load(pointer + offset + 1), mode) for offset, mode in enumerate(modes)
    )
    return Instruction(opcode, params, pointer)


__all__ = ["decode", "split_modes"]
