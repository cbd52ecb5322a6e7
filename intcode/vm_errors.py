from __future__ import annotations

from typing import Optional


class IntcodeError(RuntimeError):
    """Base error for everything raised by the Intcode machine."""

    def __init__(self, message: str, *, pointer: Optional[int] = None):
        super().__init__(message)
        self.pointer = pointer


class ParseError(IntcodeError):
    """Malformed program text."""


class NotAnInteger(ParseError):
    def __init__(self, token: str, position: int):
        super().__init__(f"Opcodes must be integer, not: {token!r} (token {position}).")
        self.token = token
        self.position = position


class OperationalError(IntcodeError):
    """Raised while decoding or executing an instruction."""


class InvalidOpcode(OperationalError):
    def __init__(self, opcode: int, *, pointer: int):
        super().__init__(f"{opcode} is not a known opcode.", pointer=pointer)
        self.opcode = opcode


class InvalidParameterMode(OperationalError):
    def __init__(self, mode: int, *, pointer: int):
        super().__init__(f"{mode} is not a known parameter mode.", pointer=pointer)
        self.mode = mode


class TooManyParameterModes(OperationalError):
    def __init__(self, word: int, arity: int, *, pointer: int):
        super().__init__(
            f"Instruction {word} encodes more parameter modes than its {arity} parameter(s).",
            pointer=pointer,
        )
        self.word = word
        self.arity = arity


class NegativeInstruction(OperationalError):
    def __init__(self, word: int, *, pointer: int):
        super().__init__(f"Instruction word {word} is negative.", pointer=pointer)
        self.word = word


class NegativeAddress(OperationalError):
    def __init__(self, address: int, *, pointer: Optional[int] = None):
        super().__init__(f"Address {address} is negative.", pointer=pointer)
        self.address = address


class OutOfRange(OperationalError):
    def __init__(self, address: int, limit: Optional[int], *, pointer: Optional[int] = None):
        if limit is None:
            message = f"Index {address} is outside this machine's memory."
        else:
            message = f"Index {address} is outside this machine's memory (limit {limit})."
        super().__init__(message, pointer=pointer)
        self.address = address
        self.limit = limit


class ImmediateModeStorage(OperationalError):
    def __init__(self, opcode_name: str, *, pointer: int):
        super().__init__(f"{opcode_name} cannot store to an immediate-mode parameter.", pointer=pointer)
        self.opcode_name = opcode_name


class InputExhausted(IntcodeError):
    """The machine blocked on input where the caller required it to halt."""

    def __init__(self, *, pointer: int):
        super().__init__("Machine is waiting for input that was never supplied.", pointer=pointer)


class StepLimitExceeded(IntcodeError):
    """A driver loop ran past its configured step budget."""

    def __init__(self, max_steps: int, *, pointer: Optional[int] = None):
        super().__init__(f"Exceeded the limit of {max_steps} steps.", pointer=pointer)
        self.max_steps = max_steps


def format_error(error: IntcodeError) -> str:
    if error.pointer is None:
        return str(error)
    return f"ip={error.pointer}: {error}"


__all__ = [
    "IntcodeError",
    "ParseError",
    "NotAnInteger",
    "OperationalError",
    "InvalidOpcode",
    "InvalidParameterMode",
    "TooManyParameterModes",
    "NegativeInstruction",
    "NegativeAddress",
    "OutOfRange",
    "ImmediateModeStorage",
    "InputExhausted",
    "StepLimitExceeded",
    "format_error",
]
