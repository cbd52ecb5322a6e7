from .ascii import drain_text, push_line, push_text, run_script
from .bytecode import ARITY, Instruction, Opcode, Parameter, ParameterMode
from .decoder import decode
from .disassembler import disassemble, format_listing
from .loader import parse_program, read_program
from .machine import Machine
from .memory import DEFAULT_MEMORY_LIMIT, IOQueue, Memory
from .network import (
    NetworkError,
    RoundRobinScheduler,
    best_phase_setting,
    run_chain,
    run_feedback_loop,
    run_threaded_chain,
)
from .vm_errors import (
    ImmediateModeStorage,
    InputExhausted,
    IntcodeError,
    InvalidOpcode,
    InvalidParameterMode,
    NegativeAddress,
    NegativeInstruction,
    NotAnInteger,
    OperationalError,
    OutOfRange,
    ParseError,
    StepLimitExceeded,
    TooManyParameterModes,
)
from .vm_events import MachineSnapshot, MachineState, StateChanged

__all__ = [
    "Machine",
    "MachineState",
    "MachineSnapshot",
    "StateChanged",
    "Memory",
    "IOQueue",
    "DEFAULT_MEMORY_LIMIT",
    "Opcode",
    "ParameterMode",
    "Parameter",
    "Instruction",
    "ARITY",
    "decode",
    "parse_program",
    "read_program",
    "disassemble",
    "format_listing",
    "push_text",
    "push_line",
    "drain_text",
    "run_script",
    "RoundRobinScheduler",
    "NetworkError",
    "run_chain",
    "run_feedback_loop",
    "run_threaded_chain",
    "best_phase_setting",
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
]
