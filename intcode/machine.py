from __future__ import annotations

import logging
import pathlib
from typing import Iterable, List, Optional, Union

from .bytecode import ARITY, Instruction, Opcode, Parameter, ParameterMode
from .decoder import decode
from .loader import parse_program, read_program
from .memory import DEFAULT_MEMORY_LIMIT, IOQueue, Memory
from .vm_errors import (
    ImmediateModeStorage,
    InputExhausted,
    NegativeAddress,
    OperationalError,
    StepLimitExceeded,
)
from .vm_events import MachineSnapshot, MachineState, StateChanged

logger = logging.getLogger(__name__)


class Machine:
    """Intcode machine: flat self-modifying memory plus input/output queues.

    `run` executes until the machine either needs input it does not have
    (BLOCKED) or executes a HALT (HALTED). Callers push input, run, and drain
    output; blocking is a returned state, never a suspended thread.
    """

    def __init__(self, program: Iterable[int], *, memory_limit: Optional[int] = DEFAULT_MEMORY_LIMIT):
        self.memory = Memory(program, limit=memory_limit)
        self.inputs = IOQueue()
        self.outputs = IOQueue()
        self._pointer = 0
        self._relative_base = 0
        self._state = MachineState.RUNNING
        self._steps = 0
        self.fault: Optional[OperationalError] = None
        self.last_instruction: Optional[Instruction] = None
        self._event_buffer: List[StateChanged] = []
        # Opcode dispatch table; must cover every opcode
        self._handlers = {
            Opcode.ADD: self._op_ADD,
            Opcode.MUL: self._op_MUL,
            Opcode.INPUT: self._op_INPUT,
            Opcode.OUTPUT: self._op_OUTPUT,
            Opcode.JUMP_IF_TRUE: self._op_JUMP_IF_TRUE,
            Opcode.JUMP_IF_FALSE: self._op_JUMP_IF_FALSE,
            Opcode.LESS_THAN: self._op_LESS_THAN,
            Opcode.EQUALS: self._op_EQUALS,
            Opcode.ADJUST_RELATIVE_BASE: self._op_ADJUST_RELATIVE_BASE,
            Opcode.HALT: self._op_HALT,
        }
        assert set(self._handlers) == set(Opcode) == set(ARITY)

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "Machine":
        return cls(parse_program(text), **kwargs)

    @classmethod
    def from_file(cls, path: Union[str, pathlib.Path], **kwargs) -> "Machine":
        return cls(read_program(path), **kwargs)

    # -------------------- Caller-facing API --------------------
    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def relative_base(self) -> int:
        return self._relative_base

    @property
    def steps(self) -> int:
        return self._steps

    def push(self, value: int) -> None:
        self.inputs.append(value)
        if self._state is MachineState.BLOCKED:
            self._transition(MachineState.RUNNING)

    def push_many(self, values: Iterable[int]) -> None:
        for value in values:
            self.push(value)

    def drain(self) -> List[int]:
        return self.outputs.drain()

    def peek(self) -> int:
        return len(self.outputs)

    def pending_input(self) -> int:
        return len(self.inputs)

    def read_cell(self, address: int) -> int:
        return self.memory.load(address)

    def write_cell(self, address: int, value: int) -> None:
        self.memory.store(address, value)

    def dump(self) -> List[int]:
        return self.memory.dump()

    def duplicate(self) -> "Machine":
        """Independent copy of memory and registers with fresh, empty queues."""
        clone = type(self)(self.memory.dump(), memory_limit=self.memory.limit)
        clone._pointer = self._pointer
        clone._relative_base = self._relative_base
        clone._state = self._state
        clone._steps = self._steps
        clone.fault = self.fault
        return clone

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            memory=tuple(self.memory),
            pointer=self._pointer,
            relative_base=self._relative_base,
            state=self._state,
            pending_input=tuple(self.inputs.pending()),
            pending_output=tuple(self.outputs.pending()),
            steps=self._steps,
        )

    @classmethod
    def from_snapshot(
        cls, snapshot: MachineSnapshot, *, memory_limit: Optional[int] = DEFAULT_MEMORY_LIMIT
    ) -> "Machine":
        machine = cls(snapshot.memory, memory_limit=memory_limit)
        machine._pointer = snapshot.pointer
        machine._relative_base = snapshot.relative_base
        machine._state = snapshot.state
        machine._steps = snapshot.steps
        machine.inputs.extend(snapshot.pending_input)
        machine.outputs.extend(snapshot.pending_output)
        return machine

    def drain_events(self) -> List[StateChanged]:
        events = list(self._event_buffer)
        self._event_buffer.clear()
        return events

    # -------------------- Run loop --------------------
    def step(self) -> MachineState:
        """Executes a single instruction and returns the resulting state."""
        if self.fault is not None:
            raise self.fault
        if self._state is MachineState.HALTED:
            return self._state

        mark = len(self.memory)
        try:
            instruction = decode(self.memory, self._pointer)
            control = self._handlers[instruction.opcode](instruction)
        except OperationalError as exc:
            self.memory.rollback(mark)
            if exc.pointer is None:
                exc.pointer = self._pointer
            self.fault = exc
            logger.debug("machine faulted at ip=%d: %s", self._pointer, exc)
            raise

        if control == "block":
            self._transition(MachineState.BLOCKED)
            return self._state

        self.last_instruction = instruction
        self._steps += 1
        if control == "halt":
            self._transition(MachineState.HALTED)
            return self._state
        if control != "jump":
            self._pointer += instruction.size
        if self._state is MachineState.BLOCKED:
            self._transition(MachineState.RUNNING)
        return self._state

    def run(self, debug: bool = False) -> MachineState:
        while True:
            executed = self._steps
            state = self.step()
            if debug and self._steps != executed:
                logger.debug(
                    "[IP=%d] EXEC: %s  RB=%d  OUT=%d",
                    self.last_instruction.address,
                    self.last_instruction,
                    self._relative_base,
                    len(self.outputs),
                )
            if state is not MachineState.RUNNING:
                return state

    def run_to_halt(self, max_steps: Optional[int] = None) -> "Machine":
        """Run until HALT; blocking on missing input is an error here."""
        budget_start = self._steps
        while self._state is not MachineState.HALTED:
            if max_steps is not None and self._steps - budget_start >= max_steps:
                raise StepLimitExceeded(max_steps, pointer=self._pointer)
            if self.step() is MachineState.BLOCKED:
                raise InputExhausted(pointer=self._pointer)
        return self

    # -------------------- Operand resolution --------------------
    def _address(self, param: Parameter) -> int:
        if param.mode is ParameterMode.RELATIVE:
            return self.memory.check(self._relative_base + param.value)
        return self.memory.check(param.value)

    def _read(self, param: Parameter) -> int:
        if param.mode is ParameterMode.IMMEDIATE:
            return param.value
        return self.memory.load(self._address(param))

    def _target(self, instruction: Instruction, param: Parameter) -> int:
        if param.mode is ParameterMode.IMMEDIATE:
            raise ImmediateModeStorage(instruction.opcode.name, pointer=instruction.address)
        return self._address(param)

    def _transition(self, new_state: MachineState) -> None:
        if new_state is self._state:
            return
        event = StateChanged(self._state, new_state, self._pointer, self._steps)
        self._event_buffer.append(event)
        logger.debug("machine %s -> %s at ip=%d", self._state.value, new_state.value, self._pointer)
        self._state = new_state

    # -------------------- Opcode handlers --------------------
    # Each handler validates every address before its single mutation.
    def _op_ADD(self, inst: Instruction):
        left, right, dst = inst.params
        target = self._target(inst, dst)
        self.memory.store(target, self._read(left) + self._read(right))

    def _op_MUL(self, inst: Instruction):
        left, right, dst = inst.params
        target = self._target(inst, dst)
        self.memory.store(target, self._read(left) * self._read(right))

    def _op_INPUT(self, inst: Instruction):
        (dst,) = inst.params
        target = self._target(inst, dst)
        if not self.inputs:
            return "block"
        self.memory.store(target, self.inputs.pop())

    def _op_OUTPUT(self, inst: Instruction):
        (src,) = inst.params
        self.outputs.append(self._read(src))

    def _jump(self, condition: bool, target_param: Parameter):
        if not condition:
            return None
        target = self._read(target_param)
        if target < 0:
            raise NegativeAddress(target)
        self._pointer = target
        return "jump"

    def _op_JUMP_IF_TRUE(self, inst: Instruction):
        cond, target = inst.params
        return self._jump(self._read(cond) != 0, target)

    def _op_JUMP_IF_FALSE(self, inst: Instruction):
        cond, target = inst.params
        return self._jump(self._read(cond) == 0, target)

    def _op_LESS_THAN(self, inst: Instruction):
        left, right, dst = inst.params
        target = self._target(inst, dst)
        self.memory.store(target, 1 if self._read(left) < self._read(right) else 0)

    def _op_EQUALS(self, inst: Instruction):
        left, right, dst = inst.params
        target = self._target(inst, dst)
        self.memory.store(target, 1 if self._read(left) == self._read(right) else 0)

    def _op_ADJUST_RELATIVE_BASE(self, inst: Instruction):
        (delta,) = inst.params
        self._relative_base += self._read(delta)

    def _op_HALT(self, inst: Instruction):
        return "halt"

    def __repr__(self):
        return (
            f"Machine(state={self._state.value}, ip={self._pointer}, "
            f"rb={self._relative_base}, memory={len(self.memory)})"
        )


__all__ = ["Machine"]
