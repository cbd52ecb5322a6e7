from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


class MachineState(Enum):
    RUNNING = "running"
    BLOCKED = "blocked"
    HALTED = "halted"


@dataclass(frozen=True)
class StateChanged:
    """Emitted whenever the machine moves between states."""

    previous: MachineState
    current: MachineState
    pointer: int
    steps: int


@dataclass(frozen=True)
class MachineSnapshot:
    memory: Sequence[int]
    pointer: int
    relative_base: int
    state: MachineState
    pending_input: Sequence[int] = field(default_factory=tuple)
    pending_output: Sequence[int] = field(default_factory=tuple)
    steps: int = 0


def format_event(event: object) -> str:
    if isinstance(event, StateChanged):
        return (
            f"{event.previous.value} -> {event.current.value} "
            f"ip={event.pointer} steps={event.steps}"
        )
    return str(event)


__all__ = ["MachineSnapshot", "MachineState", "StateChanged", "format_event"]
