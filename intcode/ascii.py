"""Helpers for programs that speak ASCII over the machine's I/O queues."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .machine import Machine
from .vm_events import MachineState

ASCII_MAX = 127


def push_text(machine: Machine, text: str) -> None:
    for char in text:
        code = ord(char)
        if code > ASCII_MAX:
            raise ValueError(f"{char!r} is not an ASCII character")
        machine.push(code)


def push_line(machine: Machine, line: str) -> None:
    push_text(machine, line.rstrip("\n") + "\n")


def drain_text(machine: Machine) -> Tuple[str, List[int]]:
    """Split drained output into printable text and any non-ASCII values.

    Programs typically report their final answer as a single large integer
    after a block of ASCII, so the extras are returned rather than dropped.
    """
    chars: List[str] = []
    extras: List[int] = []
    for value in machine.drain():
        if 0 <= value <= ASCII_MAX:
            chars.append(chr(value))
        else:
            extras.append(value)
    return "".join(chars), extras


def run_script(machine: Machine, commands: Iterable[str]) -> Tuple[str, List[int]]:
    """Feed one command per BLOCKED prompt and return the whole transcript."""
    transcript: List[str] = []
    extras: List[int] = []

    def collect() -> None:
        text, values = drain_text(machine)
        transcript.append(text)
        extras.extend(values)

    machine.run()
    collect()
    for command in commands:
        if machine.state is MachineState.HALTED:
            break
        push_line(machine, command)
        machine.run()
        collect()
    return "".join(transcript), extras


__all__ = ["ASCII_MAX", "drain_text", "push_line", "push_text", "run_script"]
