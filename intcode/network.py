"""Caller-side composition of several machines.

Two scheduling strategies are provided: single-threaded round-robin polling
that treats BLOCKED as a yield point, and one thread per machine exchanging
values through `queue.Queue`. Every participating machine is a private
duplicate of the base program; nothing is shared between them.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .machine import Machine
from .vm_errors import IntcodeError, StepLimitExceeded
from .vm_events import MachineState

logger = logging.getLogger(__name__)

_STOP = object()


class NetworkError(IntcodeError):
    pass


class RoundRobinScheduler:
    """Polls named machines in insertion order, routing outputs between them."""

    def __init__(self, max_steps: Optional[int] = None):
        self.machines: Dict[str, Machine] = {}
        self.routes: Dict[str, str] = {}
        self.collected: Dict[str, List[int]] = {}
        self.last_output: Dict[str, int] = {}
        self.max_steps = max_steps
        self.total_steps = 0

    def add(self, name: str, machine: Machine) -> Machine:
        if name in self.machines:
            raise ValueError(f"machine {name!r} already registered")
        self.machines[name] = machine
        self.collected[name] = []
        return machine

    def connect(self, source: str, destination: str) -> None:
        for name in (source, destination):
            if name not in self.machines:
                raise KeyError(name)
        self.routes[source] = destination

    def all_halted(self) -> bool:
        return all(m.state is MachineState.HALTED for m in self.machines.values())

    def _advance(self, machine: Machine) -> None:
        before = machine.steps
        if self.max_steps is None:
            machine.run()
        else:
            while machine.step() is MachineState.RUNNING:
                if self.total_steps + machine.steps - before >= self.max_steps:
                    self.total_steps += machine.steps - before
                    raise StepLimitExceeded(self.max_steps, pointer=machine.pointer)
        self.total_steps += machine.steps - before

    def poll(self) -> List[str]:
        """Give every live machine one `run`; return the names that produced output."""
        produced: List[str] = []
        for name, machine in self.machines.items():
            if machine.state is MachineState.HALTED:
                continue
            self._advance(machine)
            values = machine.drain()
            if not values:
                continue
            produced.append(name)
            self.last_output[name] = values[-1]
            destination = self.routes.get(name)
            if destination is None:
                self.collected[name].extend(values)
            else:
                self.machines[destination].push_many(values)
        return produced

    def run_until_halted(self) -> Dict[str, List[int]]:
        while not self.all_halted():
            before = self.total_steps
            produced = self.poll()
            if not produced and self.total_steps == before:
                blocked = [n for n, m in self.machines.items() if m.state is MachineState.BLOCKED]
                raise NetworkError(f"deadlock: {', '.join(blocked)} waiting for input")
        logger.debug("network halted after %d steps", self.total_steps)
        return self.collected


def run_chain(base: Machine, phases: Sequence[int], signal: int = 0) -> int:
    """Amplifier chain: each stage gets its phase then the previous signal."""
    for phase in phases:
        amplifier = base.duplicate()
        amplifier.push(phase)
        amplifier.push(signal)
        amplifier.run_to_halt()
        outputs = amplifier.drain()
        if not outputs:
            raise NetworkError(f"stage with phase {phase} produced no output")
        signal = outputs[-1]
    return signal


def run_feedback_loop(
    base: Machine, phases: Sequence[int], signal: int = 0, *, max_steps: Optional[int] = None
) -> int:
    if not phases:
        raise ValueError("at least one phase setting is required")
    scheduler = RoundRobinScheduler(max_steps=max_steps)
    names = [f"amp{index}" for index in range(len(phases))]
    for name, phase in zip(names, phases):
        scheduler.add(name, base.duplicate()).push(phase)
    for index, name in enumerate(names):
        scheduler.connect(name, names[(index + 1) % len(names)])
    scheduler.machines[names[0]].push(signal)
    scheduler.run_until_halted()
    try:
        return scheduler.last_output[names[-1]]
    except KeyError:
        raise NetworkError("final stage produced no output") from None


def run_threaded_chain(
    base: Machine,
    phases: Sequence[int],
    signal: int = 0,
    *,
    feedback: bool = False,
    timeout: Optional[float] = None,
) -> int:
    """Same result as `run_chain`/`run_feedback_loop`, one thread per stage."""
    count = len(phases)
    if not count:
        raise ValueError("at least one phase setting is required")
    channels: List[queue.Queue] = [queue.Queue() for _ in range(count)]
    sink: queue.Queue = queue.Queue()
    for channel, phase in zip(channels, phases):
        channel.put(phase)
    channels[0].put(signal)

    last_values: List[Optional[int]] = [None] * count
    errors: List[Exception] = []
    lock = threading.Lock()

    def stop_all() -> None:
        for channel in channels:
            channel.put(_STOP)

    def worker(index: int) -> None:
        machine = base.duplicate()
        inbox = channels[index]
        if index + 1 < count:
            outbox = channels[index + 1]
        else:
            outbox = channels[0] if feedback else sink
        try:
            while True:
                state = machine.run()
                for value in machine.drain():
                    last_values[index] = value
                    outbox.put(value)
                if state is MachineState.HALTED:
                    outbox.put(_STOP)
                    return
                value = inbox.get(timeout=timeout)
                if value is _STOP:
                    outbox.put(_STOP)
                    return
                machine.push(value)
        except queue.Empty:
            with lock:
                errors.append(NetworkError(f"stage {index} timed out waiting for input"))
            stop_all()
        except IntcodeError as exc:
            with lock:
                errors.append(exc)
            stop_all()

    threads = [
        threading.Thread(target=worker, args=(index,), name=f"amp{index}", daemon=True)
        for index in range(count)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    result = last_values[-1]
    if result is None:
        raise NetworkError("final stage produced no output")
    return result


def best_phase_setting(
    base: Machine, phase_values: Iterable[int], *, feedback: bool = False
) -> Tuple[int, Tuple[int, ...]]:
    """Try every ordering of `phase_values`; return the best (signal, phases)."""
    runner = run_feedback_loop if feedback else run_chain
    best: Optional[Tuple[int, Tuple[int, ...]]] = None
    for phases in itertools.permutations(phase_values):
        signal = runner(base, phases)
        if best is None or signal > best[0]:
            best = (signal, phases)
    assert best is not None
    return best


__all__ = [
    "NetworkError",
    "RoundRobinScheduler",
    "best_phase_setting",
    "run_chain",
    "run_feedback_loop",
    "run_threaded_chain",
]
