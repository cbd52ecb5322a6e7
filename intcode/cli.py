from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import Optional

from .ascii import drain_text, push_line
from .disassembler import disassemble, format_listing
from .machine import Machine
from .memory import DEFAULT_MEMORY_LIMIT
from .vm_errors import IntcodeError, format_error
from .vm_events import MachineState, format_event

EXIT_BLOCKED = 2


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="pyintcode", description="Run Intcode programs")
    parser.add_argument("program", nargs="?", help="Path to a program file (comma-separated integers)")
    parser.add_argument("-e", "--execute", dest="inline", help="Run program text given on the command line")
    parser.add_argument(
        "-i",
        "--input",
        dest="inputs",
        type=int,
        action="append",
        default=[],
        help="Push an input value before running (repeatable)",
    )
    parser.add_argument("--ascii", action="store_true", help="Interactive ASCII mode: stdin lines in, text out")
    parser.add_argument("--noun", type=int, help="Patch memory cell 1 before running")
    parser.add_argument("--verb", type=int, help="Patch memory cell 2 before running")
    parser.add_argument("--print-memory", action="store_true", help="Print memory[0] after running")
    parser.add_argument("--disassemble", action="store_true", help="Print a listing and exit without running")
    parser.add_argument("--trace", action="store_true", help="Print machine state transitions")
    parser.add_argument(
        "--memory-limit",
        type=int,
        default=DEFAULT_MEMORY_LIMIT,
        help="Highest number of memory cells (0 disables the limit)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every executed instruction")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.inline and args.program:
        parser.error("cannot use program path and --execute together")
    try:
        if args.inline:
            text = args.inline
        elif args.program:
            text = pathlib.Path(args.program).read_text(encoding="utf-8")
        else:
            parser.error("missing program path or --execute")

        machine = Machine.from_text(text, memory_limit=args.memory_limit or None)
        if args.disassemble:
            print(format_listing(disassemble(machine.dump())))
            return 0
        if args.noun is not None:
            machine.write_cell(1, args.noun)
        if args.verb is not None:
            machine.write_cell(2, args.verb)
        machine.push_many(args.inputs)

        if args.ascii:
            state = _run_ascii(machine, debug=args.verbose)
        else:
            state = machine.run(debug=args.verbose)
            for value in machine.drain():
                print(value)

        if args.trace:
            _print_events(machine.drain_events())
        if args.print_memory:
            print(machine.read_cell(0))
        if state is MachineState.BLOCKED:
            print("Machine is blocked waiting for input.", file=sys.stderr)
            return EXIT_BLOCKED
        return 0
    except OSError as exc:
        print(f"Cannot read program: {exc}", file=sys.stderr)
        return 1
    except IntcodeError as exc:
        print(f"Intcode execution failed: {format_error(exc)}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid machine configuration: {exc}", file=sys.stderr)
        return 1


def _run_ascii(machine: Machine, debug: bool = False) -> MachineState:
    state = machine.run(debug=debug)
    _write_text(machine)
    while state is MachineState.BLOCKED:
        line = sys.stdin.readline()
        if not line or line.strip() == "exit":
            break
        push_line(machine, line)
        state = machine.run(debug=debug)
        _write_text(machine)
    return state


def _write_text(machine: Machine) -> None:
    text, extras = drain_text(machine)
    sys.stdout.write(text)
    for value in extras:
        print(value)


def _print_events(events: list) -> None:
    if not events:
        return
    print("Machine events:")
    for event in events:
        print(f"  - {format_event(event)}")


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
