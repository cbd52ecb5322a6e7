from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .decoder import decode
from .memory import Memory
from .vm_errors import OperationalError


@dataclass(frozen=True)
class Listing:
    address: int
    text: str
    size: int


def disassemble(program: Iterable[int], start: int = 0, end: Optional[int] = None) -> List[Listing]:
    """Linear sweep over memory; undecodable words are listed as DATA."""
    # Decode against a private copy, operand fetches past the end grow it.
    memory = Memory(program, limit=None)
    stop = len(memory) if end is None else min(end, len(memory))
    listing: List[Listing] = []
    address = start
    while address < stop:
        try:
            instruction = decode(memory, address)
        except OperationalError:
            listing.append(Listing(address, f"DATA {memory.load(address)}", 1))
            address += 1
            continue
        if address + instruction.size > stop:
            listing.append(Listing(address, f"DATA {memory.load(address)}", 1))
            address += 1
            continue
        listing.append(Listing(address, str(instruction), instruction.size))
        address += instruction.size
    return listing


def format_listing(listing: Iterable[Listing]) -> str:
    return "\n".join(f"{entry.address:04d}: {entry.text}" for entry in listing)


__all__ = ["Listing", "disassemble", "format_listing"]
