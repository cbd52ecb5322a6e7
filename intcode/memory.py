from __future__ import annotations

from typing import Iterable, List, Optional

from .vm_errors import NegativeAddress, OutOfRange

DEFAULT_MEMORY_LIMIT = 1 << 24


class Memory:
    """Flat, zero-filled, grow-only store of signed integers.

    Every access goes through `ensure`, which validates the address and grows
    the backing list up to and including it before the access happens.
    """

    __slots__ = ("_cells", "limit")

    def __init__(self, values: Iterable[int] = (), *, limit: Optional[int] = DEFAULT_MEMORY_LIMIT):
        self._cells: List[int] = list(values)
        self.limit = limit
        if limit is not None and len(self._cells) > limit:
            raise ValueError(f"program of {len(self._cells)} cells exceeds the memory limit of {limit}")

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self):
        return iter(self._cells)

    def check(self, address: int) -> int:
        if address < 0:
            raise NegativeAddress(address)
        if self.limit is not None and address >= self.limit:
            raise OutOfRange(address, self.limit)
        return address

    def ensure(self, address: int) -> int:
        self.check(address)
        missing = address + 1 - len(self._cells)
        if missing > 0:
            self._cells.extend([0] * missing)
        return address

    def load(self, address: int) -> int:
        return self._cells[self.ensure(address)]

    def store(self, address: int, value: int) -> None:
        self._cells[self.ensure(address)] = int(value)

    def rollback(self, size: int) -> None:
        """Drop cells appended past `size` by an instruction that then failed."""
        if size < len(self._cells):
            del self._cells[size:]

    def dump(self) -> List[int]:
        return list(self._cells)

    def copy(self) -> "Memory":
        return Memory(self._cells, limit=self.limit)

    def __repr__(self):
        return f"Memory(size={len(self._cells)}, limit={self.limit})"


class IOQueue:
    """Append-only value log with a read cursor.

    Consumed values stay in `history`; only the unconsumed tail counts
    towards `len()`.
    """

    __slots__ = ("_values", "_cursor")

    def __init__(self, values: Iterable[int] = ()):
        self._values: List[int] = [int(v) for v in values]
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._values) - self._cursor

    def __bool__(self) -> bool:
        return len(self) > 0

    def append(self, value: int) -> None:
        self._values.append(int(value))

    def extend(self, values: Iterable[int]) -> None:
        for value in values:
            self.append(value)

    def peek(self) -> int:
        if not self:
            raise IndexError("peek from an empty queue")
        return self._values[self._cursor]

    def pop(self) -> int:
        value = self.peek()
        self._cursor += 1
        return value

    def drain(self) -> List[int]:
        pending = self._values[self._cursor:]
        self._cursor = len(self._values)
        return pending

    def pending(self) -> List[int]:
        return self._values[self._cursor:]

    @property
    def history(self) -> List[int]:
        return list(self._values)

    def __repr__(self):
        return f"IOQueue(pending={self.pending()!r})"


__all__ = ["DEFAULT_MEMORY_LIMIT", "IOQueue", "Memory"]
