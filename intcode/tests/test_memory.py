import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.machine import Machine
from intcode.memory import IOQueue, Memory
from intcode.vm_errors import NegativeAddress, OutOfRange


def test_store_grows_to_exact_address():
    memory = Memory([1, 2, 3])
    memory.store(6, 9)
    assert memory.dump() == [1, 2, 3, 0, 0, 0, 9]
    assert len(memory) == 7


def test_load_zero_fills():
    memory = Memory([5])
    assert memory.load(3) == 0
    assert memory.dump() == [5, 0, 0, 0]


def test_check_does_not_grow():
    memory = Memory([5])
    assert memory.check(100) == 100
    assert len(memory) == 1


def test_negative_address_rejected():
    memory = Memory([5])
    with pytest.raises(NegativeAddress):
        memory.load(-1)
    with pytest.raises(NegativeAddress):
        memory.store(-3, 1)
    assert memory.dump() == [5]


def test_program_must_fit_under_limit():
    with pytest.raises(ValueError, match="memory limit of 2"):
        Memory([1, 2, 3], limit=2)
    with pytest.raises(ValueError):
        Machine.from_text("1,0,0,0,99", memory_limit=4)
    assert len(Memory([1, 2], limit=2)) == 2


def test_limit_rejects_high_addresses():
    memory = Memory([0], limit=8)
    memory.store(7, 1)
    with pytest.raises(OutOfRange) as excinfo:
        memory.store(8, 1)
    assert excinfo.value.limit == 8
    assert len(memory) == 8


def test_unlimited_memory():
    memory = Memory([], limit=None)
    memory.store(1 << 20, 1)
    assert len(memory) == (1 << 20) + 1


def test_rollback_only_drops_appended_cells():
    memory = Memory([1, 2])
    memory.load(9)
    memory.rollback(2)
    assert memory.dump() == [1, 2]
    memory.rollback(10)
    assert memory.dump() == [1, 2]


def test_copy_is_independent():
    memory = Memory([1, 2], limit=16)
    clone = memory.copy()
    clone.store(0, 99)
    assert memory.load(0) == 1
    assert clone.limit == 16


def test_queue_cursor_and_history():
    q = IOQueue()
    q.extend([1, 2, 3])
    assert len(q) == 3
    assert q.pop() == 1
    assert q.peek() == 2
    assert q.pending() == [2, 3]
    assert q.drain() == [2, 3]
    assert q.drain() == []
    assert not q
    assert q.history == [1, 2, 3]


def test_pop_from_empty_queue():
    with pytest.raises(IndexError):
        IOQueue().pop()
