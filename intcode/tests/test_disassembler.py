import pathlib
import sys
import unittest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.disassembler import Listing, disassemble, format_listing
from intcode.loader import parse_program


class TestDisassembler(unittest.TestCase):
    def test_quine_listing(self):
        program = parse_program("109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99")
        listing = disassemble(program)
        self.assertEqual(
            [(entry.address, entry.text) for entry in listing],
            [
                (0, "ADJUST_RELATIVE_BASE #1"),
                (2, "OUTPUT @-1"),
                (4, "ADD [100] #1 [100]"),
                (8, "EQUALS [100] #16 [101]"),
                (12, "JUMP_IF_FALSE [101] #0"),
                (15, "HALT"),
            ],
        )

    def test_data_words(self):
        program = parse_program("1,9,10,3,2,3,11,0,99,30,40,50")
        text = format_listing(disassemble(program))
        self.assertEqual(
            text.splitlines(),
            [
                "0000: ADD [9] [10] [3]",
                "0004: MUL [3] [11] [0]",
                "0008: HALT",
                "0009: DATA 30",
                "0010: DATA 40",
                "0011: DATA 50",
            ],
        )

    def test_truncated_instruction_is_data(self):
        self.assertEqual(disassemble([1, 0]), [Listing(0, "DATA 1", 1), Listing(1, "DATA 0", 1)])

    def test_range_and_source_untouched(self):
        program = [1, 0]
        listing = disassemble([99, 104, 5, 99], start=1, end=3)
        self.assertEqual(listing, [Listing(1, "OUTPUT #5", 2)])
        disassemble(program)
        self.assertEqual(program, [1, 0])


if __name__ == "__main__":
    unittest.main()
