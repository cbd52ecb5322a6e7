import pathlib
import sys
import unittest

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.bytecode import ARITY, Opcode, Parameter, ParameterMode
from intcode.decoder import decode, split_modes
from intcode.memory import Memory
from intcode.vm_errors import (
    InvalidOpcode,
    InvalidParameterMode,
    NegativeInstruction,
    OutOfRange,
    TooManyParameterModes,
)


class TestDecoder(unittest.TestCase):
    def test_arity_table(self):
        self.assertEqual(
            {op.name: ARITY[op] for op in Opcode},
            {
                "ADD": 3,
                "MUL": 3,
                "INPUT": 1,
                "OUTPUT": 1,
                "JUMP_IF_TRUE": 2,
                "JUMP_IF_FALSE": 2,
                "LESS_THAN": 3,
                "EQUALS": 3,
                "ADJUST_RELATIVE_BASE": 1,
                "HALT": 0,
            },
        )

    def test_modes_default_to_positional(self):
        instruction = decode(Memory([1002, 4, 3, 4, 33]), 0)
        self.assertIs(instruction.opcode, Opcode.MUL)
        self.assertEqual(
            instruction.params,
            (
                Parameter(4, ParameterMode.POSITIONAL),
                Parameter(3, ParameterMode.IMMEDIATE),
                Parameter(4, ParameterMode.POSITIONAL),
            ),
        )
        self.assertEqual(instruction.size, 4)

    def test_relative_mode(self):
        instruction = decode(Memory([204, -1]), 0)
        self.assertIs(instruction.opcode, Opcode.OUTPUT)
        self.assertEqual(instruction.params, (Parameter(-1, ParameterMode.RELATIVE),))
        self.assertEqual(str(instruction), "OUTPUT @-1")

    def test_decode_at_offset(self):
        instruction = decode(Memory([0, 0, 1105, 1, 7]), 2)
        self.assertIs(instruction.opcode, Opcode.JUMP_IF_TRUE)
        self.assertEqual(instruction.address, 2)
        self.assertEqual(str(instruction), "JUMP_IF_TRUE #1 #7")

    def test_halt_has_no_parameters(self):
        instruction = decode(Memory([99]), 0)
        self.assertIs(instruction.opcode, Opcode.HALT)
        self.assertEqual(instruction.params, ())
        self.assertEqual(str(instruction), "HALT")

    def test_operands_past_end_grow_memory(self):
        memory = Memory([1, 0])
        instruction = decode(memory, 0)
        self.assertEqual(len(memory), 4)
        self.assertEqual([p.value for p in instruction.params], [0, 0, 0])

    def test_split_modes(self):
        self.assertEqual(
            split_modes(21101, 3, pointer=0),
            [ParameterMode.IMMEDIATE, ParameterMode.IMMEDIATE, ParameterMode.RELATIVE],
        )
        self.assertEqual(split_modes(3, 1, pointer=0), [ParameterMode.POSITIONAL])

    def test_invalid_opcode(self):
        with self.assertRaises(InvalidOpcode) as ctx:
            decode(Memory([10, 0]), 0)
        self.assertEqual(ctx.exception.opcode, 10)

    def test_negative_instruction(self):
        with self.assertRaises(NegativeInstruction):
            decode(Memory([-1001]), 0)

    def test_invalid_parameter_mode(self):
        with self.assertRaises(InvalidParameterMode) as ctx:
            decode(Memory([304, 0, 99]), 0)
        self.assertEqual(ctx.exception.mode, 3)

    def test_too_many_parameter_modes(self):
        with self.assertRaises(TooManyParameterModes):
            decode(Memory([199]), 0)
        with self.assertRaises(TooManyParameterModes):
            decode(Memory([10004, 0]), 0)

    def test_pointer_past_end(self):
        with self.assertRaises(OutOfRange):
            decode(Memory([99]), 1)


if __name__ == "__main__":
    unittest.main()
