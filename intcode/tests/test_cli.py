import io
import os
import pathlib
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

ROOT = pathlib.Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.cli import EXIT_BLOCKED, main


class TestIntcodeCLI(unittest.TestCase):
    def run_main(self, argv, stdin=""):
        stdout_buffer = io.StringIO()
        stderr_buffer = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO(stdin)):
            with redirect_stdout(stdout_buffer), redirect_stderr(stderr_buffer):
                exit_code = main(argv)
        return exit_code, stdout_buffer.getvalue(), stderr_buffer.getvalue()

    def test_inline_program_with_inputs(self):
        exit_code, out, _ = self.run_main(["-e", "3,0,4,0,99", "-i", "42"])
        self.assertEqual(exit_code, 0)
        self.assertEqual(out.splitlines(), ["42"])

    def test_program_from_file(self):
        with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8") as tmp:
            tmp.write("1,9,10,3,2,3,11,0,99,30,40,50\n")
            tmp_path = tmp.name
        try:
            exit_code, out, _ = self.run_main([tmp_path, "--print-memory"])
        finally:
            os.remove(tmp_path)
        self.assertEqual(exit_code, 0)
        self.assertEqual(out.strip(), "3500")

    def test_noun_and_verb_patch_memory(self):
        exit_code, out, _ = self.run_main(
            ["-e", "1,0,0,0,99,10,20", "--noun", "5", "--verb", "6", "--print-memory"]
        )
        self.assertEqual(exit_code, 0)
        self.assertEqual(out.strip(), "30")

    def test_blocked_program_exit_code(self):
        exit_code, _, err = self.run_main(["-e", "3,0,99"])
        self.assertEqual(exit_code, EXIT_BLOCKED)
        self.assertIn("blocked", err)

    def test_parse_error_reported(self):
        exit_code, _, err = self.run_main(["-e", "1,2,x"])
        self.assertEqual(exit_code, 1)
        self.assertIn("Intcode execution failed", err)
        self.assertIn("'x'", err)

    def test_operational_error_reported(self):
        exit_code, _, err = self.run_main(["-e", "1,0,0,0,42"])
        self.assertEqual(exit_code, 1)
        self.assertIn("ip=4", err)
        self.assertIn("42 is not a known opcode", err)

    def test_missing_file_reported(self):
        exit_code, _, err = self.run_main(["/nonexistent/program.txt"])
        self.assertEqual(exit_code, 1)
        self.assertIn("Cannot read program", err)

    def test_disassemble_does_not_run(self):
        exit_code, out, _ = self.run_main(["-e", "3,0,99", "--disassemble"])
        self.assertEqual(exit_code, 0)
        self.assertEqual(out.splitlines(), ["0000: INPUT [0]", "0002: HALT"])

    def test_trace_prints_state_changes(self):
        exit_code, out, _ = self.run_main(["-e", "104,1,99", "--trace"])
        self.assertEqual(exit_code, 0)
        self.assertIn("Machine events:", out)
        self.assertIn("running -> halted", out)

    def test_ascii_mode_reads_stdin_lines(self):
        exit_code, out, _ = self.run_main(["-e", "3,0,4,0,1105,1,0", "--ascii"], stdin="hi\n")
        self.assertEqual(exit_code, EXIT_BLOCKED)
        self.assertEqual(out, "hi\n")

    def test_memory_limit_flag(self):
        exit_code, _, err = self.run_main(["-e", "1101,1,1,500,99", "--memory-limit", "100"])
        self.assertEqual(exit_code, 1)
        self.assertIn("limit 100", err)

    def test_program_larger_than_memory_limit(self):
        exit_code, _, err = self.run_main(["-e", "1,0,0,0,99", "--memory-limit", "3"])
        self.assertEqual(exit_code, 1)
        self.assertIn("Invalid machine configuration", err)
        self.assertIn("memory limit of 3", err)


if __name__ == "__main__":
    unittest.main()
