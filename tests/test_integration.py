"""
Integration tests for Cog.

Compiles the programs under tests/files and runs the generated JavaScript
with node.
"""

import shutil
import subprocess
import sys
import unittest
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cog import compile_file, compile_source

FILES = Path(__file__).parent / "files"
NODE = shutil.which("node")


def run_compiled(js: str) -> str:
    """Run generated JavaScript and return its stdout."""
    result = subprocess.run(
        [NODE, "-e", js], capture_output=True, text=True, timeout=30
    )
    if result.returncode != 0:
        raise AssertionError(f"node failed:\n{result.stderr}\n--- source ---\n{js}")
    return result.stdout.replace("\r", "").strip()


@unittest.skipUnless(NODE, "node is not installed")
class TestPrograms(unittest.TestCase):
    """End-to-end programs: compile, execute, compare output."""

    def run_file(self, name: str) -> str:
        js = compile_file(str(FILES / f"{name}.cog"))
        self.assertTrue(js, f"{name}.cog produced no output")
        return run_compiled(js)

    def test_hello_world(self):
        self.assertEqual(self.run_file("hello-world"), "hello, world!")

    def test_custom_function_call(self):
        self.assertEqual(self.run_file("custom-function-call"), "hello, world!")

    def test_function_arguments(self):
        self.assertEqual(
            self.run_file("function-arguments"),
            "Hello, darkness, my old friend\nI come to talk to you again",
        )

    def test_return(self):
        self.assertEqual(self.run_file("return"), "28")

    def test_variables(self):
        self.assertEqual(self.run_file("variables"), "6\n9")

    def test_boolean_operators(self):
        self.assertEqual(self.run_file("boolean-operators"), "false\ntrue")

    def test_binary_operators(self):
        expected = [
            "false", "true", "true", "false", "true", "false",
            "15", "-3", "54", "0.6666666666666666", "11", "14", "7", "4", "3",
        ]
        self.assertEqual(self.run_file("binary-operators").split("\n"), expected)

    def test_control_flow(self):
        self.assertEqual(self.run_file("control-flow"), "big\nmedium\nsmall")

    def test_comments(self):
        self.assertEqual(self.run_file("comments"), "comment above\ncomment inline")

    def test_range_loop(self):
        self.assertEqual(self.run_file("range-loop"), "\n".join(str(i) for i in range(10)))

    def test_custom_loop_item(self):
        self.assertEqual(self.run_file("custom-loop-item"), "\n".join(str(i) for i in range(10)))

    def test_array_loop(self):
        self.assertEqual(self.run_file("array-loop"), "ada\ngrace\nlinus\n1\n2")

    def test_infinite_loop(self):
        self.assertEqual(self.run_file("infinite-loop"), "started\nstopped")

    def test_continue(self):
        self.assertEqual(self.run_file("continue"), "0\n1\nready to break")

    def test_match(self):
        self.assertEqual(self.run_file("match"), "one\ntwo\nmany")

    def test_defer(self):
        self.assertEqual(
            self.run_file("defer"),
            "body\n1\n0\nfirst deferred\nsecond deferred",
        )

    def test_undeclared_call_has_no_effect(self):
        self.assertEqual(self.run_file("undeclared-call"), "done")

    def test_empty_range_runs_nothing(self):
        js = compile_source("func main(): void { for 5..5 { print(it) } print('end') }")
        self.assertEqual(run_compiled(js), "end")


if __name__ == "__main__":
    unittest.main()
