"""
Tests for the command line entry point.
"""

import io
import unittest

from rich.console import Console

import dronefleet.__main__ as cli


class TestSearchCommand(unittest.TestCase):
    """Test the search subcommand."""

    def setUp(self):
        self.saved = cli.CONSOLE
        cli.CONSOLE = Console(file=io.StringIO(), width=200)

    def tearDown(self):
        cli.CONSOLE = self.saved

    def output(self):
        return cli.CONSOLE.file.getvalue()

    def test_unreachable_target_at_ceiling(self):
        """A zero target ends at the ceiling, which does not meet it."""
        code = cli.main(["search", "--target-p95", "0", "--high", "3", "--horizon", "600"])
        self.assertEqual(code, 0)
        self.assertIn("Minimum fleet size for P95 < 0 s: 3 (search ceiling, target not met)",
                      self.output())

    def test_ceiling_that_meets_target(self):
        """A ceiling that beats the target is reported as met."""
        code = cli.main(
            ["search", "--target-p95", "1e12", "--low", "3", "--high", "3", "--horizon", "600"]
        )
        self.assertEqual(code, 0)
        self.assertIn("(search ceiling, target met)", self.output())

    def test_below_ceiling_has_no_note(self):
        code = cli.main(
            ["search", "--target-p95", "1e12", "--low", "2", "--high", "5", "--horizon", "600"]
        )
        self.assertEqual(code, 0)
        self.assertIn("Minimum fleet size for P95 < 1e+12 s: 2\n", self.output())
        self.assertNotIn("search ceiling", self.output())

    def test_invalid_option(self):
        """Invalid fleet options exit with status 2."""
        self.assertEqual(cli.main(["batch", "--speed-kmh", "-5"]), 2)
        self.assertIn("Invalid option", self.output())


if __name__ == "__main__":
    unittest.main()
