# tests/test_main.py

"""Tests for the command-line entry point."""

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

import main
from sharebox.cli import runner
from sharebox.config.settings import Settings


class TestRunCli(unittest.TestCase):
    """Routing parsed arguments to the runner."""

    def _run(self, *argv: str) -> int:
        args = main._build_parser().parse_args(list(argv))
        return main._run_cli(args)

    def test_unopenable_storage_exits_cleanly(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not_a_dir"
            blocker.write_text("file, not a directory")
            err = io.StringIO()
            with patch.object(
                Settings, "DB_PATH", blocker / "sharebox.db"
            ), patch.object(runner, "_err", Console(file=err, width=200)):
                code = self._run("list")
        self.assertEqual(code, 1)
        self.assertIn("Cannot open storage", err.getvalue())

    def test_list_then_like_by_printed_id(self) -> None:
        """Ids printed by one command are accepted by the next."""
        with patch("sys.stdout", new=io.StringIO()) as out:
            self.assertEqual(self._run("list", "-f", "json"), 0)
        first_id = json.loads(out.getvalue())[0]["id"]
        self.assertEqual(self._run("like", first_id), 0)


if __name__ == "__main__":
    unittest.main()
