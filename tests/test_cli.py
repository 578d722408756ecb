"""Tests for benchgate.cli — Click CLI."""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import NEW_ENCODE, OLD_ENCODE, ONLY_OLD, bench_lines
from click.testing import CliRunner

from benchgate import __version__
from benchgate.cli import main


class TestCliHelp(unittest.TestCase):
    def test_main_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("compare", result.output)

    def test_compare_help(self) -> None:
        result = CliRunner().invoke(main, ["compare", "--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--check", result.output)
        self.assertIn("--alpha", result.output)

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


class TestCompareCommand(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmpdir.name)
        self.old = self.tmpdir / "old.txt"
        self.new = self.tmpdir / "new.txt"
        self.old.write_text("goos: linux\n" + "\n".join(OLD_ENCODE) + "\nPASS\n")
        self.new.write_text("\n".join(NEW_ENCODE) + "\n")

    def tearDown(self) -> None:
        logger = logging.getLogger("benchgate")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        self._tmpdir.cleanup()

    def _invoke(self, *args: str, input: str | None = None):  # noqa: A002
        return CliRunner().invoke(
            main, ["compare", str(self.old), str(self.new), *args], input=input
        )

    def test_report(self) -> None:
        result = self._invoke("-q")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("metric: time/op", result.output)
        self.assertIn("GobEncode: old 13.6ms ± 1%: new 11.8ms ± 1%: delta: -13.31%", result.output)

    def test_passing_check(self) -> None:
        result = self._invoke("-q", "--check", "time/op=+5%")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn("check failed", result.output)

    def test_failing_check_exits_1(self) -> None:
        result = self._invoke("-q", "--check", "time/op=+5%", "--check", "speed=+10%")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("check failed: speed=+10%", result.output)

    def test_bad_check_is_usage_error(self) -> None:
        result = self._invoke("--check", "time/op=")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("threshold is empty", result.output)

    def test_alpha_option(self) -> None:
        result = self._invoke("-q", "--alpha", "0.01", "--check", "speed=+10%")
        self.assertEqual(result.exit_code, 0, result.output)

    def test_bad_alpha(self) -> None:
        result = self._invoke("-q", "--alpha", "3")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("alpha", result.output)

    def test_config_file(self) -> None:
        config = self.tmpdir / "gate.yaml"
        config.write_text("checks:\n  - speed=+10%\n")
        result = self._invoke("-q", "--config", str(config))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("check failed: speed=+10%", result.output)

    def test_json_output(self) -> None:
        result = self._invoke("-q", "--json", "--check", "time/op=5%")
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["checks"], [{"check": "time/op=5%", "passed": True}])

    def test_stdin(self) -> None:
        result = CliRunner().invoke(
            main, ["compare", "-q", "-", str(self.new)], input="\n".join(OLD_ENCODE)
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("metric: speed", result.output)

    def test_both_sides_from_stdin_rejected(self) -> None:
        result = CliRunner().invoke(
            main, ["compare", "-", "-", "--check", "time/op=1%"], input="\n".join(OLD_ENCODE)
        )
        self.assertEqual(result.exit_code, 2)
        self.assertIn("cannot both be read from stdin", result.output)

    def test_json_stdout_has_no_log_lines(self) -> None:
        zero = "\n".join(bench_lines("Zero", [0.0] * 5, "allocs/op"))
        self.old.write_text(zero)
        self.new.write_text("\n".join(bench_lines("Zero", [5.0, 6.0, 7.0, 8.0, 9.0], "allocs/op")))
        result = self._invoke("--json")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.stdout)["results"], [])
        self.assertIn("warning: Dropping Zero", result.stderr)

    def test_nothing_in_common(self) -> None:
        self.new.write_text("\n".join(ONLY_OLD).replace("OnlyOld", "Other"))
        result = self._invoke("-q", "--check", "time/op=1%")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No benchmarks in common", result.output)

    def test_log_file(self) -> None:
        log_file = self.tmpdir / "gate.log"
        result = self._invoke("-q", "--log-file", str(log_file))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Parsed", log_file.read_text())


if __name__ == "__main__":
    unittest.main()
