"""Tests for benchgate.bench.parse — raw benchmark output parsing."""

from __future__ import annotations

import unittest

from bench_test_helpers import OLD_ENCODE

from benchgate.bench.parse import BenchRecord, Sample, parse_line, parse_records, parse_samples


class TestParseLine(unittest.TestCase):
    """Tests for parse_line()."""

    def test_parse_full_record(self) -> None:
        record = parse_line("BenchmarkGobEncode-8   \t100\t  13552735 ns/op\t  56.63 MB/s")
        self.assertEqual(
            record,
            BenchRecord(
                name="GobEncode-8",
                iterations=100,
                measurements=((13552735.0, "ns/op"), (56.63, "MB/s")),
            ),
        )

    def test_parse_memory_columns(self) -> None:
        record = parse_line("BenchmarkAlloc 5000 250 ns/op 64 B/op 2 allocs/op")
        assert record is not None
        self.assertEqual(
            [(s.metric, s.value) for s in record.samples()],
            [("time/op", 250.0), ("alloc/op", 64.0), ("allocs/op", 2.0)],
        )

    def test_record_without_measurements(self) -> None:
        record = parse_line("BenchmarkNothing 10")
        assert record is not None
        self.assertEqual(record.measurements, ())
        self.assertEqual(record.samples(), [])

    def test_non_record_lines_ignored(self) -> None:
        for line in ["", "PASS", "ok  \tgithub.com/x/y\t1.2s", "goos: linux", "  Benchmark"]:
            with self.subTest(line=line):
                self.assertIsNone(parse_line(line))

    def test_prefix_without_name_rejected(self) -> None:
        self.assertIsNone(parse_line("Benchmark 100 10 ns/op"))

    def test_bad_iteration_count_rejected(self) -> None:
        self.assertIsNone(parse_line("BenchmarkFoo abc 10 ns/op"))
        self.assertIsNone(parse_line("BenchmarkFoo"))

    def test_bad_value_rejects_whole_line(self) -> None:
        self.assertIsNone(parse_line("BenchmarkFoo 100 10 ns/op fast MB/s"))

    def test_non_finite_value_rejected(self) -> None:
        self.assertIsNone(parse_line("BenchmarkFoo 100 NaN ns/op"))
        self.assertIsNone(parse_line("BenchmarkFoo 100 inf ns/op"))

    def test_number_syntax_outside_benchmark_output_rejected(self) -> None:
        for line in [
            "BenchmarkFoo 1_0 10 ns/op",
            "BenchmarkFoo +10 10 ns/op",
            "BenchmarkFoo -10 10 ns/op",
            "BenchmarkFoo 10 1_000 ns/op",
            "BenchmarkFoo 10 0x10 ns/op",
            "BenchmarkFoo 10 1e999 ns/op",
        ]:
            with self.subTest(line=line):
                self.assertIsNone(parse_line(line))

    def test_exponent_value_accepted(self) -> None:
        record = parse_line("BenchmarkFoo 10 1.5e+06 ns/op")
        assert record is not None
        self.assertEqual(record.measurements, ((1500000.0, "ns/op"),))

    def test_dangling_value_rejected(self) -> None:
        self.assertIsNone(parse_line("BenchmarkFoo 100 10 ns/op 5"))

    def test_custom_unit_is_its_own_metric(self) -> None:
        record = parse_line("BenchmarkFoo 100 42 widgets/op")
        assert record is not None
        self.assertEqual(record.samples(), [Sample("Foo", "widgets/op", 42.0, "widgets/op")])


class TestParseSamples(unittest.TestCase):
    """Tests for parse_records() and parse_samples()."""

    def test_samples_in_input_order(self) -> None:
        samples = parse_samples(OLD_ENCODE[:2])
        self.assertEqual(
            [(s.name, s.metric) for s in samples],
            [
                ("GobEncode", "time/op"),
                ("GobEncode", "speed"),
                ("JSONEncode", "time/op"),
                ("JSONEncode", "speed"),
            ],
        )

    def test_accepts_multiline_string(self) -> None:
        text = "goos: linux\n" + "\n".join(OLD_ENCODE) + "\nPASS\n"
        self.assertEqual(len(parse_records(text)), 8)
        self.assertEqual(len(parse_samples(text)), 16)

    def test_empty_input(self) -> None:
        self.assertEqual(parse_samples([]), [])
        self.assertEqual(parse_samples(""), [])


if __name__ == "__main__":
    unittest.main()
