"""Tests for microbench.results — result records and persistence."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

from bench_test_helpers import make_result

from microbench.config import BenchmarkOptions
from microbench.results import BenchmarkResult, RunMeta, load_results, save_results
from microbench.stats import describe


class TestBenchmarkResult(unittest.TestCase):
    """Tests for BenchmarkResult."""

    def test_from_samples_scales_everything(self) -> None:
        samples = [2.0, 1.0, 3.0]
        r = BenchmarkResult.from_samples("f", samples, describe(samples), "us")
        self.assertEqual(r.times, (2000.0, 1000.0, 3000.0))
        self.assertEqual(r.median, 2000.0)
        self.assertEqual(r.mean, 2000.0)
        self.assertEqual(r.min, 1000.0)
        self.assertEqual(r.max, 3000.0)
        self.assertAlmostEqual(r.sd, describe(samples).stdev * 1000.0)
        self.assertEqual(r.unit, "us")

    def test_from_samples_seconds(self) -> None:
        samples = [1500.0]
        r = BenchmarkResult.from_samples("f", samples, describe(samples), "s")
        self.assertAlmostEqual(r.mean, 1.5)
        self.assertEqual(r.sd, 0.0)

    def test_frozen(self) -> None:
        r = make_result()
        with self.assertRaises(AttributeError):
            r.mean = 0.0  # type: ignore[misc]

    def test_iterations(self) -> None:
        self.assertEqual(make_result(times=[1.0, 2.0, 3.0, 4.0]).iterations, 4)

    def test_converted(self) -> None:
        r = make_result(times=[1.0, 2.0, 3.0], unit="ms")
        us = r.converted("us")
        self.assertEqual(us.unit, "us")
        self.assertEqual(us.times, (1000.0, 2000.0, 3000.0))
        self.assertAlmostEqual(us.mean, 2000.0)
        back = us.converted("ms")
        self.assertAlmostEqual(back.sd, r.sd)
        self.assertEqual(back.name, r.name)

    def test_dict_round_trip(self) -> None:
        r = make_result("loop", [3.0, 1.0, 2.0], unit="ns")
        d = r.to_dict()
        self.assertEqual(d["times"], [3.0, 1.0, 2.0])
        self.assertEqual(BenchmarkResult.from_dict(d), r)

    def test_from_dict_ignores_unknown_fields(self) -> None:
        d = make_result().to_dict()
        d["extra"] = "ignored"
        self.assertEqual(BenchmarkResult.from_dict(d), make_result())


class TestRunMeta(unittest.TestCase):
    """Tests for RunMeta."""

    def test_defaults_capture_environment(self) -> None:
        meta = RunMeta()
        self.assertTrue(meta.python_version)
        self.assertTrue(meta.platform)
        self.assertEqual(meta.options, BenchmarkOptions())

    def test_now_is_utc_iso8601(self) -> None:
        stamp = RunMeta.now()
        self.assertTrue(stamp.endswith("Z"))
        parsed = datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%SZ")
        self.assertLess(abs(parsed - datetime.now(timezone.utc).replace(tzinfo=None)), timedelta(minutes=5))

    def test_dict_round_trip(self) -> None:
        meta = RunMeta(
            started_at="2026-01-01T00:00:00+0000",
            finished_at="2026-01-01T00:00:05+0000",
            options=BenchmarkOptions(iterations=3, warmup=0, unit="s"),
        )
        restored = RunMeta.from_dict(meta.to_dict())
        self.assertEqual(restored, meta)


class TestPersistence(unittest.TestCase):
    """Tests for save_results() and load_results()."""

    def test_save_and_load(self) -> None:
        results = [make_result("a", [1.0, 2.0]), make_result("b", [5.0])]
        meta = RunMeta(started_at="x", finished_at="y")
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "run.json"
            save_results(path, results, meta)
            loaded_meta, loaded = load_results(path)
        self.assertEqual(loaded, results)
        self.assertEqual(loaded_meta, meta)

    def test_save_without_meta(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.json"
            save_results(path, [make_result()])
            data = json.loads(path.read_text())
            self.assertNotIn("meta", data)
            meta, results = load_results(path)
        self.assertIsNone(meta)
        self.assertEqual(len(results), 1)

    def test_load_missing(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_results(Path("/nonexistent/run.json"))

    def test_load_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.json"
            path.write_text("{not json")
            with self.assertRaises(ValueError):
                load_results(path)

    def test_load_wrong_shape(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.json"
            path.write_text(json.dumps([1, 2, 3]))
            with self.assertRaises(ValueError):
                load_results(path)

    def _load_raw(self, payload: object) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.json"
            path.write_text(json.dumps(payload))
            load_results(path)

    def test_load_result_missing_fields(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            self._load_raw({"results": [{"name": "x"}]})
        self.assertIn("result 0 is missing times", str(ctx.exception))

    def test_load_result_not_a_mapping(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            self._load_raw({"results": [1]})
        self.assertIn("result 0 is not a mapping", str(ctx.exception))

    def test_load_result_times_not_a_list(self) -> None:
        item = make_result("a", [1.0]).to_dict()
        item["times"] = 5
        with self.assertRaises(ValueError):
            self._load_raw({"results": [item]})

    def test_load_reports_bad_item_index(self) -> None:
        good = make_result("a", [1.0]).to_dict()
        with self.assertRaises(ValueError) as ctx:
            self._load_raw({"results": [good, {"name": "b"}]})
        self.assertIn("result 1", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
