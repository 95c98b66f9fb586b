import json
import random

import pytest

from benchmark_core import (
    AlgorithmInfo, BenchmarkConfig, BenchmarkEngine, InputProvider,
    InvalidSizeRangeError, Statistics, TrialResult,
    estimate_complexity, fmt_ns, get_algorithms, print_demo, print_size_report,
)
from instrumented_sorts import merge_sort, selection_sort


def make_engine(seed=1, **kwargs):
    config = BenchmarkConfig(seed=seed, **kwargs)
    return BenchmarkEngine(config)


class RecordingAlgorithm:
    def __init__(self):
        self.inputs = []

    def __call__(self, a):
        self.inputs.append(list(a))
        return selection_sort(a)


class LimitedProvider(InputProvider):
    def __init__(self, limit):
        super().__init__(random.Random(0))
        self.limit = limit

    def generate_unique(self, n, max_value):
        if n > self.limit:
            raise InvalidSizeRangeError(n, self.limit)
        return super().generate_unique(n, max_value)


# Input provider

def test_generate_unique_values_are_distinct_and_in_range():
    provider = InputProvider(random.Random(3))
    arr = provider.generate_unique(50, 200)
    assert len(arr) == 50
    assert len(set(arr)) == 50
    assert all(0 <= v < 200 for v in arr)


def test_generate_unique_full_range_is_permutation():
    provider = InputProvider(random.Random(3))
    assert sorted(provider.generate_unique(5, 5)) == [0, 1, 2, 3, 4]


def test_generate_unique_rejects_too_many_values():
    provider = InputProvider(random.Random(3))
    with pytest.raises(InvalidSizeRangeError) as exc:
        provider.generate_unique(6, 5)
    assert isinstance(exc.value, ValueError)
    assert exc.value.n == 6
    assert exc.value.max_value == 5


def test_generate_unique_empty():
    assert InputProvider(random.Random(3)).generate_unique(0, 0) == []


def test_seeded_providers_repeat():
    a = InputProvider(random.Random(11))
    b = InputProvider(random.Random(11))
    assert [a.generate_unique(10, 40) for _ in range(3)] == [b.generate_unique(10, 40) for _ in range(3)]


def test_case_derivations_copy_base():
    base = [3, 9, 1, 4]
    assert InputProvider.to_best_case(base) == [1, 3, 4, 9]
    assert InputProvider.to_worst_case(base) == [9, 4, 3, 1]
    assert base == [3, 9, 1, 4]


# Configuration

@pytest.mark.parametrize("kwargs", [{"runs": 0}, {"range_multiplier": 0}, {"sizes": (10, -1)}])
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        BenchmarkConfig(**kwargs)


def test_get_algorithms_unknown_name():
    with pytest.raises(KeyError):
        get_algorithms(["bogo"])


# Harness

def test_analyze_known_counts():
    engine = make_engine(runs=3)
    algos = get_algorithms()
    n = 20

    sel = engine.analyze(algos["selection"], n)
    assert sel.best.operations == n * (n - 1) // 2
    assert sel.worst.operations == n * (n - 1) // 2 + 3 * (n // 2)
    assert sel.verified
    assert sel.runs == 3
    assert sel.duration_stats.n == 3

    merge = engine.analyze(algos["merge"], n)
    expected = merge_sort(list(range(n)))
    assert merge.average.operations == expected
    assert merge.best.operations == expected
    assert merge.worst.operations == expected
    assert merge.verified


def test_analyze_truncates_means():
    counts = iter([1, 2, 2, 100, 200])

    def fake_sort(a):
        a.sort()
        return next(counts)

    algo = AlgorithmInfo("Fake", fake_sort, "O(1)", True, "")
    summary = make_engine(runs=3).analyze(algo, 10)
    assert summary.average.operations == 5 // 3
    assert summary.best.operations == 100
    assert summary.worst.operations == 200
    assert summary.average.duration_ns >= 0


def test_analyze_rejects_bad_runs_and_multiplier():
    engine = make_engine()
    algo = get_algorithms()["merge"]
    with pytest.raises(ValueError):
        engine.analyze(algo, 10, runs=0)
    with pytest.raises(ValueError):
        engine.analyze(algo, 10, range_multiplier=0)


def test_analyze_rejects_mismatched_base_before_sorting():
    recorder = RecordingAlgorithm()
    algo = AlgorithmInfo("Recorder", recorder, "O(n^2)", False, "")
    with pytest.raises(ValueError):
        make_engine().analyze(algo, 10, base=[1, 2, 3])
    assert recorder.inputs == []


def test_algorithm_info_call_and_export():
    algo = get_algorithms()["merge"]
    data = [3, 1, 2]
    assert algo(data) == merge_sort([3, 1, 2])
    assert data == [1, 2, 3]
    assert algo.to_dict() == {
        "name": "Merge Sort",
        "expected_complexity": "O(n log n)",
        "stable": True,
        "description": algo.description,
    }


def test_analyze_size_shares_base_across_algorithms():
    first, second = RecordingAlgorithm(), RecordingAlgorithm()
    algos = {
        "a": AlgorithmInfo("A", first, "O(n^2)", False, ""),
        "b": AlgorithmInfo("B", second, "O(n^2)", False, ""),
    }
    engine = BenchmarkEngine(BenchmarkConfig(seed=2, runs=2), algorithms=algos)
    report = engine.analyze_size(12)

    assert report.n == 12
    assert report.max_value == 48
    assert [s.algorithm for s in report.summaries] == ["A", "B"]
    # trials first, then best, then worst
    assert len(first.inputs) == len(second.inputs) == 4
    assert first.inputs[2:] == second.inputs[2:]
    best, worst = first.inputs[2], first.inputs[3]
    assert best == sorted(worst)
    assert worst == sorted(best, reverse=True)
    # average-case trials are independent draws
    assert first.inputs[0] != first.inputs[1]


def test_analyze_size_propagates_provider_errors():
    engine = BenchmarkEngine(BenchmarkConfig(seed=2, runs=2), provider=LimitedProvider(8))
    with pytest.raises(InvalidSizeRangeError):
        engine.analyze_size(10)
    report = engine.analyze_size(5)
    assert all(s.verified for s in report.summaries)


def test_verify_detects_bad_output():
    engine = make_engine()
    assert engine.verify([3, 1, 2], [1, 2, 3])
    assert not engine.verify([3, 1, 2], [1, 3, 2])
    assert make_engine(verify=False).verify([3, 1, 2], [1, 3, 2])


def test_time_once_works_on_a_copy():
    engine = make_engine(gc_between_runs=False)
    arr = [3, 1, 2]
    result, out = engine.time_once(get_algorithms()["selection"], arr)
    assert arr == [3, 1, 2]
    assert out == [1, 2, 3]
    assert isinstance(result, TrialResult)
    assert result.duration_ns >= 0


def test_scaling_classifies_algorithms():
    engine = make_engine(runs=2)
    algos = get_algorithms()
    merge = engine.run_scaling_analysis(algos["merge"], [64, 128, 256, 512, 1024])
    assert merge.estimated_complexity == "O(n log n)"
    assert merge.operations[0] == 3 * 64 * 6
    selection = engine.run_scaling_analysis(algos["selection"], [50, 100, 200, 400])
    assert selection.estimated_complexity == "O(n^2)"
    assert selection.r_squared > 0.99


def test_run_demo():
    demo = make_engine().run_demo()
    assert len(demo.original) == 25
    assert len(set(demo.original)) == 25
    assert all(0 <= v < 100 for v in demo.original)
    assert set(demo.results) == {"Selection Sort", "Merge Sort"}
    for out, ops in demo.results.values():
        assert out == sorted(demo.original)
        assert ops > 0


def test_reports_are_json_serializable():
    engine = make_engine(runs=2)
    report = engine.analyze_size(8)
    data = json.loads(json.dumps(report.to_dict()))
    assert data["n"] == 8
    assert len(data["summaries"]) == 2
    assert json.dumps(engine.run_demo().to_dict())


# Statistics and formatting

def test_estimate_complexity():
    sizes = [10, 20, 40, 80]
    assert estimate_complexity(sizes, [3 * s + 7 for s in sizes])[0] == "O(n)"
    assert estimate_complexity(sizes, [s * s for s in sizes])[0] == "O(n^2)"
    assert estimate_complexity([10, 20], [1, 2]) == ("unknown", 0.0)
    assert estimate_complexity(sizes, [5, 5, 5, 5]) == ("unknown", 0.0)


def test_statistics_from_samples():
    s = Statistics.from_samples([3, 1, 2])
    assert s.n == 3
    assert s.mean == 2
    assert s.median == 2
    assert s.min_val == 1
    assert s.max_val == 3
    assert Statistics.from_samples([]).n == 0


@pytest.mark.parametrize("nanos, text", [
    (999, "999 ns"),
    (1_500, "1.500 µs"),
    (2_500_000, "2.500 ms"),
    (3_000_000_000, "3.000 s"),
])
def test_fmt_ns(nanos, text):
    assert fmt_ns(nanos) == text


def test_printers_emit_tables(capsys):
    engine = make_engine(runs=2)
    print_size_report(engine.analyze_size(10))
    print_demo(engine.run_demo(n=5, max_value=5))
    out = capsys.readouterr().out
    assert "n = 10" in out
    assert "Merge Sort" in out
    assert "worst" in out
    assert "Operations" in out
