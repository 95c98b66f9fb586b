"""
Sorting Case Analysis - Core Module
===================================

Contains: configuration, the unique-value input provider, statistics,
complexity estimation, the algorithm registry, the benchmark harness,
and console report generation.
"""

from __future__ import annotations
import gc, logging, math, platform, random, statistics, sys, time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from contextlib import contextmanager

import numpy as np

from instrumented_sorts import merge_sort, run_once, selection_sort

LOGGER = logging.getLogger("sort_benchmark.core")

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_SIZES = (100, 1000, 5000)
SCALING_SIZES = [50, 100, 200, 400, 800]


@dataclass(frozen=True)
class BenchmarkConfig:
    seed: Optional[int] = 42
    runs: int = 10
    range_multiplier: int = 4
    sizes: Tuple[int, ...] = DEFAULT_SIZES
    gc_between_runs: bool = True
    verify: bool = True
    demo_size: int = 25
    demo_max_value: int = 100

    def __post_init__(self):
        if self.runs < 1:
            raise ValueError(f"runs must be >= 1, got {self.runs}")
        if self.range_multiplier < 1:
            raise ValueError(f"range_multiplier must be >= 1, got {self.range_multiplier}")
        if any(n < 0 for n in self.sizes):
            raise ValueError(f"sizes must be non-negative, got {list(self.sizes)}")


class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        for a in ['HEADER', 'BLUE', 'CYAN', 'GREEN', 'YELLOW', 'RED', 'BOLD', 'END']:
            setattr(cls, a, '')

if not sys.stdout.isatty():
    Colors.disable()

# =============================================================================
# Errors
# =============================================================================

class InvalidSizeRangeError(ValueError):
    """Raised when n unique values cannot be drawn from [0, max_value)."""

    def __init__(self, n: int, max_value: int):
        self.n = n
        self.max_value = max_value
        super().__init__(
            f"Cannot generate {n} unique values in range 0..{max_value - 1}")

# =============================================================================
# Statistics
# =============================================================================

@dataclass
class Statistics:
    n: int
    mean: float
    median: float
    std_dev: float
    std_err: float
    min_val: float
    max_val: float

    @classmethod
    def from_samples(cls, samples: Sequence[float]) -> "Statistics":
        if not samples:
            return cls(0, 0, 0, 0, 0, 0, 0)

        s = sorted(samples)
        n = len(s)
        std = statistics.stdev(s) if n > 1 else 0.0
        return cls(n=n, mean=statistics.mean(s), median=statistics.median(s),
                   std_dev=std, std_err=std / math.sqrt(n),
                   min_val=s[0], max_val=s[-1])

    @property
    def relative_std(self) -> float:
        return self.std_dev / self.mean if self.mean else 0.0


def estimate_complexity(sizes: Sequence[int], values: Sequence[float]) -> Tuple[str, float]:
    """Estimate the growth class of `values` over `sizes` via least squares."""
    if len(sizes) < 3 or len(values) < 3:
        return ("unknown", 0.0)

    x = np.asarray(sizes, dtype=float)
    y = np.asarray(values, dtype=float)
    if np.any(x <= 0):
        return ("unknown", 0.0)
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    if ss_tot == 0:
        return ("unknown", 0.0)

    def r2(feature):
        slope, intercept = np.polyfit(feature, y, 1)
        residual = y - (slope * feature + intercept)
        return 1 - float(np.sum(residual ** 2)) / ss_tot

    cands = [
        ("O(n)", r2(x)),
        ("O(n log n)", r2(x * np.log(x))),
        ("O(n^2)", r2(x * x)),
    ]
    return max(cands, key=lambda c: c[1])

# =============================================================================
# Input Provider
# =============================================================================

class InputProvider:
    """
    Supplies sample arrays for the harness.

    The random source is owned by the provider and passed in explicitly, so
    a seeded `random.Random` reproduces the same sequence of arrays.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def generate_unique(self, n: int, max_value: int) -> List[int]:
        """Return `n` distinct ints drawn uniformly from [0, max_value)."""
        if n < 0 or n > max_value:
            raise InvalidSizeRangeError(n, max_value)
        return self.rng.sample(range(max_value), n)

    @staticmethod
    def to_best_case(base: Sequence[int]) -> List[int]:
        return sorted(base)

    @staticmethod
    def to_worst_case(base: Sequence[int]) -> List[int]:
        return sorted(base, reverse=True)

# =============================================================================
# Algorithms
# =============================================================================

@dataclass(frozen=True)
class AlgorithmInfo:
    name: str
    function: Callable[[List[int]], int]
    expected_complexity: str
    stable: bool
    description: str

    def __call__(self, arr):
        return self.function(arr)

    def to_dict(self):
        return {
            "name": self.name,
            "expected_complexity": self.expected_complexity,
            "stable": self.stable,
            "description": self.description,
        }


ALGORITHMS: Dict[str, AlgorithmInfo] = {
    "selection": AlgorithmInfo(
        "Selection Sort", selection_sort, "O(n^2)", False,
        "In-place minimum selection, 3 ops per swap"),
    "merge": AlgorithmInfo(
        "Merge Sort", merge_sort, "O(n log n)", True,
        "Top-down merge with per-call left/right buffers"),
}


def get_algorithms(names: Optional[Sequence[str]] = None) -> Dict[str, AlgorithmInfo]:
    if names is None:
        return dict(ALGORITHMS)
    unknown = [n for n in names if n not in ALGORITHMS]
    if unknown:
        raise KeyError(f"Unknown algorithm(s): {', '.join(unknown)}")
    return {n: ALGORITHMS[n] for n in names}

# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class TrialResult:
    duration_ns: int
    operations: int

    def to_dict(self):
        return {"duration_ns": self.duration_ns, "operations": self.operations}


@dataclass
class CaseSummary:
    algorithm: str
    n: int
    runs: int
    average: TrialResult
    best: TrialResult
    worst: TrialResult
    duration_stats: Statistics
    verified: bool = True

    def to_dict(self):
        return {
            "algorithm": self.algorithm,
            "n": self.n,
            "runs": self.runs,
            "verified": self.verified,
            "average": self.average.to_dict(),
            "best": self.best.to_dict(),
            "worst": self.worst.to_dict(),
            "average_duration_stats": {
                "median_ns": self.duration_stats.median,
                "std_dev_ns": self.duration_stats.std_dev,
                "std_err_ns": self.duration_stats.std_err,
                "min_ns": self.duration_stats.min_val,
                "max_ns": self.duration_stats.max_val,
            },
        }


@dataclass
class SizeReport:
    n: int
    max_value: int
    generation_ns: int
    summaries: List[CaseSummary]

    def to_dict(self):
        return {
            "n": self.n,
            "max_value": self.max_value,
            "generation_ns": self.generation_ns,
            "summaries": [s.to_dict() for s in self.summaries],
        }


@dataclass
class ScalingResult:
    algorithm: str
    sizes: List[int]
    operations: List[int]
    estimated_complexity: str
    r_squared: float

    def to_dict(self):
        return {
            "algorithm": self.algorithm,
            "sizes": self.sizes,
            "average_operations": self.operations,
            "estimated_complexity": self.estimated_complexity,
            "r_squared": self.r_squared,
        }


@dataclass
class DemoResult:
    original: List[int]
    max_value: int
    generation_ns: int
    results: Dict[str, Tuple[List[int], int]]

    def to_dict(self):
        return {
            "original": self.original,
            "max_value": self.max_value,
            "generation_ns": self.generation_ns,
            "results": {name: {"sorted": out, "operations": ops}
                        for name, (out, ops) in self.results.items()},
        }

# =============================================================================
# Benchmark Engine
# =============================================================================

class BenchmarkEngine:
    def __init__(self, config: BenchmarkConfig = BenchmarkConfig(),
                 provider: Optional[InputProvider] = None,
                 algorithms: Optional[Dict[str, AlgorithmInfo]] = None):
        self.config = config
        self.provider = provider if provider is not None else InputProvider(random.Random(config.seed))
        self.algorithms = algorithms if algorithms is not None else get_algorithms()

    @contextmanager
    def _gc_pause(self):
        if self.config.gc_between_runs:
            gc.collect()
            gc.disable()
        try:
            yield
        finally:
            if self.config.gc_between_runs:
                gc.enable()

    def time_once(self, algo: AlgorithmInfo, arr: Sequence[int]) -> Tuple[TrialResult, List[int]]:
        a = list(arr)
        with self._gc_pause():
            t0 = time.perf_counter_ns()
            ops = algo(a)
            t1 = time.perf_counter_ns()
        return TrialResult(t1 - t0, ops), a

    def verify(self, original: Sequence[int], result: Sequence[int]) -> bool:
        if not self.config.verify:
            return True
        expected = np.sort(np.asarray(original, dtype=np.int64))
        return bool(np.array_equal(expected, np.asarray(result, dtype=np.int64)))

    def _check_params(self, runs: int, range_multiplier: int):
        if runs < 1:
            raise ValueError(f"runs must be >= 1, got {runs}")
        if range_multiplier < 1:
            raise ValueError(f"range_multiplier must be >= 1, got {range_multiplier}")

    def _average_case(self, algo: AlgorithmInfo, n: int, runs: int,
                      max_value: int) -> Tuple[TrialResult, List[int], bool]:
        total_ops = 0
        total_ns = 0
        durations = []
        verified = True

        for trial in range(runs):
            arr = self.provider.generate_unique(n, max_value)
            result, out = self.time_once(algo, arr)
            total_ops += result.operations
            total_ns += result.duration_ns
            durations.append(result.duration_ns)
            verified = self.verify(arr, out) and verified
            LOGGER.debug("%s n=%d trial %d: ops=%d ns=%d",
                         algo.name, n, trial, result.operations, result.duration_ns)

        return TrialResult(total_ns // runs, total_ops // runs), durations, verified

    def analyze(self, algo: AlgorithmInfo, n: int, runs: Optional[int] = None,
                range_multiplier: Optional[int] = None,
                base: Optional[Sequence[int]] = None) -> CaseSummary:
        """
        Measure average, best and worst case of one algorithm at size n.

        Average case: `runs` fresh unique arrays, means truncated to ints.
        Best and worst case: ascending and descending copies of a single
        base array, one timed sort each. Pass `base` to share it between
        algorithms; otherwise one is drawn from the provider.
        """
        runs = self.config.runs if runs is None else runs
        range_multiplier = self.config.range_multiplier if range_multiplier is None else range_multiplier
        self._check_params(runs, range_multiplier)
        if base is not None and len(base) != n:
            raise ValueError(f"base array has {len(base)} elements, expected {n}")
        max_value = n * range_multiplier

        average, durations, verified = self._average_case(algo, n, runs, max_value)

        if base is None:
            base = self.provider.generate_unique(n, max_value)

        best_input = self.provider.to_best_case(base)
        best, best_out = self.time_once(algo, best_input)
        worst_input = self.provider.to_worst_case(base)
        worst, worst_out = self.time_once(algo, worst_input)
        verified = self.verify(best_input, best_out) and self.verify(worst_input, worst_out) and verified

        if not verified:
            LOGGER.warning("%s produced unsorted output at n=%d", algo.name, n)
        LOGGER.info("%s n=%d: avg ops=%d best ops=%d worst ops=%d",
                    algo.name, n, average.operations, best.operations, worst.operations)

        return CaseSummary(algo.name, n, runs, average, best, worst,
                           Statistics.from_samples(durations), verified)

    def analyze_size(self, n: int) -> SizeReport:
        """Analyze every registered algorithm at size n against one shared base array."""
        max_value = n * self.config.range_multiplier

        t0 = time.perf_counter_ns()
        base = self.provider.generate_unique(n, max_value)
        generation_ns = time.perf_counter_ns() - t0
        LOGGER.debug("Generated %d unique values below %d in %d ns", n, max_value, generation_ns)

        summaries = [self.analyze(algo, n, base=base) for algo in self.algorithms.values()]
        return SizeReport(n, max_value, generation_ns, summaries)

    def run_scaling_analysis(self, algo: AlgorithmInfo, sizes: Sequence[int],
                             runs: Optional[int] = None) -> ScalingResult:
        runs = self.config.runs if runs is None else runs
        self._check_params(runs, self.config.range_multiplier)

        ops = []
        for n in sizes:
            average, _, _ = self._average_case(algo, n, runs, n * self.config.range_multiplier)
            ops.append(average.operations)

        comp, r2 = estimate_complexity(list(sizes), ops)
        LOGGER.info("%s scaling: %s (R^2=%.4f)", algo.name, comp, r2)
        return ScalingResult(algo.name, list(sizes), ops, comp, r2)

    def run_demo(self, n: Optional[int] = None, max_value: Optional[int] = None) -> DemoResult:
        n = self.config.demo_size if n is None else n
        max_value = self.config.demo_max_value if max_value is None else max_value

        t0 = time.perf_counter_ns()
        original = self.provider.generate_unique(n, max_value)
        generation_ns = time.perf_counter_ns() - t0

        results = {algo.name: run_once(algo.function, original)
                   for algo in self.algorithms.values()}
        return DemoResult(original, max_value, generation_ns, results)

# =============================================================================
# Formatting & Output
# =============================================================================

def fmt_ns(nanos):
    """Format a duration in nanoseconds with appropriate units."""
    if nanos < 1_000:
        return f"{int(nanos)} ns"
    if nanos < 1_000_000:
        return f"{nanos / 1_000:.3f} µs"
    if nanos < 1_000_000_000:
        return f"{nanos / 1_000_000:.3f} ms"
    return f"{nanos / 1_000_000_000:.3f} s"


def get_system_info():
    """Gather system information for reproducibility."""
    return {
        "timestamp": datetime.now().isoformat(),
        "python_version": sys.version,
        "platform": platform.platform(),
        "processor": platform.processor() or "unknown",
        "machine": platform.machine(),
        "numpy_version": np.__version__,
    }


def print_header(text):
    print(f"\n{Colors.BOLD}{Colors.HEADER}{'='*70}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.HEADER}{text.center(70)}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.HEADER}{'='*70}{Colors.END}\n")


def print_subheader(text):
    print(f"\n{Colors.BOLD}{Colors.CYAN}{text}{Colors.END}")
    print(f"{Colors.CYAN}{'-'*len(text)}{Colors.END}")


def print_size_report(report: SizeReport):
    """Print generator timing and the case table for one array size."""
    print_subheader(f"Array Size: n = {report.n:,}")
    print(f"  Unique generator: {fmt_ns(report.generation_ns)} for {report.n:,} values "
          f"below {report.max_value:,} (O(n))\n")

    hdr = f"  {'Algorithm':<16} {'Case':<9} {'Operations':>16} {'Time':>14} {'Status':>8}"
    print(f"{Colors.BOLD}{hdr}{Colors.END}")
    print("  " + "-" * (len(hdr) - 2))

    for s in report.summaries:
        status = f"{Colors.GREEN}OK{Colors.END}" if s.verified else f"{Colors.RED}FAIL{Colors.END}"
        for label, trial in (("average", s.average), ("best", s.best), ("worst", s.worst)):
            print(f"  {s.algorithm:<16} {label:<9} {trial.operations:>16,} "
                  f"{fmt_ns(trial.duration_ns):>14} {status}")
        if s.duration_stats.n > 1:
            print(f"  {'':<16} {'':<9} {'':>16} "
                  f"{Colors.YELLOW}+/-{s.duration_stats.relative_std*100:.1f}%{Colors.END} over {s.runs} runs")


def print_scaling_table(results: Sequence[ScalingResult]):
    """Print average operation counts across sizes."""
    if not results:
        return

    sizes = results[0].sizes
    hdr = f"{'Algorithm':<16} " + " ".join(f"{'n='+str(s):>12}" for s in sizes) + f" {'Complexity':>14}"
    print(f"{Colors.BOLD}{hdr}{Colors.END}")
    print("-" * len(hdr))

    for sr in results:
        row = f"{sr.algorithm:<16} " + " ".join(f"{ops:>12,}" for ops in sr.operations)
        print(row + f" {sr.estimated_complexity:>14}")


def print_demo(demo: DemoResult):
    print_subheader(f"Random unique array of {len(demo.original)} integers in [0, {demo.max_value - 1}]")
    print(f"  Original: {demo.original}\n")
    for name, (out, ops) in demo.results.items():
        print(f"  After {name}:")
        print(f"    {out}")
        print(f"    Operations: {ops:,}\n")
    print(f"  Generator time for n = {len(demo.original)}: {fmt_ns(demo.generation_ns)}")
