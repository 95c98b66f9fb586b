#!/usr/bin/env python3
"""
Sorting Case Analysis - Main Runner
===================================

Measures Selection Sort and Merge Sort on average (random unique values),
best (ascending) and worst (descending) inputs, reporting exact operation
counts next to wall-clock time.

Usage:
    python benchmark_sorts.py
    python benchmark_sorts.py --sizes 100 1000 --runs 5 --seed 7
    python benchmark_sorts.py --demo
    python benchmark_sorts.py --scaling --output report.json
"""

import argparse
import json
import logging
import os
import sys

from benchmark_core import (
    BenchmarkConfig, BenchmarkEngine, InvalidSizeRangeError,
    DEFAULT_SIZES, SCALING_SIZES,
    get_algorithms, get_system_info,
    print_header, print_size_report, print_scaling_table, print_demo,
    Colors,
)

LOGGER = logging.getLogger("sort_benchmark.cli")


def run_experiment(engine: BenchmarkEngine, quiet: bool = False):
    """Analyze every configured size; a size that fails does not stop the others."""
    if not quiet:
        print_header("Sorting Algorithm Analysis")
        print(f"  Algorithms: {', '.join(a.name + ' (' + a.expected_complexity + ')' for a in engine.algorithms.values())}")
        print(f"  Runs per average-case test: {engine.config.runs}")
        print(f"  Value range: n x {engine.config.range_multiplier}")

    reports = []
    failed = []
    for n in engine.config.sizes:
        try:
            report = engine.analyze_size(n)
        except InvalidSizeRangeError as e:
            LOGGER.error("Skipping n=%d: %s", n, e)
            failed.append(n)
            continue
        reports.append(report)
        if not quiet:
            print_size_report(report)

    return reports, failed


def run_scaling(engine: BenchmarkEngine, sizes, quiet: bool = False):
    if not quiet:
        print_header("Scaling Analysis")
        print(f"  Sizes: {list(sizes)}\n")

    results = [engine.run_scaling_analysis(algo, sizes) for algo in engine.algorithms.values()]
    if not quiet:
        print_scaling_table(results)
    return results


def run_demo(engine: BenchmarkEngine, quiet: bool = False):
    demo = engine.run_demo()
    if not quiet:
        print_header("Demonstration")
        print_demo(demo)
    return demo


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Selection Sort vs Merge Sort case analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                   Full experiment plus demo
  %(prog)s --sizes 100 500 --runs 3          Custom sizes
  %(prog)s --demo                            Demo only
  %(prog)s --scaling -o report.json          Scaling analysis with JSON export
        """
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--demo", action="store_true", help="Only run the small demonstration")
    mode.add_argument("--scaling", action="store_true", help="Only run the scaling analysis")

    parser.add_argument("--sizes", type=int, nargs="+",
                        help=f"Array sizes (default: {' '.join(map(str, DEFAULT_SIZES))}; "
                             f"with --scaling: {' '.join(map(str, SCALING_SIZES))})")
    parser.add_argument("--runs", type=int, default=10, help="Average-case runs per size (default: 10)")
    parser.add_argument("--range-multiplier", type=int, default=4,
                        help="Values are drawn below n * multiplier (default: 4)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--algorithms", nargs="+", choices=list(get_algorithms().keys()),
                        help="Algorithms to run (default: all)")
    parser.add_argument("--no-gc-pause", action="store_true", help="Leave GC enabled while timing")
    parser.add_argument("--no-verify", action="store_true", help="Skip the reference-sort check")
    parser.add_argument("--output", "-o", type=str, help="JSON output path")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    parser.add_argument("--log-level", default=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
                        help="Logging level (default: $BENCHMARK_LOG_LEVEL or INFO)")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = BenchmarkConfig(
            seed=args.seed,
            runs=args.runs,
            range_multiplier=args.range_multiplier,
            sizes=tuple(args.sizes or DEFAULT_SIZES),
            gc_between_runs=not args.no_gc_pause,
            verify=not args.no_verify,
        )
    except ValueError as e:
        LOGGER.error("Invalid configuration: %s", e)
        return 2

    engine = BenchmarkEngine(config, algorithms=get_algorithms(args.algorithms))

    reports, failed, scaling, demo = [], [], [], None
    if args.demo:
        demo = run_demo(engine, args.quiet)
    elif args.scaling:
        scaling = run_scaling(engine, args.sizes or SCALING_SIZES, args.quiet)
    else:
        reports, failed = run_experiment(engine, args.quiet)
        demo = run_demo(engine, args.quiet)

    if args.output:
        payload = {
            "metadata": get_system_info(),
            "algorithm_info": {key: algo.to_dict() for key, algo in engine.algorithms.items()},
            "config": {
                "seed": config.seed,
                "runs": config.runs,
                "range_multiplier": config.range_multiplier,
                "sizes": list(config.sizes),
            },
            "sizes": [r.to_dict() for r in reports],
            "failed_sizes": failed,
            "scaling": [s.to_dict() for s in scaling],
            "demo": demo.to_dict() if demo else None,
        }
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, default=str)
        LOGGER.info("JSON report saved to %s", args.output)

    if not args.quiet:
        print(f"\n{Colors.CYAN}Experiment complete.{Colors.END}\n")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
