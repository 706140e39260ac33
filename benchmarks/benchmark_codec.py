import argparse
import json
import os
import statistics
import sys
import timeit
from typing import Any, Callable, Dict, List

from dotline.encoder import flatten
from dotline.grouping import Scope
from dotline.cursor import LineCursor
from dotline.merge import merge_documents, read_tree

# --- Default Configuration ---
DEFAULT_ITERATIONS = 200
DEFAULT_REPEAT = 5
DEFAULT_DATA_FILES = [
    "dotline/tests/data/CAMPV001_BASE.a3da",
]


class Statistics:
    """Timing measurements for one operation, kept in seconds."""
    def __init__(self, times_s: List[float]):
        self.mean_s = statistics.mean(times_s)
        self.median_s = statistics.median(times_s)
        self.stdev_s = statistics.stdev(times_s) if len(times_s) > 1 else 0.0
        self.min_s = min(times_s)
        self.max_s = max(times_s)

    def to_dict(self) -> Dict[str, float]:
        """Returns the measurements in milliseconds."""
        return {
            "mean_ms": self.mean_s * 1000,
            "median_ms": self.median_s * 1000,
            "stdev_ms": self.stdev_s * 1000,
            "min_ms": self.min_s * 1000,
            "max_ms": self.max_s * 1000,
        }


def _walk_scopes(scope: Scope) -> int:
    """Visits every scope of a document depth-first, returning the number of leaf lines."""
    if scope.is_leaf():
        return scope.drain()
    return sum(_walk_scopes(child) for child in scope.subdivide())


def document_operations(content: str) -> Dict[str, Callable[[], Any]]:
    """Builds the schema-free operations measured for one document.

    - group: walks the document's prefix groups without building anything.
    - read: rebuilds the encoding tree from the lines.
    - write: flattens an already built tree back into lines.
    - merge: merges the document with itself.
    """
    tree = read_tree(content)
    return {
        "group": lambda: _walk_scopes(Scope(LineCursor(content))),
        "read": lambda: read_tree(content),
        "write": lambda: flatten(tree),
        "merge": lambda: merge_documents(content, content),
    }


class BenchmarkResult:
    """The measurements for a single data file, keyed by operation name."""
    def __init__(self, file_path: str, line_count: int):
        self.file_path = file_path
        self.line_count = line_count
        self.stats: Dict[str, Statistics] = {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": os.path.basename(self.file_path),
            "lines": self.line_count,
            "operations": {name: stats.to_dict() for name, stats in self.stats.items()},
        }


class BenchmarkRunner:
    """Runs every document operation over every data file.

    Attributes:
        data_files: Paths to the documents to measure.
        iterations: Calls per timing repetition.
        repeat: Number of timing repetitions.
        results: One `BenchmarkResult` per data file, filled in by `run()`.
    """
    def __init__(self, data_files: List[str], iterations: int, repeat: int):
        self.data_files = data_files
        self.iterations = iterations
        self.repeat = repeat
        self.results: List[BenchmarkResult] = []

    def _measure(self, func: Callable[[], Any]) -> Statistics:
        timer = timeit.Timer(func)
        times = timer.repeat(repeat=self.repeat, number=self.iterations)
        return Statistics([t / self.iterations for t in times])

    def run(self):
        for file_path in self.data_files:
            content = load_test_data(file_path)
            result = BenchmarkResult(file_path, len(LineCursor(content)))
            for name, func in document_operations(content).items():
                result.stats[name] = self._measure(func)
            self.results.append(result)

    def print_results_human_readable(self):
        print("--- dotline Benchmark ---")
        print(f"Iterations per repetition: {self.iterations}")
        print(f"Repetitions: {self.repeat}")

        for result in self.results:
            print("\n" + "=" * 80)
            print(f"Benchmark for: {os.path.basename(result.file_path)} ({result.line_count} lines)")
            print("=" * 80)
            print(f"\n  {'operation':<10}{'mean':>12}{'median':>12}{'stdev':>12}{'min':>12}{'max':>12}")
            for name, stats in result.stats.items():
                values = stats.to_dict()
                print(
                    f"  {name:<10}"
                    f"{values['mean_ms']:>10.4f}ms{values['median_ms']:>10.4f}ms{values['stdev_ms']:>10.4f}ms"
                    f"{values['min_ms']:>10.4f}ms{values['max_ms']:>10.4f}ms"
                )
            print("-" * 80)

        print("\n--- Benchmark Complete ---")

    def print_results_json(self):
        output_data = {
            "configuration": {
                "iterations": self.iterations,
                "repetitions": self.repeat,
                "data_files": self.data_files
            },
            "results": [res.to_dict() for res in self.results]
        }
        print(json.dumps(output_data, indent=2))


def load_test_data(file_path: str) -> str:
    """Loads content from a specified data file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: Data file not found at '{file_path}'.", file=sys.stderr)
        print("Please ensure the path is correct and the script is run from the repository's root directory.", file=sys.stderr)
        sys.exit(1)
    except IOError as e:
        print(f"Error reading file '{file_path}': {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """Parses command-line arguments and runs the benchmarks."""
    parser = argparse.ArgumentParser(
        description="Run benchmarks for dotline document handling.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--data-files', nargs='+', default=DEFAULT_DATA_FILES, help="Paths to the documents to use for benchmarking.")
    parser.add_argument('--iterations', type=int, default=DEFAULT_ITERATIONS, help="Number of calls within each benchmark repetition.")
    parser.add_argument('--repeat', type=int, default=DEFAULT_REPEAT, help="Number of times to repeat each benchmark.")
    parser.add_argument('--output-json', action='store_true', help="Output the results in JSON format instead of a table.")
    args = parser.parse_args()

    runner = BenchmarkRunner(data_files=args.data_files, iterations=args.iterations, repeat=args.repeat)
    runner.run()

    if args.output_json:
        runner.print_results_json()
    else:
        runner.print_results_human_readable()


if __name__ == "__main__":
    main()
