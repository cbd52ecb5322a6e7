#!/usr/bin/env python3
"""
Intcode machine benchmark runner.
Times a few representative workloads and records process memory.
"""

import os
import sys
import time
import json
import psutil
import statistics
from pathlib import Path
from typing import Callable, Dict, List, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intcode.machine import Machine
from intcode.network import best_phase_setting

# Reads N, counts up to it in memory, outputs N.
COUNT_LOOP = "3,100,1001,101,1,101,7,101,100,102,1005,102,2,4,101,99"
AMPLIFIER = "3,15,3,16,1002,16,10,16,1,16,15,15,4,15,99,0,0"
FEEDBACK_AMPLIFIER = (
    "3,26,1001,26,-4,26,3,27,1002,27,2,27,1,27,26,27,"
    "4,27,1001,28,-1,28,1005,28,6,99,0,0,5"
)
QUINE = "109,1,204,-1,1001,100,1,100,1008,100,16,101,1006,101,0,99"


def _count_loop() -> int:
    machine = Machine.from_text(COUNT_LOOP)
    machine.push(20000)
    machine.run_to_halt()
    return machine.steps


def _amplifier_search() -> int:
    best_phase_setting(Machine.from_text(AMPLIFIER), range(5))
    best_phase_setting(Machine.from_text(FEEDBACK_AMPLIFIER), range(5, 10), feedback=True)
    return 0


def _quine() -> int:
    steps = 0
    for _ in range(200):
        machine = Machine.from_text(QUINE)
        machine.run_to_halt()
        steps += machine.steps
    return steps


WORKLOADS: Dict[str, Callable[[], int]] = {
    "count_loop": _count_loop,
    "amplifier_search": _amplifier_search,
    "quine": _quine,
}


class IntcodeBenchmarkRunner:
    def __init__(self, results_dir: str = "benchmark/results"):
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.process = psutil.Process(os.getpid())

    def run_workload(self, workload: Callable[[], int]) -> Tuple[float, int, int]:
        """Run one workload; returns (seconds, steps, rss delta in bytes)."""
        rss_before = self.process.memory_info().rss
        start_time = time.perf_counter()
        steps = workload()
        execution_time = time.perf_counter() - start_time
        rss_after = self.process.memory_info().rss
        return execution_time, steps, rss_after - rss_before

    def run_benchmark_suite(self, iterations: int = 3) -> Dict:
        results = {
            "test_info": {
                "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
                "iterations": iterations,
                "python_version": sys.version,
                "system_info": {
                    "platform": sys.platform,
                    "cpu_count": psutil.cpu_count(),
                },
            },
            "tests": {},
        }

        for name, workload in WORKLOADS.items():
            print(f"\nRunning {name}...")
            times: List[float] = []
            rss: List[int] = []
            steps = 0
            for i in range(iterations):
                print(f"  Iteration {i+1}/{iterations}")
                exec_time, steps, rss_delta = self.run_workload(workload)
                times.append(exec_time)
                rss.append(rss_delta)

            avg_time = statistics.mean(times)
            results["tests"][name] = {
                "avg_time": avg_time,
                "min_time": min(times),
                "max_time": max(times),
                "std_dev": statistics.stdev(times) if len(times) > 1 else 0,
                "steps": steps,
                "steps_per_second": steps / avg_time if avg_time > 0 and steps else 0,
                "max_rss_delta": max(rss),
                "times": times,
            }
        return results

    def save_results(self, results: Dict, filename: str = None):
        if filename is None:
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filename = f"benchmark_results_{timestamp}.json"

        result_path = self.results_dir / filename
        with open(result_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2)

        print(f"\nResults saved to: {result_path}")
        return result_path

    def print_summary(self, results: Dict):
        print("\n" + "="*60)
        print("INTCODE BENCHMARK SUMMARY")
        print("="*60)

        test_info = results.get("test_info", {})
        print(f"Test Time: {test_info.get('timestamp')}")
        print(f"Iterations: {test_info.get('iterations')}")
        print()

        print(f"{'Test':<20} {'Avg (s)':<12} {'Std dev':<10} {'Steps/s':<14} {'RSS delta':<12}")
        print("-" * 70)
        for test_name, data in results.get("tests", {}).items():
            rate = data.get("steps_per_second", 0)
            rate_str = f"{rate:,.0f}" if rate else "N/A"
            print(
                f"{test_name:<20} {data['avg_time']:<12.4f} {data['std_dev']:<10.4f} "
                f"{rate_str:<14} {data['max_rss_delta'] // 1024:>8} KiB"
            )


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Intcode machine benchmark')
    parser.add_argument('-i', '--iterations', type=int, default=3,
                        help='Iterations per workload (default: 3)')
    parser.add_argument('-o', '--output', type=str,
                        help='Result file name')
    parser.add_argument('--results-dir', type=str, default='benchmark/results',
                        help='Directory for JSON results (default: benchmark/results)')
    args = parser.parse_args()

    runner = IntcodeBenchmarkRunner(args.results_dir)
    results = runner.run_benchmark_suite(args.iterations)
    runner.print_summary(results)
    runner.save_results(results, args.output)


if __name__ == "__main__":
    main()
