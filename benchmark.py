#!/usr/bin/env python3
"""
Automated benchmarking script for the threaded MapReduce pipeline.
Runs multiple job configurations in process and collects performance metrics.
"""

import csv
import json
import sys
import time
import shutil
import logging
import tempfile
from datetime import datetime
from pathlib import Path

from threadmr.common.config import PipelineConfig
from threadmr.common.errors import MapReduceError
from threadmr.coordinator.job_manager import JobManager

# Configuration
RESULTS_DIR = Path("benchmark_results")
INPUT_DIR = Path("benchmark_inputs")


def _config(name, input_file, maps, reduces, description):
    return {
        "name": name,
        "input": str(INPUT_DIR / input_file),
        "maps": maps,
        "reduces": reduces,
        "description": description,
    }


# Benchmark configurations
BENCHMARKS = (
    # Experiment 1: Input Size Scaling (fixed parallelism)
    [_config(f"input_size_{size}", f"lines_{size}.txt", 4, 2, f"{size.capitalize()} input")
     for size in ("small", "medium", "large")]
    # Experiment 2: Map Task Scaling (fixed input)
    + [_config(f"map_scaling_{m}", "lines_large.txt", m, 2, f"{m} map tasks")
       for m in (1, 2, 4, 8)]
    # Experiment 3: Reduce Task Scaling (fixed input)
    + [_config(f"reduce_scaling_{r}", "lines_large.txt", 4, r, f"{r} reduce tasks")
       for r in (1, 2, 4, 8)]
    # Experiment 4: Combined Scaling
    + [_config(f"combined_{m}_{r}", "lines_large.txt", m, r, f"Combined: {m} maps, {r} reduces")
       for m, r in ((1, 1), (2, 2), (4, 2), (8, 4))]
)


def run_benchmark(config, run_number=1):
    """Run a single benchmark configuration."""
    print(f"\n{'='*70}")
    print(f"Benchmark: {config['name']} (Run {run_number})")
    print(f"Description: {config['description']}")
    print(f"Config: {config['maps']} maps, {config['reduces']} reduces")
    print(f"{'='*70}")

    input_path = Path(config['input'])
    if not input_path.exists():
        print(f"❌ Input file not found: {input_path}")
        print("   Run scripts/generate_benchmark_inputs.py first. Skipping...")
        return None

    input_size = input_path.stat().st_size
    print(f"Input size: {input_size / 1024 / 1024:.2f} MB")

    output_dir = tempfile.mkdtemp(prefix=f"threadmr-{config['name']}-")
    manager = JobManager(PipelineConfig(output_dir=output_dir))

    start_time = time.time()
    success = True
    error_message = ""
    job = None
    try:
        job = manager.run_job(str(input_path), config['maps'], config['reduces'])
    except MapReduceError as e:
        success = False
        error_message = str(e)
        print(f"  ❌ Job failed: {e}")
    finally:
        shutil.rmtree(output_dir, ignore_errors=True)
    duration = time.time() - start_time

    if success:
        print(f"  ✓ Job completed in {duration:.2f}s")

    result = {
        "benchmark_name": config["name"],
        "description": config["description"],
        "run_number": run_number,
        "timestamp": datetime.now().isoformat(),
        "input_file": config["input"],
        "input_size_bytes": input_size,
        "input_size_mb": round(input_size / 1024 / 1024, 2),
        "num_map_tasks": config["maps"],
        "num_reduce_tasks": config["reduces"],
        "success": success,
        "error_message": error_message,
        "total_runtime_seconds": round(duration, 3),
        "throughput_mbps": round((input_size / 1024 / 1024) / duration, 3) if duration > 0 else 0,
    }

    if job is not None and job.metrics is not None:
        metrics = job.metrics
        result.update({
            "map_phase_seconds": round(metrics.map_phase_time_seconds, 3),
            "shuffle_phase_seconds": round(metrics.shuffle_phase_time_seconds, 3),
            "reduce_phase_seconds": round(metrics.reduce_phase_time_seconds, 3),
            "peak_memory_mb": round(metrics.peak_memory_bytes / 1024 / 1024, 2),
        })

    return result


def save_results(results, timestamp):
    """Save results to JSON and CSV files."""
    RESULTS_DIR.mkdir(exist_ok=True)

    # JSON format
    json_file = RESULTS_DIR / f"benchmark_results_{timestamp}.json"
    with open(json_file, 'w') as f:
        json.dump(results, f, indent=2)
    print(f"\n✓ Results saved to: {json_file}")

    # CSV format
    csv_file = RESULTS_DIR / f"benchmark_results_{timestamp}.csv"
    if results:
        fieldnames = sorted({key for r in results for key in r})
        with open(csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(results)
        print(f"✓ Results saved to: {csv_file}")

    return json_file, csv_file


def print_summary(results):
    """Print a summary table of results."""
    print(f"\n{'='*70}")
    print("BENCHMARK SUMMARY")
    print(f"{'='*70}")
    print(f"{'Benchmark':<25} {'Maps':>5} {'Reduces':>7} {'Runtime':>10} {'Status':>10}")
    print(f"{'-'*70}")

    for r in results:
        print(f"{r['benchmark_name']:<25} {r['num_map_tasks']:>5} "
              f"{r['num_reduce_tasks']:>7} {r['total_runtime_seconds']:>9.2f}s "
              f"{'✓' if r['success'] else '✗':>10}")

    print(f"{'='*70}")

    successful = sum(1 for r in results if r['success'])
    print(f"Total: {len(results)} benchmarks, {successful} successful, "
          f"{len(results) - successful} failed")


def main():
    """Main benchmarking workflow."""
    print("="*70)
    print("MapReduce Performance Benchmark Suite")
    print("="*70)

    logging.basicConfig(level=logging.WARNING,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    runs_per_benchmark = 1
    for arg in sys.argv[1:]:
        if arg.startswith("--runs="):
            runs_per_benchmark = max(1, min(5, int(arg.split("=", 1)[1])))

    print(f"\nRunning {len(BENCHMARKS)} benchmarks × {runs_per_benchmark} runs = "
          f"{len(BENCHMARKS) * runs_per_benchmark} total jobs")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    all_results = []

    for config in BENCHMARKS:
        for run in range(1, runs_per_benchmark + 1):
            result = run_benchmark(config, run_number=run)
            if result:
                all_results.append(result)

    if all_results:
        json_file, _ = save_results(all_results, timestamp)
        print_summary(all_results)

        print(f"\n{'='*70}")
        print("Next steps:")
        print(f"  1. Review results: cat {json_file}")
        print(f"  2. Generate plots: python plot_results.py {json_file}")
        print(f"{'='*70}")
        return 0

    print("\n❌ No results collected")
    return 1


if __name__ == "__main__":
    sys.exit(main())
