#!/usr/bin/env python3
"""
Generate plots from benchmark results.
"""

import json
import sys
from collections import defaultdict
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

# Configuration
PLOTS_DIR = Path("benchmark_results/plots")
PHASES = ("map_phase_seconds", "shuffle_phase_seconds", "reduce_phase_seconds")


def load_results(json_file):
    """Load benchmark results from JSON file."""
    with open(json_file, 'r') as f:
        return json.load(f)


def aggregate_runs(results):
    """
    Aggregate multiple runs of the same benchmark.
    Returns dict: benchmark_name -> {avg_runtime, std_runtime, config, ...}
    """
    by_benchmark = defaultdict(list)
    for r in results:
        if r['success']:
            by_benchmark[r['benchmark_name']].append(r)

    aggregated = {}
    for name, runs in by_benchmark.items():
        runtimes = [r['total_runtime_seconds'] for r in runs]
        throughputs = [r['throughput_mbps'] for r in runs]
        first = runs[0]

        entry = {
            'benchmark_name': name,
            'description': first['description'],
            'num_map_tasks': first['num_map_tasks'],
            'num_reduce_tasks': first['num_reduce_tasks'],
            'input_size_mb': first['input_size_mb'],
            'avg_runtime': float(np.mean(runtimes)),
            'std_runtime': float(np.std(runtimes)),
            'min_runtime': float(np.min(runtimes)),
            'max_runtime': float(np.max(runtimes)),
            'avg_throughput': float(np.mean(throughputs)),
            'num_runs': len(runs)
        }
        for phase in PHASES:
            values = [r[phase] for r in runs if phase in r]
            entry[phase] = float(np.mean(values)) if values else 0.0
        aggregated[name] = entry

    return aggregated


def _save(output_file):
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def plot_scaling(aggregated, prefix, x_field, xlabel, title, output_file,
                 marker='o', color=None):
    """Plot average runtime (with std dev) against one configuration field."""
    data = sorted((v[x_field], v['avg_runtime'], v['std_runtime'])
                  for k, v in aggregated.items() if k.startswith(prefix))
    if not data:
        print(f"⚠️  No {prefix.rstrip('_')} data found")
        return

    xs, runtimes, stds = zip(*data)
    plt.figure(figsize=(10, 6))
    plt.errorbar(xs, runtimes, yerr=stds, marker=marker, capsize=5,
                 linewidth=2, markersize=8, color=color)
    plt.xlabel(xlabel, fontsize=12)
    plt.ylabel('Runtime (seconds)', fontsize=12)
    plt.title(title, fontsize=14, fontweight='bold')
    if x_field != 'input_size_mb':
        plt.xticks(xs)
    _save(output_file)


def plot_speedup(aggregated, output_file):
    """Plot speedup for map task scaling."""
    data = sorted((v['num_map_tasks'], v['avg_runtime'])
                  for k, v in aggregated.items() if k.startswith('map_scaling_'))
    if len(data) < 2:
        print("⚠️  Insufficient data for speedup plot")
        return

    map_tasks, runtimes = zip(*data)
    speedups = [runtimes[0] / rt for rt in runtimes]

    plt.figure(figsize=(10, 6))
    plt.plot(map_tasks, speedups, marker='o', linewidth=2, markersize=8,
             label='Actual Speedup', color='blue')
    plt.plot(map_tasks, list(map_tasks), linestyle='--', linewidth=2,
             label='Ideal (Linear) Speedup', color='gray', alpha=0.7)
    plt.xlabel('Number of Map Tasks', fontsize=12)
    plt.ylabel('Speedup', fontsize=12)
    plt.title('Map Thread Speedup vs Ideal Linear Speedup', fontsize=14, fontweight='bold')
    plt.xticks(map_tasks)
    plt.legend(fontsize=11)
    _save(output_file)


def plot_phase_breakdown(aggregated, output_file):
    """Stacked bars of map, shuffle and reduce time per benchmark."""
    names = sorted(aggregated)
    if not names:
        print("⚠️  No data for phase breakdown")
        return

    positions = np.arange(len(names))
    bottom = np.zeros(len(names))
    plt.figure(figsize=(12, 6))
    for phase, color in zip(PHASES, ('steelblue', 'orange', 'seagreen')):
        values = np.array([aggregated[n][phase] for n in names])
        plt.bar(positions, values, bottom=bottom, color=color,
                label=phase.replace('_seconds', '').replace('_', ' '))
        bottom += values
    plt.xticks(positions, names, rotation=45, ha='right')
    plt.ylabel('Time (seconds)', fontsize=12)
    plt.title('Time per Pipeline Phase', fontsize=14, fontweight='bold')
    plt.legend(fontsize=11)
    _save(output_file)


def plot_combined_heatmap(aggregated, output_file):
    """Plot heatmap of runtime for different (map, reduce) combinations."""
    data = [(v['num_map_tasks'], v['num_reduce_tasks'], v['avg_runtime'])
            for k, v in aggregated.items() if k.startswith('combined_')]
    if not data:
        print("⚠️  No combined scaling data found")
        return

    map_values = sorted(set(d[0] for d in data))
    reduce_values = sorted(set(d[1] for d in data))

    matrix = np.zeros((len(reduce_values), len(map_values)))
    for m, r, runtime in data:
        matrix[reduce_values.index(r), map_values.index(m)] = runtime

    plt.figure(figsize=(10, 8))
    im = plt.imshow(matrix, cmap='YlOrRd', aspect='auto')
    plt.xticks(range(len(map_values)), map_values)
    plt.yticks(range(len(reduce_values)), reduce_values)
    plt.xlabel('Number of Map Tasks', fontsize=12)
    plt.ylabel('Number of Reduce Tasks', fontsize=12)
    plt.title('Runtime Heatmap (seconds)', fontsize=14, fontweight='bold')
    plt.colorbar(im).set_label('Runtime (seconds)', fontsize=11)

    for i in range(len(reduce_values)):
        for j in range(len(map_values)):
            if matrix[i, j] > 0:
                plt.text(j, i, f'{matrix[i, j]:.2f}',
                         ha="center", va="center", color="black", fontsize=10)

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"✓ Saved: {output_file}")
    plt.close()


def generate_summary_table(aggregated, output_file):
    """Generate a markdown table summarizing all results."""
    lines = [
        "# Benchmark Results Summary\n",
        "| Benchmark | Maps | Reduces | Input (MB) | Avg Runtime (s) | Std Dev | Throughput (MB/s) |",
        "|-----------|------|---------|------------|-----------------|---------|-------------------|"
    ]

    for name in sorted(aggregated):
        v = aggregated[name]
        lines.append(
            f"| {v['benchmark_name']:<21} | {v['num_map_tasks']:>4} | "
            f"{v['num_reduce_tasks']:>7} | {v['input_size_mb']:>10.2f} | "
            f"{v['avg_runtime']:>15.3f} | {v['std_runtime']:>7.3f} | "
            f"{v['avg_throughput']:>17.3f} |"
        )

    with open(output_file, 'w') as f:
        f.write('\n'.join(lines))

    print(f"✓ Saved: {output_file}")


def main():
    """Generate all plots from benchmark results."""
    if len(sys.argv) < 2:
        print("Usage: python plot_results.py <results.json>")
        return 1

    json_file = sys.argv[1]
    if not Path(json_file).exists():
        print(f"❌ File not found: {json_file}")
        return 1

    results = load_results(json_file)
    aggregated = aggregate_runs(results)
    print(f"✓ Aggregated {len(results)} runs into {len(aggregated)} benchmarks")

    PLOTS_DIR.mkdir(parents=True, exist_ok=True)

    plot_scaling(aggregated, 'input_size_', 'input_size_mb', 'Input Size (MB)',
                 'Input Size Scaling (4 map, 2 reduce threads)',
                 PLOTS_DIR / "1_input_size_scaling.png")
    plot_scaling(aggregated, 'map_scaling_', 'num_map_tasks', 'Number of Map Tasks',
                 'Map Thread Parallelism (2 reduce threads)',
                 PLOTS_DIR / "2_map_task_scaling.png", marker='s', color='orangered')
    plot_scaling(aggregated, 'reduce_scaling_', 'num_reduce_tasks', 'Number of Reduce Tasks',
                 'Reduce Thread Parallelism (4 map threads)',
                 PLOTS_DIR / "3_reduce_task_scaling.png", marker='^', color='green')
    plot_speedup(aggregated, PLOTS_DIR / "4_speedup_analysis.png")
    plot_combined_heatmap(aggregated, PLOTS_DIR / "5_combined_heatmap.png")
    plot_phase_breakdown(aggregated, PLOTS_DIR / "6_phase_breakdown.png")
    generate_summary_table(aggregated, PLOTS_DIR / "results_table.md")

    print(f"\nAll plots saved to: {PLOTS_DIR}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
