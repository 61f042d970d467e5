import sys

import matplotlib.pyplot as plt

from policies import ALGORITHMS
from simulator import DEFAULT_CLOCK_FREQUENCY, run_simulation

METRICS = ['page_faults', 'evictions', 'dirty_writes']
TITLES = ['Page Faults', 'Evictions', 'Dirty Page Writes']


def compare_policies(trace_files, clock_freq=DEFAULT_CLOCK_FREQUENCY, random_seed=None):
    """Run every algorithm over every trace; results[trace][algorithm][metric]."""
    results = {}
    for trace_file in trace_files:
        results[trace_file] = {}
        for algorithm in ALGORITHMS:
            _, stats = run_simulation(trace_file, algorithm, clock_freq=clock_freq,
                                      random_seed=random_seed)
            results[trace_file][algorithm] = stats.as_dict()
    return results


def plot_results(results, output='algorithm_comparison.png'):
    trace_files = list(results)
    fig, axes = plt.subplots(1, len(METRICS), figsize=(15, 5))
    fig.suptitle('Page Replacement Algorithm Comparison', fontsize=14, fontweight='bold')

    x = range(len(ALGORITHMS))
    width = 0.8 / len(trace_files)
    legend_handles = []

    for idx, (metric, title) in enumerate(zip(METRICS, TITLES)):
        ax = axes[idx]
        for t, trace_file in enumerate(trace_files):
            values = [results[trace_file][alg][metric] for alg in ALGORITHMS]
            offset = (t - (len(trace_files) - 1) / 2) * width
            bars = ax.bar([i + offset for i in x], values, width, label=trace_file)
            if idx == 0:
                legend_handles.append(bars[0])

            for bar in bars:
                height = bar.get_height()
                ax.text(bar.get_x() + bar.get_width()/2., height,
                        f'{int(height)}', ha='center', va='bottom', fontsize=8)

        ax.set_title(title)
        ax.set_xticks(list(x))
        ax.set_xticklabels(ALGORITHMS, rotation=30)
        ax.grid(axis='y', alpha=0.3)

    fig.legend(legend_handles, trace_files, loc='lower center', ncol=len(trace_files), frameon=True)

    plt.tight_layout()
    plt.subplots_adjust(bottom=0.2)
    plt.savefig(output, dpi=300, bbox_inches='tight')
    plt.close(fig)
    return output


def print_summary(results):
    for trace_file, by_algorithm in results.items():
        print(f"\n{trace_file}:")
        print(f"{'Algorithm':<15} {'Page Faults':<15} {'Evictions':<15} {'Dirty Writes':<15}")
        print("-" * 60)
        for algorithm in ALGORITHMS:
            r = by_algorithm[algorithm]
            print(f"{algorithm:<15} {r['page_faults']:<15} {r['evictions']:<15} {r['dirty_writes']:<15}")


def main(argv=None):
    trace_files = sys.argv[1:] if argv is None else argv
    if not trace_files:
        print("Usage: generate_graphs.py <trace> [<trace> ...]", file=sys.stderr)
        return 1

    print("Running simulations...")
    results = compare_policies(trace_files, random_seed=0)
    print_summary(results)
    output = plot_results(results)
    print(f"\nGraph saved as '{output}'")
    return 0


if __name__ == '__main__':
    sys.exit(main())
