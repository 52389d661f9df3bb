"""
Parameter Sweep: Neighbour Count vs Flock Structure

Runs the murmuration model for a range of topological neighbour counts and
measures how aligned and how fragmented the flock ends up.
"""

import csv
import os
import sys
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from murmuration.analysis.metrics import fragmentation, order_parameter
from murmuration.config import Config
from murmuration.core.population import Population


def run_sweep(
    neighbor_counts=range(1, 21),
    n_trials=3,
    warmup_steps=300,
    measure_steps=50,
    seed=0,
):
    """
    Run the neighbour-count sweep.

    Args:
        neighbor_counts: Values of num_neighbors to test
        n_trials: Independent flocks per value
        warmup_steps: Ticks before measuring
        measure_steps: Ticks averaged for each measurement
        seed: Base seed; trial t of every value uses seed + t

    Returns:
        Dictionary containing all results and statistics
    """
    neighbor_counts = np.array(list(neighbor_counts))

    print("=" * 60)
    print("MURMURATION - NEIGHBOUR COUNT SWEEP")
    print("=" * 60)
    print(Config.info())
    print(f"Sweep: num_neighbors in {neighbor_counts.min()}..{neighbor_counts.max()}")
    print(f"Trials per value: {n_trials}, Warmup: {warmup_steps} ticks")
    print("=" * 60)

    all_cluster_sizes = []
    all_order_params = []
    all_n_fragments = []

    for k in tqdm(neighbor_counts, desc="Sweeping neighbour count"):
        trial_clusters = []
        trial_orders = []
        trial_fragments = []

        for trial in range(n_trials):
            flock = Population.scattered(Config.N_AGENTS, seed=seed + trial)

            for _ in range(warmup_steps):
                flock.update(int(k), Config.DT)

            sample_clusters = []
            sample_orders = []
            sample_fragments = []

            for _ in range(measure_steps):
                flock.update(int(k), Config.DT)

                n_comp, largest = fragmentation(flock.positions(), Config.CONNECTION_RADIUS)
                sample_clusters.append(largest / len(flock))
                sample_orders.append(order_parameter(flock.velocities()))
                sample_fragments.append(n_comp)

            trial_clusters.append(np.mean(sample_clusters))
            trial_orders.append(np.mean(sample_orders))
            trial_fragments.append(np.mean(sample_fragments))

        all_cluster_sizes.append(trial_clusters)
        all_order_params.append(trial_orders)
        all_n_fragments.append(trial_fragments)

    all_cluster_sizes = np.array(all_cluster_sizes)
    all_order_params = np.array(all_order_params)
    all_n_fragments = np.array(all_n_fragments)

    return {
        "neighbor_counts": neighbor_counts,
        "cluster_mean": np.mean(all_cluster_sizes, axis=1),
        "cluster_std": np.std(all_cluster_sizes, axis=1),
        "order_mean": np.mean(all_order_params, axis=1),
        "order_std": np.std(all_order_params, axis=1),
        "fragments_mean": np.mean(all_n_fragments, axis=1),
        "fragments_std": np.std(all_n_fragments, axis=1),
        "config": {
            "N_AGENTS": Config.N_AGENTS,
            "CONNECTION_RADIUS": Config.CONNECTION_RADIUS,
            "n_trials": n_trials,
            "warmup_steps": warmup_steps,
            "measure_steps": measure_steps,
        },
    }


def export_results_csv(results, filename="results/sweep_data.csv"):
    """Export results to CSV for external analysis."""
    os.makedirs(os.path.dirname(filename), exist_ok=True)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)

        writer.writerow(["# Murmuration - Neighbour Count Sweep Results"])
        writer.writerow([f"# Generated: {datetime.now().isoformat()}"])
        writer.writerow([f"# N_AGENTS: {results['config']['N_AGENTS']}"])
        writer.writerow([f"# CONNECTION_RADIUS: {results['config']['CONNECTION_RADIUS']}"])
        writer.writerow([f"# Trials per value: {results['config']['n_trials']}"])
        writer.writerow([])

        writer.writerow(
            [
                "num_neighbors",
                "cluster_size_mean",
                "cluster_size_std",
                "order_param_mean",
                "order_param_std",
                "n_fragments_mean",
                "n_fragments_std",
            ]
        )

        for i, k in enumerate(results["neighbor_counts"]):
            writer.writerow(
                [
                    int(k),
                    f"{results['cluster_mean'][i]:.4f}",
                    f"{results['cluster_std'][i]:.4f}",
                    f"{results['order_mean'][i]:.4f}",
                    f"{results['order_std'][i]:.4f}",
                    f"{results['fragments_mean'][i]:.2f}",
                    f"{results['fragments_std'][i]:.2f}",
                ]
            )

    print(f"Data exported to {filename}")


def plot_results(results, save_path="results/sweep_results.png"):
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
    ks = results["neighbor_counts"]

    ax1.errorbar(
        ks,
        results["cluster_mean"],
        yerr=results["cluster_std"],
        marker="o",
        color="tab:red",
        capsize=3,
        label="Largest group",
    )
    ax1.errorbar(
        ks,
        results["order_mean"],
        yerr=results["order_std"],
        marker="s",
        color="tab:blue",
        capsize=3,
        label="Polarization",
    )
    ax1.set_xlabel("Neighbours per bird")
    ax1.set_ylabel("Normalized Value")
    ax1.set_title("Cohesion and Alignment vs Neighbour Count")
    ax1.legend(loc="lower right")
    ax1.grid(True, alpha=0.3)
    ax1.set_ylim(0, 1.05)

    ax2.errorbar(
        ks,
        results["fragments_mean"],
        yerr=results["fragments_std"],
        marker="^",
        color="tab:purple",
        capsize=3,
        label="# Fragments",
    )
    ax2.set_xlabel("Neighbours per bird")
    ax2.set_ylabel("Number of Separate Groups")
    ax2.set_title("Fragmentation vs Neighbour Count")
    ax2.legend(loc="upper right")
    ax2.grid(True, alpha=0.3)

    fig.suptitle(
        f"Murmuration (N={Config.N_AGENTS}, link radius={Config.CONNECTION_RADIUS:g})",
        fontsize=14,
        fontweight="bold",
    )
    plt.tight_layout()

    os.makedirs(os.path.dirname(save_path), exist_ok=True)
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    print(f"Plot saved to {save_path}")

    return fig


def print_summary(results):
    print("\n" + "=" * 60)
    print("SWEEP RESULTS SUMMARY")
    print("=" * 60)

    best_cluster = np.argmax(results["cluster_mean"])
    best_order = np.argmax(results["order_mean"])
    print(
        f"  - Max cluster size: {results['cluster_mean'][best_cluster]:.3f} "
        f"at num_neighbors = {results['neighbor_counts'][best_cluster]}"
    )
    print(
        f"  - Max order param: {results['order_mean'][best_order]:.3f} "
        f"at num_neighbors = {results['neighbor_counts'][best_order]}"
    )

    stable_mask = results["cluster_mean"] > 0.9
    if np.any(stable_mask):
        print(
            f"  - Smallest neighbour count keeping >90% together: "
            f"{results['neighbor_counts'][np.argmax(stable_mask)]}"
        )
    else:
        print("  - No neighbour count kept 90% of the flock together")

    print("=" * 60)


def main():
    results = run_sweep()
    plot_results(results)
    export_results_csv(results)
    print_summary(results)


if __name__ == "__main__":
    main()
