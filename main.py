#!/usr/bin/env python3
"""
Murmuration Flocking Simulation

Birds react to their nearest neighbours (separation, alignment, cohesion),
flee a wandering predator and stay inside a soft-walled world. Mood and
predator wander drift slowly with Perlin noise.

Usage:
    python main.py                          # Headless run, stats every 100 ticks
    python main.py --steps 5000 --seed 42   # Longer reproducible run
    python main.py --sweep                  # Neighbour count sweep with plots
"""

import argparse
import logging

from murmuration.config import Config

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Murmuration Flocking Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--sweep",
        action="store_true",
        help="Run the neighbour count sweep instead of a single flock",
    )
    parser.add_argument(
        "--steps", type=int, default=Config.STEPS, help=f"Ticks to simulate (default: {Config.STEPS})"
    )
    parser.add_argument(
        "--agents", type=int, default=Config.N_AGENTS, help=f"Flock size (default: {Config.N_AGENTS})"
    )
    parser.add_argument(
        "--neighbors",
        type=int,
        default=Config.NUM_NEIGHBORS,
        help=f"Neighbours each bird reacts to (default: {Config.NUM_NEIGHBORS})",
    )
    parser.add_argument(
        "--stats-interval",
        type=int,
        default=100,
        help="Report flock stats every N ticks (default: 100)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for initial placement")
    parser.add_argument(
        "--export-stats", type=str, default=None, metavar="FILENAME", help="Write stats history as JSON"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    if args.sweep:
        from experiments.sweep import main as run_sweep

        run_sweep()
        return

    from experiments.run_headless import run

    logger.info("Starting headless simulation: %d ticks, %d birds", args.steps, args.agents)
    run(
        steps=args.steps,
        n_agents=args.agents,
        num_neighbors=args.neighbors,
        stats_interval=args.stats_interval,
        seed=args.seed,
        export_stats=args.export_stats,
    )


if __name__ == "__main__":
    main()
