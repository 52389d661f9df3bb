import json
import logging
import os
import sys

from tqdm import tqdm

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from murmuration.analysis.metrics import flock_summary
from murmuration.config import Config
from murmuration.core.population import Population

logger = logging.getLogger(__name__)


def run(
    steps=Config.STEPS,
    n_agents=Config.N_AGENTS,
    num_neighbors=Config.NUM_NEIGHBORS,
    dt=Config.DT,
    stats_interval=100,
    seed=None,
    export_stats=None,
):
    """Step one flock without any drawing and report its structure as it goes."""
    logger.info(Config.info())
    flock = Population.scattered(n_agents, seed=seed)

    history = []
    for _ in tqdm(range(steps), desc="Simulating"):
        flock.update(num_neighbors, dt)
        if stats_interval > 0 and flock.tick % stats_interval == 0:
            summary = flock_summary(flock, Config.CONNECTION_RADIUS)
            history.append(summary)
            logger.info(
                "tick %5d | mood %+.2f | order %.3f | groups %3d | cohesion %.3f | speed %.1f",
                summary["tick"],
                summary["mood"],
                summary["order"],
                summary["fragments"],
                summary["cohesion"],
                summary["mean_speed"],
            )

    if export_stats:
        with open(export_stats, "w") as f:
            json.dump(history, f, indent=2)
        logger.info("Stats exported to %s", export_stats)

    return flock, history


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    run()


if __name__ == "__main__":
    main()
