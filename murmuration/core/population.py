import logging
import math

import numpy as np

from murmuration.config import Config, ConfigurationError, FlockParams
from murmuration.core.agent import Agent
from murmuration.core.forces import compute_forces
from murmuration.core.integrator import step
from murmuration.core.noise_source import PerlinNoise
from murmuration.core.spatial import SpatialIndex
from murmuration.core.vector import Vector2

logger = logging.getLogger(__name__)


class Population:
    """
    One independently simulated flock.

    Owns its agents, the predator it flees from and the two noise clocks
    driving mood and predator wander. Agent order is fixed for the life of
    the population; an agent's index is its ID in neighbour queries.
    """

    def __init__(
        self,
        agents,
        params=None,
        noise=None,
        mood_clock_step=Config.MOOD_CLOCK_STEP,
        predator_clock_step=Config.PREDATOR_CLOCK_STEP,
        predator_y_offset=Config.PREDATOR_Y_OFFSET,
        max_dt=Config.MAX_DT,
    ):
        agents = list(agents)
        if len(agents) < 2:
            raise ConfigurationError(
                f"a population needs at least 2 agents to have neighbours, got {len(agents)}"
            )
        for i, agent in enumerate(agents):
            if not (agent.position.is_finite() and agent.velocity.is_finite()):
                raise ConfigurationError(f"agent {i} has a non-finite position or velocity")
        if not (math.isfinite(max_dt) and max_dt > 0):
            raise ConfigurationError(f"max_dt must be positive and finite, got {max_dt}")

        self.params = (params if params is not None else FlockParams.from_config()).validate()
        self._agents = agents
        self.noise = noise if noise is not None else PerlinNoise()
        self.mood_clock_step = mood_clock_step
        self.predator_clock_step = predator_clock_step
        self.predator_y_offset = predator_y_offset
        self.max_dt = max_dt

        self.mood_clock = 0.0
        self.predator_clock = 0.0
        self.tick = 0
        self.mood = self._sample_mood()
        self.predator = self._sample_predator(self.params)

        logger.debug(
            "Created population of %d agents in %gx%g world",
            len(agents),
            2 * self.params.half_width,
            2 * self.params.half_height,
        )

    @classmethod
    def scattered(cls, count=Config.N_AGENTS, params=None, noise=None, seed=None, **kwargs):
        """
        Gaussian cloud around the world centre, everyone at rest.

        Standard deviation is a quarter of each half extent.
        """
        params = params if params is not None else FlockParams.from_config()
        rng = np.random.default_rng(seed)
        xs = rng.normal(0.0, params.half_width / 4, size=count)
        ys = rng.normal(0.0, params.half_height / 4, size=count)
        agents = [Agent(position=Vector2(float(x), float(y))) for x, y in zip(xs, ys)]
        return cls(agents, params=params, noise=noise, **kwargs)

    @property
    def agents(self):
        # Tuple so callers cannot change the population size
        return tuple(self._agents)

    def __len__(self):
        return len(self._agents)

    def positions(self):
        return np.array([[a.position.x, a.position.y] for a in self._agents])

    def velocities(self):
        return np.array([[a.velocity.x, a.velocity.y] for a in self._agents])

    def _sample_mood(self):
        # Noise output [0, 1] -> mood [-0.5, 1.0]
        return self.noise.sample(self.mood_clock) * 1.5 - 0.5

    def _sample_predator(self, params):
        sx = self.noise.sample(self.predator_clock)
        sy = self.noise.sample(self.predator_clock + self.predator_y_offset)
        return Vector2(
            (sx * 2.0 - 1.0) * params.half_width,
            (sy * 2.0 - 1.0) * params.half_height,
        )

    def advance_clocks(self, params=None):
        """Move both noise clocks one tick forward and refresh mood and predator."""
        params = params if params is not None else self.params
        self.mood_clock += self.mood_clock_step
        self.predator_clock += self.predator_clock_step
        self.mood = self._sample_mood()
        self.predator = self._sample_predator(params)
        return self.mood

    def _check_tick_inputs(self, num_neighbors, dt, params):
        if isinstance(num_neighbors, bool) or not isinstance(num_neighbors, (int, np.integer)):
            raise ConfigurationError(f"num_neighbors must be an integer, got {num_neighbors!r}")
        if num_neighbors < 1:
            raise ConfigurationError(f"num_neighbors must be >= 1, got {num_neighbors}")
        if not (math.isfinite(dt) and dt >= 0):
            raise ConfigurationError(f"dt must be finite and >= 0, got {dt}")
        if params is not self.params:
            params.validate()

    def update(self, num_neighbors=Config.NUM_NEIGHBORS, dt=Config.DT, params=None):
        """
        Advance the flock by one tick and return the mood used for it.

        All forces are evaluated against the same position snapshot before
        any agent moves. Inputs are checked before any state changes, so a
        rejected call leaves the population untouched.
        """
        params = params if params is not None else self.params
        self._check_tick_inputs(num_neighbors, dt, params)
        if dt > self.max_dt:
            logger.debug("Clamping dt %.3f to %.3f", dt, self.max_dt)
            dt = self.max_dt

        # 1. Neighbour index over this tick's positions
        index = SpatialIndex.from_points([a.position.as_tuple() for a in self._agents])

        # 2. Noise driven mood and predator
        mood = self.advance_clocks(params)

        # 3. Forces for everyone against the same snapshot
        table = index.neighbor_table(num_neighbors)
        breakdowns = [
            compute_forces(
                agent.position,
                agent.velocity,
                neighbor_ids,
                self._agents,
                self.predator,
                mood,
                params,
            )
            for agent, neighbor_ids in zip(self._agents, table)
        ]

        # 4. Integrate only once every force is known
        for agent, forces in zip(self._agents, breakdowns):
            agent.forces = forces
            step(agent, forces.acceleration(params.acceleration_limit), dt)

        self.tick += 1
        return mood
