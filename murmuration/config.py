import math
from dataclasses import dataclass, fields


class ConfigurationError(ValueError):
    """Raised when a population or its parameters cannot be simulated."""


class Config:
    # Simulation Parameters
    N_AGENTS = 100            # Number of birds per population
    HALF_WIDTH = 640.0        # World spans [-HALF_WIDTH, HALF_WIDTH]
    HALF_HEIGHT = 360.0       # World spans [-HALF_HEIGHT, HALF_HEIGHT]
    OVERSHOOT = 0.0           # Extra room past the world edge before containment kicks in
    DT = 1 / 60               # Frame duration (seconds)
    MAX_DT = 1.0              # Frame hitches are clamped to this
    STEPS = 1000              # Total simulation ticks for headless runs

    # Topological Rule
    NUM_NEIGHBORS = 6         # Nearest neighbours each bird reacts to

    # Analysis
    CONNECTION_RADIUS = 60.0  # Birds closer than this count as one group

    # Noise clocks, advanced once per tick regardless of dt
    MOOD_CLOCK_STEP = 0.005
    PREDATOR_CLOCK_STEP = 0.003
    PREDATOR_Y_OFFSET = 1000.37  # Off the integer lattice so x and y never both read 0.5

    # Force constants
    SEPARATION = 2000.0       # Inverse-square repulsion numerator
    PREDATOR = 800.0          # Inverse-distance repulsion numerator
    ALIGNMENT_BASE = 10.0
    ALIGNMENT_MOOD = 30.0
    COHESION = 20.0
    EDGE_DIVISOR = 200.0      # Edge force = overshoot^2 / EDGE_DIVISOR
    EDGE_LIMIT = 1000.0
    DRAG_DIVISOR = 1500.0     # Drag = speed^2 / DRAG_DIVISOR
    ACCELERATION_LIMIT = 2000.0

    @staticmethod
    def info():
        return (
            f"Murmuration Config: N={Config.N_AGENTS}, neighbors={Config.NUM_NEIGHBORS}, "
            f"world={2 * Config.HALF_WIDTH:g}x{2 * Config.HALF_HEIGHT:g}"
        )


@dataclass(frozen=True)
class FlockParams:
    """
    Tunable inputs of the force model for one tick.

    The UI (or any other driver) builds one of these and hands it to
    Population.update; the simulation never reads Config directly while
    stepping.
    """

    half_width: float = Config.HALF_WIDTH
    half_height: float = Config.HALF_HEIGHT
    overshoot: float = Config.OVERSHOOT
    separation: float = Config.SEPARATION
    predator: float = Config.PREDATOR
    alignment_base: float = Config.ALIGNMENT_BASE
    alignment_mood: float = Config.ALIGNMENT_MOOD
    cohesion: float = Config.COHESION
    edge_divisor: float = Config.EDGE_DIVISOR
    edge_limit: float = Config.EDGE_LIMIT
    drag_divisor: float = Config.DRAG_DIVISOR
    acceleration_limit: float = Config.ACCELERATION_LIMIT

    @classmethod
    def from_config(cls):
        return cls(
            half_width=Config.HALF_WIDTH,
            half_height=Config.HALF_HEIGHT,
            overshoot=Config.OVERSHOOT,
            separation=Config.SEPARATION,
            predator=Config.PREDATOR,
            alignment_base=Config.ALIGNMENT_BASE,
            alignment_mood=Config.ALIGNMENT_MOOD,
            cohesion=Config.COHESION,
            edge_divisor=Config.EDGE_DIVISOR,
            edge_limit=Config.EDGE_LIMIT,
            drag_divisor=Config.DRAG_DIVISOR,
            acceleration_limit=Config.ACCELERATION_LIMIT,
        )

    def validate(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be finite, got {value!r}")
        if self.half_width <= 0 or self.half_height <= 0:
            raise ConfigurationError(
                f"world half extents must be positive, got {self.half_width} x {self.half_height}"
            )
        if self.overshoot < 0:
            raise ConfigurationError(f"overshoot must be >= 0, got {self.overshoot}")
        for name in ("edge_divisor", "drag_divisor"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("edge_limit", "acceleration_limit"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")
        return self
