from dataclasses import dataclass, field
from typing import Optional

from murmuration.core.forces import ForceBreakdown
from murmuration.core.vector import Vector2


@dataclass
class Agent:
    position: Vector2 = field(default_factory=Vector2)
    velocity: Vector2 = field(default_factory=Vector2)
    # Diagnostic side channel, set by Population.update each tick
    forces: Optional[ForceBreakdown] = None
