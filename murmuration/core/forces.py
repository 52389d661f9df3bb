from dataclasses import dataclass

from murmuration.core.vector import ZERO, Vector2

# Distances are floored here so coincident points give a huge but finite force
MIN_DISTANCE = 1e-9


@dataclass(frozen=True)
class ForceBreakdown:
    """
    Every force contribution computed for one agent in one tick.

    Kept separate so debug overlays can draw each term on its own.
    Replaced as a whole every tick, never patched.
    """

    predator: Vector2 = ZERO
    separation: Vector2 = ZERO
    alignment: Vector2 = ZERO
    cohesion: Vector2 = ZERO
    edge: Vector2 = ZERO
    drag: Vector2 = ZERO

    def steering(self):
        return self.predator + self.separation + self.alignment + self.cohesion + self.edge

    def acceleration(self, limit):
        """Steering forces capped at `limit`, with drag added after the cap."""
        return self.steering().limit(limit) + self.drag

    def as_dict(self):
        return {
            "predator": self.predator,
            "separation": self.separation,
            "alignment": self.alignment,
            "cohesion": self.cohesion,
            "edge": self.edge,
            "drag": self.drag,
        }


def predator_force(position, predator, coefficient):
    away = position - predator
    distance = max(away.mag(), MIN_DISTANCE)
    return away.set_mag(coefficient / distance)


def separation_force(position, neighbor_positions, coefficient):
    total = ZERO
    for other in neighbor_positions:
        away = position - other
        dist_sq = max(away.mag_sq(), MIN_DISTANCE * MIN_DISTANCE)
        total = total + away.set_mag(coefficient / dist_sq)
    return total


def alignment_force(neighbor_velocities, mood, base, mood_weight):
    if not neighbor_velocities:
        return ZERO
    heading = ZERO
    for vel in neighbor_velocities:
        heading = heading + vel.normalize()
    heading = heading / len(neighbor_velocities)
    return heading.set_mag(base + mood_weight * mood)


def cohesion_force(position, neighbor_positions, mood, coefficient):
    if not neighbor_positions:
        return ZERO
    center = ZERO
    for other in neighbor_positions:
        center = center + other
    center = center / len(neighbor_positions)
    return (center - position).set_mag(coefficient * mood)


def _edge_axis(coordinate, half_extent, divisor):
    overshoot = abs(coordinate) - half_extent
    if overshoot <= 0:
        return 0.0
    sign = 1.0 if coordinate > 0 else -1.0
    return -sign * overshoot * overshoot / divisor


def edge_force(position, half_width, half_height, overshoot, divisor, limit):
    """
    Soft wall: zero inside the box, quadratic in the distance past it.

    The box is the world grown by `overshoot` on every side.
    """
    force = Vector2(
        _edge_axis(position.x, half_width + overshoot, divisor),
        _edge_axis(position.y, half_height + overshoot, divisor),
    )
    return force.limit(limit)


def drag_force(velocity, divisor):
    return (-velocity).set_mag(velocity.mag_sq() / divisor)


def compute_forces(position, velocity, neighbor_ids, agents, predator, mood, params):
    """
    Evaluate the full force model for one agent.

    `neighbor_ids` index into `agents` and must not contain the agent
    itself. Only positions and velocities of the neighbours are read, so
    this is safe to call for every agent before any of them moves.
    """
    neighbor_positions = [agents[i].position for i in neighbor_ids]
    neighbor_velocities = [agents[i].velocity for i in neighbor_ids]

    return ForceBreakdown(
        predator=predator_force(position, predator, params.predator),
        separation=separation_force(position, neighbor_positions, params.separation),
        alignment=alignment_force(
            neighbor_velocities, mood, params.alignment_base, params.alignment_mood
        ),
        cohesion=cohesion_force(position, neighbor_positions, mood, params.cohesion),
        edge=edge_force(
            position,
            params.half_width,
            params.half_height,
            params.overshoot,
            params.edge_divisor,
            params.edge_limit,
        ),
        drag=drag_force(velocity, params.drag_divisor),
    )
