import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    """Immutable 2D vector. Every operation returns a new instance."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other):
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar):
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self):
        return Vector2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def mag_sq(self):
        return self.x * self.x + self.y * self.y

    def mag(self):
        return math.hypot(self.x, self.y)

    def dist(self, other):
        return math.hypot(self.x - other.x, self.y - other.y)

    def dist_sq(self, other):
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def dot(self, other):
        return self.x * other.x + self.y * other.y

    def normalize(self):
        # Zero stays zero instead of dividing by zero
        m = self.mag()
        if m == 0.0:
            return ZERO
        return Vector2(self.x / m, self.y / m)

    def set_mag(self, magnitude):
        """
        Rescale to the given length.
        A negative magnitude flips the direction, so the result has
        length |magnitude| pointing opposite to the input.
        """
        return self.normalize() * magnitude

    def limit(self, max_mag):
        m_sq = self.mag_sq()
        if m_sq <= max_mag * max_mag:
            return self
        return self.normalize() * max_mag

    def is_finite(self):
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self):
        return (self.x, self.y)


ZERO = Vector2(0.0, 0.0)
