import math
import dataclasses

@dataclasses.dataclass(slots=True)
class Vector2:
    """A 2D vector with X and Y components (window coordinates before flooring)."""
    X: float = 0.0
    Y: float = 0.0

    def __str__(self) -> str:
        return f"<{self.X:.2f}, {self.Y:.2f}>"

    def __repr__(self) -> str:
        return f"Vector2(X={self.X}, Y={self.Y})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.X == other.X and self.Y == other.Y


@dataclasses.dataclass(slots=True)
class Vector3:
    """A 3D vector with X, Y, and Z components. Used for world points and directions."""
    X: float = 0.0
    Y: float = 0.0
    Z: float = 0.0

    def __str__(self) -> str:
        return f"<{self.X:.2f}, {self.Y:.2f}, {self.Z:.2f}>"

    def __repr__(self) -> str:
        return f"Vector3(X={self.X}, Y={self.Y}, Z={self.Z})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.X == other.X and self.Y == other.Y and self.Z == other.Z

    def __add__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.X + other.X, self.Y + other.Y, self.Z + other.Z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3(self.X - other.X, self.Y - other.Y, self.Z - other.Z)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.X, -self.Y, -self.Z)

    def __mul__(self, scalar: float) -> "Vector3":
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector3(self.X * scalar, self.Y * scalar, self.Z * scalar)

    def __rmul__(self, scalar: float) -> "Vector3":
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> "Vector3":
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        if scalar == 0:
            raise ValueError("Cannot divide by zero.")
        return Vector3(self.X / scalar, self.Y / scalar, self.Z / scalar)

    def dot(self, other: "Vector3") -> float:
        """Calculates the dot product with another Vector3."""
        if not isinstance(other, Vector3):
            raise TypeError("Can only calculate dot product with another Vector3.")
        return self.X * other.X + self.Y * other.Y + self.Z * other.Z

    def cross(self, other: "Vector3") -> "Vector3":
        """Calculates the cross product with another Vector3."""
        if not isinstance(other, Vector3):
            raise TypeError("Can only calculate cross product with another Vector3.")
        return Vector3(
            self.Y * other.Z - self.Z * other.Y,
            self.Z * other.X - self.X * other.Z,
            self.X * other.Y - self.Y * other.X,
        )

    def magnitude_squared(self) -> float:
        """Returns the squared magnitude of the vector."""
        return self.X * self.X + self.Y * self.Y + self.Z * self.Z

    def magnitude(self) -> float:
        """Returns the magnitude (length) of the vector."""
        return math.sqrt(self.magnitude_squared())

    def normalize(self) -> "Vector3":
        """Returns a new normalized vector. Returns Vector3.ZERO if magnitude is zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vector3.ZERO
        return Vector3(self.X / mag, self.Y / mag, self.Z / mag)

    def distance(self, other: "Vector3") -> float:
        """Euclidean distance between two points."""
        return (self - other).magnitude()

    def is_finite(self) -> bool:
        return math.isfinite(self.X) and math.isfinite(self.Y) and math.isfinite(self.Z)

Vector3.ZERO = Vector3(0.0, 0.0, 0.0)
Vector3.UNIT_X = Vector3(1.0, 0.0, 0.0)
Vector3.UNIT_Y = Vector3(0.0, 1.0, 0.0)
Vector3.UNIT_Z = Vector3(0.0, 0.0, 1.0)


@dataclasses.dataclass(slots=True)
class ScreenPoint:
    """
    A viewport position in whole pixels.
    Components are always integers; use ScreenPoint.floored() to build one
    from raw window coordinates.
    """
    X: int = 0
    Y: int = 0

    def __str__(self) -> str:
        return f"({self.X}, {self.Y})"

    def __repr__(self) -> str:
        return f"ScreenPoint(X={self.X}, Y={self.Y})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScreenPoint):
            return NotImplemented
        return self.X == other.X and self.Y == other.Y

    @classmethod
    def floored(cls, x: float, y: float) -> "ScreenPoint":
        return cls(math.floor(x), math.floor(y))

    def within(self, other: "ScreenPoint", threshold: float) -> bool:
        """True when both axes differ from `other` by no more than `threshold` pixels."""
        return abs(self.X - other.X) <= threshold and abs(self.Y - other.Y) <= threshold

    def exceeds(self, other: "ScreenPoint", threshold: float) -> bool:
        """True when either axis differs from `other` by more than `threshold` pixels."""
        return abs(self.X - other.X) > threshold or abs(self.Y - other.Y) > threshold
