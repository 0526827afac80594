import math
import dataclasses
from typing import Sequence

from .vector import Vector3

@dataclasses.dataclass(slots=True)
class BoundingSphere:
    """A sphere enclosing a set of points, used for polygon anchors and visibility tests."""
    center: Vector3 = dataclasses.field(default_factory=lambda: Vector3.ZERO)
    radius: float = 0.0

    def __str__(self) -> str:
        return f"BoundingSphere(center={self.center}, radius={self.radius:.2f})"

    @classmethod
    def from_points(cls, positions: Sequence[Vector3]) -> "BoundingSphere":
        """
        Computes a tight-fitting sphere around `positions`.

        Two candidates are built: Ritter's approximate sphere seeded from the
        axis with the widest span, and the sphere centred on the axis-aligned
        bounding box. The one with the smaller radius is returned.
        An empty sequence yields a zero sphere at the origin.
        """
        if not positions:
            return cls(Vector3.ZERO, 0.0)

        first = positions[0]
        x_min = x_max = y_min = y_max = z_min = z_max = first
        for p in positions[1:]:
            if p.X < x_min.X: x_min = p
            if p.X > x_max.X: x_max = p
            if p.Y < y_min.Y: y_min = p
            if p.Y > y_max.Y: y_max = p
            if p.Z < z_min.Z: z_min = p
            if p.Z > z_max.Z: z_max = p

        x_span = (x_max - x_min).magnitude_squared()
        y_span = (y_max - y_min).magnitude_squared()
        z_span = (z_max - z_min).magnitude_squared()

        diameter1, diameter2 = x_min, x_max
        max_span = x_span
        if y_span > max_span:
            max_span = y_span
            diameter1, diameter2 = y_min, y_max
        if z_span > max_span:
            diameter1, diameter2 = z_min, z_max

        ritter_center = (diameter1 + diameter2) * 0.5
        radius_squared = (diameter2 - ritter_center).magnitude_squared()
        ritter_radius = math.sqrt(radius_squared)

        box_min = Vector3(x_min.X, y_min.Y, z_min.Z)
        box_max = Vector3(x_max.X, y_max.Y, z_max.Z)
        naive_center = (box_min + box_max) * 0.5
        naive_radius = 0.0

        for p in positions:
            naive_radius = max(naive_radius, (p - naive_center).magnitude())

            old_center_to_point_sq = (p - ritter_center).magnitude_squared()
            if old_center_to_point_sq > radius_squared:
                old_center_to_point = math.sqrt(old_center_to_point_sq)
                ritter_radius = (ritter_radius + old_center_to_point) * 0.5
                radius_squared = ritter_radius * ritter_radius
                old_to_new = old_center_to_point - ritter_radius
                ritter_center = (ritter_center * ritter_radius + p * old_to_new) / old_center_to_point

        if ritter_radius < naive_radius:
            return cls(ritter_center, ritter_radius)
        return cls(naive_center, naive_radius)
