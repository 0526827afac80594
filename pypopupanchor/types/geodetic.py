import math
import dataclasses

from .vector import Vector3

@dataclasses.dataclass(slots=True)
class Cartographic:
    """
    A position as longitude, latitude (radians) and height (metres above the surface).
    In a FlatFrame, longitude and latitude carry region-local X/Y metres instead.
    """
    longitude: float = 0.0
    latitude: float = 0.0
    height: float = 0.0

    def __str__(self) -> str:
        return f"(lon={self.longitude:.6f}, lat={self.latitude:.6f}, h={self.height:.2f})"

    @classmethod
    def from_degrees(cls, longitude: float, latitude: float, height: float = 0.0) -> "Cartographic":
        return cls(math.radians(longitude), math.radians(latitude), height)

    def copy(self) -> "Cartographic":
        return Cartographic(self.longitude, self.latitude, self.height)


class CoordinateFrame:
    """Base class for conversions between world points and geodetic positions."""

    def to_geodetic(self, point: Vector3) -> Cartographic | None:
        raise NotImplementedError

    def from_geodetic(self, cartographic: Cartographic) -> Vector3:
        raise NotImplementedError

    def up_vector(self, point: Vector3) -> Vector3:
        """Unit vector pointing 'up' (away from the ground) at `point`."""
        raise NotImplementedError


class Ellipsoid(CoordinateFrame):
    """An Earth-centred, Earth-fixed ellipsoid (WGS84 by default)."""

    CENTER_TOLERANCE_SQUARED: float = 0.1
    """Points closer to the centre than this (in radii-normalised units) have no geodetic position."""

    MAX_ITERATIONS: int = 16

    def __init__(self, radius_x: float = 6378137.0, radius_y: float = 6378137.0, radius_z: float = 6356752.3142451793):
        if radius_x <= 0 or radius_y <= 0 or radius_z <= 0:
            raise ValueError("Ellipsoid radii must be positive.")
        self.radii = Vector3(radius_x, radius_y, radius_z)
        self._e2 = 1.0 - (radius_z * radius_z) / (radius_x * radius_x)

    def __repr__(self) -> str:
        return f"Ellipsoid(radii={self.radii!r})"

    def to_geodetic(self, point: Vector3) -> Cartographic | None:
        rx, ry, rz = self.radii.X, self.radii.Y, self.radii.Z
        scaled_sq = (point.X / rx) ** 2 + (point.Y / ry) ** 2 + (point.Z / rz) ** 2
        if not math.isfinite(scaled_sq) or scaled_sq < self.CENTER_TOLERANCE_SQUARED:
            return None

        a = rx
        e2 = self._e2
        p = math.hypot(point.X, point.Y)
        longitude = math.atan2(point.Y, point.X)
        latitude = math.atan2(point.Z, p * (1.0 - e2))
        for _ in range(self.MAX_ITERATIONS):
            sin_lat = math.sin(latitude)
            n = a / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
            next_latitude = math.atan2(point.Z + e2 * n * sin_lat, p)
            if abs(next_latitude - latitude) < 1e-12:
                latitude = next_latitude
                break
            latitude = next_latitude

        sin_lat = math.sin(latitude)
        cos_lat = math.cos(latitude)
        n = a / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
        # Stable at the poles, unlike p / cos(lat) - n
        height = p * cos_lat + point.Z * sin_lat - a * a / n
        return Cartographic(longitude, latitude, height)

    def from_geodetic(self, cartographic: Cartographic) -> Vector3:
        a = self.radii.X
        e2 = self._e2
        sin_lat = math.sin(cartographic.latitude)
        cos_lat = math.cos(cartographic.latitude)
        n = a / math.sqrt(1.0 - e2 * sin_lat * sin_lat)
        h = cartographic.height
        return Vector3(
            (n + h) * cos_lat * math.cos(cartographic.longitude),
            (n + h) * cos_lat * math.sin(cartographic.longitude),
            (n * (1.0 - e2) + h) * sin_lat,
        )

    def up_vector(self, point: Vector3) -> Vector3:
        normal = Vector3(
            point.X / (self.radii.X ** 2),
            point.Y / (self.radii.Y ** 2),
            point.Z / (self.radii.Z ** 2),
        ).normalize()
        if normal.magnitude_squared() == 0:
            return Vector3.UNIT_Z
        return normal

Ellipsoid.WGS84 = Ellipsoid()


class FlatFrame(CoordinateFrame):
    """
    Region-local Cartesian frame with Z up, as used by simulator regions.
    Geodetic positions map X to longitude, Y to latitude and Z to height, all in metres.
    """

    def __repr__(self) -> str:
        return "FlatFrame()"

    def to_geodetic(self, point: Vector3) -> Cartographic | None:
        if not point.is_finite():
            return None
        return Cartographic(point.X, point.Y, point.Z)

    def from_geodetic(self, cartographic: Cartographic) -> Vector3:
        return Vector3(cartographic.longitude, cartographic.latitude, cartographic.height)

    def up_vector(self, point: Vector3) -> Vector3:
        return Vector3.UNIT_Z
