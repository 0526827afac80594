import math
from typing import List, Tuple

from pypopupanchor.types import Vector3, BoundingSphere, Intersect

Plane = Tuple[Vector3, float] # (inward unit normal, distance), n.p + d >= 0 is inside


class CullingVolume:
    """A set of planes bounding the visible region of a camera."""

    def __init__(self, planes: List[Plane]):
        self.planes = planes

    def compute_visibility(self, sphere: BoundingSphere) -> Intersect:
        intersecting = False
        for normal, distance in self.planes:
            d = normal.dot(sphere.center) + distance
            if d < -sphere.radius:
                return Intersect.OUTSIDE
            if d < sphere.radius:
                intersecting = True
        return Intersect.INTERSECTING if intersecting else Intersect.INSIDE


class PerspectiveFrustum:
    """
    Symmetric perspective frustum.
    `fov` (radians) spans the wider of the two canvas dimensions.
    """

    def __init__(self, fov: float = math.radians(60.0), aspect_ratio: float = 1.0,
                 near: float = 1.0, far: float = 500000000.0):
        if not 0.0 < fov < math.pi:
            raise ValueError("fov must be in (0, pi)")
        if aspect_ratio <= 0:
            raise ValueError("aspect_ratio must be positive")
        if not 0.0 < near < far:
            raise ValueError("near must be positive and smaller than far")
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near = near
        self.far = far

    def __repr__(self) -> str:
        return (f"PerspectiveFrustum(fov={math.degrees(self.fov):.1f}deg, aspect_ratio={self.aspect_ratio:.3f}, "
                f"near={self.near}, far={self.far})")

    @property
    def fovy(self) -> float:
        if self.aspect_ratio <= 1.0:
            return self.fov
        return 2.0 * math.atan(math.tan(self.fov * 0.5) / self.aspect_ratio)

    @property
    def tan_half_fovy(self) -> float:
        return math.tan(self.fovy * 0.5)

    @property
    def tan_half_fovx(self) -> float:
        return self.tan_half_fovy * self.aspect_ratio

    def compute_culling_volume(self, position: Vector3, direction: Vector3, up: Vector3) -> CullingVolume:
        right = direction.cross(up).normalize()
        up = right.cross(direction).normalize()

        t = self.near * self.tan_half_fovy
        r = self.near * self.tan_half_fovx
        near_center = position + direction * self.near
        far_center = position + direction * self.far

        to_left = (direction * self.near - right * r).normalize()
        to_right = (direction * self.near + right * r).normalize()
        to_bottom = (direction * self.near - up * t).normalize()
        to_top = (direction * self.near + up * t).normalize()

        planes: List[Plane] = []
        for normal in (
            to_left.cross(up).normalize(),
            up.cross(to_right).normalize(),
            right.cross(to_bottom).normalize(),
            to_top.cross(right).normalize(),
        ):
            planes.append((normal, -normal.dot(position)))
        planes.append((direction, -direction.dot(near_center)))
        planes.append((-direction, direction.dot(far_center)))
        return CullingVolume(planes)


class Camera:
    """Manages the viewer camera position, orientation, and viewing frustum."""

    def __init__(self, position: Vector3 = Vector3.ZERO, frustum: PerspectiveFrustum | None = None):
        self._position: Vector3 = position
        self._direction: Vector3 = Vector3(1.0, 0.0, 0.0) # Forward
        self._up: Vector3 = Vector3(0.0, 0.0, 1.0)
        self.frustum: PerspectiveFrustum = frustum or PerspectiveFrustum()

    @property
    def position(self) -> Vector3: return self._position
    @position.setter
    def position(self, value: Vector3): self._position = value

    @property
    def direction(self) -> Vector3: return self._direction
    @direction.setter
    def direction(self, value: Vector3): self._direction = value.normalize() if value.magnitude_squared() > 0 else Vector3(1.0,0.0,0.0)

    @property
    def up(self) -> Vector3: return self._up
    @up.setter
    def up(self, value: Vector3): self._up = value.normalize() if value.magnitude_squared() > 0 else Vector3(0.0,0.0,1.0)

    @property
    def right(self) -> Vector3:
        return self._direction.cross(self._up).normalize()

    def look_direction(self, heading_rads: float):
        """
        Sets camera orientation based on a heading angle (radians) in the XY plane.
        Pitch and roll are zero (level with horizon).
        """
        self._direction = Vector3(math.cos(heading_rads), math.sin(heading_rads), 0.0)
        self._up = Vector3(0.0, 0.0, 1.0)

    def look_at(self, target_pos: Vector3, world_up: Vector3 = Vector3.UNIT_Z):
        """
        Orients the camera to look at `target_pos` from its current position.
        `world_up` is the reference up direction, e.g. the ellipsoid normal under the camera.
        """
        forward = target_pos - self._position
        if forward.magnitude_squared() < 1e-6: # Too close, keep current orientation
            return
        self._direction = forward.normalize()

        world_up = world_up.normalize()
        if abs(self._direction.dot(world_up)) > 0.999:
            # Looking straight up or down: pick a stable reference across the view axis
            reference = Vector3.UNIT_X if abs(self._direction.X) < 0.9 else Vector3.UNIT_Y
            right = self._direction.cross(reference).normalize()
        else:
            right = self._direction.cross(world_up).normalize()
        self._up = right.cross(self._direction).normalize()

    def compute_culling_volume(self) -> CullingVolume:
        return self.frustum.compute_culling_volume(self._position, self._direction, self._up)

    def __str__(self):
        return f"Camera(Pos={self.position}, Dir={self.direction}, Up={self.up}, Frustum={self.frustum!r})"
