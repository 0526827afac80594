"""Scene state read by the popup positioning pipeline."""

from typing import Dict, Optional

from pypopupanchor.types import Entity, Vector2, Vector3, CoordinateFrame, FlatFrame
from .camera import Camera, PerspectiveFrustum

class Scene:
    def __init__(self, width: int = 800, height: int = 600, camera: Optional[Camera] = None,
                 frame: Optional[CoordinateFrame] = None, terrain_provider=None):
        if width <= 0 or height <= 0:
            raise ValueError("Canvas dimensions must be positive")
        self.width = width
        self.height = height
        self.camera = camera or Camera(frustum=PerspectiveFrustum(aspect_ratio=width / height))
        self.frame: CoordinateFrame = frame or FlatFrame()
        self.terrain_provider = terrain_provider
        self.entities: Dict[str, Entity] = {}

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError("Canvas dimensions must be positive")
        self.width = width
        self.height = height
        self.camera.frustum.aspect_ratio = width / height

    def update_entity(self, entity: Entity):
        self.entities[str(entity.id)] = entity

    def remove_entity(self, entity_id: str):
        self.entities.pop(str(entity_id), None)

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self.entities.get(str(entity_id))

    def world_to_window(self, point: Vector3) -> Optional[Vector2]:
        """
        Projects a world point to window pixels (origin top-left, Y down).
        Returns None for points at or behind the camera plane.
        """
        camera = self.camera
        offset = point - camera.position
        depth = offset.dot(camera.direction)
        if depth <= 1e-9:
            return None
        frustum = camera.frustum
        right = camera.right
        up = right.cross(camera.direction)
        ndc_x = offset.dot(right) / (depth * frustum.tan_half_fovx)
        ndc_y = offset.dot(up) / (depth * frustum.tan_half_fovy)
        return Vector2(
            (ndc_x + 1.0) * 0.5 * self.width,
            (1.0 - ndc_y) * 0.5 * self.height,
        )
