"""PyPopupAnchor: keeps a 2D popup attached to a point in a moving 3D scene."""

__version__ = "0.1.0"

from .settings import Settings
from .types import Entity, ScreenPoint, Vector3, PositionStatus
from .scene import Camera, Scene
from .positioning import (
    PopupPositionCalculator, PopupTracker, PositionResult, ScreenProjector, SmoothingState,
    resolve_entity_position,
)
from .utils import LRUCache, Throttle, configure_logging

__all__ = [
    "__version__",
    "Settings", "Entity", "ScreenPoint", "Vector3", "PositionStatus", "Camera", "Scene",
    "PopupPositionCalculator", "PopupTracker", "PositionResult", "ScreenProjector", "SmoothingState",
    "resolve_entity_position", "LRUCache", "Throttle", "configure_logging",
]
