# Main __init__.py for the types sub-package

from .vector import Vector2, Vector3, ScreenPoint
from .bounding_sphere import BoundingSphere
from .geodetic import Cartographic, CoordinateFrame, Ellipsoid, FlatFrame
from .enums import LogLevel, Intersect, PositionStatus
from .entity import (
    Entity, Property, ConstantProperty, CallbackProperty, SampledPositionProperty,
    PolygonHierarchy, PolygonGraphics, PolylineGraphics,
    BillboardGraphics, PointGraphics, ModelGraphics,
    is_property,
)


__all__ = [
    "Vector2", "Vector3", "ScreenPoint", "BoundingSphere",
    "Cartographic", "CoordinateFrame", "Ellipsoid", "FlatFrame",
    "LogLevel", "Intersect", "PositionStatus",
    "Entity", "Property", "ConstantProperty", "CallbackProperty", "SampledPositionProperty",
    "PolygonHierarchy", "PolygonGraphics", "PolylineGraphics",
    "BillboardGraphics", "PointGraphics", "ModelGraphics",
    "is_property",
]
