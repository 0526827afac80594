"""Scene entities and their time-dependent properties.

An Entity is the handle the positioning pipeline reads anchors from. Its
geometry facets mirror what a 3D viewer attaches to a feature (polygon,
polyline, billboard, point, model); every facet is optional and none of
them is owned by the pipeline.
"""

import bisect
import dataclasses
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence

from .vector import Vector3


def is_property(value: Any) -> bool:
    """True if `value` exposes a callable ``get_value(time)``."""
    return value is not None and callable(getattr(value, "get_value", None))


def now() -> float:
    """Current scene time (seconds since the epoch)."""
    return time.time()


class Property:
    """A value that may change over time."""

    def get_value(self, at_time: Optional[float] = None) -> Any:
        raise NotImplementedError


class ConstantProperty(Property):
    def __init__(self, value: Any = None):
        self._value = value

    def __repr__(self) -> str:
        return f"ConstantProperty({self._value!r})"

    def get_value(self, at_time: Optional[float] = None) -> Any:
        return self._value

    def set_value(self, value: Any) -> None:
        self._value = value


class CallbackProperty(Property):
    """Evaluates `callback(at_time)` on every read."""

    def __init__(self, callback: Callable[[float], Any]):
        self._callback = callback

    def get_value(self, at_time: Optional[float] = None) -> Any:
        return self._callback(now() if at_time is None else at_time)


class SampledPositionProperty(Property):
    """
    Position known at discrete times, linearly interpolated in between.
    Reads before the first or after the last sample are held at the end values.
    """

    def __init__(self):
        self._times: List[float] = []
        self._values: List[Vector3] = []

    def __len__(self) -> int:
        return len(self._times)

    def add_sample(self, at_time: float, position: Vector3) -> None:
        index = bisect.bisect_left(self._times, at_time)
        if index < len(self._times) and self._times[index] == at_time:
            self._values[index] = position
            return
        self._times.insert(index, at_time)
        self._values.insert(index, position)

    def get_value(self, at_time: Optional[float] = None) -> Optional[Vector3]:
        if not self._times:
            return None
        t = now() if at_time is None else at_time
        if t <= self._times[0]:
            return self._values[0]
        if t >= self._times[-1]:
            return self._values[-1]
        index = bisect.bisect_right(self._times, t)
        t0, t1 = self._times[index - 1], self._times[index]
        p0, p1 = self._values[index - 1], self._values[index]
        amount = (t - t0) / (t1 - t0)
        return p0 + (p1 - p0) * amount


@dataclasses.dataclass
class PolygonHierarchy:
    """Outer vertex ring of a polygon plus optional holes."""
    positions: List[Vector3] = dataclasses.field(default_factory=list)
    holes: List["PolygonHierarchy"] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class PolygonGraphics:
    hierarchy: Optional[Property] = None # Property yielding a PolygonHierarchy
    extruded_height: Optional[float] = None


@dataclasses.dataclass
class PolylineGraphics:
    positions: Any = None # Property yielding a list of Vector3, or a plain list
    width: float = 1.0


@dataclasses.dataclass
class BillboardGraphics:
    image: str = ""
    scale: float = 1.0


@dataclasses.dataclass
class PointGraphics:
    pixel_size: float = 1.0


@dataclasses.dataclass
class ModelGraphics:
    uri: str = ""
    scale: float = 1.0


@dataclasses.dataclass(eq=False)
class Entity:
    """
    A scene feature. Only `id` is required; every facet is optional.
    `properties` is the opaque attribute bag shown by the popup and is never
    interpreted by the positioning code.
    """
    id: str = dataclasses.field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    position: Optional[Property] = None
    polygon: Optional[PolygonGraphics] = None
    polyline: Optional[PolylineGraphics] = None
    billboard: Optional[BillboardGraphics] = None
    point: Optional[PointGraphics] = None
    model: Optional[ModelGraphics] = None
    properties: Dict[str, Any] = dataclasses.field(default_factory=dict)

    def __str__(self) -> str:
        facets = [f for f in ("polygon", "polyline", "billboard", "point", "model") if getattr(self, f) is not None]
        return f"Entity(id={self.id!r}, name={self.name!r}, facets={facets})"

    @classmethod
    def at(cls, position: Vector3, **kwargs) -> "Entity":
        """Entity with a constant position and no other geometry."""
        return cls(position=ConstantProperty(position), **kwargs)

    @classmethod
    def polygon_from(cls, ring: Sequence[Vector3], **kwargs) -> "Entity":
        hierarchy = ConstantProperty(PolygonHierarchy(list(ring)))
        return cls(polygon=PolygonGraphics(hierarchy=hierarchy), **kwargs)

    @classmethod
    def polyline_from(cls, vertices: Sequence[Vector3], **kwargs) -> "Entity":
        return cls(polyline=PolylineGraphics(positions=ConstantProperty(list(vertices))), **kwargs)
