"""Anchor point resolution for scene entities.

An entity may carry several geometry facets. The resolvers below are tried
in a fixed priority order and the first one that yields a point wins:
polygon, polyline, billboard, point, model, then the bare position.
Order encodes priority; an entity with both a polygon and a point is
anchored at the polygon's centre.
"""

import dataclasses
import logging
from typing import Any, Callable, Optional, Tuple

from pypopupanchor.types import BoundingSphere, Entity, Vector3, is_property
from pypopupanchor.types.entity import now

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class PositionStrategy:
    """A named anchor resolver and the predicate selecting the entities it handles."""
    name: str
    applies: Callable[[Entity], bool]
    resolve: Callable[[Entity, float], Optional[Vector3]]


def _facet(entity: Any, name: str) -> Any:
    return getattr(entity, name, None)


def _as_point(value: Any) -> Optional[Vector3]:
    return value if isinstance(value, Vector3) else None


def _value_at(value: Any, at_time: float) -> Any:
    return value.get_value(at_time) if is_property(value) else value


def _resolve_polygon(entity: Entity, at_time: float) -> Optional[Vector3]:
    try:
        hierarchy = entity.polygon.hierarchy.get_value(at_time)
        ring = getattr(hierarchy, "positions", hierarchy)
        if ring:
            return BoundingSphere.from_points(list(ring)).center
    except Exception as e:
        logger.error(f"Polygon centre calculation failed for entity {getattr(entity, 'id', '?')}: {e}")
    return None


def _resolve_polyline(entity: Entity, at_time: float) -> Optional[Vector3]:
    try:
        positions = _value_at(entity.polyline.positions, at_time)
        if not positions:
            return None
        if len(positions) == 1:
            return _as_point(positions[0])
        return _as_point(positions[len(positions) // 2])
    except Exception as e:
        logger.error(f"Polyline position lookup failed for entity {getattr(entity, 'id', '?')}: {e}")
    return None


def _position_resolver(label: str) -> Callable[[Entity, float], Optional[Vector3]]:
    def resolve(entity: Entity, at_time: float) -> Optional[Vector3]:
        if _facet(entity, "position") is None:
            return None
        try:
            return _as_point(_value_at(entity.position, at_time))
        except Exception as e:
            logger.error(f"{label} position lookup failed for entity {getattr(entity, 'id', '?')}: {e}")
        return None
    resolve.__name__ = f"_resolve_{label.lower()}"
    return resolve


POSITION_STRATEGIES: Tuple[PositionStrategy, ...] = (
    PositionStrategy("polygon", lambda e: _facet(e, "polygon") is not None and getattr(e.polygon, "hierarchy", None) is not None, _resolve_polygon),
    PositionStrategy("polyline", lambda e: _facet(e, "polyline") is not None and getattr(e.polyline, "positions", None) is not None, _resolve_polyline),
    PositionStrategy("billboard", lambda e: _facet(e, "billboard") is not None, _position_resolver("Billboard")),
    PositionStrategy("point", lambda e: _facet(e, "point") is not None, _position_resolver("Point")),
    PositionStrategy("model", lambda e: _facet(e, "model") is not None, _position_resolver("Model")),
    PositionStrategy("position", lambda e: _facet(e, "position") is not None, _position_resolver("Standard")), # Fallback
)


def resolve_entity_position(entity: Optional[Entity], at_time: Optional[float] = None,
                            strategies: Tuple[PositionStrategy, ...] = POSITION_STRATEGIES) -> Optional[Vector3]:
    """
    Returns the anchor point of `entity` at `at_time` (default: now),
    or None if no strategy yields one.
    """
    if entity is None:
        return None
    t = now() if at_time is None else at_time
    for strategy in strategies:
        if not strategy.applies(entity):
            continue
        position = strategy.resolve(entity, t)
        if position is not None:
            logger.debug(f"Entity {getattr(entity, 'id', '?')} anchored by {strategy.name} strategy at {position}")
            return position
    return None
