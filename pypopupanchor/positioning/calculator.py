import logging
from typing import Optional, Tuple

from pypopupanchor.settings import Settings
from pypopupanchor.types import Cartographic, Entity, PositionStatus, ScreenPoint
from pypopupanchor.scene.terrain import sample_terrain, sample_terrain_most_detailed
from pypopupanchor.utils import LRUCache, clamp
from .projector import ScreenProjector, SmoothingState
from .results import PositionResult
from .strategies import resolve_entity_position

logger = logging.getLogger(__name__)


class PopupPositionCalculator:
    """
    Computes where the popup of a selected entity goes on screen.

    One instance per tracked popup: it owns the terrain height cache and the
    smoothing state of that popup. Call `compute` (or `update`) on every
    camera change or render tick with the position currently displayed.
    """

    def __init__(self, settings: Optional[Settings] = None, projector: Optional[ScreenProjector] = None):
        self.settings = settings or Settings()
        self.settings.validate()
        self.projector = projector or ScreenProjector(self.settings)
        self.height_cache: LRUCache[str, float] = LRUCache(self.settings.height_cache_size)
        self.smoothing = SmoothingState()

    def reset(self) -> None:
        """Starts a new tracking session; the next projection is adopted unsmoothed."""
        self.smoothing.reset()

    def compute_offset(self, camera_distance: float) -> float:
        """Vertical anchor offset in metres for a camera at `camera_distance`."""
        s = self.settings
        return clamp(camera_distance * s.offset_distance_factor, s.min_offset, s.max_offset)

    async def terrain_height(self, entity_id: str, cartographic: Cartographic, provider) -> Tuple[float, bool]:
        """
        Terrain height under `cartographic`, cached per entity id.
        Returns (height, degraded); degraded is True when sampling failed and 0 was used.
        """
        cached = self.height_cache.get(entity_id)
        if cached is not None:
            return cached, False

        samples = [cartographic.copy()]
        height = 0.0
        degraded = False
        try:
            height = (await sample_terrain_most_detailed(provider, samples))[0].height or 0.0
        except Exception as detailed_error:
            logger.warning(f"Detailed terrain sampling failed, trying level "
                           f"{self.settings.terrain_fallback_level}: {detailed_error}")
            try:
                sampled = await sample_terrain(provider, self.settings.terrain_fallback_level, samples)
                height = sampled[0].height or 0.0
            except Exception as level_error:
                logger.warning(f"Terrain sampling failed for entity {entity_id}: {level_error}")
                degraded = True

        self.height_cache.set(entity_id, height)
        return height, degraded

    async def compute(self, entity: Optional[Entity], scene,
                      current_position: Optional[ScreenPoint]) -> PositionResult:
        """Runs the whole pipeline. Never raises; a hidden result means 'hide the popup'."""
        if entity is None or scene is None:
            return PositionResult.hidden(PositionStatus.NO_ANCHOR)

        try:
            anchor = resolve_entity_position(entity)
            if anchor is None:
                return PositionResult.hidden(PositionStatus.NO_ANCHOR)

            cartographic = scene.frame.to_geodetic(anchor)
            if cartographic is None:
                return PositionResult.hidden(PositionStatus.FAILED, f"no geodetic position for {anchor}")

            degraded = False
            if scene.terrain_provider is not None:
                terrain_height, degraded = await self.terrain_height(str(entity.id), cartographic, scene.terrain_provider)
                if cartographic.height < terrain_height:
                    cartographic.height = terrain_height # Keep the anchor above ground

            position_with_terrain = scene.frame.from_geodetic(cartographic)

            camera_distance = scene.camera.position.distance(position_with_terrain)
            offset = self.compute_offset(camera_distance)
            offset_position = position_with_terrain + scene.frame.up_vector(position_with_terrain) * offset

            result = self.projector.project(offset_position, scene, current_position, self.smoothing)
            result.degraded = degraded
            if result.position is None:
                return result

            if (current_position is not None and result.position != current_position
                    and result.position.within(current_position, self.settings.ui_update_threshold)):
                return PositionResult(PositionStatus.UNCHANGED, current_position, degraded)
            return result
        except Exception as e:
            logger.error(f"Error during popup position update: {e}")
            return PositionResult.hidden(PositionStatus.FAILED, str(e))

    async def update(self, entity: Optional[Entity], scene,
                     current_position: Optional[ScreenPoint]) -> Optional[ScreenPoint]:
        """New popup position, the current one if nothing changed, or None to hide it."""
        return (await self.compute(entity, scene, current_position)).position
