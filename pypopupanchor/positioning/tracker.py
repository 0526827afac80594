import logging
from typing import Callable, List, Optional

from pypopupanchor.settings import Settings
from pypopupanchor.types import Entity, PositionStatus, ScreenPoint
from pypopupanchor.utils import Throttle, monotonic_millis
from .calculator import PopupPositionCalculator
from .results import PositionResult

logger = logging.getLogger(__name__)

PositionChangedHandler = Callable[[Optional[ScreenPoint], PositionResult], None]


class PopupTracker:
    """
    Keeps one popup attached to the selected entity.

    Wire `on_camera_changed` to the camera's change notification and
    `on_post_render` to the render loop; both are throttled. Handlers
    registered with `register_position_handler` receive the new position
    (None to hide) whenever it changes.
    """

    def __init__(self, scene, settings: Optional[Settings] = None,
                 calculator: Optional[PopupPositionCalculator] = None,
                 clock: Callable[[], float] = monotonic_millis):
        self.scene = scene
        self.settings = settings or Settings()
        self.calculator = calculator or PopupPositionCalculator(self.settings)
        self._clock = clock
        self._entity: Optional[Entity] = None
        self._position: Optional[ScreenPoint] = None
        self._generation = 0
        self._last_refresh: Optional[float] = None
        self._position_handlers: List[PositionChangedHandler] = []
        self._camera_throttle = Throttle(self.refresh, self.settings.camera_change_throttle, clock)
        self._render_throttle = Throttle(self.refresh, self.settings.render_loop_throttle, clock)

    @property
    def entity(self) -> Optional[Entity]: return self._entity

    @property
    def position(self) -> Optional[ScreenPoint]: return self._position

    @property
    def visible(self) -> bool: return self._entity is not None and self._position is not None

    def register_position_handler(self, cb: PositionChangedHandler): self._position_handlers.append(cb)
    def unregister_position_handler(self, cb: PositionChangedHandler): self._position_handlers.remove(cb)

    def select(self, entity: Entity, initial_position: Optional[ScreenPoint] = None):
        """Starts tracking `entity`, typically with the clicked screen position."""
        self._entity = entity
        self._position = initial_position
        self._generation += 1
        self._last_refresh = None
        self.calculator.reset()
        logger.debug(f"Tracking popup for entity {entity.id} from {initial_position}")

    def clear(self):
        """Stops tracking; pending refreshes for the old selection are discarded."""
        self._camera_throttle.cancel()
        self._render_throttle.cancel()
        had_position = self._position is not None
        self._entity = None
        self._position = None
        self._generation += 1
        self.calculator.reset()
        if had_position:
            self._notify(PositionResult.hidden(PositionStatus.NO_ANCHOR, "selection cleared"))

    def on_camera_changed(self):
        if self._entity is not None:
            self._camera_throttle()

    def on_post_render(self):
        if self._entity is not None:
            self._render_throttle()

    async def refresh(self, force: bool = False) -> PositionResult:
        """Recomputes the popup position for the current selection."""
        entity = self._entity
        if entity is None:
            return PositionResult.hidden(PositionStatus.NO_ANCHOR, "nothing selected")

        now = self._clock()
        if (not force and self._last_refresh is not None
                and now - self._last_refresh < self.settings.min_update_interval):
            return PositionResult(PositionStatus.UNCHANGED, self._position, detail="update interval")
        self._last_refresh = now

        generation = self._generation
        entity_id = str(entity.id)
        result = await self.calculator.compute(entity, self.scene, self._position)

        current = self._entity
        if generation != self._generation or current is None or str(current.id) != entity_id:
            logger.debug(f"Discarding stale popup position for entity {entity_id}")
            return PositionResult.hidden(PositionStatus.STALE)

        if result.position != self._position:
            self._position = result.position
            self._notify(result)
        return result

    async def close(self):
        self._camera_throttle.cancel()
        self._render_throttle.cancel()
        await self._camera_throttle.drain()
        await self._render_throttle.drain()

    def _notify(self, result: PositionResult):
        for h in self._position_handlers:
            try: h(result.position, result)
            except Exception as e: logger.error(f"Err in position_changed_handler: {e}")
