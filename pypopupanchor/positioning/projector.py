"""World-to-screen projection with jitter filtering and adaptive smoothing.

Raw projections of a fixed world point wobble by a pixel or two from frame
to frame as the camera moves. The projector turns them into a stable screen
position:

1. hide the popup when the anchor is outside the camera frustum;
2. project; on failure reuse the previous position if there is one;
3. hide the popup when the anchor is further off-screen than the margin;
4. adopt the raw point on the first sample of a session;
5. adopt the raw point when it jumped further than the large-movement threshold;
6. otherwise blend previous and raw positions, weighting the previous one
   less when the camera moves fast;
7. keep the previous position when the blend moved it by no more than the
   jitter threshold.

The last emitted point lives in a SmoothingState owned by the caller, one
per tracked popup.
"""

import dataclasses
import logging
from typing import Optional

from pypopupanchor.settings import Settings
from pypopupanchor.types import BoundingSphere, Intersect, PositionStatus, ScreenPoint, Vector3
from pypopupanchor.utils import clamp
from .results import PositionResult

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class SmoothingState:
    """Last emitted screen position of one tracking session."""
    last_position: Optional[ScreenPoint] = None

    def reset(self) -> None:
        self.last_position = None


class ScreenProjector:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.state = SmoothingState()

    def smoothing_factor_for(self, camera) -> float:
        """Smoothing factor for the current camera; lower when the camera moves fast."""
        s = self.settings
        speed = camera.position.magnitude()
        return max(s.min_smoothing_factor,
                   min(s.smoothing_factor, s.smoothing_factor - speed * s.smoothing_speed_coefficient))

    def is_visible(self, world_point: Vector3, camera) -> bool:
        volume = camera.frustum.compute_culling_volume(camera.position, camera.direction, camera.up)
        sphere = BoundingSphere(world_point, self.settings.visibility_radius)
        return volume.compute_visibility(sphere) != Intersect.OUTSIDE

    def is_offscreen(self, point: ScreenPoint, width: float, height: float) -> bool:
        margin_x = width * self.settings.offscreen_margin_factor
        margin_y = height * self.settings.offscreen_margin_factor
        return (point.X < -margin_x or point.Y < -margin_y or
                point.X > width + margin_x or point.Y > height + margin_y)

    def project(self, world_point: Optional[Vector3], scene, fallback: Optional[ScreenPoint] = None,
                state: Optional[SmoothingState] = None) -> PositionResult:
        """
        Projects `world_point` into `scene`'s viewport.
        `fallback` is the currently displayed position, if any.
        Never raises.
        """
        if world_point is None:
            return PositionResult.hidden(PositionStatus.FAILED, "no world point")
        if state is None:
            state = self.state

        try:
            camera = scene.camera
            if not self.is_visible(world_point, camera):
                return PositionResult.hidden(PositionStatus.CULLED)

            window = scene.world_to_window(world_point)
            if window is None:
                logger.warning(f"World-to-window conversion failed for {world_point}")
                if fallback is not None:
                    return PositionResult.shown(PositionStatus.FALLBACK, fallback, "projection failed")
                return PositionResult.hidden(PositionStatus.FAILED, "projection failed")

            raw = ScreenPoint.floored(window.X, window.Y)
            if self.is_offscreen(raw, scene.width, scene.height):
                return PositionResult.hidden(PositionStatus.OFFSCREEN, f"raw position {raw}")

            if state.last_position is None or fallback is None:
                state.last_position = raw
                return PositionResult.shown(PositionStatus.PROJECTED, raw)

            if raw.exceeds(fallback, self.settings.large_movement_threshold):
                state.last_position = raw
                return PositionResult.shown(PositionStatus.SNAPPED, raw)

            factor = clamp(self.smoothing_factor_for(camera), 0.0, 1.0)
            smoothed = ScreenPoint.floored(
                fallback.X * factor + raw.X * (1.0 - factor),
                fallback.Y * factor + raw.Y * (1.0 - factor),
            )
            if smoothed.within(fallback, self.settings.jitter_threshold):
                logger.debug(f"Jitter filtered: {smoothed} stays at {fallback}")
                return PositionResult.shown(PositionStatus.HELD, fallback)

            state.last_position = smoothed
            return PositionResult.shown(PositionStatus.SMOOTHED, smoothed)
        except Exception as e:
            logger.error(f"Coordinate conversion error: {e}")
            if fallback is not None and fallback.X != 0 and fallback.Y != 0:
                return PositionResult.shown(PositionStatus.FALLBACK, fallback, str(e))
            return PositionResult.hidden(PositionStatus.FAILED, str(e))

    def project_point(self, world_point: Optional[Vector3], scene, fallback: Optional[ScreenPoint] = None,
                      state: Optional[SmoothingState] = None) -> Optional[ScreenPoint]:
        return self.project(world_point, scene, fallback, state).position
