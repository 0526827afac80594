"""
Popup positioning settings and constants.
"""
from typing import Any, Mapping

from pypopupanchor.types.enums import LogLevel

class Settings:
    """
    Tuning knobs for the popup positioning pipeline: smoothing, the three
    pixel thresholds, the off-screen margin, the vertical anchor offset,
    the terrain height cache and the update throttles.
    Class constants hold the defaults; every instance starts from them.
    """

    # --- Class Variables (Constants and Static Defaults) ---
    SMOOTHING_FACTOR: float = 0.75
    """Exponential smoothing weight of the previous position (0-1, closer to 1 is smoother)."""

    MIN_SMOOTHING_FACTOR: float = 0.5
    """Lower bound of the adaptive smoothing factor, reached when the camera moves fast."""

    SMOOTHING_SPEED_COEFFICIENT: float = 0.0001
    """How much camera speed reduces the smoothing factor, per metre."""

    JITTER_THRESHOLD: int = 2 # px
    """First-stage filter: smoothed changes up to this many pixels are discarded."""

    UI_UPDATE_THRESHOLD: int = 1 # px
    """Second-stage filter: changes up to this many pixels do not trigger a redraw."""

    LARGE_MOVEMENT_THRESHOLD: int = 40 # px
    """Changes above this many pixels on either axis bypass smoothing."""

    OFFSCREEN_MARGIN_FACTOR: float = 0.5
    """Fraction of the canvas size an anchor may sit outside the viewport before it is hidden."""

    VISIBILITY_RADIUS: float = 1.0 # metres
    """Radius of the sphere tested against the camera frustum."""

    OFFSET_DISTANCE_FACTOR: float = 0.05
    """Vertical anchor offset as a fraction of the camera distance."""

    MIN_OFFSET: float = 15.0 # metres
    MAX_OFFSET: float = 500.0 # metres

    HEIGHT_CACHE_SIZE: int = 20
    """Number of terrain heights kept, keyed by entity id."""

    TERRAIN_FALLBACK_LEVEL: int = 9
    """Terrain level sampled when the most detailed sample fails."""

    CAMERA_CHANGE_THROTTLE: int = 100 # milliseconds
    RENDER_LOOP_THROTTLE: int = 150 # milliseconds

    MIN_UPDATE_INTERVAL: int = 50 # milliseconds
    """Refreshes requested closer together than this are ignored."""

    LOG_LEVEL: LogLevel = LogLevel.INFO
    """Default logging level for the library."""

    # --- Instance Variables (Configurable per tracker) ---
    def __init__(self):
        self.smoothing_factor: float = self.SMOOTHING_FACTOR
        self.min_smoothing_factor: float = self.MIN_SMOOTHING_FACTOR
        self.smoothing_speed_coefficient: float = self.SMOOTHING_SPEED_COEFFICIENT

        self.jitter_threshold: float = self.JITTER_THRESHOLD
        """Micro-jitter threshold in pixels (projector)."""

        self.ui_update_threshold: float = self.UI_UPDATE_THRESHOLD
        """Redraw threshold in pixels (calculator)."""

        self.large_movement_threshold: float = self.LARGE_MOVEMENT_THRESHOLD
        self.offscreen_margin_factor: float = self.OFFSCREEN_MARGIN_FACTOR
        self.visibility_radius: float = self.VISIBILITY_RADIUS

        self.offset_distance_factor: float = self.OFFSET_DISTANCE_FACTOR
        self.min_offset: float = self.MIN_OFFSET
        self.max_offset: float = self.MAX_OFFSET

        self.height_cache_size: int = self.HEIGHT_CACHE_SIZE
        self.terrain_fallback_level: int = self.TERRAIN_FALLBACK_LEVEL

        self.camera_change_throttle: int = self.CAMERA_CHANGE_THROTTLE
        self.render_loop_throttle: int = self.RENDER_LOOP_THROTTLE
        self.min_update_interval: int = self.MIN_UPDATE_INTERVAL

        self.log_level: LogLevel = self.LOG_LEVEL

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"Settings({fields})"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """
        Builds settings from plain values, e.g. a parsed JSON config section.
        Unknown keys raise ValueError; the result is validated.
        """
        settings = cls()
        known = vars(settings)
        for key, value in values.items():
            if key not in known:
                raise ValueError(f"Unknown popup setting '{key}'")
            if key == "log_level" and not isinstance(value, LogLevel):
                value = LogLevel[value.upper()] if isinstance(value, str) else LogLevel(value)
            setattr(settings, key, value)
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raises ValueError if the settings are inconsistent."""
        if not 0.0 <= self.min_smoothing_factor <= self.smoothing_factor <= 1.0:
            raise ValueError(
                f"smoothing_factor must lie in [{self.min_smoothing_factor}, 1.0], got {self.smoothing_factor}")
        for name in ("jitter_threshold", "ui_update_threshold", "large_movement_threshold",
                     "offscreen_margin_factor", "visibility_radius", "offset_distance_factor",
                     "smoothing_speed_coefficient", "camera_change_throttle",
                     "render_loop_throttle", "min_update_interval"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if not 0 <= self.min_offset <= self.max_offset:
            raise ValueError(f"min_offset ({self.min_offset}) must not exceed max_offset ({self.max_offset})")
        if self.height_cache_size < 1:
            raise ValueError("height_cache_size must be at least 1")
        if self.terrain_fallback_level < 0:
            raise ValueError("terrain_fallback_level must not be negative")
