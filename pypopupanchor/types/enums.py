from enum import Enum, IntEnum # IntEnum for direct integer compatibility

class LogLevel(IntEnum): NONE = 0; DEBUG = 1; INFO = 2; WARNING = 3; ERROR = 4

# Based on Cesium.Intersect
class Intersect(IntEnum):
    """Result of testing a volume against a plane or a culling volume."""
    OUTSIDE = -1       # Entirely outside the volume
    INTERSECTING = 0   # Crosses at least one plane
    INSIDE = 1         # Entirely inside the volume

class PositionStatus(Enum):
    """How a position update was resolved. Statuses without a position mean 'hide the popup'."""
    PROJECTED = "projected"     # First sample of a session, adopted raw
    SNAPPED = "snapped"         # Large movement, adopted raw without smoothing
    SMOOTHED = "smoothed"       # Blended with the previous position
    HELD = "held"               # Micro-jitter gate kept the previous position
    UNCHANGED = "unchanged"     # UI-update gate kept the current position
    FALLBACK = "fallback"       # Projection failed, previous position reused
    CULLED = "culled"           # Anchor outside the camera frustum
    OFFSCREEN = "offscreen"     # Anchor beyond the off-screen margin
    NO_ANCHOR = "no_anchor"     # Entity yielded no anchor point
    STALE = "stale"             # Selection changed while the update was pending
    FAILED = "failed"           # Projection or pipeline error
