from .results import PositionResult
from .strategies import POSITION_STRATEGIES, PositionStrategy, resolve_entity_position
from .projector import ScreenProjector, SmoothingState
from .calculator import PopupPositionCalculator
from .tracker import PopupTracker

__all__ = [
    "PositionResult",
    "POSITION_STRATEGIES", "PositionStrategy", "resolve_entity_position",
    "ScreenProjector", "SmoothingState",
    "PopupPositionCalculator",
    "PopupTracker",
]
