import dataclasses
from typing import Optional

from pypopupanchor.types import ScreenPoint, PositionStatus

@dataclasses.dataclass(slots=True)
class PositionResult:
    """
    Outcome of a positioning step.
    `position` is None exactly when the popup should be hidden.
    `degraded` marks results computed with a terrain height of 0 after sampling failed.
    """
    status: PositionStatus
    position: Optional[ScreenPoint] = None
    degraded: bool = False
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.status.value}"
        if self.position is not None:
            text += f" at {self.position}"
        if self.degraded:
            text += " (degraded)"
        if self.detail:
            text += f": {self.detail}"
        return text

    @property
    def visible(self) -> bool:
        return self.position is not None

    @classmethod
    def shown(cls, status: PositionStatus, position: ScreenPoint, detail: str = "") -> "PositionResult":
        return cls(status, position, detail=detail)

    @classmethod
    def hidden(cls, status: PositionStatus, detail: str = "") -> "PositionResult":
        return cls(status, None, detail=detail)
