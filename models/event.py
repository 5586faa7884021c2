"""
GameEvent DTO for Agency Leadership.
Events are market-wide and shared by every team in a game.
"""
from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class GameEvent:
    """A temporary market condition. ``duration`` counts the quarters still to run."""

    type: str = ""
    quarter: int = 0  # quarter the event started
    duration: int = 1
    active: bool = True
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "quarter": self.quarter,
            "duration": self.duration,
            "active": self.active,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameEvent":
        return cls(
            type=data.get("type", ""),
            quarter=data.get("quarter", 0),
            duration=data.get("duration", 1),
            active=data.get("active", True),
            description=data.get("description", ""),
        )
