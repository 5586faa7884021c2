"""
Team decision DTOs for Agency Leadership.
A team submits one TeamInputs per quarter; range checks happen in
simulation.engine.validate_inputs so each bad field can be rejected on its own.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List

DEFAULT_GROWTH_FOCUS = 50  # balanced

INVESTMENT_FIELDS: tuple[str, ...] = (
    "tech_investment",
    "training_investment",
    "marketing_spend",
    "wellbeing_spend",
    "client_satisfaction_spend",
)


@dataclass
class PitchDecision:
    """Compete for one opportunity at a discount and quality level."""

    opportunity_id: str = ""
    discount_percent: float = 0.0  # 0-50
    quality_level: str = "standard"  # budget | standard | premium

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opportunity_id": self.opportunity_id,
            "discount_percent": self.discount_percent,
            "quality_level": self.quality_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PitchDecision":
        return cls(
            opportunity_id=str(data.get("opportunity_id", "")),
            discount_percent=data.get("discount_percent", 0.0),
            quality_level=data.get("quality_level", "standard"),
        )


@dataclass
class TeamInputs:
    """The decision batch a team submits once per quarter."""

    pitches: List[PitchDecision] = field(default_factory=list)
    hiring_count: int = 0
    firing_count: int = 0
    tech_investment: float = 0
    training_investment: float = 0
    marketing_spend: float = 0
    wellbeing_spend: float = 0
    client_satisfaction_spend: float = 0
    growth_focus: float = DEFAULT_GROWTH_FOCUS  # 0 = existing clients, 100 = new business

    @property
    def total_investment(self) -> float:
        return sum(getattr(self, name) for name in INVESTMENT_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pitches": [p.to_dict() for p in self.pitches],
            "hiring_count": self.hiring_count,
            "firing_count": self.firing_count,
            "tech_investment": self.tech_investment,
            "training_investment": self.training_investment,
            "marketing_spend": self.marketing_spend,
            "wellbeing_spend": self.wellbeing_spend,
            "client_satisfaction_spend": self.client_satisfaction_spend,
            "growth_focus": self.growth_focus,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamInputs":
        return cls(
            pitches=[PitchDecision.from_dict(p) for p in data.get("pitches", [])],
            hiring_count=data.get("hiring_count", 0),
            firing_count=data.get("firing_count", 0),
            tech_investment=data.get("tech_investment", 0),
            training_investment=data.get("training_investment", 0),
            marketing_spend=data.get("marketing_spend", 0),
            wellbeing_spend=data.get("wellbeing_spend", 0),
            client_satisfaction_spend=data.get("client_satisfaction_spend", 0),
            growth_focus=data.get("growth_focus", DEFAULT_GROWTH_FOCUS),
        )


def get_default_inputs() -> TeamInputs:
    """No pitches, no spend, balanced focus. Used for new teams and forced advances."""
    return TeamInputs()
