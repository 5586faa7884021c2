"""
TeamState DTO for Agency Leadership.
One per participating team. ``quarter`` is the quarter currently being played;
resolving it appends exactly one QuarterResult and one AgencyMetrics snapshot.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Any, List

from .client import ActiveClient
from .inputs import TeamInputs, get_default_inputs
from .quarter_result import QuarterResult, AgencyMetrics

BOUNDED_STATS = ("burnout", "reputation", "market_presence")


@dataclass
class TeamState:
    """A team's agency: finances, people, market standing, clients and history."""

    team_id: str = ""
    company_name: str = ""
    team_number: int = 0
    quarter: int = 1

    # Financials
    cash: int = 0
    cumulative_profit: int = 0

    # Staff & capacity
    staff: int = 0
    burnout: float = 0.0  # 0-100

    # Reputation & market
    reputation: float = 50.0  # 0-100
    market_presence: float = 0.0  # 0-100 (percent)

    # Capabilities (start at 1, unbounded above)
    tech_level: float = 1.0
    training_level: float = 1.0
    process_level: float = 1.0

    clients: List[ActiveClient] = field(default_factory=list)

    # Game state
    is_bankrupt: bool = False
    bankrupt_quarter: int | None = None
    submitted_this_quarter: bool = False
    current_inputs: TeamInputs = field(default_factory=get_default_inputs)

    # History (append-only)
    quarterly_results: List[QuarterResult] = field(default_factory=list)
    agency_metrics: List[AgencyMetrics] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.staff < 0:
            raise ValueError(f"staff must be >= 0, got {self.staff}")
        for key in BOUNDED_STATS:
            val = getattr(self, key)
            if not 0 <= val <= 100:
                raise ValueError(f"{key} must be between 0 and 100, got {val}")

    @property
    def is_active(self) -> bool:
        return not self.is_bankrupt

    def evolve(self, **changes: Any) -> "TeamState":
        """Shallow copy with changes; lists are shared, so callers pass new ones."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "team_id": self.team_id,
            "company_name": self.company_name,
            "team_number": self.team_number,
            "quarter": self.quarter,
            "cash": self.cash,
            "cumulative_profit": self.cumulative_profit,
            "staff": self.staff,
            "burnout": self.burnout,
            "reputation": self.reputation,
            "market_presence": self.market_presence,
            "tech_level": self.tech_level,
            "training_level": self.training_level,
            "process_level": self.process_level,
            "clients": [c.to_dict() for c in self.clients],
            "is_bankrupt": self.is_bankrupt,
            "submitted_this_quarter": self.submitted_this_quarter,
            "current_inputs": self.current_inputs.to_dict(),
            "quarterly_results": [r.to_dict() for r in self.quarterly_results],
            "agency_metrics": [m.to_dict() for m in self.agency_metrics],
        }
        if self.bankrupt_quarter is not None:
            d["bankrupt_quarter"] = self.bankrupt_quarter
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamState":
        inputs = data.get("current_inputs")
        return cls(
            team_id=data.get("team_id", ""),
            company_name=data.get("company_name", ""),
            team_number=data.get("team_number", 0),
            quarter=data.get("quarter", 1),
            cash=data.get("cash", 0),
            cumulative_profit=data.get("cumulative_profit", 0),
            staff=data.get("staff", 0),
            burnout=data.get("burnout", 0.0),
            reputation=data.get("reputation", 50.0),
            market_presence=data.get("market_presence", 0.0),
            tech_level=data.get("tech_level", 1.0),
            training_level=data.get("training_level", 1.0),
            process_level=data.get("process_level", 1.0),
            clients=[ActiveClient.from_dict(c) for c in data.get("clients", [])],
            is_bankrupt=data.get("is_bankrupt", False),
            bankrupt_quarter=data.get("bankrupt_quarter"),
            submitted_this_quarter=data.get("submitted_this_quarter", False),
            current_inputs=TeamInputs.from_dict(inputs) if inputs else get_default_inputs(),
            quarterly_results=[QuarterResult.from_dict(r) for r in data.get("quarterly_results", [])],
            agency_metrics=[AgencyMetrics.from_dict(m) for m in data.get("agency_metrics", [])],
        )
