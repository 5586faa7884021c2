"""
Quarter result DTOs for Agency Leadership.

QuarterResult holds the financial and organisational outcome of one resolved quarter.
AgencyMetrics is the end-of-quarter snapshot used for charts and reports.
Both are appended to a team's history and never edited afterwards.
"""
from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class QuarterResult:
    """One team's outcome for a single quarter."""

    quarter: int = 0
    revenue: int = 0
    costs: int = 0
    profit: int = 0

    # --- Clients ---
    clients_won: int = 0
    clients_lost: int = 0  # pitches lost
    clients_churned: int = 0
    clients_renewed: int = 0
    projects_won: int = 0

    # --- Organisation ---
    staff_change: int = 0
    reputation_change: float = 0.0
    burnout_change: float = 0.0

    # --- Workload ---
    utilization_rate: float = 0.0  # 1.0 = fully loaded
    hours_delivered: float = 0.0
    hours_capacity: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuarterResult":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class AgencyMetrics:
    """End-of-quarter snapshot of a team's agency."""

    quarter: int = 0
    cash: int = 0
    reputation: float = 0.0
    burnout: float = 0.0
    staff: int = 0
    tech_level: float = 1.0
    training_level: float = 1.0
    process_level: float = 1.0
    market_presence: float = 0.0
    active_clients: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgencyMetrics":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})
