"""
Client DTOs for Agency Leadership.
ClientOpportunity is a pitchable offer for one quarter; ActiveClient is a won contract.
Budgets are annual; a client bills a quarter of its revenue each resolution.
"""
from dataclasses import dataclass, replace
from typing import Dict, Any

from .constants import (
    CLIENT_STATUSES,
    MAX_DISCOUNT_PERCENT,
    QUALITY_LEVELS,
    QUARTERS_PER_YEAR,
    STARTING_CLIENT_SATISFACTION,
)

OFFER_NEW = "new"
OFFER_PROJECT = "project"
OFFER_RENEWAL = "renewal"
OFFER_KINDS = (OFFER_NEW, OFFER_PROJECT, OFFER_RENEWAL)


@dataclass(frozen=True)
class ClientOpportunity:
    """A potential contract available for pitching in a given quarter."""

    id: str
    client_name: str
    client_type: str
    service_line: str
    budget: int
    complexity: str
    deadline: str
    hours_required: int
    base_win_chance: float
    quarter: int
    offer_kind: str = OFFER_NEW
    existing_client_id: str | None = None  # project / renewal offers only
    existing_client_satisfaction: float | None = None

    @property
    def is_existing_client_offer(self) -> bool:
        return self.offer_kind != OFFER_NEW

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "client_name": self.client_name,
            "client_type": self.client_type,
            "service_line": self.service_line,
            "budget": self.budget,
            "complexity": self.complexity,
            "deadline": self.deadline,
            "hours_required": self.hours_required,
            "base_win_chance": self.base_win_chance,
            "quarter": self.quarter,
            "offer_kind": self.offer_kind,
        }
        if self.existing_client_id is not None:
            d["existing_client_id"] = self.existing_client_id
            d["existing_client_satisfaction"] = self.existing_client_satisfaction
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientOpportunity":
        return cls(
            id=data["id"],
            client_name=data.get("client_name", ""),
            client_type=data.get("client_type", "startup"),
            service_line=data.get("service_line", "digital"),
            budget=data.get("budget", 0),
            complexity=data.get("complexity", "medium"),
            deadline=data.get("deadline", "normal"),
            hours_required=data.get("hours_required", 0),
            base_win_chance=data.get("base_win_chance", 50.0),
            quarter=data.get("quarter", 1),
            offer_kind=data.get("offer_kind", OFFER_NEW),
            existing_client_id=data.get("existing_client_id"),
            existing_client_satisfaction=data.get("existing_client_satisfaction"),
        )


@dataclass
class ActiveClient:
    """A client relationship won via a pitch. Revenue is derived from budget and discount."""

    opportunity_id: str = ""
    client_name: str = ""
    client_type: str = "startup"
    service_line: str = "digital"
    budget: int = 0  # annual contract value before discount
    discount: float = 0.0  # percent, 0-50
    complexity: str = "medium"
    hours_per_quarter: int = 0
    quarters_remaining: int = 0
    won_in_quarter: int = 0  # 0 = starter client
    quality_level: str = "standard"
    status: str = "active"  # active | notice_given
    satisfaction_level: float = STARTING_CLIENT_SATISFACTION  # 0-100
    notice_quarter: int | None = None

    def __post_init__(self) -> None:
        if self.quarters_remaining < 0:
            raise ValueError(f"quarters_remaining must be >= 0, got {self.quarters_remaining}")
        if not 0 <= self.discount <= MAX_DISCOUNT_PERCENT:
            raise ValueError(f"discount must be between 0 and {MAX_DISCOUNT_PERCENT}, got {self.discount}")
        if self.status not in CLIENT_STATUSES:
            raise ValueError(f"unknown client status {self.status!r}")
        if self.quality_level not in QUALITY_LEVELS:
            raise ValueError(f"unknown quality level {self.quality_level!r}")
        self.satisfaction_level = max(0.0, min(100.0, self.satisfaction_level))

    @property
    def revenue(self) -> float:
        """Annual revenue after the pitched discount."""
        return self.budget * (1 - self.discount / 100)

    @property
    def quarterly_revenue(self) -> float:
        return self.revenue / QUARTERS_PER_YEAR

    def evolve(self, **changes: Any) -> "ActiveClient":
        """Copy with changes; the original stays untouched."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "opportunity_id": self.opportunity_id,
            "client_name": self.client_name,
            "client_type": self.client_type,
            "service_line": self.service_line,
            "budget": self.budget,
            "discount": self.discount,
            "revenue": self.revenue,
            "complexity": self.complexity,
            "hours_per_quarter": self.hours_per_quarter,
            "quarters_remaining": self.quarters_remaining,
            "won_in_quarter": self.won_in_quarter,
            "quality_level": self.quality_level,
            "status": self.status,
            "satisfaction_level": self.satisfaction_level,
        }
        if self.notice_quarter is not None:
            d["notice_quarter"] = self.notice_quarter
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActiveClient":
        # "revenue" is derived, so a stored value is ignored
        return cls(
            opportunity_id=data.get("opportunity_id", ""),
            client_name=data.get("client_name", ""),
            client_type=data.get("client_type", "startup"),
            service_line=data.get("service_line", "digital"),
            budget=data.get("budget", 0),
            discount=data.get("discount", 0.0),
            complexity=data.get("complexity", "medium"),
            hours_per_quarter=data.get("hours_per_quarter", 0),
            quarters_remaining=data.get("quarters_remaining", 0),
            won_in_quarter=data.get("won_in_quarter", 0),
            quality_level=data.get("quality_level", "standard"),
            status=data.get("status", "active"),
            satisfaction_level=data.get("satisfaction_level", STARTING_CLIENT_SATISFACTION),
            notice_quarter=data.get("notice_quarter"),
        )
