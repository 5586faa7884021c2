"""
End-of-game team reports for Agency Leadership.

Strengths, weaknesses and recommendations are ordered ``(predicate, text)``
tables evaluated by one function; adding an insight means adding a row.
Reports only read team state.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from models.quarter_result import QuarterResult
from models.team import TeamState

from .scoring import get_leaderboard

Rule = tuple[Callable[[TeamState, Sequence[QuarterResult]], bool], str]


def _average_utilization(results: Sequence[QuarterResult]) -> float:
    if not results:
        return 0.0
    return sum(r.utilization_rate for r in results) / len(results)


def _win_rate(results: Sequence[QuarterResult]) -> float:
    pitched = sum(r.clients_won + r.clients_lost for r in results)
    return sum(r.clients_won for r in results) / pitched if pitched else 0.0


STRENGTH_RULES: tuple[Rule, ...] = (
    (lambda t, r: t.reputation >= 70, "Strong brand reputation in the market"),
    (lambda t, r: t.burnout <= 30, "Healthy team culture with low burnout"),
    (lambda t, r: bool(r) and sum(1 for q in r if q.profit > 0) >= len(r) * 0.7, "Consistent profitability across quarters"),
    (lambda t, r: _win_rate(r) >= 0.5, "Strong pitch win rate"),
    (lambda t, r: t.cash > 300000, "Excellent cash reserves"),
    (lambda t, r: t.tech_level >= 3 or t.training_level >= 3, "Investment in team capabilities"),
    (lambda t, r: t.market_presence >= 50, "Strong market presence and visibility"),
)

WEAKNESS_RULES: tuple[Rule, ...] = (
    (lambda t, r: t.reputation < 40, "Reputation has suffered"),
    (lambda t, r: t.burnout >= 60, "Team burnout is dangerously high"),
    (lambda t, r: bool(r) and sum(1 for q in r if q.profit < 0) >= len(r) * 0.3, "Struggled with profitability"),
    (lambda t, r: t.cash < 100000 and not t.is_bankrupt, "Cash reserves are concerning"),
    (lambda t, r: sum(1 for q in r if q.utilization_rate > 1.2) >= 2, "Consistent pattern of overworking the team"),
    (lambda t, r: sum(1 for q in r if q.utilization_rate < 0.6) >= 2, "Underutilized team capacity"),
    (lambda t, r: t.is_bankrupt, "Went bankrupt during the game"),
)

RECOMMENDATION_RULES: tuple[Rule, ...] = (
    (lambda t, r: t.burnout >= 50, "Invest more in team wellbeing to reduce burnout"),
    (lambda t, r: t.reputation < 50, "Focus on quality and training to rebuild reputation"),
    (lambda t, r: t.tech_level < 2, "Technology investment would improve efficiency"),
    (lambda t, r: t.training_level < 2, "Training investment would improve output quality"),
    (lambda t, r: t.market_presence < 30, "Increase marketing spend to boost visibility"),
    (lambda t, r: _average_utilization(r) > 1.1, "Consider hiring to reduce workload pressure"),
    (lambda t, r: bool(r) and _average_utilization(r) < 0.7, "Win more clients or optimize staffing levels"),
    (lambda t, r: any(c.satisfaction_level < 50 for c in t.clients), "Increase client satisfaction investment to retain business"),
)


def evaluate_rules(rules: Sequence[Rule], team: TeamState, results: Sequence[QuarterResult], fallback: str) -> list[str]:
    hits = [text for check, text in rules if check(team, results)]
    return hits or [fallback]


def _summary(team: TeamState, rank: int, total: int) -> str:
    if team.is_bankrupt:
        return f"{team.company_name} went bankrupt during the game. Review cash management and cost control strategies."
    if rank == 1:
        return (
            f"{team.company_name} finished in first place! £{team.cumulative_profit / 1000:.0f}k cumulative profit "
            f"and {team.reputation:.0f}% reputation."
        )
    if rank <= math.ceil(total / 3):
        return f"{team.company_name} performed well, finishing {rank}/{total}. Solid foundation for growth."
    if rank <= math.ceil(total * 2 / 3):
        return f"{team.company_name} finished mid-pack at {rank}/{total}. Room for improvement in key areas."
    return f"{team.company_name} finished {rank}/{total}. Significant opportunities to improve strategy."


@dataclass
class TeamReport:
    team_id: str
    company_name: str
    team_number: int
    rank: int
    total_teams: int
    summary: str
    key_metrics: dict[str, Any] = field(default_factory=dict)
    quarter_by_quarter: list[dict[str, Any]] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


def generate_team_report(team: TeamState, all_teams: Sequence[TeamState], rank: int) -> TeamReport:
    results = team.quarterly_results
    return TeamReport(
        team_id=team.team_id,
        company_name=team.company_name,
        team_number=team.team_number,
        rank=rank,
        total_teams=len(all_teams),
        summary=_summary(team, rank, len(all_teams)),
        key_metrics={
            "final_cash": team.cash,
            "cumulative_profit": team.cumulative_profit,
            "final_reputation": team.reputation,
            "final_burnout": team.burnout,
            "total_clients_won": sum(r.clients_won for r in results),
            "total_clients_lost": sum(r.clients_lost for r in results),
            "average_utilization": round(_average_utilization(results), 4),
        },
        quarter_by_quarter=[
            {
                "quarter": r.quarter,
                "profit": r.profit,
                "revenue": r.revenue,
                "costs": r.costs,
                "clients_won": r.clients_won,
                "utilization": r.utilization_rate,
            }
            for r in results
        ],
        strengths=evaluate_rules(STRENGTH_RULES, team, results, "Steady performance throughout the game"),
        weaknesses=evaluate_rules(WEAKNESS_RULES, team, results, "No significant weaknesses identified"),
        recommendations=evaluate_rules(RECOMMENDATION_RULES, team, results, "Continue current strategy and monitor metrics"),
    )


def generate_all_team_reports(teams: Sequence[TeamState]) -> list[TeamReport]:
    """One report per team, in leaderboard order."""
    by_id = {t.team_id: t for t in teams}
    return [generate_team_report(by_id[entry.team_id], teams, entry.rank) for entry in get_leaderboard(teams)]
