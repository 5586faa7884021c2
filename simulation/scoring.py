"""
Scoring, leaderboard and winner for Agency Leadership.

Composite score for a solvent team (profit, clients and cash are relative to
the best solvent team, floored at 1 so a field of loss-makers still scores):

    profit / best_profit * 40 + reputation * 0.20 + clients / most_clients * 15
    + cash / best_cash * 10 + (100 - burnout) * 0.15

Bankrupt teams score 0, rank below every solvent team and cannot win.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from models.constants import (
    SCORE_CASH_WEIGHT,
    SCORE_CLIENT_WEIGHT,
    SCORE_PROFIT_WEIGHT,
    SCORE_REPUTATION_WEIGHT,
    SCORE_WELLBEING_WEIGHT,
)
from models.team import TeamState


@dataclass(frozen=True)
class LeaderboardEntry:
    team_id: str
    company_name: str
    team_number: int
    rank: int
    total_score: float
    cumulative_profit: int
    cash: int
    reputation: float
    burnout: float
    staff: int
    active_clients: int
    is_bankrupt: bool

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


def check_bankruptcy(team: TeamState) -> bool:
    """True once the team is (or should be) bankrupt: flagged, or cash below zero."""
    return team.is_bankrupt or team.cash < 0


def calculate_scores(teams: Sequence[TeamState]) -> Dict[str, float]:
    """team_id -> composite score."""
    solvent = [t for t in teams if not check_bankruptcy(t)]
    if not solvent:
        return {t.team_id: 0.0 for t in teams}
    best_profit = max(max(t.cumulative_profit for t in solvent), 1)
    most_clients = max(max(len(t.clients) for t in solvent), 1)
    best_cash = max(max(t.cash for t in solvent), 1)

    scores: Dict[str, float] = {}
    for team in teams:
        if check_bankruptcy(team):
            scores[team.team_id] = 0.0
            continue
        score = (
            team.cumulative_profit / best_profit * SCORE_PROFIT_WEIGHT
            + team.reputation * SCORE_REPUTATION_WEIGHT
            + len(team.clients) / most_clients * SCORE_CLIENT_WEIGHT
            + team.cash / best_cash * SCORE_CASH_WEIGHT
            + (100 - team.burnout) * SCORE_WELLBEING_WEIGHT
        )
        scores[team.team_id] = round(score, 2)
    return scores


def get_leaderboard(teams: Sequence[TeamState]) -> List[LeaderboardEntry]:
    """Teams best first. Ties keep the input (join) order."""
    scores = calculate_scores(teams)
    ordered = sorted(
        teams,
        key=lambda t: (check_bankruptcy(t), -scores[t.team_id]),
    )
    return [
        LeaderboardEntry(
            team_id=team.team_id,
            company_name=team.company_name,
            team_number=team.team_number,
            rank=rank,
            total_score=scores[team.team_id],
            cumulative_profit=team.cumulative_profit,
            cash=team.cash,
            reputation=team.reputation,
            burnout=team.burnout,
            staff=team.staff,
            active_clients=len(team.clients),
            is_bankrupt=check_bankruptcy(team),
        )
        for rank, team in enumerate(ordered, start=1)
    ]


def calculate_winner(teams: Sequence[TeamState]) -> str:
    """Team id of the top solvent team; the first team if all went bankrupt, "" if none."""
    if not teams:
        return ""
    board = get_leaderboard(teams)
    if board[0].is_bankrupt:
        return teams[0].team_id
    return board[0].team_id
