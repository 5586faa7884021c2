"""
Quarter notifications for Agency Leadership.
Read-only over team state: builds the messages a team sees after a quarter
resolves. Nothing here changes the team.
"""
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from models.constants import BURNOUT_SEVERE, LOW_CASH_WARNING, SATISFACTION_AT_RISK
from models.event import GameEvent
from models.team import TeamState

from .events import get_event_name

NOTIFICATION_TYPES = ("success", "warning", "error", "event")


@dataclass(frozen=True)
class Notification:
    id: str
    quarter: int
    type: str  # one of NOTIFICATION_TYPES
    title: str
    message: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


def _notify(quarter: int, kind: str, title: str, message: str) -> Notification:
    return Notification(
        id=uuid.uuid4().hex[:8],
        quarter=quarter,
        type=kind,
        title=title,
        message=message,
        timestamp=time.time(),
    )


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" + ("" if n == 1 else "s")


def _k(amount: float) -> str:
    return f"£{abs(amount) / 1000:.0f}k"


def generate_notifications(team: TeamState, events: Sequence[GameEvent]) -> List[Notification]:
    """Messages for the team's latest resolved quarter. Empty before the first result."""
    if not team.quarterly_results:
        return []
    result = team.quarterly_results[-1]
    quarter = result.quarter
    out: List[Notification] = []

    if result.profit > 0:
        out.append(_notify(quarter, "success", "Profitable Quarter", f"You made {_k(result.profit)} profit this quarter."))
    elif result.profit < 0:
        out.append(_notify(quarter, "warning", "Loss This Quarter", f"You lost {_k(result.profit)} this quarter. Review your costs."))

    if result.clients_won:
        out.append(_notify(quarter, "success", "New Clients", f"You won {_plural(result.clients_won, 'new client')} this quarter!"))
    if result.projects_won:
        out.append(_notify(quarter, "success", "Client Projects", f"Existing clients awarded you {_plural(result.projects_won, 'project')}."))
    if result.clients_churned:
        out.append(_notify(quarter, "warning", "Client Departures", f"{_plural(result.clients_churned, 'client')} left this quarter."))
    if result.clients_renewed:
        out.append(_notify(quarter, "success", "Contract Renewals", f"{_plural(result.clients_renewed, 'client')} renewed their contract."))

    utilization = round(result.utilization_rate * 100)
    if result.utilization_rate > 1.3:
        out.append(_notify(quarter, "error", "Severe Overwork", f"Your team is at {utilization}% utilization. Burnout is rising fast!"))
    elif result.utilization_rate > 1.1:
        out.append(_notify(quarter, "warning", "Team Stretched", f"Your team is at {utilization}% utilization. Consider hiring."))
    elif result.utilization_rate < 0.5:
        out.append(_notify(quarter, "warning", "Underutilized", f"Your team is only at {utilization}% utilization. Win more work!"))

    if team.burnout > BURNOUT_SEVERE:
        out.append(_notify(quarter, "error", "High Burnout", f"Team burnout is at {team.burnout:.0f}%. Invest in wellbeing or risk losing staff."))
    elif team.burnout > 50:
        out.append(_notify(quarter, "warning", "Rising Burnout", f"Team burnout is at {team.burnout:.0f}%. Consider wellbeing investment."))

    if result.reputation_change > 5:
        out.append(_notify(quarter, "success", "Reputation Growing", f"Your reputation rose by {result.reputation_change:g} points."))
    elif result.reputation_change < -5:
        out.append(_notify(quarter, "warning", "Reputation Declining", f"Your reputation fell by {abs(result.reputation_change):g} points."))

    if 0 < team.cash < LOW_CASH_WARNING:
        out.append(_notify(quarter, "error", "Low Cash", f"Only {_k(team.cash)} remaining. Watch your spending!"))
    if team.is_bankrupt:
        out.append(_notify(quarter, "error", "Bankrupt", "Your agency has run out of cash and is now bankrupt."))

    for event in events:
        if event.active and event.quarter == quarter:
            out.append(_notify(quarter, "event", get_event_name(event.type), event.description))

    at_risk = [c for c in team.clients if c.status == "notice_given" or c.satisfaction_level < SATISFACTION_AT_RISK]
    if at_risk:
        verb = "is" if len(at_risk) == 1 else "are"
        out.append(_notify(quarter, "warning", "Clients At Risk", f"{_plural(len(at_risk), 'client')} {verb} unhappy. Invest in client satisfaction!"))
    return out
