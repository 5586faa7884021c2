"""
Quarter resolution engine for Agency Leadership.

Turns one team's submitted decisions plus the shared market snapshot
(opportunities, active events) into the team's next state.  Key design goals:

1. **Deterministic**: the only randomness is the ``SeededRandom`` passed in.
   Pitches draw first (in submitted order), then contract renewals (in client
   order), so the same seed and inputs always give the same quarter.
2. **Conserving**: revenue and costs are whole pounds and
   ``cash_after == cash_before + revenue - costs`` exactly.
3. **Non-destructive**: the input ``TeamState`` is never modified; a new
   state is returned with exactly one result and one metrics snapshot appended.
4. **Outcomes are data**: losing pitches, churn and bankruptcy are recorded in
   the result.  Only structurally invalid inputs raise ``InvalidInputError``.

Processing order: staffing, capacity, pitching, client lifecycle, accounting,
capability and reputation drift, burnout, bankruptcy, result emission.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, Sequence

from models.client import ActiveClient, ClientOpportunity, OFFER_PROJECT, OFFER_RENEWAL
from models.config import LevelConfig
from models.constants import (
    BURNOUT_CALM_FOCUS,
    BURNOUT_CALM_RELIEF,
    BURNOUT_GROWTH_RATE,
    BURNOUT_PER_FIRING,
    BURNOUT_PER_PREMIUM_PITCH,
    BURNOUT_SATISFACTION_RATE,
    BURNOUT_SATISFACTION_THRESHOLD,
    BURNOUT_SEVERE,
    BURNOUT_UNDERUSED_RELIEF,
    BURNOUT_UTILIZATION_STEPS,
    CAPABILITY_DIMINISHING,
    CAPABILITY_MIN_LEVEL,
    COMFORTABLE_UTILIZATION_LOW,
    CONTRACT_LENGTH_QUARTERS,
    FIRING_COST,
    GROWTH_FOCUS_SATISFACTION_PENALTY,
    GROWTH_FOCUS_STRETCH,
    HIRING_COST,
    HOURS_PER_STAFF_PER_QUARTER,
    MARKET_PRESENCE_BASE_TARGET,
    MARKET_PRESENCE_DRIFT,
    MARKET_PRESENCE_GROWTH_RATE,
    MARKET_PRESENCE_PER_MARKETING,
    MARKET_PRESENCE_PER_NEW_CLIENT,
    MAX_DISCOUNT_PERCENT,
    OVERWORK_SATISFACTION_RATE,
    OVERWORK_SATISFACTION_THRESHOLD,
    PITCH_HOURS_BASE,
    PROJECT_HOURS_BASE,
    QUALITY_DELIVERY_COST_RATE,
    QUALITY_LEVELS,
    QUALITY_SATISFACTION_DRIFT,
    RENEWAL_BASE_CHANCE,
    RENEWAL_CHANCE_SPREAD,
    REPUTATION_OVERWORK_STEPS,
    REPUTATION_PER_CHURN,
    REPUTATION_PER_CLIENT_OFFER,
    REPUTATION_PER_NEW_CLIENT,
    REPUTATION_QUALITY,
    REPUTATION_SEVERE_BURNOUT_PENALTY,
    REPUTATION_TRAINING_BONUS,
    REPUTATION_TRAINING_THRESHOLD,
    SATISFACTION_BASE_DECAY,
    SATISFACTION_CHURN_THRESHOLD,
    SATISFACTION_RENEW_THRESHOLD,
    SATISFACTION_SPEND_CAP,
    SATISFACTION_SPEND_SCALE,
    STAFF_COST_PER_QUARTER,
    STARTING_CLIENT_SATISFACTION,
    TECH_INVESTMENT_STEPS,
    TRAINING_FIRING_PENALTY,
    TRAINING_FIRING_THRESHOLD,
    TRAINING_INVESTMENT_STEPS,
    WELLBEING_RELIEF_STEPS,
)
from models.errors import InvalidInputError
from models.event import GameEvent
from models.inputs import DEFAULT_GROWTH_FOCUS, INVESTMENT_FIELDS, PitchDecision, TeamInputs
from models.quarter_result import AgencyMetrics, QuarterResult
from models.team import TeamState

from .events import EventEffects, LOSE_LOWEST_VALUE, LOSE_MOST_RECENT, active_event_types, event_effects
from .pitch import PitchOutcome, evaluate_pitch
from .random_seed import SeededRandom

_log = logging.getLogger("agency.engine")


@dataclass(frozen=True)
class QuarterResolution:
    """New team state plus what happened, for notifications and reports.

    ``result`` is None when the team was already bankrupt and nothing ran.
    """

    team: TeamState
    result: QuarterResult | None
    pitch_outcomes: tuple[PitchOutcome, ...] = ()
    clients_won: tuple[str, ...] = ()
    clients_churned: tuple[str, ...] = ()
    clients_renewed: tuple[str, ...] = ()
    clients_given_notice: tuple[str, ...] = ()
    clients_lost_to_events: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "team": self.team.to_dict(),
            "result": self.result.to_dict() if self.result else None,
            "pitch_outcomes": [o.to_dict() for o in self.pitch_outcomes],
            "clients_won": list(self.clients_won),
            "clients_churned": list(self.clients_churned),
            "clients_renewed": list(self.clients_renewed),
            "clients_given_notice": list(self.clients_given_notice),
            "clients_lost_to_events": list(self.clients_lost_to_events),
        }


# ===================================================================
# Helper utilities
# ===================================================================

def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _stat(value: float) -> float:
    """Clamp a 0-100 team stat and keep two decimals."""
    return round(_clamp(value, 0.0, 100.0), 2)


def _step_value(amount: float, steps: Iterable[tuple[float, float]], default: float = 0.0) -> float:
    """First ``(threshold, value)`` whose threshold ``amount`` reaches."""
    for threshold, value in steps:
        if amount >= threshold:
            return value
    return default


def _step_above(amount: float, steps: Iterable[tuple[float, float]], default: float = 0.0) -> float:
    """First ``(threshold, value)`` whose threshold ``amount`` exceeds."""
    for threshold, value in steps:
        if amount > threshold:
            return value
    return default


def _is_number(value: Any) -> bool:
    """Finite int or float; bools and strings do not count."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _active_effects(events: Sequence[GameEvent]) -> list[EventEffects]:
    return [effects for _, effects in event_effects(events)]


# ===================================================================
# Input validation
# ===================================================================

def _input_errors(
    inputs: TeamInputs,
    opportunities: Sequence[ClientOpportunity],
    staff: int | None,
    level_config: LevelConfig | None,
) -> list[InvalidInputError]:
    errors: list[InvalidInputError] = []
    known = {o.id for o in opportunities}
    seen: set[str] = set()
    for i, pitch in enumerate(inputs.pitches):
        prefix = f"pitches[{i}]"
        if not isinstance(pitch.opportunity_id, str) or pitch.opportunity_id not in known:
            errors.append(InvalidInputError(f"{prefix}.opportunity_id", f"unknown opportunity {pitch.opportunity_id!r}"))
        elif pitch.opportunity_id in seen:
            errors.append(InvalidInputError(f"{prefix}.opportunity_id", f"duplicate pitch for {pitch.opportunity_id!r}"))
        else:
            seen.add(pitch.opportunity_id)
        if not _is_number(pitch.discount_percent):
            errors.append(InvalidInputError(f"{prefix}.discount_percent", "must be a finite number"))
        elif not 0 <= pitch.discount_percent <= MAX_DISCOUNT_PERCENT:
            errors.append(InvalidInputError(f"{prefix}.discount_percent", f"must be between 0 and {MAX_DISCOUNT_PERCENT}"))
        if not isinstance(pitch.quality_level, str) or pitch.quality_level not in QUALITY_LEVELS:
            errors.append(InvalidInputError(f"{prefix}.quality_level", f"must be one of {QUALITY_LEVELS}"))

    for name in ("hiring_count", "firing_count"):
        value = getattr(inputs, name)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(InvalidInputError(name, "must be a non-negative whole number"))
    for name in INVESTMENT_FIELDS:
        value = getattr(inputs, name)
        if not _is_number(value):
            errors.append(InvalidInputError(name, "must be a finite number"))
        elif value < 0:
            errors.append(InvalidInputError(name, "must not be negative"))
    if not _is_number(inputs.growth_focus):
        errors.append(InvalidInputError("growth_focus", "must be a finite number"))
    elif not 0 <= inputs.growth_focus <= 100:
        errors.append(InvalidInputError("growth_focus", "must be between 0 and 100"))

    if staff is not None and level_config is not None and not errors:
        if staff + inputs.hiring_count > level_config.max_staff and inputs.hiring_count > 0:
            errors.append(InvalidInputError("hiring_count", f"staff would exceed the ceiling of {level_config.max_staff}"))
        if inputs.firing_count > 0 and staff + inputs.hiring_count - inputs.firing_count < level_config.min_staff:
            errors.append(InvalidInputError("firing_count", f"staff would fall below the floor of {level_config.min_staff}"))
    return errors


def validate_inputs(
    inputs: TeamInputs,
    opportunities: Sequence[ClientOpportunity],
    staff: int | None = None,
    level_config: LevelConfig | None = None,
) -> list[InvalidInputError]:
    """Every rejected field in a submission; an empty list means acceptable.

    With ``staff`` and ``level_config`` the hiring ceiling and firing floor
    are checked as well.
    """
    return _input_errors(inputs, opportunities, staff, level_config)


def sanitize_inputs(
    inputs: TeamInputs,
    opportunities: Sequence[ClientOpportunity],
    staff: int | None = None,
    level_config: LevelConfig | None = None,
) -> tuple[TeamInputs, list[InvalidInputError]]:
    """Replace each rejected field with its default; returns (clean inputs, rejections)."""
    errors = _input_errors(inputs, opportunities, staff, level_config)
    if not errors:
        return inputs, []

    bad_pitches: set[int] = set()
    changes: dict[str, Any] = {}
    for err in errors:
        if err.field.startswith("pitches["):
            bad_pitches.add(int(err.field[len("pitches["):err.field.index("]")]))
        elif err.field == "growth_focus":
            changes["growth_focus"] = DEFAULT_GROWTH_FOCUS
        else:
            changes[err.field] = 0
    pitches = [p for i, p in enumerate(inputs.pitches) if i not in bad_pitches]
    clean = replace(inputs, pitches=pitches, **changes)
    # Dropping hires can push firing below the floor; re-check once
    if staff is not None and level_config is not None:
        again = _input_errors(clean, opportunities, staff, level_config)
        if again:
            clean = replace(clean, **{e.field: 0 for e in again if not e.field.startswith("pitches[")})
    return clean, errors


# ===================================================================
# Step helpers
# ===================================================================

def _apply_event_client_loss(
    clients: list[ActiveClient],
    effects: list[EventEffects],
) -> tuple[list[ActiveClient], list[str]]:
    lost: list[str] = []
    for fx in effects:
        if fx.client_loss is None or not clients:
            continue
        if fx.client_loss == LOSE_LOWEST_VALUE:
            target = min(clients, key=lambda c: c.revenue)
        elif fx.client_loss == LOSE_MOST_RECENT:
            recent = [c for c in clients if c.won_in_quarter > 0]
            if not recent:
                continue
            target = max(recent, key=lambda c: c.won_in_quarter)
        else:
            continue
        clients = [c for c in clients if c is not target]
        lost.append(target.client_name)
    return clients, lost


def _satisfaction_shift(
    inputs: TeamInputs,
    book_size: int,
    utilization: float,
    burnout: float,
    effects: list[EventEffects],
) -> float:
    """Satisfaction change shared by every existing client (before quality drift)."""
    shift = -SATISFACTION_BASE_DECAY
    if inputs.client_satisfaction_spend > 0 and book_size > 0:
        per_client = inputs.client_satisfaction_spend / book_size
        shift += min(SATISFACTION_SPEND_CAP, math.sqrt(per_client / 1000) * SATISFACTION_SPEND_SCALE)
    if utilization > OVERWORK_SATISFACTION_THRESHOLD:
        shift -= (utilization - OVERWORK_SATISFACTION_THRESHOLD) * OVERWORK_SATISFACTION_RATE
    if burnout > BURNOUT_SATISFACTION_THRESHOLD:
        shift -= (burnout - BURNOUT_SATISFACTION_THRESHOLD) * BURNOUT_SATISFACTION_RATE
    shift -= inputs.growth_focus / 100 * GROWTH_FOCUS_SATISFACTION_PENALTY
    shift += sum(fx.satisfaction_change for fx in effects)
    return shift


def _renewal_chance(satisfaction: float) -> float:
    return _clamp(RENEWAL_BASE_CHANCE + (satisfaction - SATISFACTION_RENEW_THRESHOLD) / RENEWAL_CHANCE_SPREAD, 0.0, 1.0)


def _capability_gain(investment: float, level: float, steps: Iterable[tuple[float, float]]) -> float:
    gain = _step_value(investment, steps)
    return gain * CAPABILITY_DIMINISHING / (CAPABILITY_DIMINISHING + max(0.0, level - 1))


def _burnout_change(
    inputs: TeamInputs,
    utilization: float,
    fires: int,
    premium_pitches: int,
    effects: list[EventEffects],
) -> float:
    change = _step_above(utilization, BURNOUT_UTILIZATION_STEPS)
    if utilization < COMFORTABLE_UTILIZATION_LOW:
        change += BURNOUT_UNDERUSED_RELIEF
    if inputs.growth_focus > GROWTH_FOCUS_STRETCH:
        change += (inputs.growth_focus - GROWTH_FOCUS_STRETCH) * BURNOUT_GROWTH_RATE
    elif inputs.growth_focus < BURNOUT_CALM_FOCUS:
        change += BURNOUT_CALM_RELIEF
    change += _step_value(inputs.wellbeing_spend, WELLBEING_RELIEF_STEPS)
    change += fires * BURNOUT_PER_FIRING
    change += premium_pitches * BURNOUT_PER_PREMIUM_PITCH
    change += sum(fx.burnout_change for fx in effects)
    return change


def _reputation_change(
    team: TeamState,
    inputs: TeamInputs,
    won_new: list[PitchDecision],
    won_offers: list[PitchDecision],
    churned: int,
    utilization: float,
    effects: list[EventEffects],
) -> float:
    change = len(won_new) * REPUTATION_PER_NEW_CLIENT + len(won_offers) * REPUTATION_PER_CLIENT_OFFER
    for pitch in won_new + won_offers:
        change += REPUTATION_QUALITY.get(pitch.quality_level, 0.0)
    change += _step_above(utilization, REPUTATION_OVERWORK_STEPS)
    if team.burnout >= BURNOUT_SEVERE:
        change += REPUTATION_SEVERE_BURNOUT_PENALTY
    if inputs.training_investment >= REPUTATION_TRAINING_THRESHOLD:
        change += REPUTATION_TRAINING_BONUS
    change += churned * REPUTATION_PER_CHURN
    for fx in effects:
        if fx.reputation_min_reputation is not None and team.reputation < fx.reputation_min_reputation:
            continue
        change += fx.reputation_change
    return change


# ===================================================================
# Public API
# ===================================================================

def resolve_quarter(
    team: TeamState,
    inputs: TeamInputs,
    all_teams: Sequence[TeamState],
    opportunities: Sequence[ClientOpportunity],
    events: Sequence[GameEvent],
    level_config: LevelConfig,
    rng: SeededRandom,
) -> QuarterResolution:
    """Resolve one team's quarter.

    Parameters
    ----------
    team : TeamState
        State at the start of the quarter. Not modified.
    inputs : TeamInputs
        The team's decisions (``get_default_inputs()`` on a forced advance).
    all_teams : sequence of TeamState
        Every team in the game, in resolution order. Read only.
    opportunities : sequence of ClientOpportunity
        The shared pool plus this team's existing-client offers.
    events : sequence of GameEvent
        Events active this quarter.
    level_config : LevelConfig
        Staff floor and ceiling.
    rng : SeededRandom
        This team's stream for the quarter.

    Returns
    -------
    QuarterResolution
        The new state (quarter advanced, history appended) and its result.

    Raises
    ------
    InvalidInputError
        For a pitch at an unknown opportunity, a discount outside 0-50, an
        unknown quality level or a negative amount. Nothing is drawn from
        ``rng`` in that case.
    """
    if team.is_bankrupt:
        _log.debug("Team %s is bankrupt; quarter %d skipped", team.team_id, team.quarter)
        return QuarterResolution(team=team.evolve(), result=None)

    errors = _input_errors(inputs, opportunities, None, None)
    if errors:
        raise errors[0]

    quarter = team.quarter
    opp_by_id = {o.id: o for o in opportunities}
    effects = _active_effects(events)
    event_types = active_event_types(events)

    # --- 1. Staffing ---
    staff = team.staff
    hires = min(inputs.hiring_count, max(0, level_config.max_staff - staff))
    staff += hires
    fires = min(inputs.firing_count, max(0, staff - level_config.min_staff))
    staff -= fires
    for fx in effects:
        if fx.staff_loss:
            staff -= min(fx.staff_loss, max(0, staff - level_config.min_staff))
    one_off_costs = hires * HIRING_COST + fires * FIRING_COST
    clients, lost_to_events = _apply_event_client_loss(list(team.clients), effects)
    client_ids = {c.opportunity_id for c in clients}

    # --- 2. Capacity ---
    capacity_multiplier = 1.0
    for fx in effects:
        if team.tech_level >= fx.capacity_min_tech:
            capacity_multiplier *= fx.capacity_multiplier
    capacity = staff * HOURS_PER_STAFF_PER_QUARTER * capacity_multiplier

    # --- 3. Pitching ---
    outcomes: list[PitchOutcome] = []
    new_clients: list[ActiveClient] = []
    won_new: list[PitchDecision] = []
    won_offers: list[PitchDecision] = []
    renewals_won: dict[str, PitchDecision] = {}
    project_revenue = 0
    project_hours = 0
    pitch_hours = 0.0
    premium_pitches = 0
    for pitch in inputs.pitches:
        opp = opp_by_id[pitch.opportunity_id]
        if opp.is_existing_client_offer and opp.existing_client_id not in client_ids:
            # The client left before the pitch could land
            continue
        if pitch.quality_level == "premium":
            premium_pitches += 1
        if opp.is_existing_client_offer:
            pitch_hours += PROJECT_HOURS_BASE
        else:
            pitch_hours += PITCH_HOURS_BASE * (1 + inputs.growth_focus / 100)

        outcome = evaluate_pitch(
            opp,
            pitch.discount_percent,
            team.reputation,
            team.market_presence,
            team.tech_level,
            team.training_level,
            pitch.quality_level,
            event_types,
            rng,
            burnout=team.burnout,
            growth_focus=inputs.growth_focus,
        )
        outcomes.append(outcome)
        if not outcome.won:
            continue
        if opp.offer_kind == OFFER_PROJECT:
            project_revenue += opp.budget
            project_hours += opp.hours_required
            won_offers.append(pitch)
        elif opp.offer_kind == OFFER_RENEWAL:
            renewals_won[opp.existing_client_id] = pitch
            won_offers.append(pitch)
        else:
            won_new.append(pitch)
            new_clients.append(ActiveClient(
                opportunity_id=opp.id,
                client_name=opp.client_name,
                client_type=opp.client_type,
                service_line=opp.service_line,
                budget=opp.budget,
                discount=pitch.discount_percent,
                complexity=opp.complexity,
                hours_per_quarter=opp.hours_required,
                quarters_remaining=CONTRACT_LENGTH_QUARTERS,
                won_in_quarter=quarter,
                quality_level=pitch.quality_level,
                status="active",
                satisfaction_level=STARTING_CLIENT_SATISFACTION,
            ))
    pitches_lost = len(outcomes) - len(won_new) - len(won_offers)

    workload = (
        sum(c.hours_per_quarter for c in clients)
        + sum(c.hours_per_quarter for c in new_clients)
        + project_hours
        + pitch_hours
    )
    utilization = workload / max(capacity, 1.0)

    # --- 4. Client lifecycle ---
    shift = _satisfaction_shift(inputs, len(clients) + len(new_clients), utilization, team.burnout, effects)
    kept: list[ActiveClient] = []
    churned: list[str] = []
    renewed: list[str] = []
    given_notice: list[str] = []
    for client in clients:
        previous = client.satisfaction_level
        satisfaction = round(_clamp(previous + shift + QUALITY_SATISFACTION_DRIFT.get(client.quality_level, 0.0), 0.0, 100.0), 2)

        renewal = renewals_won.get(client.opportunity_id)
        if renewal is not None:
            kept.append(client.evolve(
                quarters_remaining=client.quarters_remaining - 1 + CONTRACT_LENGTH_QUARTERS,
                discount=renewal.discount_percent,
                quality_level=renewal.quality_level,
                satisfaction_level=satisfaction,
                status="active",
                notice_quarter=None,
            ))
            renewed.append(client.client_name)
            continue

        status = client.status
        notice_quarter = client.notice_quarter
        if status == "notice_given":
            if satisfaction < previous:
                churned.append(client.client_name)
                _log.debug("Team %s: %s churned after notice", team.team_id, client.client_name)
                continue
            if satisfaction >= SATISFACTION_CHURN_THRESHOLD:
                status, notice_quarter = "active", None

        remaining = client.quarters_remaining - 1
        if remaining <= 0:
            if status == "active" and satisfaction >= SATISFACTION_RENEW_THRESHOLD:
                chance = _renewal_chance(satisfaction)
                if rng.next_bool(chance):
                    renewed.append(client.client_name)
                    kept.append(client.evolve(
                        quarters_remaining=CONTRACT_LENGTH_QUARTERS,
                        satisfaction_level=satisfaction,
                        status="active",
                        notice_quarter=None,
                    ))
                    continue
            churned.append(client.client_name)
            _log.debug("Team %s: %s contract ended without renewal", team.team_id, client.client_name)
            continue

        if status == "active" and satisfaction < SATISFACTION_CHURN_THRESHOLD:
            status, notice_quarter = "notice_given", quarter
            given_notice.append(client.client_name)
        kept.append(client.evolve(
            quarters_remaining=remaining,
            satisfaction_level=satisfaction,
            status=status,
            notice_quarter=notice_quarter,
        ))
    book = kept + new_clients

    # --- 5. Accounting ---
    staff_cost_multiplier = 1.0
    for fx in effects:
        staff_cost_multiplier *= fx.staff_cost_multiplier
    delivery_cost = sum(c.quarterly_revenue * QUALITY_DELIVERY_COST_RATE.get(c.quality_level, 0.0) for c in book)
    revenue = int(round(sum(c.quarterly_revenue for c in book) + project_revenue))
    costs = int(round(
        staff * STAFF_COST_PER_QUARTER * staff_cost_multiplier
        + one_off_costs
        + inputs.total_investment
        + delivery_cost
    ))
    profit = revenue - costs
    cash = team.cash + profit

    # --- 6. Capabilities, market presence, reputation ---
    tech_level = round(team.tech_level + _capability_gain(inputs.tech_investment, team.tech_level, TECH_INVESTMENT_STEPS), 4)
    training_level = team.training_level + _capability_gain(inputs.training_investment, team.training_level, TRAINING_INVESTMENT_STEPS)
    if fires >= TRAINING_FIRING_THRESHOLD:
        training_level -= TRAINING_FIRING_PENALTY
    training_level = round(max(CAPABILITY_MIN_LEVEL, training_level), 4)

    target = _clamp(
        MARKET_PRESENCE_BASE_TARGET
        + inputs.marketing_spend * MARKET_PRESENCE_PER_MARKETING
        + inputs.growth_focus * MARKET_PRESENCE_GROWTH_RATE,
        0.0, 100.0,
    )
    market_presence = _stat(
        team.market_presence
        + (target - team.market_presence) * MARKET_PRESENCE_DRIFT
        + len(won_new) * MARKET_PRESENCE_PER_NEW_CLIENT
    )

    churn_count = len(churned) + len(lost_to_events)
    reputation = _stat(team.reputation + _reputation_change(team, inputs, won_new, won_offers, churn_count, utilization, effects))

    # --- 7. Burnout ---
    burnout = _stat(team.burnout + _burnout_change(inputs, utilization, fires, premium_pitches, effects))

    # --- 8. Bankruptcy ---
    is_bankrupt = cash < 0
    if is_bankrupt:
        _log.info("Team %s went bankrupt in quarter %d (cash %d)", team.team_id, quarter, cash)

    # --- 9. Result ---
    result = QuarterResult(
        quarter=quarter,
        revenue=revenue,
        costs=costs,
        profit=profit,
        clients_won=len(won_new),
        clients_lost=pitches_lost,
        clients_churned=churn_count,
        clients_renewed=len(renewed),
        projects_won=sum(1 for p in won_offers if opp_by_id[p.opportunity_id].offer_kind == OFFER_PROJECT),
        staff_change=staff - team.staff,
        reputation_change=round(reputation - team.reputation, 2),
        burnout_change=round(burnout - team.burnout, 2),
        utilization_rate=round(utilization, 4),
        hours_delivered=round(workload, 2),
        hours_capacity=round(capacity, 2),
    )
    metrics = AgencyMetrics(
        quarter=quarter,
        cash=cash,
        reputation=reputation,
        burnout=burnout,
        staff=staff,
        tech_level=tech_level,
        training_level=training_level,
        process_level=team.process_level,
        market_presence=market_presence,
        active_clients=len(book),
    )
    new_team = team.evolve(
        quarter=quarter + 1,
        cash=cash,
        cumulative_profit=team.cumulative_profit + profit,
        staff=staff,
        burnout=burnout,
        reputation=reputation,
        market_presence=market_presence,
        tech_level=tech_level,
        training_level=training_level,
        clients=book,
        is_bankrupt=is_bankrupt,
        bankrupt_quarter=quarter if is_bankrupt else None,
        submitted_this_quarter=False,
        current_inputs=TeamInputs(),
        quarterly_results=team.quarterly_results + [result],
        agency_metrics=team.agency_metrics + [metrics],
    )
    _log.debug(
        "Team %s quarter %d: revenue %d costs %d profit %d utilization %.2f",
        team.team_id, quarter, revenue, costs, profit, utilization,
    )
    return QuarterResolution(
        team=new_team,
        result=result,
        pitch_outcomes=tuple(outcomes),
        clients_won=tuple(c.client_name for c in new_clients),
        clients_churned=tuple(churned),
        clients_renewed=tuple(renewed),
        clients_given_notice=tuple(given_notice),
        clients_lost_to_events=tuple(lost_to_events),
    )
