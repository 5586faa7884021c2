"""
Client opportunity generation for Agency Leadership.

The shared pool is drawn once per quarter from the market stream, so every
team pitches against the same opportunities. Existing-client offers (one-off
projects and early renewals) are per team and come from that team's book.

Draw order per opportunity: client type, service line, complexity, budget,
hours, name, urgency. Changing it changes every seeded game.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from models.client import ActiveClient, ClientOpportunity, OFFER_PROJECT, OFFER_RENEWAL
from models.config import LevelConfig
from models.constants import (
    CLIENT_NAME_POOLS,
    CLIENT_OFFER_BASE_WIN,
    CLIENT_OFFER_WIN_PER_POINT,
    CLIENT_TYPES,
    CLIENT_WIN_MODIFIERS,
    COMPLEXITIES,
    COMPLEXITY_PROFILES,
    OPPORTUNITY_QUARTER_STEP,
    OPPORTUNITY_WIN_CEILING,
    OPPORTUNITY_WIN_FLOOR,
    PROJECT_BASE_CHANCE,
    PROJECT_BUDGET_SHARE,
    PROJECT_CHANCE_PER_POINT,
    PROJECT_HOURLY_RATE,
    PROJECT_MIN_BUDGET,
    PROJECT_MIN_HOURS,
    SATISFACTION_OFFER_THRESHOLD,
    SERVICE_LINES,
    URGENT_BUDGET_MULTIPLIER,
    URGENT_CHANCE,
    URGENT_WIN_MODIFIER,
    WIN_CHANCE_CEILING,
)
from simulation.events import opportunity_budget_multiplier
from simulation.random_seed import SeededRandom


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _round_thousands(value: float) -> int:
    return int(round(value / 1000.0)) * 1000


def _pick_unique_name(client_type: str, used: set[str], rng: SeededRandom) -> str:
    pool = CLIENT_NAME_POOLS[client_type]
    available = [name for name in pool if name not in used]
    if not available:
        return f"{rng.pick(pool)} (New)"
    return rng.pick(available)


def _generate_single(
    index: int,
    quarter: int,
    level_config: LevelConfig,
    rng: SeededRandom,
    used_names: set[str],
    budget_multiplier: float,
) -> ClientOpportunity:
    client_type = rng.weighted_choice(CLIENT_TYPES, level_config.client_type_weights(quarter))
    service_line = rng.weighted_choice(SERVICE_LINES, level_config.service_line_weights)
    complexity = rng.weighted_choice(COMPLEXITIES, level_config.complexity_weights)

    lo, hi = level_config.budget_ranges[client_type]
    budget = _round_thousands(rng.next_float(lo, hi))

    hours_min, hours_max, base_win = COMPLEXITY_PROFILES[complexity]
    hours = rng.next_int(hours_min, hours_max)
    name = _pick_unique_name(client_type, used_names, rng)

    win_chance = base_win + CLIENT_WIN_MODIFIERS[client_type]
    deadline = "normal"
    if rng.next_bool(URGENT_CHANCE):
        # Urgent work pays more but is harder to land
        deadline = "urgent"
        budget = int(round(budget * URGENT_BUDGET_MULTIPLIER))
        win_chance += URGENT_WIN_MODIFIER
    if budget_multiplier != 1.0:
        budget = int(round(budget * budget_multiplier))

    return ClientOpportunity(
        id=f"q{quarter}-{index + 1:02d}",
        client_name=name,
        client_type=client_type,
        service_line=service_line,
        budget=budget,
        complexity=complexity,
        deadline=deadline,
        hours_required=hours,
        base_win_chance=_clamp(win_chance, OPPORTUNITY_WIN_FLOOR, OPPORTUNITY_WIN_CEILING),
        quarter=quarter,
    )


def _client_offer_win_chance(satisfaction: float) -> float:
    return min(WIN_CHANCE_CEILING, round(CLIENT_OFFER_BASE_WIN + (satisfaction - SATISFACTION_OFFER_THRESHOLD) * CLIENT_OFFER_WIN_PER_POINT))


# ===================================================================
# Public API
# ===================================================================

def generate_client_offers(
    clients: Sequence[ActiveClient],
    quarter: int,
    rng: SeededRandom,
) -> list[ClientOpportunity]:
    """Project and renewal offers from a team's satisfied clients.

    A client at or above the offer threshold may offer a one-off project
    (one draw for the chance, one more for the budget when it does). An active
    client entering its final contract quarter also offers an early renewal;
    that offer needs no draw.
    """
    offers: list[ClientOpportunity] = []
    for client in clients:
        satisfaction = client.satisfaction_level
        if satisfaction < SATISFACTION_OFFER_THRESHOLD:
            continue
        win_chance = _client_offer_win_chance(satisfaction)

        project_chance = _clamp(
            PROJECT_BASE_CHANCE + (satisfaction - SATISFACTION_OFFER_THRESHOLD) * PROJECT_CHANCE_PER_POINT,
            0.0, 1.0,
        )
        if rng.next_bool(project_chance):
            share_lo, share_hi = PROJECT_BUDGET_SHARE
            budget = _round_thousands(client.budget * rng.next_float(share_lo, share_hi))
            offers.append(ClientOpportunity(
                id=f"project-{client.opportunity_id}-{quarter}",
                client_name=f"{client.client_name} (Project)",
                client_type=client.client_type,
                service_line=client.service_line,
                budget=max(PROJECT_MIN_BUDGET, budget),
                complexity="low",
                deadline="relaxed",
                hours_required=max(PROJECT_MIN_HOURS, int(round(budget / PROJECT_HOURLY_RATE))),
                base_win_chance=win_chance,
                quarter=quarter,
                offer_kind=OFFER_PROJECT,
                existing_client_id=client.opportunity_id,
                existing_client_satisfaction=satisfaction,
            ))

        if client.status == "active" and client.quarters_remaining == 1:
            offers.append(ClientOpportunity(
                id=f"renewal-{client.opportunity_id}-{quarter}",
                client_name=f"{client.client_name} (Renewal)",
                client_type=client.client_type,
                service_line=client.service_line,
                budget=client.budget,
                complexity=client.complexity,
                deadline="relaxed",
                hours_required=client.hours_per_quarter,
                base_win_chance=win_chance,
                quarter=quarter,
                offer_kind=OFFER_RENEWAL,
                existing_client_id=client.opportunity_id,
                existing_client_satisfaction=satisfaction,
            ))
    return offers


def generate_opportunities(
    quarter: int,
    level_config: LevelConfig,
    rng: SeededRandom,
    existing_clients: Sequence[ActiveClient] | None = None,
    active_event_types: Iterable[str] = (),
) -> list[ClientOpportunity]:
    """Generate the quarter's opportunity pool.

    Parameters
    ----------
    quarter : int
        Quarter the pool is for (1-based).
    level_config : LevelConfig
        Supplies the base count and the client type, service line,
        complexity and budget distributions.
    rng : SeededRandom
        Market stream. The pool size takes the first draw.
    existing_clients : list[ActiveClient], optional
        When given, that team's project and renewal offers are appended
        after the shared pool, drawn from the same stream.
    active_event_types : iterable of str
        Active events; budget-lifting events scale every budget.

    Returns
    -------
    list[ClientOpportunity]
        Opportunities with unique ids (``q<quarter>-<NN>`` for the pool).
    """
    count = level_config.opportunity_base_count + quarter // OPPORTUNITY_QUARTER_STEP + rng.next_int(0, 1)
    budget_multiplier = opportunity_budget_multiplier(active_event_types)

    pool: list[ClientOpportunity] = []
    used_names: set[str] = set()
    for i in range(count):
        opportunity = _generate_single(i, quarter, level_config, rng, used_names, budget_multiplier)
        pool.append(opportunity)
        used_names.add(opportunity.client_name)

    if existing_clients:
        pool.extend(generate_client_offers(existing_clients, quarter, rng))
    return pool
