"""
Market event engine for Agency Leadership.

Events are market-wide: every team in a game plays the same quarter under the
same active events. Definitions are a declarative table; each row names its
chance, duration, per-level multiplier and the effects it has while active.
``advance_events`` is the only place events start or expire, and it walks the
table in order so a seeded replay activates the same events.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from models.config import EventConfig
from models.constants import GAME_LEVELS
from models.errors import ConfigurationError
from models.event import GameEvent

from .random_seed import SeededRandom

_log = logging.getLogger("agency.events")

# Client-loss selectors
LOSE_LOWEST_VALUE = "lowest_value"
LOSE_MOST_RECENT = "most_recent"


@dataclass(frozen=True)
class EventEffects:
    """What an active event does to each team's quarter. Neutral by default."""

    win_modifier: float = 0.0
    win_service_lines: tuple[str, ...] = ()  # empty = every service line
    win_min_reputation: float | None = None
    staff_cost_multiplier: float = 1.0
    capacity_multiplier: float = 1.0
    capacity_min_tech: float = 0.0
    burnout_change: float = 0.0
    reputation_change: float = 0.0
    reputation_min_reputation: float | None = None
    satisfaction_change: float = 0.0
    staff_loss: int = 0
    client_loss: str | None = None
    opportunity_budget_multiplier: float = 1.0


@dataclass(frozen=True)
class EventDefinition:
    type: str
    name: str
    description: str
    duration: int
    base_chance: float
    level_multipliers: dict[int, float] = field(default_factory=dict)
    effects: EventEffects = field(default_factory=EventEffects)


# ===================================================================
# Event table (rolled in this order)
# ===================================================================

EVENT_DEFINITIONS: tuple[EventDefinition, ...] = (
    EventDefinition(
        type="talentPoaching",
        name="Talent Poaching",
        description="A competitor is aggressively recruiting talent. Staff costs increase by 15% this quarter.",
        duration=1,
        base_chance=0.15,
        level_multipliers={1: 0.8, 2: 1.0, 3: 1.2},
        effects=EventEffects(staff_cost_multiplier=1.15),
    ),
    EventDefinition(
        type="viralTrend",
        name="Viral Trend",
        description="A viral trend creates sudden demand for social media campaigns. +15% win chance for social projects.",
        duration=1,
        base_chance=0.12,
        level_multipliers={1: 1.0, 2: 1.0, 3: 1.0},
        effects=EventEffects(win_modifier=15.0, win_service_lines=("social",)),
    ),
    EventDefinition(
        type="budgetCuts",
        name="Budget Cuts",
        description="Economic uncertainty causes clients to tighten budgets. -8% win chance on all pitches.",
        duration=1,
        base_chance=0.10,
        level_multipliers={1: 0.7, 2: 1.0, 3: 1.3},
        effects=EventEffects(win_modifier=-8.0),
    ),
    EventDefinition(
        type="aiTools",
        name="AI Tools Launch",
        description="New AI tools boost productivity. Agencies with high tech investment gain efficiency.",
        duration=2,
        base_chance=0.08,
        level_multipliers={1: 1.0, 2: 1.0, 3: 1.0},
        effects=EventEffects(capacity_multiplier=1.1, capacity_min_tech=2.0),
    ),
    EventDefinition(
        type="industryAward",
        name="Industry Award",
        description="Award season! Agencies with reputation of 70 or more gain +10% win chance and +10 reputation.",
        duration=1,
        base_chance=0.10,
        level_multipliers={1: 1.2, 2: 1.0, 3: 0.8},
        effects=EventEffects(
            win_modifier=10.0, win_min_reputation=70,
            reputation_change=10.0, reputation_min_reputation=70,
        ),
    ),
    EventDefinition(
        type="keyDeparture",
        name="Key Staff Departure",
        description="A senior team member leaves. +10 burnout and -5 reputation.",
        duration=1,
        base_chance=0.12,
        level_multipliers={1: 0.6, 2: 1.0, 3: 1.4},
        effects=EventEffects(burnout_change=10.0, reputation_change=-5.0),
    ),
    EventDefinition(
        type="referralSurge",
        name="Referral Surge",
        description="Happy clients are referring business. +10% win chance on all pitches this quarter.",
        duration=1,
        base_chance=0.10,
        level_multipliers={1: 1.2, 2: 1.0, 3: 0.8},
        effects=EventEffects(win_modifier=10.0),
    ),
    EventDefinition(
        type="economyTanks",
        name="Economy Tanks",
        description="Economic downturn hits the market. -12% win chance, client satisfaction drops.",
        duration=2,
        base_chance=0.08,
        level_multipliers={1: 0.5, 2: 1.0, 3: 1.5},
        effects=EventEffects(win_modifier=-12.0, satisfaction_change=-10.0),
    ),
    EventDefinition(
        type="aiBoom",
        name="AI Boom",
        description="AI delivers big productivity benefits. Clients have more budget for marketing: 20% uplift in opportunity budgets.",
        duration=2,
        base_chance=0.10,
        level_multipliers={1: 1.2, 2: 1.0, 3: 0.8},
        effects=EventEffects(win_modifier=8.0, satisfaction_change=5.0, opportunity_budget_multiplier=1.2),
    ),
    EventDefinition(
        type="teamExodus",
        name="Team Exodus",
        description="Four team members leave to start their own agency, taking a client with them! -4 staff, lose lowest-value client, +20 burnout.",
        duration=1,
        base_chance=0.06,
        level_multipliers={1: 0.3, 2: 1.0, 3: 1.5},
        effects=EventEffects(
            staff_loss=4, client_loss=LOSE_LOWEST_VALUE,
            burnout_change=20.0, reputation_change=-10.0,
        ),
    ),
    EventDefinition(
        type="clientGhosts",
        name="Client Ghosts",
        description="A new client you thought you had won has ghosted you: contracts were never signed. Lose the most recent new client.",
        duration=1,
        base_chance=0.08,
        level_multipliers={1: 0.5, 2: 1.0, 3: 1.3},
        effects=EventEffects(client_loss=LOSE_MOST_RECENT),
    ),
    EventDefinition(
        type="prAwards",
        name="PR Industry Awards",
        description="Industry recognition for agencies with a strong reputation: +15% win chance and +12 reputation.",
        duration=1,
        base_chance=0.10,
        level_multipliers={1: 1.3, 2: 1.0, 3: 0.7},
        effects=EventEffects(
            win_modifier=15.0, win_min_reputation=70,
            reputation_change=12.0, reputation_min_reputation=70,
        ),
    ),
)

_BY_TYPE: dict[str, EventDefinition] = {d.type: d for d in EVENT_DEFINITIONS}


def get_event_definition(event_type: str) -> EventDefinition | None:
    return _BY_TYPE.get(event_type)


def get_event_name(event_type: str) -> str:
    definition = _BY_TYPE.get(event_type)
    return definition.name if definition else event_type


def validate_event_definitions(level: int) -> None:
    """Raise ConfigurationError if any event row cannot be rolled at ``level``."""
    if level not in GAME_LEVELS:
        raise ConfigurationError(f"Unknown game level: {level}")
    for definition in EVENT_DEFINITIONS:
        if level not in definition.level_multipliers:
            raise ConfigurationError(f"event {definition.type!r} has no multiplier for level {level}")
        if definition.duration < 1:
            raise ConfigurationError(f"event {definition.type!r} must last at least one quarter")
        if not 0 <= definition.base_chance <= 1:
            raise ConfigurationError(f"event {definition.type!r} base chance outside [0, 1]")


# ===================================================================
# Queries over active events
# ===================================================================

def active_event_types(events: Iterable[GameEvent]) -> list[str]:
    return [e.type for e in events if e.active]


def event_effects(events: Iterable[GameEvent]) -> list[tuple[EventDefinition, EventEffects]]:
    """(definition, effects) for every active event with a known definition, in event order."""
    out = []
    for event in events:
        if not event.active:
            continue
        definition = _BY_TYPE.get(event.type)
        if definition is not None:
            out.append((definition, definition.effects))
    return out


def opportunity_budget_multiplier(event_types: Iterable[str]) -> float:
    multiplier = 1.0
    for event_type in event_types:
        definition = _BY_TYPE.get(event_type)
        if definition is not None:
            multiplier *= definition.effects.opportunity_budget_multiplier
    return multiplier


# ===================================================================
# Public API
# ===================================================================

def advance_events(
    quarter: int,
    event_config: EventConfig,
    current_events: list[GameEvent],
    rng: SeededRandom,
    level: int = 2,
) -> list[GameEvent]:
    """Expire elapsed events, then roll new ones for ``quarter``.

    Parameters
    ----------
    quarter : int
        The quarter about to be played.
    event_config : EventConfig
        ``enabled`` switch, ``max_concurrent`` cap and ``intensity`` scale.
    current_events : list[GameEvent]
        Events active during the previous quarter. Not modified.
    rng : SeededRandom
        Market stream; one draw per definition not already active.
    level : int
        Difficulty level selecting each row's multiplier.

    Returns
    -------
    list[GameEvent]
        Events active for ``quarter``, carried-over events first.
    """
    if not event_config.enabled:
        return []

    carried: list[GameEvent] = []
    for event in current_events:
        if not event.active:
            continue
        remaining = event.duration - 1
        if remaining <= 0:
            _log.debug("Event %s expired before quarter %d", event.type, quarter)
            continue
        carried.append(GameEvent(
            type=event.type,
            quarter=event.quarter,
            duration=remaining,
            active=True,
            description=event.description,
        ))

    active_types = {e.type for e in carried}
    result = list(carried)
    for definition in EVENT_DEFINITIONS:
        if definition.type in active_types:
            continue
        multiplier = definition.level_multipliers.get(level, 1.0)
        chance = min(1.0, definition.base_chance * multiplier * event_config.intensity)
        # Every eligible row consumes its draw, even once the cap is reached
        if rng.next_bool(chance) and len(result) < event_config.max_concurrent:
            result.append(GameEvent(
                type=definition.type,
                quarter=quarter,
                duration=definition.duration,
                active=True,
                description=definition.description,
            ))
            active_types.add(definition.type)
            _log.info("Event %s started in quarter %d", definition.type, quarter)
    return result
