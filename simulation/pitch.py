"""
Pitch resolution for Agency Leadership.

``evaluate_pitch`` turns one pitch decision into a win or a loss:

1. Start from the opportunity's base win chance.
2. Add one modifier per rule (reputation tier, market presence, discount,
   capability fit, quality, burnout, growth focus, active events). Every
   modifier applied is recorded, with its magnitude, in ``factors``.
3. Clamp to [WIN_CHANCE_FLOOR, WIN_CHANCE_CEILING]; the ceiling keeps an
   irreducible chance of losing however deep the discount.
4. Draw exactly one roll in [0, 100); the pitch is won when roll < chance.

Pitches for existing clients (projects and renewals) use the relationship
instead: base chance from satisfaction, a smaller discount effect and a
quality nudge, never below CLIENT_OFFER_WIN_FLOOR.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Union

from models.client import ClientOpportunity
from models.constants import (
    BURNOUT_PITCH_RATE,
    BURNOUT_PITCH_THRESHOLD,
    CAPABILITY_WIN_RATE,
    CLIENT_OFFER_DISCOUNT_RATE,
    CLIENT_OFFER_QUALITY_MODIFIERS,
    CLIENT_OFFER_WIN_FLOOR,
    DISCOUNT_WIN_CURVE,
    DISCOUNT_WIN_RATE,
    GROWTH_FOCUS_STRETCH,
    GROWTH_FOCUS_WIN_RATE,
    MARKET_PRESENCE_WIN_RATE,
    QUALITY_WIN_MODIFIERS,
    REPUTATION_HIGH_TIER,
    REPUTATION_LOW_TIER,
    REPUTATION_WIN_RATE,
    TECH_SERVICE_LINES,
    TRAINING_SERVICE_LINES,
    WIN_CHANCE_CEILING,
    WIN_CHANCE_FLOOR,
)
from models.inputs import DEFAULT_GROWTH_FOCUS

from .events import get_event_definition
from .random_seed import SeededRandom

_log = logging.getLogger("agency.pitch")


@dataclass(frozen=True)
class _PitchOutcome:
    opportunity_id: str
    win_chance: float
    roll: float
    factors: tuple[str, ...]
    modifiers: tuple[tuple[str, float], ...]  # (rule, percentage points) in applied order

    won: ClassVar[bool]

    def to_dict(self) -> dict[str, Any]:
        return {
            "opportunity_id": self.opportunity_id,
            "won": self.won,
            "win_chance": self.win_chance,
            "roll": self.roll,
            "factors": list(self.factors),
        }


@dataclass(frozen=True)
class PitchWon(_PitchOutcome):
    won: ClassVar[bool] = True


@dataclass(frozen=True)
class PitchLost(_PitchOutcome):
    won: ClassVar[bool] = False


PitchOutcome = Union[PitchWon, PitchLost]


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def discount_bonus(discount_percent: float) -> float:
    """Diminishing win bonus for a discount: +20 points at the 50% cap."""
    return DISCOUNT_WIN_RATE * discount_percent - DISCOUNT_WIN_CURVE * discount_percent ** 2


def _reputation_modifier(reputation: float) -> float:
    if reputation > REPUTATION_HIGH_TIER:
        return (reputation - REPUTATION_HIGH_TIER) * REPUTATION_WIN_RATE
    if reputation < REPUTATION_LOW_TIER:
        return (reputation - REPUTATION_LOW_TIER) * REPUTATION_WIN_RATE
    return 0.0


def _event_modifiers(
    opportunity: ClientOpportunity,
    reputation: float,
    active_event_types: Iterable[str],
) -> list[tuple[str, float]]:
    out = []
    for event_type in active_event_types:
        definition = get_event_definition(event_type)
        if definition is None:
            continue
        effects = definition.effects
        if effects.win_modifier == 0:
            continue
        if effects.win_service_lines and opportunity.service_line not in effects.win_service_lines:
            continue
        if effects.win_min_reputation is not None and reputation < effects.win_min_reputation:
            continue
        out.append((definition.name, effects.win_modifier))
    return out


def _finish(
    opportunity: ClientOpportunity,
    base: float,
    modifiers: list[tuple[str, float]],
    lo: float,
    hi: float,
    rng: SeededRandom,
) -> PitchOutcome:
    raw = base + sum(value for _, value in modifiers)
    win_chance = round(_clamp(raw, lo, hi), 2)
    factors = [f"Base win chance: {base:.0f}%"]
    factors.extend(f"{label}: {value:+.1f}%" for label, value in modifiers)
    if raw != win_chance:
        factors.append(f"Clamped to {win_chance:.0f}%")

    roll = rng.next() * 100
    cls = PitchWon if roll < win_chance else PitchLost
    _log.debug("Pitch %s: chance %.2f roll %.2f -> %s", opportunity.id, win_chance, roll, "won" if cls.won else "lost")
    return cls(
        opportunity_id=opportunity.id,
        win_chance=win_chance,
        roll=roll,
        factors=tuple(factors),
        modifiers=tuple(modifiers),
    )


# ===================================================================
# Public API
# ===================================================================

def evaluate_client_offer(
    opportunity: ClientOpportunity,
    discount_percent: float,
    quality_level: str,
    rng: SeededRandom,
) -> PitchOutcome:
    """Resolve a project or renewal pitch to an existing client."""
    modifiers: list[tuple[str, float]] = []
    if discount_percent > 0:
        modifiers.append((f"Discount ({discount_percent:g}%)", discount_percent * CLIENT_OFFER_DISCOUNT_RATE))
    quality = CLIENT_OFFER_QUALITY_MODIFIERS.get(quality_level, 0.0)
    if quality:
        modifiers.append((f"Quality ({quality_level})", quality))
    return _finish(opportunity, opportunity.base_win_chance, modifiers, CLIENT_OFFER_WIN_FLOOR, WIN_CHANCE_CEILING, rng)


def evaluate_pitch(
    opportunity: ClientOpportunity,
    discount_percent: float,
    team_reputation: float,
    team_market_presence: float,
    tech_level: float,
    training_level: float,
    quality_level: str,
    active_event_types: Iterable[str],
    rng: SeededRandom,
    burnout: float = 0.0,
    growth_focus: float = DEFAULT_GROWTH_FOCUS,
) -> PitchOutcome:
    """Evaluate a single pitch.

    Parameters
    ----------
    opportunity : ClientOpportunity
        What is being pitched for. Existing-client offers are routed to
        ``evaluate_client_offer``.
    discount_percent : float
        0-50; deeper discounts help with diminishing returns.
    team_reputation, team_market_presence : float
        0-100 team stats at the start of the quarter.
    tech_level, training_level : float
        Capability levels; each helps on the service lines it supports.
    quality_level : str
        ``budget`` | ``standard`` | ``premium``.
    active_event_types : iterable of str
        Types of the events active this quarter.
    rng : SeededRandom
        One draw is consumed for the roll.
    burnout, growth_focus : float
        Optional team pressure modifiers.

    Returns
    -------
    PitchWon | PitchLost
        ``win_chance`` and ``roll`` are percentages; ``factors`` explains
        each modifier applied.
    """
    if opportunity.is_existing_client_offer:
        return evaluate_client_offer(opportunity, discount_percent, quality_level, rng)

    modifiers: list[tuple[str, float]] = []

    reputation = _reputation_modifier(team_reputation)
    if reputation:
        modifiers.append((f"Reputation ({team_reputation:.0f})", reputation))

    presence = team_market_presence * MARKET_PRESENCE_WIN_RATE
    if presence:
        modifiers.append((f"Market presence ({team_market_presence:.0f}%)", presence))

    if discount_percent > 0:
        modifiers.append((f"Discount ({discount_percent:g}%)", discount_bonus(discount_percent)))

    if opportunity.service_line in TECH_SERVICE_LINES and tech_level > 1:
        modifiers.append((f"Tech level ({tech_level:.2f})", (tech_level - 1) * CAPABILITY_WIN_RATE))
    if opportunity.service_line in TRAINING_SERVICE_LINES and training_level > 1:
        modifiers.append((f"Training level ({training_level:.2f})", (training_level - 1) * CAPABILITY_WIN_RATE))

    quality = QUALITY_WIN_MODIFIERS.get(quality_level, {}).get(opportunity.complexity, 0.0)
    if quality:
        modifiers.append((f"Quality ({quality_level}, {opportunity.complexity} complexity)", quality))

    if burnout > BURNOUT_PITCH_THRESHOLD:
        modifiers.append((f"Burnout ({burnout:.0f})", -(burnout - BURNOUT_PITCH_THRESHOLD) * BURNOUT_PITCH_RATE))

    if growth_focus > GROWTH_FOCUS_STRETCH:
        modifiers.append((f"Growth focus ({growth_focus:.0f})", -(growth_focus - GROWTH_FOCUS_STRETCH) * GROWTH_FOCUS_WIN_RATE))

    modifiers.extend(_event_modifiers(opportunity, team_reputation, active_event_types))

    return _finish(opportunity, opportunity.base_win_chance, modifiers, WIN_CHANCE_FLOOR, WIN_CHANCE_CEILING, rng)
