"""
Simulation core for Agency Leadership.
Seeded randomness, market events, pitch resolution and the quarter engine,
plus the read-only scoring, notification and report helpers built on them.
The game session orchestrator lives in simulation.session.
"""
from .random_seed import SeededRandom, split_seed, team_random, market_random
from .events import EVENT_DEFINITIONS, advance_events, active_event_types, validate_event_definitions
from .pitch import PitchLost, PitchOutcome, PitchWon, evaluate_pitch, evaluate_client_offer
from .engine import QuarterResolution, resolve_quarter, sanitize_inputs, validate_inputs
from .scoring import LeaderboardEntry, calculate_winner, check_bankruptcy, get_leaderboard
from .notifications import Notification, generate_notifications
from .insights import TeamReport, generate_all_team_reports, generate_team_report

__all__ = [
    "SeededRandom",
    "split_seed",
    "team_random",
    "market_random",
    "EVENT_DEFINITIONS",
    "advance_events",
    "active_event_types",
    "validate_event_definitions",
    "PitchLost",
    "PitchOutcome",
    "PitchWon",
    "evaluate_pitch",
    "evaluate_client_offer",
    "QuarterResolution",
    "resolve_quarter",
    "sanitize_inputs",
    "validate_inputs",
    "LeaderboardEntry",
    "calculate_winner",
    "check_bankruptcy",
    "get_leaderboard",
    "Notification",
    "generate_notifications",
    "TeamReport",
    "generate_all_team_reports",
    "generate_team_report",
]
