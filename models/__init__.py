"""
Data models for Agency Leadership.
Plain dataclasses with to_dict / from_dict so game state round-trips through JSON.
"""
from .client import ActiveClient, ClientOpportunity, OFFER_NEW, OFFER_PROJECT, OFFER_RENEWAL
from .config import (
    EventConfig,
    GameConfig,
    LevelConfig,
    LEVEL_CONFIGS,
    get_level_config,
    validate_game_config,
    validate_level_config,
)
from .errors import ConfigurationError, GameNotFoundError, InvalidInputError, QuarterNotReadyError
from .event import GameEvent
from .inputs import PitchDecision, TeamInputs, get_default_inputs
from .quarter_result import AgencyMetrics, QuarterResult
from .team import TeamState

__all__ = [
    "ActiveClient",
    "AgencyMetrics",
    "ClientOpportunity",
    "ConfigurationError",
    "EventConfig",
    "GameConfig",
    "GameEvent",
    "GameNotFoundError",
    "InvalidInputError",
    "LEVEL_CONFIGS",
    "LevelConfig",
    "OFFER_NEW",
    "OFFER_PROJECT",
    "OFFER_RENEWAL",
    "PitchDecision",
    "QuarterNotReadyError",
    "QuarterResult",
    "TeamInputs",
    "TeamState",
    "get_default_inputs",
    "get_level_config",
    "validate_game_config",
    "validate_level_config",
]
