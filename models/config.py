"""
Game and difficulty-level configuration for Agency Leadership.
Level configs are static data; validate_* raise ConfigurationError so a bad
config stops a game at creation instead of failing mid-quarter.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Any

from .constants import CLIENT_TYPES, COMPLEXITIES, GAME_LEVELS, SERVICE_LINES
from .errors import ConfigurationError

WEIGHT_TOLERANCE = 1e-6
DEFAULT_MAX_QUARTERS = 8


@dataclass(frozen=True)
class EventConfig:
    """Event rolling switches. ``intensity`` scales every event's chance."""

    enabled: bool = True
    max_concurrent: int = 2
    intensity: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "max_concurrent": self.max_concurrent, "intensity": self.intensity}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventConfig":
        return cls(
            enabled=data.get("enabled", True),
            max_concurrent=data.get("max_concurrent", 2),
            intensity=data.get("intensity", 1.0),
        )


@dataclass(frozen=True)
class LevelConfig:
    """Difficulty level: starting resources, staffing bounds, opportunity mix, events."""

    level: int
    starting_cash: int
    starting_staff: int
    starting_reputation: float
    starting_burnout: float
    starting_market_presence: float
    min_staff: int = 5
    max_staff: int = 40
    opportunity_base_count: int = 3
    late_quarter_from: int = 4  # client mix shifts to enterprise/government from this quarter
    client_type_weights_early: Dict[str, float] = field(default_factory=lambda: {
        "startup": 0.35, "enterprise": 0.2, "nonprofit": 0.3, "government": 0.15,
    })
    client_type_weights_late: Dict[str, float] = field(default_factory=lambda: {
        "startup": 0.25, "enterprise": 0.35, "nonprofit": 0.2, "government": 0.2,
    })
    service_line_weights: Dict[str, float] = field(default_factory=lambda: {
        line: 1 / len(SERVICE_LINES) for line in SERVICE_LINES
    })
    complexity_weights: Dict[str, float] = field(default_factory=lambda: {
        "low": 0.35, "medium": 0.4, "high": 0.25,
    })
    budget_ranges: Dict[str, tuple[int, int]] = field(default_factory=lambda: {
        "startup": (20000, 60000),
        "enterprise": (80000, 200000),
        "nonprofit": (15000, 40000),
        "government": (50000, 120000),
    })
    events: EventConfig = field(default_factory=EventConfig)

    def client_type_weights(self, quarter: int) -> Dict[str, float]:
        if quarter >= self.late_quarter_from:
            return self.client_type_weights_late
        return self.client_type_weights_early


LEVEL_CONFIGS: Dict[int, LevelConfig] = {
    1: LevelConfig(  # Easy
        level=1,
        starting_cash=500000,
        starting_staff=20,
        starting_reputation=70,
        starting_burnout=10,
        starting_market_presence=40,
        opportunity_base_count=4,
        complexity_weights={"low": 0.5, "medium": 0.35, "high": 0.15},
        events=EventConfig(enabled=True, max_concurrent=1),
    ),
    2: LevelConfig(  # Normal
        level=2,
        starting_cash=400000,
        starting_staff=20,
        starting_reputation=60,
        starting_burnout=15,
        starting_market_presence=30,
        opportunity_base_count=3,
        events=EventConfig(enabled=True, max_concurrent=2),
    ),
    3: LevelConfig(  # Hard
        level=3,
        starting_cash=300000,
        starting_staff=20,
        starting_reputation=50,
        starting_burnout=20,
        starting_market_presence=25,
        opportunity_base_count=2,
        complexity_weights={"low": 0.2, "medium": 0.4, "high": 0.4},
        events=EventConfig(enabled=True, max_concurrent=3),
    ),
}


def get_level_config(level: int) -> LevelConfig:
    try:
        return LEVEL_CONFIGS[level]
    except KeyError:
        raise ConfigurationError(f"Unknown game level: {level}") from None


@dataclass
class GameConfig:
    """Settings fixed when a game is created."""

    game_id: str = ""
    game_name: str = ""
    level: int = 2
    number_of_teams: int = 4
    max_quarters: int = DEFAULT_MAX_QUARTERS
    random_seed: int = 0
    events: EventConfig | None = None  # None = the level's default
    test_mode: bool = False  # single-team game

    def event_config(self) -> EventConfig:
        return self.events if self.events is not None else get_level_config(self.level).events

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "game_name": self.game_name,
            "level": self.level,
            "number_of_teams": self.number_of_teams,
            "max_quarters": self.max_quarters,
            "random_seed": self.random_seed,
            "events": self.event_config().to_dict(),
            "test_mode": self.test_mode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        events = data.get("events")
        return cls(
            game_id=data.get("game_id", ""),
            game_name=data.get("game_name", ""),
            level=data.get("level", 2),
            number_of_teams=data.get("number_of_teams", 4),
            max_quarters=data.get("max_quarters", DEFAULT_MAX_QUARTERS),
            random_seed=data.get("random_seed", 0),
            events=EventConfig.from_dict(events) if events else None,
            test_mode=data.get("test_mode", False),
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_weights(name: str, weights: Dict[str, float], allowed: tuple[str, ...]) -> None:
    unknown = set(weights) - set(allowed)
    if unknown:
        raise ConfigurationError(f"{name} has unknown keys: {sorted(unknown)}")
    if any(w < 0 for w in weights.values()):
        raise ConfigurationError(f"{name} has negative weights")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigurationError(f"{name} must sum to 1.0, got {total}")


def validate_level_config(config: LevelConfig) -> None:
    """Raise ConfigurationError if the level config cannot drive a game."""
    if config.level not in GAME_LEVELS:
        raise ConfigurationError(f"level must be one of {GAME_LEVELS}, got {config.level}")
    if config.min_staff < 0 or config.min_staff > config.max_staff:
        raise ConfigurationError(f"staff bounds invalid: min {config.min_staff}, max {config.max_staff}")
    if not config.min_staff <= config.starting_staff <= config.max_staff:
        raise ConfigurationError(f"starting_staff {config.starting_staff} outside staff bounds")
    for key in ("starting_reputation", "starting_burnout", "starting_market_presence"):
        if not 0 <= getattr(config, key) <= 100:
            raise ConfigurationError(f"{key} must be between 0 and 100")
    if config.opportunity_base_count < 1:
        raise ConfigurationError("opportunity_base_count must be >= 1")
    _check_weights("client_type_weights_early", config.client_type_weights_early, CLIENT_TYPES)
    _check_weights("client_type_weights_late", config.client_type_weights_late, CLIENT_TYPES)
    _check_weights("service_line_weights", config.service_line_weights, SERVICE_LINES)
    _check_weights("complexity_weights", config.complexity_weights, COMPLEXITIES)
    for client_type in CLIENT_TYPES:
        bounds = config.budget_ranges.get(client_type)
        if bounds is None:
            raise ConfigurationError(f"budget_ranges missing client type {client_type!r}")
        lo, hi = bounds
        if lo <= 0 or lo > hi:
            raise ConfigurationError(f"budget range for {client_type!r} invalid: {bounds}")
    if config.events.max_concurrent < 0 or config.events.intensity < 0:
        raise ConfigurationError("event config must have non-negative max_concurrent and intensity")


def validate_game_config(config: GameConfig) -> None:
    """Raise ConfigurationError for a game that must not start."""
    validate_level_config(get_level_config(config.level))
    if config.max_quarters < 1:
        raise ConfigurationError(f"max_quarters must be >= 1, got {config.max_quarters}")
    if config.number_of_teams < 1:
        raise ConfigurationError(f"number_of_teams must be >= 1, got {config.number_of_teams}")
    if config.test_mode and config.number_of_teams != 1:
        raise ConfigurationError("test mode games have exactly one team")
    if not isinstance(config.random_seed, int):
        raise ConfigurationError(f"random_seed must be an integer, got {config.random_seed!r}")
    events = config.event_config()
    if not math.isfinite(events.intensity):
        raise ConfigurationError(f"event intensity must be finite, got {events.intensity}")
    if events.max_concurrent < 0 or events.intensity < 0:
        raise ConfigurationError("event config must have non-negative max_concurrent and intensity")
