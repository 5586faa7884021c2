"""
Game session orchestration for Agency Leadership.

A GameSession owns one game: its config, the teams in join order, the current
quarter's shared opportunity pool and active events, and each team's
existing-client offers. It decides *when* the engine runs; the engine decides
*what* happens.

Quarter flow:
  1. Market roll: events, then the shared pool, from ``market_random``.
  2. Per-team offers from each team's own ``offers:`` sub-seed.
  3. Teams submit (validated; a rejected submission can be fixed and re-sent).
  4. Advance once every active team submitted, or force-advance with defaults.
  5. Teams resolve in join order, each on its own ``team_random`` stream.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any, Dict, List

from generation.initial_state import create_initial_team_state
from generation.opportunities import generate_client_offers, generate_opportunities
from models.client import ClientOpportunity
from models.config import GameConfig, get_level_config, validate_game_config
from models.errors import GameNotFoundError, InvalidInputError, QuarterNotReadyError
from models.event import GameEvent
from models.inputs import TeamInputs, get_default_inputs
from models.team import TeamState

from .engine import QuarterResolution, resolve_quarter, validate_inputs
from .events import active_event_types, advance_events, validate_event_definitions
from .insights import TeamReport, generate_all_team_reports
from .notifications import Notification, generate_notifications
from .random_seed import SeededRandom, market_random, split_seed, team_random
from .scoring import LeaderboardEntry, calculate_winner, get_leaderboard

_log = logging.getLogger("agency.session")


class GameSession:
    """One game from creation to winner."""

    def __init__(self, config: GameConfig) -> None:
        self.config = config
        self.level_config = get_level_config(config.level)
        self.current_quarter = 1
        self.teams: Dict[str, TeamState] = {}
        self.opportunities: List[ClientOpportunity] = []
        self.client_offers: Dict[str, List[ClientOpportunity]] = {}
        self.events: List[GameEvent] = []
        self.notifications: Dict[str, List[Notification]] = {}
        self.last_resolutions: Dict[str, QuarterResolution] = {}
        self.is_complete = False
        self.winner_id: str | None = None

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, config: GameConfig) -> "GameSession":
        """Validate the config and roll the first quarter's market.
        Raises ConfigurationError for a game that must not start."""
        validate_game_config(config)
        validate_event_definitions(config.level)
        if not config.game_id:
            config = replace(config, game_id=uuid.uuid4().hex[:8])
        session = cls(config)
        session._roll_market()
        _log.info("Created game %s (level %d, %d quarters)", config.game_id, config.level, config.max_quarters)
        return session

    @property
    def game_id(self) -> str:
        return self.config.game_id

    def _roll_market(self) -> None:
        rng = market_random(self.config.random_seed, self.current_quarter)
        self.events = advance_events(
            self.current_quarter, self.config.event_config(), self.events, rng, level=self.config.level,
        )
        self.opportunities = generate_opportunities(
            self.current_quarter, self.level_config, rng, active_event_types=active_event_types(self.events),
        )
        self.client_offers = {team_id: self._offers_for(team) for team_id, team in self.teams.items()}

    def _offers_for(self, team: TeamState) -> List[ClientOpportunity]:
        if team.is_bankrupt:
            return []
        rng = SeededRandom(split_seed(self.config.random_seed, f"offers:q{self.current_quarter}:{team.team_id}"))
        return generate_client_offers(team.clients, self.current_quarter, rng)

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def join_team(self, company_name: str, team_id: str | None = None) -> TeamState:
        """Add a team with the standard starting state. Only before the first advance."""
        if self.is_complete or self.current_quarter != 1:
            raise InvalidInputError("team", "teams can only join before the first quarter resolves")
        if len(self.teams) >= self.config.number_of_teams:
            raise InvalidInputError("team", f"game is full ({self.config.number_of_teams} teams)")
        company_name = (company_name or "").strip()
        if not company_name:
            raise InvalidInputError("company_name", "must not be empty")
        team_id = team_id or uuid.uuid4().hex[:8]
        if team_id in self.teams:
            raise InvalidInputError("team_id", f"team {team_id!r} already joined")

        team = create_initial_team_state(
            team_id, company_name, len(self.teams) + 1, self.level_config, self.config.max_quarters,
        )
        self.teams[team_id] = team
        self.client_offers[team_id] = self._offers_for(team)
        _log.info("Team %s (%s) joined game %s", team_id, company_name, self.game_id)
        return team

    def get_team(self, team_id: str) -> TeamState:
        try:
            return self.teams[team_id]
        except KeyError:
            raise GameNotFoundError(f"No team {team_id!r} in game {self.game_id}") from None

    def team_opportunities(self, team_id: str) -> List[ClientOpportunity]:
        """Shared pool plus this team's own project and renewal offers."""
        self.get_team(team_id)
        return self.opportunities + self.client_offers.get(team_id, [])

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    def submit_inputs(self, team_id: str, inputs: TeamInputs) -> List[InvalidInputError]:
        """Record a team's decisions for the quarter.

        Returns the rejected fields; when any are returned nothing is recorded
        and the team may fix them and submit again.
        """
        team = self.get_team(team_id)
        if self.is_complete:
            return [InvalidInputError("inputs", "game is over")]
        if team.is_bankrupt:
            return [InvalidInputError("inputs", "team is bankrupt")]
        if team.submitted_this_quarter:
            return [InvalidInputError("inputs", "already submitted this quarter")]
        errors = validate_inputs(inputs, self.team_opportunities(team_id), team.staff, self.level_config)
        if errors:
            _log.warning("Rejected submission from %s: %s", team_id, "; ".join(str(e) for e in errors))
            return errors
        self.teams[team_id] = team.evolve(current_inputs=inputs, submitted_this_quarter=True)
        return []

    def reset_submission(self, team_id: str) -> None:
        team = self.get_team(team_id)
        self.teams[team_id] = team.evolve(current_inputs=get_default_inputs(), submitted_this_quarter=False)

    def active_teams(self) -> List[TeamState]:
        return [t for t in self.teams.values() if not t.is_bankrupt]

    def all_submitted(self) -> bool:
        active = self.active_teams()
        return bool(active) and all(t.submitted_this_quarter for t in active)

    # ------------------------------------------------------------------
    # Advancing
    # ------------------------------------------------------------------

    def advance_quarter(self, force: bool = False) -> Dict[str, QuarterResolution]:
        """Resolve the current quarter for every team, in join order.

        Without ``force`` every active team must have submitted. With it,
        teams that have not submitted play ``get_default_inputs()``.
        """
        if self.is_complete:
            raise QuarterNotReadyError(f"game {self.game_id} is already complete")
        if not self.teams:
            raise QuarterNotReadyError("no teams have joined")
        if not force and not self.all_submitted():
            waiting = [t.team_id for t in self.active_teams() if not t.submitted_this_quarter]
            raise QuarterNotReadyError(f"waiting for submissions from {waiting}")

        quarter = self.current_quarter
        snapshot = list(self.teams.values())
        resolutions: Dict[str, QuarterResolution] = {}
        for team in snapshot:
            if team.is_bankrupt:
                resolutions[team.team_id] = QuarterResolution(team=team, result=None)
                continue
            inputs = team.current_inputs if team.submitted_this_quarter else get_default_inputs()
            resolution = resolve_quarter(
                team,
                inputs,
                snapshot,
                self.team_opportunities(team.team_id),
                self.events,
                self.level_config,
                team_random(self.config.random_seed, quarter, team.team_id),
            )
            resolutions[team.team_id] = resolution

        for team_id, resolution in resolutions.items():
            self.teams[team_id] = resolution.team
            if resolution.result is not None:
                self.notifications[team_id] = generate_notifications(resolution.team, self.events)
        self.last_resolutions = resolutions
        _log.info("Game %s resolved quarter %d", self.game_id, quarter)

        if quarter >= self.config.max_quarters or not self.active_teams():
            self.end_game()
        else:
            self.current_quarter = quarter + 1
            self._roll_market()
        return resolutions

    def force_advance(self) -> Dict[str, QuarterResolution]:
        return self.advance_quarter(force=True)

    def end_game(self) -> str:
        self.is_complete = True
        self.winner_id = calculate_winner(list(self.teams.values()))
        _log.info("Game %s complete; winner %s", self.game_id, self.winner_id)
        return self.winner_id

    # ------------------------------------------------------------------
    # Read models
    # ------------------------------------------------------------------

    def leaderboard(self) -> List[LeaderboardEntry]:
        return get_leaderboard(list(self.teams.values()))

    def reports(self) -> List[TeamReport]:
        return generate_all_team_reports(list(self.teams.values()))

    # ------------------------------------------------------------------
    # Serialization (maps as [key, value] pairs)
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "current_quarter": self.current_quarter,
            "teams": [[team_id, team.to_dict()] for team_id, team in self.teams.items()],
            "opportunities": [o.to_dict() for o in self.opportunities],
            "client_offers": [[team_id, [o.to_dict() for o in offers]] for team_id, offers in self.client_offers.items()],
            "events": [e.to_dict() for e in self.events],
            "notifications": [[team_id, [n.to_dict() for n in notes]] for team_id, notes in self.notifications.items()],
            "is_complete": self.is_complete,
            "winner_id": self.winner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSession":
        session = cls(GameConfig.from_dict(data["config"]))
        session.current_quarter = data.get("current_quarter", 1)
        session.teams = {team_id: TeamState.from_dict(t) for team_id, t in data.get("teams", [])}
        session.opportunities = [ClientOpportunity.from_dict(o) for o in data.get("opportunities", [])]
        session.client_offers = {
            team_id: [ClientOpportunity.from_dict(o) for o in offers]
            for team_id, offers in data.get("client_offers", [])
        }
        session.events = [GameEvent.from_dict(e) for e in data.get("events", [])]
        session.notifications = {
            team_id: [Notification(**n) for n in notes] for team_id, notes in data.get("notifications", [])
        }
        session.is_complete = data.get("is_complete", False)
        session.winner_id = data.get("winner_id")
        return session
