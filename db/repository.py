"""
In-memory game repository for Agency Leadership.

One instance per process, injected into the Flask app (or used directly in
tests). Games live in memory; ``persist=True`` also writes every saved game to
the sqlite store so a restarted process can ``restore`` it.
"""
import logging
from typing import Any, Dict, List

from models.config import GameConfig
from models.errors import GameNotFoundError
from simulation.session import GameSession

from . import operations

_log = logging.getLogger("agency.repository")


class GameRepository:
    def __init__(self, persist: bool = False) -> None:
        self.persist = persist
        self._games: Dict[str, GameSession] = {}

    def create_game(self, config: GameConfig) -> GameSession:
        session = GameSession.create(config)
        self._games[session.game_id] = session
        self.save(session)
        return session

    def get_game(self, game_id: str) -> GameSession:
        try:
            return self._games[game_id]
        except KeyError:
            raise GameNotFoundError(f"No game {game_id!r}") from None

    def list_games(self) -> List[Dict[str, Any]]:
        return [
            {
                "game_id": s.game_id,
                "game_name": s.config.game_name,
                "current_quarter": s.current_quarter,
                "teams": len(s.teams),
                "is_complete": s.is_complete,
            }
            for s in self._games.values()
        ]

    def delete_game(self, game_id: str) -> None:
        self.get_game(game_id)
        del self._games[game_id]
        if self.persist:
            operations.delete_game(game_id)

    def save(self, session: GameSession) -> None:
        """Register the session; with persistence on, write it through to sqlite."""
        self._games[session.game_id] = session
        if self.persist:
            operations.save_game(session.to_dict())

    def restore(self, game_id: str) -> GameSession:
        """Load a saved game from sqlite into memory."""
        data = operations.load_game(game_id)
        if data is None:
            raise GameNotFoundError(f"No saved game {game_id!r}")
        session = GameSession.from_dict(data)
        self._games[session.game_id] = session
        _log.info("Restored game %s at quarter %d", game_id, session.current_quarter)
        return session

    def export_game(self, game_id: str) -> Dict[str, Any]:
        """JSON-serializable snapshot; maps are lists of [key, value] pairs."""
        return self.get_game(game_id).to_dict()

    def import_game(self, data: Dict[str, Any]) -> GameSession:
        session = GameSession.from_dict(data)
        self.save(session)
        return session
