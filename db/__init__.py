"""
Persistence for Agency Leadership: sqlite JSON saves and the in-memory game repository.
"""
from .schema import get_connection, get_db_path, init_db
from .operations import delete_game, list_games, load_game, save_game
from .repository import GameRepository

__all__ = [
    "get_connection",
    "get_db_path",
    "init_db",
    "delete_game",
    "list_games",
    "load_game",
    "save_game",
    "GameRepository",
]
