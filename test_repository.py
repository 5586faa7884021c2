"""
Tests for the sqlite save store and the game repository.
The DB is redirected to a temporary directory for every test.
"""
import pytest

import db.schema
from db import operations
from db.repository import GameRepository
from models import GameConfig, GameNotFoundError, TeamInputs


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    monkeypatch.setattr(db.schema, "DB_DIR", str(tmp_path))
    return tmp_path


def _config(game_id="g1", **overrides) -> GameConfig:
    fields = dict(game_id=game_id, game_name="Saved League", level=1, number_of_teams=2, max_quarters=3, random_seed=9)
    fields.update(overrides)
    return GameConfig(**fields)


class TestOperations:
    def test_db_file_under_patched_dir(self, temp_db):
        assert db.schema.get_db_path() == temp_db / db.schema.DB_FILENAME

    def test_save_load_round_trip(self):
        data = {"config": {"game_id": "x1", "game_name": "X"}, "current_quarter": 3, "is_complete": False}
        assert operations.save_game(data) == "x1"
        assert operations.load_game("x1") == data

    def test_load_missing(self):
        assert operations.load_game("missing") is None

    def test_upsert_replaces(self):
        operations.save_game({"config": {"game_id": "x1", "game_name": "X"}, "current_quarter": 1})
        operations.save_game({"config": {"game_id": "x1", "game_name": "X"}, "current_quarter": 5, "is_complete": True})
        games = operations.list_games()
        assert len(games) == 1
        assert games[0]["current_quarter"] == 5
        assert games[0]["is_complete"] is True

    def test_delete(self):
        operations.save_game({"config": {"game_id": "x1"}})
        assert operations.delete_game("x1")
        assert not operations.delete_game("x1")
        assert operations.list_games() == []


class TestRepository:
    def test_memory_only_by_default(self):
        repo = GameRepository()
        repo.create_game(_config())
        assert operations.load_game("g1") is None
        assert [g["game_id"] for g in repo.list_games()] == ["g1"]

    def test_unknown_game(self):
        with pytest.raises(GameNotFoundError):
            GameRepository().get_game("nope")

    def test_persisted_game_restores(self):
        repo = GameRepository(persist=True)
        game = repo.create_game(_config())
        game.join_team("Alpha", "a")
        game.join_team("Beta", "b")
        game.submit_inputs("a", TeamInputs(marketing_spend=5000))
        game.force_advance()
        repo.save(game)

        fresh = GameRepository(persist=True)
        restored = fresh.restore("g1")
        assert restored.current_quarter == 2
        assert [t.to_dict() for t in restored.teams.values()] == [t.to_dict() for t in game.teams.values()]
        assert fresh.get_game("g1") is restored

    def test_restore_missing(self):
        with pytest.raises(GameNotFoundError):
            GameRepository(persist=True).restore("nope")

    def test_delete_removes_save(self):
        repo = GameRepository(persist=True)
        repo.create_game(_config())
        repo.delete_game("g1")
        assert operations.load_game("g1") is None
        with pytest.raises(GameNotFoundError):
            repo.get_game("g1")

    def test_export_import(self):
        source = GameRepository()
        game = source.create_game(_config())
        game.join_team("Alpha", "a")
        game.force_advance()
        exported = source.export_game("g1")

        target = GameRepository()
        imported = target.import_game(exported)
        assert imported.game_id == "g1"
        assert imported.to_dict() == exported
