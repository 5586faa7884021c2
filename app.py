"""
Agency Leadership Flask app.
JSON API over the game repository: create and join games, submit quarterly
decisions, advance quarters, read leaderboards and reports.
"""
import os
import threading

from flask import Flask, jsonify, request

from db.repository import GameRepository
from generation import get_starting_values_summary
from models import (
    ConfigurationError,
    EventConfig,
    GameConfig,
    GameNotFoundError,
    InvalidInputError,
    LEVEL_CONFIGS,
    QuarterNotReadyError,
    TeamInputs,
)


def _game_summary(game) -> dict:
    return {
        "game_id": game.game_id,
        "config": game.config.to_dict(),
        "current_quarter": game.current_quarter,
        "teams": [t.team_id for t in game.teams.values()],
        "events": [e.to_dict() for e in game.events],
        "is_complete": game.is_complete,
        "winner_id": game.winner_id,
    }


def _event_config_from_json(data: dict) -> EventConfig:
    return EventConfig(
        enabled=bool(data.get("enabled", True)),
        max_concurrent=int(data.get("max_concurrent", 2)),
        intensity=float(data.get("intensity", 1.0)),
    )


def _config_from_json(data: dict) -> GameConfig:
    try:
        events = data.get("events")
        return GameConfig(
            game_id=str(data.get("game_id", "")),
            game_name=str(data.get("game_name", "")),
            level=int(data.get("level", 2)),
            number_of_teams=int(data.get("number_of_teams", 4)),
            max_quarters=int(data.get("max_quarters", 8)),
            random_seed=int(data.get("random_seed", 0)),
            events=_event_config_from_json(events) if events else None,
            test_mode=bool(data.get("test_mode", False)),
        )
    except (TypeError, ValueError, OverflowError, AttributeError) as exc:
        raise ConfigurationError(f"malformed game config: {exc}") from None


def create_app(repository: GameRepository | None = None) -> Flask:
    """Build the app around one repository (a fresh in-memory one by default)."""
    app = Flask(__name__)
    app.secret_key = os.environ.get("AGENCY_SECRET_KEY", "dev-secret-change-in-production")
    repo = repository if repository is not None else GameRepository()
    app.config["REPOSITORY"] = repo

    # Serializes every game mutation
    game_lock = threading.Lock()

    @app.errorhandler(GameNotFoundError)
    def _not_found(exc):
        return jsonify({"error": str(exc.args[0]) if exc.args else "Not found"}), 404

    @app.errorhandler(ConfigurationError)
    def _bad_config(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(InvalidInputError)
    def _bad_input(exc):
        return jsonify({"error": str(exc), "rejections": [exc.to_dict()]}), 400

    @app.errorhandler(QuarterNotReadyError)
    def _not_ready(exc):
        return jsonify({"error": str(exc)}), 409

    @app.route("/")
    def index():
        return jsonify({"name": "Agency Leadership", "games": len(repo.list_games())})

    @app.route("/api/levels")
    def api_levels():
        return jsonify([get_starting_values_summary(cfg) for cfg in LEVEL_CONFIGS.values()])

    @app.route("/api/games", methods=["GET"])
    def api_list_games():
        return jsonify(repo.list_games())

    @app.route("/api/games", methods=["POST"])
    def api_create_game():
        data = request.get_json(silent=True) or {}
        with game_lock:
            game = repo.create_game(_config_from_json(data))
        return jsonify(_game_summary(game)), 201

    @app.route("/api/games/import", methods=["POST"])
    def api_import_game():
        data = request.get_json(silent=True)
        if not data or "config" not in data:
            return jsonify({"error": "Missing game export"}), 400
        with game_lock:
            game = repo.import_game(data)
        return jsonify(_game_summary(game)), 201

    @app.route("/api/games/<game_id>", methods=["GET"])
    def api_get_game(game_id: str):
        return jsonify(_game_summary(repo.get_game(game_id)))

    @app.route("/api/games/<game_id>", methods=["DELETE"])
    def api_delete_game(game_id: str):
        with game_lock:
            repo.delete_game(game_id)
        return jsonify({"ok": True})

    @app.route("/api/games/<game_id>/export")
    def api_export_game(game_id: str):
        return jsonify(repo.export_game(game_id))

    @app.route("/api/games/<game_id>/teams", methods=["POST"])
    def api_join_game(game_id: str):
        data = request.get_json(silent=True) or {}
        with game_lock:
            game = repo.get_game(game_id)
            team = game.join_team(data.get("company_name", ""), data.get("team_id"))
            repo.save(game)
        return jsonify(team.to_dict()), 201

    @app.route("/api/games/<game_id>/teams/<team_id>")
    def api_team(game_id: str, team_id: str):
        game = repo.get_game(game_id)
        team = game.get_team(team_id)
        return jsonify({
            "team": team.to_dict(),
            "opportunities": [o.to_dict() for o in game.team_opportunities(team_id)],
            "events": [e.to_dict() for e in game.events],
            "notifications": [n.to_dict() for n in game.notifications.get(team_id, [])],
        })

    @app.route("/api/games/<game_id>/teams/<team_id>/inputs", methods=["POST"])
    def api_submit_inputs(game_id: str, team_id: str):
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({"error": "Missing inputs"}), 400
        try:
            inputs = TeamInputs.from_dict(data)
        except (TypeError, AttributeError):
            return jsonify({"error": "Malformed inputs"}), 400
        with game_lock:
            game = repo.get_game(game_id)
            rejections = game.submit_inputs(team_id, inputs)
            if not rejections:
                repo.save(game)
        if rejections:
            return jsonify({"error": "Submission rejected", "rejections": [r.to_dict() for r in rejections]}), 400
        return jsonify({"ok": True, "all_submitted": game.all_submitted()})

    @app.route("/api/games/<game_id>/teams/<team_id>/inputs", methods=["DELETE"])
    def api_reset_inputs(game_id: str, team_id: str):
        with game_lock:
            game = repo.get_game(game_id)
            game.reset_submission(team_id)
            repo.save(game)
        return jsonify({"ok": True})

    @app.route("/api/games/<game_id>/advance", methods=["POST"])
    def api_advance(game_id: str):
        data = request.get_json(silent=True) or {}
        with game_lock:
            game = repo.get_game(game_id)
            resolutions = game.advance_quarter(force=bool(data.get("force", False)))
            repo.save(game)
        return jsonify({
            "game": _game_summary(game),
            "results": {
                team_id: r.result.to_dict() if r.result else None
                for team_id, r in resolutions.items()
            },
        })

    @app.route("/api/games/<game_id>/leaderboard")
    def api_leaderboard(game_id: str):
        return jsonify([e.to_dict() for e in repo.get_game(game_id).leaderboard()])

    @app.route("/api/games/<game_id>/reports")
    def api_reports(game_id: str):
        return jsonify([r.to_dict() for r in repo.get_game(game_id).reports()])

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True, port=5000)
