"""
Tests for the Flask JSON API.
"""
import pytest

from app import create_app
from db.repository import GameRepository


@pytest.fixture
def client():
    app = create_app(GameRepository())
    app.config["TESTING"] = True
    return app.test_client()


def _create(client, **overrides):
    body = {"game_id": "g1", "game_name": "API League", "level": 2, "number_of_teams": 2,
            "max_quarters": 2, "random_seed": 5}
    body.update(overrides)
    return client.post("/api/games", json=body)


def _join(client, team_id, name):
    return client.post("/api/games/g1/teams", json={"company_name": name, "team_id": team_id})


class TestGames:
    def test_levels(self, client):
        levels = client.get("/api/levels").get_json()
        assert [lv["level"] for lv in levels] == [1, 2, 3]

    def test_create_and_get(self, client):
        resp = _create(client)
        assert resp.status_code == 201
        assert resp.get_json()["game_id"] == "g1"
        assert client.get("/api/games/g1").get_json()["current_quarter"] == 1
        assert [g["game_id"] for g in client.get("/api/games").get_json()] == ["g1"]

    def test_bad_config(self, client):
        assert _create(client, level=9).status_code == 400
        assert _create(client, max_quarters="lots").status_code == 400
        assert _create(client, events={"intensity": "lots"}).status_code == 400
        resp = client.post("/api/games", data='{"game_id": "g1", "events": {"intensity": NaN}}',
                           content_type="application/json")
        assert resp.status_code == 400
        assert client.get("/api/games/g1").status_code == 404

    def test_unknown_game(self, client):
        assert client.get("/api/games/nope").status_code == 404
        assert client.post("/api/games/nope/advance", json={}).status_code == 404

    def test_delete(self, client):
        _create(client)
        assert client.delete("/api/games/g1").status_code == 200
        assert client.get("/api/games/g1").status_code == 404


class TestPlay:
    def test_join(self, client):
        _create(client)
        resp = _join(client, "a", "Alpha")
        assert resp.status_code == 201
        assert resp.get_json()["team_number"] == 1
        assert _join(client, "a", "Again").status_code == 400
        assert _join(client, "b", "").status_code == 400

    def test_team_view(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        view = client.get("/api/games/g1/teams/a").get_json()
        assert view["team"]["company_name"] == "Alpha"
        assert view["opportunities"]
        assert view["notifications"] == []
        assert client.get("/api/games/g1/teams/zz").status_code == 404

    def test_submit_and_advance(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        _join(client, "b", "Beta")
        opp_id = client.get("/api/games/g1/teams/a").get_json()["opportunities"][0]["id"]

        bad = client.post("/api/games/g1/teams/a/inputs",
                          json={"pitches": [{"opportunity_id": opp_id, "discount_percent": 80}]})
        assert bad.status_code == 400
        assert bad.get_json()["rejections"][0]["field"] == "pitches[0].discount_percent"

        ok = client.post("/api/games/g1/teams/a/inputs",
                         json={"pitches": [{"opportunity_id": opp_id, "discount_percent": 10}]})
        assert ok.get_json() == {"ok": True, "all_submitted": False}

        assert client.post("/api/games/g1/advance", json={}).status_code == 409

        resp = client.post("/api/games/g1/advance", json={"force": True})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["game"]["current_quarter"] == 2
        assert set(body["results"]) == {"a", "b"}
        assert body["results"]["a"]["quarter"] == 1

    def test_reset_inputs(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        client.post("/api/games/g1/teams/a/inputs", json={})
        assert client.post("/api/games/g1/teams/a/inputs", json={}).status_code == 400
        client.delete("/api/games/g1/teams/a/inputs")
        assert client.post("/api/games/g1/teams/a/inputs", json={}).status_code == 200

    def test_full_game_leaderboard_and_reports(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        _join(client, "b", "Beta")
        client.post("/api/games/g1/advance", json={"force": True})
        final = client.post("/api/games/g1/advance", json={"force": True}).get_json()
        assert final["game"]["is_complete"]
        assert final["game"]["winner_id"] in ("a", "b")

        board = client.get("/api/games/g1/leaderboard").get_json()
        assert [e["rank"] for e in board] == [1, 2]
        assert board[0]["team_id"] == final["game"]["winner_id"]
        reports = client.get("/api/games/g1/reports").get_json()
        assert {r["team_id"] for r in reports} == {"a", "b"}
        assert client.post("/api/games/g1/advance", json={"force": True}).status_code == 409

    def test_export_import(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        exported = client.get("/api/games/g1/export").get_json()
        client.delete("/api/games/g1")
        resp = client.post("/api/games/import", json=exported)
        assert resp.status_code == 201
        assert client.get("/api/games/g1/teams/a").status_code == 200
        assert client.post("/api/games/import", json={}).status_code == 400

    def test_wrongly_typed_inputs_rejected(self, client):
        _create(client)
        _join(client, "a", "Alpha")
        opp_id = client.get("/api/games/g1/teams/a").get_json()["opportunities"][0]["id"]

        resp = client.post("/api/games/g1/teams/a/inputs", json={"tech_investment": "100"})
        assert resp.status_code == 400
        assert [r["field"] for r in resp.get_json()["rejections"]] == ["tech_investment"]

        resp = client.post("/api/games/g1/teams/a/inputs",
                           json={"pitches": [{"opportunity_id": opp_id, "discount_percent": "10"}],
                                 "marketing_spend": None})
        assert resp.status_code == 400
        fields = {r["field"] for r in resp.get_json()["rejections"]}
        assert fields == {"pitches[0].discount_percent", "marketing_spend"}

        resp = client.post("/api/games/g1/teams/a/inputs", data='{"wellbeing_spend": Infinity}',
                           content_type="application/json")
        assert resp.status_code == 400
        assert client.post("/api/games/g1/teams/a/inputs", json={}).status_code == 200
