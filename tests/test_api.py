import pytest
from fastapi.testclient import TestClient

from conftest import build_player, player_payload
from couchlytics.api.main import create_app
from couchlytics.api.routes.trades import get_couchlytics_client
from couchlytics.datamodels import TradeAssessment, TradeToolResult
from couchlytics.external import CouchlyticsAPIError, CouchlyticsAuthError


class FakeBackend:
    def __init__(self, players=None, verdict="Fair", error=None, reachable=True):
        self.players = players or []
        self.verdict = verdict
        self.error = error
        self.reachable = reachable
        self.submissions = []

    async def get_league_players(self, league_id):
        if self.error:
            raise self.error
        return list(self.players)

    async def submit_trade(self, league_id, submission):
        self.submissions.append(submission)
        return TradeToolResult(
            trade_assessment=TradeAssessment(
                verdict=self.verdict, team_gives=0, team_receives=0, net_gain=0
            )
        )

    async def ping(self):
        return self.reachable


@pytest.fixture
def backend(league_players):
    return FakeBackend(players=league_players)


@pytest.fixture
def client(backend):
    app = create_app({"debug": True})
    app.dependency_overrides[get_couchlytics_client] = lambda: backend
    return TestClient(app)


class TestEvaluate:

    def test_evaluate_trade(self, client):
        response = client.post("/api/v1/trades/evaluate", json={
            "givePlayers": [player_payload(id=1, position="QB", ovr=80, age=22, devTrait="Normal")],
            "receivePlayers": [player_payload(id=2, position="P", ovr=80, age=30, devTrait="Superstar")],
        })

        assert response.status_code == 200
        assert response.json() == {
            "giveValue": 96,
            "receiveValue": 35,
            "netValue": -61,
            "verdict": "You Win",
        }

    def test_evaluate_empty_trade(self, client):
        response = client.post("/api/v1/trades/evaluate", json={})
        assert response.status_code == 200
        assert response.json()["verdict"] == "Fair"

    def test_player_value_breakdown(self, client):
        response = client.post("/api/v1/players/value", json=player_payload(
            id=5, position="P", ovr=80, age=30, devTrait="Superstar"
        ))
        body = response.json()
        assert response.status_code == 200
        assert body["playerId"] == 5
        assert body["value"] == 35
        assert body["positionMultiplier"] == 0.4

    def test_player_without_position_is_scored(self, client):
        payload = player_payload(id=6, ovr=80, age=22, devTrait="Normal")
        del payload["position"]
        response = client.post("/api/v1/trades/evaluate", json={"givePlayers": [payload]})

        assert response.status_code == 200
        assert response.json()["giveValue"] == 80

    def test_invalid_player_uses_error_envelope(self, client):
        response = client.post("/api/v1/players/value", json={"id": 5})
        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"


class TestLeaguePlayers:

    def test_sorted_by_value(self, client):
        response = client.get("/api/v1/leagues/42/players")
        body = response.json()

        values = [entry["value"] for entry in body["players"]]
        assert response.status_code == 200
        assert body["count"] == 5
        assert values == sorted(values, reverse=True)
        assert body["players"][-1]["player"]["position"] == "P"

    def test_filters(self, client):
        response = client.get("/api/v1/leagues/42/players",
                              params={"team": "Vikings", "position": "QB"})
        names = [entry["player"]["name"] for entry in response.json()["players"]]
        assert names == ["Kirk Cousins"]

    def test_backend_failure_maps_to_bad_gateway(self, client, backend):
        backend.error = CouchlyticsAPIError("HTTP 500: boom", status_code=500)
        response = client.get("/api/v1/leagues/42/players")
        assert response.status_code == 502
        assert response.json()["error"]["type"] == "http_error"

    def test_backend_auth_failure(self, client, backend):
        backend.error = CouchlyticsAuthError("Not logged in", status_code=401)
        response = client.get("/api/v1/leagues/42/players")
        assert response.status_code == 401


class TestConfirm:

    def test_confirm_returns_preview_and_server_result(self, client, backend):
        response = client.post("/api/v1/leagues/42/trades/confirm", json={
            "teamId": 10,
            "give": [2],
            "receive": [4],
        })
        body = response.json()

        assert response.status_code == 200
        assert body["result"]["tradeAssessment"]["verdict"] == "Fair"
        assert body["preview"]["verdict"] in ("Fair", "You Win", "You Lose")
        assert body["agrees"] == (body["preview"]["verdict"] == "Fair")

        submission = backend.submissions[0]
        assert submission.trade.give == [2]
        assert submission.trade.receive == [4]
        assert submission.team_id == 10

    def test_unknown_player_ids_rejected(self, client, backend):
        response = client.post("/api/v1/leagues/42/trades/confirm", json={
            "teamId": 10,
            "give": [2],
            "receive": [999],
        })
        assert response.status_code == 422
        assert "999" in response.json()["error"]["message"]
        assert backend.submissions == []

    def test_disagreement_is_reported(self, client, backend):
        backend.players.append(build_player(50, "Backup HB", "HB", 60))
        backend.players.append(build_player(51, "Starter HB", "HB", 90))
        backend.verdict = "Fair"

        response = client.post("/api/v1/leagues/42/trades/confirm", json={
            "teamId": 10, "give": [50], "receive": [51],
        })

        assert response.json()["preview"]["verdict"] == "You Lose"
        assert response.json()["agrees"] is False


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Process-Time" in response.headers

    def test_detailed_health_degrades_when_backend_unreachable(self, client, backend):
        backend.reachable = False
        body = client.get("/api/v1/health/detailed").json()
        assert body["status"] == "degraded"
        assert body["failed_checks"] == ["couchlytics_api"]

    def test_root(self, client):
        body = client.get("/").json()
        assert body["health_check"] == "/api/v1/health"
