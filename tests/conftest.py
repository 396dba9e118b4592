"""
Shared fixtures for the trade tools test suite.

Provides a player factory and an in-memory LeagueDataSource so the
calculator session can be exercised without any network access.
"""
from typing import Any, Dict, List, Optional

import pytest

from couchlytics.datamodels import (
    Player, SuggestedTrade, SuggestionRequest, Team, TradeAssessment,
    TradeSubmission, TradeToolResult, User
)


def build_player(id: int = 1,
                 name: str = "Test Player",
                 position: Optional[str] = "HB",
                 ovr: Optional[int] = 75,
                 age: Optional[int] = None,
                 dev_trait: Optional[str] = None,
                 team: str = "Bears",
                 team_id: Optional[int] = 1) -> Player:
    return Player(
        id=id,
        name=name,
        position=position,
        ovr=ovr,
        age=age,
        dev_trait=dev_trait,
        team=team,
        team_id=team_id,
    )


@pytest.fixture
def make_player():
    return build_player


class FakeLeagueDataSource:
    """In-memory stand-in for the Couchlytics backend."""

    def __init__(self,
                 user: Optional[User] = None,
                 players: Optional[List[Player]] = None,
                 teams: Optional[List[Team]] = None,
                 verdict: str = "Fair",
                 suggestions: Optional[List[SuggestedTrade]] = None):
        self.user = user
        self.players = players or []
        self.teams = teams or []
        self.verdict = verdict
        self.suggestions = suggestions or []

        self.fail_user = False
        self.fail_players = False
        self.submissions: List[TradeSubmission] = []
        self.suggestion_requests: List[SuggestionRequest] = []

    async def get_current_user(self) -> Optional[User]:
        if self.fail_user:
            raise RuntimeError("session expired")
        return self.user

    async def get_league_players(self, league_id: str) -> List[Player]:
        if self.fail_players:
            raise RuntimeError("backend down")
        return list(self.players)

    async def get_league_teams(self, league_id: str) -> List[Team]:
        return list(self.teams)

    async def submit_trade(self, league_id: str, submission: TradeSubmission) -> TradeToolResult:
        self.submissions.append(submission)
        return TradeToolResult(
            trade_assessment=TradeAssessment(
                verdict=self.verdict,
                team_gives=0,
                team_receives=0,
                net_gain=0,
                confidence=0.9,
            ),
            can_auto_approve=self.verdict == "Fair",
        )

    async def fetch_trade_suggestions(self, league_id: str,
                                      request: SuggestionRequest) -> List[SuggestedTrade]:
        self.suggestion_requests.append(request)
        return list(self.suggestions)


@pytest.fixture
def league_players() -> List[Player]:
    return [
        build_player(1, "Patrick Mahomes", "QB", 99, 28, "Superstar", "Chiefs", 10),
        build_player(2, "Travis Kelce", "TE", 95, 34, "Star", "Chiefs", 10),
        build_player(3, "Justin Jefferson", "WR", 97, 24, "Superstar", "Vikings", 20),
        build_player(4, "Kirk Cousins", "QB", 84, 35, "Normal", "Vikings", 20),
        build_player(5, "Tommy Townsend", "P", 78, 27, "Normal", "Chiefs", 10),
    ]


@pytest.fixture
def league_teams() -> List[Team]:
    return [
        Team(id=10, name="Chiefs", city="Kansas City", user="alice", user_id=100),
        Team(id=20, name="Vikings", city="Minnesota", user="bob", user_id=200),
    ]


@pytest.fixture
def data_source(league_players, league_teams) -> FakeLeagueDataSource:
    return FakeLeagueDataSource(
        user=User(id=100, email="alice@example.com"),
        players=league_players,
        teams=league_teams,
    )


def player_payload(**overrides: Any) -> Dict[str, Any]:
    """Raw backend JSON for a player, camelCase like the real API."""
    payload = {
        "id": 7,
        "name": "Lamar Jackson",
        "team": "Ravens",
        "position": "QB",
        "ovr": 91,
        "age": 27,
        "devTrait": "Superstar",
        "teamId": 3,
        "speedRating": 95,
    }
    payload.update(overrides)
    return payload
