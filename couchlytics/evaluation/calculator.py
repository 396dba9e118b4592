"""
Interactive trade calculator session.

Holds one in-progress trade proposal for a league: which players the user
gives and receives, the league data the picker draws from, and the last
authoritative result from the backend. The local preview is recomputed on
every access; the backend result is only refreshed by submit().
"""

import logging
from typing import List, Optional, Protocol

from ..datamodels.player import Player, Team, User
from ..datamodels.trade import (
    SuggestedTrade, SuggestionRequest, TradeProposal, TradeResult,
    TradeSubmission, TradeToolResult
)
from .trade_value import evaluate_trade


logger = logging.getLogger(__name__)


class TradeCalculatorError(Exception):
    """Raised when a calculator action cannot be completed."""
    pass


class InvalidLeagueError(TradeCalculatorError):
    """Raised when the calculator is used without a usable league id."""
    pass


class LeagueDataSource(Protocol):
    """
    Data access the calculator needs from the Couchlytics backend.

    CouchlyticsClient implements this; tests pass an in-memory fake so the
    scoring never needs network mocking.
    """

    async def get_current_user(self) -> Optional[User]: ...

    async def get_league_players(self, league_id: str) -> List[Player]: ...

    async def get_league_teams(self, league_id: str) -> List[Team]: ...

    async def submit_trade(self, league_id: str,
                           submission: TradeSubmission) -> TradeToolResult: ...

    async def fetch_trade_suggestions(self, league_id: str,
                                      request: SuggestionRequest) -> List[SuggestedTrade]: ...


class TradeCalculator:

    def __init__(self, league_id: str, data_source: LeagueDataSource):
        self.league_id = league_id
        self.data_source = data_source

        self.user: Optional[User] = None
        self.players: List[Player] = []
        self.teams: List[Team] = []

        self.give_players: List[Player] = []
        self.receive_players: List[Player] = []
        self.server_result: Optional[TradeToolResult] = None
        self.suggested_trades: List[SuggestedTrade] = []

    async def load(self) -> None:
        """
        Load the current user, league players and league teams.

        The user lookup is best-effort (an anonymous session just has no
        team); players and teams are required.
        """
        if not self.league_id or self.league_id == "undefined":
            raise InvalidLeagueError("Invalid or missing league ID.")

        try:
            self.user = await self.data_source.get_current_user()
        except Exception as e:
            logger.warning(f"Could not load current user for league {self.league_id}: {e}")
            self.user = None

        try:
            self.players = await self.data_source.get_league_players(self.league_id)
            self.teams = await self.data_source.get_league_teams(self.league_id)
        except Exception as e:
            logger.error(f"Failed to load data for league {self.league_id}: {e}")
            raise TradeCalculatorError("Failed to load league data. Please try again.") from e

        logger.info(
            f"Loaded league {self.league_id}: {len(self.players)} players, {len(self.teams)} teams"
        )

    @property
    def user_team(self) -> Optional[Team]:
        if self.user is None:
            return None
        for team in self.teams:
            if str(team.user_id) == str(self.user.id):
                return team
        return None

    @property
    def user_team_id(self) -> Optional[int]:
        team = self.user_team
        return team.id if team else None

    @property
    def proposal(self) -> TradeProposal:
        return TradeProposal(
            give_players=list(self.give_players),
            receive_players=list(self.receive_players),
        )

    @property
    def result(self) -> TradeResult:
        return evaluate_trade(self.give_players, self.receive_players)

    def add_player(self, player: Player, to_give: bool) -> bool:
        """Add a player to one side of the trade. Returns False for duplicates."""
        side = self.give_players if to_give else self.receive_players
        if any(p.id == player.id for p in side):
            return False
        side.append(player)
        return True

    def remove_player(self, player_id: int, from_give: bool) -> None:
        if from_give:
            self.give_players = [p for p in self.give_players if p.id != player_id]
        else:
            self.receive_players = [p for p in self.receive_players if p.id != player_id]

    def clear_trade(self) -> None:
        self.give_players = []
        self.receive_players = []
        self.server_result = None
        self.suggested_trades = []

    async def fetch_trade_suggestions(self, player_id: Optional[int],
                                      strategy: str) -> List[SuggestedTrade]:
        team_id = self.user_team_id
        if not player_id or team_id is None:
            return []

        self.suggested_trades = []
        request = SuggestionRequest(
            league_id=str(self.league_id),
            team_id=team_id,
            player_id=int(player_id),
            strategy=strategy,
        )

        try:
            self.suggested_trades = await self.data_source.fetch_trade_suggestions(
                self.league_id, request
            )
        except Exception as e:
            logger.error(f"Suggestion fetch failed for player {player_id}: {e}")
            raise TradeCalculatorError("Failed to load trade suggestions") from e

        return self.suggested_trades

    def apply_suggested_trade(self, suggestion: SuggestedTrade, player_id: int) -> bool:
        """Replace the proposal with `player_id` for the suggested package."""
        selected = next((p for p in self.give_players if p.id == int(player_id)), None)
        if selected is None:
            return False
        self.give_players = [selected]
        self.receive_players = list(suggestion.players_offered)
        return True

    async def submit(self, include_suggestions: bool = False) -> TradeToolResult:
        team_id = self.user_team_id
        if team_id is None:
            raise TradeCalculatorError("Please select your team first")

        self.server_result = None
        submission = TradeSubmission.from_proposal(
            self.league_id, team_id, self.proposal, include_suggestions
        )
        preview = self.result

        result = await self.data_source.submit_trade(self.league_id, submission)

        if not result.agrees_with(preview):
            logger.warning(
                f"Server verdict '{result.trade_assessment.verdict}' differs from "
                f"preview '{preview.verdict.value}' (net {preview.net_value}) "
                f"in league {self.league_id}"
            )

        self.server_result = result
        return result
