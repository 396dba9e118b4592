"""
Trade proposal, evaluation and backend trade-tool models.

Local evaluation produces a TradeResult, which is only ever a preview.
The backend's trade-tool response (TradeToolResult) is the authoritative
verdict and is modelled separately because its shape is owned by the API.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .player import Player

FAIRNESS_THRESHOLD = 15


class TradeVerdict(str, Enum):
    FAIR = "Fair"
    YOU_WIN = "You Win"
    YOU_LOSE = "You Lose"


class TradeProposal(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    give_players: List[Player] = Field(default_factory=list, alias="givePlayers")
    receive_players: List[Player] = Field(default_factory=list, alias="receivePlayers")

    @property
    def give_ids(self) -> List[int]:
        return [p.id for p in self.give_players]

    @property
    def receive_ids(self) -> List[int]:
        return [p.id for p in self.receive_players]

    @property
    def is_empty(self) -> bool:
        return not self.give_players and not self.receive_players


class TradeResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    give_value: int = Field(..., alias="giveValue")
    receive_value: int = Field(..., alias="receiveValue")
    net_value: int = Field(..., alias="netValue")
    verdict: TradeVerdict


class PlayerValueBreakdown(BaseModel):
    """Every factor that went into a player's trade value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_id: int = Field(..., alias="playerId")
    base_value: int = Field(..., alias="baseValue")
    age_factor: float = Field(1.0, alias="ageFactor")
    dev_multiplier: float = Field(1.0, alias="devMultiplier")
    position_multiplier: float = Field(1.0, alias="positionMultiplier")
    value: int


# Backend trade-tool contracts

class TradePlayers(BaseModel):
    give: List[int] = Field(default_factory=list)
    receive: List[int] = Field(default_factory=list)


class TradeSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    league_id: str = Field(..., alias="leagueId")
    team_id: int = Field(..., alias="teamId")
    trade: TradePlayers
    include_suggestions: bool = Field(False, alias="includeSuggestions")

    @classmethod
    def from_proposal(cls,
                      league_id: str,
                      team_id: int,
                      proposal: TradeProposal,
                      include_suggestions: bool = False) -> "TradeSubmission":
        return cls(
            league_id=str(league_id),
            team_id=team_id,
            trade=TradePlayers(give=proposal.give_ids, receive=proposal.receive_ids),
            include_suggestions=include_suggestions,
        )


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    league_id: str = Field(..., alias="leagueId")
    team_id: int = Field(..., alias="teamId")
    player_id: int = Field(..., alias="playerId")
    strategy: str


class TradeAssessment(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Free-form on the server side ("Fair", "You Win", "Excellent", ...)
    verdict: str
    team_gives: float = Field(..., alias="teamGives")
    team_receives: float = Field(..., alias="teamReceives")
    net_gain: float = Field(..., alias="netGain")
    confidence: float = 0.0


class SuggestedTrade(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    target_team: int = Field(..., alias="targetTeam")
    target_team_name: str = Field("", alias="targetTeamName")
    verdict: str = ""
    trade_value: float = Field(0.0, alias="tradeValue")
    players_offered: List[Player] = Field(default_factory=list, alias="playersOffered")
    confidence: float = 0.0
    reasoning: str = ""


class TradeToolResult(BaseModel):
    """Authoritative trade verdict returned by the backend trade tool."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    trade_assessment: TradeAssessment = Field(..., alias="tradeAssessment")
    can_auto_approve: bool = Field(False, alias="canAutoApprove")
    suggested_trades: List[Player] = Field(default_factory=list, alias="suggestedTrades")
    reasoning: Optional[str] = None

    def agrees_with(self, preview: TradeResult) -> bool:
        return self.trade_assessment.verdict.strip().lower() == preview.verdict.value.lower()


# Backend trade-calculator analysis contracts

class TradeAnalysisRequest(BaseModel):
    user_team_id: int
    players_out: List[int] = Field(default_factory=list)
    players_in: List[int] = Field(default_factory=list)
    draft_picks_out: List[int] = Field(default_factory=list)
    draft_picks_in: List[int] = Field(default_factory=list)
    include_team_analysis: bool = False
    fast_mode: bool = True


class TradeAnalysis(BaseModel):
    model_config = ConfigDict(extra="ignore")

    verdict: str
    verdict_color: Optional[str] = None
    net_value: float
    total_value_out: float
    total_value_in: float
    confidence: float = 0.0
    user_team_id: Optional[int] = None
    user_team_name: Optional[str] = None
    league_id: Optional[str] = None


class TradeAnalysisResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    trade_analysis: TradeAnalysis
    players_out: List[Dict[str, Any]] = Field(default_factory=list)
    players_in: List[Dict[str, Any]] = Field(default_factory=list)
    draft_picks_out: List[Dict[str, Any]] = Field(default_factory=list)
    draft_picks_in: List[Dict[str, Any]] = Field(default_factory=list)
    analysis_mode: str = "fast"
    team_analysis_included: bool = False
    detailed_analysis: Optional[Dict[str, Any]] = None
    timestamp: Optional[datetime] = None
