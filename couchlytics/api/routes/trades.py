"""
Trade evaluation endpoints.

Local previews are computed in-process with the trade value evaluator.
Confirmation forwards the trade to the Couchlytics backend, whose verdict
is authoritative; the preview is returned alongside it for comparison.
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from ...datamodels.player import Player
from ...datamodels.trade import (
    PlayerValueBreakdown, TradeProposal, TradeResult, TradeSubmission, TradeToolResult
)
from ...evaluation.trade_value import calculate_player_value, evaluate_proposal, explain_player_value
from ...external.couchlytics_client import (
    CouchlyticsClient, CouchlyticsAPIError, CouchlyticsAuthError
)
from ...utils.player_filters import ALL, filter_players


router = APIRouter()
logger = logging.getLogger(__name__)


class ValuedPlayer(BaseModel):
    player: Player
    value: int


class LeaguePlayersResponse(BaseModel):
    league_id: str
    count: int
    players: List[ValuedPlayer]


class ConfirmTradeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    team_id: int = Field(..., alias="teamId")
    give: List[int] = Field(default_factory=list)
    receive: List[int] = Field(default_factory=list)
    include_suggestions: bool = Field(False, alias="includeSuggestions")


class ConfirmTradeResponse(BaseModel):
    preview: TradeResult
    result: TradeToolResult
    agrees: bool


async def get_couchlytics_client(request: Request):
    """
    Dependency to provide a Couchlytics API client.

    The caller's cookies are forwarded so the backend sees the same session.
    """
    async with CouchlyticsClient(cookies=dict(request.cookies)) as client:
        yield client


def _backend_error(e: CouchlyticsAPIError, action: str) -> HTTPException:
    if isinstance(e, CouchlyticsAuthError):
        return HTTPException(status_code=401, detail="Not authenticated with Couchlytics")
    if e.status_code == 404:
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=502, detail=f"Error {action}: {str(e)}")


@router.post("/trades/evaluate", response_model=TradeResult)
async def evaluate_trade_preview(proposal: TradeProposal):
    """
    Preview a trade from the players on each side.

    Pure computation: no backend call, safe to hit on every edit.
    """
    result = evaluate_proposal(proposal)
    logger.info(
        f"Evaluated trade: give {result.give_value}, receive {result.receive_value} "
        f"-> {result.verdict.value}"
    )
    return result


@router.post("/players/value", response_model=PlayerValueBreakdown)
async def player_value(player: Player):
    """Trade value of a single player with every factor that went into it."""
    return explain_player_value(player)


@router.get("/leagues/{league_id}/players", response_model=LeaguePlayersResponse)
async def get_league_players(
    league_id: str,
    search: str = Query("", description="Player name search query"),
    team: str = Query(ALL, description="Filter by team name"),
    position: str = Query(ALL, description="Filter by position"),
    limit: int = Query(100, ge=1, le=5000, description="Maximum results to return"),
    client: CouchlyticsClient = Depends(get_couchlytics_client)
):
    """
    League player pool for the trade picker, most valuable first.
    """

    try:
        players = await client.get_league_players(league_id)
    except CouchlyticsAPIError as e:
        raise _backend_error(e, "fetching league players")

    matches = filter_players(players, search_term=search, team=team, position=position)[:limit]

    return LeaguePlayersResponse(
        league_id=league_id,
        count=len(matches),
        players=[ValuedPlayer(player=p, value=calculate_player_value(p)) for p in matches],
    )


@router.post("/leagues/{league_id}/trades/confirm", response_model=ConfirmTradeResponse)
async def confirm_trade(
    league_id: str,
    request: ConfirmTradeRequest,
    client: CouchlyticsClient = Depends(get_couchlytics_client)
):
    """
    Submit a trade to the backend trade tool.

    Player ids are resolved against the league roster so the local preview
    can be returned next to the backend's verdict.
    """

    try:
        players = await client.get_league_players(league_id)
    except CouchlyticsAPIError as e:
        raise _backend_error(e, "fetching league players")

    by_id = {p.id: p for p in players}
    unknown = [pid for pid in request.give + request.receive if pid not in by_id]
    if unknown:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown player ids for league '{league_id}': {unknown}"
        )

    proposal = TradeProposal(
        give_players=[by_id[pid] for pid in request.give],
        receive_players=[by_id[pid] for pid in request.receive],
    )
    preview = evaluate_proposal(proposal)

    submission = TradeSubmission.from_proposal(
        league_id, request.team_id, proposal, request.include_suggestions
    )

    try:
        result = await client.submit_trade(league_id, submission)
    except CouchlyticsAPIError as e:
        raise _backend_error(e, "submitting trade")

    agrees = result.agrees_with(preview)
    if not agrees:
        logger.warning(
            f"Preview verdict '{preview.verdict.value}' differs from server verdict "
            f"'{result.trade_assessment.verdict}' in league {league_id}"
        )

    return ConfirmTradeResponse(preview=preview, result=result, agrees=agrees)
