"""
Couchlytics backend API client.

Handles all communication with the Couchlytics REST API: league players and
teams, the current user, and the server-side trade tool. Includes rate
limiting, retries and transformation of responses into our models.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional
import httpx
import logging
from pydantic import ValidationError

from .. import config
from ..datamodels.player import Player, Team, User
from ..datamodels.trade import (
    SuggestedTrade, SuggestionRequest, TradeAnalysisRequest, TradeAnalysisResponse,
    TradeSubmission, TradeToolResult
)


logger = logging.getLogger(__name__)


class CouchlyticsAPIError(Exception):
    """Custom exception for Couchlytics API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CouchlyticsAuthError(CouchlyticsAPIError):
    """Raised when the backend rejects the session (HTTP 401)."""
    pass


class CouchlyticsRateLimitError(CouchlyticsAPIError):
    """Raised when hitting the backend's rate limits."""
    pass


def _error_message(response: httpx.Response) -> str:
    """Prefer the backend's own error message over the raw body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message

    return response.text or f"HTTP error! status: {response.status_code}"


class CouchlyticsClient:
    """
    Async client for the Couchlytics API.

    The backend authenticates with a session cookie, so callers that act on
    behalf of a user pass that user's cookies through. Transient failures
    (429, 5xx, transport errors) are retried with exponential backoff.
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 max_retries: Optional[int] = None,
                 rate_limit_delay: Optional[float] = None,
                 retry_backoff: float = 1.0,
                 cookies: Optional[Dict[str, str]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize Couchlytics API client.

        Args:
            base_url: API root, defaults to the configured backend
            timeout: Request timeout in seconds
            max_retries: Maximum number of retries for failed requests
            rate_limit_delay: Minimum delay between requests
            retry_backoff: Base of the backoff wait (wait = backoff * 2 ** attempt)
            cookies: Session cookies to forward to the backend
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else config.API_MAX_RETRIES
        self.rate_limit_delay = (rate_limit_delay if rate_limit_delay is not None
                                 else config.API_RATE_LIMIT_DELAY)
        self.retry_backoff = retry_backoff
        self._last_request_time = 0.0

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "User-Agent": f"CouchlyticsTradeTools/{config.VERSION}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            cookies=cookies,
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def _backoff(self, attempt: int, reason: str):
        wait_time = self.retry_backoff * (2 ** attempt)
        logger.warning(f"{reason}, retrying in {wait_time}s")
        await asyncio.sleep(wait_time)

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Optional[Any]:
        """
        Make a request to the Couchlytics API with rate limiting and retries.

        Args:
            method: HTTP method
            endpoint: API endpoint (e.g., "/leagues/123/teams")
            **kwargs: Additional arguments for httpx request()

        Returns:
            Decoded JSON body, or None for 404

        Raises:
            CouchlyticsAuthError: For 401 responses
            CouchlyticsRateLimitError: When rate limited past the retry budget
            CouchlyticsAPIError: For any other API error
        """

        now = time.time()
        time_since_last = now - self._last_request_time
        if time_since_last < self.rate_limit_delay:
            await asyncio.sleep(self.rate_limit_delay - time_since_last)

        url = f"{self.base_url}{endpoint}"

        for attempt in range(self.max_retries + 1):
            try:
                self._last_request_time = time.time()

                response = await self.client.request(method, url, **kwargs)

                if response.status_code == 429:
                    if attempt < self.max_retries:
                        await self._backoff(attempt, "Rate limited")
                        continue
                    raise CouchlyticsRateLimitError("Rate limit exceeded", status_code=429)

                if response.status_code == 401:
                    raise CouchlyticsAuthError(_error_message(response), status_code=401)

                if response.status_code == 404:
                    return None

                response.raise_for_status()

                if not response.content:
                    return None
                try:
                    return response.json()
                except ValueError:
                    raise CouchlyticsAPIError(
                        f"Invalid JSON from {endpoint}", status_code=response.status_code
                    )

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if attempt < self.max_retries and status >= 500:
                    await self._backoff(attempt, f"Server error {status}")
                    continue
                raise CouchlyticsAPIError(
                    f"HTTP {status}: {_error_message(e.response)}", status_code=status
                )

            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    await self._backoff(attempt, f"Request error {e}")
                    continue
                raise CouchlyticsAPIError(f"Request failed: {e}")

        raise CouchlyticsAPIError("Max retries exceeded")

    async def ping(self) -> bool:
        """Cheap reachability check used by the health endpoints."""
        try:
            response = await self.client.get(f"{self.base_url}/")
            return response.status_code < 500
        except httpx.RequestError as e:
            logger.warning(f"Backend ping failed: {e}")
            return False

    async def get_current_user(self) -> Optional[User]:
        """
        Get the user behind the forwarded session.

        Returns:
            User, or None if the backend has no user for this session
        """
        logger.info("Fetching current user")

        try:
            user_data = await self._make_request("GET", "/me")
        except CouchlyticsAPIError as e:
            logger.error(f"Error fetching current user: {e}")
            raise

        if not user_data:
            return None

        user = User.model_validate(user_data)
        logger.info(f"Found user {user.id}")
        return user

    async def get_league_players(self,
                                 league_id: str,
                                 page: int = 1,
                                 page_size: int = config.PLAYERS_PAGE_SIZE) -> List[Player]:
        """
        Get the player pool for a league.

        Entries the backend sends without the fields we need (id, name)
        are skipped rather than failing the whole roster.

        Args:
            league_id: Couchlytics league ID
            page: Page number
            page_size: Players per page

        Returns:
            List of players
        """
        logger.info(f"Fetching players for league {league_id}")

        try:
            data = await self._make_request(
                "GET",
                f"/leagues/{league_id}/players",
                params={"page": page, "pageSize": page_size},
            )
        except CouchlyticsAPIError as e:
            logger.error(f"Error fetching players for league {league_id}: {e}")
            raise

        if data is None:
            raise CouchlyticsAPIError(f"League '{league_id}' not found", status_code=404)

        players = []
        for raw in (data.get("players") or []):
            try:
                players.append(Player.model_validate(raw))
            except ValidationError as e:
                label = raw.get("id") if isinstance(raw, dict) else repr(raw)
                logger.warning(f"Skipping malformed player {label}: {e.error_count()} errors")

        logger.info(f"Found {len(players)} players in league {league_id}")
        return players

    async def get_league_teams(self, league_id: str) -> List[Team]:
        logger.info(f"Fetching teams for league {league_id}")

        try:
            data = await self._make_request("GET", f"/leagues/{league_id}/teams")
        except CouchlyticsAPIError as e:
            logger.error(f"Error fetching teams for league {league_id}: {e}")
            raise

        if data is None:
            raise CouchlyticsAPIError(f"League '{league_id}' not found", status_code=404)

        teams = [Team.model_validate(t) for t in (data.get("teams") or [])]
        logger.info(f"Found {len(teams)} teams in league {league_id}")
        return teams

    async def submit_trade(self, league_id: str, submission: TradeSubmission) -> TradeToolResult:
        """
        Submit a trade to the backend trade tool for adjudication.

        Args:
            league_id: Couchlytics league ID
            submission: Player ids given and received by the user's team

        Returns:
            The backend's authoritative TradeToolResult
        """
        logger.info(
            f"Submitting trade in league {league_id}: "
            f"give {submission.trade.give}, receive {submission.trade.receive}"
        )

        try:
            data = await self._make_request(
                "POST",
                f"/leagues/{league_id}/trade-tool",
                json=submission.model_dump(by_alias=True),
            )
        except CouchlyticsAPIError as e:
            logger.error(f"Trade submission failed in league {league_id}: {e}")
            raise

        if data is None:
            raise CouchlyticsAPIError(f"Trade tool not available for league '{league_id}'",
                                      status_code=404)

        result = TradeToolResult.model_validate(data)
        logger.info(f"Trade verdict from server: {result.trade_assessment.verdict}")
        return result

    async def fetch_trade_suggestions(self,
                                      league_id: str,
                                      request: SuggestionRequest) -> List[SuggestedTrade]:
        logger.info(
            f"Fetching trade suggestions for player {request.player_id} "
            f"(strategy: {request.strategy})"
        )

        try:
            data = await self._make_request(
                "POST",
                f"/leagues/{league_id}/trade-tool",
                json=request.model_dump(by_alias=True),
            )
        except CouchlyticsAPIError as e:
            logger.error(f"Error fetching suggestions in league {league_id}: {e}")
            raise

        suggestions = [SuggestedTrade.model_validate(s) for s in ((data or {}).get("suggestions") or [])]
        logger.info(f"Found {len(suggestions)} suggestions")
        return suggestions

    async def analyze_trade(self,
                            league_id: str,
                            request: TradeAnalysisRequest) -> TradeAnalysisResponse:
        """Run the backend trade-calculator analysis (value breakdowns, team needs)."""
        mode = "fast" if request.fast_mode else "comprehensive"
        logger.info(f"Analyzing trade in league {league_id} ({mode} mode)")

        try:
            data = await self._make_request(
                "POST",
                f"/leagues/{league_id}/trade-calculator/analyze",
                json=request.model_dump(),
            )
        except CouchlyticsAPIError as e:
            logger.error(f"Trade analysis failed in league {league_id}: {e}")
            raise

        if data is None:
            raise CouchlyticsAPIError(f"Trade calculator not available for league '{league_id}'",
                                      status_code=404)

        return TradeAnalysisResponse.model_validate(data)

    async def analyze_trade_fast(self,
                                 league_id: str,
                                 user_team_id: int,
                                 players_out: List[int],
                                 players_in: List[int]) -> TradeAnalysisResponse:
        return await self.analyze_trade(league_id, TradeAnalysisRequest(
            user_team_id=user_team_id,
            players_out=players_out,
            players_in=players_in,
            include_team_analysis=False,
            fast_mode=True,
        ))

    async def analyze_trade_comprehensive(self,
                                          league_id: str,
                                          user_team_id: int,
                                          players_out: List[int],
                                          players_in: List[int],
                                          draft_picks_out: Optional[List[int]] = None,
                                          draft_picks_in: Optional[List[int]] = None
                                          ) -> TradeAnalysisResponse:
        return await self.analyze_trade(league_id, TradeAnalysisRequest(
            user_team_id=user_team_id,
            players_out=players_out,
            players_in=players_in,
            draft_picks_out=draft_picks_out or [],
            draft_picks_in=draft_picks_in or [],
            include_team_analysis=True,
            fast_mode=False,
        ))

    async def get_trade_calculator_players(self,
                                           league_id: str,
                                           team_id: Optional[int] = None,
                                           position: Optional[str] = None,
                                           sort_by: Optional[str] = None,
                                           page: Optional[int] = None,
                                           per_page: Optional[int] = None,
                                           fast_mode: Optional[bool] = None) -> Dict[str, Any]:
        """
        Get players with backend-computed trade values.

        Only the filters that were given are sent; the response is returned
        as-is since its player shape differs from the league roster endpoint.
        """
        params: Dict[str, Any] = {}
        if team_id:
            params["team_id"] = team_id
        if position:
            params["position"] = position
        if sort_by:
            params["sort_by"] = sort_by
        if page:
            params["page"] = page
        if per_page:
            params["per_page"] = per_page
        if fast_mode is not None:
            params["fast_mode"] = "true" if fast_mode else "false"

        data = await self._make_request(
            "GET", f"/leagues/{league_id}/trade-calculator/players", params=params
        )
        return data or {}

    async def get_trade_calculator_teams(self, league_id: str) -> Dict[str, Any]:
        data = await self._make_request("GET", f"/leagues/{league_id}/trade-calculator/teams")
        return data or {}
