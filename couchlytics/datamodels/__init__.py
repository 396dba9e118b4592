"""
Data models for the Couchlytics trade tools.

This module exports all the core data structures used throughout the application.
Keeping exports centralized here allows for easy imports and future refactoring.
"""

from .player import Player, PlayerPosition, DevTrait, PositionGroup, Team, User
from .trade import (
    FAIRNESS_THRESHOLD, TradeVerdict, TradeProposal, TradeResult,
    PlayerValueBreakdown, TradePlayers, TradeSubmission, SuggestionRequest,
    TradeAssessment, SuggestedTrade, TradeToolResult,
    TradeAnalysisRequest, TradeAnalysis, TradeAnalysisResponse
)

__all__ = [
    "Player",
    "PlayerPosition",
    "DevTrait",
    "PositionGroup",
    "Team",
    "User",

    "FAIRNESS_THRESHOLD",
    "TradeVerdict",
    "TradeProposal",
    "TradeResult",
    "PlayerValueBreakdown",

    "TradePlayers",
    "TradeSubmission",
    "SuggestionRequest",
    "TradeAssessment",
    "SuggestedTrade",
    "TradeToolResult",
    "TradeAnalysisRequest",
    "TradeAnalysis",
    "TradeAnalysisResponse"
]
