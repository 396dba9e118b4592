from .trade_value import (
    calculate_player_value, calculate_total_value, calculate_trade_verdict,
    evaluate_trade, evaluate_proposal, explain_player_value
)
from .calculator import TradeCalculator, TradeCalculatorError, InvalidLeagueError, LeagueDataSource

__all__ = [
    "calculate_player_value",
    "calculate_total_value",
    "calculate_trade_verdict",
    "evaluate_trade",
    "evaluate_proposal",
    "explain_player_value",
    "TradeCalculator",
    "TradeCalculatorError",
    "InvalidLeagueError",
    "LeagueDataSource"
]
