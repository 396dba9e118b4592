"""
Utility functions for trade tooling.

This package provides helpers for the trade picker: player filtering,
option lists and position grouping.
"""

from .player_filters import (
    filter_players, get_available_teams, get_available_positions,
    get_position_group, format_player_name
)

__all__ = [
    "filter_players",
    "get_available_teams",
    "get_available_positions",
    "get_position_group",
    "format_player_name"
]
