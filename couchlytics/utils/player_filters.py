"""
Player list helpers for the trade picker.

Filtering, option lists and display helpers shared by the calculator
endpoints. Sorting always uses the same trade value the evaluator computes,
so the most valuable players surface first.
"""

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from ..datamodels.player import Player, PlayerPosition, PositionGroup
from ..evaluation.trade_value import calculate_player_value

ALL = "All"

POSITION_GROUPS: Mapping[PlayerPosition, PositionGroup] = MappingProxyType({
    PlayerPosition.QB: PositionGroup.OFFENSE,
    PlayerPosition.HB: PositionGroup.OFFENSE,
    PlayerPosition.FB: PositionGroup.OFFENSE,
    PlayerPosition.WR: PositionGroup.OFFENSE,
    PlayerPosition.TE: PositionGroup.OFFENSE,
    PlayerPosition.LT: PositionGroup.OFFENSE,
    PlayerPosition.LG: PositionGroup.OFFENSE,
    PlayerPosition.C: PositionGroup.OFFENSE,
    PlayerPosition.RG: PositionGroup.OFFENSE,
    PlayerPosition.RT: PositionGroup.OFFENSE,
    PlayerPosition.LE: PositionGroup.DEFENSE,
    PlayerPosition.RE: PositionGroup.DEFENSE,
    PlayerPosition.DT: PositionGroup.DEFENSE,
    PlayerPosition.LOLB: PositionGroup.DEFENSE,
    PlayerPosition.MLB: PositionGroup.DEFENSE,
    PlayerPosition.ROLB: PositionGroup.DEFENSE,
    PlayerPosition.CB: PositionGroup.DEFENSE,
    PlayerPosition.FS: PositionGroup.DEFENSE,
    PlayerPosition.SS: PositionGroup.DEFENSE,
    PlayerPosition.K: PositionGroup.SPECIAL_TEAMS,
    PlayerPosition.P: PositionGroup.SPECIAL_TEAMS,
})


def filter_players(players: Iterable[Player],
                   search_term: str = "",
                   team: str = ALL,
                   position: str = ALL,
                   my_team_only: bool = False,
                   user_team_id: Optional[int] = None) -> List[Player]:
    """
    Filter the league player pool the way the trade picker does.

    Args:
        players: Players to filter
        search_term: Case-insensitive substring of the player's name
        team: Team name, or "All"
        position: Position abbreviation, or "All"
        my_team_only: Only keep players on `user_team_id`
        user_team_id: The user's team id

    Returns:
        Matching players, most valuable first
    """
    needle = (search_term or "").lower()

    def matches(p: Player) -> bool:
        if needle and needle not in p.name.lower():
            return False
        if team != ALL and p.team != team:
            return False
        if position != ALL and p.position != position.upper():
            return False
        if my_team_only and p.team_id != user_team_id:
            return False
        return True

    # sorted() is stable, so equal values keep their incoming order
    return sorted((p for p in players if matches(p)),
                  key=calculate_player_value, reverse=True)


def get_available_teams(players: Iterable[Player]) -> List[str]:
    return [ALL] + sorted({p.team for p in players})


def get_available_positions(players: Iterable[Player]) -> List[str]:
    return [ALL] + sorted({p.position for p in players if p.position})


def get_position_group(position: Optional[str]) -> PositionGroup:
    known = PlayerPosition.parse(position)
    if known is None:
        return PositionGroup.OTHER
    return POSITION_GROUPS.get(known, PositionGroup.OTHER)


def format_player_name(player: Player) -> str:
    return f'{player.name} ({player.position or "?"} • {player.team})'
