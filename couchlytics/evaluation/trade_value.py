"""
Trade value scoring.

Maps a player to a single trade value and two player lists to a verdict for
the proposing side. Everything here is a pure function over player snapshots:
no I/O, no shared state, safe to call on every change to a proposal.

Value formula:
    value = round_half_up((ovr_or_75 * age_factor * dev_multiplier) * position_multiplier)
"""

import math
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..datamodels.player import Player, PlayerPosition, DevTrait
from ..datamodels.trade import (
    FAIRNESS_THRESHOLD, PlayerValueBreakdown, TradeProposal, TradeResult, TradeVerdict
)

DEFAULT_OVERALL = 75

PEAK_AGE = 22
AGE_DECLINE_PER_YEAR = 0.02
MIN_AGE_FACTOR = 0.7

POSITION_MULTIPLIERS: Mapping[PlayerPosition, float] = MappingProxyType({
    PlayerPosition.QB: 1.2,
    PlayerPosition.WR: 1.1,
    PlayerPosition.HB: 1.0,
    PlayerPosition.TE: 0.9,
    PlayerPosition.LT: 0.8,
    PlayerPosition.LG: 0.7,
    PlayerPosition.C: 0.7,
    PlayerPosition.RG: 0.7,
    PlayerPosition.RT: 0.8,
    PlayerPosition.LE: 0.9,
    PlayerPosition.RE: 0.9,
    PlayerPosition.DT: 0.8,
    PlayerPosition.LOLB: 0.9,
    PlayerPosition.MLB: 1.0,
    PlayerPosition.ROLB: 0.9,
    PlayerPosition.CB: 1.0,
    PlayerPosition.FS: 0.9,
    PlayerPosition.SS: 0.9,
    PlayerPosition.K: 0.5,
    PlayerPosition.P: 0.4,
})

DEV_TRAIT_MULTIPLIERS: Mapping[DevTrait, float] = MappingProxyType({
    DevTrait.SUPERSTAR: 1.3,
    DevTrait.STAR: 1.2,
    DevTrait.NORMAL: 1.0,
    DevTrait.HIDDEN: 1.1,
})


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (36.5 -> 37, not 36)."""
    return int(math.floor(value + 0.5))


def position_multiplier(position: Optional[str]) -> float:
    known = PlayerPosition.parse(position)
    if known is None:
        return 1.0
    return POSITION_MULTIPLIERS.get(known, 1.0)


def dev_trait_multiplier(dev_trait: Optional[str]) -> float:
    known = DevTrait.parse(dev_trait)
    if known is None:
        return 1.0
    return DEV_TRAIT_MULTIPLIERS[known]


def age_factor(age: Optional[int]) -> float:
    """
    Age adjustment applied to the base value.

    Players lose 2% per year past 22, floored at 70%. Ages under 22 are NOT
    capped and produce a factor above 1.0 (age 20 -> 1.04). A missing or zero
    age skips the adjustment entirely.
    """
    if not age:
        return 1.0
    return max(MIN_AGE_FACTOR, 1.0 - (age - PEAK_AGE) * AGE_DECLINE_PER_YEAR)


def explain_player_value(player: Player) -> PlayerValueBreakdown:
    base_value = player.ovr or DEFAULT_OVERALL
    age_adj = age_factor(player.age)
    dev_adj = dev_trait_multiplier(player.dev_trait)
    pos_adj = position_multiplier(player.position)

    # Age and dev trait scale the running base value; position is applied last
    adjusted = base_value * age_adj * dev_adj
    value = round_half_up(adjusted * pos_adj)

    return PlayerValueBreakdown(
        player_id=player.id,
        base_value=base_value,
        age_factor=age_adj,
        dev_multiplier=dev_adj,
        position_multiplier=pos_adj,
        value=value,
    )


def calculate_player_value(player: Player) -> int:
    return explain_player_value(player).value


def calculate_total_value(players: Iterable[Player]) -> int:
    return sum(calculate_player_value(p) for p in players)


def calculate_trade_verdict(net_value: int) -> TradeVerdict:
    """
    Classify a trade by its net value (receive - give).

    The fairness band is inclusive, so a net of exactly +/-15 is still Fair.
    Above the band is "You Lose", below it is "You Win".
    """
    if abs(net_value) <= FAIRNESS_THRESHOLD:
        return TradeVerdict.FAIR
    if net_value > FAIRNESS_THRESHOLD:
        return TradeVerdict.YOU_LOSE
    return TradeVerdict.YOU_WIN


def evaluate_trade(give_players: Iterable[Player],
                   receive_players: Iterable[Player]) -> TradeResult:
    give_value = calculate_total_value(give_players)
    receive_value = calculate_total_value(receive_players)
    net_value = receive_value - give_value

    return TradeResult(
        give_value=give_value,
        receive_value=receive_value,
        net_value=net_value,
        verdict=calculate_trade_verdict(net_value),
    )


def evaluate_proposal(proposal: TradeProposal) -> TradeResult:
    return evaluate_trade(proposal.give_players, proposal.receive_players)
