# skull_king_score/scoring.py
from __future__ import annotations

from typing import List, Tuple

from .state import GameState, Player, RoundScore

NIL_BID_STAKE = 10
EXACT_BID_POINTS = 20
MISSED_TRICK_PENALTY = 10


def calculate_round_score(round_score: RoundScore, round_number: int) -> int:
    """
    Score one round according to Skull King scoring:

    - Bid 0 (nil): +10 * round if no trick was taken, -10 * round otherwise.
    - Bid met exactly: 20 * bid.
    - Bid missed: -10 * abs(bid - tricks).

    The bonus is added in every case, including failed bids.
    """
    bid = round_score.bid
    tricks = round_score.tricks
    bonus = round_score.bonus

    if bid == 0:
        stake = round_number * NIL_BID_STAKE
        return stake + bonus if tricks == 0 else -stake + bonus
    if bid == tricks:
        return bid * EXACT_BID_POINTS + bonus
    return -abs(bid - tricks) * MISSED_TRICK_PENALTY + bonus


def total_score(player: Player) -> int:
    """Sum of every recorded round, each scored with its own round number."""
    return sum(
        calculate_round_score(round_score, round_number)
        for round_number, round_score in player.scores.items()
    )


def round_scores(player: Player) -> List[Tuple[int, int]]:
    """(round, score) pairs for the player's recorded rounds, in round order."""
    return [
        (round_number, calculate_round_score(player.scores[round_number], round_number))
        for round_number in sorted(player.scores)
    ]


def standings(state: GameState) -> List[Tuple[Player, int]]:
    """Players with their totals, best first. Ties keep seating order."""
    totals = [(p, total_score(p)) for p in state.players]
    return sorted(totals, key=lambda item: item[1], reverse=True)
