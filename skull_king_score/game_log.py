# skull_king_score/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List

from .scoring import calculate_round_score
from .state import GameState, RoundScore

FIELDNAMES = [
    "round",
    "player_id",
    "player_name",
    "bid",
    "tricks",
    "bonus",
    "round_score",
    "total_score",
]


def _recorded_rounds(game_state: GameState) -> List[int]:
    """Every round number at least one player has an entry for, ascending."""
    rounds = set()
    for player in game_state.players:
        rounds.update(player.scores)
    return sorted(rounds)


def build_round_score_rows(game_state: GameState) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, player) and has keys in FIELDNAMES. A
    player with no entry for a recorded round is exported with a zero entry,
    which is what the score board shows for them.
    """
    players = game_state.players
    running_scores: Dict[str, int] = {p.id: 0 for p in players}
    rows: List[Dict[str, Any]] = []

    for round_number in _recorded_rounds(game_state):
        for p in players:
            entry = p.scores.get(round_number, RoundScore())
            delta = calculate_round_score(entry, round_number)
            running_scores[p.id] += delta

            rows.append(
                {
                    "round": round_number,
                    "player_id": p.id,
                    "player_name": p.name,
                    "bid": entry.bid,
                    "tricks": entry.tricks,
                    "bonus": entry.bonus,
                    "round_score": delta,
                    "total_score": running_scores[p.id],
                }
            )

    return rows


def write_round_scores_csv(game_state: GameState, path) -> int:
    """
    Write per-round scores to a CSV file and return the number of data rows.

    `path` can be a string or any path-like object accepted by `open`.
    """
    rows = build_round_score_rows(game_state)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
    return len(rows)
