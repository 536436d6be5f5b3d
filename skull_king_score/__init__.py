# skull_king_score/__init__.py
from .scoring import calculate_round_score, total_score
from .state import GameConfig, GameState, Phase, Player, RoundScore
from .store import StateStore

__all__ = [
    "calculate_round_score",
    "total_score",
    "GameConfig",
    "GameState",
    "Phase",
    "Player",
    "RoundScore",
    "StateStore",
]
