# skull_king_score/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import enum
import uuid

from .cards import BonusCard, default_cards

MIN_PLAYERS = 2
MAX_PLAYERS = 8
MIN_ROUNDS = 5
MAX_ROUNDS = 14
DEFAULT_ROUNDS = 10

PLACEHOLDER_NAME = "Pirate mystère"
DEFAULT_PLAYER_NAMES = ("Capitaine Anne", "Barbe Noire", "Mousse Jack")


class Phase(enum.Enum):
    BIDS = "bids"
    RESULTS = "results"

    @property
    def label(self) -> str:
        return "Annonces" if self is Phase.BIDS else "Résultats"


def new_player_id() -> str:
    return uuid.uuid4().hex


@dataclass
class RoundScore:
    bid: int = 0
    tricks: int = 0
    bonus: int = 0


@dataclass
class Player:
    name: str
    id: str = field(default_factory=new_player_id)
    # round number (1-based) -> entry
    scores: Dict[int, RoundScore] = field(default_factory=dict)

    def ensure_round(self, round_number: int) -> RoundScore:
        """Return the entry for `round_number`, creating a zero entry if absent."""
        entry = self.scores.get(round_number)
        if entry is None:
            entry = RoundScore()
            self.scores[round_number] = entry
        return entry


@dataclass
class GameConfig:
    total_rounds: int = DEFAULT_ROUNDS
    current_round: int = 1
    phase: Phase = Phase.BIDS

    @property
    def is_last_round(self) -> bool:
        return self.current_round >= self.total_rounds


@dataclass
class GameState:
    players: List[Player]
    cards: List[BonusCard] = field(default_factory=default_cards)
    config: GameConfig = field(default_factory=GameConfig)

    @property
    def num_players(self) -> int:
        return len(self.players)

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_card(self, card_id: str) -> Optional[BonusCard]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None


def default_state() -> GameState:
    """Fresh game: the three default crew members, stock cards, round 1 of 10."""
    return GameState(players=[Player(name=name) for name in DEFAULT_PLAYER_NAMES])
