# skull_king_score/actions.py
from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from typing import Any, Optional

from .inputs import clamp_number, to_int
from .state import (
    MAX_PLAYERS,
    MAX_ROUNDS,
    MIN_PLAYERS,
    MIN_ROUNDS,
    PLACEHOLDER_NAME,
    GameState,
    Phase,
    Player,
    RoundScore,
    default_state,
)

logger = logging.getLogger(__name__)


class ActionRejected(Exception):
    """An update that the rules refuse; `notice` is shown to the table as is."""

    def __init__(self, notice: str) -> None:
        super().__init__(notice)
        self.notice = notice


class PlayerLimitReached(ActionRejected):
    pass


class UnknownPlayer(ActionRejected):
    pass


class UnknownCard(ActionRejected):
    pass


class PhaseMismatch(ActionRejected):
    pass


class LastRoundReached(ActionRejected):
    pass


class NoBonusTarget(ActionRejected):
    pass


@dataclass(frozen=True)
class BonusTarget:
    """The bonus entry a card tap goes to: a player's current-round bonus."""

    player_id: str


# ---------------------------------------------------------------------------
# Game lifecycle
# ---------------------------------------------------------------------------
#
# Every function below returns a new GameState and leaves its input alone,
# so a rejected action never leaves a half-applied change behind.


def new_game() -> GameState:
    return default_state()


def reset_game(state: GameState) -> GameState:
    """Clear every score and go back to round 1. Crew and card values stay."""
    nxt = deepcopy(state)
    for player in nxt.players:
        player.scores = {}
    nxt.config.current_round = 1
    nxt.config.phase = Phase.BIDS
    logger.info("Game reset (%d players kept)", nxt.num_players)
    return nxt


# ---------------------------------------------------------------------------
# Crew
# ---------------------------------------------------------------------------


def add_player(state: GameState, name: Optional[str] = None) -> GameState:
    if state.num_players >= MAX_PLAYERS:
        raise PlayerLimitReached("Le navire est plein !")
    nxt = deepcopy(state)
    player_name = (name or "").strip() or f"Pirate {state.num_players + 1}"
    nxt.players.append(Player(name=player_name))
    logger.debug("Added player %r", player_name)
    return nxt


def remove_player(state: GameState, player_id: str) -> GameState:
    _require_player(state, player_id)
    if state.num_players <= MIN_PLAYERS:
        raise PlayerLimitReached(
            f"Il faut au moins {MIN_PLAYERS} joueurs à bord."
        )
    nxt = deepcopy(state)
    nxt.players = [p for p in nxt.players if p.id != player_id]
    logger.debug("Removed player %s", player_id)
    return nxt


def rename_player(state: GameState, player_id: str, name: str) -> GameState:
    _require_player(state, player_id)
    nxt = deepcopy(state)
    player = nxt.find_player(player_id)
    player.name = (name or "").strip() or PLACEHOLDER_NAME
    return nxt


# ---------------------------------------------------------------------------
# Round entries
# ---------------------------------------------------------------------------


def set_bid(
    state: GameState,
    player_id: str,
    raw: Any,
    *,
    gate_phases: bool = True,
) -> GameState:
    """Record a bid for the current round, clamped to [0, current round]."""
    if gate_phases and state.config.phase is not Phase.BIDS:
        raise PhaseMismatch("Les annonces se saisissent en phase annonces.")
    bid = clamp_number(raw, 0, state.config.current_round)
    return _update_entry(state, player_id, bid=bid)


def set_tricks(
    state: GameState,
    player_id: str,
    raw: Any,
    *,
    gate_phases: bool = True,
) -> GameState:
    """Record tricks won for the current round, clamped to [0, current round]."""
    if gate_phases and state.config.phase is not Phase.RESULTS:
        raise PhaseMismatch("Les plis se saisissent en phase résultats.")
    tricks = clamp_number(raw, 0, state.config.current_round)
    return _update_entry(state, player_id, tricks=tricks)


def set_bonus(
    state: GameState,
    player_id: str,
    raw: Any,
    *,
    gate_phases: bool = True,
) -> GameState:
    """Record the current round bonus; any integer, junk becomes 0."""
    if gate_phases and state.config.phase is not Phase.RESULTS:
        raise PhaseMismatch("Les bonus se saisissent en phase résultats.")
    return _update_entry(state, player_id, bonus=to_int(raw))


def apply_bonus_card(
    state: GameState,
    target: Optional[BonusTarget],
    card_id: str,
    *,
    gate_phases: bool = True,
) -> GameState:
    """Add a card's value to the targeted player's current-round bonus."""
    if target is None:
        raise NoBonusTarget(
            "Sélectionne d'abord un champ bonus dans la manche."
        )
    card = state.find_card(card_id)
    if card is None:
        raise UnknownCard(f"Carte inconnue : {card_id}")
    if gate_phases and state.config.phase is not Phase.RESULTS:
        raise PhaseMismatch("Les bonus se saisissent en phase résultats.")

    player = _require_player(state, target.player_id)
    current = player.scores.get(state.config.current_round, RoundScore()).bonus
    logger.debug("Applying %s (%+d) to %s", card.id, card.value, player.name)
    return _update_entry(state, player.id, bonus=current + card.value)


# ---------------------------------------------------------------------------
# Round navigation
# ---------------------------------------------------------------------------


def select_round(state: GameState, round_number: Any) -> GameState:
    """Jump to a round (clamped to the configured range); phase goes back to bids."""
    nxt = deepcopy(state)
    nxt.config.current_round = clamp_number(round_number, 1, nxt.config.total_rounds)
    nxt.config.phase = Phase.BIDS
    return nxt


def set_total_rounds(state: GameState, total: Any) -> GameState:
    nxt = deepcopy(state)
    config = nxt.config
    config.total_rounds = clamp_number(total, MIN_ROUNDS, MAX_ROUNDS)
    if config.current_round > config.total_rounds:
        config.current_round = config.total_rounds
        config.phase = Phase.BIDS
    return nxt


def toggle_phase(state: GameState) -> GameState:
    nxt = deepcopy(state)
    nxt.config.phase = (
        Phase.RESULTS if nxt.config.phase is Phase.BIDS else Phase.BIDS
    )
    return nxt


def complete_round(state: GameState, *, gate_phases: bool = True) -> GameState:
    """Close the current round and move on to the next one's bids."""
    if gate_phases and state.config.phase is not Phase.RESULTS:
        raise PhaseMismatch("Passe d'abord en phase résultats.")
    if state.config.is_last_round:
        raise LastRoundReached("Dernière manche atteinte.")
    nxt = deepcopy(state)
    nxt.config.current_round += 1
    nxt.config.phase = Phase.BIDS
    logger.info(
        "Finished round %d/%d",
        state.config.current_round,
        state.config.total_rounds,
    )
    return nxt


# ---------------------------------------------------------------------------
# Card catalog
# ---------------------------------------------------------------------------


def set_card_value(state: GameState, card_id: str, raw: Any) -> GameState:
    if state.find_card(card_id) is None:
        raise UnknownCard(f"Carte inconnue : {card_id}")
    value = to_int(raw)
    nxt = deepcopy(state)
    nxt.cards = [
        replace(card, value=value) if card.id == card_id else card
        for card in nxt.cards
    ]
    return nxt


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_player(state: GameState, player_id: str) -> Player:
    player = state.find_player(player_id)
    if player is None:
        raise UnknownPlayer(f"Joueur inconnu : {player_id}")
    return player


def _update_entry(state: GameState, player_id: str, **updates: int) -> GameState:
    _require_player(state, player_id)
    nxt = deepcopy(state)
    entry = nxt.find_player(player_id).ensure_round(nxt.config.current_round)
    for key, value in updates.items():
        setattr(entry, key, value)
    return nxt
