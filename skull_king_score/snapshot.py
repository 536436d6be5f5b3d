# skull_king_score/snapshot.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping

from .cards import BonusCard, card_to_dict, dict_to_card
from .inputs import clamp_number, to_int
from .state import (
    DEFAULT_ROUNDS,
    MAX_PLAYERS,
    MAX_ROUNDS,
    MIN_PLAYERS,
    MIN_ROUNDS,
    PLACEHOLDER_NAME,
    GameConfig,
    GameState,
    Phase,
    Player,
    RoundScore,
    new_player_id,
)

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """A persisted snapshot that cannot be turned back into a GameState."""


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def round_score_to_dict(entry: RoundScore) -> Dict[str, int]:
    return {"bid": entry.bid, "tricks": entry.tricks, "bonus": entry.bonus}


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "scores": {
            str(round_number): round_score_to_dict(entry)
            for round_number, entry in sorted(player.scores.items())
        },
    }


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """The full persisted snapshot; JSON-serializable."""
    return {
        "players": [player_to_dict(p) for p in state.players],
        "rounds": state.config.total_rounds,
        "currentRound": state.config.current_round,
        "phase": state.config.phase.value,
        "cards": [card_to_dict(c) for c in state.cards],
    }


def dumps(state: GameState) -> str:
    return json.dumps(state_to_dict(state), ensure_ascii=False, indent=2)


# ---------------------------------------------------------------------------
# Decoding (trust nothing from storage)
# ---------------------------------------------------------------------------


def state_from_dict(data: Any) -> GameState:
    """
    Rebuild a GameState from a snapshot, filling in defaults.

    `players` and `cards` are required; `rounds`, `currentRound` and `phase`
    default to 10, 1 and bids (the older `roundPhase` key is also read).
    Field values are coerced into range rather than rejected. Raises
    SnapshotError when the shape itself is unusable.
    """
    if not isinstance(data, Mapping):
        raise SnapshotError("snapshot must be a JSON object")

    raw_players = data.get("players")
    raw_cards = data.get("cards")
    if not isinstance(raw_players, list) or not isinstance(raw_cards, list):
        raise SnapshotError("snapshot needs 'players' and 'cards' lists")
    if not MIN_PLAYERS <= len(raw_players) <= MAX_PLAYERS:
        raise SnapshotError(
            f"snapshot has {len(raw_players)} players; "
            f"expected {MIN_PLAYERS} to {MAX_PLAYERS}"
        )

    total_rounds = clamp_number(
        data.get("rounds", DEFAULT_ROUNDS), MIN_ROUNDS, MAX_ROUNDS
    )
    current_round = clamp_number(data.get("currentRound", 1), 1, total_rounds)
    phase = _decode_phase(data.get("phase", data.get("roundPhase")))

    players = [_decode_player(raw) for raw in raw_players]
    ids = [p.id for p in players]
    if len(set(ids)) != len(ids):
        raise SnapshotError("snapshot has duplicate player ids")

    return GameState(
        players=players,
        cards=_decode_cards(raw_cards),
        config=GameConfig(
            total_rounds=total_rounds,
            current_round=current_round,
            phase=phase,
        ),
    )


def loads(text: str) -> GameState:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    return state_from_dict(data)


def _decode_phase(raw: Any) -> Phase:
    if raw is None:
        return Phase.BIDS
    try:
        return Phase(raw)
    except ValueError:
        logger.warning("Unknown phase %r in snapshot; using bids", raw)
        return Phase.BIDS


def _decode_player(raw: Any) -> Player:
    if not isinstance(raw, Mapping):
        raise SnapshotError("player entries must be objects")

    player_id = raw.get("id")
    name = raw.get("name")
    scores_raw = raw.get("scores") or {}
    if not isinstance(scores_raw, Mapping):
        raise SnapshotError(f"scores of player {player_id!r} must be an object")

    scores: Dict[int, RoundScore] = {}
    for key, entry in scores_raw.items():
        try:
            round_number = int(str(key).strip())
        except ValueError:
            round_number = 0
        if round_number < 1:
            logger.warning("Dropping score entry with bad round key %r", key)
            continue
        if not isinstance(entry, Mapping):
            logger.warning("Dropping malformed score entry for round %s", key)
            continue
        scores[round_number] = RoundScore(
            bid=clamp_number(entry.get("bid", 0), 0, round_number),
            tricks=clamp_number(entry.get("tricks", 0), 0, round_number),
            bonus=to_int(entry.get("bonus", 0)),
        )

    return Player(
        id=str(player_id) if player_id not in (None, "") else new_player_id(),
        name=str(name).strip() if isinstance(name, str) and name.strip() else PLACEHOLDER_NAME,
        scores=scores,
    )


def _decode_cards(raw_cards: List[Any]) -> List[BonusCard]:
    cards: List[BonusCard] = []
    seen = set()
    for raw in raw_cards:
        if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
            logger.warning("Dropping malformed card entry %r", raw)
            continue
        card_id = str(raw["id"])
        if card_id in seen:
            logger.warning("Dropping duplicate card %s", card_id)
            continue
        seen.add(card_id)
        cards.append(
            dict_to_card(
                {
                    "id": card_id,
                    "label": raw.get("label") or card_id,
                    "description": raw.get("description") or "",
                    "value": to_int(raw.get("value", 0)),
                    "group": raw.get("group") or "Base",
                }
            )
        )
    return cards
