# skull_king_score/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from . import actions
from .actions import ActionRejected, BonusTarget, UnknownPlayer
from .game_log import write_round_scores_csv
from .paths import phase_gate_enabled, resolve_data_path
from .scoring import calculate_round_score, standings, total_score
from .state import MAX_ROUNDS, MIN_ROUNDS, GameState, Player
from .store import JsonFileBackend, StateStore

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, argparse.Namespace], Optional[GameState]]

# --------------------------------------------------------------------------- #
# Rendering                                                                   #
# --------------------------------------------------------------------------- #


def render_board(state: GameState) -> str:
    """Crew, current round entries and running totals as plain text."""
    config = state.config
    lines = [
        f"Manche {config.current_round}/{config.total_rounds} "
        f"· Phase : {config.phase.label}",
        "",
        f"{'#':>2}  {'Joueur':<20} {'Annonce':>7} {'Plis':>5} {'Bonus':>6} "
        f"{'Manche':>7} {'Total':>7}",
    ]
    for seat, player in enumerate(state.players, start=1):
        entry = player.ensure_round(config.current_round)
        lines.append(
            f"{seat:>2}  {player.name[:20]:<20} {entry.bid:>7} {entry.tricks:>5} "
            f"{entry.bonus:>6} {calculate_round_score(entry, config.current_round):>7} "
            f"{total_score(player):>7}"
        )
    return "\n".join(lines)


def render_standings(state: GameState) -> str:
    lines = ["Classement :"]
    for rank, (player, total) in enumerate(standings(state), start=1):
        lines.append(f"{rank:>2}. {player.name} - {total} pts")
    return "\n".join(lines)


def render_cards(state: GameState) -> str:
    lines = ["Cartes spéciales & extensions :"]
    for card in state.cards:
        lines.append(f"  {card.id:<16} {card}")
        if card.description:
            lines.append(f"  {'':<16} {card.description}")
    return "\n".join(lines)


# --------------------------------------------------------------------------- #
# Player lookup                                                               #
# --------------------------------------------------------------------------- #


def resolve_player(state: GameState, ref: str) -> Player:
    """
    Find a player by id, 1-based seat number or (case-insensitive) name.
    """
    player = state.find_player(ref)
    if player is not None:
        return player
    if ref.isdigit():
        seat = int(ref)
        if 1 <= seat <= state.num_players:
            return state.players[seat - 1]
    matches = [p for p in state.players if p.name.casefold() == ref.casefold()]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise UnknownPlayer(f"Plusieurs joueurs s'appellent {ref!r}; utilise le numéro.")
    raise UnknownPlayer(f"Joueur inconnu : {ref}")


# --------------------------------------------------------------------------- #
# Command handlers                                                            #
# --------------------------------------------------------------------------- #
#
# A handler returns the new state to save, or None for read-only commands.


def _confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{prompt} [o/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"o", "oui", "y", "yes"}


def _cmd_show(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    print(render_board(state))
    print()
    print(render_standings(state))
    if args.cards:
        print()
        print(render_cards(state))
    return None


def _cmd_cards(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    print(render_cards(state))
    return None


def _cmd_new(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    if not _confirm("Commencer une nouvelle partie ?", args.yes):
        print("Annulé.")
        return None
    return actions.new_game()


def _cmd_reset(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    if not _confirm("Réinitialiser tous les scores ?", args.yes):
        print("Annulé.")
        return None
    return actions.reset_game(state)


def _cmd_add_player(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.add_player(state, args.name)


def _cmd_remove_player(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.remove_player(state, resolve_player(state, args.player).id)


def _cmd_rename(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.rename_player(
        state, resolve_player(state, args.player).id, args.name
    )


def _cmd_bid(state: GameState, args: argparse.Namespace) -> GameState:
    player = resolve_player(state, args.player)
    return actions.set_bid(state, player.id, args.value, gate_phases=args.gate)


def _cmd_tricks(state: GameState, args: argparse.Namespace) -> GameState:
    player = resolve_player(state, args.player)
    return actions.set_tricks(state, player.id, args.value, gate_phases=args.gate)


def _cmd_bonus(state: GameState, args: argparse.Namespace) -> GameState:
    player = resolve_player(state, args.player)
    return actions.set_bonus(state, player.id, args.value, gate_phases=args.gate)


def _cmd_apply_card(state: GameState, args: argparse.Namespace) -> GameState:
    target = (
        BonusTarget(resolve_player(state, args.player).id)
        if args.player
        else None
    )
    return actions.apply_bonus_card(state, target, args.card, gate_phases=args.gate)


def _cmd_card_value(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.set_card_value(state, args.card, args.value)


def _cmd_round(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.select_round(state, args.round)


def _cmd_rounds(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.set_total_rounds(state, args.total)


def _cmd_phase(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.toggle_phase(state)


def _cmd_next_round(state: GameState, args: argparse.Namespace) -> GameState:
    return actions.complete_round(state, gate_phases=args.gate)


def _cmd_export(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    path = resolve_data_path(args.path, args.data_dir)
    count = write_round_scores_csv(state, path)
    logger.info("Wrote %d rows to %s", count, path)
    print(path)
    return None


def _cmd_chart(state: GameState, args: argparse.Namespace) -> Optional[GameState]:
    from .charts import plot_running_totals

    csv_path = resolve_data_path(args.csv, args.data_dir)
    if args.output:
        output = resolve_data_path(args.output, args.data_dir)
    else:
        output = csv_path.with_suffix(".png")
    print(plot_running_totals(csv_path, output))
    return None


# --------------------------------------------------------------------------- #
# Argument parsing                                                            #
# --------------------------------------------------------------------------- #


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="skull-king-score",
        description="Keep score of a Skull King game from the terminal.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for the saved game (default: $SKULL_KING_DATA_DIR "
        "or ~/.skull_king_score).",
    )
    parser.add_argument(
        "--key",
        type=str,
        default=None,
        help="Storage key of the saved game (default: $SKULL_KING_STORAGE_KEY).",
    )
    gate = parser.add_mutually_exclusive_group()
    gate.add_argument(
        "--phase-gate",
        dest="gate",
        action="store_true",
        default=None,
        help="Only allow bids in the bids phase and tricks/bonus in the "
        "results phase (default unless SKULL_KING_PHASE_GATE=0).",
    )
    gate.add_argument(
        "--no-phase-gate",
        dest="gate",
        action="store_false",
        default=None,
        help="Allow editing bids, tricks and bonus at any time.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: WARNING.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="Show the score board.")
    p.add_argument("--cards", action="store_true", help="Also list bonus cards.")
    p.set_defaults(handler=_cmd_show)

    p = sub.add_parser("new", help="Start a fresh game with the default crew.")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask.")
    p.set_defaults(handler=_cmd_new)

    p = sub.add_parser("reset", help="Clear every score and go back to round 1.")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask.")
    p.set_defaults(handler=_cmd_reset)

    p = sub.add_parser("add-player", help="Add a player (8 at most).")
    p.add_argument("name", nargs="?", default=None)
    p.set_defaults(handler=_cmd_add_player)

    p = sub.add_parser("remove-player", help="Remove a player (2 at least).")
    p.add_argument("player", help="Seat number, name or id.")
    p.set_defaults(handler=_cmd_remove_player)

    p = sub.add_parser("rename", help="Rename a player.")
    p.add_argument("player", help="Seat number, name or id.")
    p.add_argument("name")
    p.set_defaults(handler=_cmd_rename)

    for name, handler, help_text in (
        ("bid", _cmd_bid, "Set a player's bid for the current round."),
        ("tricks", _cmd_tricks, "Set the tricks a player won this round."),
        ("bonus", _cmd_bonus, "Set a player's bonus for the current round."),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("player", help="Seat number, name or id.")
        p.add_argument("value")
        p.set_defaults(handler=handler)

    p = sub.add_parser(
        "apply-card",
        help="Add a bonus card's value to a player's bonus this round.",
    )
    p.add_argument("card", help="Card id (see `cards`).")
    p.add_argument(
        "--player",
        "-p",
        default=None,
        help="Bonus entry to credit: seat number, name or id.",
    )
    p.set_defaults(handler=_cmd_apply_card)

    p = sub.add_parser("cards", help="List bonus cards and their values.")
    p.set_defaults(handler=_cmd_cards)

    p = sub.add_parser("card-value", help="Change a bonus card's value.")
    p.add_argument("card", help="Card id.")
    p.add_argument("value")
    p.set_defaults(handler=_cmd_card_value)

    p = sub.add_parser("round", help="Jump to a round (back to bids phase).")
    p.add_argument("round")
    p.set_defaults(handler=_cmd_round)

    p = sub.add_parser(
        "rounds",
        help=f"Set the number of rounds ({MIN_ROUNDS}-{MAX_ROUNDS}).",
    )
    p.add_argument("total")
    p.set_defaults(handler=_cmd_rounds)

    p = sub.add_parser("phase", help="Switch between bids and results.")
    p.set_defaults(handler=_cmd_phase)

    p = sub.add_parser("next-round", help="Close the round and start the next.")
    p.set_defaults(handler=_cmd_next_round)

    p = sub.add_parser("export", help="Write the score sheet as CSV.")
    p.add_argument(
        "path",
        nargs="?",
        default="skull_king_scores.csv",
        help="Output CSV; relative paths land in the data directory.",
    )
    p.set_defaults(handler=_cmd_export)

    p = sub.add_parser("chart", help="Plot running totals from an exported CSV.")
    p.add_argument("csv", help="CSV written by `export`.")
    p.add_argument("--output", "-o", default=None, help="Image path (PNG).")
    p.set_defaults(handler=_cmd_chart)

    args = parser.parse_args(argv)
    if args.gate is None:
        args.gate = phase_gate_enabled()
    return args


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #


def run(args: argparse.Namespace, store: StateStore) -> int:
    """Load, apply one command, save. Returns the process exit status."""
    state = store.load_or_default()
    handler: Handler = args.handler

    try:
        new_state = handler(state, args)
    except ActionRejected as exc:
        print(exc.notice, file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Command %s failed: %s", args.command, exc)
        return 1

    if new_state is not None:
        store.save(new_state)
        print(render_board(new_state))
    return 0


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    store = StateStore(JsonFileBackend(args.data_dir), key=args.key)
    return run(args, store)


if __name__ == "__main__":
    raise SystemExit(main())
