import pytest

from skull_king_score import actions
from skull_king_score.actions import (
    BonusTarget,
    LastRoundReached,
    NoBonusTarget,
    PhaseMismatch,
    PlayerLimitReached,
    UnknownCard,
    UnknownPlayer,
)
from skull_king_score.scoring import total_score
from skull_king_score.snapshot import state_to_dict
from skull_king_score.state import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLACEHOLDER_NAME,
    GameState,
    Phase,
    RoundScore,
)


def _at_round(round_number: int, phase: Phase = Phase.BIDS) -> GameState:
    state = actions.new_game()
    state.config.current_round = round_number
    state.config.phase = phase
    return state


def test_new_game_defaults():
    state = actions.new_game()
    assert [p.name for p in state.players] == [
        "Capitaine Anne",
        "Barbe Noire",
        "Mousse Jack",
    ]
    assert len({p.id for p in state.players}) == 3
    assert state.config.total_rounds == 10
    assert state.config.current_round == 1
    assert state.config.phase is Phase.BIDS
    assert len(state.cards) == 9


def test_add_player_names_next_pirate():
    state = actions.add_player(actions.new_game())
    assert state.num_players == 4
    assert state.players[-1].name == "Pirate 4"
    assert state.players[-1].scores == {}

    named = actions.add_player(state, "Mary Read")
    assert named.players[-1].name == "Mary Read"


def test_ninth_player_is_rejected():
    state = actions.new_game()
    while state.num_players < MAX_PLAYERS:
        state = actions.add_player(state)

    with pytest.raises(PlayerLimitReached) as excinfo:
        actions.add_player(state)
    assert excinfo.value.notice == "Le navire est plein !"
    assert state.num_players == MAX_PLAYERS


def test_remove_player_down_to_two_then_rejected():
    state = actions.new_game()
    state = actions.remove_player(state, state.players[0].id)
    assert state.num_players == MIN_PLAYERS
    assert state.players[0].name == "Barbe Noire"

    with pytest.raises(PlayerLimitReached):
        actions.remove_player(state, state.players[0].id)
    assert state.num_players == MIN_PLAYERS


def test_remove_unknown_player():
    with pytest.raises(UnknownPlayer):
        actions.remove_player(actions.new_game(), "nobody")


def test_rename_player_and_placeholder():
    state = actions.new_game()
    pid = state.players[1].id

    renamed = actions.rename_player(state, pid, "Edward Teach")
    assert renamed.find_player(pid).name == "Edward Teach"

    cleared = actions.rename_player(renamed, pid, "   ")
    assert cleared.find_player(pid).name == PLACEHOLDER_NAME


def test_updates_do_not_mutate_input():
    state = actions.new_game()
    before = state_to_dict(state)
    pid = state.players[0].id

    actions.set_bid(state, pid, "1")
    actions.add_player(state)
    actions.rename_player(state, pid, "Autre")
    actions.toggle_phase(state)
    actions.set_card_value(state, "pirate", "40")
    actions.reset_game(state)

    assert state_to_dict(state) == before


def test_bid_clamped_to_current_round():
    state = _at_round(3)
    pid = state.players[0].id

    state = actions.set_bid(state, pid, "15")
    assert state.find_player(pid).scores[3].bid == 3

    state = actions.set_bid(state, pid, "-5")
    assert state.find_player(pid).scores[3].bid == 0

    state = actions.set_bid(state, pid, "pas un nombre")
    assert state.find_player(pid).scores[3].bid == 0


def test_entry_is_created_lazily():
    state = _at_round(2)
    pid = state.players[0].id
    assert state.find_player(pid).scores == {}

    state = actions.set_bid(state, pid, "1")
    assert state.find_player(pid).scores == {2: RoundScore(bid=1, tricks=0, bonus=0)}


def test_tricks_and_bonus_in_results_phase():
    state = _at_round(5, Phase.RESULTS)
    pid = state.players[0].id

    state = actions.set_tricks(state, pid, "9")
    state = actions.set_bonus(state, pid, "abc")
    entry = state.find_player(pid).scores[5]
    assert entry.tricks == 5
    assert entry.bonus == 0

    state = actions.set_bonus(state, pid, "-25")
    assert state.find_player(pid).scores[5].bonus == -25


def test_phase_gate_blocks_out_of_phase_edits():
    bids = _at_round(2, Phase.BIDS)
    results = _at_round(2, Phase.RESULTS)
    pid = bids.players[0].id

    with pytest.raises(PhaseMismatch):
        actions.set_tricks(bids, pid, "1")
    with pytest.raises(PhaseMismatch):
        actions.set_bonus(bids, pid, "20")
    with pytest.raises(PhaseMismatch):
        actions.set_bid(results, pid, "1")


def test_without_phase_gate_everything_is_editable():
    state = _at_round(2, Phase.BIDS)
    pid = state.players[0].id

    state = actions.set_tricks(state, pid, "1", gate_phases=False)
    state = actions.set_bonus(state, pid, "20", gate_phases=False)
    state = actions.set_bid(state, pid, "1", gate_phases=False)
    assert state.find_player(pid).scores[2] == RoundScore(bid=1, tricks=1, bonus=20)


def test_full_round_scores():
    state = _at_round(5)
    anne, barbe, jack = (p.id for p in state.players)
    state = actions.set_bid(state, anne, "3")
    state = actions.set_bid(state, barbe, "3")
    state = actions.set_bid(state, jack, "0")
    state = actions.toggle_phase(state)
    state = actions.set_tricks(state, anne, "3")
    state = actions.set_bonus(state, anne, "20")
    state = actions.set_tricks(state, barbe, "1")
    state = actions.set_tricks(state, jack, "0")

    assert total_score(state.find_player(anne)) == 80
    assert total_score(state.find_player(barbe)) == -20
    assert total_score(state.find_player(jack)) == 50


def test_apply_bonus_card_accumulates():
    state = _at_round(4, Phase.RESULTS)
    pid = state.players[2].id
    target = BonusTarget(pid)

    state = actions.apply_bonus_card(state, target, "pirate")
    state = actions.apply_bonus_card(state, target, "pirate")
    state = actions.apply_bonus_card(state, target, "mermaid")
    assert state.find_player(pid).scores[4].bonus == 20 + 20 + 50


def test_apply_bonus_card_uses_edited_value():
    state = _at_round(1, Phase.RESULTS)
    state = actions.set_card_value(state, "kraken", "-10")
    pid = state.players[0].id

    state = actions.apply_bonus_card(state, BonusTarget(pid), "kraken")
    assert state.find_player(pid).scores[1].bonus == -10


def test_apply_bonus_card_without_target_is_rejected():
    state = _at_round(1, Phase.RESULTS)
    with pytest.raises(NoBonusTarget):
        actions.apply_bonus_card(state, None, "pirate")
    assert all(p.scores == {} for p in state.players)


def test_apply_unknown_card():
    state = _at_round(1, Phase.RESULTS)
    with pytest.raises(UnknownCard):
        actions.apply_bonus_card(state, BonusTarget(state.players[0].id), "joker")


def test_set_card_value_coerces():
    state = actions.set_card_value(actions.new_game(), "whale", "n/a")
    assert state.find_card("whale").value == 0
    state = actions.set_card_value(state, "whale", "35")
    assert state.find_card("whale").value == 35

    with pytest.raises(UnknownCard):
        actions.set_card_value(state, "joker", "5")


def test_select_round_resets_phase_and_clamps():
    state = _at_round(2, Phase.RESULTS)
    state = actions.select_round(state, "7")
    assert state.config.current_round == 7
    assert state.config.phase is Phase.BIDS

    assert actions.select_round(state, "99").config.current_round == 10
    assert actions.select_round(state, "0").config.current_round == 1


def test_set_total_rounds_clamps_current_round():
    state = _at_round(9, Phase.RESULTS)
    state = actions.set_total_rounds(state, "6")
    assert state.config.total_rounds == 6
    assert state.config.current_round == 6
    assert state.config.phase is Phase.BIDS


def test_set_total_rounds_range():
    state = actions.new_game()
    assert actions.set_total_rounds(state, "3").config.total_rounds == 5
    assert actions.set_total_rounds(state, "20").config.total_rounds == 14
    # Current round is below the new total: untouched
    kept = actions.set_total_rounds(_at_round(4, Phase.RESULTS), "12")
    assert kept.config.current_round == 4
    assert kept.config.phase is Phase.RESULTS


def test_toggle_phase_round_trip():
    state = actions.new_game()
    state = actions.toggle_phase(state)
    assert state.config.phase is Phase.RESULTS
    state = actions.toggle_phase(state)
    assert state.config.phase is Phase.BIDS


def test_complete_round_requires_results_phase():
    with pytest.raises(PhaseMismatch):
        actions.complete_round(_at_round(1, Phase.BIDS))

    state = actions.complete_round(_at_round(1, Phase.RESULTS))
    assert state.config.current_round == 2
    assert state.config.phase is Phase.BIDS

    ungated = actions.complete_round(_at_round(1, Phase.BIDS), gate_phases=False)
    assert ungated.config.current_round == 2


def test_complete_round_stops_at_last_round():
    state = _at_round(10, Phase.RESULTS)
    with pytest.raises(LastRoundReached):
        actions.complete_round(state)
    assert state.config.current_round == 10


def test_reset_game_keeps_crew_and_cards():
    state = _at_round(3, Phase.RESULTS)
    state = actions.set_card_value(state, "loot", "25")
    pid = state.players[0].id
    state = actions.set_tricks(state, pid, "2")

    reset = actions.reset_game(state)
    assert [p.id for p in reset.players] == [p.id for p in state.players]
    assert all(p.scores == {} for p in reset.players)
    assert reset.config.current_round == 1
    assert reset.config.phase is Phase.BIDS
    assert reset.find_card("loot").value == 25


def test_oversized_bid_and_tricks_are_clamped():
    huge = "9" * 5000
    state = _at_round(4)
    pid = state.players[0].id
    state = actions.set_bid(state, pid, huge)
    state = actions.set_tricks(state, pid, huge, gate_phases=False)
    entry = state.find_player(pid).scores[4]
    assert (entry.bid, entry.tricks) == (4, 4)
