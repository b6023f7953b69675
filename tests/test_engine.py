"""
Tests for the puzzle rules in liquid_sort.engine.

- generate: board shape, unit counts, reproducibility
- pour: run length, capping, legality, conservation
- select: selection state machine and move counting
- check_win / is_solved: win detection and level bump
- reset_game / start_next_level / new_game / opening_state
"""

import random
from collections import Counter

import pytest

from liquid_sort import engine
from liquid_sort.difficulty import DIFFICULTIES, get_difficulty
from liquid_sort.engine import (
    OPENING_BOARD,
    check_win,
    generate,
    is_solved,
    make_board,
    new_game,
    opening_state,
    pour,
    reset_game,
    select,
    start_next_level,
)
from liquid_sort.models import COLOR_ORDER, Bottle, Difficulty, InvalidDifficulty, InvalidIndex


def layers(board):
    return [list(b.layers) for b in board]


def unit_count(board):
    return sum(len(b) for b in board)


# ============================================================================
# generate
# ============================================================================

@pytest.mark.parametrize("tier, dealt_empty", [("easy", 2), ("normal", 2), ("hard", 4)])
def test_generated_board_shape(tier, dealt_empty, rng):
    d = get_difficulty(tier)
    board = generate(d, rng)

    assert len(board) == d.bottle_count
    assert unit_count(board) == 4 * d.color_count
    assert sum(1 for b in board if b.is_empty()) == dealt_empty
    # 有色瓶在前、全满；其余为空瓶
    assert all(len(b) == 4 for b in board[:d.color_count])
    assert all(b.is_empty() for b in board[d.color_count:])

    counts = Counter(unit for b in board for unit in b)
    assert counts == Counter({c: 4 for c in COLOR_ORDER[:d.color_count]})


def test_hard_board_has_eight_colors_and_four_empty(rng):
    board = generate(get_difficulty("hard"), rng)
    assert len(board) == 12
    assert sum(1 for b in board if b.is_empty()) == 4
    assert sorted(Counter(u for b in board for u in b).values()) == [4] * 8


def test_surplus_filled_bottles_are_dealt_empty(rng):
    d = Difficulty("roomy", color_count=2, bottle_count=5, empty_bottles=1)
    board = generate(d, rng)
    assert [len(b) for b in board] == [4, 4, 0, 0, 0]


def test_zero_colors_deals_all_empty(rng):
    d = Difficulty("blank", color_count=0, bottle_count=3, empty_bottles=3)
    assert generate(d, rng) == (Bottle(), Bottle(), Bottle())


def test_generate_is_reproducible_with_seed():
    d = get_difficulty("hard")
    assert generate(d, random.Random(7)) == generate(d, random.Random(7))


def test_generate_varies_with_seed():
    d = get_difficulty("hard")
    boards = {generate(d, random.Random(seed)) for seed in range(5)}
    assert len(boards) > 1


def test_default_rng_is_shared_between_calls(monkeypatch):
    monkeypatch.setattr(engine, "_rng", random.Random(3))
    d = get_difficulty("easy")
    expected = random.Random(3)
    first = generate(d)
    second = generate(d)
    assert first == generate(d, expected)
    assert second == generate(d, expected)


@pytest.mark.parametrize("bad", [
    Difficulty("too-many-colors", color_count=9, bottle_count=11, empty_bottles=2),
    Difficulty("negative-colors", color_count=-1, bottle_count=2, empty_bottles=2),
    Difficulty("too-few-bottles", color_count=4, bottle_count=5, empty_bottles=2),
    Difficulty("negative", color_count=4, bottle_count=6, empty_bottles=-1),
    Difficulty("too-many-empty", color_count=4, bottle_count=3, empty_bottles=4),
])
def test_generate_rejects_impossible_difficulty(bad, rng):
    with pytest.raises(InvalidDifficulty):
        generate(bad, rng)


def test_invalid_difficulty_is_value_error():
    assert issubclass(InvalidDifficulty, ValueError)


# ============================================================================
# pour
# ============================================================================

def test_pour_single_top_unit_into_empty():
    board = make_board([["A", "A", "A", "B"], []])
    new_board, moved = pour(board, 0, 1)
    assert moved
    assert layers(new_board) == [["A", "A", "A"], ["B"]]
    # 原局面不变
    assert layers(board) == [["A", "A", "A", "B"], []]


def test_pour_whole_run_onto_matching_top():
    board = make_board([["C", "B", "B"], ["B"]])
    new_board, moved = pour(board, 0, 1)
    assert moved
    assert layers(new_board) == [["C"], ["B", "B", "B"]]


@pytest.mark.parametrize("run, target, expected_moved", [
    (3, ["B", "B"], 2),
    (3, ["B", "B", "B"], 1),
    (2, ["B"], 2),
    (1, [], 1),
    (4, [], 4),
])
def test_pour_is_capped_by_free_space(run, target, expected_moved):
    source = ["A"] * (4 - run) + ["B"] * run
    board = make_board([source, target])
    new_board, moved = pour(board, 0, 1)
    assert moved
    assert len(new_board[1]) - len(target) == expected_moved
    assert len(new_board[0]) == len(source) - expected_moved
    assert unit_count(new_board) == unit_count(board)


def test_pour_into_full_target_moves_nothing():
    board = make_board([["B"], ["B", "B", "B", "B"]])
    new_board, moved = pour(board, 0, 1)
    assert not moved
    assert new_board == board


def test_pour_onto_mismatched_top_moves_nothing():
    board = make_board([["A", "B"], ["C"]])
    new_board, moved = pour(board, 0, 1)
    assert not moved
    assert new_board == board


def test_pour_from_empty_or_to_self_moves_nothing():
    board = make_board([[], ["A"]])
    assert pour(board, 0, 1) == (board, False)
    assert pour(board, 1, 1) == (board, False)


@pytest.mark.parametrize("source, target", [(0, 2), (-1, 0), (0, 5), (1, "0")])
def test_pour_rejects_bad_index(source, target):
    board = make_board([["A"], []])
    with pytest.raises(InvalidIndex):
        pour(board, source, target)


def test_random_pours_conserve_units(rng):
    board = generate(get_difficulty("hard"), rng)
    before = Counter(u for b in board for u in b)
    for _ in range(500):
        board, _ = pour(board, rng.randrange(len(board)), rng.randrange(len(board)))
        assert all(0 <= len(b) <= 4 for b in board)
    assert Counter(u for b in board for u in b) == before


# ============================================================================
# is_solved / check_win
# ============================================================================

def test_is_solved_examples():
    assert is_solved(make_board([["A"] * 4, [], ["B"] * 4]))
    assert not is_solved(make_board([["A", "A", "A", "B"]]))
    # 同色但未满
    assert not is_solved(make_board([["A", "A"], ["A", "A"]]))
    assert is_solved(make_board([[], []]))


def test_check_win_bumps_level_once(make_state):
    state = make_state([["A"] * 4, []], level=3, selected=0)
    won = check_win(state)
    assert won.won
    assert won.level == 4
    assert won.selected is None
    # 重复检查不再加关卡
    assert check_win(won) is won
    assert check_win(check_win(won)).level == 4


def test_check_win_leaves_unsolved_state_alone(make_state):
    state = make_state([["A", "B"], []])
    assert check_win(state) is state


# ============================================================================
# select
# ============================================================================

def test_select_non_empty_bottle(make_state):
    state = make_state([["A"], []])
    assert select(state, 0).selected == 0


def test_select_empty_bottle_is_ignored(make_state):
    state = make_state([["A"], []])
    assert select(state, 1) == state


def test_select_twice_toggles_back(make_state):
    state = make_state([["A", "B"], ["C"], []])
    assert select(select(state, 0), 0) == state


def test_select_pours_and_counts_move(make_state):
    state = make_state([["A", "A", "A", "B"], [], ["C"]])
    after = select(select(state, 0), 1)
    assert layers(after.board) == [["A", "A", "A"], ["B"], ["C"]]
    assert after.selected is None
    assert after.moves == 1
    assert not after.won


def test_multi_unit_pour_counts_one_move(make_state):
    state = make_state([["C", "B", "B", "B"], []])
    after = select(select(state, 0), 1)
    assert layers(after.board) == [["C"], ["B", "B", "B"]]
    assert after.moves == 1


def test_failed_pour_clears_selection_without_move(make_state):
    state = make_state([["A", "B"], ["C", "C", "C", "C"], ["D"]])
    into_full = select(select(state, 0), 1)
    assert into_full.board == state.board
    assert into_full.selected is None
    assert into_full.moves == 0

    mismatch = select(select(state, 0), 2)
    assert mismatch.board == state.board
    assert mismatch.selected is None
    assert mismatch.moves == 0


def test_pour_into_empty_target_from_selection(make_state):
    state = make_state([["A", "B"], []], selected=0)
    after = select(state, 1)
    assert layers(after.board) == [["A"], ["B"]]


def test_winning_pour_sets_won_and_level(make_state):
    state = make_state([["A", "A", "A"], ["A"], ["B"] * 4], level=2, moves=9)
    after = select(select(state, 1), 0)
    assert after.won
    assert after.level == 3
    assert after.moves == 10
    assert after.selected is None


def test_input_ignored_once_won(make_state):
    state = make_state([["A"] * 4, []], won=True, level=2)
    assert select(state, 0) is state


@pytest.mark.parametrize("index", [-1, 2, 99, None, "1", 1.0, True])
def test_select_rejects_bad_index(make_state, index):
    state = make_state([["A"], []])
    with pytest.raises(InvalidIndex):
        select(state, index)


def test_select_does_not_mutate_input(make_state):
    state = make_state([["A", "B"], []])
    snapshot = layers(state.board)
    select(select(state, 0), 1)
    assert layers(state.board) == snapshot
    assert state.selected is None


# ============================================================================
# new_game / reset_game / start_next_level / opening_state
# ============================================================================

def test_new_game(rng):
    state = new_game("easy", rng=rng)
    assert state.difficulty.name == "easy"
    assert len(state.board) == 6
    assert (state.moves, state.level, state.selected) == (0, 1, None)


def test_new_game_unknown_tier_uses_normal(rng):
    assert new_game("legendary", rng=rng).difficulty.name == "normal"


def test_reset_game_keeps_level_only(make_state, rng):
    state = make_state([["A"] * 4, []], moves=12, level=5, won=True,
                       difficulty=get_difficulty("easy"))
    fresh = reset_game(state, rng=rng)
    assert fresh.level == 5
    assert fresh.moves == 0
    assert fresh.selected is None
    assert fresh.difficulty.name == "easy"
    assert len(fresh.board) == 6


def test_reset_game_with_new_difficulty(make_state, rng):
    state = make_state([["A"], []], level=2)
    fresh = reset_game(state, get_difficulty("hard"), rng=rng)
    assert fresh.difficulty.name == "hard"
    assert len(fresh.board) == 12
    assert fresh.level == 2


def test_start_next_level_from_won_state(make_state, rng):
    state = make_state([["A"] * 4, []], won=True, level=4, moves=20,
                       difficulty=get_difficulty("hard"))
    nxt = start_next_level(state, rng=rng)
    assert not nxt.won
    assert nxt.level == 4
    assert nxt.moves == 0
    assert nxt.difficulty.name == "hard"
    assert len(nxt.board) == 12


def test_start_next_level_ignored_before_win(make_state, rng):
    state = make_state([["A", "B"], []])
    assert start_next_level(state, rng=rng) is state


def test_opening_state():
    state = opening_state()
    assert state.board is OPENING_BOARD
    assert len(state.board) == 10
    assert sum(1 for b in state.board if b.is_empty()) == 2
    assert Counter(u for b in state.board for u in b) == Counter({c: 4 for c in COLOR_ORDER})
    assert (state.level, state.moves, state.won) == (1, 0, False)
    assert state.difficulty.name == "normal"
