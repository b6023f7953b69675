"""
Puzzle rules: board generation, selection, pouring and the win check.

Every function here is pure. State transitions take a ``GameState`` and
return a new one; the caller decides which state is current.
"""

import logging
import random
from dataclasses import replace
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from liquid_sort.config import LAYERS_PER_BOTTLE, RANDOM_SEED
from liquid_sort.difficulty import get_difficulty
from liquid_sort.models import (
    COLOR_ORDER,
    Board,
    Bottle,
    Color,
    Difficulty,
    GameState,
    InvalidDifficulty,
    InvalidIndex,
)

logger = logging.getLogger(__name__)


def make_board(bottles: Iterable[Iterable[Hashable]]) -> Board:
    """Build a board from nested lists, each listed bottom to top."""
    return tuple(Bottle(tuple(layers)) for layers in bottles)


# 开局固定关卡：10 瓶，8 色各 4 格，2 个空瓶
OPENING_BOARD: Board = make_board([
    [Color.RED, Color.BLUE, Color.GREEN, Color.YELLOW],
    [Color.PURPLE, Color.PINK, Color.BROWN, Color.ORANGE],
    [Color.YELLOW, Color.RED, Color.BLUE, Color.PURPLE],
    [Color.GREEN, Color.ORANGE, Color.PINK, Color.BROWN],
    [Color.BLUE, Color.GREEN, Color.PURPLE, Color.RED],
    [Color.BROWN, Color.ORANGE, Color.YELLOW, Color.PINK],
    [Color.ORANGE, Color.PURPLE, Color.YELLOW, Color.GREEN],
    [Color.PINK, Color.RED, Color.BROWN, Color.BLUE],
    [],
    [],
])


# ===================== 关卡生成 ===================== #
# 未传 rng 时共用一个随机源，只在导入时播种一次
_rng = random.Random(RANDOM_SEED)


def _default_rng() -> random.Random:
    return _rng


def validate_difficulty(difficulty: Difficulty) -> None:
    """Raise ``InvalidDifficulty`` unless ``difficulty`` can be dealt."""
    if not 0 <= difficulty.color_count <= len(COLOR_ORDER):
        raise InvalidDifficulty(
            f"{difficulty.name}: color_count must be in 0..{len(COLOR_ORDER)}, "
            f"got {difficulty.color_count}"
        )
    if not 0 <= difficulty.empty_bottles <= difficulty.bottle_count:
        raise InvalidDifficulty(
            f"{difficulty.name}: empty_bottles must be in 0..{difficulty.bottle_count}, "
            f"got {difficulty.empty_bottles}"
        )
    # 每种颜色正好 4 格（一瓶）：待装瓶数不能少于颜色数，多出的瓶子发成空瓶
    if difficulty.filled_bottles < difficulty.color_count:
        raise InvalidDifficulty(
            f"{difficulty.name}: {difficulty.filled_bottles} filled bottles "
            f"cannot hold {difficulty.color_count} colors"
        )


def generate(difficulty: Difficulty, rng: Optional[random.Random] = None) -> Board:
    """
    Build a shuffled board for ``difficulty``.

    Four units of each of the first ``color_count`` colors are shuffled
    (Fisher-Yates, via ``Random.shuffle``) and dealt into consecutive groups
    of four, one per filled bottle, followed by the empty bottles. When there
    are more filled bottles than colors (the hard tier: 8 colors, 10 filled)
    the surplus chunks are empty, so those bottles start empty too. The
    board is not checked for solvability.
    """
    validate_difficulty(difficulty)
    rng = rng or _default_rng()

    pool: List[Color] = []
    for color in COLOR_ORDER[:difficulty.color_count]:
        pool.extend([color] * LAYERS_PER_BOTTLE)
    rng.shuffle(pool)

    bottles = []
    for i in range(difficulty.filled_bottles):
        bottles.append(Bottle(tuple(pool[i * LAYERS_PER_BOTTLE:(i + 1) * LAYERS_PER_BOTTLE])))
    for _ in range(difficulty.empty_bottles):
        bottles.append(Bottle())
    return tuple(bottles)


# ===================== 规则 ===================== #
def _check_index(board: Sequence[Bottle], index) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(board):
        raise InvalidIndex(f"bottle index {index!r} out of range for {len(board)} bottles")


def can_pour(a: Bottle, b: Bottle) -> Tuple[bool, int]:
    """Whether ``a`` may pour into ``b``, and how many units would move."""
    if a.is_empty():
        return False, 0
    space = b.free_space()
    if space == 0:
        return False, 0
    if b.is_empty() or b.top_color() == a.top_color():
        return True, min(a.top_block_size(), space)
    return False, 0


def pour(board: Board, source: int, target: int) -> Tuple[Board, bool]:
    """
    Pour the top run of ``source`` into ``target``.

    Returns the new board and whether anything moved. The amount is capped by
    the target's free space; a full target, a color mismatch or
    ``source == target`` moves nothing and returns the board unchanged.
    """
    _check_index(board, source)
    _check_index(board, target)
    if source == target:
        return board, False

    a, b = board[source], board[target]
    ok, count = can_pour(a, b)
    if not ok or count == 0:
        return board, False

    color = a.top_color()
    bottles = list(board)
    bottles[source] = a.pop(count)
    bottles[target] = b.push(color, count)
    return tuple(bottles), True


def is_solved(board: Iterable[Bottle]) -> bool:
    # 所有瓶子为空，或满且同色
    return all(b.is_empty() or b.is_uniform_full() for b in board)


def check_win(state: GameState) -> GameState:
    """
    Mark ``state`` as won if its board is solved.

    Only the first transition bumps the level; an already won state, or one
    whose board is not solved, comes back unchanged.
    """
    if state.won or not is_solved(state.board):
        return state
    return replace(state, won=True, level=state.level + 1, selected=None)


def select(state: GameState, index: int) -> GameState:
    """
    Apply a click on bottle ``index``.

    With nothing selected a non-empty bottle becomes the source; clicking
    the source again deselects it; clicking any other bottle attempts a
    pour and always clears the selection. Input is ignored once won.
    """
    _check_index(state.board, index)
    if state.won:
        return state

    if state.selected is None:
        if state.board[index].is_empty():
            return state
        return replace(state, selected=index)

    if state.selected == index:
        return replace(state, selected=None)

    board, moved = pour(state.board, state.selected, index)
    if not moved:
        return replace(state, selected=None)
    return check_win(replace(state, board=board, selected=None, moves=state.moves + 1))


# ===================== 开局与重置 ===================== #
def new_game(tier: Optional[str] = None, level: int = 1,
             rng: Optional[random.Random] = None) -> GameState:
    difficulty = get_difficulty(tier)
    state = GameState(board=generate(difficulty, rng), difficulty=difficulty, level=level)
    return check_win(state)


def opening_state() -> GameState:
    """The fixed first board shown before any reset."""
    return GameState(board=OPENING_BOARD, difficulty=get_difficulty())


def reset_game(state: GameState, difficulty: Optional[Difficulty] = None,
               rng: Optional[random.Random] = None) -> GameState:
    """
    Deal a new board, keeping only the level counter.

    ``difficulty`` defaults to the one ``state`` was dealt with. Moves,
    selection and the won flag all start over.
    """
    difficulty = difficulty or state.difficulty
    fresh = GameState(board=generate(difficulty, rng), difficulty=difficulty, level=state.level)
    return check_win(fresh)


def start_next_level(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    if not state.won:
        logger.debug("Next level requested before the level was won; ignored")
        return state
    return reset_game(state, rng=rng)
