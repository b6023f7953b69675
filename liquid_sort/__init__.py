"""Liquid Sort: a water-sort puzzle engine with a small pygame front end."""

from liquid_sort.difficulty import DEFAULT_TIER, DIFFICULTIES, TIERS, get_difficulty
from liquid_sort.engine import (
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
from liquid_sort.game import Game
from liquid_sort.models import (
    Bottle,
    Color,
    Difficulty,
    GameState,
    InvalidBottle,
    InvalidDifficulty,
    InvalidIndex,
    LiquidSortError,
)

__version__ = "0.1.0"
