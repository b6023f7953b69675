"""
Immutable data types for the puzzle: colors, bottles, difficulties and game state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Optional, Tuple

from liquid_sort.config import LAYERS_PER_BOTTLE


# ===================== 错误类型 ===================== #
class LiquidSortError(Exception):
    """Base class for errors raised by the puzzle engine."""


class InvalidIndex(LiquidSortError, IndexError):
    """A bottle index outside the board."""


class InvalidDifficulty(LiquidSortError, ValueError):
    """A difficulty whose parameters cannot produce a board."""


class InvalidBottle(LiquidSortError, ValueError):
    """Too many units for a bottle, or a pop/push past its bounds."""


# ===================== 颜色 ===================== #
class Color(str, Enum):
    RED = "RED"
    BLUE = "BLUE"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    PURPLE = "PURPLE"
    PINK = "PINK"
    BROWN = "BROWN"
    ORANGE = "ORANGE"

    def __str__(self) -> str:
        return self.value


# 生成时按此顺序截取前 color_count 种
COLOR_ORDER: Tuple[Color, ...] = tuple(Color)


# ===================== 瓶子 ===================== #
@dataclass(frozen=True)
class Bottle:
    layers: Tuple[Hashable, ...] = ()  # 自底向上，最后一个元素为顶部

    def __post_init__(self):
        if not isinstance(self.layers, tuple):
            object.__setattr__(self, "layers", tuple(self.layers))
        if len(self.layers) > LAYERS_PER_BOTTLE:
            raise InvalidBottle(
                f"a bottle holds at most {LAYERS_PER_BOTTLE} units, got {len(self.layers)}"
            )

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    # ---------- 读状态 ---------- #
    def fill_level(self) -> int:
        return len(self.layers)

    def top_color(self) -> Optional[Hashable]:
        return self.layers[-1] if self.layers else None

    def free_space(self) -> int:
        return LAYERS_PER_BOTTLE - self.fill_level()

    def is_empty(self) -> bool:
        return self.fill_level() == 0

    def is_full(self) -> bool:
        return self.fill_level() == LAYERS_PER_BOTTLE

    def is_uniform_full(self) -> bool:
        # 满且颜色相同
        if not self.is_full():
            return False
        first = self.layers[0]
        return all(c == first for c in self.layers)

    def top_block_size(self) -> int:
        # 顶部连续同色块的尺寸（0 表示空）
        if self.is_empty():
            return 0
        color = self.layers[-1]
        size = 1
        for i in range(len(self.layers) - 2, -1, -1):
            if self.layers[i] == color:
                size += 1
            else:
                break
        return size

    # ---------- 写状态（返回新瓶子） ---------- #
    def pop(self, count: int) -> "Bottle":
        if count > self.fill_level():
            raise InvalidBottle(f"cannot pop {count} units from {self.fill_level()}")
        return Bottle(self.layers[:self.fill_level() - count])

    def push(self, color: Hashable, count: int) -> "Bottle":
        if count > self.free_space():
            raise InvalidBottle(f"cannot push {count} units into {self.free_space()} free slots")
        return Bottle(self.layers + (color,) * count)


Board = Tuple[Bottle, ...]


# ===================== 难度与局面 ===================== #
@dataclass(frozen=True)
class Difficulty:
    """Generation parameters for one difficulty tier."""
    name: str
    color_count: int
    bottle_count: int
    empty_bottles: int

    @property
    def filled_bottles(self) -> int:
        return self.bottle_count - self.empty_bottles


@dataclass(frozen=True)
class GameState:
    """
    One complete snapshot of a game.

    States are never modified: every transition in ``liquid_sort.engine``
    returns a new instance, so comparing two states or keeping an old one
    around is always safe.
    """
    board: Board
    difficulty: Difficulty
    selected: Optional[int] = None
    moves: int = 0
    won: bool = False
    level: int = 1

    @property
    def bottle_count(self) -> int:
        return len(self.board)
