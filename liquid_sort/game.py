import logging
import random
from typing import Optional

from liquid_sort import engine
from liquid_sort.config import RANDOM_SEED
from liquid_sort.difficulty import get_difficulty
from liquid_sort.models import Board, Difficulty, GameState

logger = logging.getLogger(__name__)


class Game:
    """
    Holds the current ``GameState`` for a play session.

    The UI talks to this object only. Each input replaces ``self.state``
    with the state returned by the engine; nothing is patched in place.
    """

    def __init__(self, tier: Optional[str] = None, rng: Optional[random.Random] = None,
                 opening: bool = True):
        self.rng = rng or random.Random(RANDOM_SEED)
        if opening and tier is None:
            self.state = engine.opening_state()
        else:
            self.state = engine.new_game(tier, rng=self.rng)
        self.message = ""
        self._refresh_message()

    # ----------- 只读状态 ----------- #
    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def selected(self) -> Optional[int]:
        return self.state.selected

    @property
    def moves(self) -> int:
        return self.state.moves

    @property
    def won(self) -> bool:
        return self.state.won

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def difficulty(self) -> Difficulty:
        return self.state.difficulty

    def _refresh_message(self):
        if self.state.won:
            self.message = "You win!"
        else:
            d = self.state.difficulty
            self.message = f"Level {self.level} | {d.name.title()} | {len(self.board)} bottles"

    def win_summary(self) -> Optional[str]:
        # 胜利时 level 已经 +1，完成的是上一关
        if not self.won:
            return None
        return f"Completed level {self.level - 1} in {self.moves} moves!"

    # ----------- 交互 ----------- #
    def click_bottle(self, idx: int) -> GameState:
        before = self.state
        self.state = engine.select(before, idx)
        if self.state.moves != before.moves:
            logger.debug("Pour %s -> %s (moves=%d)", before.selected, idx, self.state.moves)
        if self.state.won and not before.won:
            logger.info("Level %d cleared in %d moves", before.level, self.state.moves)
        self._refresh_message()
        return self.state

    def new_game(self, tier: Optional[str] = None) -> GameState:
        """Restart, switching to ``tier`` when given (unknown tiers mean normal)."""
        difficulty = get_difficulty(tier) if tier is not None else self.difficulty
        self.state = engine.reset_game(self.state, difficulty, rng=self.rng)
        logger.info("New %s game: %d bottles, level %d",
                    difficulty.name, len(self.board), self.level)
        self._refresh_message()
        return self.state

    def restart(self) -> GameState:
        return self.new_game()

    def next_level(self) -> GameState:
        if not self.won:
            return self.state
        self.state = engine.start_next_level(self.state, rng=self.rng)
        logger.info("Starting level %d (%s)", self.level, self.difficulty.name)
        self._refresh_message()
        return self.state
