import random

import pytest

from liquid_sort.engine import make_board
from liquid_sort.models import GameState
from liquid_sort.difficulty import get_difficulty


@pytest.fixture
def rng():
    """Seeded random source so generated boards are reproducible."""
    return random.Random(1234)


@pytest.fixture
def make_state():
    """Build a GameState from nested lists (bottom to top)."""
    def _make(bottles, **kwargs):
        kwargs.setdefault("difficulty", get_difficulty("normal"))
        return GameState(board=make_board(bottles), **kwargs)
    return _make
