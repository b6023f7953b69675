"""
Difficulty tiers and their generation parameters.
"""

import logging
from typing import Dict, Optional, Tuple

from liquid_sort.models import Difficulty

logger = logging.getLogger(__name__)

DIFFICULTIES: Dict[str, Difficulty] = {
    "easy": Difficulty("easy", color_count=4, bottle_count=6, empty_bottles=2),
    "normal": Difficulty("normal", color_count=6, bottle_count=8, empty_bottles=2),
    "hard": Difficulty("hard", color_count=8, bottle_count=12, empty_bottles=2),
}

# 按钮显示顺序
TIERS: Tuple[str, ...] = ("easy", "normal", "hard")

# 未知难度一律回落到 normal，不报错
DEFAULT_TIER = "normal"


def get_difficulty(tier: Optional[str] = None) -> Difficulty:
    """Look up a tier by name; anything unrecognized maps to ``DEFAULT_TIER``."""
    if tier in DIFFICULTIES:
        return DIFFICULTIES[tier]
    if tier is not None:
        logger.info("Unknown difficulty %r, using %r", tier, DEFAULT_TIER)
    return DIFFICULTIES[DEFAULT_TIER]
