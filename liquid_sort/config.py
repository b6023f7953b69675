"""Tunable constants for the puzzle and the pygame window."""

import logging

# ===================== 可调参数 ===================== #
LAYERS_PER_BOTTLE = 4       # 每瓶高度 = 4 格
RANDOM_SEED = None          # 设为整数以复现实验，如 42

# 日志
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# 窗口尺寸（固定）
WINDOW_W, WINDOW_H = 1000, 860
FPS = 60

# 统一缩放（等比例缩小概念瓶子和瓶子图片）
SCALE = 0.75

# 原始（未缩放）概念尺寸
BASE_BOTTLE_WIDTH = 90
BASE_BOTTLE_HEIGHT = 360
BASE_INNER_PADDING = 5
BASE_SLOT_GAP = 6
BASE_FRAME_WIDTH = 100

BOTTLE_WIDTH = int(round(BASE_BOTTLE_WIDTH * SCALE))
BOTTLE_HEIGHT = int(round(BASE_BOTTLE_HEIGHT * SCALE))
INNER_PADDING = max(1, int(round(BASE_INNER_PADDING * SCALE)))
SLOT_GAP = max(1, int(round(BASE_SLOT_GAP * SCALE)))
FRAME_WIDTH = int(round(BASE_FRAME_WIDTH * SCALE))

# 布局：每行最多 8 个（hard 难度 12 瓶会分成两行）
MAX_PER_ROW = 8
ROW_VGAP = int(round(80 * SCALE))
H_GAP = int(round(22 * SCALE))
LIFT_OFFSET = -int(round(18 * SCALE))

# 瓶子外框图片（可选，放同目录）
USE_IMAGE_FRAME = True
FRAME_PATH = "bottle_frame.png"
FRAME_HEIGHT_SCALE = 1.16
FRAME_ALIGN_RATIO = 0.52

# ===================== 颜色与样式 ===================== #
BG_COLOR = (250, 250, 252)
BORDER_COLOR = (60, 60, 60)
TEXT_COLOR = (40, 40, 40)
LIFTED_TINT = (230, 230, 255)
LOCKED_TINT = (230, 255, 230)
PANEL_BG = (255, 255, 255)
PANEL_BORDER = (180, 180, 180)
BTN_BG = (235, 240, 255)
BTN_BORDER = (120, 140, 200)
BTN_ACTIVE_BG = (16, 185, 129)
BTN_TEXT = (20, 40, 80)
INFO_BG = (245, 245, 250)

# 液体颜色（键为 Color 的取值）
PALETTE = {
    "RED": (255, 85, 85),
    "BLUE": (85, 153, 255),
    "GREEN": (85, 221, 85),
    "YELLOW": (255, 221, 85),
    "PURPLE": (204, 85, 255),
    "PINK": (255, 119, 204),
    "BROWN": (170, 102, 51),
    "ORANGE": (255, 153, 68),
}
UNKNOWN_COLOR = (128, 128, 128)
