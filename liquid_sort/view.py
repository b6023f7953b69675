import logging
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from liquid_sort.config import (
    BG_COLOR,
    BORDER_COLOR,
    BOTTLE_HEIGHT,
    BOTTLE_WIDTH,
    BTN_ACTIVE_BG,
    BTN_BG,
    BTN_BORDER,
    BTN_TEXT,
    FPS,
    FRAME_ALIGN_RATIO,
    FRAME_HEIGHT_SCALE,
    FRAME_PATH,
    FRAME_WIDTH,
    H_GAP,
    INFO_BG,
    INNER_PADDING,
    LAYERS_PER_BOTTLE,
    LIFT_OFFSET,
    LIFTED_TINT,
    LOCKED_TINT,
    MAX_PER_ROW,
    PALETTE,
    PANEL_BG,
    PANEL_BORDER,
    ROW_VGAP,
    SLOT_GAP,
    TEXT_COLOR,
    UNKNOWN_COLOR,
    USE_IMAGE_FRAME,
    WINDOW_H,
    WINDOW_W,
)
from liquid_sort.difficulty import TIERS
from liquid_sort.game import Game
from liquid_sort.models import Bottle

logger = logging.getLogger(__name__)


# ===================== 布局 ===================== #
def compute_grid_layout(n: int, tile_w: int, bottle_h: int, ground_y: int,
                        window_w: int = WINDOW_W) -> Tuple[List[Dict[str, int]], pygame.Rect]:
    """返回：positions, grid_rect
    规则：
    - 每行最多 MAX_PER_ROW 个；
    - 出现两行时平均分到两行；若为奇数，则把多出来的 1 个放在下行。
      例：9 -> [4,5]；12 -> [6,6]
    """
    positions = []
    if n <= 0:
        return positions, pygame.Rect(0, 0, 0, 0)

    if n <= MAX_PER_ROW:
        counts = [n]
        # 单行：垂直居中到两行情况下的中线
        by_bot = ground_y - bottle_h
        by_top = by_bot - bottle_h - ROW_VGAP
        top_y = (by_top + by_bot) // 2
    else:
        top_cnt = n // 2
        counts = [top_cnt, n - top_cnt]
        top_y = ground_y - bottle_h * len(counts) - ROW_VGAP * (len(counts) - 1)

    idx = 0
    left_list, right_list = [], []
    for r, cnt in enumerate(counts):
        row_w = cnt * tile_w + (cnt - 1) * H_GAP
        start_x = (window_w - row_w) // 2
        y_slot = top_y + r * (bottle_h + ROW_VGAP)
        for c in range(cnt):
            x_slot = start_x + c * (tile_w + H_GAP)
            positions.append({
                "idx": idx, "x_slot": x_slot, "y_slot": y_slot,
                "x_draw": x_slot + (tile_w - BOTTLE_WIDTH) // 2, "y_draw": y_slot,
            })
            idx += 1
        left_list.append(start_x)
        right_list.append(start_x + row_w)

    height = bottle_h * len(counts) + ROW_VGAP * (len(counts) - 1)
    grid_rect = pygame.Rect(min(left_list), top_y, max(right_list) - min(left_list), height)
    return positions, grid_rect


# ===================== 绘制与主循环 ===================== #
class View:
    def __init__(self, game: Game):
        pygame.init()
        self.game = game
        self.screen = pygame.display.set_mode((WINDOW_W, WINDOW_H))
        pygame.display.set_caption("Liquid Sort")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 24)
        self.big_font = pygame.font.SysFont(None, 36)

        self.bottle_w = BOTTLE_WIDTH
        self.bottle_h = BOTTLE_HEIGHT
        self.ground_y = WINDOW_H - 110

        # 瓶子外框图片（可选）
        self.frame_img = None
        self.frame_scaled_h = None
        self.frame_w = None
        if USE_IMAGE_FRAME:
            try:
                original = pygame.image.load(FRAME_PATH).convert_alpha()
            except (pygame.error, FileNotFoundError) as e:
                logger.warning("Could not load bottle frame %s: %s", FRAME_PATH, e)
            else:
                self.frame_scaled_h = int(self.bottle_h * FRAME_HEIGHT_SCALE)
                self.frame_w = FRAME_WIDTH
                self.frame_img = pygame.transform.smoothscale(
                    original, (self.frame_w, self.frame_scaled_h)
                )

        # 按钮热区，每帧绘制时更新
        self.btn_tier_rects: Dict[str, pygame.Rect] = {}
        self.btn_restart_rect: Optional[pygame.Rect] = None
        self.btn_next_rect: Optional[pygame.Rect] = None
        self.btn_exit_rect: Optional[pygame.Rect] = None

    @property
    def tile_w(self) -> int:
        return max(self.bottle_w, self.frame_w or self.bottle_w)

    def _layout(self):
        return compute_grid_layout(len(self.game.board), self.tile_w, self.bottle_h, self.ground_y)

    def run(self):
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit(); sys.exit()
                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self._handle_click(event.pos)

            self._draw()
            self.clock.tick(FPS)

    def _handle_click(self, pos):
        # 底部按钮（随时可用）
        for tier, rect in self.btn_tier_rects.items():
            if rect.collidepoint(pos):
                self.game.new_game(tier); return
        if self.btn_restart_rect and self.btn_restart_rect.collidepoint(pos):
            self.game.restart(); return

        # 胜利后只响应右侧面板
        if self.game.won:
            if self.btn_next_rect and self.btn_next_rect.collidepoint(pos):
                self.game.next_level(); return
            if self.btn_exit_rect and self.btn_exit_rect.collidepoint(pos):
                pygame.quit(); sys.exit()
            return

        idx = self._hit_test_bottle(pos)
        if idx is not None:
            self.game.click_bottle(idx)

    def _hit_test_bottle(self, pos) -> Optional[int]:
        positions, _ = self._layout()
        for d in positions:
            rect = pygame.Rect(d["x_slot"], d["y_slot"], self.tile_w, self.bottle_h)
            if rect.collidepoint(pos):
                return d["idx"]
        return None

    def _draw_liquid_layers(self, x: int, y: int, bottle: Bottle):
        draw_w = max(1, self.bottle_w - 2 * INNER_PADDING)
        base_x = x + INNER_PADDING

        total_gap = SLOT_GAP * (LAYERS_PER_BOTTLE - 1)
        usable_h = self.bottle_h - total_gap
        slot_h = usable_h // LAYERS_PER_BOTTLE
        remainder = usable_h - slot_h * LAYERS_PER_BOTTLE  # 余数加到最底层

        current_top = y + self.bottle_h
        for i in range(LAYERS_PER_BOTTLE):
            # 自底向上绘制
            h = slot_h + (remainder if i == 0 else 0)
            top_y = current_top - h
            if i < len(bottle):
                pygame.draw.rect(
                    self.screen,
                    PALETTE.get(bottle.layers[i], UNKNOWN_COLOR),
                    pygame.Rect(base_x, top_y, draw_w, h),
                    border_radius=4,
                )
            current_top = top_y - SLOT_GAP

    def _draw_bottle(self, idx: int, bottle: Bottle, x: int, y: int, lifted: bool):
        body = pygame.Rect(x, y, self.bottle_w, self.bottle_h)
        if lifted:
            pygame.draw.rect(self.screen, LIFTED_TINT, body, border_radius=10)
        elif bottle.is_uniform_full():
            pygame.draw.rect(self.screen, LOCKED_TINT, body, border_radius=10)

        self._draw_liquid_layers(x, y, bottle)

        if self.frame_img is None:
            pygame.draw.rect(self.screen, BORDER_COLOR, body, width=2, border_radius=10)
        else:
            img_x = x + (self.bottle_w - self.frame_w) // 2
            img_y = int(y + self.bottle_h * 0.5 - self.frame_scaled_h * FRAME_ALIGN_RATIO)
            self.screen.blit(self.frame_img, (img_x, img_y))

        if bottle.is_uniform_full():
            done_text = self.font.render("Ready!", True, (0, 120, 0))
            self.screen.blit(done_text, (x + self.bottle_w // 2 - done_text.get_width() // 2, y - 28))

        label = self.font.render(f"{idx + 1}", True, TEXT_COLOR)
        self.screen.blit(label, (x + self.bottle_w // 2 - label.get_width() // 2, y + self.bottle_h + 6))

    def _draw_button(self, rect: pygame.Rect, text: str, active: bool = False):
        pygame.draw.rect(self.screen, BTN_ACTIVE_BG if active else BTN_BG, rect, border_radius=10)
        pygame.draw.rect(self.screen, BTN_BORDER, rect, width=2, border_radius=10)
        txt = self.font.render(text, True, (255, 255, 255) if active else BTN_TEXT)
        self.screen.blit(txt, (rect.centerx - txt.get_width() // 2, rect.centery - txt.get_height() // 2))

    def _draw_win_panel(self, grid_rect: pygame.Rect):
        """胜利后的右侧面板（下一关 / 退出），贴在瓶子区域右侧。"""
        panel_w = 240
        panel_x = min(WINDOW_W - panel_w - 16, grid_rect.x + grid_rect.w + 24)
        panel_rect = pygame.Rect(panel_x, grid_rect.y, panel_w, max(grid_rect.h, 220))

        pygame.draw.rect(self.screen, PANEL_BG, panel_rect, border_radius=12)
        pygame.draw.rect(self.screen, PANEL_BORDER, panel_rect, width=1, border_radius=12)

        title = self.big_font.render("You win!", True, (0, 130, 0))
        self.screen.blit(title, (panel_rect.x + 20, panel_rect.y + 20))
        summary = self.font.render(self.game.win_summary() or "", True, TEXT_COLOR)
        self.screen.blit(summary, (panel_rect.x + 20, panel_rect.y + 56))

        btn_w, btn_h, gap = panel_w - 40, 44, 16
        self.btn_next_rect = pygame.Rect(panel_rect.x + 20, panel_rect.y + 90, btn_w, btn_h)
        self.btn_exit_rect = pygame.Rect(panel_rect.x + 20, panel_rect.y + 90 + btn_h + gap, btn_w, btn_h)
        self._draw_button(self.btn_next_rect, "Next level")
        self._draw_button(self.btn_exit_rect, "Exit")

    def _draw_bottom_bar(self):
        # 左：难度按钮；中：步数；右：重新开始
        btn_h, btn_w, margin = 48, 100, 16
        y = WINDOW_H - margin - btn_h

        self.btn_tier_rects = {}
        for i, tier in enumerate(TIERS):
            rect = pygame.Rect(margin + i * (btn_w + 8), y, btn_w, btn_h)
            self._draw_button(rect, tier.title(), active=tier == self.game.difficulty.name)
            self.btn_tier_rects[tier] = rect

        moves = self.big_font.render(f"Moves: {self.game.moves}", True, TEXT_COLOR)
        self.screen.blit(moves, (WINDOW_W // 2 - moves.get_width() // 2, y + (btn_h - moves.get_height()) // 2))

        self.btn_restart_rect = pygame.Rect(WINDOW_W - margin - 140, y, 140, btn_h)
        self._draw_button(self.btn_restart_rect, "Restart")

    def _draw(self):
        self.screen.fill(BG_COLOR)

        hud_rect = pygame.Rect(16, 16, 360, 52)
        pygame.draw.rect(self.screen, INFO_BG, hud_rect, border_radius=8)
        pygame.draw.rect(self.screen, PANEL_BORDER, hud_rect, width=1, border_radius=8)
        txt = self.font.render(self.game.message, True, TEXT_COLOR)
        self.screen.blit(txt, (hud_rect.x + 12, hud_rect.y + 14))

        self._draw_bottom_bar()

        positions, grid_rect = self._layout()
        for d, b in zip(positions, self.game.board):
            lifted = self.game.selected == d["idx"]
            lift = LIFT_OFFSET if lifted else 0
            self._draw_bottle(d["idx"], b, d["x_draw"], d["y_draw"] + lift, lifted)

        if self.game.won:
            self._draw_win_panel(grid_rect)
        else:
            self.btn_next_rect = None
            self.btn_exit_rect = None

        pygame.display.flip()
