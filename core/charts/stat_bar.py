# -*- coding: utf-8 -*-
"""
状态条渲染器

每行由 20 个胶囊形格子组成，按数值在 [min, max] 中的比例逐格点亮，
当前正在点亮的格子从底部向上部分填充
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from ..chart_model import DataPoint, SurfaceExtents
from ..canvas import Path
from .base import ChartRenderer
from utils.color_utils import ColorUtils
from utils.math_utils import MathUtils

MAX_STAT_ROWS = 3
PIP_COUNT = 20

PIP_WIDTH = 14
PIP_SPACING = 6
PIP_HEIGHT = 100
PIP_RADIUS = PIP_WIDTH / 2

ROW_GAP = 100
ROW_HEIGHT = 120

EMPTY_PIP_COLOR = '#EEEEEE'

# 部分填充超过该比例后顶部圆角逐渐出现
TOP_ROUNDING_ONSET = 0.85

DEFAULT_MIN = 0.0
DEFAULT_MAX = 100.0


@dataclass
class PipFill:
    """
    一行状态条的填充状态

    Attributes:
        minimum (float): 下限
        maximum (float): 上限
        clamped (float): 截断到 [min, max] 的数值
        ratio (float): 数值比例 [0, 1]
        exact (float): 当前应点亮的格数（含小数）
        full (int): 完全点亮的格数
        partial (float): 下一格的填充比例
        displayed_value (int): 显示的数值
    """
    minimum: float
    maximum: float
    clamped: float
    ratio: float
    exact: float
    full: int
    partial: float
    displayed_value: int

    @property
    def value_pip_index(self) -> int:
        """数值文本所在的格子：正在填充的格，无部分填充时为最后一个满格"""
        if self.partial <= 0 and self.full > 0:
            return self.full - 1
        return self.full


def compute_pip_fill(point: DataPoint, eased: float) -> PipFill:
    """
    计算一行的格子填充

    Args:
        point (DataPoint): 数据点，min/max 缺省为 0/100
        eased (float): 缓动进度

    Returns:
        PipFill: 填充状态
    """
    minimum = DEFAULT_MIN if point.min is None else point.min
    maximum = DEFAULT_MAX if point.max is None else point.max
    clamped = MathUtils.clamp(point.value, minimum, maximum)

    span = maximum - minimum
    ratio = (clamped - minimum) / span if span > 0 else 0.0

    exact = ratio * PIP_COUNT * eased
    full = int(math.floor(exact))
    partial = exact - full
    displayed = MathUtils.round_half_up(minimum + (clamped - minimum) * eased)
    return PipFill(minimum, maximum, clamped, ratio, exact, full, partial, displayed)


def default_row_color(row: int) -> str:
    return ColorUtils.hsl_color((row * 60 + 260) % 360, 100, 65)


def pill_path(x: float, y: float) -> Path:
    """完整胶囊：上下两端为半圆"""
    path = Path()
    path.arc(x + PIP_RADIUS, y + PIP_RADIUS, PIP_RADIUS, math.pi, 0)
    path.line_to(x + PIP_WIDTH, y + PIP_HEIGHT - PIP_RADIUS)
    path.arc(x + PIP_RADIUS, y + PIP_HEIGHT - PIP_RADIUS, PIP_RADIUS, 0, math.pi)
    return path.close_path()


def partial_pip_path(x: float, y: float, fill_ratio: float) -> Path:
    """
    部分填充的格子

    底部始终为圆角；填充比例超过 0.85 后顶部圆角半径从 0 线性增长到格子半径
    """
    bottom = y + PIP_HEIGHT
    filled_top = bottom - PIP_HEIGHT * fill_ratio

    path = Path().move_to(x, bottom - PIP_RADIUS)
    path.arc(x + PIP_RADIUS, bottom - PIP_RADIUS, PIP_RADIUS, math.pi, math.pi * 0.5, True)
    path.line_to(x + PIP_WIDTH - PIP_RADIUS, bottom)
    path.arc(x + PIP_WIDTH - PIP_RADIUS, bottom - PIP_RADIUS, PIP_RADIUS, math.pi * 0.5, 0, True)

    if fill_ratio > TOP_ROUNDING_ONSET:
        top_radius = PIP_RADIUS * (fill_ratio - TOP_ROUNDING_ONSET) / (1 - TOP_ROUNDING_ONSET)
        path.line_to(x + PIP_WIDTH, filled_top + top_radius)
        if top_radius > 0:
            path.arc(x + PIP_WIDTH - top_radius, filled_top + top_radius, top_radius,
                     0, math.pi * 1.5, True)
        path.line_to(x + top_radius, filled_top)
        if top_radius > 0:
            path.arc(x + top_radius, filled_top + top_radius, top_radius,
                     math.pi * 1.5, math.pi, True)
    else:
        path.line_to(x + PIP_WIDTH, filled_top)
        path.line_to(x, filled_top)

    path.line_to(x, bottom - PIP_RADIUS)
    return path.close_path()


class StatBarRenderer(ChartRenderer):
    """状态条渲染器，最多绘制 3 行"""

    def visible_rows(self, dataset: Sequence[DataPoint]) -> List[DataPoint]:
        if len(dataset) > MAX_STAT_ROWS:
            self.logger.debug(f"Stat bar shows {MAX_STAT_ROWS} rows, ignoring {len(dataset) - MAX_STAT_ROWS}")
        return list(dataset[:MAX_STAT_ROWS])

    @staticmethod
    def row_origins(row_count: int, extents: SurfaceExtents) -> List[tuple]:
        """
        计算每行第一个格子的左上角

        所有行整体垂直居中，每行水平居中
        """
        total_space = row_count * ROW_HEIGHT + (row_count - 1) * ROW_GAP
        first_y = (extents.height - total_space) / 2
        total_width = PIP_COUNT * PIP_WIDTH + (PIP_COUNT - 1) * PIP_SPACING
        start_x = extents.width / 2 - total_width / 2
        return [(start_x, first_y + row * (ROW_HEIGHT + ROW_GAP)) for row in range(row_count)]

    def render(self, surface, dataset, eased, extents, theme):
        rows = self.visible_rows(dataset)
        if not rows:
            return

        total_width = PIP_COUNT * PIP_WIDTH + (PIP_COUNT - 1) * PIP_SPACING
        for row, (point, (start_x, start_y)) in enumerate(zip(rows, self.row_origins(len(rows), extents))):
            fill = compute_pip_fill(point, eased)
            color = point.color or default_row_color(row)

            for i in range(PIP_COUNT):
                x = start_x + i * (PIP_WIDTH + PIP_SPACING)
                surface.fill_path(pill_path(x, start_y), EMPTY_PIP_COLOR)
                if i < fill.full:
                    surface.fill_path(pill_path(x, start_y), color)
                elif i == fill.full and fill.partial > 0:
                    surface.fill_path(partial_pip_path(x, start_y, fill.partial), color)

            self._draw_row_text(surface, point, row, fill, start_x, start_y, total_width, theme)

    def _draw_row_text(self, surface, point, row, fill, start_x, start_y, total_width, theme):
        first_pip_x = start_x + PIP_WIDTH / 2
        last_pip_x = start_x + total_width - PIP_WIDTH / 2

        title = point.label or f"Stats {row + 1}"
        surface.fill_text(title, start_x + total_width / 2, start_y - 40,
                          theme.text_color, size=18, bold=True, align='center')

        min_text = MathUtils.format_number(fill.minimum)
        max_text = MathUtils.format_number(fill.maximum)
        min_width, _ = surface.measure_text(min_text, size=16, bold=True)
        max_width, _ = surface.measure_text(max_text, size=16, bold=True)
        surface.fill_text(min_text, first_pip_x - min_width / 2, start_y - 12,
                          theme.text_color, size=16, bold=True, align='left')
        surface.fill_text(max_text, last_pip_x + max_width / 2, start_y - 12,
                          theme.text_color, size=16, bold=True, align='right')

        value_x = start_x + fill.value_pip_index * (PIP_WIDTH + PIP_SPACING) + PIP_WIDTH / 2
        surface.fill_text(str(fill.displayed_value), value_x, start_y + PIP_HEIGHT + 25,
                          theme.text_color, size=16, bold=True, align='center')

