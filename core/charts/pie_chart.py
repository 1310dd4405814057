# -*- coding: utf-8 -*-
"""
饼图与环形图渲染器

切片从正上方 (-π/2) 开始顺时针依次排列，每片的扫掠角随缓动进度同比例增长
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..chart_model import DataPoint, SurfaceExtents, point_color
from ..canvas import Path
from .base import ChartRenderer, LABEL_FONT_SIZE
from utils.math_utils import GeometryUtils, MathUtils

START_ANGLE = -math.pi / 2

SLICE_BORDER_WIDTH = 2
DONUT_HOLE_RATIO = 0.6
TOTAL_FONT_SIZE = 24

# 引线从 0.85r 延伸到 1.2r，扫掠角不超过 0.1 弧度的切片不标注
LEADER_INNER_RATIO = 0.85
LEADER_OUTER_RATIO = 1.2
LABEL_MIN_SWEEP = 0.1
LABEL_TEXT_OFFSET = 5


@dataclass
class SliceGeometry:
    """
    切片几何信息

    Attributes:
        index (int): 序号
        start_angle (float): 起始角
        sweep (float): 当前扫掠角
        percent (float): 占总数的百分比
        point (DataPoint): 对应数据点
    """
    index: int
    start_angle: float
    sweep: float
    percent: float
    point: DataPoint

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep

    @property
    def mid_angle(self) -> float:
        return self.start_angle + self.sweep / 2


def pie_layout(extents: SurfaceExtents) -> Tuple[float, float, float]:
    """饼图圆心与半径 (cx, cy, r)：居中于绘图区，直径取绘图区较短边"""
    radius = min(extents.chart_width, extents.chart_height) / 2
    cx = extents.chart_left + extents.chart_width / 2
    cy = extents.chart_top + extents.chart_height / 2
    return cx, cy, radius


def slice_total(dataset: Sequence[DataPoint]) -> float:
    """切片总和，只计正值；负值不占扇区也不计入总数"""
    return sum(max(0.0, point.value) for point in dataset)


def compute_slices(dataset: Sequence[DataPoint], eased: float) -> List[SliceGeometry]:
    """
    计算切片

    正值总和为 0 时返回空列表；负值切片扫掠角与占比为 0

    Args:
        dataset: 数据点序列
        eased (float): 缓动进度

    Returns:
        List[SliceGeometry]: 切片列表
    """
    total = slice_total(dataset)
    if total <= 0:
        return []

    slices = []
    angle = START_ANGLE
    for i, point in enumerate(dataset):
        share = max(0.0, point.value) / total
        sweep = share * 2 * math.pi * eased
        slices.append(SliceGeometry(i, angle, sweep, share * 100, point))
        angle += sweep
    return slices


class PieChartRenderer(ChartRenderer):
    """
    饼图渲染器

    donut 为 True 时在中心挖出 0.6 倍半径的圆并显示总数
    """

    def __init__(self, config=None, donut: bool = False):
        super().__init__(config)
        self.donut = donut

    def render(self, surface, dataset, eased, extents, theme):
        slices = compute_slices(dataset, eased)
        if not slices:
            if dataset:
                self.logger.debug("Pie total is not positive, nothing to draw")
            return

        cx, cy, radius = pie_layout(extents)
        for piece in slices:
            if piece.sweep <= 0:
                continue
            wedge = Path().move_to(cx, cy)
            wedge.arc(cx, cy, radius, piece.start_angle, piece.end_angle)
            wedge.close_path()
            surface.fill_path(wedge, point_color(piece.point, piece.index))
            surface.stroke_path(wedge, theme.fill_color, line_width=SLICE_BORDER_WIDTH)

        if self.donut:
            hole = Path().arc(cx, cy, radius * DONUT_HOLE_RATIO, 0, 2 * math.pi)
            surface.fill_path(hole, theme.fill_color)
            surface.fill_text(MathUtils.format_number(slice_total(dataset)), cx, cy, theme.text_color,
                              size=TOTAL_FONT_SIZE, bold=True, align='center', baseline='middle')

    def draw_labels(self, surface, dataset, eased, extents, theme):
        """
        绘制切片引线标签

        文本在圆右半侧时左对齐并向右偏移，左半侧时右对齐并向左偏移
        """
        cx, cy, radius = pie_layout(extents)
        for piece in compute_slices(dataset, eased):
            if piece.sweep <= LABEL_MIN_SWEEP:
                continue

            mid = piece.mid_angle
            inner = GeometryUtils.polar_point(cx, cy, radius * LEADER_INNER_RATIO, mid)
            outer = GeometryUtils.polar_point(cx, cy, radius * LEADER_OUTER_RATIO, mid)
            leader = Path().move_to(*inner).line_to(*outer)
            surface.stroke_path(leader, point_color(piece.point, piece.index), line_width=1)

            right_side = math.cos(mid) >= 0
            text = f"{piece.point.label} ({MathUtils.round_half_up(piece.percent)}%)"
            x = outer[0] + (LABEL_TEXT_OFFSET if right_side else -LABEL_TEXT_OFFSET)
            surface.fill_text(text, x, outer[1], theme.text_color, size=LABEL_FONT_SIZE,
                              align='left' if right_side else 'right')
