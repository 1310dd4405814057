# -*- coding: utf-8 -*-
"""
柱状图渲染器

各柱按顺序错开生长：第 i 根柱子在缓动进度达到 i/N 后开始升起
"""

from dataclasses import dataclass
from typing import List, Sequence

from ..chart_model import DataPoint, SurfaceExtents, point_color
from .base import ChartRenderer, scale_max
from utils.math_utils import MathUtils

# 柱槽两侧共留白 20%
BAR_PADDING_RATIO = 0.2

VALUE_LABEL_MIN_HEIGHT = 20
VALUE_LABEL_MIN_PROGRESS = 0.5


@dataclass
class BarGeometry:
    """
    单根柱子的几何信息

    Attributes:
        index (int): 序号
        x (float): 左边缘
        y (float): 顶边缘
        width (float): 宽度
        height (float): 当前高度
        progress (float): 该柱的生长进度 [0, 1]
        point (DataPoint): 对应数据点
    """
    index: int
    x: float
    y: float
    width: float
    height: float
    progress: float
    point: DataPoint

    @property
    def shows_value(self) -> bool:
        return self.height > VALUE_LABEL_MIN_HEIGHT and self.progress > VALUE_LABEL_MIN_PROGRESS


def bar_progress(eased: float, count: int) -> List[float]:
    """
    计算每根柱子的生长进度

    Args:
        eased (float): 缓动后的整体进度
        count (int): 柱子数量

    Returns:
        List[float]: clamp(eased*N - i, 0, 1) 列表
    """
    return [MathUtils.clamp(eased * count - i, 0.0, 1.0) for i in range(count)]


class BarChartRenderer(ChartRenderer):
    """柱状图渲染器"""

    def compute_bars(self, dataset: Sequence[DataPoint], eased: float,
                     extents: SurfaceExtents) -> List[BarGeometry]:
        """
        计算所有柱子的当前几何

        Args:
            dataset: 数据点序列
            eased (float): 缓动进度
            extents (SurfaceExtents): 画布尺寸

        Returns:
            List[BarGeometry]: 柱子几何列表
        """
        count = len(dataset)
        if count == 0:
            return []

        max_value = scale_max(dataset)
        if max_value <= 0:
            self.logger.debug("Bar chart maximum is not positive, drawing zero-height bars")

        slot = extents.chart_width / count
        padding = slot * BAR_PADDING_RATIO
        width = slot - padding

        bars = []
        for i, (point, progress) in enumerate(zip(dataset, bar_progress(eased, count))):
            if max_value > 0:
                full_height = max(0.0, point.value / max_value * extents.chart_height)
            else:
                full_height = 0.0
            height = full_height * progress
            bars.append(BarGeometry(
                index=i,
                x=extents.chart_left + i * slot + padding / 2,
                y=extents.chart_bottom - height,
                width=width,
                height=height,
                progress=progress,
                point=point,
            ))
        return bars

    def render(self, surface, dataset, eased, extents, theme):
        for bar in self.compute_bars(dataset, eased, extents):
            if bar.height > 0:
                surface.fill_rect(bar.x, bar.y, bar.width, bar.height,
                                  point_color(bar.point, bar.index))

            if bar.shows_value:
                surface.fill_text(MathUtils.format_number(bar.point.value),
                                  bar.x + bar.width / 2, bar.y - 5,
                                  theme.text_color, size=12, bold=True, align='center')
