# -*- coding: utf-8 -*-
"""
帧合成器

按固定顺序绘制一帧：清空、主题背景、网格（仅坐标类图表）、图表主体、标签
"""

import logging
from typing import Dict, Optional, Sequence

from ..canvas import DrawingSurface, Path
from ..chart_model import AnimationConfig, ChartType, DataPoint, SurfaceExtents
from .base import ChartRenderer
from .bar_chart import BarChartRenderer
from .line_chart import LineChartRenderer
from .pie_chart import PieChartRenderer
from .stat_bar import StatBarRenderer
from .themes import get_theme

GRID_DIVISIONS = 5


def create_renderers(config: Optional[Dict] = None) -> Dict[ChartType, ChartRenderer]:
    """为每种图表类型创建渲染器"""
    return {
        ChartType.BAR: BarChartRenderer(config),
        ChartType.LINE: LineChartRenderer(config),
        ChartType.AREA: LineChartRenderer(config, filled=True),
        ChartType.PIE: PieChartRenderer(config),
        ChartType.DONUT: PieChartRenderer(config, donut=True),
        ChartType.STAT_BAR: StatBarRenderer(config),
    }


class FrameCompositor:
    """
    帧合成器

    持有绘图表面与当前尺寸；render 只依赖输入参数，重复调用结果一致
    """

    def __init__(self, surface: DrawingSurface, extents: Optional[SurfaceExtents] = None,
                 config: Optional[Dict] = None):
        """
        初始化合成器

        Args:
            surface (DrawingSurface): 绘图表面
            extents (Optional[SurfaceExtents]): 初始尺寸，缺省时取表面当前尺寸
            config: 传给渲染器的配置字典
        """
        self.logger = logging.getLogger(__name__)
        self.surface = surface
        self.config = config or {}
        self.padding = self.config.get('padding', 20)
        self.aspect_ratio = self.config.get('aspect_ratio', 16 / 9)
        self.renderers = create_renderers(self.config)
        self.extents = extents or SurfaceExtents(surface.width, surface.height)
        self.surface.resize(self.extents.width, self.extents.height)

    def set_extents(self, extents: SurfaceExtents):
        """应用显式尺寸"""
        self.extents = extents
        self.surface.resize(extents.width, extents.height)
        self.logger.debug(f"Surface resized to {extents.width:.0f}x{extents.height:.0f}")

    def resize(self, container_width: float, container_height: float) -> SurfaceExtents:
        """
        在容器内按 16:9 适配画布尺寸

        Args:
            container_width (float): 容器宽度
            container_height (float): 容器高度

        Returns:
            SurfaceExtents: 新尺寸
        """
        extents = SurfaceExtents.fit_container(container_width, container_height,
                                               padding=self.padding, aspect_ratio=self.aspect_ratio)
        self.set_extents(extents)
        return extents

    def draw_grid(self, theme):
        extents = self.extents
        right = extents.width - extents.margin_right
        for i in range(GRID_DIVISIONS + 1):
            y = extents.chart_top + i / GRID_DIVISIONS * extents.chart_height
            line = Path().move_to(extents.chart_left, y).line_to(right, y)
            self.surface.stroke_path(line, theme.grid_color, line_width=1, alpha=theme.grid_opacity)

    def render(self, dataset: Sequence[DataPoint], config: AnimationConfig, eased: float):
        """
        绘制一帧

        Args:
            dataset: 数据点序列，为空时只绘制背景
            config (AnimationConfig): 动画配置
            eased (float): 缓动后的进度
        """
        theme = get_theme(config.theme)
        chart_type = ChartType.from_value(config.chart_type)

        self.surface.clear()
        theme.paint_background(self.surface)

        if not dataset:
            return

        if chart_type.is_axis_based:
            self.draw_grid(theme)

        renderer = self.renderers[chart_type]
        renderer.render(self.surface, dataset, eased, self.extents, theme)
        renderer.draw_labels(self.surface, dataset, eased, self.extents, theme)
