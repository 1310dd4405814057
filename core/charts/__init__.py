# -*- coding: utf-8 -*-
"""
图表渲染模块

包含主题调色板、各类图表的几何渲染器以及帧合成器
"""

from .themes import Theme, THEMES, get_theme
from .base import ChartRenderer
from .bar_chart import BarChartRenderer, BarGeometry, bar_progress
from .line_chart import LineChartRenderer, LineGeometry, Marker
from .pie_chart import PieChartRenderer, SliceGeometry, compute_slices, pie_layout
from .stat_bar import StatBarRenderer, PipFill, compute_pip_fill, MAX_STAT_ROWS
from .compositor import FrameCompositor, create_renderers

__all__ = [
    'Theme', 'THEMES', 'get_theme',
    'ChartRenderer',
    'BarChartRenderer', 'BarGeometry', 'bar_progress',
    'LineChartRenderer', 'LineGeometry', 'Marker',
    'PieChartRenderer', 'SliceGeometry', 'compute_slices', 'pie_layout',
    'StatBarRenderer', 'PipFill', 'compute_pip_fill', 'MAX_STAT_ROWS',
    'FrameCompositor', 'create_renderers',
]
