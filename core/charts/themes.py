# -*- coding: utf-8 -*-
"""
主题调色板

主题只决定样式（背景、文字、网格颜色），不参与几何计算
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..chart_model import ThemeType
from utils.color_utils import ColorUtils


@dataclass(frozen=True)
class Theme:
    """
    主题样式

    Attributes:
        name (str): 主题名称
        background (str): 背景色（渐变主题为起始色）
        text_color (str): 文字颜色
        grid_color (str): 网格颜色
        grid_opacity (float): 网格透明度
        gradient_stops (Optional[Tuple[str, str]]): 渐变起止色，非渐变主题为 None
    """
    name: str
    background: str
    text_color: str
    grid_color: str
    grid_opacity: float
    gradient_stops: Optional[Tuple[str, str]] = None

    @property
    def is_gradient(self) -> bool:
        return self.gradient_stops is not None

    @property
    def fill_color(self) -> str:
        """
        与背景融合的实心颜色

        用于切片描边和环形图中心圆；渐变主题取渐变中点颜色
        """
        if self.gradient_stops:
            return ColorUtils.interpolate_colors(self.gradient_stops[0], self.gradient_stops[1], 0.5)
        return self.background

    def paint_background(self, surface):
        """
        绘制背景

        渐变从左上角到右下角；纯色主题直接填充整个画布
        """
        if self.gradient_stops:
            start, end = self.gradient_stops
            surface.fill_linear_gradient(0, 0, surface.width, surface.height,
                                         [(0.0, start), (1.0, end)])
        else:
            surface.fill_rect(0, 0, surface.width, surface.height, self.background)


THEMES = {
    ThemeType.DARK: Theme(
        name='dark',
        background='#0F1118',
        text_color='#FFFFFF',
        grid_color='#2A2D39',
        grid_opacity=0.5,
    ),
    ThemeType.LIGHT: Theme(
        name='light',
        background='#FFFFFF',
        text_color='#333333',
        grid_color='#CCCCCC',
        grid_opacity=0.5,
    ),
    ThemeType.GRADIENT: Theme(
        name='gradient',
        background='#1A1C25',
        text_color='#FFFFFF',
        grid_color='#4A5065',
        grid_opacity=0.4,
        gradient_stops=('#1A1C25', '#2A2A3A'),
    ),
}


def get_theme(theme) -> Theme:
    """
    查找主题样式

    Args:
        theme: ThemeType 或主题名称，未知名称回退为深色主题

    Returns:
        Theme: 主题样式
    """
    return THEMES[ThemeType.from_value(theme)]
