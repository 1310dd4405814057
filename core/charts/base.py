# -*- coding: utf-8 -*-
"""
图表渲染器基类

定义渲染器接口以及坐标类图表共用的分类标签绘制
"""

import math
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from ..chart_model import DataPoint, SurfaceExtents
from .themes import Theme
from utils.math_utils import MathUtils

# 数值轴顶部预留 10% 空间
VALUE_HEADROOM = 1.1

LABEL_FONT_SIZE = 12
LABEL_OFFSET_Y = 20


def scale_max(dataset: Sequence[DataPoint]) -> float:
    """数值轴上限：最大值的 1.1 倍，数据为空时为 0"""
    if not dataset:
        return 0.0
    return max(point.value for point in dataset) * VALUE_HEADROOM


class ChartRenderer(ABC):
    """
    图表渲染器基类

    渲染器是无状态的：相同的 (数据集, 缓动进度, 尺寸, 主题) 总是产生相同的绘制调用
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化渲染器

        Args:
            config: 配置字典
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def render(self, surface, dataset: Sequence[DataPoint], eased: float,
               extents: SurfaceExtents, theme: Theme):
        """
        绘制图表主体

        Args:
            surface: 绘图表面
            dataset: 数据点序列
            eased (float): 缓动后的进度
            extents (SurfaceExtents): 画布尺寸
            theme (Theme): 主题样式
        """

    def label_x(self, index: int, count: int, extents: SurfaceExtents) -> float:
        """第 index 个分类标签的横坐标（默认居中于柱槽）"""
        slot = extents.chart_width / count
        return extents.chart_left + (index + 0.5) * slot

    def draw_labels(self, surface, dataset: Sequence[DataPoint], eased: float,
                    extents: SurfaceExtents, theme: Theme):
        """
        绘制分类标签

        只显示前 ceil(N * eased) 个标签，每个标签按 clamp(eased*N - i) 淡入
        """
        count = len(dataset)
        if count == 0:
            return

        visible = min(count, int(math.ceil(count * eased)))
        y = extents.height - extents.margin_bottom + LABEL_OFFSET_Y
        for i in range(visible):
            alpha = MathUtils.clamp(eased * count - i, 0.0, 1.0)
            if alpha <= 0:
                continue
            surface.fill_text(dataset[i].label, self.label_x(i, count, extents), y,
                              theme.text_color, size=LABEL_FONT_SIZE, align='center',
                              alpha=alpha)
