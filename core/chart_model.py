#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
图表数据模型模块
定义数据点、动画配置、画布尺寸等基础数据结构
"""

import math
import random
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class EasingType(Enum):
    """缓动类型枚举"""
    LINEAR = "linear"
    EASE_IN_OUT = "easeInOut"
    ELASTIC = "elastic"
    BOUNCE = "bounce"

    @classmethod
    def from_value(cls, value) -> "EasingType":
        """未知取值回退为线性"""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value or member.name == value:
                return member
        logger.warning(f"Unknown easing kind {value!r}, falling back to linear")
        return cls.LINEAR


class ChartType(Enum):
    """图表类型枚举"""
    BAR = "bar"
    LINE = "line"
    AREA = "area"
    PIE = "pie"
    DONUT = "donut"
    STAT_BAR = "statBar"

    @property
    def is_axis_based(self) -> bool:
        """是否为带坐标网格的图表"""
        return self in (ChartType.BAR, ChartType.LINE, ChartType.AREA)

    @classmethod
    def from_value(cls, value) -> "ChartType":
        """未知取值回退为柱状图"""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value or member.name == value:
                return member
        logger.warning(f"Unknown chart kind {value!r}, falling back to bar")
        return cls.BAR


class ThemeType(Enum):
    """主题类型枚举"""
    DARK = "dark"
    LIGHT = "light"
    GRADIENT = "gradient"

    @classmethod
    def from_value(cls, value) -> "ThemeType":
        """未知取值回退为深色主题"""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value or member.name == value:
                return member
        logger.warning(f"Unknown theme {value!r}, falling back to dark")
        return cls.DARK


# 默认配色（与数据表格的默认行颜色一致）
DEFAULT_COLORS = (
    '#4A7CFF',  # 蓝
    '#FF4A7C',  # 红
    '#7CFF4A',  # 绿
    '#FFC44A',  # 橙
    '#4AFFDF',  # 青
    '#C44AFF',  # 紫
    '#FFDF4A',  # 黄
    '#4AC4FF',  # 浅蓝
    '#FF4AC4',  # 粉
)

DEFAULT_DURATION = 3.0


@dataclass(frozen=True)
class DataPoint:
    """
    数据点

    Attributes:
        label (str): 标签
        value (float): 数值
        color (Optional[str]): 颜色令牌，缺省时由渲染器按序号选择
        min (Optional[float]): 最小值（仅状态条使用）
        max (Optional[float]): 最大值（仅状态条使用）
    """
    label: str
    value: float
    color: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @classmethod
    def from_dict(cls, item: Dict[str, Any], index: int = 0) -> "DataPoint":
        """
        从字典构建数据点

        Args:
            item (Dict[str, Any]): 含 label/value/color/min/max 的字典
            index (int): 行号，缺省标签时使用

        Returns:
            DataPoint: 数据点
        """
        value = _to_float(item.get('value'), 0.0)
        return cls(
            label=str(item.get('label') or f'Item {index + 1}'),
            value=value,
            color=item.get('color') or None,
            min=_to_float(item.get('min'), None),
            max=_to_float(item.get('max'), None),
        )


Dataset = Tuple[DataPoint, ...]


def _to_float(value, default):
    if value is None or value == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric value {value!r}, using {default!r}")
        return default
    if math.isnan(number):
        return default
    return number


def build_dataset(items: Optional[Iterable]) -> Dataset:
    """
    构建不可变数据集快照

    Args:
        items: DataPoint 或字典组成的序列

    Returns:
        Dataset: 数据点元组
    """
    if not items:
        return ()

    points = []
    for i, item in enumerate(items):
        if isinstance(item, DataPoint):
            points.append(item)
        elif isinstance(item, dict):
            points.append(DataPoint.from_dict(item, i))
        else:
            logger.warning(f"Skipping unsupported data item at index {i}: {item!r}")
    return tuple(points)


@dataclass(frozen=True)
class AnimationConfig:
    """
    动画配置

    Attributes:
        duration_seconds (float): 动画时长（秒）
        easing (EasingType): 缓动类型
        chart_type (ChartType): 图表类型
        theme (ThemeType): 主题
    """
    duration_seconds: float = DEFAULT_DURATION
    easing: EasingType = EasingType.EASE_IN_OUT
    chart_type: ChartType = ChartType.BAR
    theme: ThemeType = ThemeType.DARK

    @classmethod
    def create(cls, duration_seconds=DEFAULT_DURATION, easing='easeInOut',
               chart_type='bar', theme='dark') -> "AnimationConfig":
        """
        创建配置并应用回退规则

        Args:
            duration_seconds: 时长，非正数或非法值回退为默认时长
            easing: 缓动类型
            chart_type: 图表类型
            theme: 主题

        Returns:
            AnimationConfig: 动画配置
        """
        duration = _to_float(duration_seconds, DEFAULT_DURATION)
        if duration <= 0 or math.isinf(duration):
            logger.warning(f"Invalid duration {duration_seconds!r}, using {DEFAULT_DURATION}s")
            duration = DEFAULT_DURATION

        return cls(
            duration_seconds=duration,
            easing=EasingType.from_value(easing),
            chart_type=ChartType.from_value(chart_type),
            theme=ThemeType.from_value(theme),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnimationConfig":
        """从配置字典创建（兼容 duration/type 等简写键）"""
        return cls.create(
            duration_seconds=data.get('duration_seconds', data.get('duration', DEFAULT_DURATION)),
            easing=data.get('easing', 'easeInOut'),
            chart_type=data.get('chart_type', data.get('type', 'bar')),
            theme=data.get('theme', 'dark'),
        )


@dataclass(frozen=True)
class SurfaceExtents:
    """
    画布尺寸及边距

    边距为尺寸的固定比例：上 10%、右 10%、下 15%、左 15%

    Attributes:
        width (float): 画布宽度
        height (float): 画布高度
    """
    width: float
    height: float

    def __post_init__(self):
        # 尺寸塌缩时保持至少 1x1 的可绘制区域
        width = _to_float(self.width, 1.0)
        height = _to_float(self.height, 1.0)
        object.__setattr__(self, 'width', max(1.0, width))
        object.__setattr__(self, 'height', max(1.0, height))

    @classmethod
    def fit_container(cls, container_width: float, container_height: float,
                      padding: float = 20.0, aspect_ratio: float = 16 / 9) -> "SurfaceExtents":
        """
        在容器内按固定宽高比计算画布尺寸

        Args:
            container_width (float): 容器宽度
            container_height (float): 容器高度
            padding (float): 每侧留白
            aspect_ratio (float): 目标宽高比

        Returns:
            SurfaceExtents: 画布尺寸
        """
        container_width = _to_float(container_width, 0.0)
        container_height = _to_float(container_height, 0.0)

        width = container_width - 2 * padding
        height = width / aspect_ratio
        if height > container_height - 2 * padding:
            height = container_height - 2 * padding
            width = height * aspect_ratio

        return cls(max(1.0, width), max(1.0, height))

    @property
    def margin_top(self) -> float:
        return self.height * 0.1

    @property
    def margin_right(self) -> float:
        return self.width * 0.1

    @property
    def margin_bottom(self) -> float:
        return self.height * 0.15

    @property
    def margin_left(self) -> float:
        return self.width * 0.15

    @property
    def chart_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def chart_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom

    @property
    def chart_left(self) -> float:
        return self.margin_left

    @property
    def chart_top(self) -> float:
        return self.margin_top

    @property
    def chart_bottom(self) -> float:
        return self.margin_top + self.chart_height


def default_dataset(chart_type) -> Dataset:
    """
    获取图表类型的默认数据

    Args:
        chart_type: 图表类型

    Returns:
        Dataset: 默认数据集
    """
    if ChartType.from_value(chart_type) == ChartType.STAT_BAR:
        return (DataPoint('Progress', 75, '#4A7CFF', min=0, max=100),)
    return (
        DataPoint('Item A', 30, '#4A7CFF'),
        DataPoint('Item B', 50, '#FF4A7C'),
        DataPoint('Item C', 20, '#7CFF4A'),
    )


def sample_dataset(chart_type, seed: Optional[int] = None) -> Dataset:
    """
    生成示例数据

    柱状图、饼图使用分类数据，折线图、面积图使用月度时间序列

    Args:
        chart_type: 图表类型
        seed (Optional[int]): 随机种子

    Returns:
        Dataset: 示例数据集
    """
    rng = random.Random(seed)
    chart_type = ChartType.from_value(chart_type)

    if chart_type in (ChartType.LINE, ChartType.AREA):
        months = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                  'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
        color = rng.choice(DEFAULT_COLORS)
        return tuple(DataPoint(label, rng.randint(10, 99), color) for label in months)

    if chart_type == ChartType.STAT_BAR:
        return tuple(
            DataPoint(f'Stat {i + 1}', rng.randint(0, 100), DEFAULT_COLORS[i], min=0, max=100)
            for i in range(3)
        )

    categories = ['Category A', 'Category B', 'Category C', 'Category D', 'Category E']
    return tuple(
        DataPoint(label, rng.randint(10, 99), DEFAULT_COLORS[i % len(DEFAULT_COLORS)])
        for i, label in enumerate(categories)
    )


def point_color(point: DataPoint, index: int) -> str:
    """数据点的绘制颜色，未指定时按序号循环使用默认配色"""
    return point.color or DEFAULT_COLORS[index % len(DEFAULT_COLORS)]
