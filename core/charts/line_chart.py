# -*- coding: utf-8 -*-
"""
折线图与面积图渲染器

相邻数据点之间用三次贝塞尔曲线连接，控制点水平偏移 0.3 倍点间距；
动画按进度逐段延伸曲线，最后一段用 De Casteljau 细分截断
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..chart_model import DataPoint, SurfaceExtents
from ..canvas import Path
from .base import ChartRenderer, scale_max
from utils.color_utils import ColorUtils
from utils.math_utils import GeometryUtils, MathUtils, Point

TENSION = 0.3
LINE_WIDTH = 3
MARKER_RADIUS = 5
AREA_OPACITY = 0.3

LINE_COLOR = '#4A90E2'

# 贝塞尔段：(起点, 控制点1, 控制点2, 终点)
Segment = Tuple[Point, Point, Point, Point]


@dataclass
class Marker:
    """数据点标记"""
    x: float
    y: float
    alpha: float


@dataclass
class LineGeometry:
    """
    折线当前可见部分的几何信息

    Attributes:
        positions (List[Point]): 全部数据点的位置
        segments (List[Segment]): 已绘制的曲线段（最后一段可能已截断）
        markers (List[Marker]): 可见的数据点标记
        baseline (float): 面积图闭合的基线纵坐标
    """
    positions: List[Point] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    markers: List[Marker] = field(default_factory=list)
    baseline: float = 0.0

    @property
    def end_point(self) -> Point:
        """曲线当前末端"""
        if self.segments:
            return self.segments[-1][3]
        return self.positions[0]


def point_positions(dataset: Sequence[DataPoint], extents: SurfaceExtents) -> List[Point]:
    """
    计算数据点位置

    单个数据点时水平居中；数值轴上限为最大值的 1.1 倍，上限非正时所有点落在基线
    """
    count = len(dataset)
    max_value = scale_max(dataset)
    if count == 1:
        xs = [extents.chart_left + extents.chart_width / 2]
    else:
        spacing = extents.chart_width / (count - 1)
        xs = [extents.chart_left + i * spacing for i in range(count)]

    positions = []
    for x, point in zip(xs, dataset):
        ratio = point.value / max_value if max_value > 0 else 0.0
        positions.append((x, extents.chart_top + extents.chart_height * (1 - ratio)))
    return positions


class LineChartRenderer(ChartRenderer):
    """
    折线图渲染器

    filled 为 True 时绘制面积图：先以 0.3 透明度填充曲线与基线之间的区域，再描边曲线
    """

    def __init__(self, config=None, filled: bool = False):
        super().__init__(config)
        self.filled = filled

    def compute_line(self, dataset: Sequence[DataPoint], eased: float,
                     extents: SurfaceExtents) -> LineGeometry:
        """
        计算折线的可见几何

        Args:
            dataset: 数据点序列
            eased (float): 缓动进度
            extents (SurfaceExtents): 画布尺寸

        Returns:
            LineGeometry: 几何信息
        """
        count = len(dataset)
        geometry = LineGeometry(baseline=extents.chart_bottom)
        if count == 0:
            return geometry

        positions = point_positions(dataset, extents)
        geometry.positions = positions

        t = eased * (count - 1)
        if count > 1:
            spacing = extents.chart_width / (count - 1)
            completed = int(math.floor(t))
            fraction = t - completed
            for i in range(min(completed, count - 1)):
                geometry.segments.append(self._segment(positions[i], positions[i + 1], spacing))

            if completed < count - 1 and fraction > 0:
                p0, cp1, cp2, p1 = self._segment(positions[completed], positions[completed + 1], spacing)
                partial_cp1, partial_cp2, end = GeometryUtils.truncate_cubic_bezier(p0, cp1, cp2, p1, fraction)
                geometry.segments.append((p0, partial_cp1, partial_cp2, end))
        else:
            self.logger.debug("Single data point, drawing marker only")

        for i, (x, y) in enumerate(positions):
            point_progress = MathUtils.clamp(t - i + 1, 0.0, 1.0)
            if point_progress <= 0:
                continue
            if i == 0:
                alpha = min(1.0, eased * count * 2)
            else:
                alpha = min(1.0, point_progress * 5)
            if alpha > 0:
                geometry.markers.append(Marker(x, y, alpha))

        return geometry

    @staticmethod
    def _segment(p0: Point, p1: Point, spacing: float) -> Segment:
        cp1 = (p0[0] + spacing * TENSION, p0[1])
        cp2 = (p1[0] - spacing * TENSION, p1[1])
        return (p0, cp1, cp2, p1)

    @staticmethod
    def _trace(path: Path, segments: List[Segment]):
        for _, cp1, cp2, end in segments:
            path.bezier_curve_to(cp1[0], cp1[1], cp2[0], cp2[1], end[0], end[1])

    def render(self, surface, dataset, eased, extents, theme):
        geometry = self.compute_line(dataset, eased, extents)
        if not geometry.positions:
            return

        start = geometry.positions[0]

        if geometry.segments:
            if self.filled:
                area = Path().move_to(start[0], geometry.baseline).line_to(start[0], start[1])
                self._trace(area, geometry.segments)
                end = geometry.end_point
                area.line_to(end[0], geometry.baseline)
                area.line_to(start[0], geometry.baseline)
                area.close_path()
                surface.fill_path(area, ColorUtils.with_alpha(LINE_COLOR, AREA_OPACITY))

            line = Path().move_to(start[0], start[1])
            self._trace(line, geometry.segments)
            surface.stroke_path(line, LINE_COLOR, line_width=LINE_WIDTH)

        for marker in geometry.markers:
            dot = Path().arc(marker.x, marker.y, MARKER_RADIUS, 0, 2 * math.pi)
            surface.fill_path(dot, LINE_COLOR, alpha=marker.alpha)
