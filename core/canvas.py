#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
画布管理模块
提供绘图表面接口、路径构建以及光栅画布与录制画布两种实现
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from utils.color_utils import ColorUtils
from utils.math_utils import GeometryUtils

# 亚像素精度位数（cv2 绘图函数的 shift 参数）
SUBPIXEL_SHIFT = 4
SUBPIXEL_SCALE = 1 << SUBPIXEL_SHIFT

# Hershey 字体在 fontScale=1 时的大致像素高度
HERSHEY_BASE_HEIGHT = 22.0


class Path:
    """
    绘制路径

    记录 move/line/bezier/arc/close 命令，并可离散为折线
    圆弧遵循 HTML 画布语义：顺时针为角度增大方向（y 轴向下）
    """

    def __init__(self):
        self.commands: List[Tuple] = []
        self._subpaths: List[Dict[str, Any]] = []
        self._current: Optional[Dict[str, Any]] = None

    def _start_subpath(self, x: float, y: float):
        self._current = {'points': [(x, y)], 'closed': False}
        self._subpaths.append(self._current)

    def _current_point(self) -> Optional[Tuple[float, float]]:
        if self._current is None or not self._current['points']:
            return None
        return self._current['points'][-1]

    def move_to(self, x: float, y: float) -> "Path":
        self.commands.append(('M', x, y))
        self._start_subpath(x, y)
        return self

    def line_to(self, x: float, y: float) -> "Path":
        self.commands.append(('L', x, y))
        if self._current is None:
            self._start_subpath(x, y)
        else:
            self._current['points'].append((x, y))
        return self

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float,
                        x: float, y: float) -> "Path":
        self.commands.append(('C', cp1x, cp1y, cp2x, cp2y, x, y))
        if self._current is None:
            self._start_subpath(cp1x, cp1y)
        start = self._current_point()
        points = GeometryUtils.flatten_cubic_bezier(start, (cp1x, cp1y), (cp2x, cp2y), (x, y))
        self._current['points'].extend(map(tuple, points.tolist()))
        return self

    def arc(self, cx: float, cy: float, radius: float, start_angle: float, end_angle: float,
            anticlockwise: bool = False) -> "Path":
        self.commands.append(('A', cx, cy, radius, start_angle, end_angle, anticlockwise))
        points = GeometryUtils.arc_points(cx, cy, max(0.0, radius), start_angle, end_angle, anticlockwise)
        pts = list(map(tuple, points.tolist()))
        if self._current is None:
            self._start_subpath(*pts[0])
            pts = pts[1:]
        self._current['points'].extend(pts)
        return self

    def close_path(self) -> "Path":
        self.commands.append(('Z',))
        if self._current is not None:
            self._current['closed'] = True
            start = self._current['points'][0]
            self._start_subpath(*start)
        return self

    def to_polylines(self) -> List[Tuple[np.ndarray, bool]]:
        """
        离散为折线

        Returns:
            List[Tuple[np.ndarray, bool]]: (点数组, 是否闭合) 列表，忽略少于两点的子路径
        """
        polylines = []
        for subpath in self._subpaths:
            if len(subpath['points']) < 2:
                continue
            polylines.append((np.asarray(subpath['points'], dtype=np.float64), subpath['closed']))
        return polylines

    def bounds(self) -> Tuple[float, float, float, float]:
        """路径的边界框 (min_x, min_y, max_x, max_y)"""
        points = [p for subpath in self._subpaths for p in subpath['points']]
        return GeometryUtils.calculate_bounding_box(points)


class DrawingSurface(ABC):
    """
    绘图表面接口

    几何渲染器只依赖这些能力：填充矩形/路径、描边路径、渐变填充、
    测量文本与绘制文本
    """

    @property
    @abstractmethod
    def width(self) -> float:
        """逻辑宽度"""

    @property
    @abstractmethod
    def height(self) -> float:
        """逻辑高度"""

    @abstractmethod
    def resize(self, width: float, height: float):
        """调整逻辑尺寸"""

    @abstractmethod
    def clear(self):
        """清空画布"""

    @abstractmethod
    def fill_rect(self, x: float, y: float, width: float, height: float, color, alpha: float = 1.0):
        """填充矩形"""

    @abstractmethod
    def fill_linear_gradient(self, x0: float, y0: float, x1: float, y1: float,
                             stops: Sequence[Tuple[float, str]]):
        """用线性渐变填充整个画布"""

    @abstractmethod
    def fill_path(self, path: Path, color, alpha: float = 1.0):
        """填充路径"""

    @abstractmethod
    def stroke_path(self, path: Path, color, line_width: float = 1.0, alpha: float = 1.0):
        """描边路径"""

    @abstractmethod
    def measure_text(self, text: str, size: float = 12, bold: bool = False) -> Tuple[float, float]:
        """测量文本 (宽, 高)"""

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float, color, size: float = 12,
                  bold: bool = False, align: str = 'left', baseline: str = 'alphabetic',
                  alpha: float = 1.0):
        """绘制文本"""

    def present(self):
        """
        提交已排队的绘制操作

        导出采样在读取像素前调用；内存画布的绘制是同步的，默认无需等待
        """

    def get_image(self) -> Optional[np.ndarray]:
        """获取当前帧图像，无像素的表面返回 None"""
        return None


class Canvas(DrawingSurface):
    """
    光栅画布

    基于 numpy 的 BGR 图像，使用 OpenCV 抗锯齿绘制；
    pixel_ratio 对应设备像素比，逻辑坐标乘以该比例后落到像素
    """

    def __init__(self, width: float = 800, height: float = 450, pixel_ratio: float = 1.0,
                 background_color=(0, 0, 0)):
        self.pixel_ratio = max(0.1, float(pixel_ratio))
        self.background_color = background_color
        self._width = 1.0
        self._height = 1.0
        self.canvas: np.ndarray = np.zeros((1, 1, 3), dtype=np.uint8)
        self.resize(width, height)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return (self.canvas.shape[1], self.canvas.shape[0])

    def resize(self, width: float, height: float):
        """调整画布尺寸，最小 1x1"""
        self._width = max(1.0, float(width))
        self._height = max(1.0, float(height))
        px_w = max(1, int(round(self._width * self.pixel_ratio)))
        px_h = max(1, int(round(self._height * self.pixel_ratio)))
        self.canvas = np.zeros((px_h, px_w, 3), dtype=np.uint8)
        self.clear()

    def clear(self):
        self.canvas[:] = ColorUtils.to_bgr(self.background_color)

    def _to_pixels(self, points: np.ndarray) -> np.ndarray:
        # OpenCV 像素中心位于整数坐标，逻辑坐标 0 对应像素左边缘
        scaled = (np.asarray(points, dtype=np.float64) * self.pixel_ratio - 0.5) * SUBPIXEL_SCALE
        return np.round(scaled).astype(np.int32).reshape(-1, 1, 2)

    def _paint(self, draw_fn, color, alpha: float):
        """按透明度把绘制操作混合到画布上"""
        _, _, _, color_alpha = ColorUtils.parse_color(color)
        alpha = max(0.0, min(1.0, alpha * color_alpha))
        if alpha <= 0.0:
            return

        bgr = ColorUtils.to_bgr(color)
        if alpha >= 1.0:
            draw_fn(self.canvas, bgr)
            return

        overlay = self.canvas.copy()
        draw_fn(overlay, bgr)
        cv2.addWeighted(overlay, alpha, self.canvas, 1.0 - alpha, 0, dst=self.canvas)

    def fill_rect(self, x, y, width, height, color, alpha=1.0):
        """填充矩形，边缘对齐到像素边界"""
        x0, x1 = sorted((x, x + width))
        y0, y1 = sorted((y, y + height))
        px_h, px_w = self.canvas.shape[:2]
        left = max(0, min(px_w, int(round(x0 * self.pixel_ratio))))
        right = max(0, min(px_w, int(round(x1 * self.pixel_ratio))))
        top = max(0, min(px_h, int(round(y0 * self.pixel_ratio))))
        bottom = max(0, min(px_h, int(round(y1 * self.pixel_ratio))))
        if left >= right or top >= bottom:
            return

        def draw(img, bgr):
            img[top:bottom, left:right] = bgr

        self._paint(draw, color, alpha)

    def fill_linear_gradient(self, x0, y0, x1, y1, stops):
        if not stops:
            return
        px_h, px_w = self.canvas.shape[:2]
        xs = (np.arange(px_w) + 0.5) / self.pixel_ratio
        ys = (np.arange(px_h) + 0.5) / self.pixel_ratio
        gx, gy = np.meshgrid(xs, ys)

        dx, dy = x1 - x0, y1 - y0
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            t = np.zeros_like(gx)
        else:
            t = np.clip(((gx - x0) * dx + (gy - y0) * dy) / length_sq, 0.0, 1.0)

        offsets = [float(offset) for offset, _ in stops]
        colors = np.array([ColorUtils.to_bgr(color) for _, color in stops], dtype=np.float64)
        for c in range(3):
            self.canvas[:, :, c] = np.round(np.interp(t, offsets, colors[:, c])).astype(np.uint8)

    def fill_path(self, path, color, alpha=1.0):
        polygons = [self._to_pixels(points) for points, _ in path.to_polylines() if len(points) >= 3]
        if not polygons:
            return

        def draw(img, bgr):
            cv2.fillPoly(img, polygons, bgr, lineType=cv2.LINE_AA, shift=SUBPIXEL_SHIFT)

        self._paint(draw, color, alpha)

    def stroke_path(self, path, color, line_width=1.0, alpha=1.0):
        polylines = path.to_polylines()
        if not polylines:
            return
        thickness = max(1, int(round(line_width * self.pixel_ratio)))

        def draw(img, bgr):
            for points, closed in polylines:
                cv2.polylines(img, [self._to_pixels(points)], closed, bgr, thickness,
                              lineType=cv2.LINE_AA, shift=SUBPIXEL_SHIFT)

        self._paint(draw, color, alpha)

    def _font(self, size: float, bold: bool) -> Tuple[float, int]:
        font_scale = size * self.pixel_ratio / HERSHEY_BASE_HEIGHT
        thickness = max(1, int(round((2 if bold else 1) * self.pixel_ratio)))
        return font_scale, thickness

    def measure_text(self, text, size=12, bold=False):
        font_scale, thickness = self._font(size, bold)
        (w, h), _ = cv2.getTextSize(str(text), cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness)
        return (w / self.pixel_ratio, h / self.pixel_ratio)

    def fill_text(self, text, x, y, color, size=12, bold=False, align='left',
                  baseline='alphabetic', alpha=1.0):
        text = str(text)
        if not text:
            return
        font_scale, thickness = self._font(size, bold)
        (tw, th), base = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness)

        px = x * self.pixel_ratio
        py = y * self.pixel_ratio
        if align == 'center':
            px -= tw / 2
        elif align == 'right':
            px -= tw

        if baseline == 'middle':
            py += th / 2
        elif baseline == 'top':
            py += th
        elif baseline == 'bottom':
            py -= base

        org = (int(round(px)), int(round(py)))

        def draw(img, bgr):
            cv2.putText(img, text, org, cv2.FONT_HERSHEY_SIMPLEX, font_scale, bgr,
                        thickness, lineType=cv2.LINE_AA)

        self._paint(draw, color, alpha)

    def get_image(self) -> np.ndarray:
        """获取画布图像副本（BGR）"""
        return self.canvas.copy()


class RecordingSurface(DrawingSurface):
    """
    录制画布

    不产生像素，只按顺序记录每次绘制调用，用于检查几何计算结果
    """

    # 等宽近似：每个字符宽度为字号的 0.6 倍
    CHAR_WIDTH_RATIO = 0.6

    def __init__(self, width: float = 800, height: float = 450):
        self._width = 1.0
        self._height = 1.0
        self.operations: List[Dict[str, Any]] = []
        self.present_count = 0
        self.resize(width, height)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def resize(self, width, height):
        self._width = max(1.0, float(width))
        self._height = max(1.0, float(height))
        self.operations.append({'op': 'resize', 'width': self._width, 'height': self._height})

    def clear(self):
        self.operations = [{'op': 'clear'}]

    def fill_rect(self, x, y, width, height, color, alpha=1.0):
        self.operations.append({'op': 'fill_rect', 'x': x, 'y': y, 'width': width,
                                'height': height, 'color': color, 'alpha': alpha})

    def fill_linear_gradient(self, x0, y0, x1, y1, stops):
        self.operations.append({'op': 'fill_linear_gradient', 'start': (x0, y0),
                                'end': (x1, y1), 'stops': list(stops)})

    def fill_path(self, path, color, alpha=1.0):
        self.operations.append({'op': 'fill_path', 'commands': list(path.commands),
                                'bounds': path.bounds(), 'color': color, 'alpha': alpha})

    def stroke_path(self, path, color, line_width=1.0, alpha=1.0):
        self.operations.append({'op': 'stroke_path', 'commands': list(path.commands),
                                'bounds': path.bounds(), 'color': color,
                                'line_width': line_width, 'alpha': alpha})

    def measure_text(self, text, size=12, bold=False):
        return (len(str(text)) * size * self.CHAR_WIDTH_RATIO, float(size))

    def fill_text(self, text, x, y, color, size=12, bold=False, align='left',
                  baseline='alphabetic', alpha=1.0):
        self.operations.append({'op': 'fill_text', 'text': str(text), 'x': x, 'y': y,
                                'color': color, 'size': size, 'bold': bold, 'align': align,
                                'baseline': baseline, 'alpha': alpha})

    def present(self):
        self.present_count += 1

    def find(self, op: str) -> List[Dict[str, Any]]:
        """按操作名筛选记录"""
        return [record for record in self.operations if record['op'] == op]
