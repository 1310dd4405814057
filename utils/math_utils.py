# -*- coding: utf-8 -*-
"""
数学工具

提供动画插值与几何计算功能
包括数值截断、三次贝塞尔曲线求值与细分、圆弧离散化等
"""

import math
import logging
from typing import List, Tuple

import numpy as np


Point = Tuple[float, float]


class MathUtils:
    """
    数学工具类

    提供基础数值计算功能
    """

    @staticmethod
    def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
        """
        将数值限制在区间内

        Args:
            value (float): 输入值
            lower (float): 下界
            upper (float): 上界

        Returns:
            float: 截断后的值，NaN 视为下界
        """
        if value is None or math.isnan(value):
            return lower
        return max(lower, min(upper, value))

    @staticmethod
    def round_half_up(value: float) -> int:
        """四舍五入取整（.5 向正无穷方向）"""
        return int(math.floor(value + 0.5))

    @staticmethod
    def format_number(value: float) -> str:
        """
        数值转为显示文本，整数值不带小数点

        Args:
            value (float): 数值

        Returns:
            str: 显示文本
        """
        try:
            if float(value).is_integer():
                return str(int(value))
            return f"{value:g}"
        except (TypeError, ValueError, OverflowError):
            logging.debug(f"Cannot format value {value!r}")
            return str(value)


class GeometryUtils:
    """
    几何工具类

    提供贝塞尔曲线与圆弧相关的计算
    """

    @staticmethod
    def cubic_bezier_point(p0: Point, cp1: Point, cp2: Point, p1: Point, t: float) -> Point:
        """
        计算三次贝塞尔曲线上参数 t 处的点

        Args:
            p0 (Point): 起点
            cp1 (Point): 控制点1
            cp2 (Point): 控制点2
            p1 (Point): 终点
            t (float): 参数 [0, 1]

        Returns:
            Point: 曲线上的点
        """
        mt = 1.0 - t
        x = mt * mt * mt * p0[0] + 3 * mt * mt * t * cp1[0] + 3 * mt * t * t * cp2[0] + t * t * t * p1[0]
        y = mt * mt * mt * p0[1] + 3 * mt * mt * t * cp1[1] + 3 * mt * t * t * cp2[1] + t * t * t * p1[1]
        return (x, y)

    @staticmethod
    def truncate_cubic_bezier(p0: Point, cp1: Point, cp2: Point, p1: Point,
                              t: float) -> Tuple[Point, Point, Point]:
        """
        用 De Casteljau 细分截取曲线的 [0, t] 部分

        新控制点沿原控制多边形线性插值到截断点，
        截断端点的切线方向与完整曲线一致

        Args:
            p0 (Point): 起点
            cp1 (Point): 控制点1
            cp2 (Point): 控制点2
            p1 (Point): 终点
            t (float): 截断参数 [0, 1]

        Returns:
            Tuple[Point, Point, Point]: (新控制点1, 新控制点2, 截断端点)
        """
        partial_cp1 = (p0[0] + (cp1[0] - p0[0]) * t, p0[1] + (cp1[1] - p0[1]) * t)
        mid_cp = (cp1[0] + (cp2[0] - cp1[0]) * t, cp1[1] + (cp2[1] - cp1[1]) * t)
        partial_cp2 = (partial_cp1[0] + (mid_cp[0] - partial_cp1[0]) * t,
                       partial_cp1[1] + (mid_cp[1] - partial_cp1[1]) * t)
        end_point = GeometryUtils.cubic_bezier_point(p0, cp1, cp2, p1, t)
        return partial_cp1, partial_cp2, end_point

    @staticmethod
    def flatten_cubic_bezier(p0: Point, cp1: Point, cp2: Point, p1: Point,
                             num_points: int = 24) -> np.ndarray:
        """
        将三次贝塞尔曲线离散为折线

        Args:
            p0 (Point): 起点
            cp1 (Point): 控制点1
            cp2 (Point): 控制点2
            p1 (Point): 终点
            num_points (int): 采样点数（不含起点）

        Returns:
            np.ndarray: 形状为 (num_points, 2) 的点数组
        """
        t = np.linspace(0.0, 1.0, max(2, num_points + 1))[1:, None]
        mt = 1.0 - t
        pts = (mt ** 3) * np.asarray(p0) + 3 * (mt ** 2) * t * np.asarray(cp1) \
            + 3 * mt * (t ** 2) * np.asarray(cp2) + (t ** 3) * np.asarray(p1)
        return pts

    @staticmethod
    def normalize_sweep(start: float, end: float, anticlockwise: bool = False) -> float:
        """
        按画布圆弧语义计算扫掠角

        顺时针时扫掠角落在 [0, 2π]，逆时针时落在 [-2π, 0]

        Args:
            start (float): 起始角（弧度）
            end (float): 结束角（弧度）
            anticlockwise (bool): 是否逆时针

        Returns:
            float: 带符号的扫掠角
        """
        full = 2 * math.pi
        sweep = end - start
        if not anticlockwise:
            if sweep >= full:
                return full
            if sweep < 0:
                sweep = sweep % full
            return sweep
        if sweep <= -full:
            return -full
        if sweep > 0:
            sweep = -((-sweep) % full)
        return sweep

    @staticmethod
    def arc_points(cx: float, cy: float, radius: float, start: float, end: float,
                   anticlockwise: bool = False, max_step: float = math.pi / 36) -> np.ndarray:
        """
        将圆弧离散为折线点

        Args:
            cx (float): 圆心 x
            cy (float): 圆心 y
            radius (float): 半径
            start (float): 起始角
            end (float): 结束角
            anticlockwise (bool): 是否逆时针
            max_step (float): 最大角度步长

        Returns:
            np.ndarray: 形状为 (n, 2) 的点数组，包含首尾点
        """
        sweep = GeometryUtils.normalize_sweep(start, end, anticlockwise)
        steps = max(1, int(math.ceil(abs(sweep) / max_step)))
        angles = start + np.linspace(0.0, sweep, steps + 1)
        return np.stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)], axis=1)

    @staticmethod
    def polar_point(cx: float, cy: float, radius: float, angle: float) -> Point:
        """极坐标转平面坐标"""
        return (cx + math.cos(angle) * radius, cy + math.sin(angle) * radius)

    @staticmethod
    def calculate_bounding_box(points: List[Point]) -> Tuple[float, float, float, float]:
        """
        计算点集的边界框

        Args:
            points (List[Point]): 点列表

        Returns:
            Tuple[float, float, float, float]: (min_x, min_y, max_x, max_y)
        """
        if not points:
            return (0.0, 0.0, 0.0, 0.0)
        arr = np.asarray(points, dtype=np.float64)
        return (float(arr[:, 0].min()), float(arr[:, 1].min()),
                float(arr[:, 0].max()), float(arr[:, 1].max()))
