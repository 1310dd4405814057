# -*- coding: utf-8 -*-
"""
缓动函数模块

把原始进度 [0, 1] 映射为缓动后的进度，控制动画的速度感
所有函数对任意输入都有定义，输入先截断到 [0, 1]
"""

import math
from typing import Callable, Dict, List

from ..chart_model import EasingType
from utils.math_utils import MathUtils


# 弹跳曲线常数
BOUNCE_N1 = 7.5625
BOUNCE_D1 = 2.75

ELASTIC_C4 = (2 * math.pi) / 3


def linear(p: float) -> float:
    return p


def ease_in_out(p: float) -> float:
    """分段二次：前半段加速，后半段减速，在 0.5 处一阶连续"""
    if p < 0.5:
        return 2 * p * p
    return 1 - math.pow(-2 * p + 2, 2) / 2


def elastic(p: float) -> float:
    """
    弹性缓动

    末端会越过 1 再回弹，不保证单调
    """
    if p == 0 or p == 1:
        return p
    return math.pow(2, -10 * p) * math.sin((p * 10 - 0.75) * ELASTIC_C4) + 1


def bounce(p: float) -> float:
    """四段二次弹跳，依次在 1/d1、2/d1、2.5/d1 处落地"""
    if p < 1 / BOUNCE_D1:
        return BOUNCE_N1 * p * p
    if p < 2 / BOUNCE_D1:
        p -= 1.5 / BOUNCE_D1
        return BOUNCE_N1 * p * p + 0.75
    if p < 2.5 / BOUNCE_D1:
        p -= 2.25 / BOUNCE_D1
        return BOUNCE_N1 * p * p + 0.9375
    if p >= 1:
        return 1.0
    p -= 2.625 / BOUNCE_D1
    return BOUNCE_N1 * p * p + 0.984375


EASING_FUNCTIONS: Dict[EasingType, Callable[[float], float]] = {
    EasingType.LINEAR: linear,
    EasingType.EASE_IN_OUT: ease_in_out,
    EasingType.ELASTIC: elastic,
    EasingType.BOUNCE: bounce,
}


def ease(kind, progress: float) -> float:
    """
    计算缓动进度

    Args:
        kind: 缓动类型（EasingType 或其字符串取值），未知类型按线性处理
        progress (float): 原始进度，越界时截断

    Returns:
        float: 缓动后的进度
    """
    p = MathUtils.clamp(progress, 0.0, 1.0)
    func = EASING_FUNCTIONS.get(EasingType.from_value(kind), linear)
    return func(p)


def generate_keyframes(kind, num_frames: int) -> List[float]:
    """
    生成均匀采样的缓动关键帧

    第 i 帧取进度 i/(n-1)；n 为 1 时只返回进度 0 的一帧

    Args:
        kind: 缓动类型
        num_frames (int): 帧数

    Returns:
        List[float]: 缓动进度列表
    """
    if num_frames is None or num_frames < 1:
        return []
    if num_frames == 1:
        return [ease(kind, 0.0)]
    return [ease(kind, i / (num_frames - 1)) for i in range(num_frames)]
