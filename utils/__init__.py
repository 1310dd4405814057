# -*- coding: utf-8 -*-
"""
工具模块

提供各种辅助工具和实用函数
包括数学计算、颜色处理、日志、计时等工具
"""

from .math_utils import MathUtils, GeometryUtils
from .color_utils import ColorUtils
from .logging_utils import setup_logging, LogManager, ColoredFormatter
from .performance import Timer, FrameRateMeter

__all__ = [
    # 数学工具
    'MathUtils',
    'GeometryUtils',

    # 颜色工具
    'ColorUtils',

    # 日志工具
    'setup_logging',
    'LogManager',
    'ColoredFormatter',

    # 计时工具
    'Timer',
    'FrameRateMeter'
]
