# -*- coding: utf-8 -*-
"""
核心模块

包含图表动画引擎的数据模型、绘图表面、图表渲染器与动画会话
"""

__version__ = '1.0.0'

# 导入主要模块
from .chart_model import (
    DataPoint, Dataset, AnimationConfig, SurfaceExtents,
    EasingType, ChartType, ThemeType, build_dataset, default_dataset, sample_dataset
)
from .canvas import Path, DrawingSurface, Canvas, RecordingSurface
from .charts import FrameCompositor, get_theme
from .animation import AnimationSession, TimelineManager, ease, generate_keyframes

__all__ = [
    'DataPoint',
    'Dataset',
    'AnimationConfig',
    'SurfaceExtents',
    'EasingType',
    'ChartType',
    'ThemeType',
    'build_dataset',
    'default_dataset',
    'sample_dataset',
    'Path',
    'DrawingSurface',
    'Canvas',
    'RecordingSurface',
    'FrameCompositor',
    'get_theme',
    'AnimationSession',
    'TimelineManager',
    'ease',
    'generate_keyframes'
]
