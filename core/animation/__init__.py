# -*- coding: utf-8 -*-
"""
动画模块

1. 缓动函数
2. 动画会话（按进度渲染单帧）
3. 时间轴播放控制
"""

from .easing import ease, generate_keyframes, EASING_FUNCTIONS
from .animation_session import AnimationSession
from .timeline_manager import TimelineManager, PlaybackState, PlaybackSettings, TimelineState

__all__ = [
    'ease',
    'generate_keyframes',
    'EASING_FUNCTIONS',
    'AnimationSession',
    'TimelineManager',
    'PlaybackState',
    'PlaybackSettings',
    'TimelineState'
]
