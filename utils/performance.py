# -*- coding: utf-8 -*-
"""
性能工具

提供导出与播放过程中的计时功能
"""

import time
import logging
from collections import deque
from typing import Optional


class Timer:
    """
    计时器类

    提供高精度时间测量功能
    """

    def __init__(self, name: str = "Timer"):
        """
        初始化计时器

        Args:
            name (str): 计时器名称
        """
        self.name = name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.elapsed_time = 0.0
        self.is_running = False

    def start(self):
        """开始计时"""
        if self.is_running:
            raise RuntimeError(f"Timer '{self.name}' is already running")

        self.start_time = time.perf_counter()
        self.is_running = True

    def stop(self) -> float:
        """
        停止计时

        Returns:
            float: 经过的时间（秒）
        """
        if not self.is_running:
            raise RuntimeError(f"Timer '{self.name}' is not running")

        self.end_time = time.perf_counter()
        self.elapsed_time = self.end_time - self.start_time
        self.is_running = False

        return self.elapsed_time

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        logging.getLogger(__name__).debug(f"{self.name}: {self.elapsed_time:.4f}s")
        return False


class FrameRateMeter:
    """
    帧率统计

    保留最近 window 个帧时间戳，按首尾间隔估算实际刷新帧率
    """

    def __init__(self, window: int = 60):
        self.timestamps = deque(maxlen=max(2, window))

    def tick(self, now: float):
        """记录一帧的时间戳（秒）"""
        self.timestamps.append(now)

    def reset(self):
        self.timestamps.clear()

    @property
    def fps(self) -> float:
        if len(self.timestamps) < 2:
            return 0.0
        span = self.timestamps[-1] - self.timestamps[0]
        if span <= 0:
            return 0.0
        return (len(self.timestamps) - 1) / span
