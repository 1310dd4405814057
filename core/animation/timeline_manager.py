# -*- coding: utf-8 -*-
"""
时间轴管理器

驱动图表动画的播放：由外部在每次刷新时调用 update，
按经过的真实时间推进当前时间并渲染对应进度的帧
"""

import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from utils.math_utils import MathUtils
from utils.performance import FrameRateMeter


class PlaybackState(Enum):
    """
    播放状态枚举
    """
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class PlaybackSettings:
    """
    播放设置

    Attributes:
        speed (float): 播放速度
        loop (bool): 是否循环
    """
    speed: float = 1.0
    loop: bool = False


@dataclass
class TimelineState:
    """
    时间轴状态

    Attributes:
        current_time (float): 当前时间（秒）
        playback_state (PlaybackState): 播放状态
        last_tick (Optional[float]): 上次 update 的时钟读数
        frames_rendered (int): 已渲染帧数
        loops_completed (int): 已完成的循环次数
    """
    current_time: float = 0.0
    playback_state: PlaybackState = PlaybackState.STOPPED
    last_tick: Optional[float] = None
    frames_rendered: int = 0
    loops_completed: int = 0


MIN_SPEED = 0.1
MAX_SPEED = 10.0


class TimelineManager:
    """
    时间轴管理器

    播放结束时时间停在终点并触发 finished 事件；再次 play 从头开始。
    取消播放只会阻止后续帧的渲染，已经开始的帧总会画完
    """

    EVENTS = ('frame', 'finished', 'state_changed')

    def __init__(self, session, config: Optional[Dict[str, Any]] = None,
                 clock: Optional[Callable[[], float]] = None):
        """
        初始化时间轴管理器

        Args:
            session: 已 setup 的动画会话
            config: 配置字典，读取 playback.speed 与 playback.loop
            clock: 返回秒数的单调时钟，缺省为 time.perf_counter
        """
        self.session = session
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.clock = clock or time.perf_counter

        playback_config = self.config.get('playback', {}) or {}
        self.playback_settings = PlaybackSettings(
            speed=MathUtils.clamp(playback_config.get('speed', 1.0), MIN_SPEED, MAX_SPEED),
            loop=bool(playback_config.get('loop', False)),
        )
        self.timeline_state = TimelineState()
        self.event_callbacks: Dict[str, List[Callable]] = {}
        self.frame_meter = FrameRateMeter()

    @property
    def duration(self) -> float:
        if self.session.config is None:
            return 0.0
        return self.session.config.duration_seconds

    @property
    def current_time(self) -> float:
        return self.timeline_state.current_time

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return MathUtils.clamp(self.timeline_state.current_time / self.duration, 0.0, 1.0)

    @property
    def state(self) -> PlaybackState:
        return self.timeline_state.playback_state

    @property
    def is_playing(self) -> bool:
        return self.timeline_state.playback_state == PlaybackState.PLAYING

    def _set_state(self, state: PlaybackState):
        if self.timeline_state.playback_state == state:
            return
        old_state = self.timeline_state.playback_state
        self.timeline_state.playback_state = state
        self._trigger_event_callbacks('state_changed', {'old': old_state.value, 'new': state.value})

    def _render_current(self, now: Optional[float] = None):
        if self.session.render_frame(self.progress):
            self.timeline_state.frames_rendered += 1
            self.frame_meter.tick(self.clock() if now is None else now)
            self._trigger_event_callbacks('frame', {
                'time': self.timeline_state.current_time,
                'progress': self.progress,
            })

    def play(self) -> bool:
        """
        开始播放

        Returns:
            bool: 是否成功
        """
        if not self.session.is_ready:
            self.logger.warning("No animation set up, cannot play")
            return False
        if self.is_playing:
            return True

        # 已在终点时从头开始
        if self.timeline_state.current_time >= self.duration:
            self.timeline_state.current_time = 0.0

        self.timeline_state.last_tick = self.clock()
        self.frame_meter.reset()
        self._set_state(PlaybackState.PLAYING)
        self.logger.info(f"Playback started at {self.timeline_state.current_time:.2f}s")
        return True

    def pause(self) -> bool:
        """
        暂停播放

        Returns:
            bool: 是否处于播放中并已暂停
        """
        if not self.is_playing:
            return False

        self.timeline_state.last_tick = None
        self._set_state(PlaybackState.PAUSED)
        self.logger.info(f"Playback paused at {self.timeline_state.current_time:.2f}s")
        return True

    def stop(self) -> bool:
        """
        停止播放并回到起点，重绘第 0 帧

        Returns:
            bool: 是否成功
        """
        self.timeline_state.last_tick = None
        self.timeline_state.current_time = 0.0
        self._set_state(PlaybackState.STOPPED)
        self.logger.info("Playback stopped")

        if self.session.is_ready:
            self._render_current()
        return True

    def seek(self, target_time: float) -> bool:
        """
        跳转到指定时间并重绘

        Args:
            target_time (float): 目标时间（秒），截断到 [0, duration]

        Returns:
            bool: 是否成功
        """
        if not self.session.is_ready:
            self.logger.warning("No animation set up, cannot seek")
            return False

        target_time = MathUtils.clamp(target_time, 0.0, self.duration)
        self.timeline_state.current_time = target_time
        if self.is_playing:
            self.timeline_state.last_tick = self.clock()

        self.logger.debug(f"Seeked to {target_time:.2f}s")
        self._render_current()
        return True

    def seek_progress(self, progress: float) -> bool:
        """按进度跳转，progress 截断到 [0, 1]"""
        return self.seek(MathUtils.clamp(progress, 0.0, 1.0) * self.duration)

    def update(self, now: Optional[float] = None) -> bool:
        """
        刷新回调：推进时间并渲染当前帧

        Args:
            now (Optional[float]): 当前时钟读数，缺省时读取时钟

        Returns:
            bool: 是否渲染了新帧
        """
        if not self.is_playing:
            return False

        now = self.clock() if now is None else now
        last_tick = self.timeline_state.last_tick if self.timeline_state.last_tick is not None else now
        elapsed = max(0.0, now - last_tick)
        self.timeline_state.last_tick = now

        duration = self.duration
        new_time = self.timeline_state.current_time + elapsed * self.playback_settings.speed
        finished = False

        if new_time >= duration:
            if self.playback_settings.loop and duration > 0:
                self.timeline_state.loops_completed += int(new_time // duration)
                new_time = new_time % duration
            else:
                new_time = duration
                finished = True

        self.timeline_state.current_time = new_time
        self._render_current(now)

        if finished:
            self.timeline_state.last_tick = None
            self._set_state(PlaybackState.STOPPED)
            self.logger.info("Playback finished")
            self._trigger_event_callbacks('finished', {'time': new_time})

        return True

    def set_playback_speed(self, speed: float) -> bool:
        """
        设置播放速度

        Args:
            speed (float): 播放速度，限制在 [0.1, 10]

        Returns:
            bool: 是否成功
        """
        speed = MathUtils.clamp(speed, MIN_SPEED, MAX_SPEED)
        self.playback_settings.speed = speed
        self.logger.info(f"Playback speed set to: {speed}x")
        return True

    def register_event_callback(self, event_type: str, callback: Callable):
        """
        注册事件回调

        Args:
            event_type (str): 事件类型（frame/finished/state_changed）
            callback (Callable): 回调函数，接收事件数据字典
        """
        if event_type not in self.EVENTS:
            self.logger.warning(f"Unknown timeline event type: {event_type}")
        self.event_callbacks.setdefault(event_type, []).append(callback)
        self.logger.debug(f"Event callback registered for: {event_type}")

    def _trigger_event_callbacks(self, event_type: str, data: Dict[str, Any]):
        """
        触发事件回调

        Args:
            event_type (str): 事件类型
            data (Dict[str, Any]): 事件数据
        """
        for callback in self.event_callbacks.get(event_type, []):
            try:
                callback(data)
            except Exception as e:
                self.logger.error(f"Error in {event_type} callback: {str(e)}")

    def get_timeline_statistics(self) -> Dict[str, Any]:
        """
        获取时间轴统计信息

        Returns:
            Dict[str, Any]: 统计信息
        """
        return {
            'timeline_state': {
                'current_time': self.timeline_state.current_time,
                'total_duration': self.duration,
                'playback_state': self.timeline_state.playback_state.value,
                'progress_percentage': self.progress * 100,
                'frames_rendered': self.timeline_state.frames_rendered,
                'loops_completed': self.timeline_state.loops_completed,
                'measured_fps': self.frame_meter.fps,
            },
            'playback_settings': {
                'speed': self.playback_settings.speed,
                'loop': self.playback_settings.loop,
            },
        }
