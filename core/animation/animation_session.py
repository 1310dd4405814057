# -*- coding: utf-8 -*-
"""
动画会话

绑定一份数据集快照、动画配置与绘图表面，对外提供按进度渲染单帧、
生成缓动关键帧和调整尺寸的接口
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..canvas import Canvas, DrawingSurface
from ..chart_model import AnimationConfig, Dataset, SurfaceExtents, build_dataset
from ..charts.compositor import FrameCompositor
from .easing import ease, generate_keyframes
from utils.math_utils import MathUtils


class AnimationSession:
    """
    动画会话

    每个会话独立持有状态；setup 之前的渲染请求记录警告后忽略
    """

    def __init__(self, canvas_config: Optional[Dict[str, Any]] = None):
        """
        初始化会话

        Args:
            canvas_config: 画布配置（width/height/pixel_ratio/padding/aspect_ratio），
                在 setup 未提供表面时用于创建光栅画布
        """
        self.canvas_config = canvas_config or {}
        self.logger = logging.getLogger(__name__)

        self.dataset: Dataset = ()
        self.config: Optional[AnimationConfig] = None
        self.surface: Optional[DrawingSurface] = None
        self.compositor: Optional[FrameCompositor] = None

        self.last_progress = 0.0
        self.last_eased = 0.0

    @property
    def is_ready(self) -> bool:
        return self.compositor is not None and self.config is not None

    def setup(self, dataset: Optional[Iterable], config: Union[AnimationConfig, Dict[str, Any], None],
              surface: Optional[DrawingSurface] = None) -> bool:
        """
        绑定数据集、配置与绘图表面

        数据集与配置作为一个整体替换；保留已有表面与尺寸

        Args:
            dataset: 数据点或字典序列
            config: 动画配置或配置字典
            surface (Optional[DrawingSurface]): 绘图表面，缺省时沿用旧表面或创建光栅画布

        Returns:
            bool: 是否成功
        """
        if isinstance(config, AnimationConfig):
            animation_config = config
        else:
            animation_config = AnimationConfig.from_dict(config or {})

        snapshot = build_dataset(dataset)

        if surface is not None and surface is not self.surface:
            extents = self.compositor.extents if self.compositor else None
            self.surface = surface
            self.compositor = FrameCompositor(surface, extents, self.canvas_config)
        elif self.surface is None:
            self.surface = Canvas(
                self.canvas_config.get('width', 800),
                self.canvas_config.get('height', 450),
                pixel_ratio=self.canvas_config.get('pixel_ratio', 1.0),
            )
            self.compositor = FrameCompositor(self.surface, config=self.canvas_config)

        self.dataset = snapshot
        self.config = animation_config
        self.last_progress = 0.0
        self.last_eased = 0.0

        self.logger.info(
            f"Session set up: {len(snapshot)} points, chart={animation_config.chart_type.value}, "
            f"easing={animation_config.easing.value}, theme={animation_config.theme.value}, "
            f"duration={animation_config.duration_seconds}s"
        )
        return True

    def render_frame(self, progress: float) -> bool:
        """
        渲染指定进度的一帧

        Args:
            progress (float): 原始进度，截断到 [0, 1]，NaN 视为 0

        Returns:
            bool: 是否已绘制
        """
        if not self.is_ready:
            self.logger.warning("render_frame called before setup, ignoring")
            return False

        progress = MathUtils.clamp(progress, 0.0, 1.0)
        eased = ease(self.config.easing, progress)
        self.compositor.render(self.dataset, self.config, eased)

        self.last_progress = progress
        self.last_eased = eased
        return True

    def generate_keyframes(self, num_frames: int) -> List[float]:
        """
        生成当前缓动类型的关键帧进度列表

        Args:
            num_frames (int): 帧数

        Returns:
            List[float]: 缓动进度
        """
        easing = self.config.easing if self.config else None
        if easing is None:
            self.logger.warning("generate_keyframes called before setup, using linear easing")
        return generate_keyframes(easing, num_frames)

    def resize(self, size: Union[SurfaceExtents, Tuple[float, float]]) -> Optional[SurfaceExtents]:
        """
        调整画布尺寸并按上次进度重绘

        Args:
            size: 显式尺寸，或容器尺寸 (宽, 高)（按 16:9 适配）

        Returns:
            Optional[SurfaceExtents]: 新尺寸，未 setup 时为 None
        """
        if self.compositor is None:
            self.logger.warning("resize called before setup, ignoring")
            return None

        if isinstance(size, SurfaceExtents):
            self.compositor.set_extents(size)
        else:
            container_width, container_height = size
            self.compositor.resize(container_width, container_height)

        if self.is_ready:
            self.render_frame(self.last_progress)
        return self.compositor.extents

    @property
    def extents(self) -> Optional[SurfaceExtents]:
        return self.compositor.extents if self.compositor else None

    def get_surface_handle(self) -> Optional[DrawingSurface]:
        """获取绘图表面，供导出等外部协作者读取帧"""
        return self.surface
