#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
动画导出模块

按固定帧率对动画会话逐帧采样，写出 PNG 帧序列、GIF 或视频文件

主要功能:
1. 确定性采样：第 i 帧进度为 i/total，total = round(fps * duration)
2. 多张幻灯片严格顺序渲染到同一个输出，幻灯片之间可停留
3. 单帧静态图导出
"""

import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image
from tqdm import tqdm

from core.chart_model import AnimationConfig, SurfaceExtents
from utils.performance import Timer


class ExportFormat(Enum):
    """导出格式"""
    FRAMES = "frames"  # 输出单独帧
    GIF = "gif"
    MP4 = "mp4"
    AVI = "avi"


# GIF 调色板颜色数
GIF_COLORS = {
    'low': 64,
    'medium': 128,
    'high': 256,
}

DEFAULT_CODECS = {
    ExportFormat.MP4: 'mp4v',
    ExportFormat.AVI: 'xvid',
}


@dataclass
class ExportConfig:
    """
    导出配置

    Attributes:
        output_path (str): 输出文件路径（帧序列时为目录）
        format (ExportFormat): 导出格式
        fps (int): 帧率
        quality (str): 质量 low/medium/high
        resolution (Optional[Tuple[int, int]]): 导出尺寸，None 表示沿用会话尺寸
        slide_delay (float): 幻灯片之间停留的秒数
        codec (Optional[str]): 视频编码器，None 时按格式选择
        show_progress (bool): 是否显示进度条
    """
    output_path: str
    format: ExportFormat = ExportFormat.MP4
    fps: int = 30
    quality: str = 'medium'
    resolution: Optional[Tuple[int, int]] = None
    slide_delay: float = 0.0
    codec: Optional[str] = None
    show_progress: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], output_path: Optional[str] = None) -> "ExportConfig":
        """
        从配置字典创建

        Args:
            data: export 配置段
            output_path: 覆盖配置中的输出路径

        Returns:
            ExportConfig: 导出配置
        """
        resolution = data.get('resolution')
        return cls(
            output_path=output_path or data.get('output_path', 'output/animation.mp4'),
            format=ExportFormat(data.get('format', 'mp4')),
            fps=int(data.get('fps', 30)),
            quality=data.get('quality', 'medium'),
            resolution=tuple(resolution) if resolution else None,
            slide_delay=float(data.get('slide_delay', 0.0)),
            codec=data.get('codec'),
            show_progress=data.get('show_progress', True),
        )


@dataclass
class ExportResult:
    """导出结果"""
    success: bool
    output_path: str
    total_frames: int
    duration: float
    file_size: int
    average_fps: float
    error_message: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


def failed_result(message: str, output_path: str = "") -> ExportResult:
    return ExportResult(
        success=False,
        output_path=output_path,
        total_frames=0,
        duration=0,
        file_size=0,
        average_fps=0,
        error_message=message
    )


def frame_progressions(fps: float, duration: float) -> List[float]:
    """
    计算采样进度序列

    total = round(fps * duration)，共 total + 1 帧；total 为 0 时只采样进度 1

    Args:
        fps (float): 帧率
        duration (float): 动画时长（秒）

    Returns:
        List[float]: 每帧的原始进度
    """
    total = int(round(fps * duration))
    if total <= 0:
        return [1.0]
    return [i / total for i in range(total + 1)]


class AnimationExporter:
    """
    动画导出器

    所有帧都在会话的同一个绘图表面上渲染；每次读取像素前先调用 present()
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化导出器

        Args:
            config: export 配置段
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

    def export(self, session, export_config: ExportConfig) -> ExportResult:
        """
        导出会话当前的动画

        Args:
            session: 已 setup 的动画会话
            export_config (ExportConfig): 导出配置

        Returns:
            ExportResult: 导出结果
        """
        if not session.is_ready:
            return failed_result("Session is not set up")
        return self.export_slides(session, [(session.dataset, session.config)], export_config)

    def export_slides(self, session, slides: Sequence[Tuple[Any, AnimationConfig]],
                      export_config: ExportConfig) -> ExportResult:
        """
        依次导出多张幻灯片到同一个输出

        Args:
            session: 动画会话（每张幻灯片重新 setup）
            slides: (数据集, 动画配置) 列表
            export_config (ExportConfig): 导出配置

        Returns:
            ExportResult: 导出结果
        """
        slides = [
            (dataset, config if isinstance(config, AnimationConfig) else AnimationConfig.from_dict(config or {}))
            for dataset, config in slides
        ]
        valid, message = self._validate_config(export_config, slides)
        if not valid:
            self.logger.error(f"Invalid export configuration: {message}")
            return failed_result(message, export_config.output_path)

        previous_extents = session.extents
        try:
            if export_config.resolution:
                width, height = export_config.resolution
                session.resize(SurfaceExtents(width, height))

            output_dir = os.path.dirname(export_config.output_path)
            if output_dir and export_config.format != ExportFormat.FRAMES:
                os.makedirs(output_dir, exist_ok=True)

            with Timer("export") as timer:
                frames = self._iter_frames(session, slides, export_config)
                if export_config.format == ExportFormat.FRAMES:
                    total_frames, file_size = self._write_frames(frames, export_config)
                elif export_config.format == ExportFormat.GIF:
                    total_frames, file_size = self._write_gif(frames, export_config)
                else:
                    total_frames, file_size = self._write_video(frames, export_config)

            self.logger.info(f"Exported {total_frames} frames to {export_config.output_path} "
                             f"in {timer.elapsed_time:.2f}s")
            return ExportResult(
                success=True,
                output_path=export_config.output_path,
                total_frames=total_frames,
                duration=timer.elapsed_time,
                file_size=file_size,
                average_fps=total_frames / timer.elapsed_time if timer.elapsed_time > 0 else 0
            )

        except Exception as e:
            self.logger.error(f"Error exporting animation: {str(e)}")
            return failed_result(str(e), export_config.output_path)
        finally:
            if export_config.resolution and previous_extents is not None:
                session.resize(previous_extents)

    def export_still(self, session, output_path: str, progress: float = 1.0) -> ExportResult:
        """
        导出单帧静态图

        Args:
            session: 已 setup 的动画会话
            output_path (str): 图片路径
            progress (float): 原始进度

        Returns:
            ExportResult: 导出结果
        """
        if not session.render_frame(progress):
            return failed_result("Session is not set up", output_path)

        try:
            image = self._capture(session)
            output_dir = os.path.dirname(output_path)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            if not cv2.imwrite(output_path, image):
                return failed_result(f"Failed to write image: {output_path}", output_path)

            self.logger.info(f"Saved frame at progress {progress:.2f} to {output_path}")
            return ExportResult(
                success=True,
                output_path=output_path,
                total_frames=1,
                duration=0,
                file_size=os.path.getsize(output_path),
                average_fps=0
            )
        except Exception as e:
            self.logger.error(f"Error exporting frame: {str(e)}")
            return failed_result(str(e), output_path)

    def count_frames(self, slides: Sequence[Tuple[Any, AnimationConfig]],
                     export_config: ExportConfig) -> int:
        """导出的总帧数，含幻灯片之间的停留帧"""
        hold = self._hold_frames(export_config)
        total = sum(len(frame_progressions(export_config.fps, config.duration_seconds))
                    for _, config in slides)
        return total + hold * max(0, len(slides) - 1)

    def _hold_frames(self, export_config: ExportConfig) -> int:
        return max(0, int(round(export_config.slide_delay * export_config.fps)))

    def _capture(self, session) -> np.ndarray:
        surface = session.get_surface_handle()
        # 读取像素前等待排队的绘制完成
        surface.present()
        image = surface.get_image()
        if image is None:
            raise RuntimeError("Drawing surface does not provide pixels")
        return image

    def _iter_frames(self, session, slides, export_config: ExportConfig) -> Iterator[np.ndarray]:
        """按顺序渲染并产出每一帧图像"""
        hold = self._hold_frames(export_config)
        total = self.count_frames(slides, export_config)
        progress_bar = tqdm(total=total, desc="Exporting frames", disable=not export_config.show_progress)

        try:
            for index, (dataset, config) in enumerate(slides):
                session.setup(dataset, config)
                image = None
                for progress in frame_progressions(export_config.fps, session.config.duration_seconds):
                    session.render_frame(progress)
                    image = self._capture(session)
                    progress_bar.update(1)
                    yield image

                if index < len(slides) - 1 and image is not None:
                    for _ in range(hold):
                        progress_bar.update(1)
                        yield image
        finally:
            progress_bar.close()

    def _write_frames(self, frames: Iterator[np.ndarray], export_config: ExportConfig) -> Tuple[int, int]:
        output_dir = export_config.output_path
        os.makedirs(output_dir, exist_ok=True)

        count = 0
        total_size = 0
        for i, image in enumerate(frames):
            frame_path = os.path.join(output_dir, f"frame_{i:06d}.png")
            if not cv2.imwrite(frame_path, image):
                raise IOError(f"Failed to write frame: {frame_path}")
            total_size += os.path.getsize(frame_path)
            count += 1
        return count, total_size

    def _write_gif(self, frames: Iterator[np.ndarray], export_config: ExportConfig) -> Tuple[int, int]:
        colors = GIF_COLORS.get(export_config.quality, GIF_COLORS['medium'])
        pil_images = []
        for image in frames:
            frame_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
            pil_images.append(Image.fromarray(frame_rgb).quantize(colors=colors))

        if not pil_images:
            raise RuntimeError("No frames rendered")

        pil_images[0].save(
            export_config.output_path,
            save_all=True,
            append_images=pil_images[1:],
            duration=int(1000 / export_config.fps),  # 毫秒
            loop=0
        )
        return len(pil_images), os.path.getsize(export_config.output_path)

    def _write_video(self, frames: Iterator[np.ndarray], export_config: ExportConfig) -> Tuple[int, int]:
        fourcc = self._get_fourcc(export_config)
        video_writer = None
        count = 0
        try:
            for image in frames:
                if video_writer is None:
                    height, width = image.shape[:2]
                    video_writer = cv2.VideoWriter(export_config.output_path, fourcc,
                                                   export_config.fps, (width, height))
                    if not video_writer.isOpened():
                        raise IOError("Failed to open video writer")
                video_writer.write(image)
                count += 1
        finally:
            if video_writer is not None:
                video_writer.release()

        if count == 0:
            raise RuntimeError("No frames rendered")
        return count, os.path.getsize(export_config.output_path)

    def _get_fourcc(self, export_config: ExportConfig) -> int:
        """
        获取视频编码器

        Args:
            export_config: 导出配置

        Returns:
            FourCC代码
        """
        codec_map = {
            'mp4v': cv2.VideoWriter_fourcc(*'mp4v'),
            'xvid': cv2.VideoWriter_fourcc(*'XVID'),
            'mjpg': cv2.VideoWriter_fourcc(*'MJPG'),
            'h264': cv2.VideoWriter_fourcc(*'H264')
        }
        codec = (export_config.codec or DEFAULT_CODECS.get(export_config.format, 'mp4v')).lower()
        return codec_map.get(codec, codec_map['mp4v'])

    def _validate_config(self, export_config: ExportConfig, slides) -> Tuple[bool, str]:
        """
        验证导出配置

        Returns:
            (是否有效, 错误信息)
        """
        if export_config.fps <= 0:
            return False, "FPS must be positive"

        if not export_config.output_path:
            return False, "Output path is required"

        if not slides:
            return False, "Nothing to export"

        if export_config.resolution:
            width, height = export_config.resolution
            if width <= 0 or height <= 0:
                return False, "Resolution must be positive"

        return True, ""
