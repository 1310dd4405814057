#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
动画导出测试
"""

import sys
from pathlib import Path

import cv2
import pytest
from PIL import Image

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from core.animation.animation_session import AnimationSession
from core.canvas import Canvas, RecordingSurface
from core.chart_model import AnimationConfig, default_dataset
from modules.animation_export import (
    AnimationExporter, ExportConfig, ExportFormat, frame_progressions
)


class CountingCanvas(Canvas):
    """记录 present 调用次数的画布"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.present_calls = 0

    def present(self):
        self.present_calls += 1


def make_session(chart_type='bar', duration=1.0, surface=None):
    session = AnimationSession()
    surface = surface or CountingCanvas(160, 90)
    session.setup(default_dataset(chart_type),
                  AnimationConfig.create(duration_seconds=duration, chart_type=chart_type),
                  surface)
    return session, surface


def test_frame_progressions():
    progressions = frame_progressions(30, 3)
    assert len(progressions) == 91
    assert progressions[0] == 0.0
    assert progressions[-1] == 1.0
    assert progressions[45] == pytest.approx(0.5)


def test_too_short_animation_samples_final_frame():
    assert frame_progressions(30, 0.01) == [1.0]


def test_export_frames(tmp_path):
    session, surface = make_session()
    output_dir = tmp_path / 'frames'
    config = ExportConfig(str(output_dir), format=ExportFormat.FRAMES, fps=5, show_progress=False)

    result = AnimationExporter().export(session, config)

    assert result.success, result.error_message
    assert result.total_frames == 6
    assert len(list(output_dir.glob('frame_*.png'))) == 6
    assert surface.present_calls == 6

    first = cv2.imread(str(output_dir / 'frame_000000.png'))
    last = cv2.imread(str(output_dir / 'frame_000005.png'))
    assert first.shape == (90, 160, 3)
    assert (first != last).any()


def test_export_gif(tmp_path):
    session, _ = make_session('pie')
    output_path = tmp_path / 'chart.gif'
    config = ExportConfig(str(output_path), format=ExportFormat.GIF, fps=4, show_progress=False)

    result = AnimationExporter().export(session, config)

    assert result.success, result.error_message
    assert result.total_frames == 5
    with Image.open(output_path) as image:
        assert image.size == (160, 90)


def test_export_video(tmp_path):
    session, _ = make_session('line')
    output_path = tmp_path / 'chart.avi'
    config = ExportConfig(str(output_path), format=ExportFormat.AVI, fps=5, codec='mjpg',
                          show_progress=False)

    result = AnimationExporter().export(session, config)

    assert result.success, result.error_message
    assert result.total_frames == 6
    assert output_path.stat().st_size > 0


def test_export_resolution_is_restored(tmp_path):
    session, surface = make_session()
    config = ExportConfig(str(tmp_path / 'frames'), format=ExportFormat.FRAMES, fps=2,
                          resolution=(64, 36), show_progress=False)

    result = AnimationExporter().export(session, config)

    assert result.success
    assert cv2.imread(str(tmp_path / 'frames' / 'frame_000000.png')).shape == (36, 64, 3)
    assert (surface.width, surface.height) == (160, 90)


def test_export_slides_in_sequence(tmp_path):
    session, _ = make_session()
    slides = [
        (default_dataset('bar'), AnimationConfig.create(duration_seconds=1, chart_type='bar')),
        (default_dataset('statBar'), {'duration': 1, 'chart_type': 'statBar'}),
    ]
    config = ExportConfig(str(tmp_path / 'slides'), format=ExportFormat.FRAMES, fps=5,
                          slide_delay=0.4, show_progress=False)

    exporter = AnimationExporter()
    result = exporter.export_slides(session, slides, config)

    # 两张幻灯片各 6 帧，中间停留 2 帧
    assert result.success
    assert result.total_frames == 14
    assert len(list((tmp_path / 'slides').glob('frame_*.png'))) == 14
    assert session.config.chart_type.value == 'statBar'


def test_export_still(tmp_path):
    session, _ = make_session('donut')
    output_path = tmp_path / 'still.png'

    result = AnimationExporter().export_still(session, str(output_path), progress=0.5)

    assert result.success
    assert cv2.imread(str(output_path)).shape == (90, 160, 3)


def test_invalid_fps_is_reported(tmp_path):
    session, _ = make_session()
    config = ExportConfig(str(tmp_path / 'x.gif'), format=ExportFormat.GIF, fps=0)

    result = AnimationExporter().export(session, config)

    assert not result.success
    assert result.error_message == "FPS must be positive"


def test_surface_without_pixels_fails_gracefully(tmp_path):
    session, _ = make_session(surface=RecordingSurface(160, 90))
    config = ExportConfig(str(tmp_path / 'x.gif'), format=ExportFormat.GIF, fps=2,
                          show_progress=False)

    result = AnimationExporter().export(session, config)

    assert not result.success
    assert 'pixels' in result.error_message


def test_export_config_from_dict():
    config = ExportConfig.from_dict({'fps': 12, 'format': 'gif', 'resolution': [320, 180]},
                                    output_path='out.gif')
    assert config.format is ExportFormat.GIF
    assert config.fps == 12
    assert config.resolution == (320, 180)
    assert config.output_path == 'out.gif'
