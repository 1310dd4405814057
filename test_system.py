#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
系统测试
用于验证图表动画引擎的目录结构、依赖、配置与命令行入口
"""

import sys
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def test_imports():
    """
    测试所有模块的导入
    """
    from core import AnimationSession, Canvas, RecordingSurface, TimelineManager, ease
    from core.charts import FrameCompositor, get_theme
    from utils import MathUtils, GeometryUtils, ColorUtils, setup_logging, Timer
    from modules.animation_export import AnimationExporter
    from config.settings import Config, default_config

    assert callable(ease)
    assert default_config.get('animation', 'easing') == 'easeInOut'


@pytest.mark.parametrize('package', ['numpy', 'cv2', 'PIL', 'yaml', 'colorama', 'tqdm'])
def test_dependencies(package):
    """
    测试依赖包
    """
    __import__(package)


def test_directory_structure():
    """
    测试目录结构
    """
    required_dirs = [
        'core',
        'core/animation',
        'core/charts',
        'config',
        'modules',
        'utils'
    ]

    for dir_path in required_dirs:
        assert (project_root / dir_path).is_dir(), f"{dir_path}/ missing"


def test_config_file():
    """
    测试配置文件
    """
    from config.settings import Config, SECTIONS

    config = Config(str(project_root / 'config' / 'default.yaml'))
    for section in SECTIONS:
        assert isinstance(config.get(section), dict)
    assert config.get('export', 'fps') == 30


def test_config_round_trip(tmp_path):
    from config.settings import Config

    config = Config()
    config.set('animation', 'theme', 'light')
    config.set('playback', 'loop', True)
    output_path = tmp_path / 'config.yaml'
    assert config.save_config(str(output_path))

    loaded = Config(str(output_path))
    assert loaded.get('animation', 'theme') == 'light'
    assert loaded.get('playback', 'loop') is True
    assert loaded.get('missing', 'key', 'fallback') == 'fallback'


def test_broken_config_uses_defaults(tmp_path):
    from config.settings import Config

    broken = tmp_path / 'broken.yaml'
    broken.write_text("animation: [unclosed", encoding='utf-8')
    config = Config(str(broken))
    assert config.get('animation', 'chart_type') == 'bar'


def test_cli_still_frame(tmp_path):
    """
    测试命令行导出单帧
    """
    from main import main

    output_path = tmp_path / 'pie.png'
    exit_code = main(['--chart', 'pie', '--theme', 'gradient', '--progress', '0.5',
                      '--width', '160', '--height', '90', '--output', str(output_path)])

    assert exit_code == 0
    assert output_path.exists()


def test_cli_with_data_file(tmp_path):
    from main import main

    output_dir = tmp_path / 'frames'
    exit_code = main(['--data', str(project_root / 'data' / 'sample_stats.yaml'),
                      '--chart', 'statBar', '--format', 'frames', '--fps', '2',
                      '--duration', '1', '--width', '480', '--height', '480',
                      '--output', str(output_dir)])

    assert exit_code == 0
    assert len(list(output_dir.glob('frame_*.png'))) == 3


def test_cli_missing_data_file(tmp_path):
    from main import main

    exit_code = main(['--data', str(tmp_path / 'nope.json'), '--progress', '1',
                      '--output', str(tmp_path / 'x.png')])
    assert exit_code == 1


def test_load_dataset_formats():
    from main import load_dataset

    sales = load_dataset(str(project_root / 'data' / 'sample_sales.json'))
    assert [item['label'] for item in sales][:2] == ['Jan', 'Feb']
    stats = load_dataset(str(project_root / 'data' / 'sample_stats.yaml'))
    assert stats[1]['max'] == 60
