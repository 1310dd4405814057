#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
渐进式图表动画引擎
主程序入口

读取数据与配置，渲染指定图表的动画并导出为静态图、帧序列、GIF 或视频
"""

import os
import sys
import argparse
from pathlib import Path

import yaml

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import Config
from core.chart_model import AnimationConfig, build_dataset, default_dataset, sample_dataset
from core.animation.animation_session import AnimationSession
from modules.animation_export import AnimationExporter, ExportConfig, ExportFormat
from utils.logging_utils import setup_logging

FORMATS = ('png', 'frames', 'gif', 'mp4', 'avi')


def load_dataset(data_path: str):
    """
    读取数据文件

    支持 JSON 或 YAML，内容为数据点列表，或带 data 键的映射

    Args:
        data_path (str): 数据文件路径

    Returns:
        数据点字典列表
    """
    with open(data_path, 'r', encoding='utf-8') as f:
        content = yaml.safe_load(f)

    if isinstance(content, dict):
        content = content.get('data', [])
    if not isinstance(content, list):
        raise ValueError(f"Data file must contain a list of points: {data_path}")
    return content


def default_output_path(output_format: str) -> str:
    if output_format == 'frames':
        return os.path.join('output', 'frames')
    return os.path.join('output', f'chart_animation.{output_format}')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='渐进式图表动画引擎')
    parser.add_argument('--data', '-d', help='数据文件路径（JSON/YAML）')
    parser.add_argument('--sample', action='store_true', help='使用随机示例数据')
    parser.add_argument('--seed', type=int, default=None, help='示例数据随机种子')
    parser.add_argument('--chart', '-c', help='图表类型: bar/line/area/pie/donut/statBar')
    parser.add_argument('--easing', '-e', help='缓动类型: linear/easeInOut/elastic/bounce')
    parser.add_argument('--theme', '-t', help='主题: dark/light/gradient')
    parser.add_argument('--duration', type=float, help='动画时长(秒)')
    parser.add_argument('--fps', type=int, help='导出帧率')
    parser.add_argument('--format', '-f', choices=FORMATS, help='导出格式')
    parser.add_argument('--progress', '-p', type=float, default=None,
                        help='只导出该进度的单帧（隐含 png 格式）')
    parser.add_argument('--width', type=int, help='画布宽度')
    parser.add_argument('--height', type=int, help='画布高度')
    parser.add_argument('--config', help='配置文件路径（YAML）')
    parser.add_argument('--output', '-o', help='输出路径')
    parser.add_argument('--debug', action='store_true', help='调试模式')
    return parser


def apply_arguments(config: Config, args) -> Config:
    """命令行参数覆盖配置文件"""
    overrides = {
        ('animation', 'chart_type'): args.chart,
        ('animation', 'easing'): args.easing,
        ('animation', 'theme'): args.theme,
        ('animation', 'duration'): args.duration,
        ('export', 'fps'): args.fps,
        ('export', 'format'): args.format,
        ('canvas', 'width'): args.width,
        ('canvas', 'height'): args.height,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            config.set(section, key, value)

    if args.progress is not None:
        config.set('export', 'format', 'png')
    if args.debug:
        config.set('logging', 'level', 'DEBUG')
    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = apply_arguments(Config(args.config), args)

    log_config = config.get('logging')
    logger = setup_logging(
        log_dir=log_config.get('log_dir'),
        console_level=log_config.get('level', 'INFO'),
        use_colors=log_config.get('use_colors', True),
    )

    animation_config = AnimationConfig.from_dict(config.get('animation'))
    chart_type = animation_config.chart_type

    try:
        if args.data:
            dataset = build_dataset(load_dataset(args.data))
        elif args.sample:
            dataset = sample_dataset(chart_type, seed=args.seed)
        else:
            dataset = default_dataset(chart_type)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load data: {str(e)}")
        return 1

    output_format = config.get('export', 'format', 'mp4')
    output_path = args.output or default_output_path(output_format)

    print("=" * 60)
    print("渐进式图表动画引擎")
    print("=" * 60)
    print(f"图表类型: {chart_type.value}")
    print(f"缓动类型: {animation_config.easing.value}")
    print(f"主题: {animation_config.theme.value}")
    print(f"数据点: {len(dataset)}")
    print(f"输出: {output_path} ({output_format})")
    print("=" * 60)

    session = AnimationSession(config.get('canvas'))
    session.setup(dataset, animation_config)
    exporter = AnimationExporter(config.get('export'))

    if output_format == 'png':
        progress = 1.0 if args.progress is None else args.progress
        result = exporter.export_still(session, output_path, progress)
    else:
        export_config = ExportConfig.from_dict(config.get('export'), output_path=output_path)
        export_config.format = ExportFormat(output_format)
        export_config.show_progress = not args.debug
        result = exporter.export(session, export_config)

    if not result.success:
        logger.error(f"Export failed: {result.error_message}")
        return 1

    print(f"完成: {result.total_frames} 帧, {result.file_size / 1024:.1f} KB -> {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
