# -*- coding: utf-8 -*-
"""
配置设置模块

定义图表动画引擎的画布、动画、播放、导出与日志参数
"""

import os
import copy
import logging
import yaml
from typing import Dict, Any, Optional


logger = logging.getLogger(__name__)

SECTIONS = ('canvas', 'animation', 'playback', 'export', 'logging')


class Config:
    """
    配置管理类

    管理引擎的所有参数配置，支持从 YAML 文件加载和默认值
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        初始化配置

        Args:
            config_path (str, optional): 配置文件路径
        """
        # 设置默认配置
        self._set_default_config()

        # 如果提供了配置文件路径，则加载配置
        if config_path:
            if os.path.exists(config_path):
                self._load_config_file(config_path)
            else:
                logger.warning(f"Config file not found: {config_path}, using defaults")

    def _set_default_config(self):
        """
        设置默认配置参数
        """
        # 画布参数
        self.canvas = {
            'width': 800,            # 画布宽度
            'height': 450,           # 画布高度
            'padding': 20,           # 容器适配时每侧留白
            'aspect_ratio': 16 / 9,  # 容器适配宽高比
            'pixel_ratio': 1.0,      # 设备像素比
        }

        # 动画参数
        self.animation = {
            'duration': 3.0,         # 动画时长(秒)
            'easing': 'easeInOut',   # 缓动类型
            'chart_type': 'bar',     # 图表类型
            'theme': 'dark',         # 主题
        }

        # 播放参数
        self.playback = {
            'speed': 1.0,            # 播放速度
            'loop': False,           # 是否循环
        }

        # 导出参数
        self.export = {
            'fps': 30,                          # 帧率
            'format': 'mp4',                    # 输出格式
            'output_path': 'output/animation.mp4',
            'quality': 'medium',                # 输出质量
            'resolution': None,                 # 导出尺寸，None 沿用画布尺寸
            'slide_delay': 0.0,                 # 幻灯片之间停留时间(秒)
        }

        # 日志参数
        self.logging = {
            'level': 'INFO',         # 控制台日志级别
            'log_dir': None,         # 日志文件目录，None 不写文件
            'use_colors': True,      # 彩色输出
        }

    def _load_config_file(self, config_path: str):
        """
        从文件加载配置

        Args:
            config_path (str): 配置文件路径
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

            if not isinstance(config_data, dict):
                raise ValueError("top level must be a mapping")

            # 更新配置
            self._update_config(config_data)
            logger.info(f"Loaded config from {config_path}")

        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.warning(f"Failed to load config file {config_path}: {str(e)}, using defaults")

    def _update_config(self, config_data: Dict[str, Any]):
        """
        更新配置数据

        Args:
            config_data (dict): 新的配置数据
        """
        for section, values in config_data.items():
            if hasattr(self, section) and isinstance(getattr(self, section), dict) and isinstance(values, dict):
                getattr(self, section).update(values)
            else:
                setattr(self, section, values)

    def get(self, section: str, key: str = None, default=None):
        """
        获取配置值

        Args:
            section (str): 配置段名
            key (str, optional): 配置键名
            default: 默认值

        Returns:
            配置值
        """
        if not hasattr(self, section):
            return default

        section_config = getattr(self, section)

        if key is None:
            return section_config

        if isinstance(section_config, dict):
            return section_config.get(key, default)
        else:
            return default

    def set(self, section: str, key: str, value):
        """
        设置配置值

        Args:
            section (str): 配置段名
            key (str): 配置键名
            value: 配置值
        """
        if not hasattr(self, section):
            setattr(self, section, {})

        section_config = getattr(self, section)
        if isinstance(section_config, dict):
            section_config[key] = value
        else:
            setattr(self, section, {key: value})

    def to_dict(self) -> Dict[str, Any]:
        """返回所有配置段的深拷贝"""
        return {section: copy.deepcopy(getattr(self, section)) for section in SECTIONS}

    def save_config(self, output_path: str) -> bool:
        """
        保存配置到文件

        Args:
            output_path (str): 输出文件路径

        Returns:
            bool: 是否成功
        """
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False,
                               allow_unicode=True, indent=2)
            logger.info(f"Config saved to: {output_path}")
            return True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save config: {str(e)}")
            return False

    def __str__(self):
        """
        返回配置的字符串表示
        """
        config_str = "Configuration Settings:\n"
        for section in SECTIONS:
            config_str += f"\n{section}:\n"
            for key, value in getattr(self, section).items():
                config_str += f"  {key}: {value}\n"
        return config_str


# 创建默认配置实例
default_config = Config()
