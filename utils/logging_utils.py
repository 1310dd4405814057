# -*- coding: utf-8 -*-
"""
日志工具

提供日志记录和管理功能
包括彩色控制台输出、轮转文件日志和快速配置入口
"""

import logging
import logging.handlers
import os
import sys
from typing import Dict, Optional, Union

import colorama
from colorama import Fore, Back, Style

# 初始化colorama
colorama.init(autoreset=True)


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """
    彩色日志格式化器

    为不同级别的日志添加颜色
    """

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT
    }

    def __init__(self, fmt=None, datefmt=None, use_colors=True):
        """
        初始化彩色格式化器

        Args:
            fmt (str): 日志格式
            datefmt (str): 日期格式
            use_colors (bool): 是否使用颜色
        """
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record):
        log_message = super().format(record)

        # 只在终端中着色
        if self.use_colors and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname)
            if color:
                log_message = f"{color}{log_message}{Style.RESET_ALL}"

        return log_message


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


class LogManager:
    """
    日志管理器

    创建处理器并把它们挂到命名日志记录器上
    """

    def __init__(self):
        self.handlers: Dict[str, logging.Handler] = {}

    def create_console_handler(self, name: str = 'console',
                               level: Union[str, int] = 'INFO',
                               use_colors: bool = True,
                               format_string: Optional[str] = None) -> logging.Handler:
        """
        创建控制台处理器

        Args:
            name (str): 处理器名称
            level (Union[str, int]): 日志级别
            use_colors (bool): 是否使用颜色
            format_string (Optional[str]): 格式字符串

        Returns:
            logging.Handler: 处理器
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_to_level(level))

        fmt = format_string or DEFAULT_FORMAT
        if use_colors:
            formatter = ColoredFormatter(fmt, DEFAULT_DATE_FORMAT)
        else:
            formatter = logging.Formatter(fmt, DEFAULT_DATE_FORMAT)
        handler.setFormatter(formatter)

        self.handlers[name] = handler
        return handler

    def create_file_handler(self, name: str, file_path: str,
                            level: Union[str, int] = 'INFO',
                            max_bytes: int = 10 * 1024 * 1024,
                            backup_count: int = 5) -> logging.Handler:
        """
        创建轮转文件处理器

        Args:
            name (str): 处理器名称
            file_path (str): 文件路径
            level (Union[str, int]): 日志级别
            max_bytes (int): 最大文件大小
            backup_count (int): 备份文件数量

        Returns:
            logging.Handler: 处理器
        """
        log_dir = os.path.dirname(file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=max_bytes, backupCount=backup_count,
            encoding='utf-8'
        )
        handler.setLevel(_to_level(level))
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT))

        self.handlers[name] = handler
        return handler


def setup_logging(log_dir: Optional[str] = None, app_name: str = 'chart_animator',
                  console_level: str = 'INFO', file_level: str = 'DEBUG',
                  use_colors: bool = True) -> logging.Logger:
    """
    快速设置日志配置

    控制台处理器挂在根日志记录器上，使各模块的 ``logging.getLogger(__name__)``
    都能输出；指定 log_dir 时额外写入轮转日志文件

    Args:
        log_dir (Optional[str]): 日志目录，None 表示不写文件
        app_name (str): 应用名称
        console_level (str): 控制台日志级别
        file_level (str): 文件日志级别
        use_colors (bool): 是否使用颜色

    Returns:
        logging.Logger: 应用日志记录器
    """
    log_manager = LogManager()
    handler_names = ['console']
    log_manager.create_console_handler('console', console_level, use_colors)

    if log_dir:
        log_manager.create_file_handler('file', os.path.join(log_dir, f'{app_name}.log'), file_level)
        handler_names.append('file')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler_name in handler_names:
        root_logger.addHandler(log_manager.handlers[handler_name])

    return logging.getLogger(app_name)
