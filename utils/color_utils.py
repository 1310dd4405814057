# -*- coding: utf-8 -*-
"""
颜色工具

颜色令牌由 Pillow 的 ImageColor 解析，支持 #RGB、#RRGGBB、#RRGGBBAA、
rgb()、hsl()、hsv() 以及 CSS 颜色名；rgba()/hsla() 的小数透明度在交给
ImageColor 之前拆出
"""

import logging
import re
from typing import Tuple

from PIL import ImageColor


RGBA = Tuple[int, int, int, float]

FALLBACK_COLOR: RGBA = (136, 136, 136, 1.0)

# rgba(r, g, b, 0.5) / hsla(h, s%, l%, 50%)：ImageColor 只接受 0-255 的整数透明度
_ALPHA_FUNC_PATTERN = re.compile(r'^(rgb|hsl)a\s*\((.*),\s*([0-9.]+)(%?)\s*\)$', re.IGNORECASE)


class ColorUtils:
    """
    颜色工具类

    提供颜色令牌解析、插值与格式转换
    """

    @staticmethod
    def parse_color(token) -> RGBA:
        """
        解析颜色令牌

        Args:
            token: 颜色字符串，或 (r, g, b[, a]) 元组

        Returns:
            RGBA: (r, g, b, a)，r/g/b 为 0-255，a 为 0-1；无法解析时返回灰色
        """
        if isinstance(token, (tuple, list)) and len(token) in (3, 4):
            try:
                r, g, b = (max(0, min(255, int(c))) for c in token[:3])
                a = float(token[3]) if len(token) == 4 else 1.0
            except (TypeError, ValueError) as e:
                logging.warning(f"Invalid color tuple {token!r}: {str(e)}")
                return FALLBACK_COLOR
            return (r, g, b, max(0.0, min(1.0, a)))

        if not isinstance(token, str):
            logging.warning(f"Unsupported color token {token!r}, using fallback")
            return FALLBACK_COLOR

        text = token.strip()
        alpha = None
        match = _ALPHA_FUNC_PATTERN.match(text)
        if match:
            func, components, value, percent = match.groups()
            text = f"{func}({components})"
            try:
                alpha = float(value) / (100.0 if percent else 1.0)
            except ValueError as e:
                logging.warning(f"Invalid color token {token!r}: {str(e)}")
                return FALLBACK_COLOR

        try:
            rgb = ImageColor.getrgb(text)
        except ValueError as e:
            logging.warning(f"Invalid color token {token!r}: {str(e)}, using fallback")
            return FALLBACK_COLOR

        if alpha is None:
            alpha = rgb[3] / 255.0 if len(rgb) == 4 else 1.0
        return (rgb[0], rgb[1], rgb[2], max(0.0, min(1.0, alpha)))

    @staticmethod
    def to_bgr(token) -> Tuple[int, int, int]:
        """
        转换为 OpenCV 使用的 BGR 顺序

        Args:
            token: 颜色令牌

        Returns:
            Tuple[int, int, int]: (b, g, r)
        """
        r, g, b, _ = ColorUtils.parse_color(token)
        return (b, g, r)

    @staticmethod
    def to_hex(rgb: Tuple[int, int, int]) -> str:
        """RGB 转十六进制字符串"""
        return '#{:02X}{:02X}{:02X}'.format(*(int(c) for c in rgb[:3]))

    @staticmethod
    def interpolate_colors(color1, color2, t: float) -> str:
        """
        两种颜色之间插值

        Args:
            color1: 起始颜色
            color2: 结束颜色
            t (float): 插值参数 [0, 1]

        Returns:
            str: 十六进制颜色
        """
        r1, g1, b1, _ = ColorUtils.parse_color(color1)
        r2, g2, b2, _ = ColorUtils.parse_color(color2)
        t = max(0.0, min(1.0, t))
        return ColorUtils.to_hex((round(r1 + (r2 - r1) * t),
                                  round(g1 + (g2 - g1) * t),
                                  round(b1 + (b2 - b1) * t)))

    @staticmethod
    def hsl_color(hue: float, saturation: float, lightness: float) -> str:
        """生成 hsl() 颜色令牌"""
        return f"hsl({hue % 360:g}, {saturation:g}%, {lightness:g}%)"

    @staticmethod
    def with_alpha(token, alpha: float) -> str:
        """
        生成带透明度的 rgba() 颜色令牌

        Args:
            token: 颜色令牌
            alpha (float): 透明度 [0, 1]，与令牌自身透明度相乘

        Returns:
            str: rgba() 颜色
        """
        r, g, b, a = ColorUtils.parse_color(token)
        alpha = max(0.0, min(1.0, a * alpha))
        return f"rgba({r}, {g}, {b}, {alpha:g})"
