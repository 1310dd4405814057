#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
图表几何渲染器测试

使用录制画布检查每种图表在给定进度下产生的几何
"""

import sys
import math
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from core.canvas import RecordingSurface
from core.chart_model import DataPoint, SurfaceExtents
from core.charts import (
    BarChartRenderer, LineChartRenderer, PieChartRenderer, StatBarRenderer,
    bar_progress, compute_slices, compute_pip_fill, get_theme, MAX_STAT_ROWS
)
from core.charts.pie_chart import START_ANGLE
from core.charts.stat_bar import partial_pip_path, pill_path

EXTENTS = SurfaceExtents(800, 450)
THEME = get_theme('dark')


def make_dataset(*values):
    colors = ['#4A7CFF', '#FF4A7C', '#7CFF4A', '#FFC44A', '#4AFFDF']
    return tuple(DataPoint(f'Item {chr(65 + i)}', v, colors[i % len(colors)])
                 for i, v in enumerate(values))


class TestExtents:

    def test_margins_are_fixed_fractions(self):
        assert EXTENTS.margin_top == pytest.approx(45)
        assert EXTENTS.margin_right == pytest.approx(80)
        assert EXTENTS.margin_bottom == pytest.approx(67.5)
        assert EXTENTS.margin_left == pytest.approx(120)
        assert EXTENTS.chart_width == pytest.approx(600)
        assert EXTENTS.chart_height == pytest.approx(337.5)
        assert EXTENTS.chart_bottom == pytest.approx(382.5)

    def test_degenerate_extents_collapse_to_one_pixel(self):
        extents = SurfaceExtents(0, -10)
        assert (extents.width, extents.height) == (1.0, 1.0)


class TestBarChart:

    def test_staggered_progress(self):
        assert bar_progress(0.5, 3) == pytest.approx([1.0, 0.5, 0.0])
        assert bar_progress(0.0, 3) == [0.0, 0.0, 0.0]
        assert bar_progress(1.0, 4) == [1.0, 1.0, 1.0, 1.0]

    def test_bar_geometry_at_full_progress(self):
        bars = BarChartRenderer().compute_bars(make_dataset(10, 20, 40), 1.0, EXTENTS)
        assert [b.x for b in bars] == pytest.approx([140, 340, 540])
        assert all(b.width == pytest.approx(160) for b in bars)
        assert bars[2].height == pytest.approx(40 / 44 * 337.5)
        assert bars[0].height == pytest.approx(10 / 44 * 337.5)
        for bar in bars:
            assert bar.y + bar.height == pytest.approx(EXTENTS.chart_bottom)

    def test_partial_bar_heights(self):
        bars = BarChartRenderer().compute_bars(make_dataset(10, 10, 10), 0.5, EXTENTS)
        full = 10 / 11 * 337.5
        assert [b.height for b in bars] == pytest.approx([full, full * 0.5, 0.0])

    def test_non_positive_maximum_gives_zero_heights(self):
        surface = RecordingSurface()
        renderer = BarChartRenderer()
        bars = renderer.compute_bars(make_dataset(0, -5, 0), 1.0, EXTENTS)
        assert all(b.height == 0 for b in bars)

        renderer.render(surface, make_dataset(0, -5, 0), 1.0, EXTENTS, THEME)
        assert surface.find('fill_rect') == []

    def test_value_labels_need_progress_and_height(self):
        surface = RecordingSurface()
        BarChartRenderer().render(surface, make_dataset(30, 50, 1), 0.5, EXTENTS, THEME)
        labels = [op['text'] for op in surface.find('fill_text')]
        # 第二根柱子进度恰为 0.5，不显示；第三根尚未开始
        assert labels == ['30']

        surface = RecordingSurface()
        BarChartRenderer().render(surface, make_dataset(30, 50, 1), 1.0, EXTENTS, THEME)
        labels = [op['text'] for op in surface.find('fill_text')]
        assert labels == ['30', '50']

    def test_bars_use_point_colors(self):
        surface = RecordingSurface()
        BarChartRenderer().render(surface, make_dataset(1, 2), 1.0, EXTENTS, THEME)
        assert [op['color'] for op in surface.find('fill_rect')] == ['#4A7CFF', '#FF4A7C']

    def test_missing_color_uses_palette(self):
        surface = RecordingSurface()
        dataset = (DataPoint('a', 1), DataPoint('b', 2))
        BarChartRenderer().render(surface, dataset, 1.0, EXTENTS, THEME)
        assert [op['color'] for op in surface.find('fill_rect')] == ['#4A7CFF', '#FF4A7C']


class TestLineChart:

    def test_single_point_draws_marker_only(self):
        surface = RecordingSurface()
        renderer = LineChartRenderer()
        geometry = renderer.compute_line(make_dataset(42), 0.25, EXTENTS)
        assert geometry.segments == []
        assert len(geometry.markers) == 1
        marker = geometry.markers[0]
        assert marker.x == pytest.approx(EXTENTS.chart_left + EXTENTS.chart_width / 2)
        assert marker.alpha == pytest.approx(0.5)

        renderer.render(surface, make_dataset(42), 1.0, EXTENTS, THEME)
        assert surface.find('stroke_path') == []
        assert len(surface.find('fill_path')) == 1

    def test_points_are_evenly_spaced(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 30), 1.0, EXTENTS)
        assert [p[0] for p in geometry.positions] == pytest.approx([120, 420, 720])
        assert geometry.positions[2][1] == pytest.approx(45 + 337.5 * (1 - 30 / 33))

    def test_complete_segments_use_tension_control_points(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 30), 1.0, EXTENTS)
        assert len(geometry.segments) == 2
        p0, cp1, cp2, p1 = geometry.segments[0]
        assert cp1 == pytest.approx((p0[0] + 90, p0[1]))
        assert cp2 == pytest.approx((p1[0] - 90, p1[1]))

    def test_last_segment_is_truncated(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 10), 0.75, EXTENTS)
        assert len(geometry.segments) == 2
        end = geometry.end_point
        # 对称控制点的曲线在 t=0.5 处恰好位于水平中点
        assert end[0] == pytest.approx(570)
        assert end[1] == pytest.approx((geometry.positions[1][1] + geometry.positions[2][1]) / 2)

    def test_truncated_segment_keeps_curve_tangent(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 40, 5), 0.3, EXTENTS)
        assert len(geometry.segments) == 1
        start, _, partial_cp2, end = geometry.segments[0]

        # t = 0.3 * 2 = 0.6，完整段的控制点水平偏移 0.3 * 300
        s = 0.6
        p0, p1 = geometry.positions[0], geometry.positions[1]
        cp1 = (p0[0] + 90, p0[1])
        cp2 = (p1[0] - 90, p1[1])
        assert start == pytest.approx(p0)

        def cubic(a, b, c, d):
            return (1 - s) ** 3 * a + 3 * (1 - s) ** 2 * s * b + 3 * (1 - s) * s ** 2 * c + s ** 3 * d

        def derivative(a, b, c, d):
            return 3 * (1 - s) ** 2 * (b - a) + 6 * (1 - s) * s * (c - b) + 3 * s ** 2 * (d - c)

        expected_end = tuple(cubic(p0[k], cp1[k], cp2[k], p1[k]) for k in range(2))
        assert end == pytest.approx(expected_end)

        tangent = tuple(derivative(p0[k], cp1[k], cp2[k], p1[k]) for k in range(2))
        open_end = (end[0] - partial_cp2[0], end[1] - partial_cp2[1])
        cross = open_end[0] * tangent[1] - open_end[1] * tangent[0]
        dot = open_end[0] * tangent[0] + open_end[1] * tangent[1]
        assert abs(tangent[1]) > 1
        assert cross == pytest.approx(0, abs=1e-6 * math.hypot(*open_end) * math.hypot(*tangent))
        assert dot > 0
        # 截断曲线在参数 s 处的导数为完整曲线导数的 s 倍
        assert open_end[0] * 3 == pytest.approx(tangent[0] * s)
        assert open_end[1] * 3 == pytest.approx(tangent[1] * s)

    def test_segment_boundary_has_no_partial_segment(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 30), 0.5, EXTENTS)
        assert len(geometry.segments) == 1
        assert geometry.end_point == pytest.approx(geometry.positions[1])

    def test_markers_fade_in(self):
        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 30), 0.0, EXTENTS)
        assert geometry.markers == []

        geometry = LineChartRenderer().compute_line(make_dataset(10, 20, 30, 40), 0.1, EXTENTS)
        # t = 0.3：第一个点 alpha = min(1, 0.1*4*2)，第二个点 min(1, 0.3*5)
        assert [m.alpha for m in geometry.markers] == pytest.approx([0.8, 1.0])

    def test_area_fills_before_stroking(self):
        surface = RecordingSurface()
        LineChartRenderer(filled=True).render(surface, make_dataset(10, 20, 30), 1.0, EXTENTS, THEME)
        ops = [op['op'] for op in surface.operations]
        assert ops.index('fill_path') < ops.index('stroke_path')

        area = surface.find('fill_path')[0]
        assert area['color'] == 'rgba(74, 144, 226, 0.3)'
        assert area['commands'][0] == ('M', 120, pytest.approx(382.5))
        assert area['commands'][-1] == ('Z',)
        assert area['bounds'][3] == pytest.approx(EXTENTS.chart_bottom)

    def test_line_stroke_width(self):
        surface = RecordingSurface()
        LineChartRenderer().render(surface, make_dataset(10, 20), 1.0, EXTENTS, THEME)
        stroke = surface.find('stroke_path')[0]
        assert stroke['line_width'] == 3
        assert stroke['color'] == '#4A90E2'
        markers = surface.find('fill_path')
        assert {op['color'] for op in markers} == {'#4A90E2'}


class TestPieChart:

    def test_negative_values_do_not_inflate_sweeps(self):
        slices = compute_slices(make_dataset(50, -10, 50), 1.0)
        assert [s.sweep for s in slices] == pytest.approx([math.pi, 0.0, math.pi])
        assert [s.percent for s in slices] == pytest.approx([50, 0, 50])
        assert slices[2].end_angle == pytest.approx(START_ANGLE + 2 * math.pi)

        surface = RecordingSurface()
        PieChartRenderer(donut=True).render(surface, make_dataset(50, -10, 50), 1.0, EXTENTS, THEME)
        assert len([op for op in surface.find('fill_path') if op['color'] != THEME.fill_color]) == 2
        assert [op['text'] for op in surface.find('fill_text')] == ['100']

    def test_sweeps_sum_to_full_circle(self):
        slices = compute_slices(make_dataset(30, 50, 20), 1.0)
        assert sum(s.sweep for s in slices) == pytest.approx(2 * math.pi)
        assert slices[0].start_angle == pytest.approx(-math.pi / 2)
        assert slices[1].start_angle == pytest.approx(slices[0].end_angle)

    def test_sweeps_scale_with_progress(self):
        slices = compute_slices(make_dataset(30, 50, 20), 0.5)
        assert sum(s.sweep for s in slices) == pytest.approx(math.pi)

    def test_zero_total_draws_nothing(self):
        surface = RecordingSurface()
        renderer = PieChartRenderer(donut=True)
        dataset = make_dataset(0, 0, 0)
        assert compute_slices(dataset, 1.0) == []

        renderer.render(surface, dataset, 1.0, EXTENTS, THEME)
        renderer.draw_labels(surface, dataset, 1.0, EXTENTS, THEME)
        assert surface.operations == [{'op': 'resize', 'width': 800.0, 'height': 450.0}]

    def test_slices_outlined_with_background(self):
        surface = RecordingSurface()
        PieChartRenderer().render(surface, make_dataset(30, 50, 20), 1.0, EXTENTS, THEME)
        strokes = surface.find('stroke_path')
        assert len(strokes) == 3
        assert all(op['color'] == '#0F1118' and op['line_width'] == 2 for op in strokes)

    def test_donut_hole_and_total(self):
        surface = RecordingSurface()
        PieChartRenderer(donut=True).render(surface, make_dataset(30, 50, 20), 0.4, EXTENTS, THEME)
        fills = surface.find('fill_path')
        hole = fills[-1]
        radius = 337.5 / 2
        assert hole['bounds'][2] - hole['bounds'][0] == pytest.approx(2 * radius * 0.6, rel=1e-3)

        total = surface.find('fill_text')[0]
        assert total['text'] == '100'
        assert total['bold'] and total['size'] == 24
        assert total['baseline'] == 'middle'

    def test_labels_show_percentages_and_sides(self):
        surface = RecordingSurface()
        PieChartRenderer().draw_labels(surface, make_dataset(30, 50, 20), 1.0, EXTENTS, THEME)
        texts = surface.find('fill_text')
        assert [t['text'] for t in texts] == ['Item A (30%)', 'Item B (50%)', 'Item C (20%)']
        assert [t['align'] for t in texts] == ['left', 'right', 'right']
        assert len(surface.find('stroke_path')) == 3

    def test_small_slices_have_no_label(self):
        surface = RecordingSurface()
        PieChartRenderer().draw_labels(surface, make_dataset(99, 1), 1.0, EXTENTS, THEME)
        assert [t['text'] for t in surface.find('fill_text')] == ['Item A (99%)']


class TestStatBar:

    def test_pip_fill_at_full_progress(self):
        fill = compute_pip_fill(DataPoint('Progress', 65, min=0, max=100), 1.0)
        assert fill.full == 13
        assert fill.partial == pytest.approx(0.0)
        assert fill.displayed_value == 65
        assert fill.value_pip_index == 12

    def test_partial_pip(self):
        fill = compute_pip_fill(DataPoint('Progress', 65, min=0, max=100), 0.5)
        assert fill.exact == pytest.approx(6.5)
        assert fill.full == 6
        assert fill.partial == pytest.approx(0.5)
        # round(32.5) 向上取整
        assert fill.displayed_value == 33
        assert fill.value_pip_index == 6

    def test_value_is_clamped_to_range(self):
        fill = compute_pip_fill(DataPoint('Over', 150, min=0, max=100), 1.0)
        assert fill.full == 20
        assert fill.displayed_value == 100

    def test_zero_range_gives_empty_bar(self):
        fill = compute_pip_fill(DataPoint('Flat', 50, min=50, max=50), 1.0)
        assert fill.ratio == 0
        assert fill.full == 0
        assert fill.partial == 0

    def test_missing_bounds_default_to_percent(self):
        fill = compute_pip_fill(DataPoint('Default', 25), 1.0)
        assert (fill.minimum, fill.maximum) == (0.0, 100.0)
        assert fill.full == 5

    def test_pip_paths(self):
        assert sum(1 for c in pill_path(0, 0).commands if c[0] == 'A') == 2
        assert sum(1 for c in partial_pip_path(0, 0, 0.5).commands if c[0] == 'A') == 2
        assert sum(1 for c in partial_pip_path(0, 0, 0.95).commands if c[0] == 'A') == 4

        bounds = partial_pip_path(0, 0, 0.5).bounds()
        assert bounds[1] == pytest.approx(50)
        assert bounds[3] == pytest.approx(100)

    def test_partial_pip_top_corner_radius(self):
        arcs = [c for c in partial_pip_path(0, 0, 0.95).commands if c[0] == 'A']
        top_arcs = arcs[2:]
        assert len(top_arcs) == 2
        assert [arc[3] for arc in top_arcs] == pytest.approx([7 * (0.95 - 0.85) / 0.15] * 2)

        arcs = [c for c in partial_pip_path(0, 0, 0.85).commands if c[0] == 'A']
        assert len(arcs) == 2
        assert all(arc[3] == pytest.approx(7) for arc in arcs)
        # 两个底部圆角的圆心都在底边之上一个半径处
        assert all(arc[2] == pytest.approx(93) for arc in arcs)

        arcs = [c for c in partial_pip_path(0, 0, 1.0).commands if c[0] == 'A']
        assert arcs[2][3] == pytest.approx(7)

    def test_row_capacity(self):
        surface = RecordingSurface()
        dataset = tuple(DataPoint(f'Row {i}', 50, min=0, max=100) for i in range(5))
        StatBarRenderer().render(surface, dataset, 1.0, EXTENTS, THEME)
        titles = [op['text'] for op in surface.find('fill_text') if op['size'] == 18]
        assert titles == ['Row 0', 'Row 1', 'Row 2']
        assert MAX_STAT_ROWS == 3

    def test_filled_pips_use_row_color(self):
        surface = RecordingSurface()
        StatBarRenderer().render(surface, (DataPoint('P', 65, min=0, max=100),), 1.0, EXTENTS, THEME)
        fills = surface.find('fill_path')
        empty = [op for op in fills if op['color'] == '#EEEEEE']
        filled = [op for op in fills if op['color'] != '#EEEEEE']
        assert len(empty) == 20
        assert len(filled) == 13
        assert filled[0]['color'] == 'hsl(260, 100%, 65%)'

        texts = [op['text'] for op in surface.find('fill_text')]
        assert texts == ['P', '0', '100', '65']


class TestThemes:

    def test_unknown_theme_falls_back_to_dark(self):
        assert get_theme('neon') is get_theme('dark')

    def test_palettes(self):
        light = get_theme('light')
        assert (light.background, light.text_color, light.grid_color, light.grid_opacity) == \
            ('#FFFFFF', '#333333', '#CCCCCC', 0.5)
        gradient = get_theme('gradient')
        assert gradient.gradient_stops == ('#1A1C25', '#2A2A3A')
        assert gradient.grid_opacity == 0.4
        assert gradient.fill_color == '#222330'
