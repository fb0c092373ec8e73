from __future__ import annotations

import pytest

from shiftboard.services.geometry import Geometry, GeometryMapper, geometry_for
from shiftboard.services.layout import ColumnAssignment, LayoutItem, layout_day
from shiftboard.services.timerange import TimeRange


def _assignment(start, end, index, count):
    item = LayoutItem(TimeRange("2025-01-20", start, end), "x")
    return ColumnAssignment(item, index, count)


def test_default_mapper_is_one_pixel_per_minute():
    geometry = GeometryMapper().map(540, 600, 0, 1)
    assert geometry == Geometry(top=540, height=60, left=0, width=100)


def test_pixels_per_hour_scales_top_and_height():
    geometry = GeometryMapper(pixels_per_hour=48).map(90, 120, 0, 1)
    assert geometry.top == pytest.approx(72)
    assert geometry.height == pytest.approx(24)


def test_min_height_applies_to_short_items():
    mapper = GeometryMapper(min_height_px=20)
    assert mapper.map(600, 610, 0, 1).height == 20
    assert mapper.map(600, 660, 0, 1).height == 60


def test_width_and_left_follow_column_slot():
    mapper = GeometryMapper()
    geometries = [mapper.map(540, 600, index, 4) for index in range(4)]
    assert [g.width for g in geometries] == [25, 25, 25, 25]
    assert [g.left for g in geometries] == [0, 25, 50, 75]


@pytest.mark.parametrize("gutter", [0.0, 1.5, 4.0])
@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_columns_cover_the_day_minus_gutters(gutter, count):
    mapper = GeometryMapper(gutter_percent=gutter)
    geometries = [mapper.map(0, 60, index, count) for index in range(count)]
    expected = 100 - (gutter * (count - 1) if count > 1 else 0)
    assert sum(g.width for g in geometries) == pytest.approx(expected)
    for g in geometries:
        assert g.left + g.width <= 100 + 1e-9
    for first, second in zip(geometries, geometries[1:]):
        assert first.left + first.width <= second.left + 1e-9


@pytest.mark.parametrize("gutter,count", [(5.0, 25), (10.0, 11), (2.0, 60), (99.0, 2)])
def test_gutter_shrinks_on_crowded_days(gutter, count):
    mapper = GeometryMapper(gutter_percent=gutter)
    geometries = [mapper.map(0, 60, index, count) for index in range(count)]
    assert all(g.width > 0 for g in geometries)
    assert sum(g.width for g in geometries) >= 50 - 1e-9
    assert geometries[-1].left + geometries[-1].width == pytest.approx(100)
    for first, second in zip(geometries, geometries[1:]):
        assert first.left + first.width <= second.left + 1e-9


def test_invalid_slots_are_rejected():
    mapper = GeometryMapper()
    with pytest.raises(ValueError):
        mapper.map(0, 60, 2, 2)
    with pytest.raises(ValueError):
        mapper.map(0, 60, 0, 0)


def test_mapper_settings_are_validated():
    with pytest.raises(ValueError):
        GeometryMapper(pixels_per_hour=0)
    with pytest.raises(ValueError):
        GeometryMapper(gutter_percent=100)


def test_geometry_for_uses_assignment():
    geometry = geometry_for(_assignment(570, 630, 1, 2), GeometryMapper())
    assert geometry == Geometry(top=570, height=60, left=50, width=50)


def test_geometry_for_defaults_to_settings_mapper():
    (assignment,) = layout_day([LayoutItem(TimeRange("2025-01-20", 0, 30), "x")])
    assert geometry_for(assignment).width == 100


def test_as_css_formats_units():
    css = GeometryMapper().map(540, 600, 1, 3).as_css()
    assert css["top"] == "540px"
    assert css["height"] == "60px"
    assert css["left"].endswith("%")
    assert css["width"].startswith("33.33")
