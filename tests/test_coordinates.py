"""
tests/test_coordinates.py
Tests for domain/coordinates.py (pixel mapping, zoom and pan).
"""
import numpy as np
import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from config import MAX_ZOOM, MIN_ZOOM
from domain.coordinates import (
    ChartBounds,
    ViewTransform,
    ZoomRange,
    default_domain,
    derive_view,
    visible_bounds,
    zoom_level,
)
from domain.psychrometrics import vapor_pressure

SIZES = [(800, 600), (400, 300), (1200, 500), (333, 777)]
ZOOMS = [
    None,
    ZoomRange(15.0, 30.0),
    ZoomRange(15.0, 30.0, 30.0, 60.0),
    ZoomRange(-20.0, 80.0),
    ZoomRange(0.0, 40.0, 20.0, 80.0),
]


@pytest.fixture
def view():
    return derive_view(800, 600)


# ---------------------------------------------------------------------------
# Base layout
# ---------------------------------------------------------------------------
class TestLayout:

    def test_domain_edges_map_to_plot_edges(self, view):
        assert view.temp_to_x(-10.0) == pytest.approx(50.0)
        assert view.temp_to_x(50.0) == pytest.approx(750.0)

    def test_zero_vapor_pressure_on_bottom_edge(self, view):
        assert view.humidity_to_y(20.0, 0.0) == pytest.approx(550.0)
        assert view.vapor_pressure_to_y(view.max_vapor_pressure) == pytest.approx(50.0)

    def test_default_domain_capped_at_ceiling(self):
        assert default_domain().max_vapor_pressure == pytest.approx(4.0)

    def test_bounds_derive_max_vapor_pressure(self):
        bounds = ChartBounds.from_window(-10.0, 20.0, 0.0, 100.0)
        assert bounds.max_vapor_pressure == pytest.approx(vapor_pressure(20.0, 100.0))

    def test_plot_area_scales_with_canvas(self):
        small = derive_view(400, 300)
        assert small.plot_area == pytest.approx((25.0, 25.0, 375.0, 275.0))
        assert small.scale == pytest.approx(0.5)

    def test_point_visibility(self, view):
        assert view.is_point_visible(0, 0)
        assert view.is_point_visible(800, 600)
        assert not view.is_point_visible(-1, 10)
        assert not view.is_point_visible(10, 601)

    def test_vectorised_mapping(self, view):
        xs = view.temp_to_x(np.array([-10.0, 20.0, 50.0]))
        assert xs == pytest.approx([50.0, 400.0, 750.0])


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------
class TestRoundTrip:

    @pytest.mark.parametrize("size", SIZES)
    @pytest.mark.parametrize("zoom", ZOOMS)
    def test_temperature(self, size, zoom):
        v = derive_view(*size, zoom_range=zoom)
        for t in (-10.0, -3.3, 0.0, 22.5, 49.9):
            assert v.x_to_temp(v.temp_to_x(t)) == pytest.approx(t, abs=1e-9)

    @pytest.mark.parametrize("size", SIZES)
    @pytest.mark.parametrize("zoom", ZOOMS)
    def test_humidity(self, size, zoom):
        v = derive_view(*size, zoom_range=zoom)
        for t, rh in ((0.0, 10.0), (22.0, 60.0), (35.0, 95.0)):
            y = v.humidity_to_y(t, rh)
            assert v.y_to_humidity(y, t) == pytest.approx(rh, abs=1e-9)

    def test_explicit_pan(self):
        v = ViewTransform(640, 480, zoom=1.7, pan_x=-33.0, pan_y=12.5)
        assert v.y_to_vapor_pressure(v.vapor_pressure_to_y(1.234)) == pytest.approx(1.234)
        assert v.x_to_temp(v.temp_to_x(17.0)) == pytest.approx(17.0)


# ---------------------------------------------------------------------------
# Zoom
# ---------------------------------------------------------------------------
class TestZoom:

    def test_zoom_level_clamped(self):
        assert zoom_level(ZoomRange(15.0, 30.0), 60.0) == MAX_ZOOM
        assert zoom_level(ZoomRange(-100.0, 100.0), 60.0) == MIN_ZOOM
        assert zoom_level(ZoomRange(0.0, 30.0), 60.0) == pytest.approx(2.0)

    def test_non_positive_range_gives_max_zoom(self):
        assert zoom_level(ZoomRange(20.0, 20.0), 60.0) == MAX_ZOOM

    @pytest.mark.parametrize("size", SIZES)
    def test_midpoint_temperature_centred(self, size):
        v = derive_view(*size, zoom_range=ZoomRange(15.0, 30.0))
        assert abs(v.temp_to_x(22.5) - size[0] / 2) <= 1.0

    def test_midpoint_humidity_centred(self):
        v = derive_view(800, 600, zoom_range=ZoomRange(15.0, 30.0, 30.0, 60.0))
        assert abs(v.humidity_to_y(22.5, 45.0) - 300.0) <= 1.0

    def test_no_vertical_pan_without_humidity_bounds(self):
        v = derive_view(800, 600, zoom_range=ZoomRange(15.0, 30.0, 30.0, None))
        assert v.pan_y == 0.0

    def test_visible_bounds_follow_zoom(self):
        v = derive_view(800, 600, zoom_range=ZoomRange(15.0, 30.0))
        bounds = visible_bounds(v)
        assert bounds.min_temp == pytest.approx(12.5)
        assert bounds.max_temp == pytest.approx(32.5)
        assert bounds.max_vapor_pressure <= 4.0

    def test_visible_bounds_clamped_when_zoomed_out(self):
        v = derive_view(800, 600, zoom_range=ZoomRange(-50.0, 100.0))
        bounds = visible_bounds(v)
        assert bounds.min_temp == pytest.approx(-10.0)
        assert bounds.max_temp == pytest.approx(50.0)
