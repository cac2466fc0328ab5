"""
tests/test_isolines.py
Tests for domain/isolines.py (curve sampling).
"""
import numpy as np
import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.comfort import ComfortRange
from domain.isolines import (
    WET_BULB_STRATEGIES,
    aligned_range,
    comfort_zone_outline,
    enthalpy_isoline,
    label_anchor,
    quadratic_midpoint_segments,
    rh_curve,
    sample_range,
    solve_for_wet_bulb_isoline,
    vapor_pressure_grid_step,
)
from domain.psychrometrics import moist_air_enthalpy, wet_bulb

PLOT_AREA = (50.0, 50.0, 750.0, 550.0)


# ---------------------------------------------------------------------------
# Sampling helpers
# ---------------------------------------------------------------------------
class TestSampling:

    def test_sample_range_includes_stop(self):
        assert list(sample_range(-10.0, 50.0, 5.0)) == pytest.approx(list(range(-10, 51, 5)))

    def test_sample_range_without_drift(self):
        values = sample_range(0.0, 4.0, 0.5)
        assert len(values) == 9
        assert values[-1] == pytest.approx(4.0)

    def test_empty_when_reversed(self):
        assert sample_range(5.0, 1.0, 1.0).size == 0

    def test_aligned_range_starts_on_multiple(self):
        assert list(aligned_range(12.3, 20.0, 5.0)) == pytest.approx([15.0, 20.0])

    @pytest.mark.parametrize("max_vp, step", [(0.8, 0.1), (1.0, 0.1), (2.0, 0.5), (5.0, 0.5), (7.4, 1.0)])
    def test_vapor_pressure_grid_step(self, max_vp, step):
        assert vapor_pressure_grid_step(max_vp) == step


# ---------------------------------------------------------------------------
# RH curves and label anchor
# ---------------------------------------------------------------------------
class TestRhCurve:

    def test_constant_humidity(self):
        curve = rh_curve(40, [0.0, 1.0, 2.0])
        assert curve == [(0.0, 40.0), (1.0, 40.0), (2.0, 40.0)]


class TestLabelAnchor:

    def test_rightmost_visible_point(self):
        pts = [(100.0, 500.0), (400.0, 300.0), (700.0, 100.0)]
        assert label_anchor(pts, PLOT_AREA) == (700.0, 100.0)

    def test_searches_inward_from_hot_end(self):
        # the last two samples leave the plot through the top
        pts = [(100.0, 500.0), (400.0, 300.0), (600.0, 60.0), (650.0, 20.0), (700.0, -40.0)]
        assert label_anchor(pts, PLOT_AREA) == (600.0, 60.0)

    def test_none_when_nothing_visible(self):
        pts = [(10.0, 10.0), (800.0, 20.0)]
        assert label_anchor(pts, PLOT_AREA) is None

    def test_edges_count_as_inside(self):
        assert label_anchor([(750.0, 50.0)], PLOT_AREA) == (750.0, 50.0)


# ---------------------------------------------------------------------------
# Enthalpy
# ---------------------------------------------------------------------------
class TestEnthalpy:

    temps = np.arange(-10.0, 50.5, 0.5)

    @pytest.mark.parametrize("h", [0, 20, 50, 80, 100])
    def test_points_lie_on_isoline(self, h):
        line = enthalpy_isoline(h, self.temps)
        assert line
        for t, rh in line:
            assert moist_air_enthalpy(t, rh) == pytest.approx(h, abs=1e-6)

    def test_humidity_window(self):
        for h in range(0, 101, 10):
            for _, rh in enthalpy_isoline(h, self.temps):
                assert 10.0 <= rh <= 100.0

    def test_humidity_falls_as_temperature_rises(self):
        line = enthalpy_isoline(50, self.temps)
        rhs = [rh for _, rh in line]
        assert all(a > b for a, b in zip(rhs, rhs[1:]))

    def test_empty_input(self):
        assert enthalpy_isoline(40, []) == []


class TestQuadraticMidpoint:

    def test_needs_three_points(self):
        assert quadratic_midpoint_segments([(0, 0), (1, 1)]) == []

    def test_segments(self):
        pts = [(0.0, 0.0), (2.0, 2.0), (4.0, 0.0), (6.0, 2.0)]
        segs = quadratic_midpoint_segments(pts)
        assert len(segs) == 3
        assert segs[0] == ((2.0, 2.0), (3.0, 1.0))
        assert segs[1] == ((4.0, 0.0), (5.0, 1.0))
        assert segs[-1][1] == (6.0, 2.0)


# ---------------------------------------------------------------------------
# Wet bulb
# ---------------------------------------------------------------------------
class TestWetBulb:

    temps = np.arange(-10.0, 50.5, 0.5)

    @pytest.mark.parametrize("strategy", sorted(WET_BULB_STRATEGIES))
    def test_starts_at_saturation(self, strategy):
        line = solve_for_wet_bulb_isoline(15.0, self.temps, strategy=strategy)
        assert line[0] == (15.0, 100.0)

    @pytest.mark.parametrize("strategy", sorted(WET_BULB_STRATEGIES))
    def test_points_match_target(self, strategy):
        line = solve_for_wet_bulb_isoline(10.0, self.temps, strategy=strategy)
        assert len(line) > 10
        for t, rh in line[1:]:
            assert t > 10.0
            assert abs(wet_bulb(t, rh) - 10.0) < 0.2

    def test_humidity_falls_along_line(self):
        line = solve_for_wet_bulb_isoline(10.0, self.temps, strategy="bisection")
        rhs = [rh for _, rh in line]
        assert all(a > b for a, b in zip(rhs, rhs[1:]))

    def test_strategies_agree(self):
        # scan keeps the highest 1 % step whose wet bulb is within 0.2 °C, so it
        # lands between the exact root (less one step) and the RH at tw + 0.2
        temps = np.arange(10.5, 25.5, 0.5)
        scan = dict(solve_for_wet_bulb_isoline(10.0, temps, strategy="scan"))
        exact = dict(solve_for_wet_bulb_isoline(10.0, temps, strategy="bisection"))
        upper = dict(solve_for_wet_bulb_isoline(10.2, temps, strategy="bisection"))
        assert scan.keys() == exact.keys()
        for t in list(exact)[1:]:
            assert exact[t] - 1.0 - 1e-6 <= scan[t] <= upper[t] + 1e-6

    def test_bisection_hits_target_exactly(self):
        temps = np.arange(10.5, 25.5, 0.5)
        for t, rh in solve_for_wet_bulb_isoline(10.0, temps, strategy="bisection")[1:]:
            assert wet_bulb(t, rh) == pytest.approx(10.0, abs=1e-6)

    def test_no_candidates_above_target(self):
        assert solve_for_wet_bulb_isoline(35.0, [20.0, 30.0]) == [(35.0, 100.0)]

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            solve_for_wet_bulb_isoline(10.0, self.temps, strategy="newton")


# ---------------------------------------------------------------------------
# Comfort outline
# ---------------------------------------------------------------------------
class TestComfortOutline:

    comfort = ComfortRange(20.0, 26.0, 40.0, 60.0)

    def test_closed(self):
        outline = comfort_zone_outline(self.comfort)
        assert outline[0] == outline[-1] == (20.0, 60.0)

    def test_contains_all_corners(self):
        outline = comfort_zone_outline(self.comfort)
        for corner in [(20.0, 60.0), (26.0, 60.0), (26.0, 40.0), (20.0, 40.0)]:
            assert corner in outline

    def test_sample_count(self):
        # 13 samples along each temperature edge, 21 along each humidity edge
        assert len(comfort_zone_outline(self.comfort)) == 1 + 12 + 20 + 12 + 20

    def test_edges_stay_on_rectangle(self):
        for t, rh in comfort_zone_outline(self.comfort):
            assert t in (20.0, 26.0) or rh in (40.0, 60.0)

    def test_degenerate_range(self):
        outline = comfort_zone_outline(ComfortRange(22.0, 22.0, 50.0, 50.0))
        assert set(outline) == {(22.0, 50.0)}
