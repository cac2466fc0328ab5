"""
tests/test_comfort.py
Tests for domain/comfort.py (comfort zone, setpoints, power estimates).
"""
import pytest
import sys, pathlib
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from domain.comfort import (
    ACTION_COOL,
    ACTION_DEHUMIDIFY,
    ACTION_HEAT,
    ACTION_HUMIDIFY,
    ACTION_NONE,
    STATUS_TOO_COLD,
    STATUS_TOO_HUMID,
    ComfortRange,
    comfort_status,
    heating_power,
    humidity_power,
    ideal_setpoint,
    is_in_comfort_zone,
    recommend_action,
)


@pytest.fixture
def comfort():
    return ComfortRange(temp_min=20.0, temp_max=26.0, rh_min=40.0, rh_max=60.0)


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------
class TestComfortZone:

    @pytest.mark.parametrize("temp, rh", [(20, 40), (20, 60), (26, 40), (26, 60), (23, 50)])
    def test_bounds_are_inclusive(self, comfort, temp, rh):
        assert is_in_comfort_zone(temp, rh, comfort)

    @pytest.mark.parametrize("temp, rh", [(19.99, 50), (26.01, 50), (23, 39.99), (23, 60.01)])
    def test_just_outside(self, comfort, temp, rh):
        assert not is_in_comfort_zone(temp, rh, comfort)

    def test_status_flags(self, comfort):
        assert comfort_status(18.0, 70.0, comfort) == (STATUS_TOO_COLD, STATUS_TOO_HUMID)
        assert comfort_status(23.0, 50.0, comfort) == ()


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
class TestRecommendAction:

    def test_comfortable_needs_nothing(self, comfort):
        rec = recommend_action(23.0, 50.0, comfort, 0.5)
        assert rec.action == ACTION_NONE
        assert rec.actions == ()
        assert rec.total_power == 0.0

    def test_cold_room_heating_power(self, comfort):
        rec = recommend_action(15.0, 50.0, comfort, 0.5)
        assert rec.action == ACTION_HEAT
        assert rec.heating_power == pytest.approx(2515.0, rel=1e-12)
        assert rec.total_power == pytest.approx(2515.0, rel=1e-12)

    def test_hot_room_cooling_power(self, comfort):
        rec = recommend_action(30.0, 50.0, comfort, 0.5)
        assert rec.action == ACTION_COOL
        assert rec.cooling_power == pytest.approx(0.5 * 1.006 * 4 * 1000)

    def test_temperature_action_wins(self, comfort):
        rec = recommend_action(15.0, 30.0, comfort, 0.5)
        assert rec.action == ACTION_HEAT
        assert rec.actions == (ACTION_HEAT, ACTION_HUMIDIFY)
        assert rec.humidification_power > 0
        assert rec.total_power == pytest.approx(rec.heating_power + rec.humidification_power)

    def test_humid_room(self, comfort):
        rec = recommend_action(23.0, 75.0, comfort, 0.5)
        assert rec.action == ACTION_DEHUMIDIFY
        assert rec.dehumidification_power > 0

    def test_powers_scale_with_mass_flow(self, comfort):
        low = recommend_action(15.0, 30.0, comfort, 0.5)
        high = recommend_action(15.0, 30.0, comfort, 1.0)
        assert high.total_power == pytest.approx(2 * low.total_power)


class TestPowerFunctions:

    def test_heating_power_signed(self):
        assert heating_power(25.0, 20.0, 0.5) < 0

    def test_humidity_power_zero_without_change(self):
        assert humidity_power(22.0, 50.0, 50.0, 0.5) == 0.0


# ---------------------------------------------------------------------------
# Ideal setpoint
# ---------------------------------------------------------------------------
class TestIdealSetpoint:

    def test_snaps_to_violated_edges(self, comfort):
        assert ideal_setpoint(15.0, 70.0, comfort) == (20.0, 60.0)

    def test_winter_inside_zone(self, comfort):
        temp, rh = ideal_setpoint(21.0, 45.0, comfort)
        assert temp == 21.0
        assert rh == 55.0

    def test_summer_inside_zone(self, comfort):
        temp, rh = ideal_setpoint(25.0, 55.0, comfort)
        assert temp == 25.0
        assert rh == 45.0
