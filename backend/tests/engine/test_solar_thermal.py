"""Tests for engine.solar_thermal: irradiance, collector gain, fluid and tank updates."""

from __future__ import annotations

import math

import numpy as np
import pytest

from engine.solar_thermal import (
    CollectorGainResult,
    PhysicalConstants,
    collector_gain,
    heat_removal_factors,
    irradiance_profile,
    mass_flow_rate,
    solar_irradiance,
    tank_exchange,
    update_fluid_temperature,
)

NIGHT_HOURS = [0, 1, 2, 3, 4, 5, 18, 19, 20, 21, 22, 23]
DAY_HOURS = list(range(6, 18))
CLOUD_LEVELS = [0.0, 0.1, 0.25, 0.5, 0.75, 0.9, 1.0]


# ======================================================================
# Irradiance
# ======================================================================


class TestIrradiance:
    """Tests for the fixed-window clear-sky irradiance model."""

    @pytest.mark.parametrize("hour", NIGHT_HOURS)
    @pytest.mark.parametrize("cloud_cover", [0.0, 0.5, 1.0])
    def test_zero_outside_daylight(self, hour, cloud_cover):
        assert solar_irradiance(hour, cloud_cover) == 0.0

    @pytest.mark.parametrize("hour", DAY_HOURS)
    def test_monotonic_in_cloud_cover(self, hour):
        """More cloud never increases irradiance."""
        values = [solar_irradiance(hour, c) for c in CLOUD_LEVELS]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_noon_is_daily_maximum(self):
        noon = solar_irradiance(12, 0.0)
        assert noon == max(solar_irradiance(h, 0.0) for h in range(24))
        # 1000 W/m² for one hour = 3.6 MJ/m²
        assert noon == pytest.approx(3.6)

    def test_cloud_cover_scales_linearly(self):
        assert solar_irradiance(12, 0.5) == pytest.approx(0.5 * solar_irradiance(12, 0.0))
        assert solar_irradiance(12, 1.0) == 0.0

    def test_symmetric_about_noon(self):
        for offset in range(1, 6):
            assert solar_irradiance(12 - offset) == pytest.approx(solar_irradiance(12 + offset))

    def test_injected_peak_irradiance(self):
        half = PhysicalConstants(peak_irradiance=500.0)
        assert solar_irradiance(12, 0.0, half) == pytest.approx(1.8)

    def test_profile_matches_scalar(self):
        hours = np.arange(24)
        profile = irradiance_profile(hours, cloud_cover=0.3)
        assert profile.shape == (24,)
        expected = [solar_irradiance(int(h), 0.3) for h in hours]
        np.testing.assert_allclose(profile, expected)


# ======================================================================
# Hydraulics
# ======================================================================


class TestMassFlow:
    """Tests for the shared pump mass-flow formula."""

    def test_reference_pump(self):
        # 50 W * 0.7 = rho * g * H * V_dot  ->  V_dot = 35 / 49050 m³/s
        expected = 50.0 * 0.7 / (5.0 * 9.81 * 1000.0) * 1000.0
        assert mass_flow_rate(50.0, 5.0, 0.7) == pytest.approx(expected)
        assert mass_flow_rate(50.0, 5.0, 0.7) == pytest.approx(0.7136, abs=1e-4)

    def test_zero_power_no_flow(self):
        assert mass_flow_rate(0.0, 5.0, 0.7) == 0.0

    def test_zero_head_is_infinite(self):
        assert math.isinf(mass_flow_rate(50.0, 0.0, 0.7))

    def test_higher_head_lower_flow(self):
        assert mass_flow_rate(50.0, 10.0, 0.7) < mass_flow_rate(50.0, 5.0, 0.7)

    def test_zero_density_is_nan(self):
        assert math.isnan(mass_flow_rate(50.0, 5.0, 0.7, PhysicalConstants(fluid_density=0.0)))

    def test_zero_power_and_head_is_nan(self):
        assert math.isnan(mass_flow_rate(0.0, 0.0, 0.7))


# ======================================================================
# Collector gain
# ======================================================================


class TestCollectorGain:
    """Tests for the Hottel-Whillier-Bliss collector model."""

    def test_textbook_values(self, textbook_collector):
        """F'' ~ 0.948, F_R ~ 0.797, q_u ~ 1.81 MJ/(m² h)."""
        result = collector_gain(**textbook_collector)
        assert 0.94 <= result.flow_factor <= 0.95
        assert 0.79 <= result.heat_removal_factor <= 0.80
        assert 1.75 <= result.useful_gain <= 1.85

    def test_heat_removal_is_product_of_factors(self, textbook_collector):
        result = collector_gain(**textbook_collector)
        assert result.heat_removal_factor == pytest.approx(
            result.flow_factor * textbook_collector["efficiency"]
        )

    @pytest.mark.parametrize("mass_flow", [0.0, -0.01])
    def test_no_flow_zeroes_factors(self, textbook_collector, mass_flow):
        result = collector_gain(**{**textbook_collector, "mass_flow": mass_flow})
        assert result.heat_removal_factor == 0.0
        assert result.flow_factor == 0.0
        assert result.useful_gain == 0.0

    def test_nan_flow_is_not_treated_as_no_flow(self, textbook_collector):
        result = collector_gain(**{**textbook_collector, "mass_flow": float("nan")})
        assert math.isnan(result.heat_removal_factor)
        assert math.isnan(result.flow_factor)
        assert math.isnan(result.useful_gain)

    @pytest.mark.parametrize("mass_flow", [1e-4, 0.01, 0.03, 0.7, 10.0])
    @pytest.mark.parametrize("efficiency", [0.15, 0.5, 0.841, 1.0])
    def test_factors_bounded(self, mass_flow, efficiency):
        f_r, f_pp = heat_removal_factors(mass_flow, 4186.0, 2.0, 8.0, efficiency)
        assert 0.0 < f_pp <= 1.0
        assert 0.0 < f_r <= 1.0

    def test_cloud_reduces_gain(self, textbook_collector):
        clear = collector_gain(**textbook_collector)
        cloudy = collector_gain(**{**textbook_collector, "cloud_cover": 0.5})
        assert cloudy.useful_gain < clear.useful_gain

    def test_night_gain_negative_when_plate_warm(self, textbook_collector):
        """A plate warmer than ambient loses heat at night."""
        result = collector_gain(**{**textbook_collector, "hour": 2})
        assert result.irradiance == 0.0
        assert result.useful_gain < 0.0

    def test_zero_area_is_non_finite(self, textbook_collector):
        result = collector_gain(**{**textbook_collector, "area": 0.0})
        assert math.isnan(result.heat_removal_factor)
        assert math.isnan(result.useful_gain)


# ======================================================================
# Fluid / plate temperature update
# ======================================================================


class TestFluidUpdate:
    """Tests for the mean fluid and plate temperature update."""

    def test_no_flow_fluid_unchanged_plate_absorbs(self):
        gain = CollectorGainResult(useful_gain=0.4, heat_removal_factor=0.0, flow_factor=0.0)
        temps = update_fluid_temperature(gain, 25.0, 8.0, current_plate_temp=30.0)
        assert temps.fluid_temp == 25.0
        assert temps.plate_temp == 30.0 + 0.4 / 8.0

    def test_no_flow_plate_defaults_to_fluid(self):
        gain = CollectorGainResult(useful_gain=-0.8, heat_removal_factor=0.0, flow_factor=0.0)
        temps = update_fluid_temperature(gain, 25.0, 8.0)
        assert temps.fluid_temp == 25.0
        assert temps.plate_temp == pytest.approx(24.9)

    def test_with_flow(self):
        # 1.8 MJ/(m² h) = 500 W/m²; offset = 500 / (0.8 * 8) = 78.125 K
        gain = CollectorGainResult(useful_gain=1.8, heat_removal_factor=0.8, flow_factor=0.95)
        temps = update_fluid_temperature(gain, 20.0, 8.0)
        assert temps.fluid_temp == pytest.approx(20.0 + 78.125 * 0.05)
        assert temps.plate_temp == pytest.approx(20.0 + 78.125 * 0.2)

    def test_negative_gain_cools_fluid(self):
        gain = CollectorGainResult(useful_gain=-0.2, heat_removal_factor=0.8, flow_factor=0.95)
        temps = update_fluid_temperature(gain, 20.0, 8.0)
        assert temps.fluid_temp < 20.0
        assert temps.plate_temp < temps.fluid_temp

    def test_vanishing_heat_removal_blows_up(self):
        """F_R -> 0+ with a nonzero gain is not clamped."""
        gain = CollectorGainResult(useful_gain=1.0, heat_removal_factor=1e-12, flow_factor=0.5)
        temps = update_fluid_temperature(gain, 20.0, 8.0)
        assert temps.fluid_temp > 1e6

    def test_zero_step_length_is_non_finite(self):
        gain = CollectorGainResult(useful_gain=1.8, heat_removal_factor=0.8, flow_factor=0.95)
        temps = update_fluid_temperature(gain, 20.0, 8.0, constants=PhysicalConstants(step_seconds=0.0))
        assert math.isinf(temps.fluid_temp)
        assert math.isinf(temps.plate_temp)


# ======================================================================
# Tank exchange
# ======================================================================


def _tank_args(**overrides) -> dict:
    args = {
        "fluid_temp": 40.0,
        "tank_temp": 20.0,
        "tank_volume": 1000.0,
        "specific_heat": 4186.0,
        "time_step_s": 3600.0,
        "pump_power": 50.0,
        "hydraulic_head": 5.0,
        "pump_efficiency": 0.7,
    }
    args.update(overrides)
    return args


class TestTankExchange:
    """Tests for the single-node tank heat exchange."""

    def test_warm_loop_heats_tank(self):
        m_dot = 50.0 * 0.7 / (5.0 * 9.81 * 1000.0) * 1000.0
        expected = 20.0 + m_dot * 4186.0 * 20.0 * 3600.0 / (1000.0 * 1000.0 * 4186.0)
        assert tank_exchange(**_tank_args()) == pytest.approx(expected)

    def test_warm_tank_loses_heat_to_loop(self):
        assert tank_exchange(**_tank_args(fluid_temp=10.0)) < 20.0

    def test_equal_temperatures_no_change(self):
        assert tank_exchange(**_tank_args(fluid_temp=20.0)) == 20.0

    def test_no_pump_tank_unchanged(self):
        assert tank_exchange(**_tank_args(pump_power=0.0)) == 20.0

    def test_no_clamp_on_extreme_inputs(self):
        """A tiny tank is allowed to overshoot the loop temperature."""
        assert tank_exchange(**_tank_args(tank_volume=0.1)) > 40.0

    def test_zero_volume_is_non_finite(self):
        assert math.isinf(tank_exchange(**_tank_args(tank_volume=0.0)))

    def test_nan_flow_gives_nan_tank(self):
        args = _tank_args(pump_power=0.0, hydraulic_head=0.0)
        assert math.isnan(tank_exchange(**args))
