"""Shared test fixtures for SolarLoop engine and API tests."""

from __future__ import annotations

import pytest

from engine.simulation import SimulationParameters
from engine.solar_thermal.constants import PhysicalConstants

HOURS_PER_DAY = 24


# ======================================================================
# Parameter fixtures
# ======================================================================

@pytest.fixture
def constants() -> PhysicalConstants:
    return PhysicalConstants()


@pytest.fixture
def day_parameters() -> SimulationParameters:
    """Clear-sky 24 h run from midnight: 2 m² collector, 50 W pump, 15-25 °C ambient."""
    return SimulationParameters(
        area=2.0,
        efficiency=0.8,
        cloud_cover=0.0,
        transmittance=0.9,
        absorptance=0.95,
        loss_coefficient=8.0,
        specific_heat=4186.0,
        pump_power=50.0,
        hydraulic_head=5.0,
        pump_efficiency=0.7,
        tank_volume=1000.0,
        min_ambient_temp=15.0,
        max_ambient_temp=25.0,
        start_hour=0,
        duration=HOURS_PER_DAY,
        start_fluid_temp=20.0,
        tank_temp=20.0,
    )


@pytest.fixture
def textbook_collector() -> dict:
    """Duffie & Beckman style check: 2 m², F'=0.841, 0.03 kg/s, plate 40 °C, ambient 2 °C."""
    return {
        "hour": 11,
        "area": 2.0,
        "efficiency": 0.841,
        "cloud_cover": 0.0,
        "specific_heat": 4186.0,
        "ambient_temp": 2.0,
        "plate_temp": 40.0,
        "transmittance": 1.0,
        "absorptance": 1.0,
        "loss_coefficient": 8.0,
        "mass_flow": 0.03,
    }
