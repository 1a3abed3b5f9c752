"""
Solar-thermal engine module.

Provides the clear-sky irradiance model, pump hydraulics, the
Hottel-Whillier-Bliss collector gain, the mean fluid temperature update,
and the single-node storage tank exchange used by the hourly simulation.
"""

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .irradiance import irradiance_profile, solar_irradiance
from .hydraulics import mass_flow_rate
from .collector import CollectorGainResult, collector_gain, heat_removal_factors
from .fluid import FluidTemperatures, update_fluid_temperature
from .tank import tank_exchange, tank_thermal_capacity

__all__ = [
    # constants
    "DEFAULT_CONSTANTS",
    "PhysicalConstants",
    # irradiance
    "solar_irradiance",
    "irradiance_profile",
    # hydraulics
    "mass_flow_rate",
    # collector
    "CollectorGainResult",
    "collector_gain",
    "heat_removal_factors",
    # fluid
    "FluidTemperatures",
    "update_fluid_temperature",
    # tank
    "tank_exchange",
    "tank_thermal_capacity",
]
