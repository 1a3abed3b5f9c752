"""
Single-node (fully mixed) storage tank heated by the collector loop.

Each step the loop delivers ``Q = m_dot * c_p * (T_fluid - T_tank)`` watts
to the tank.  The sign follows the gradient, so a tank warmer than the loop
gives heat back.  The tank temperature changes by ``Q * dt / (V rho c_p)``.
No bounds are applied to the resulting temperature.
"""

from __future__ import annotations

import numpy as np

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .hydraulics import mass_flow_rate


def tank_thermal_capacity(
    tank_volume: float,
    specific_heat: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Heat capacity of the tank contents (J/K)."""
    return tank_volume * constants.fluid_density * specific_heat


def tank_exchange(
    fluid_temp: float,
    tank_temp: float,
    tank_volume: float,
    specific_heat: float,
    time_step_s: float,
    pump_power: float,
    hydraulic_head: float,
    pump_efficiency: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Return the tank temperature (deg C) after one step of loop exchange.

    Parameters
    ----------
    fluid_temp : float
        Collector-loop fluid temperature entering the tank (deg C).
    tank_temp : float
        Tank temperature before the step (deg C).
    tank_volume : float
        Tank volume (m^3).
    specific_heat : float
        Fluid specific heat (J/(kg K)).
    time_step_s : float
        Step length (s).
    pump_power, hydraulic_head, pump_efficiency : float
        Pump characteristics, see
        :func:`engine.solar_thermal.hydraulics.mass_flow_rate`.
    constants : PhysicalConstants
        Supplies fluid density and gravity.

    Returns
    -------
    float
        New tank temperature.  Without flow it is ``tank_temp`` unchanged;
        a NaN flow yields NaN.
    """
    mass_flow = mass_flow_rate(pump_power, hydraulic_head, pump_efficiency, constants)
    if mass_flow <= 0.0:
        return tank_temp

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        heat_rate = np.float64(mass_flow * specific_heat) * (fluid_temp - tank_temp)  # W
        capacity = tank_thermal_capacity(tank_volume, specific_heat, constants)
        delta_t = heat_rate * time_step_s / capacity

    return float(tank_temp + delta_t)
