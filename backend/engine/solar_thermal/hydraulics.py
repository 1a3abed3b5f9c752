"""Pump-driven circulation: mass flow rate from pump power and head."""

from __future__ import annotations

import numpy as np

from .constants import DEFAULT_CONSTANTS, PhysicalConstants


def mass_flow_rate(
    pump_power: float,
    hydraulic_head: float,
    pump_efficiency: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Mass flow rate (kg/s) delivered by a pump lifting fluid over ``hydraulic_head``.

    The hydraulic power ``P * eta`` is equated to ``rho * g * H * V_dot``,
    which gives the volumetric flow ``V_dot``; multiplying by the density
    converts it to a mass flow.

    Parameters
    ----------
    pump_power : float
        Electrical pump power (W), >= 0.
    hydraulic_head : float
        Total head the pump works against (m), > 0.
    pump_efficiency : float
        Wire-to-water efficiency in [0, 1].
    constants : PhysicalConstants
        Supplies fluid density and gravity.

    Returns
    -------
    float
        Mass flow rate in kg/s.  A zero head yields ``inf`` (or ``nan`` for
        zero pump power), and a zero density yields ``nan``, rather than
        raising.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        volumetric_flow = np.float64(pump_power * pump_efficiency) / (
            hydraulic_head * constants.gravity * constants.fluid_density
        )
        mass_flow = volumetric_flow * constants.fluid_density
    return float(mass_flow)
