"""
Flat-plate collector energy gain (Hottel-Whillier-Bliss).

For a collector of area ``A`` with plate efficiency factor ``F'`` and
overall loss coefficient ``U_L``, the heat-removal factor is

    C   = m_dot * c_p / (A * U_L * F')        (dimensionless capacitance rate)
    F'' = C * (1 - exp(-1 / C))               (collector flow factor)
    F_R = F'' * F'                            (heat-removal factor)

and the useful gain per unit area over one step is

    q_u = F_R * [S * tau * alpha - U_L * (T_plate - T_ambient) * dt / 1e6]

with ``S`` the incident solar energy (MJ/m^2 per step).  ``q_u`` may be
negative when the plate loses more heat than it absorbs.

References
----------
- Duffie J.A. & Beckman W.A., "Solar Engineering of Thermal Processes",
  4th ed., Wiley, 2013, sections 6.7-6.9.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .constants import DEFAULT_CONSTANTS, PhysicalConstants
from .irradiance import solar_irradiance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectorGainResult:
    """Outcome of one collector energy-balance evaluation.

    Attributes
    ----------
    useful_gain : float
        Useful energy gain per unit area ``q_u`` (MJ/(m^2 step)).
    heat_removal_factor : float
        ``F_R`` in [0, 1]; exactly 0 when there is no flow.
    flow_factor : float
        Collector flow factor ``F''`` in [0, 1]; exactly 0 when there is
        no flow.
    irradiance : float
        Incident solar energy ``S`` used for the step (MJ/(m^2 step)).
    """

    useful_gain: float
    heat_removal_factor: float
    flow_factor: float
    irradiance: float = 0.0


def heat_removal_factors(
    mass_flow: float,
    specific_heat: float,
    area: float,
    loss_coefficient: float,
    efficiency: float,
) -> tuple[float, float]:
    """Return ``(F_R, F'')`` for the given flow and collector properties.

    A non-positive mass flow takes the no-flow branch and returns
    ``(0.0, 0.0)``.  A NaN flow, or zero area, loss coefficient or plate
    factor, produces non-finite factors instead of raising.
    """
    if mass_flow <= 0.0:
        return 0.0, 0.0

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        capacitance_rate = np.float64(mass_flow * specific_heat) / (
            area * loss_coefficient * efficiency
        )
        flow_factor = capacitance_rate * (1.0 - np.exp(-1.0 / capacitance_rate))
        heat_removal = flow_factor * efficiency

    return float(heat_removal), float(flow_factor)


def collector_gain(
    hour: int,
    area: float,
    efficiency: float,
    cloud_cover: float,
    specific_heat: float,
    ambient_temp: float,
    plate_temp: float,
    transmittance: float,
    absorptance: float,
    loss_coefficient: float,
    mass_flow: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> CollectorGainResult:
    """Evaluate the collector energy balance for one step.

    Parameters
    ----------
    hour : int
        Hour of day (0-23) at the start of the step.
    area : float
        Collector aperture area (m^2).
    efficiency : float
        Plate efficiency factor ``F'`` in [0, 1].
    cloud_cover : float
        Cloud fraction in [0, 1].
    specific_heat : float
        Fluid specific heat (J/(kg K)).
    ambient_temp, plate_temp : float
        Ambient and absorber-plate temperatures (deg C).
    transmittance, absorptance : float
        Cover transmittance ``tau`` and plate absorptance ``alpha``.
    loss_coefficient : float
        Overall heat-loss coefficient ``U_L`` (W/(m^2 K)).
    mass_flow : float
        Fluid mass flow rate (kg/s), see
        :func:`engine.solar_thermal.hydraulics.mass_flow_rate`.
    constants : PhysicalConstants
        Step length and irradiance constants.

    Returns
    -------
    CollectorGainResult
    """
    heat_removal, flow_factor = heat_removal_factors(
        mass_flow, specific_heat, area, loss_coefficient, efficiency
    )
    irradiance = solar_irradiance(hour, cloud_cover, constants)

    absorbed = irradiance * transmittance * absorptance
    # U_L in W/(m^2 K) -> MJ/(m^2 K step)
    loss = loss_coefficient * (plate_temp - ambient_temp) * constants.megajoules_per_watt_step

    with np.errstate(invalid="ignore", over="ignore"):
        useful_gain = float(np.float64(heat_removal) * (absorbed - loss))

    logger.debug(
        "Collector gain h=%d: S=%.4f MJ/m2, loss=%.4f MJ/m2, F''=%.4f, F_R=%.4f, q_u=%.4f MJ/m2",
        hour,
        irradiance,
        loss,
        flow_factor,
        heat_removal,
        useful_gain,
    )

    return CollectorGainResult(
        useful_gain=useful_gain,
        heat_removal_factor=heat_removal,
        flow_factor=flow_factor,
        irradiance=irradiance,
    )
