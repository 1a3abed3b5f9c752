"""Mean fluid and plate temperature update for one collector step."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .collector import CollectorGainResult
from .constants import DEFAULT_CONSTANTS, JOULES_PER_MEGAJOULE, PhysicalConstants


@dataclass(frozen=True)
class FluidTemperatures:
    fluid_temp: float
    plate_temp: float


def update_fluid_temperature(
    gain: CollectorGainResult,
    current_fluid_temp: float,
    loss_coefficient: float,
    current_plate_temp: float | None = None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> FluidTemperatures:
    """Advance the mean fluid and plate temperatures by one step.

    Without flow (``F_R == 0``) the fluid keeps its temperature and the
    plate absorbs the whole gain: ``T_p += q_u / U_L``.

    With flow, ``q_u`` is converted to W/m^2 and both temperatures are
    offset from the current fluid temperature (Duffie & Beckman eq. 6.9.4)::

        T_f = T_f0 + q_u / (F_R U_L) * (1 - F'')
        T_p = T_f0 + q_u / (F_R U_L) * (1 - F_R)

    As ``F_R`` tends to zero with a nonzero gain the offsets grow without
    bound; the result is returned as computed, not clamped.

    Parameters
    ----------
    gain : CollectorGainResult
        Output of :func:`engine.solar_thermal.collector.collector_gain`.
    current_fluid_temp : float
        Mean fluid temperature before the step (deg C).
    loss_coefficient : float
        Overall heat-loss coefficient ``U_L`` (W/(m^2 K)).
    current_plate_temp : float or None
        Plate temperature before the step (deg C), used by the no-flow
        branch.  Defaults to ``current_fluid_temp``.
    constants : PhysicalConstants
        Supplies the step length.
    """
    if current_plate_temp is None:
        current_plate_temp = current_fluid_temp

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if gain.heat_removal_factor == 0.0:
            plate_temp = current_plate_temp + np.float64(gain.useful_gain) / loss_coefficient
            return FluidTemperatures(
                fluid_temp=current_fluid_temp,
                plate_temp=float(plate_temp),
            )

        gain_watts = np.float64(gain.useful_gain) * JOULES_PER_MEGAJOULE / constants.step_seconds
        offset = gain_watts / (gain.heat_removal_factor * loss_coefficient)
        fluid_temp = current_fluid_temp + offset * (1.0 - gain.flow_factor)
        plate_temp = current_fluid_temp + offset * (1.0 - gain.heat_removal_factor)

    return FluidTemperatures(fluid_temp=float(fluid_temp), plate_temp=float(plate_temp))
