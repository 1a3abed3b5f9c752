"""
Simplified clear-sky irradiance model for a fixed daylight window.

The sun is assumed to rise at 06:00 and set at 18:00 every day.  Between
those hours the available power density follows a squared-cosine curve
centred on solar noon, scaled down linearly by the cloud fraction, and is
returned as energy density per simulation step (MJ/m^2).

The model deliberately ignores latitude, season, and the split between
direct and diffuse radiation.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .constants import (
    DEFAULT_CONSTANTS,
    SOLAR_NOON_HOUR,
    SUNRISE_HOUR,
    SUNSET_HOUR,
    PhysicalConstants,
)


def solar_irradiance(
    hour: int,
    cloud_cover: float = 0.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> float:
    """Usable solar energy density for one step starting at ``hour``.

    Parameters
    ----------
    hour : int
        Hour of day (0-23).
    cloud_cover : float
        Cloud fraction in [0, 1].  0 = clear sky, 1 = fully overcast.
    constants : PhysicalConstants
        Supplies the peak irradiance and the step length.

    Returns
    -------
    float
        Energy density in MJ/(m^2 step).  Exactly 0.0 outside the
        daylight window ``[6, 18)``.
    """
    if hour < SUNRISE_HOUR or hour >= SUNSET_HOUR:
        return 0.0

    # cos^2 of the angle from solar noon over the half-day span
    half_span = (SUNSET_HOUR - SUNRISE_HOUR) / 2.0
    angle = np.pi * (hour - SOLAR_NOON_HOUR) / (2.0 * half_span)
    power_density = constants.peak_irradiance * np.cos(angle) ** 2

    return float(
        power_density * (1.0 - cloud_cover) * constants.megajoules_per_watt_step
    )


def irradiance_profile(
    hours: NDArray[np.integer] | list[int],
    cloud_cover: float = 0.0,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> NDArray[np.float64]:
    """Vectorised :func:`solar_irradiance` over an array of hours of day."""
    hours = np.asarray(hours, dtype=np.float64)
    daylight = (hours >= SUNRISE_HOUR) & (hours < SUNSET_HOUR)

    half_span = (SUNSET_HOUR - SUNRISE_HOUR) / 2.0
    angle = np.pi * (hours - SOLAR_NOON_HOUR) / (2.0 * half_span)
    power_density = constants.peak_irradiance * np.cos(angle) ** 2

    return np.where(
        daylight,
        power_density * (1.0 - cloud_cover) * constants.megajoules_per_watt_step,
        0.0,
    )
