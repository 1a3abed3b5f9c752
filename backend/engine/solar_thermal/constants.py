"""Physical constants shared by the solar-thermal models.

The constants are bundled in a frozen dataclass so that a caller (or a test)
can inject different values instead of relying on module-level literals.
"""

from __future__ import annotations

from dataclasses import dataclass

# Sunrise / sunset of the fixed daylight window (hour of day).
SUNRISE_HOUR: int = 6
SUNSET_HOUR: int = 18

SOLAR_NOON_HOUR: int = 12
HOURS_PER_DAY: int = 24

# W -> MJ
JOULES_PER_MEGAJOULE: float = 1.0e6


@dataclass(frozen=True)
class PhysicalConstants:
    """Environment and fluid constants used across the engine.

    Attributes
    ----------
    fluid_density : float
        Working-fluid density (kg/m^3).  Default 1000 (water).
    gravity : float
        Gravitational acceleration (m/s^2).  Default 9.81.
    peak_irradiance : float
        Clear-sky irradiance at solar noon (W/m^2).  Default 1000.
    step_seconds : float
        Length of one simulation step (s).  Default 3600 (hourly).
    """

    fluid_density: float = 1000.0
    gravity: float = 9.81
    peak_irradiance: float = 1000.0
    step_seconds: float = 3600.0

    @property
    def megajoules_per_watt_step(self) -> float:
        """Factor converting W/m^2 sustained for one step into MJ/m^2."""
        return self.step_seconds / JOULES_PER_MEGAJOULE


DEFAULT_CONSTANTS = PhysicalConstants()
