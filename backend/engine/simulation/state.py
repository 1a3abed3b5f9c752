"""
Parameter, state, and result records for the hourly thermal simulation.

``SimulationParameters`` and ``ParameterOverride`` are immutable; a
schedule of overrides is merged into the parameters step by step.
``ThermalState`` is the only mutable record and is owned by a single
runner for the duration of one run.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class SimulationParameters:
    """Inputs of one simulation run, all in SI / metric units.

    The engine does not validate numeric domains; callers are expected to
    pass physically meaningful values (see ``app.schemas.simulation``).
    """

    # --- Collector ---
    area: float = 2.0                  # m^2
    efficiency: float = 0.8            # plate efficiency factor F'
    cloud_cover: float = 0.0           # fraction 0-1
    transmittance: float = 0.9
    absorptance: float = 0.95
    loss_coefficient: float = 8.0      # U_L, W/(m^2 K)

    # --- Fluid / pump ---
    specific_heat: float = 4186.0      # J/(kg K)
    pump_power: float = 50.0           # W
    hydraulic_head: float = 5.0        # m
    pump_efficiency: float = 0.7

    # --- Tank ---
    tank_volume: float = 1000.0        # m^3

    # --- Ambient ---
    min_ambient_temp: float = 15.0     # degC
    max_ambient_temp: float = 25.0     # degC
    ambient_temp: float | None = None  # fixed ambient, disables the diurnal cycle

    # --- Run ---
    start_hour: int = 0
    duration: int = 24                 # number of steps
    start_fluid_temp: float = 20.0     # degC
    start_plate_temp: float | None = None  # degC, defaults to start_fluid_temp
    tank_temp: float = 20.0            # degC, initial tank temperature


# Parameter fields that may change between steps.
_OVERRIDABLE_FIELDS: tuple[str, ...] = (
    "area",
    "efficiency",
    "cloud_cover",
    "transmittance",
    "absorptance",
    "loss_coefficient",
    "specific_heat",
    "pump_power",
    "hydraulic_head",
    "pump_efficiency",
    "tank_volume",
    "min_ambient_temp",
    "max_ambient_temp",
    "ambient_temp",
)


@dataclass(frozen=True)
class ParameterOverride:
    """Partial update applied before a given step.

    Fields left as ``None`` keep their previous value.  ``fluid_temp`` and
    ``tank_temp`` overwrite the thermal state directly for that step.
    """

    area: float | None = None
    efficiency: float | None = None
    cloud_cover: float | None = None
    transmittance: float | None = None
    absorptance: float | None = None
    loss_coefficient: float | None = None
    specific_heat: float | None = None
    pump_power: float | None = None
    hydraulic_head: float | None = None
    pump_efficiency: float | None = None
    tank_volume: float | None = None
    min_ambient_temp: float | None = None
    max_ambient_temp: float | None = None
    ambient_temp: float | None = None

    fluid_temp: float | None = None
    tank_temp: float | None = None

    def parameter_changes(self) -> dict[str, float]:
        """Return only the parameter fields that are set."""
        return {
            name: getattr(self, name)
            for name in _OVERRIDABLE_FIELDS
            if getattr(self, name) is not None
        }

    def apply_to(self, params: SimulationParameters) -> SimulationParameters:
        changes = self.parameter_changes()
        if not changes:
            return params
        return replace(params, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, float | None]) -> "ParameterOverride":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown override fields: {sorted(unknown)}")
        return cls(**data)


InputChangeSchedule = Mapping[int, ParameterOverride]


@dataclass
class ThermalState:
    """Mutable fluid / plate / tank temperatures (deg C) threaded through a run."""

    fluid_temp: float
    plate_temp: float
    tank_temp: float

    @classmethod
    def from_parameters(cls, params: SimulationParameters) -> "ThermalState":
        plate = params.start_plate_temp
        return cls(
            fluid_temp=params.start_fluid_temp,
            plate_temp=params.start_fluid_temp if plate is None else plate,
            tank_temp=params.tank_temp,
        )

    @classmethod
    def from_prior(cls, prior: "PriorState") -> "ThermalState":
        return cls(
            fluid_temp=prior.fluid_temp,
            plate_temp=prior.plate_temp,
            tank_temp=prior.tank_temp,
        )

    def snapshot(self) -> "PriorState":
        return PriorState(
            fluid_temp=self.fluid_temp,
            plate_temp=self.plate_temp,
            tank_temp=self.tank_temp,
        )


@dataclass(frozen=True)
class PriorState:
    """Exported end state of an earlier run, used to resume a simulation."""

    fluid_temp: float
    plate_temp: float
    tank_temp: float

    @classmethod
    def from_result(cls, result: "StepResult") -> "PriorState":
        return cls(
            fluid_temp=result.fluid_temp,
            plate_temp=result.plate_temp,
            tank_temp=result.tank_temp,
        )


@dataclass(frozen=True)
class StepResult:
    """Snapshot of the system at the end of step ``time``.

    Attributes
    ----------
    time : int
        Step index.
    hour : int
        Hour of day (0-23) the step started at.
    fluid_temp, plate_temp, tank_temp, ambient_temp : float
        Temperatures in deg C.
    """

    time: int
    hour: int
    fluid_temp: float
    plate_temp: float
    tank_temp: float
    ambient_temp: float
