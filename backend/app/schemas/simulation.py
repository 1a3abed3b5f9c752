"""Request / response models for the simulation endpoint.

Request fields follow the public camelCase names and carry temperatures in
degrees Fahrenheit; every other quantity is SI / metric.  Absent or malformed numeric
fields fall back to their documented default; well-formed values outside
their physical domain are rejected with a validation error.
"""

import math
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from app.config import settings

Positive = Annotated[float, Field(gt=0)]
NonNegative = Annotated[float, Field(ge=0)]
Fraction = Annotated[float, Field(ge=0, le=1)]


def parse_lenient_number(value: Any) -> float | None:
    """Parse a JSON number or numeric string; ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


_INPUT_CHANGE_FIELDS = (
    "area", "efficiency", "cloud_cover", "specific_heat", "transmittance",
    "absorptance", "loss_coefficient", "pump_power", "hydraulic_head",
    "pump_efficiency", "tank_volume", "min_ambient_temp", "max_ambient_temp",
    "ambient_temp", "fluid_temp", "tank_temp",
)


class InputChange(BaseModel):
    """Partial parameter update applied before one step.  Unset fields keep their value."""

    model_config = {"populate_by_name": True}

    area: Positive | None = None
    efficiency: Fraction | None = None
    cloud_cover: Fraction | None = Field(default=None, alias="cloudCover")
    specific_heat: Positive | None = Field(default=None, alias="specificHeat")
    transmittance: Fraction | None = None
    absorptance: Fraction | None = None
    loss_coefficient: Positive | None = Field(default=None, alias="U_L")
    pump_power: NonNegative | None = Field(default=None, alias="pumpPower")
    hydraulic_head: Positive | None = Field(default=None, alias="hydraulicHead")
    pump_efficiency: Fraction | None = Field(default=None, alias="pumpEfficiency")
    tank_volume: Positive | None = Field(default=None, alias="tankVolume", description="m³")
    min_ambient_temp: float | None = Field(default=None, alias="minAmbientTemp", description="°F")
    max_ambient_temp: float | None = Field(default=None, alias="maxAmbientTemp", description="°F")
    ambient_temp: float | None = Field(default=None, alias="ambientTemp", description="°F")
    fluid_temp: float | None = Field(default=None, alias="fluidTemp", description="°F")
    tank_temp: float | None = Field(default=None, alias="tankTemp", description="°F")

    @field_validator(*_INPUT_CHANGE_FIELDS, mode="before")
    @classmethod
    def _lenient(cls, value: Any) -> float | None:
        return parse_lenient_number(value)


class PriorStateIn(BaseModel):
    """End state of an earlier run (°F), used to resume a simulation."""

    model_config = {"populate_by_name": True}

    fluid_temp: float = Field(alias="fluidTemp")
    plate_temp: float = Field(alias="plateTemp")
    tank_temp: float = Field(alias="tankTemp")


_REQUEST_NUMBER_FIELDS = (
    "area", "efficiency", "pump_power", "hour", "duration", "min_ambient_temp",
    "max_ambient_temp", "ambient_temp", "cloud_cover", "specific_heat",
    "start_fluid_temp", "start_plate_temp", "transmittance", "absorptance",
    "tank_volume", "tank_temp", "pump_efficiency", "hydraulic_head",
    "loss_coefficient", "start_step",
)


class SimulateRequest(BaseModel):
    model_config = {"populate_by_name": True}

    area: Positive = 2.0
    efficiency: Annotated[float, Field(gt=0, le=1)] = 0.15
    pump_power: NonNegative = Field(default=50.0, alias="pumpPower")
    hour: int = Field(default=0, ge=0, le=23, description="Starting hour of day")
    duration: int = Field(default=24, ge=1, description="Number of hourly steps")
    min_ambient_temp: float = Field(default=60.0, alias="minAmbientTemp", description="°F")
    max_ambient_temp: float = Field(default=80.0, alias="maxAmbientTemp", description="°F")
    ambient_temp: float | None = Field(
        default=None, alias="ambientTemp", description="Fixed ambient °F; disables the daily cycle"
    )
    cloud_cover: Fraction = Field(default=0.0, alias="cloudCover")
    specific_heat: Positive = Field(default=4186.0, alias="specificHeat")
    start_fluid_temp: float = Field(default=68.0, alias="startFluidTemp", description="°F")
    start_plate_temp: float | None = Field(
        default=None, alias="startPlateTemp", description="°F; defaults to startFluidTemp"
    )
    transmittance: Fraction = 0.9
    absorptance: Fraction = 0.95
    tank_volume: Positive = Field(default=1000.0, alias="tankVolume", description="m³")
    tank_temp: float = Field(default=68.0, alias="tankTemp", description="°F")
    pump_efficiency: Fraction = Field(default=0.7, alias="pumpEfficiency")
    hydraulic_head: Positive = Field(default=5.0, alias="hydraulicHead", description="m")
    loss_coefficient: Positive = Field(default=8.0, alias="U_L", description="W/(m²·K)")
    input_changes: dict[int, InputChange] = Field(default_factory=dict, alias="inputChanges")
    start_step: int = Field(default=0, ge=0, alias="startStep")
    prior_state: PriorStateIn | None = Field(default=None, alias="priorState")

    @field_validator(*_REQUEST_NUMBER_FIELDS, mode="before")
    @classmethod
    def _lenient(cls, value: Any, info: ValidationInfo) -> Any:
        number = parse_lenient_number(value)
        if number is None:
            return cls.model_fields[info.field_name].default
        return number

    @field_validator("input_changes", mode="before")
    @classmethod
    def _lenient_changes(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @model_validator(mode="after")
    def _check_ranges(self) -> "SimulateRequest":
        if self.duration > settings.max_duration_steps:
            raise ValueError(
                f"duration must not exceed {settings.max_duration_steps} steps, got {self.duration}"
            )
        if self.start_step > self.duration:
            raise ValueError(
                f"startStep must not exceed duration ({self.duration}), got {self.start_step}"
            )
        if self.min_ambient_temp > self.max_ambient_temp:
            raise ValueError("minAmbientTemp must not exceed maxAmbientTemp")
        negative = [step for step in self.input_changes if step < 0]
        if negative:
            raise ValueError(f"inputChanges keys must be non-negative steps, got {negative}")
        return self


class TemperatureRecord(BaseModel):
    """One step of output, temperatures in °F (``null`` when non-finite)."""

    model_config = {"populate_by_name": True}

    time: int
    hour: int
    fluid_temp: float | None = Field(alias="fluidTemp")
    panel_temp: float | None = Field(alias="panelTemp")
    tank_temp: float | None = Field(alias="tankTemp")
    ambient_temp: float | None = Field(alias="ambientTemp")


class StateRecord(BaseModel):
    model_config = {"populate_by_name": True}

    fluid_temp: float | None = Field(alias="fluidTemp")
    plate_temp: float | None = Field(alias="plateTemp")
    tank_temp: float | None = Field(alias="tankTemp")


class SimulateResponse(BaseModel):
    model_config = {"populate_by_name": True}

    temperatures: list[TemperatureRecord]
    final_state: StateRecord | None = Field(default=None, alias="finalState")
