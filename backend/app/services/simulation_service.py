import logging
import math

from app.core.units import celsius_to_fahrenheit, fahrenheit_to_celsius
from app.schemas.simulation import InputChange, PriorStateIn, SimulateRequest
from engine.simulation import (
    ParameterOverride,
    PriorState,
    SimulationParameters,
    ThermalSimulationRunner,
)
from engine.solar_thermal.constants import DEFAULT_CONSTANTS, PhysicalConstants

logger = logging.getLogger(__name__)

# InputChange fields given in °F
_TEMPERATURE_FIELDS = ("min_ambient_temp", "max_ambient_temp", "ambient_temp", "fluid_temp", "tank_temp")


def _safe_float(value: float | None) -> float | None:
    """Convert inf/nan to None for JSON-safe serialization."""
    if value is None:
        return None
    if math.isinf(value) or math.isnan(value):
        return None
    return value


def _to_celsius(value: float | None) -> float | None:
    return None if value is None else fahrenheit_to_celsius(value)


def _to_fahrenheit(value: float) -> float | None:
    return _safe_float(celsius_to_fahrenheit(value))


def build_parameters(body: SimulateRequest) -> SimulationParameters:
    """Translate a validated request (°F) into engine parameters (°C)."""
    return SimulationParameters(
        area=body.area,
        efficiency=body.efficiency,
        cloud_cover=body.cloud_cover,
        transmittance=body.transmittance,
        absorptance=body.absorptance,
        loss_coefficient=body.loss_coefficient,
        specific_heat=body.specific_heat,
        pump_power=body.pump_power,
        hydraulic_head=body.hydraulic_head,
        pump_efficiency=body.pump_efficiency,
        tank_volume=body.tank_volume,
        min_ambient_temp=fahrenheit_to_celsius(body.min_ambient_temp),
        max_ambient_temp=fahrenheit_to_celsius(body.max_ambient_temp),
        ambient_temp=_to_celsius(body.ambient_temp),
        start_hour=body.hour,
        duration=body.duration,
        start_fluid_temp=fahrenheit_to_celsius(body.start_fluid_temp),
        start_plate_temp=_to_celsius(body.start_plate_temp),
        tank_temp=fahrenheit_to_celsius(body.tank_temp),
    )


def build_override(change: InputChange) -> ParameterOverride:
    values = change.model_dump()
    for name in _TEMPERATURE_FIELDS:
        values[name] = _to_celsius(values[name])
    return ParameterOverride.from_dict(values)


def build_prior_state(prior: PriorStateIn | None) -> PriorState | None:
    if prior is None:
        return None
    return PriorState(
        fluid_temp=fahrenheit_to_celsius(prior.fluid_temp),
        plate_temp=fahrenheit_to_celsius(prior.plate_temp),
        tank_temp=fahrenheit_to_celsius(prior.tank_temp),
    )


def run_simulation(
    body: SimulateRequest,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> dict:
    """Run the thermal simulation for a request and return a JSON-ready payload in °F."""
    runner = ThermalSimulationRunner(
        build_parameters(body),
        schedule={step: build_override(change) for step, change in body.input_changes.items()},
        start_step=body.start_step,
        prior_state=build_prior_state(body.prior_state),
        constants=constants,
    )
    results = runner.run()

    logger.info(
        "Simulated %d steps from hour %d (%d scheduled changes, resumed=%s)",
        len(results),
        body.hour,
        len(body.input_changes),
        body.prior_state is not None,
        extra={"steps": len(results)},
    )

    final = runner.final_state()
    return {
        "temperatures": [
            {
                "time": r.time,
                "hour": r.hour,
                "fluidTemp": _to_fahrenheit(r.fluid_temp),
                "panelTemp": _to_fahrenheit(r.plate_temp),
                "tankTemp": _to_fahrenheit(r.tank_temp),
                "ambientTemp": _to_fahrenheit(r.ambient_temp),
            }
            for r in results
        ],
        "finalState": None if final is None else {
            "fluidTemp": _to_fahrenheit(final.fluid_temp),
            "plateTemp": _to_fahrenheit(final.plate_temp),
            "tankTemp": _to_fahrenheit(final.tank_temp),
        },
    }
