"""Hourly simulation orchestrator for a pumped solar water-heating loop.

``ThermalSimulationRunner`` chains the irradiance, collector gain, fluid
temperature and tank exchange models into an explicit-Euler time-stepping
loop.  Each step resolves the ambient temperature, applies any scheduled
parameter override, advances the thermal state, and emits an immutable
``StepResult``.

The runner holds no module-level mutable state: every instance owns its
own ``ThermalState``, so concurrent runs never interfere.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np

from engine.solar_thermal.collector import collector_gain
from engine.solar_thermal.constants import (
    DEFAULT_CONSTANTS,
    HOURS_PER_DAY,
    SUNRISE_HOUR,
    PhysicalConstants,
)
from engine.solar_thermal.fluid import update_fluid_temperature
from engine.solar_thermal.hydraulics import mass_flow_rate
from engine.solar_thermal.tank import tank_exchange

from .state import (
    InputChangeSchedule,
    ParameterOverride,
    PriorState,
    SimulationParameters,
    StepResult,
    ThermalState,
)

logger = logging.getLogger(__name__)


# ======================================================================
# Ambient temperature
# ======================================================================

def ambient_temperature(hour: int, params: SimulationParameters) -> float:
    """Ambient temperature (deg C) at ``hour``.

    A fixed ``ambient_temp`` disables the daily cycle.  Otherwise the
    temperature follows ``mid + amp * sin((hour - 6) * pi / 12)`` between
    ``min_ambient_temp`` and ``max_ambient_temp``.
    """
    if params.ambient_temp is not None:
        return params.ambient_temp

    midpoint = (params.max_ambient_temp + params.min_ambient_temp) / 2.0
    amplitude = (params.max_ambient_temp - params.min_ambient_temp) / 2.0
    return float(midpoint + amplitude * np.sin((hour - SUNRISE_HOUR) * np.pi / 12.0))


def _hour_of_day(start_hour: int, step: int) -> int:
    return (start_hour + step) % HOURS_PER_DAY


# ======================================================================
# ThermalSimulationRunner
# ======================================================================

class ThermalSimulationRunner:
    """Time-stepped simulation of a collector / tank loop.

    Parameters
    ----------
    parameters : SimulationParameters
        Initial parameters.  ``duration`` sets the exclusive upper bound of
        the step range.
    schedule : mapping of int to ParameterOverride, optional
        Sparse patch log keyed by step index.  Overrides are applied in
        ascending step order, immediately before the step is computed.
        Entries before ``start_step`` are replayed for their parameter
        fields only, so a resumed run sees the same parameters as an
        uninterrupted one.
    start_step : int
        First step to compute.  Default 0.
    prior_state : PriorState or None
        End state of an earlier run.  When given it seeds the fluid, plate
        and tank temperatures instead of the starting values in
        ``parameters``.
    constants : PhysicalConstants
        Physical constants injected into every model.
    """

    def __init__(
        self,
        parameters: SimulationParameters,
        schedule: InputChangeSchedule | None = None,
        start_step: int = 0,
        prior_state: PriorState | None = None,
        constants: PhysicalConstants = DEFAULT_CONSTANTS,
    ) -> None:
        if parameters.duration < 0:
            raise ValueError(f"duration must be non-negative, got {parameters.duration}")
        if not 0 <= start_step <= parameters.duration:
            raise ValueError(
                f"start_step must be in [0, {parameters.duration}], got {start_step}"
            )

        schedule = dict(schedule or {})
        for key, override in schedule.items():
            if not isinstance(key, int) or isinstance(key, bool):
                raise ValueError(f"Schedule keys must be step indices, got {key!r}")
            if not isinstance(override, ParameterOverride):
                raise ValueError(
                    f"Schedule entry for step {key} must be a ParameterOverride, "
                    f"got {type(override).__name__}"
                )

        self.initial_parameters = parameters
        self.schedule: dict[int, ParameterOverride] = dict(sorted(schedule.items()))
        self.start_step = start_step
        self.prior_state = prior_state
        self.constants = constants

        self._state: ThermalState | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> list[StepResult]:
        """Execute every step and return the ordered results."""
        results = list(self.iter_steps())
        logger.info(
            "Thermal simulation complete: %d steps (start_step=%d)",
            len(results),
            self.start_step,
        )
        return results

    def iter_steps(self) -> Iterator[StepResult]:
        """Yield one ``StepResult`` per step.

        The generator can be abandoned at any point; no further work is
        done once the caller stops consuming it.
        """
        params = self._replay_parameters()
        if self.prior_state is not None:
            state = ThermalState.from_prior(self.prior_state)
        else:
            state = ThermalState.from_parameters(self.initial_parameters)
        self._state = state

        logger.debug(
            "Starting thermal simulation: steps %d-%d, start_hour=%d",
            self.start_step,
            self.initial_parameters.duration,
            self.initial_parameters.start_hour,
        )

        for step in range(self.start_step, self.initial_parameters.duration):
            override = self.schedule.get(step)
            if override is not None:
                params = override.apply_to(params)
            yield self._step(step, params, state, override)

    def final_state(self) -> PriorState | None:
        """Thermal state after the last consumed step, for resuming later."""
        if self._state is None:
            return None
        return self._state.snapshot()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _replay_parameters(self) -> SimulationParameters:
        params = self.initial_parameters
        for step, override in self.schedule.items():
            if step >= self.start_step:
                break
            params = override.apply_to(params)
        return params

    def _step(
        self,
        step: int,
        params: SimulationParameters,
        state: ThermalState,
        override: ParameterOverride | None,
    ) -> StepResult:
        hour = _hour_of_day(self.initial_parameters.start_hour, step)
        ambient = ambient_temperature(hour, params)

        fluid_overridden = override is not None and override.fluid_temp is not None
        tank_overridden = override is not None and override.tank_temp is not None

        # 1) Collector gain and fluid / plate update
        if fluid_overridden:
            state.fluid_temp = override.fluid_temp
        else:
            flow = mass_flow_rate(
                params.pump_power, params.hydraulic_head, params.pump_efficiency,
                self.constants,
            )
            gain = collector_gain(
                hour=hour,
                area=params.area,
                efficiency=params.efficiency,
                cloud_cover=params.cloud_cover,
                specific_heat=params.specific_heat,
                ambient_temp=ambient,
                plate_temp=state.plate_temp,
                transmittance=params.transmittance,
                absorptance=params.absorptance,
                loss_coefficient=params.loss_coefficient,
                mass_flow=flow,
                constants=self.constants,
            )
            temps = update_fluid_temperature(
                gain,
                state.fluid_temp,
                params.loss_coefficient,
                current_plate_temp=state.plate_temp,
                constants=self.constants,
            )
            state.fluid_temp = temps.fluid_temp
            state.plate_temp = temps.plate_temp

        # 2) Tank exchange with the updated loop temperature
        if tank_overridden:
            state.tank_temp = override.tank_temp
        else:
            state.tank_temp = tank_exchange(
                fluid_temp=state.fluid_temp,
                tank_temp=state.tank_temp,
                tank_volume=params.tank_volume,
                specific_heat=params.specific_heat,
                time_step_s=self.constants.step_seconds,
                pump_power=params.pump_power,
                hydraulic_head=params.hydraulic_head,
                pump_efficiency=params.pump_efficiency,
                constants=self.constants,
            )

        logger.debug(
            "Step %d (h=%02d): T_amb=%.2f T_fluid=%.2f T_plate=%.2f T_tank=%.2f",
            step, hour, ambient, state.fluid_temp, state.plate_temp, state.tank_temp,
        )

        return StepResult(
            time=step,
            hour=hour,
            fluid_temp=state.fluid_temp,
            plate_temp=state.plate_temp,
            tank_temp=state.tank_temp,
            ambient_temp=ambient,
        )


def simulate(
    parameters: SimulationParameters,
    schedule: InputChangeSchedule | None = None,
    start_step: int = 0,
    prior_state: PriorState | None = None,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> list[StepResult]:
    """Run a simulation and return one ``StepResult`` per step.

    Convenience wrapper around :class:`ThermalSimulationRunner`.
    """
    return ThermalSimulationRunner(
        parameters,
        schedule=schedule,
        start_step=start_step,
        prior_state=prior_state,
        constants=constants,
    ).run()
