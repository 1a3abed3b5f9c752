"""Hourly collector / tank simulation: parameters, state, and the stepping loop."""

from .state import (
    InputChangeSchedule,
    ParameterOverride,
    PriorState,
    SimulationParameters,
    StepResult,
    ThermalState,
)
from .runner import ThermalSimulationRunner, ambient_temperature, simulate

__all__ = [
    "InputChangeSchedule",
    "ParameterOverride",
    "PriorState",
    "SimulationParameters",
    "StepResult",
    "ThermalState",
    "ThermalSimulationRunner",
    "ambient_temperature",
    "simulate",
]
