"""Pytest fixtures for hot pot tests."""

import random

import pytest

from hotpot.config import HotPotConfig
from hotpot.core.clock import SimulationClock
from hotpot.core.controller import HotPotController
from hotpot.simulator.thermal_model import HeatSource, PotState, ThermalParameters


class ZeroNoiseRandom(random.Random):
    """Random source whose uniform draws always land on the midpoint."""

    def uniform(self, a: float, b: float) -> float:
        return (a + b) / 2


@pytest.fixture
def params() -> ThermalParameters:
    """Default thermal parameters."""
    return ThermalParameters()


@pytest.fixture
def pot(params: ThermalParameters) -> PotState:
    """Fresh pot: 25°C, 1000 mL, heater at 5, no food."""
    return PotState.initial(params)


@pytest.fixture
def quiet_heater(params: ThermalParameters) -> HeatSource:
    """Heater with the flame flicker removed."""
    return HeatSource(params, ZeroNoiseRandom())


@pytest.fixture
def clock(
    pot: PotState,
    params: ThermalParameters,
    quiet_heater: HeatSource,
) -> SimulationClock:
    """Clock over the fresh pot with a noiseless heater."""
    return SimulationClock(pot, params, quiet_heater)


@pytest.fixture
def test_config() -> HotPotConfig:
    """Test configuration with a fixed seed and a fast loop."""
    config = HotPotConfig()
    config.random_seed = 1234
    config.tick_interval = 0.01
    config.speed_multiplier = 100.0
    return config


@pytest.fixture
def controller(test_config: HotPotConfig) -> HotPotController:
    """Controller with a noiseless heater."""
    return HotPotController(config=test_config, rng=ZeroNoiseRandom())
