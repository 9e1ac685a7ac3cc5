from __future__ import annotations

import numpy as np
import pytest

from island_sim.simulation.engine import SimulationEngine
from island_sim.viz.logger import SimLogger


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def logger():
    return SimLogger(verbosity=0)


@pytest.fixture
def engine(logger):
    eng = SimulationEngine(seed=7, logger=logger, rain_enabled=False)
    eng.start_game()
    return eng


def messages(logger: SimLogger) -> list[str]:
    return [e.message for e in logger.entries]
