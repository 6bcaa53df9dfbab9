"""
Pytest configuration and fixtures for PGA-Sym tests.
"""

import pytest
import torch

from pga_sym.algebra import Algebra, Metric
from pga_sym.engine import Engine
from pga_sym.pga import pga_algebra
from pga_sym.utils import Config, get_default_config, set_default_config


@pytest.fixture(autouse=True)
def restore_default_config():
    """Tests may swap the process-wide config; put it back afterwards."""
    config = get_default_config()
    yield
    set_default_config(config)


@pytest.fixture
def cpu_device():
    """Force CPU device for consistent testing."""
    return torch.device('cpu')


@pytest.fixture
def pga():
    """The projective algebra G(3,0,1)."""
    return pga_algebra


@pytest.fixture
def euclidean3():
    """Non-degenerate G(3,0,0)."""
    return Algebra(Metric(3))


@pytest.fixture
def engine():
    """Engine with its own empty cache."""
    return Engine(Config(cache_size=4))


@pytest.fixture
def batch_size():
    """Default batch size for tests."""
    return 5


@pytest.fixture
def random_points(batch_size):
    """Random points in [-1, 1]^3."""
    generator = torch.Generator().manual_seed(0)
    return torch.rand(batch_size, 3, generator=generator, dtype=torch.float64) * 2 - 1
