"""Shared fixtures."""

import numpy as np
import pytest

from hypergrad import Hypergraph, Model


@pytest.fixture
def hg():
    return Hypergraph()


@pytest.fixture
def model():
    return Model(seed=1234)


@pytest.fixture
def rng():
    return np.random.default_rng(0)
