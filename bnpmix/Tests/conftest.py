import numpy as np
import pytest

from bnpmix.algorithms import BlockedGibbsAlgorithm
from bnpmix.hierarchies import NNIGHierarchy
from bnpmix.mixings import DirichletMixing, TruncatedSBMixing
from bnpmix.random_source import RandomSource


@pytest.fixture
def random_source():
    return RandomSource(0)


@pytest.fixture
def two_cluster_data():
    """20 points near -10 and 20 near +10, with their true labels."""
    random_state = np.random.RandomState(42)
    xs = np.concatenate([random_state.normal(-10, .5, 20),
                         random_state.normal(10, .5, 20)])
    zs = [0] * 20 + [1] * 20
    return xs[:, np.newaxis], zs


def make_nnig(random_source):
    return NNIGHierarchy(random_source, mean=0.0, var_scaling=0.01,
                         shape=2.0, scale=1.0)


def make_algorithm(seed, mixing_name="DP", hierarchy=None):
    random_source = RandomSource(seed)
    if hierarchy is None:
        hierarchy = make_nnig(random_source)
    else:
        hierarchy.random_source = random_source
    if mixing_name == "DP":
        mixing = DirichletMixing(random_source, totalmass=1.0)
    else:
        mixing = TruncatedSBMixing(random_source, num_components=10,
                                   totalmass=1.0)
    return BlockedGibbsAlgorithm(mixing, hierarchy, random_source)


@pytest.fixture
def marginal_algorithm(two_cluster_data):
    algorithm = make_algorithm(0, "DP")
    algorithm.read_data(two_cluster_data[0])
    algorithm.initialize()
    return algorithm


@pytest.fixture
def conditional_algorithm(two_cluster_data):
    algorithm = make_algorithm(0, "TruncSB")
    algorithm.read_data(two_cluster_data[0])
    algorithm.initialize()
    return algorithm


@pytest.fixture
def algorithm_factory():
    return make_algorithm
