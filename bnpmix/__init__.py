from bnpmix.algorithms import AlgorithmBase, BlockedGibbsAlgorithm
from bnpmix.errors import ConfigurationError, InconsistencyError, \
    InvalidWeightsError
from bnpmix.hierarchies import BaseHierarchy, BetaBernoulliHierarchy, \
    HierarchyId, NNIGHierarchy
from bnpmix.mixings import BaseMixing, DirichletMixing, GammaPrior, \
    GridPrior, MixingId, PitmanYorMixing, TruncatedSBMixing
from bnpmix.random_source import RandomSource
from bnpmix.state import MarginalState

__version__ = '0.1.0'
