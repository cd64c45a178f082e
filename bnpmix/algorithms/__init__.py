from bnpmix.algorithms.algorithm_base import AlgorithmBase
from bnpmix.algorithms.blocked_gibbs_algorithm import BlockedGibbsAlgorithm
