from bnpmix.hierarchies.base_hierarchy import BaseHierarchy, HierarchyId
from bnpmix.hierarchies.nnig_hierarchy import NNIGHierarchy, NNIGState
from bnpmix.hierarchies.beta_bernoulli_hierarchy import (
    BetaBernoulliHierarchy, BetaBernoulliState)
