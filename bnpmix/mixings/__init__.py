from bnpmix.mixings.base_mixing import BaseMixing, MixingId
from bnpmix.mixings.dirichlet_mixing import (
    DirichletMixing, DPState, GammaPrior, GridPrior)
from bnpmix.mixings.pitman_yor_mixing import PitmanYorMixing, PYState
from bnpmix.mixings.truncated_sb_mixing import TruncatedSBMixing, TruncSBState
