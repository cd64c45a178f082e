from collections import namedtuple
#
import numpy as np
#
from bnpmix.errors import ConfigurationError
from bnpmix.mixings.base_mixing import BaseMixing, MixingId


PYState = namedtuple('PYState', ['strength', 'discount'])


class PitmanYorMixing(BaseMixing):
    """EPPF of the Pitman-Yor process with strength M and discount d:

        p(existing cluster j) = (n_j - d) / (n + M)
        p(new cluster)        = (M + k d) / (n + M)

    with k the current number of clusters.  d = 0 recovers the Dirichlet
    process.  The parameters are fixed.
    """

    def __init__(self, random_source, strength=1.0, discount=0.1):
        BaseMixing.__init__(self, random_source)
        self.set_state_from_proto(PYState(strength, discount))

    def get_id(self):
        return MixingId.PY

    def is_conditional(self):
        return False

    def initialize_state(self):
        pass

    def update_state(self, unique_values, allocations):
        pass

    def mass_existing_cluster(self, n, log, propto, hier):
        card = hier.get_card()
        mass = card - self.discount if card > 0 else 0.0
        if not propto:
            mass /= n + self.strength
        if log:
            return np.log(mass) if mass > 0 else -np.inf
        return mass

    def mass_new_cluster(self, n, log, propto, n_clust):
        mass = self.strength + n_clust * self.discount
        if not propto:
            mass /= n + self.strength
        if log:
            return np.log(mass) if mass > 0 else -np.inf
        return mass

    def get_state_proto(self):
        return PYState(self.strength, self.discount)

    def set_state_from_proto(self, record):
        if isinstance(record, dict):
            record = PYState(**record)
        strength, discount = float(record.strength), float(record.discount)
        if not 0 <= discount < 1:
            raise ConfigurationError("PitmanYorMixing discount must be in"
                                     " [0, 1), got %r" % discount)
        if not strength > -discount:
            raise ConfigurationError("PitmanYorMixing strength must exceed"
                                     " -discount, got %r" % strength)
        self.strength = strength
        self.discount = discount
