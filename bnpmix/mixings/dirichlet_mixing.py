from collections import namedtuple
#
import numpy as np
import scipy.special as ss
#
from bnpmix.errors import ConfigurationError
from bnpmix.mixings.base_mixing import BaseMixing, MixingId, count_clusters


DPState = namedtuple('DPState', ['totalmass', 'logtotmass'])
GammaPrior = namedtuple('GammaPrior', ['shape', 'rate'])
GridPrior = namedtuple('GridPrior', ['totalmass_min', 'totalmass_max', 'grid_N'])


def create_totalmass_lnPdf(k, n):
    # log EPPF of a partition with k blocks of n items, as a function of M,
    # up to terms that do not depend on M
    return lambda M: ss.gammaln(M) + k * np.log(M) - ss.gammaln(M + n)


class DirichletMixing(BaseMixing):
    """EPPF of the Dirichlet process with total mass M.  For a datum joining
    n others already split into clusters of sizes n_j:

        p(existing cluster j) = n_j / (n + M)
        p(new cluster)        = M / (n + M)

    M is kept fixed unless a prior is given: `GammaPrior` is updated with the
    Escobar & West (1995) auxiliary variable scheme, `GridPrior` by discrete
    Gibbs over a log-spaced grid.
    """

    def __init__(self, random_source, totalmass=1.0, prior=None):
        BaseMixing.__init__(self, random_source)
        self.prior = self._check_prior(prior)
        self.init_totalmass = totalmass
        self.set_totalmass(totalmass)

    @staticmethod
    def _check_prior(prior):
        if prior is None:
            return prior
        if isinstance(prior, GammaPrior):
            if not (prior.shape > 0 and prior.rate > 0):
                raise ConfigurationError("DirichletMixing gamma prior needs"
                                         " positive shape and rate: %r"
                                         % (prior,))
        elif isinstance(prior, GridPrior):
            if not 0 < prior.totalmass_min < prior.totalmass_max \
                    or prior.grid_N < 2:
                raise ConfigurationError("DirichletMixing grid prior is"
                                         " malformed: %r" % (prior,))
        else:
            raise ConfigurationError("unknown DirichletMixing prior: %r"
                                     % (prior,))
        return prior

    def set_totalmass(self, totalmass):
        if not (np.isfinite(totalmass) and totalmass > 0):
            raise ConfigurationError("DirichletMixing total mass must be"
                                     " positive, got %r" % (totalmass,))
        self.totalmass = float(totalmass)
        self.logtotmass = np.log(self.totalmass)

    def get_id(self):
        return MixingId.DP

    def is_conditional(self):
        return False

    def initialize_state(self):
        self.set_totalmass(self.init_totalmass)

    def mass_existing_cluster(self, n, log, propto, hier):
        card = hier.get_card()
        if log:
            out = np.log(card) if card > 0 else -np.inf
            if not propto:
                out -= np.log(n + self.totalmass)
        else:
            out = float(card)
            if not propto:
                out /= n + self.totalmass
        return out

    def mass_new_cluster(self, n, log, propto, n_clust):
        if log:
            out = self.logtotmass
            if not propto:
                out -= np.log(n + self.totalmass)
        else:
            out = self.totalmass
            if not propto:
                out /= n + self.totalmass
        return out

    def update_state(self, unique_values, allocations):
        if self.prior is None:
            return
        n = len(allocations)
        k = count_clusters(unique_values)
        if isinstance(self.prior, GammaPrior):
            self.set_totalmass(self._escobar_west_draw(k, n))
        else:
            self.set_totalmass(self._grid_draw(k, n))

    def _escobar_west_draw(self, k, n):
        shape, rate = self.prior
        if n == 0:
            return self.random_source.gamma(shape, 1.0 / rate)
        eta = self.random_source.beta(self.totalmass + 1.0, n)
        new_rate = rate - np.log(eta)
        odds = (shape + k - 1.0) / (n * new_rate)
        weight = odds / (1.0 + odds)
        if self.random_source.uniform_draw() < weight:
            return self.random_source.gamma(shape + k, 1.0 / new_rate)
        else:
            return self.random_source.gamma(shape + k - 1.0, 1.0 / new_rate)

    def get_totalmass_grid(self):
        return 10.0 ** np.linspace(np.log10(self.prior.totalmass_min),
                                   np.log10(self.prior.totalmass_max),
                                   self.prior.grid_N)

    def _grid_draw(self, k, n):
        # Note: log gridding introduces (implicit) -log(x) prior
        grid = self.get_totalmass_grid()
        lnPdf = create_totalmass_lnPdf(k, n)
        logp_list = lnPdf(grid)
        return grid[self.random_source.categorical_log_draw(logp_list)]

    def get_state_proto(self):
        return DPState(self.totalmass, self.logtotmass)

    def set_state_from_proto(self, record):
        if isinstance(record, dict):
            record = DPState(**record)
        self.set_totalmass(record.totalmass)
