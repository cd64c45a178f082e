from collections import namedtuple
#
import numpy as np
#
from bnpmix.errors import ConfigurationError
from bnpmix.hierarchies.base_hierarchy import BaseHierarchy, HierarchyId


BetaBernoulliHypers = namedtuple('BetaBernoulliHypers', ['heads', 'tails'])
BetaBernoulliState = namedtuple('BetaBernoulliState', ['thetas'])


class BetaBernoulliHierarchy(BaseHierarchy):
    """Binary vectors with independent Bernoulli columns, each column's
    theta_d under a symmetric Beta(beta_d, beta_d) prior.
    """

    def __init__(self, random_source, betas):
        betas = np.atleast_1d(np.array(betas, dtype=float))
        if not np.all(betas > 0):
            raise ConfigurationError("BetaBernoulliHierarchy betas must be"
                                     " positive, got %r" % betas)
        self.num_cols = len(betas)
        self.betas = betas
        hypers = BetaBernoulliHypers(betas.copy(), betas.copy())
        BaseHierarchy.__init__(self, random_source, hypers)

    def get_id(self):
        return HierarchyId.BetaBernoulli

    def check_data(self, data):
        if data.shape[1] != self.num_cols:
            raise ConfigurationError(
                "BetaBernoulliHierarchy has %d columns, data has %d"
                % (self.num_cols, data.shape[1]))
        if not np.all((data == 0) | (data == 1)):
            raise ConfigurationError(
                "BetaBernoulliHierarchy needs 0/1 data")

    def clear_summary_statistics(self):
        self.column_sums = np.zeros(self.num_cols)

    def update_summary_statistics(self, datum, add):
        if add:
            self.column_sums = self.column_sums + self._as_row(datum)
        else:
            self.column_sums = self.column_sums - self._as_row(datum)

    def compute_posterior_hypers(self):
        return BetaBernoulliHypers(self.betas + self.column_sums,
                                   self.betas + self.card - self.column_sums)

    def draw(self, hypers):
        thetas = self.random_source.beta(hypers.heads, hypers.tails)
        return BetaBernoulliState(tuple(float(theta) for theta in thetas))

    def _bernoulli_lpdf(self, datum, thetas):
        boolIdx = np.array(self._as_row(datum), dtype=bool)
        thetas = np.asarray(thetas)
        with np.errstate(divide='ignore'):
            heads = np.log(thetas[boolIdx]).sum()
            tails = np.log(1.0 - thetas[~boolIdx]).sum()
        return heads + tails

    def like_lpdf(self, datum, covariate=None):
        return self._bernoulli_lpdf(datum, self.state.thetas)

    def prior_pred_lpdf(self, datum, covariate=None):
        # symmetric prior: every column is a fair coin a priori
        return self.num_cols * np.log(.5)

    def conditional_pred_lpdf(self, datum, covariate=None):
        thetas = (self.column_sums + self.betas) / (self.card + 2 * self.betas)
        return self._bernoulli_lpdf(datum, thetas)

    def get_state_as_proto(self):
        return self.state

    def set_state_from_proto(self, record):
        if isinstance(record, dict):
            record = BetaBernoulliState(**record)
        thetas = tuple(float(theta) for theta in record.thetas)
        if len(thetas) != self.num_cols:
            raise ConfigurationError(
                "BetaBernoulliState has %d thetas, hierarchy has %d columns"
                % (len(thetas), self.num_cols))
        self.state = BetaBernoulliState(thetas)
