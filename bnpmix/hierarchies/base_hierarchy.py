import abc
import copy
import enum
#
import numpy as np
#
from bnpmix.errors import ConfigurationError, InconsistencyError


class HierarchyId(enum.Enum):
    NNIG = 1
    BetaBernoulli = 2


class BaseHierarchy(metaclass=abc.ABCMeta):
    """One cluster: its member bookkeeping, sufficient statistics,
    prior hyperparameters and current parameter values.

    Subclasses fill in the model-specific pieces: how a datum changes the
    sufficient statistics, how posterior hyperparameters follow from them,
    and how to draw and score parameters.  Everything that touches the
    membership itself lives here so that every variant fails the same way
    on an inconsistent add/remove.

    `update_params` on add/remove asks for the posterior hyperparameters to
    be kept current after every change; samplers that only need them at
    `sample_full_cond` time pass False and then `sample_full_cond(True)`.
    """

    def __init__(self, random_source, hypers):
        self.random_source = random_source
        self.hypers = hypers
        self.posterior_hypers = hypers
        self.card = 0
        self.cluster_data_idx = set()
        self.state = None
        self.clear_summary_statistics()

    ##
    # model-specific pieces

    @abc.abstractmethod
    def get_id(self):
        pass

    @abc.abstractmethod
    def like_lpdf(self, datum, covariate=None):
        pass

    @abc.abstractmethod
    def prior_pred_lpdf(self, datum, covariate=None):
        pass

    @abc.abstractmethod
    def conditional_pred_lpdf(self, datum, covariate=None):
        pass

    @abc.abstractmethod
    def clear_summary_statistics(self):
        pass

    @abc.abstractmethod
    def update_summary_statistics(self, datum, add):
        pass

    @abc.abstractmethod
    def compute_posterior_hypers(self):
        pass

    @abc.abstractmethod
    def draw(self, hypers):
        pass

    @abc.abstractmethod
    def get_state_as_proto(self):
        pass

    @abc.abstractmethod
    def set_state_from_proto(self, record):
        pass

    @abc.abstractmethod
    def check_data(self, data):
        pass

    ##
    # shared bookkeeping

    def get_card(self):
        return self.card

    def get_cluster_data_idx(self):
        return frozenset(self.cluster_data_idx)

    def is_empty(self):
        return self.card == 0

    def add_datum(self, idx, datum, update_params=False, covariate=None):
        if idx in self.cluster_data_idx:
            raise InconsistencyError(
                "%s.add_datum: datum %d is already in this cluster"
                % (type(self).__name__, idx))
        self.card += 1
        self.cluster_data_idx.add(idx)
        self.update_summary_statistics(datum, True)
        if update_params:
            self.save_posterior_hypers()

    def remove_datum(self, idx, datum, update_params=False, covariate=None):
        if idx not in self.cluster_data_idx:
            raise InconsistencyError(
                "%s.remove_datum: datum %d was never added to this cluster"
                % (type(self).__name__, idx))
        if self.card <= 0:
            raise InconsistencyError(
                "%s.remove_datum: cluster count would become negative"
                % type(self).__name__)
        self.card -= 1
        self.cluster_data_idx.remove(idx)
        self.update_summary_statistics(datum, False)
        if update_params:
            self.save_posterior_hypers()

    def save_posterior_hypers(self):
        self.posterior_hypers = self.compute_posterior_hypers()

    def sample_prior(self):
        self.state = self.draw(self.hypers)

    def sample_full_cond(self, update_params=False):
        if self.card == 0:
            self.sample_prior()
            return
        if update_params:
            self.save_posterior_hypers()
        self.state = self.draw(self.posterior_hypers)

    def clone(self):
        # fresh, empty cluster sharing the prior and the random source
        out = copy.copy(self)
        out.posterior_hypers = self.hypers
        out.card = 0
        out.cluster_data_idx = set()
        out.state = None
        out.clear_summary_statistics()
        return out

    @staticmethod
    def _as_row(datum):
        return np.atleast_1d(np.asarray(datum, dtype=float))

    @staticmethod
    def _check_positive(name, value):
        if not value > 0:
            raise ConfigurationError("hierarchy hyperparameter %r must be"
                                     " positive, got %r" % (name, value))
