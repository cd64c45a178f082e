from collections import namedtuple
#
import numpy as np
#
from bnpmix.errors import ConfigurationError, InconsistencyError
from bnpmix.mixings.base_mixing import BaseMixing, MixingId


TruncSBState = namedtuple('TruncSBState', ['sticks', 'logweights'])


def sticks_to_logweights(sticks):
    sticks = np.asarray(sticks, dtype=float)
    with np.errstate(divide='ignore'):
        log_sticks = np.log(sticks)
        log_rest = np.log1p(-sticks)
    # w_k = v_k * prod_{l<k} (1 - v_l)
    cum_rest = np.concatenate([[0.0], np.cumsum(log_rest[:-1])])
    return log_sticks + cum_rest


class TruncatedSBMixing(BaseMixing):
    """Stick-breaking weights truncated at `num_components` sticks:

        v_k ~ Beta(a_k, b_k),  k < K,   v_K = 1
        w_k = v_k prod_{l<k} (1 - v_l)

    Given `totalmass` alone the sticks follow the Dirichlet process
    truncation Beta(1, M); explicit `a` / `b` vectors override it.
    """

    def __init__(self, random_source, num_components=20, totalmass=1.0,
                 a=None, b=None):
        BaseMixing.__init__(self, random_source)
        if int(num_components) < 1:
            raise ConfigurationError("TruncatedSBMixing needs at least one"
                                     " component, got %r" % num_components)
        self.num_components = int(num_components)
        if a is None and b is None:
            if not totalmass > 0:
                raise ConfigurationError("TruncatedSBMixing total mass must"
                                         " be positive, got %r" % totalmass)
            a = np.ones(self.num_components)
            b = np.repeat(float(totalmass), self.num_components)
        self.a = np.array(a, dtype=float)
        self.b = np.array(b, dtype=float)
        if self.a.shape != (self.num_components,) \
                or self.b.shape != (self.num_components,):
            raise ConfigurationError("TruncatedSBMixing stick parameters must"
                                     " have length %d" % self.num_components)
        if not (np.all(self.a > 0) and np.all(self.b > 0)):
            raise ConfigurationError("TruncatedSBMixing stick parameters must"
                                     " be positive")
        self.initialize_state()

    def get_id(self):
        return MixingId.TruncSB

    def is_conditional(self):
        return True

    def get_num_components(self):
        return self.num_components

    def initialize_state(self):
        self._draw_sticks(np.zeros(self.num_components))

    def _draw_sticks(self, counts):
        # number of data allocated past each stick
        tail_counts = np.concatenate([np.cumsum(counts[::-1])[::-1][1:], [0]])
        sticks = self.random_source.beta(self.a + counts, self.b + tail_counts)
        sticks = np.atleast_1d(np.array(sticks, dtype=float))
        sticks[-1] = 1.0
        self.sticks = sticks
        self.logweights = sticks_to_logweights(sticks)

    def update_state(self, unique_values, allocations):
        if len(unique_values) != self.num_components:
            raise InconsistencyError(
                "TruncatedSBMixing has %d components but got %d unique values"
                % (self.num_components, len(unique_values)))
        counts = np.bincount(np.asarray(allocations, dtype=int),
                             minlength=self.num_components)
        if len(counts) > self.num_components:
            raise InconsistencyError("TruncatedSBMixing got an allocation past"
                                     " the truncation level")
        self._draw_sticks(counts.astype(float))

    def get_weights(self, log=True, propto=False):
        # weights are normalised by construction; propto changes nothing
        if log:
            return self.logweights.copy()
        return np.exp(self.logweights)

    def get_state_proto(self):
        return TruncSBState(tuple(self.sticks.tolist()),
                            tuple(self.logweights.tolist()))

    def set_state_from_proto(self, record):
        if isinstance(record, dict):
            record = TruncSBState(**record)
        sticks = np.array(record.sticks, dtype=float)
        if sticks.shape != (self.num_components,):
            raise ConfigurationError("TruncSBState has %d sticks, mixing has"
                                     " %d components"
                                     % (len(sticks), self.num_components))
        self.sticks = sticks
        self.logweights = sticks_to_logweights(sticks)
