from collections import namedtuple
#
import numpy as np
import scipy.stats
#
from bnpmix.errors import ConfigurationError
from bnpmix.hierarchies.base_hierarchy import BaseHierarchy, HierarchyId


NNIGHypers = namedtuple('NNIGHypers', ['mean', 'var_scaling', 'shape', 'scale'])
NNIGState = namedtuple('NNIGState', ['mean', 'var'])


class NNIGHierarchy(BaseHierarchy):
    """Univariate normal likelihood with a conjugate normal-inverse-gamma
    prior:

        x_i | mu, sig2 ~ N(mu, sig2)
        mu | sig2     ~ N(mean, sig2 / var_scaling)
        sig2          ~ InvGamma(shape, scale)
    """

    def __init__(self, random_source, mean=0.0, var_scaling=0.1, shape=2.0,
                 scale=2.0):
        self._check_positive('var_scaling', var_scaling)
        self._check_positive('shape', shape)
        self._check_positive('scale', scale)
        hypers = NNIGHypers(float(mean), float(var_scaling), float(shape),
                            float(scale))
        BaseHierarchy.__init__(self, random_source, hypers)

    def get_id(self):
        return HierarchyId.NNIG

    def check_data(self, data):
        if data.shape[1] != 1:
            raise ConfigurationError(
                "NNIGHierarchy models univariate data, got %d columns"
                % data.shape[1])

    def clear_summary_statistics(self):
        self.data_sum = 0.0
        self.data_sum_squares = 0.0

    def update_summary_statistics(self, datum, add):
        x = self._as_row(datum)[0]
        if add:
            self.data_sum += x
            self.data_sum_squares += x * x
        else:
            self.data_sum -= x
            self.data_sum_squares -= x * x

    def compute_posterior_hypers(self):
        if self.card == 0:
            return self.hypers
        mean, var_scaling, shape, scale = self.hypers
        card = self.card
        y_bar = self.data_sum / card
        ss = self.data_sum_squares - card * y_bar * y_bar
        # round-off can leave a tiny negative residual
        ss = max(ss, 0.0)
        post_var_scaling = var_scaling + card
        post_mean = (var_scaling * mean + self.data_sum) / post_var_scaling
        post_shape = shape + 0.5 * card
        post_scale = scale + 0.5 * ss + \
            0.5 * var_scaling * card * (y_bar - mean) ** 2 / post_var_scaling
        return NNIGHypers(post_mean, post_var_scaling, post_shape, post_scale)

    def draw(self, hypers):
        mean, var_scaling, shape, scale = hypers
        var = 1.0 / self.random_source.gamma(shape, 1.0 / scale)
        mu = self.random_source.normal(mean, np.sqrt(var / var_scaling))
        return NNIGState(float(mu), float(var))

    def like_lpdf(self, datum, covariate=None):
        x = self._as_row(datum)[0]
        return scipy.stats.norm.logpdf(x, self.state.mean,
                                       np.sqrt(self.state.var))

    def _marg_lpdf(self, hypers, x):
        # student-t marginal of the normal-inverse-gamma
        mean, var_scaling, shape, scale = hypers
        scale_t = np.sqrt(scale * (var_scaling + 1) / (shape * var_scaling))
        return scipy.stats.t.logpdf(x, 2 * shape, mean, scale_t)

    def prior_pred_lpdf(self, datum, covariate=None):
        return self._marg_lpdf(self.hypers, self._as_row(datum)[0])

    def conditional_pred_lpdf(self, datum, covariate=None):
        return self._marg_lpdf(self.compute_posterior_hypers(),
                               self._as_row(datum)[0])

    def get_state_as_proto(self):
        return self.state

    def set_state_from_proto(self, record):
        if isinstance(record, dict):
            record = NNIGState(**record)
        if not record.var > 0:
            raise ConfigurationError("NNIGState variance must be positive,"
                                     " got %r" % (record.var,))
        self.state = NNIGState(float(record.mean), float(record.var))
