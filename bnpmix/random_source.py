import numpy as np
from numpy.random import RandomState
#
import bnpmix.helper_functions as hf
from bnpmix.errors import InvalidWeightsError


def generate_random_state(seed):
    if isinstance(seed, RandomState):
        return seed
    random_state = RandomState()
    if isinstance(seed, tuple):
        random_state.set_state(seed)
    elif isinstance(seed, (int, np.integer)):
        random_state.seed(int(seed))
    else:
        raise ValueError("Bad argument to generate_random_state: " + str(seed))
    return random_state


class RandomSource(object):
    """Per-chain source of randomness.

    Every component that needs a draw gets this object passed in explicitly;
    independent chains must each hold their own instance, seeded separately,
    so their draw sequences never interleave.
    """

    def __init__(self, seed=0):
        self.random_state = generate_random_state(seed)

    def uniform_draw(self):
        return self.random_state.uniform()

    def categorical_draw(self, weights, normalize=True):
        weights = np.asarray(weights, dtype=float)
        if weights.ndim != 1 or len(weights) == 0:
            raise InvalidWeightsError(
                "categorical_draw needs a non-empty 1-d weight vector, got"
                " shape %s" % (weights.shape,))
        if not np.all(np.isfinite(weights)):
            raise InvalidWeightsError(
                "categorical_draw got non-finite weights: %r" % weights)
        if np.any(weights < 0):
            raise InvalidWeightsError(
                "categorical_draw got negative weights: %r" % weights)
        total = weights.sum()
        if total <= 0:
            raise InvalidWeightsError(
                "categorical_draw got an all-zero weight vector")
        if not normalize:
            # caller claims the weights are already probabilities
            total = 1.0
        cumsum = np.cumsum(weights)
        randv = self.uniform_draw() * total
        draw = int(np.searchsorted(cumsum, randv, side='right'))
        # guard against round-off pushing randv past the last bin
        return min(draw, len(weights) - 1)

    def categorical_log_draw(self, log_weights):
        log_weights = np.asarray(log_weights, dtype=float)
        if len(log_weights) == 0 or np.any(np.isnan(log_weights)) \
                or np.any(log_weights == np.inf):
            raise InvalidWeightsError(
                "categorical_log_draw got invalid log weights: %r"
                % log_weights)
        maxv = log_weights.max()
        if maxv == -np.inf:
            raise InvalidWeightsError(
                "categorical_log_draw got only zero-probability entries")
        p_vec = hf.log_conditional_to_norm_prob(log_weights)
        return self.categorical_draw(p_vec, normalize=True)

    ##
    # distribution draws used by hierarchies and mixings

    def normal(self, loc=0.0, scale=1.0, size=None):
        return self.random_state.normal(loc, scale, size)

    def gamma(self, shape, scale=1.0, size=None):
        return self.random_state.gamma(shape, scale, size)

    def beta(self, a, b, size=None):
        return self.random_state.beta(a, b, size)

    def permutation(self, x):
        return self.random_state.permutation(x)

    def randint(self, low, high=None, size=None):
        return self.random_state.randint(low, high, size)

    ##
    # checkpointing

    def get_state(self):
        return self.random_state.get_state()

    def set_state(self, state):
        self.random_state.set_state(state)
