import abc
import enum


class MixingId(enum.Enum):
    DP = 1
    PY = 2
    TruncSB = 3


class BaseMixing(metaclass=abc.ABCMeta):
    """Prior over partitions.

    A conditional mixing exposes explicit component weights
    (`get_weights`); a marginal one integrates them out and only answers
    how much prior mass an existing or a new cluster gets for the next
    datum (`mass_existing_cluster` / `mass_new_cluster`).  `propto=True`
    drops factors shared by every candidate of the same comparison.
    """

    def __init__(self, random_source):
        self.random_source = random_source

    @abc.abstractmethod
    def get_id(self):
        pass

    @abc.abstractmethod
    def is_conditional(self):
        pass

    @abc.abstractmethod
    def initialize_state(self):
        pass

    @abc.abstractmethod
    def update_state(self, unique_values, allocations):
        pass

    @abc.abstractmethod
    def get_state_proto(self):
        pass

    @abc.abstractmethod
    def set_state_from_proto(self, record):
        pass

    # marginal mixings

    def mass_existing_cluster(self, n, log, propto, hier):
        raise NotImplementedError("%s is a conditional mixing and has no"
                                  " cluster masses" % type(self).__name__)

    def mass_new_cluster(self, n, log, propto, n_clust):
        raise NotImplementedError("%s is a conditional mixing and has no"
                                  " cluster masses" % type(self).__name__)

    # conditional mixings

    def get_weights(self, log=True, propto=False):
        raise NotImplementedError("%s is a marginal mixing and has no"
                                  " explicit weights" % type(self).__name__)

    def get_num_components(self):
        raise NotImplementedError("%s is a marginal mixing and has no fixed"
                                  " number of components" % type(self).__name__)


def count_clusters(unique_values):
    return sum(1 for hier in unique_values if hier.get_card() > 0)
