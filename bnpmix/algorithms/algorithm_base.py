import abc
#
import numpy as np
#
import bnpmix.helper_functions as hf
import bnpmix.settings as settings
from bnpmix.chain_io import ChainCollector
from bnpmix.errors import ConfigurationError, InconsistencyError
from bnpmix.state import MarginalState


class AlgorithmBase(metaclass=abc.ABCMeta):
    """Inference state of one chain plus the cycle that updates it.

    The state is the allocation vector (`allocations[i]` is the index into
    `unique_values` of the cluster owning datum i) and the list of live
    cluster objects.  Only the algorithm touches either; one iteration is
    sample_allocations -> sample_unique_values -> sample_weights, each step
    finished before the next starts.

    `hierarchy` is a prototype: new clusters are clones of it.
    """

    name = "Base"

    def __init__(self, mixing, hierarchy, random_source,
                 init_num_clusters=None, verbose=False):
        self.mixing = mixing
        self.hierarchy = hierarchy
        self.random_source = random_source
        self.init_num_clusters = init_num_clusters
        self.verbose = verbose
        ##
        self.data = None
        self.covariates = None
        self.allocations = []
        self.unique_values = []
        self.iteration = 0
        self.initialized = False

    ##
    # the per-algorithm pieces

    @abc.abstractmethod
    def sample_allocations(self):
        pass

    @abc.abstractmethod
    def sample_unique_values(self):
        pass

    @abc.abstractmethod
    def sample_weights(self):
        pass

    @abc.abstractmethod
    def update_hierarchy_params(self):
        pass

    ##
    # setup

    def read_data(self, data, covariates=None):
        data = np.asarray(data, dtype=float)
        if data.ndim == 1:
            data = data[:, np.newaxis]
        if data.ndim != 2 or data.shape[0] == 0:
            raise ConfigurationError("data must be a non-empty 2-d array,"
                                     " got shape %s" % (data.shape,))
        self.hierarchy.check_data(data)
        if covariates is not None:
            covariates = np.asarray(covariates, dtype=float)
            if covariates.ndim == 1:
                covariates = covariates[:, np.newaxis]
            if covariates.shape[0] != data.shape[0]:
                raise ConfigurationError(
                    "covariates have %d rows but data has %d"
                    % (covariates.shape[0], data.shape[0]))
        self.data = data
        self.covariates = covariates
        self.initialized = False

    def get_covariate(self, idx):
        if self.covariates is None:
            return None
        return self.covariates[idx]

    def initialize(self, init_z=None):
        if self.data is None:
            raise ConfigurationError("%s: read_data must be called before"
                                     " initialize" % self.name)
        num_rows = len(self.data)
        if self.mixing.is_conditional():
            num_clusters = self.mixing.get_num_components()
        elif self.init_num_clusters is not None:
            num_clusters = int(self.init_num_clusters)
        else:
            num_clusters = min(num_rows, settings.algorithm.max_init_clusters)
        if num_clusters < 1:
            raise ConfigurationError("%s: need at least one initial cluster,"
                                     " got %d" % (self.name, num_clusters))
        labels = self._initial_labels(init_z, num_rows, num_clusters)
        if self.mixing.is_conditional():
            if max(labels) >= num_clusters:
                raise ConfigurationError(
                    "%s: init_z uses %d clusters but the mixing has %d"
                    " components" % (self.name, max(labels) + 1, num_clusters))
            num_unique = num_clusters
        else:
            # marginal samplers never hold empty clusters
            labels, _ = hf.canonicalize_list(labels)
            num_unique = max(labels) + 1
        ##
        self.unique_values = [self.hierarchy.clone()
                              for _ in range(num_unique)]
        self.allocations = [int(z) for z in labels]
        for idx, z in enumerate(self.allocations):
            self.unique_values[z].add_datum(
                idx, self.data[idx], self.update_hierarchy_params(),
                self.get_covariate(idx))
        for hier in self.unique_values:
            hier.sample_full_cond(update_params=True)
        self.mixing.initialize_state()
        if self.mixing.is_conditional():
            # first sweep uses weights drawn given the initial partition
            self.sample_weights()
        self.iteration = 0
        self.initialized = True
        self.check_state()
        if self.verbose:
            self.print_startup_message()

    def _initial_labels(self, init_z, num_rows, num_clusters):
        if init_z is None:
            # the first clusters each get one datum, the rest are uniform
            num_seeded = min(num_clusters, num_rows)
            labels = list(range(num_seeded))
            labels.extend(self.random_source.randint(
                0, num_clusters, num_rows - num_seeded).tolist())
            return labels
        elif isinstance(init_z, str) and init_z == "N": ##all apart
            return list(range(num_rows))
        elif isinstance(init_z, int) and init_z == 1: ##all in one cluster
            return [0] * num_rows
        elif isinstance(init_z, tuple) and init_z[0] == "balanced":
            if len(init_z) != 2 or int(init_z[1]) < 1:
                raise ConfigurationError("balanced init needs a positive"
                                         " cluster count: " + str(init_z))
            mod_val = num_rows // init_z[1]
            if mod_val == 0:
                raise ConfigurationError("num_rows smaller than requested"
                                         " number of balanced clusters")
            return [min(idx // mod_val, init_z[1] - 1)
                    for idx in range(num_rows)]
        elif isinstance(init_z, (list, np.ndarray)):
            labels = [int(z) for z in init_z]
            if len(labels) != num_rows or min(labels) < 0:
                raise ConfigurationError("init_z must hold %d non-negative"
                                         " labels" % num_rows)
            return labels
        else:
            raise ConfigurationError("invalid init_z: " + str(init_z))

    ##
    # running

    def step(self):
        if not self.initialized:
            raise ConfigurationError("%s: initialize must be called before"
                                     " sampling" % self.name)
        self.sample_allocations()
        self.sample_unique_values()
        self.sample_weights()
        self.iteration += 1

    def run(self, num_iters, burnin=0, collector=None):
        if collector is None:
            collector = ChainCollector()
        for _ in range(num_iters):
            self.step()
            if self.iteration > burnin:
                collector.collect(self.get_state_as_proto(self.iteration))
            if self.verbose:
                hf.printTS("finished iteration %d, %d clusters"
                           % (self.iteration, len(self.unique_values)))
        return collector

    ##
    # reading the state

    def get_state_as_proto(self, iteration_num=None):
        if iteration_num is None:
            iteration_num = self.iteration
        if iteration_num < 0:
            raise ValueError("iteration_num must be non-negative, got %r"
                             % iteration_num)
        cluster_vals = tuple(hier.get_state_as_proto()
                             for hier in self.unique_values)
        return MarginalState(int(iteration_num), tuple(self.allocations),
                             cluster_vals)

    def get_mixing_state(self):
        return self.mixing.get_state_proto()

    def get_allocations(self):
        return list(self.allocations)

    def get_unique_values(self):
        return tuple(self.unique_values)

    def get_cluster_counts(self):
        return [hier.get_card() for hier in self.unique_values]

    def check_state(self):
        if len(self.allocations) != len(self.data):
            raise InconsistencyError(
                "%s: %d allocations for %d data"
                % (self.name, len(self.allocations), len(self.data)))
        members = [set() for _ in self.unique_values]
        for idx, z in enumerate(self.allocations):
            if not 0 <= z < len(self.unique_values):
                raise InconsistencyError(
                    "%s: datum %d allocated to cluster %d, only %d exist"
                    % (self.name, idx, z, len(self.unique_values)))
            members[z].add(idx)
        for z, hier in enumerate(self.unique_values):
            if hier.get_cluster_data_idx() != members[z] \
                    or hier.get_card() != len(members[z]):
                raise InconsistencyError(
                    "%s: cluster %d membership disagrees with the allocations"
                    % (self.name, z))

    def extract_state_summary(self, true_zs=None):
        state_dict = {
            "iteration":self.iteration
            ,"num_clusters":sum(1 for hier in self.unique_values
                                if hier.get_card() > 0)
            ,"cluster_counts":self.get_cluster_counts()
            ,"mixing_state":self.get_mixing_state()
            ,"inf_seed":self.random_source.get_state()
            }
        if true_zs is not None:
            state_dict["ari"] = hf.calc_ari(true_zs, self.allocations)
        else:
            state_dict["ari"] = None
        return state_dict

    def print_startup_message(self):
        msg = "Running %s algorithm with %s hierarchies, %s mixing..." % (
            self.name, self.hierarchy.get_id().name,
            self.mixing.get_id().name)
        hf.printTS(msg)
