import copy
import datetime
#
import numpy as np
#
import bnpmix.helper_functions as hf
import bnpmix.settings as settings
from bnpmix.algorithms import BlockedGibbsAlgorithm
from bnpmix.chain_io import ChainCollector, FileCollector
from bnpmix.errors import ConfigurationError
from bnpmix.hierarchies import BetaBernoulliHierarchy, HierarchyId, \
    NNIGHierarchy
from bnpmix.mixings import DirichletMixing, GammaPrior, GridPrior, MixingId, \
    PitmanYorMixing, TruncatedSBMixing
from bnpmix.random_source import RandomSource

# a run is described by a plain dict:
# run_spec["hierarchy"] --- {"name": HierarchyId name, **hyperparameters}
# run_spec["mixing"] --- {"name": MixingId name, **parameters}
# run_spec["algorithm"] --- algorithm name
# run_spec["infer_seed"], ["num_iters"], ["burnin"], ["init_z"],
# run_spec["init_num_clusters"], ["chain_file"], ["verbose_state"]

ALGORITHMS = {
    BlockedGibbsAlgorithm.name: BlockedGibbsAlgorithm,
    }


def gen_default_run_spec(hierarchy_name="NNIG", mixing_name="DP",
                         num_cols=1):
    hierarchy_spec = {"name": hierarchy_name}
    if hierarchy_name == HierarchyId.NNIG.name:
        hierarchy_spec["mean"] = settings.hierarchy.mean
        hierarchy_spec["var_scaling"] = settings.hierarchy.var_scaling
        hierarchy_spec["shape"] = settings.hierarchy.shape
        hierarchy_spec["scale"] = settings.hierarchy.scale
    elif hierarchy_name == HierarchyId.BetaBernoulli.name:
        hierarchy_spec["betas"] = np.repeat(settings.hierarchy.beta_d,
                                            num_cols)
    #
    mixing_spec = {"name": mixing_name}
    if mixing_name == MixingId.DP.name:
        mixing_spec["totalmass"] = settings.mixing.totalmass
        mixing_spec["prior"] = None
    elif mixing_name == MixingId.PY.name:
        mixing_spec["strength"] = settings.mixing.totalmass
        mixing_spec["discount"] = settings.mixing.discount
    elif mixing_name == MixingId.TruncSB.name:
        mixing_spec["num_components"] = settings.mixing.num_components
        mixing_spec["totalmass"] = settings.mixing.totalmass
    #
    run_spec = {}
    run_spec["hierarchy"] = hierarchy_spec
    run_spec["mixing"] = mixing_spec
    run_spec["algorithm"] = BlockedGibbsAlgorithm.name
    run_spec["infer_seed"] = settings.seeds.infer_seed
    run_spec["num_iters"] = settings.algorithm.num_iters
    run_spec["burnin"] = settings.algorithm.burnin
    run_spec["init_z"] = None
    run_spec["init_num_clusters"] = settings.algorithm.init_num_clusters
    run_spec["chain_file"] = None
    run_spec["verbose_state"] = settings.algorithm.verbose
    return run_spec

def build_hierarchy(hierarchy_spec, random_source):
    kwargs = copy.deepcopy(hierarchy_spec)
    name = kwargs.pop("name", None)
    if name == HierarchyId.NNIG.name:
        return NNIGHierarchy(random_source, **kwargs)
    elif name == HierarchyId.BetaBernoulli.name:
        return BetaBernoulliHierarchy(random_source, **kwargs)
    raise ConfigurationError("unknown hierarchy: %r" % (name,))

def build_totalmass_prior(prior_spec):
    if prior_spec is None:
        return None
    kind, args = prior_spec[0], prior_spec[1:]
    if kind == "gamma":
        return GammaPrior(*args)
    elif kind == "grid":
        if len(args) == 0:
            args = (settings.mixing.totalmass_min,
                    settings.mixing.totalmass_max, settings.mixing.grid_N)
        return GridPrior(*args)
    raise ConfigurationError("unknown total mass prior: %r" % (prior_spec,))

def build_mixing(mixing_spec, random_source):
    kwargs = copy.deepcopy(mixing_spec)
    name = kwargs.pop("name", None)
    if name == MixingId.DP.name:
        kwargs["prior"] = build_totalmass_prior(kwargs.get("prior"))
        return DirichletMixing(random_source, **kwargs)
    elif name == MixingId.PY.name:
        return PitmanYorMixing(random_source, **kwargs)
    elif name == MixingId.TruncSB.name:
        return TruncatedSBMixing(random_source, **kwargs)
    raise ConfigurationError("unknown mixing: %r" % (name,))

def build_algorithm(run_spec, random_source=None):
    if random_source is None:
        random_source = RandomSource(run_spec["infer_seed"])
    algorithm_name = run_spec.get("algorithm", BlockedGibbsAlgorithm.name)
    if algorithm_name not in ALGORITHMS:
        raise ConfigurationError("unknown algorithm: %r" % (algorithm_name,))
    hierarchy = build_hierarchy(run_spec["hierarchy"], random_source)
    mixing = build_mixing(run_spec["mixing"], random_source)
    return ALGORITHMS[algorithm_name](
        mixing, hierarchy, random_source,
        init_num_clusters=run_spec.get("init_num_clusters"),
        verbose=run_spec.get("verbose_state", False))

def infer(run_spec, data, covariates=None, true_zs=None):
    verbose_state = run_spec.get("verbose_state", False)
    if verbose_state:
        hf.printTS("doing run: ")
        for (k, v) in run_spec.items():
            print("   " + str(k) + " ---- " + str(v))
    #
    init_start_ts = datetime.datetime.now()
    algorithm = build_algorithm(run_spec)
    algorithm.read_data(data, covariates)
    algorithm.initialize(init_z=run_spec.get("init_z"))
    init_delta_seconds = hf.delta_since(init_start_ts)
    #
    chain_file = run_spec.get("chain_file")
    collector = ChainCollector() if chain_file is None \
        else FileCollector(chain_file)
    summaries = [algorithm.extract_state_summary(true_zs=true_zs)]
    summaries[-1]["timing"] = {"init": init_delta_seconds}
    burnin = run_spec.get("burnin", 0)
    for i in range(run_spec["num_iters"]):
        start_dt = datetime.datetime.now()
        algorithm.run(1, burnin=burnin, collector=collector)
        next_summary = algorithm.extract_state_summary(true_zs=true_zs)
        next_summary["timing"] = {"iteration": hf.delta_since(start_dt)}
        summaries.append(next_summary)
        if verbose_state:
            hf.printTS("finished saving iteration " + str(i))
    return summaries, collector
