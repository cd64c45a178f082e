from collections import namedtuple


# One iteration of a chain.  cluster_allocs[i] indexes cluster_vals; the
# field order is fixed so that snapshots can be streamed to disk one by one.
MarginalState = namedtuple('MarginalState',
                           ['iteration_num', 'cluster_allocs', 'cluster_vals'])


def snapshot_to_dict(snapshot):
    return {
        "iteration_num": snapshot.iteration_num,
        "cluster_allocs": list(snapshot.cluster_allocs),
        "cluster_vals": [val._asdict() for val in snapshot.cluster_vals],
        }

def snapshot_from_dict(snapshot_dict, hierarchy):
    # the hierarchy decides how its own records are decoded
    cluster_vals = []
    for val_dict in snapshot_dict["cluster_vals"]:
        clone = hierarchy.clone()
        clone.set_state_from_proto(dict(val_dict))
        cluster_vals.append(clone.get_state_as_proto())
    return MarginalState(int(snapshot_dict["iteration_num"]),
                         tuple(int(z) for z in snapshot_dict["cluster_allocs"]),
                         tuple(cluster_vals))

def restore_hierarchies(hierarchy, snapshot, data=None, covariates=None):
    """Rebuild one hierarchy per cluster of `snapshot` from `hierarchy`'s
    prior.  With `data`, every datum is re-added to its cluster so the
    sufficient statistics match the snapshot's allocation too.
    """
    unique_values = []
    for val in snapshot.cluster_vals:
        clone = hierarchy.clone()
        clone.set_state_from_proto(val)
        unique_values.append(clone)
    if data is not None:
        for idx, c in enumerate(snapshot.cluster_allocs):
            covariate = None if covariates is None else covariates[idx]
            unique_values[c].add_datum(idx, data[idx], False, covariate)
    return unique_values
