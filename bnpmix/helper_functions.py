import datetime
import sys
from collections import defaultdict
#
import numpy as np
from scipy.special import logsumexp


####################
# PROBABILITY FUNCTIONS

def log_conditional_to_norm_prob(logp_list):
    logp_arr = np.asarray(logp_list, dtype=float)
    maxv = logp_arr.max()
    scaled = logp_arr - maxv
    logZ = logsumexp(scaled)
    return np.exp(scaled - logZ)

####################
# UTILITY FUNCTIONS

def printTS(printStr):
    print(datetime.datetime.now().strftime("%H:%M:%S") + " :: " + printStr)
    sys.stdout.flush()

def delta_since(start_dt):
    return (datetime.datetime.now() - start_dt).total_seconds()

def canonicalize_list(in_list):
    # relabel in order of first appearance
    z_indices = []
    next_id = 0
    cluster_ids = {}
    for el in in_list:
        if el not in cluster_ids:
            cluster_ids[el] = next_id
            next_id += 1
        z_indices.append(cluster_ids[el])
    return z_indices, cluster_ids

####################
# ARI FUNCTIONS

def calc_ari(group_idx_list_1, group_idx_list_2):
    ##https://en.wikipedia.org/wiki/Rand_index#The_contingency_table
    if len(group_idx_list_1) != len(group_idx_list_2):
        raise ValueError("calc_ari: label lists differ in length: %d vs %d"
                         % (len(group_idx_list_1), len(group_idx_list_2)))
    Ns, As, Bs = gen_contingency_data(group_idx_list_1, group_idx_list_2)
    n_choose_2 = choose_2_sum(np.array([len(group_idx_list_1)]))
    cross_sums = choose_2_sum(Ns[Ns > 1])
    a_sums = choose_2_sum(As)
    b_sums = choose_2_sum(Bs)
    numerator = n_choose_2 * cross_sums - a_sums * b_sums
    denominator = .5 * n_choose_2 * (a_sums + b_sums) - a_sums * b_sums
    if denominator == 0:
        # both partitions trivial (all together or all apart)
        return 1.0
    return numerator / denominator

def choose_2_sum(x):
    return sum(x * (x - 1) / 2.0)

def gen_contingency_data(group_idx_list_1, group_idx_list_2):
    group_idx_dict_1 = defaultdict(set)
    for list_idx, group_idx in enumerate(group_idx_list_1):
        group_idx_dict_1[group_idx].add(list_idx)
    group_idx_dict_2 = defaultdict(set)
    for list_idx, group_idx in enumerate(group_idx_list_2):
        group_idx_dict_2[group_idx].add(list_idx)
    ##
    array_dim = (len(group_idx_dict_1), len(group_idx_dict_2))
    Ns = np.zeros(array_dim)
    for idx_1, value1 in enumerate(group_idx_dict_1.values()):
        for idx_2, value2 in enumerate(group_idx_dict_2.values()):
            Ns[idx_1, idx_2] = len(value1.intersection(value2))
    As = Ns.sum(axis=1)
    Bs = Ns.sum(axis=0)
    return Ns, As, Bs
