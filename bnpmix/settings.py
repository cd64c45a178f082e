class seeds():
    infer_seed = 0

class mixing():
    # Dirichlet process
    totalmass = 1.0
    totalmass_min = .01
    totalmass_max = 1.E4
    grid_N = 100
    # Pitman-Yor
    discount = 0.1
    # truncated stick breaking
    num_components = 20

class hierarchy():
    # normal-normal-inverse-gamma
    mean = 0.0
    var_scaling = 0.1
    shape = 2.0
    scale = 2.0
    # beta-bernoulli
    beta_d = 1.0

class algorithm():
    num_iters = 1000
    burnin = 100
    # None means one cluster per datum, capped at max_init_clusters
    init_num_clusters = None
    max_init_clusters = 50
    verbose = False
