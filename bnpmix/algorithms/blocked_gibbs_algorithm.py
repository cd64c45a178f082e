import numpy as np
#
from bnpmix.algorithms.algorithm_base import AlgorithmBase
from bnpmix.errors import InvalidWeightsError


class BlockedGibbsAlgorithm(AlgorithmBase):
    """Gibbs sweep over allocations, then cluster parameters, then the
    mixing.

    With a conditional mixing the number of components is the mixing's
    truncation level; components may go empty and then draw their
    parameters from the prior.  With a marginal mixing a datum is taken
    out of its cluster before its weights are computed, an emptied cluster
    is destroyed on the spot, and the datum may open a new one.
    """

    name = "BlockedGibbs"

    def update_hierarchy_params(self):
        return False

    def sample_allocations(self):
        if self.mixing.is_conditional():
            self._sample_allocations_conditional()
        else:
            self._sample_allocations_marginal()

    def _sample_allocations_conditional(self):
        logweights = self.mixing.get_weights(log=True, propto=True)
        for idx in range(len(self.data)):
            datum = self.data[idx]
            covariate = self.get_covariate(idx)
            log_probs = logweights + np.array(
                [hier.like_lpdf(datum, covariate)
                 for hier in self.unique_values])
            c_new = self._draw_allocation(idx, log_probs)
            c_old = self.allocations[idx]
            if c_new == c_old:
                continue
            self.unique_values[c_old].remove_datum(
                idx, datum, self.update_hierarchy_params(), covariate)
            self.unique_values[c_new].add_datum(
                idx, datum, self.update_hierarchy_params(), covariate)
            self.allocations[idx] = c_new

    def _sample_allocations_marginal(self):
        num_rest = len(self.data) - 1
        for idx in range(len(self.data)):
            datum = self.data[idx]
            covariate = self.get_covariate(idx)
            c_old = self.allocations[idx]
            old_hier = self.unique_values[c_old]
            old_hier.remove_datum(
                idx, datum, self.update_hierarchy_params(), covariate)
            emptied = old_hier.is_empty()
            # an emptied cluster is only dropped once the draw succeeded
            candidates = [j for j in range(len(self.unique_values))
                          if not (emptied and j == c_old)]
            n_clust = len(candidates)
            try:
                log_probs = np.zeros(n_clust + 1)
                for k, j in enumerate(candidates):
                    hier = self.unique_values[j]
                    log_probs[k] = self.mixing.mass_existing_cluster(
                        num_rest, True, True, hier) + \
                        hier.like_lpdf(datum, covariate)
                log_probs[n_clust] = self.mixing.mass_new_cluster(
                    num_rest, True, True, n_clust) + \
                    self.hierarchy.prior_pred_lpdf(datum, covariate)
                c_new = self._draw_allocation(idx, log_probs)
            except InvalidWeightsError:
                old_hier.add_datum(
                    idx, datum, self.update_hierarchy_params(), covariate)
                raise
            ##
            if emptied:
                self._remove_cluster(c_old)
            if c_new == n_clust:
                hier = self.hierarchy.clone()
                hier.add_datum(idx, datum, self.update_hierarchy_params(),
                               covariate)
                hier.sample_full_cond(update_params=True)
                self.unique_values.append(hier)
            else:
                self.unique_values[c_new].add_datum(
                    idx, datum, self.update_hierarchy_params(), covariate)
            self.allocations[idx] = c_new

    def _remove_cluster(self, c):
        del self.unique_values[c]
        self.allocations = [z - 1 if z > c else z for z in self.allocations]

    def _draw_allocation(self, idx, log_probs):
        try:
            return self.random_source.categorical_log_draw(log_probs)
        except InvalidWeightsError as e:
            raise InvalidWeightsError(
                "%s: allocation weights for datum %d are invalid (%s"
                " hierarchy, %s mixing): %s"
                % (self.name, idx, self.hierarchy.get_id().name,
                   self.mixing.get_id().name, e)) from e

    def sample_unique_values(self):
        for hier in self.unique_values:
            hier.sample_full_cond(not self.update_hierarchy_params())

    def sample_weights(self):
        self.mixing.update_state(self.unique_values, self.allocations)
