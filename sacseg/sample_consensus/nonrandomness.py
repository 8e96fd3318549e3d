"""Non-randomness re-estimation of the PROSAC stopping prefix."""

import logging
import math
from functools import lru_cache

import numpy as np
from scipy.stats import binom

from .sampler import RunContext

logger = logging.getLogger(__name__)

# Probability that an outlier-contaminated model is consistent with a point
BETA = 0.1
# Significance of the non-randomness test and failure probability of the run
PSI = 0.05
ETA0 = 0.05


@lru_cache(maxsize=None)
def minimum_inliers(n: int, m: int) -> int:
    """
    Smallest inlier count that is non-random among the first ``n`` points.

    An incorrect model supports each of the ``n - m`` other points with
    probability ``BETA``; the support must exceed the ``1 - PSI`` quantile of
    that binomial distribution.
    """
    # isf gives the smallest k with P(X > k) <= PSI
    return m + int(math.ceil(binom.isf(PSI, n, BETA)))


def trial_budget(epsilon: np.float32, m: int, T_N: np.float32) -> int:
    """Trials needed to draw an all-inlier sample with probability ``1 - ETA0``."""
    bottom_log = np.float32(1.0) - np.float32(epsilon) ** np.float32(m)
    if bottom_log == 0:
        k_n_star = 1
    elif bottom_log == 1:
        k_n_star = int(T_N)
    else:
        k_n_star = int(math.ceil(math.log(ETA0) / math.log(bottom_log)))
    # Very small budgets are implausible, keep a few trials
    return max(k_n_star, 2 * m)


class NonRandomnessEstimator:
    """Re-estimates ``n*`` and the trial budget after each improving trial."""

    def update(self, ctx: RunContext, inlier_ranks: np.ndarray) -> bool:
        """
        Search a prefix length with a better, non-random inlier ratio.

        Args:
            ctx: Run context, updated in place when a better prefix is found
            inlier_ranks: Positions of the current inliers in the index sequence

        Returns:
            True if ``n*`` and ``k_n*`` were updated
        """
        ranks = np.sort(np.asarray(inlier_ranks, dtype=np.int64))
        I_N = len(ranks)
        if I_N == 0 or ctx.N == 0:
            return False

        possible_n_star_best = ctx.N
        I_possible_n_star_best = I_N
        epsilon_possible_n_star_best = np.float32(I_N) / np.float32(ctx.N)

        # Only prefixes ending right at an inlier can maximise the ratio
        I_possible_n_star = I_N
        for last_inlier in ranks[::-1]:
            possible_n_star = int(last_inlier) + 1
            if possible_n_star <= ctx.m:
                break

            epsilon_possible_n_star = np.float32(I_possible_n_star) / np.float32(possible_n_star)
            if (epsilon_possible_n_star > ctx.epsilon_n_star and
                    epsilon_possible_n_star > epsilon_possible_n_star_best):
                # Shorter prefixes only get stricter
                if I_possible_n_star < minimum_inliers(possible_n_star, ctx.m):
                    break

                possible_n_star_best = possible_n_star
                I_possible_n_star_best = I_possible_n_star
                epsilon_possible_n_star_best = epsilon_possible_n_star

            I_possible_n_star -= 1

        if epsilon_possible_n_star_best <= ctx.epsilon_n_star:
            return False

        ctx.n_star = possible_n_star_best
        ctx.I_n_star = I_possible_n_star_best
        ctx.epsilon_n_star = np.float32(epsilon_possible_n_star_best)
        ctx.k_n_star = trial_budget(ctx.epsilon_n_star, ctx.m, ctx.T_N)

        logger.debug("New n* = %d with %d inliers (epsilon = %.4f), budget %d trials",
                     ctx.n_star, ctx.I_n_star, float(ctx.epsilon_n_star), ctx.k_n_star)
        return True
