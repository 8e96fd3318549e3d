"""
Progressive sample consensus (PROSAC) estimator

Chum & Matas, "Matching with PROSAC - Progressive Sample Consensus",
CVPR 2005. Observations must be presented best-first: samples are drawn from
a prefix of the index sequence that grows as trials accumulate, so good
models are found early, and a non-randomness test on the inliers of each
improving model shortens the trial budget.
"""

import logging
from typing import Optional, Union

import numpy as np

from sacseg.exceptions import SamplingExhaustion
from .model import SampleConsensusModel
from .nonrandomness import NonRandomnessEstimator
from .sac import SampleConsensus
from .sampler import MAX_TRIALS, ProgressiveSampler, RunContext

logger = logging.getLogger(__name__)


class ProgressiveSampleConsensus(SampleConsensus):
    """PROSAC estimator over a quality-ordered index sequence."""

    def __init__(self, model: SampleConsensusModel, threshold: Optional[float] = None,
                 max_iterations: int = 1000, probability: float = 0.99,
                 random_state: Union[int, np.random.Generator, None] = None,
                 max_trials: int = MAX_TRIALS):
        super().__init__(model, threshold, max_iterations, probability, random_state)
        self.max_trials = max_trials
        self.sampler = ProgressiveSampler(model, self.rng)
        self.estimator = NonRandomnessEstimator()
        self.context: Optional[RunContext] = None

    def compute_model(self, debug_verbosity_level: int = 0) -> bool:
        """
        Run PROSAC until the adaptive budget or ``max_iterations`` is reached.

        Returns:
            True if a model was found; its sample, coefficients and inliers are
            then available through ``get_model``, ``get_model_coefficients``
            and ``get_inliers``

        Raises:
            ConfigurationError: no distance threshold was set
        """
        self.iterations = 0
        self.context = None
        self._clear_result()
        self._check_threshold()

        N = self.model.get_observation_count()
        m = self.model.get_sample_size()
        if N < m:
            logger.error("[ProgressiveSampleConsensus.compute_model] Need at least %d points, got %d!", m, N)
            return False

        ctx = RunContext.create(self.model.indices, m, self.max_trials)
        self.context = ctx

        while ctx.iterations < ctx.k_n_star:
            try:
                selection = self.sampler.advance_and_sample(ctx, ctx.iterations)
            except SamplingExhaustion as e:
                logger.error("[ProgressiveSampleConsensus.compute_model] %s!", e)
                self._clear_result()
                self.iterations = ctx.iterations
                return False

            if selection is None:
                break

            coefficients = self.model.compute_model_coefficients(selection)
            if coefficients is not None:
                inliers = self.model.select_within_distance(coefficients, self.threshold)
                I_N = len(inliers)

                if I_N > ctx.I_N_best:
                    ctx.I_N_best = I_N
                    self.inliers = inliers
                    self.selection = selection
                    self.coefficients = coefficients
                    self.estimator.update(ctx, self.model.rank_of(inliers))
            else:
                I_N = 0

            ctx.iterations += 1
            if debug_verbosity_level > 1:
                logger.debug("[ProgressiveSampleConsensus.compute_model] Trial %d out of %d: %d inliers (best is: %d so far).",
                             ctx.iterations, ctx.k_n_star, I_N, ctx.I_N_best)
            if ctx.iterations > self.max_iterations:
                if debug_verbosity_level > 0:
                    logger.debug("[ProgressiveSampleConsensus.compute_model] PROSAC reached the maximum number of trials.")
                break

        self.iterations = ctx.iterations
        if debug_verbosity_level > 0:
            logger.debug("[ProgressiveSampleConsensus.compute_model] Model: %d size, %d inliers.",
                         len(self.selection), ctx.I_N_best)

        if len(self.selection) == 0:
            self._clear_result()
            return False

        return True
