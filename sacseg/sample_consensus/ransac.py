"""RANSAC implementation for robust estimation."""

import logging
import math

import numpy as np

from .sac import SampleConsensus

logger = logging.getLogger(__name__)


class RandomSampleConsensus(SampleConsensus):
    """Classic RANSAC with an adaptive trial budget."""

    def compute_model(self, debug_verbosity_level: int = 0) -> bool:
        """Fit model using RANSAC.

        Samples are drawn uniformly from the whole index sequence. After each
        improvement the budget is re-derived from the inlier ratio ``w`` as
        ``log(1 - probability) / log(1 - w^m)``.
        """
        self.iterations = 0
        self._clear_result()
        self._check_threshold()

        n_best_inliers = -1
        k = 1.0
        m = self.model.get_sample_size()
        n_points = self.model.get_observation_count()
        log_probability = math.log(1.0 - self.probability)
        one_over_indices = 1.0 / n_points if n_points > 0 else 0.0

        skipped = 0
        max_skip = self.max_iterations * 10

        while self.iterations < k and skipped < max_skip:
            selection = self.model.get_samples(self.model.indices, self.rng)
            if len(selection) == 0:
                logger.error("[RandomSampleConsensus.compute_model] No samples could be selected!")
                break

            coefficients = self.model.compute_model_coefficients(selection)
            if coefficients is None:
                skipped += 1
                continue

            n_inliers = self.model.count_within_distance(coefficients, self.threshold)
            if n_inliers > n_best_inliers:
                n_best_inliers = n_inliers
                self.selection = selection
                self.coefficients = coefficients

                w = n_inliers * one_over_indices
                p_no_outliers = 1.0 - w ** m
                # Keep the log finite at both ends
                p_no_outliers = max(np.finfo(float).eps, p_no_outliers)
                p_no_outliers = min(1.0 - np.finfo(float).eps, p_no_outliers)
                k = log_probability / math.log(p_no_outliers)

            self.iterations += 1
            if debug_verbosity_level > 1:
                logger.debug("[RandomSampleConsensus.compute_model] Trial %d out of %f: %d inliers (best is: %d so far).",
                             self.iterations, k, n_inliers, n_best_inliers)
            if self.iterations > self.max_iterations:
                if debug_verbosity_level > 0:
                    logger.debug("[RandomSampleConsensus.compute_model] RANSAC reached the maximum number of trials.")
                break

        if debug_verbosity_level > 0:
            logger.debug("[RandomSampleConsensus.compute_model] Model: %d size, %d inliers.",
                         len(self.selection), max(n_best_inliers, 0))

        if len(self.selection) == 0:
            logger.error("[RandomSampleConsensus.compute_model] Unable to find a solution!")
            self._clear_result()
            return False

        self.inliers = self.model.select_within_distance(self.coefficients, self.threshold)
        return True
