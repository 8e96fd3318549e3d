"""Model coefficient refinement using Levenberg-Marquardt."""

import logging

import numpy as np
from scipy.optimize import least_squares

from .model import SampleConsensusModel

logger = logging.getLogger(__name__)


class CoefficientOptimizer:
    """Refine model coefficients on their inliers with non-linear least squares."""

    def __init__(self, max_iters: int = 100):
        self.max_iters = max_iters

    def optimize(self, model: SampleConsensusModel, coefficients: np.ndarray,
                 inliers: np.ndarray) -> np.ndarray:
        """Optimize coefficients so the model best fits the inlier points."""
        coefficients = np.asarray(coefficients, dtype=np.float64)
        inliers = np.asarray(inliers, dtype=np.int64)

        def residuals(params):
            return model.residuals(params, inliers)

        # 'lm' needs at least as many residuals as parameters
        if len(residuals(coefficients)) < len(coefficients):
            logger.debug("Not enough inliers (%d) to refine %d coefficients",
                         len(inliers), len(coefficients))
            return coefficients

        result = least_squares(residuals, coefficients, method='lm', max_nfev=self.max_iters)
        refined = model.normalize_coefficients(result.x)
        if not model.is_model_valid(refined):
            logger.debug("Refined coefficients violate model constraints, keeping the originals")
            return coefficients
        return refined
