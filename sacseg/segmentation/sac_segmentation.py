"""Point cloud segmentation with sample consensus models."""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from sacseg.exceptions import ConfigurationError
from sacseg.sample_consensus.method_types import METHOD_TYPES, SAC_PROSAC, SAC_RANSAC
from sacseg.sample_consensus.model import SampleConsensusModel
from sacseg.sample_consensus.model_types import (
    MODEL_TYPES,
    SACMODEL_LINE,
    SACMODEL_NORMAL_PLANE,
    SACMODEL_PERPENDICULAR_PLANE,
    SACMODEL_PLANE,
    SACMODEL_SPHERE,
)
from sacseg.sample_consensus.models import (
    LineModel,
    NormalPlaneModel,
    PerpendicularPlaneModel,
    PlaneModel,
    SphereModel,
)
from sacseg.sample_consensus.optimizer import CoefficientOptimizer
from sacseg.sample_consensus.prosac import ProgressiveSampleConsensus
from sacseg.sample_consensus.ransac import RandomSampleConsensus
from sacseg.sample_consensus.sac import SampleConsensus

logger = logging.getLogger(__name__)


class SACSegmentation:
    """
    Segment the points supporting a geometric model.

    Wires user-facing parameters (model type, method type, radius limits,
    axis and angle constraints) into a model and an estimator, runs the
    estimation and optionally refines the coefficients on the inliers.
    For ``SAC_PROSAC`` the ``indices`` passed to ``segment`` must be sorted
    by descending quality.
    """

    def __init__(self, model_type: Optional[str] = None, method_type: str = SAC_RANSAC,
                 distance_threshold: Optional[float] = None, max_iterations: int = 50,
                 probability: float = 0.99, optimize_coefficients: bool = True,
                 radius_limits: Tuple[float, float] = (-np.inf, np.inf),
                 axis: Sequence[float] = (0.0, 0.0, 0.0), eps_angle: float = 0.0,
                 random_state: Union[int, np.random.Generator, None] = None,
                 max_trials: int = 200000, max_sample_checks: int = 1000):
        self.model_type = model_type
        self.method_type = method_type
        self.distance_threshold = distance_threshold
        self.max_iterations = max_iterations
        self.probability = probability
        self.optimize_coefficients = optimize_coefficients
        self.radius_min, self.radius_max = radius_limits
        self.axis = np.asarray(axis, dtype=np.float64)
        self.eps_angle = eps_angle
        self.random_state = random_state
        self.max_trials = max_trials
        self.max_sample_checks = max_sample_checks
        self.optimizer = CoefficientOptimizer()

        self.model: Optional[SampleConsensusModel] = None
        self.sac: Optional[SampleConsensus] = None

    @classmethod
    def _kwargs_from_config(cls, config: Dict[str, Any]) -> Dict[str, Any]:
        seg = config.get('segmentation', {})
        prosac = config.get('prosac', {})
        kwargs = {
            'model_type': seg.get('model_type'),
            'method_type': seg.get('method_type', SAC_RANSAC),
            'distance_threshold': seg.get('distance_threshold'),
            'max_iterations': seg.get('max_iterations', 50),
            'probability': seg.get('probability', 0.99),
            'optimize_coefficients': seg.get('optimize_coefficients', True),
            'radius_limits': (seg.get('radius_min', -np.inf), seg.get('radius_max', np.inf)),
            'axis': seg.get('axis', (0.0, 0.0, 0.0)),
            'eps_angle': seg.get('eps_angle', 0.0),
            'random_state': seg.get('random_state'),
        }
        if 'max_trials' in prosac:
            kwargs['max_trials'] = prosac['max_trials']
        if 'max_sample_checks' in prosac:
            kwargs['max_sample_checks'] = prosac['max_sample_checks']
        return kwargs

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SACSegmentation':
        """Build a segmenter from a config dict (see ``sacseg.config``)."""
        return cls(**cls._kwargs_from_config(config))

    def init_sac_model(self, points: np.ndarray, indices: Optional[np.ndarray]) -> SampleConsensusModel:
        """Create the model provider for ``model_type``."""
        if self.model_type == SACMODEL_PLANE:
            return PlaneModel(points, indices, self.max_sample_checks)
        if self.model_type == SACMODEL_LINE:
            return LineModel(points, indices, self.max_sample_checks)
        if self.model_type == SACMODEL_SPHERE:
            return SphereModel(points, indices, self.radius_min, self.radius_max,
                               self.max_sample_checks)
        if self.model_type == SACMODEL_PERPENDICULAR_PLANE:
            return PerpendicularPlaneModel(points, indices, self.axis, self.eps_angle,
                                           self.max_sample_checks)
        raise ConfigurationError(f"Unknown or unsupported model type: {self.model_type!r}")

    def init_sac(self, model: SampleConsensusModel) -> SampleConsensus:
        """Create the estimator for ``method_type``."""
        if self.method_type == SAC_RANSAC:
            return RandomSampleConsensus(model, self.distance_threshold, self.max_iterations,
                                         self.probability, self.random_state)
        if self.method_type == SAC_PROSAC:
            return ProgressiveSampleConsensus(model, self.distance_threshold, self.max_iterations,
                                              self.probability, self.random_state, self.max_trials)
        raise ConfigurationError(f"Unknown sample consensus method: {self.method_type!r}")

    def segment(self, points: np.ndarray,
                indices: Optional[np.ndarray] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Segment the points supporting the best model.

        Args:
            points: (N, 3) array of points
            indices: Ordered subset of point indices to consider (all by default)

        Returns:
            Tuple of (inlier indices, model coefficients); both empty on failure
        """
        empty = (np.array([], dtype=np.int64), np.array([]))

        if self.distance_threshold is None:
            raise ConfigurationError("Distance threshold must be set before segmenting")
        if self.model_type not in MODEL_TYPES:
            raise ConfigurationError(f"Unknown model type: {self.model_type!r}")
        if self.method_type not in METHOD_TYPES:
            raise ConfigurationError(f"Unknown sample consensus method: {self.method_type!r}")

        self.model = self.init_sac_model(points, indices)
        self.sac = self.init_sac(self.model)

        if not self.sac.compute_model():
            logger.error("[%s.segment] Error segmenting the model! No solution found.", type(self).__name__)
            return empty

        inliers = self.sac.get_inliers()
        coefficients = self.sac.get_model_coefficients()

        if self.optimize_coefficients:
            coefficients = self.optimizer.optimize(self.model, coefficients, inliers)

        logger.info("[%s.segment] Found %d inliers for %s model", type(self).__name__,
                    len(inliers), self.model_type)
        return inliers, coefficients


class SACSegmentationFromNormals(SACSegmentation):
    """Segmentation that also weighs the agreement of point normals."""

    def __init__(self, normals: Optional[np.ndarray] = None,
                 curvatures: Optional[np.ndarray] = None,
                 normal_distance_weight: float = 0.1, **kwargs):
        super().__init__(**kwargs)
        self.normals = normals
        self.curvatures = curvatures
        self.normal_distance_weight = normal_distance_weight

    @classmethod
    def from_config(cls, config: Dict[str, Any], normals: Optional[np.ndarray] = None,
                    curvatures: Optional[np.ndarray] = None) -> 'SACSegmentationFromNormals':
        seg = config.get('segmentation', {})
        return cls(normals=normals, curvatures=curvatures,
                   normal_distance_weight=seg.get('normal_distance_weight', 0.1),
                   **cls._kwargs_from_config(config))

    def init_sac_model(self, points: np.ndarray, indices: Optional[np.ndarray]) -> SampleConsensusModel:
        if self.model_type == SACMODEL_NORMAL_PLANE:
            if self.normals is None:
                raise ConfigurationError("Normals must be set for the normal_plane model")
            return NormalPlaneModel(points, self.normals, indices, self.normal_distance_weight,
                                    self.curvatures, self.max_sample_checks)
        return super().init_sac_model(points, indices)
